"""Public interface for the snapshot adapters."""

from __future__ import annotations

from .client import HttpSnapshotFetcher, SnapshotFetchError
from .file import FileSnapshotFetcher
from .schema import CustomerPayload, SnapshotPayload, TablePayload

__all__ = [
    "CustomerPayload",
    "FileSnapshotFetcher",
    "HttpSnapshotFetcher",
    "SnapshotFetchError",
    "SnapshotPayload",
    "TablePayload",
]
