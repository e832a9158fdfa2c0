"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import SnapshotFetcher

__all__ = ["SnapshotFetcher"]
