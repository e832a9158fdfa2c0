"""Domain model for customer aggregation."""

from __future__ import annotations

from .customer import SCALAR_FIELDS, CustomerAggregate, CustomerPatch, ScalarValue
from .enums import AuthEventType, Collection, SourceTag
from .snapshot import Row, Snapshot, SnapshotShapeError

__all__ = [
    "SCALAR_FIELDS",
    "AuthEventType",
    "Collection",
    "CustomerAggregate",
    "CustomerPatch",
    "Row",
    "ScalarValue",
    "Snapshot",
    "SnapshotShapeError",
    "SourceTag",
]
