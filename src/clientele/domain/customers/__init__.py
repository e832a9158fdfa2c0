"""Customer reconciliation core.

Flow for one snapshot:
1) normalize each collection's rows into patches keyed by identity
2) reduce telemetry events into presence and auth facts per identity
3) fold all patches in fixed source order into aggregates
4) drop anonymous aggregates (optionally) and rank by recency

Nothing here performs I/O or keeps state between runs.
"""

from __future__ import annotations

from .engine import AggregationOutcome, CustomerAggregationEngine, aggregate_customers
from .events import AuthFact, EventReduction, PresenceFact, TelemetryEvent, reduce_events
from .identity import (
    UNKNOWN_IDENTITY,
    ContactKind,
    ContactPoints,
    derive_identity_key,
)
from .merge import SOURCE_ORDER, fold_patches, merge_patch
from .ranking import rank_customers

__all__ = [
    "SOURCE_ORDER",
    "UNKNOWN_IDENTITY",
    "AggregationOutcome",
    "AuthFact",
    "ContactKind",
    "ContactPoints",
    "CustomerAggregationEngine",
    "EventReduction",
    "PresenceFact",
    "TelemetryEvent",
    "aggregate_customers",
    "derive_identity_key",
    "fold_patches",
    "merge_patch",
    "rank_customers",
    "reduce_events",
]
