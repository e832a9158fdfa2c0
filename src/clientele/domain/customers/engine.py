"""Orchestrator for customer aggregation.

The engine composes the stage callables but holds no state between runs:
every ``aggregate`` call starts from an empty mapping and returns a fresh
result. Patches for each source are collected first and only then folded in
the fixed source order, so how collection happens does not affect the output.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, TypeAlias

from clientele.domain.model import Collection, SourceTag

from .events import EventReduction, reduce_events
from .merge import fold_patches
from .normalizers import ROW_NORMALIZERS, SourceNormalizer, normalize_rows
from .ranking import rank_customers

if TYPE_CHECKING:
    from clientele.domain.model import CustomerAggregate, CustomerPatch, Row, Snapshot

EventReducer: TypeAlias = "Callable[[Iterable[Row]], EventReduction]"

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AggregationOutcome:
    """Ranked customers plus how many merged identities the filter hid."""

    customers: tuple[CustomerAggregate, ...]
    identities: int

    @property
    def hidden(self) -> int:
        return self.identities - len(self.customers)


@dataclass(slots=True)
class CustomerAggregationEngine:
    """Run normalization, event reduction, merge and ranking over one snapshot."""

    normalizers: Mapping[SourceTag, tuple[Collection, SourceNormalizer]] = field(
        default_factory=lambda: dict(ROW_NORMALIZERS)
    )
    reduce_events: EventReducer = reduce_events

    def collect_patches(self, snapshot: Snapshot) -> dict[SourceTag, tuple[CustomerPatch, ...]]:
        patches: dict[SourceTag, tuple[CustomerPatch, ...]] = {}
        for source, (collection, normalizer) in self.normalizers.items():
            patches[source] = normalize_rows(snapshot.rows(collection), normalizer)
        reduction = self.reduce_events(snapshot.rows(Collection.TELEMETRY_EVENTS))
        patches[SourceTag.TELEMETRY] = reduction.to_patches()
        return patches

    def merge(self, snapshot: Snapshot) -> dict[str, CustomerAggregate]:
        return fold_patches(self.collect_patches(snapshot))

    def aggregate(
        self,
        snapshot: Snapshot,
        *,
        include_anonymous: bool = False,
    ) -> AggregationOutcome:
        merged = self.merge(snapshot)
        customers = rank_customers(merged.values(), include_anonymous=include_anonymous)
        outcome = AggregationOutcome(customers=tuple(customers), identities=len(merged))
        log.debug(
            "Aggregated identities=%s returned=%s hidden=%s",
            outcome.identities,
            len(outcome.customers),
            outcome.hidden,
        )
        return outcome


def aggregate_customers(
    snapshot: Snapshot,
    *,
    include_anonymous: bool = False,
) -> list[CustomerAggregate]:
    """Reconcile ``snapshot`` into ranked customer aggregates with the default stages."""

    outcome = CustomerAggregationEngine().aggregate(snapshot, include_anonymous=include_anonymous)
    return list(outcome.customers)
