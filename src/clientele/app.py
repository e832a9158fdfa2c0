"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from clientele.adapters.snapshot import HttpSnapshotFetcher
from clientele.domain.customers import AggregationOutcome, CustomerAggregationEngine
from clientele.domain.model import Collection

if TYPE_CHECKING:
    from clientele.domain.ports.fetching import SnapshotFetcher


log = getLogger(__name__)


def run_customer_aggregation(
    *,
    source: SnapshotFetcher | None = None,
    engine: CustomerAggregationEngine | None = None,
    include_anonymous: bool = False,
) -> AggregationOutcome:
    """Fetch a snapshot with the configured adapter and reconcile it into customers."""

    effective_source = source or HttpSnapshotFetcher()
    effective_engine = engine or CustomerAggregationEngine()
    log.info("Starting customer aggregation: include_anonymous=%s", include_anonymous)

    snapshot = effective_source(collections=tuple(Collection))
    outcome = effective_engine.aggregate(snapshot, include_anonymous=include_anonymous)

    log.info(
        f"Finished customer aggregation: identities={outcome.identities}, "
        f"returned={len(outcome.customers)}, hidden_anonymous={outcome.hidden}"
    )
    return outcome
