"""Anonymity filtering and recency ordering of merged aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .values import EPOCH, parse_timestamp

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from clientele.domain.model import CustomerAggregate


def recency(aggregate: CustomerAggregate) -> datetime:
    """Last-seen time, else updated time, else the epoch."""

    return (
        parse_timestamp(aggregate.last_seen_at)
        or parse_timestamp(aggregate.updated_at)
        or EPOCH
    )


def rank_customers(
    aggregates: Iterable[CustomerAggregate],
    *,
    include_anonymous: bool = False,
) -> list[CustomerAggregate]:
    """Most recent first; equally recent aggregates keep their input order."""

    kept = [
        aggregate
        for aggregate in aggregates
        if include_anonymous or not aggregate.is_anonymous
    ]
    return sorted(kept, key=recency, reverse=True)
