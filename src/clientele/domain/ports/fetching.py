"""Ports for fetching record snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from clientele.domain.model import Collection, Snapshot


@runtime_checkable
class SnapshotFetcher(Protocol):
    """Callable port returning the current snapshot of record collections."""

    def __call__(self, *, collections: Sequence[Collection] | None = None) -> Snapshot: ...


__all__ = ["SnapshotFetcher"]
