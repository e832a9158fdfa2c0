"""Snapshot fetcher reading an exported snapshot JSON file."""

from __future__ import annotations

import json
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from clientele.domain.model import Snapshot, SnapshotShapeError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from clientele.domain.model import Collection

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FileSnapshotFetcher:
    """Load a snapshot saved from the admin endpoint or written by hand.

    Both the ``{"tables": [...]}`` envelope and a plain ``{name: rows}`` mapping
    are accepted.
    """

    path: Path

    def __call__(self, *, collections: Sequence[Collection] | None = None) -> Snapshot:
        with self.path.open(encoding="utf-8") as handle:
            try:
                payload = json.load(handle)
            except json.JSONDecodeError as exc:
                raise SnapshotShapeError(f"{self.path} is not valid JSON: {exc}") from exc

        snapshot = Snapshot.from_payload(payload)
        if collections is not None:
            wanted = set(collections)
            snapshot = Snapshot(
                collections={
                    name: rows for name, rows in snapshot.collections.items() if name in wanted
                }
            )
        log.info("Loaded snapshot from %s: collections=%s", self.path, len(snapshot.collections))
        return snapshot
