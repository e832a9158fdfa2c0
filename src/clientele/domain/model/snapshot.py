"""Snapshot of named record collections handed to the aggregation core.

The snapshot is the only input the core sees. It is produced by a fetch
collaborator (HTTP endpoint, exported file, test fixture) and validated here
once: a recognized collection must be a sequence of mappings. Anything else
means the collaborator is broken, so construction fails fast with
``SnapshotShapeError`` instead of coercing. The one exception is a ``null``
collection, which the admin endpoint sends for an empty table; it reads as no
rows.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from logging import getLogger
from typing import TypeAlias

from .enums import Collection

Row: TypeAlias = "Mapping[str, object]"

log = getLogger(__name__)


class SnapshotShapeError(ValueError):
    """Raised when a snapshot violates the collection/row shape contract."""


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Already-fetched rows, keyed by the collections the core understands.

    A collection given as ``None`` is stored as empty rather than rejected.
    """

    collections: Mapping[Collection, tuple[Row, ...]] = field(
        default_factory=dict["Collection", "tuple[Row, ...]"]
    )

    def rows(self, collection: Collection) -> tuple[Row, ...]:
        """Rows of ``collection``; a missing collection is empty."""

        return self.collections.get(collection, ())

    @classmethod
    def from_collections(cls, collections: Mapping[str, object]) -> Snapshot:
        """Build from ``{name: rows}``, where name is an alias or a table name."""

        resolved: dict[Collection, tuple[Row, ...]] = {}
        seen: dict[Collection, str] = {}
        for name, rows in collections.items():
            _add_collection(resolved, seen, name, rows)
        return cls(collections=resolved)

    @classmethod
    def from_tables(cls, tables: Iterable[object]) -> Snapshot:
        """Build from the admin envelope's ``tables`` list of ``{name, rows}`` entries."""

        resolved: dict[Collection, tuple[Row, ...]] = {}
        seen: dict[Collection, str] = {}
        for index, table in enumerate(tables):
            if not isinstance(table, Mapping):
                raise SnapshotShapeError(
                    f"Snapshot table #{index} must be a mapping, got {type(table).__name__}"
                )
            name = table.get("name")
            if not isinstance(name, str) or not name.strip():
                raise SnapshotShapeError(f"Snapshot table #{index} has no name")
            _add_collection(resolved, seen, name, table.get("rows"))
        return cls(collections=resolved)

    @classmethod
    def from_payload(cls, payload: object) -> Snapshot:
        """Accept either the ``{"tables": [...]}`` envelope or a plain name-to-rows mapping."""

        if not isinstance(payload, Mapping):
            raise SnapshotShapeError(
                f"Snapshot payload must be a mapping, got {type(payload).__name__}"
            )
        if "tables" in payload:
            tables = payload["tables"]
            if not _is_sequence(tables):
                raise SnapshotShapeError("Snapshot 'tables' must be a list of tables")
            return cls.from_tables(tables)  # type: ignore[arg-type]
        return cls.from_collections(payload)


def _add_collection(
    resolved: dict[Collection, tuple[Row, ...]],
    seen: dict[Collection, str],
    name: str,
    rows: object,
) -> None:
    collection = Collection.from_name(name)
    if collection is None:
        log.debug("Ignoring unrecognized snapshot collection %s", name)
        return
    if collection in seen:
        raise SnapshotShapeError(
            f"Collection {collection.value} supplied more than once "
            f"(as {seen[collection]!r} and {name!r})"
        )
    seen[collection] = name
    resolved[collection] = _coerce_rows(name, rows)


def _coerce_rows(name: str, rows: object) -> tuple[Row, ...]:
    if rows is None:
        return ()
    if not _is_sequence(rows):
        raise SnapshotShapeError(
            f"Collection {name!r} must be a sequence of rows, got {type(rows).__name__}"
        )
    coerced: list[Row] = []
    for index, row in enumerate(rows):  # type: ignore[arg-type]
        if not isinstance(row, Mapping):
            raise SnapshotShapeError(
                f"Collection {name!r} row #{index} must be a mapping, got {type(row).__name__}"
            )
        coerced.append(row)
    return tuple(coerced)


def _is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))
