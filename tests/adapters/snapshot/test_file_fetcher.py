from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from clientele.adapters.snapshot import FileSnapshotFetcher
from clientele.domain.model import Collection, SnapshotShapeError

if TYPE_CHECKING:
    from pathlib import Path


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_loads_tables_envelope(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "snapshot.json",
        {"tables": [{"name": "ev_food_orders", "rows": [{"user_id": "u1"}]}]},
    )

    snapshot = FileSnapshotFetcher(path)()

    assert snapshot.rows(Collection.DELIVERY_ORDERS) == ({"user_id": "u1"},)


def test_loads_plain_mapping_and_filters_collections(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "snapshot.json",
        {"userProfiles": [{"id": "u1"}], "travelBookings": [{"user_id": "u2"}]},
    )

    snapshot = FileSnapshotFetcher(path)(collections=(Collection.BOOKINGS,))

    assert set(snapshot.collections) == {Collection.BOOKINGS}


def test_invalid_json_raises_shape_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SnapshotShapeError, match="not valid JSON"):
        FileSnapshotFetcher(path)()


def test_missing_file_propagates(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        FileSnapshotFetcher(tmp_path / "absent.json")()
