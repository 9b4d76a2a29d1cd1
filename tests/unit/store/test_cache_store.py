"""Unit tests for the SQLite cache store."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterator

import pytest

from core.errors import CachePersistError, SnapshotIOError
from core.types import PlayerCacheEntry, VehicleCacheEntry
from store.cache_store import CacheStore, round_coordinate
from tests.blob_fixtures import build_config


def _vehicle(vehicle_id: int, x: float | None = 10.5, vehicle_type: str = "Base.Van") -> VehicleCacheEntry:
    return VehicleCacheEntry(
        id=vehicle_id,
        x=x,
        y=-0.5,
        type=vehicle_type,
        part_count=2,
        extracted_json=json.dumps({"vehicleType": vehicle_type, "partNames": ["Engine", "Door"]}),
        raw_json="[1, 2, 3]",
    )


def _player(player_id: int) -> PlayerCacheEntry:
    extracted = {
        "characterNames": ["Jane"],
        "traitIds": ["base:thinskinned"],
        "statNames": ["Strength"],
        "recipeIds": ["MakeCoffee"],
        "skillLevels": {"Strength": 4},
    }
    return PlayerCacheEntry(
        id=player_id,
        x=100.4,
        y=200.6,
        z=1.0,
        name="Jane",
        username="jane99",
        profession="base:burglar",
        extracted_json=json.dumps(extracted),
        raw_json="[0, 4]",
    )


def _store(tmp_path: Path) -> CacheStore:
    return CacheStore(build_config(tmp_path))


def test_replace_vehicles_lists_rounded_summaries_by_id(tmp_path: Path) -> None:
    """Vehicle summaries should be ordered by id with half-up rounded coordinates."""
    store = _store(tmp_path)

    written = store.replace_vehicles([_vehicle(2), _vehicle(1, x=None)])
    summaries = store.list_vehicles()

    assert written == 2
    assert [summary.id for summary in summaries] == [1, 2]
    assert summaries[0].x is None
    assert summaries[1].x == 11
    assert summaries[1].y == 0
    assert summaries[1].type == "Base.Van"
    assert summaries[1].part_count == 2


def test_get_vehicle_returns_extraction_and_raw_bytes(tmp_path: Path) -> None:
    """Vehicle detail should decode persisted JSON back to payload and bytes."""
    store = _store(tmp_path)
    store.replace_vehicles([_vehicle(7)])

    detail = store.get_vehicle(7)

    assert detail is not None
    assert detail.extracted["partNames"] == ["Engine", "Door"]
    assert detail.raw == b"\x01\x02\x03"
    assert store.get_vehicle(8) is None


def test_get_vehicle_tolerates_malformed_json(tmp_path: Path) -> None:
    """Malformed persisted JSON should read back as empty payloads."""
    store = _store(tmp_path)
    broken = VehicleCacheEntry(1, 0.0, 0.0, "Unknown", 0, "{not json", "[1, 2")
    store.replace_vehicles([broken])

    detail = store.get_vehicle(1)

    assert detail is not None
    assert detail.extracted == {}
    assert detail.raw == b""


def test_replace_vehicles_drops_previous_generation(tmp_path: Path) -> None:
    """A replace should leave exactly the new generation's rows."""
    store = _store(tmp_path)
    store.replace_vehicles([_vehicle(1), _vehicle(2)])

    store.replace_vehicles([_vehicle(3)])

    assert [summary.id for summary in store.list_vehicles()] == [3]


def test_replace_vehicles_keeps_previous_generation_on_stream_failure(tmp_path: Path) -> None:
    """An error while producing entries should roll the replace back."""
    store = _store(tmp_path)
    store.replace_vehicles([_vehicle(1)])

    def _failing_entries() -> Iterator[VehicleCacheEntry]:
        yield _vehicle(2)
        raise SnapshotIOError("snapshot read failed")

    with pytest.raises(SnapshotIOError):
        store.replace_vehicles(_failing_entries())

    assert [summary.id for summary in store.list_vehicles()] == [1]


def test_replace_vehicles_raises_persist_error_and_keeps_rows(tmp_path: Path) -> None:
    """A failing insert should raise CachePersistError and keep old rows."""
    store = _store(tmp_path)
    store.replace_vehicles([_vehicle(1)])

    with pytest.raises(CachePersistError):
        store.replace_vehicles([_vehicle(5), _vehicle(5)])

    assert [summary.id for summary in store.list_vehicles()] == [1]


def test_list_players_reads_summary_subset(tmp_path: Path) -> None:
    """Player summaries should expose list-view fields from the extraction."""
    store = _store(tmp_path)
    store.replace_players([_player(1)])

    summary = store.list_players()[0]

    assert summary.name == "Jane"
    assert summary.username == "jane99"
    assert summary.profession == "base:burglar"
    assert (summary.x, summary.y, summary.z) == (100, 201, 1.0)
    assert summary.traits == ("base:thinskinned",)
    assert summary.recipe_ids == ("MakeCoffee",)
    assert summary.stat_names == ("Strength",)
    assert summary.appearance == ()


def test_get_player_returns_full_extraction(tmp_path: Path) -> None:
    """Player detail should carry the full extraction and raw bytes."""
    store = _store(tmp_path)
    store.replace_players([_player(3)])

    detail = store.get_player(3)

    assert detail is not None
    assert detail.extracted["skillLevels"] == {"Strength": 4}
    assert detail.raw == b"\x00\x04"
    assert store.get_player(4) is None


def test_clear_removes_all_rows(tmp_path: Path) -> None:
    """Clearing should empty both cached tables."""
    store = _store(tmp_path)
    store.replace_vehicles([_vehicle(1)])
    store.replace_players([_player(1)])

    store.clear()

    assert store.list_vehicles() == []
    assert store.list_players() == []


def test_round_coordinate_rounds_half_up() -> None:
    """Coordinates should round half toward positive infinity."""
    assert round_coordinate(2.5) == 3
    assert round_coordinate(-2.5) == -2
    assert round_coordinate(None) is None
