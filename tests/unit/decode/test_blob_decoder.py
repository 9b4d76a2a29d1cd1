"""Unit tests for the blob decoder."""

from __future__ import annotations

import struct

import pytest

from core.types import PlayerFields, VehicleFields
from decode import blob_decoder
from decode.blob_decoder import decode_blob
from store.record_payload import fields_to_payload
from tests.blob_fixtures import player_blob, vehicle_blob


def test_decode_blob_returns_empty_extraction_for_empty_input() -> None:
    """Empty and missing blobs should decode to empty fields and no bytes."""
    for data in (b"", None):
        result = decode_blob(data, "player")

        assert result.fields == PlayerFields()
        assert result.raw_bytes == b""
        assert fields_to_payload(result.fields) == {}


def test_decode_blob_reads_player_fields() -> None:
    """Player blobs should yield names, profession, and skill levels."""
    result = decode_blob(player_blob(name="Jane", strength_level=4), "player")
    fields = result.fields

    assert isinstance(fields, PlayerFields)
    assert fields.character_names is not None and fields.character_names[0] == "Jane"
    assert fields.profession_ids == ("base:burglar",)
    assert fields.stat_names == ("Strength",)
    assert fields.skill_levels == {"Strength": 4}
    assert fields.player_level == 4
    assert fields.error is None


def test_decode_blob_backfills_stat_names_from_vocabulary_scan() -> None:
    """Skills found by the fallback vocabulary should populate stat names."""
    data = b"\x01xxFitness\x00" + struct.pack(">I", 6)

    fields = decode_blob(data, "player").fields

    assert isinstance(fields, PlayerFields)
    assert fields.skill_levels == {"Fitness": 6}
    assert fields.stat_names == ("Fitness",)


def test_decode_blob_reads_vehicle_fields() -> None:
    """Vehicle blobs should yield the type id, parts, and custom names."""
    fields = decode_blob(vehicle_blob(), "vehicle").fields

    assert isinstance(fields, VehicleFields)
    assert fields.vehicle_type == "Base.PickUpTruck"
    assert fields.part_names == ("Engine",)
    assert fields.custom_names is not None and "My Truck" in fields.custom_names


def test_decode_blob_is_deterministic_and_keeps_raw_bytes() -> None:
    """Decoding the same bytes twice should give equal results and a verbatim copy."""
    data = bytes(range(256)) + player_blob()

    first = decode_blob(data, "player")
    second = decode_blob(bytearray(data), "player")

    assert first == second
    assert first.raw_bytes == data
    assert len(first.raw_bytes) == len(data)


def test_decode_blob_reports_levels_within_bounds() -> None:
    """Every reported skill level should lie in [0, 10]."""
    data = player_blob(strength_level=10) + b"Fitness\x00" + struct.pack(">I", 11)

    fields = decode_blob(data, "player").fields

    assert isinstance(fields, PlayerFields)
    assert fields.skill_levels is not None
    assert all(0 <= level <= 10 for level in fields.skill_levels.values())


def test_decode_blob_contains_stage_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    """A failing stage should set the error field without losing other fields."""

    def _raise_xp_failure(buffer: bytes, names: object) -> dict[str, tuple[float, ...]]:
        raise RuntimeError("boom")

    monkeypatch.setattr(blob_decoder, "scan_skill_xp", _raise_xp_failure)

    fields = decode_blob(player_blob(), "player").fields

    assert isinstance(fields, PlayerFields)
    assert fields.error == "skill_xp: boom"
    assert fields.skill_levels == {"Strength": 4}
    assert fields_to_payload(fields)["_error"] == "skill_xp: boom"


def test_decode_blob_reports_non_blob_cells_without_raising() -> None:
    """REAL and INTEGER cells should decode to empty fields with an error."""
    real_result = decode_blob(2.5, "vehicle")
    integer_result = decode_blob(4, "player")

    assert real_result.fields == VehicleFields(error="input: unsupported blob type float")
    assert real_result.raw_bytes == b""
    assert integer_result.fields == PlayerFields(error="input: unsupported blob type int")
    assert integer_result.raw_bytes == b""


def test_decode_blob_reports_out_of_range_byte_sequences() -> None:
    """Integer sequences that are not byte values should set the error field."""
    result = decode_blob([1, 300], "vehicle")

    assert result.fields == VehicleFields(error="input: unsupported blob type list")
    assert result.raw_bytes == b""
