"""Unit tests for decoded row streams."""

from __future__ import annotations

from contextlib import closing
import json
from pathlib import Path

import pytest

from core.errors import SchemaDiscoveryError, SnapshotIOError
from core.types import PlayerTableSchema
from decode.blob_decoder import decode_blob
from sync.row_stream import select_player_columns, stream_player_entries, stream_vehicle_entries
from sync.schema_discovery import discover_player_table
from sync.snapshot import open_snapshot
from tests.blob_fixtures import create_players_db, create_vehicles_db, player_blob, vehicle_blob


def test_stream_vehicle_entries_decodes_rows_in_order(tmp_path: Path) -> None:
    """Vehicle rows should decode into entries with type and part counts."""
    path = create_vehicles_db(
        tmp_path / "vehicles.db",
        [(1, 10.0, 20.0, vehicle_blob()), (2, None, None, None)],
    )

    with closing(open_snapshot(path)) as connection:
        entries = list(stream_vehicle_entries(connection, decode_blob))

    assert [entry.id for entry in entries] == [1, 2]
    assert entries[0].type == "Base.PickUpTruck"
    assert entries[0].part_count == 1
    assert json.loads(entries[0].raw_json) == list(vehicle_blob())
    assert entries[1].type == "Unknown"
    assert entries[1].part_count == 0
    assert entries[1].extracted_json == "{}"
    assert entries[1].raw_json == "[]"


def test_stream_vehicle_entries_raises_for_missing_table(tmp_path: Path) -> None:
    """A vehicles snapshot without the table should fail before streaming."""
    path = create_players_db(tmp_path / "players.db", [])

    with closing(open_snapshot(path)) as connection:
        with pytest.raises(SnapshotIOError):
            stream_vehicle_entries(connection, decode_blob)


def test_stream_player_entries_reads_optional_columns(tmp_path: Path) -> None:
    """Player entries should carry coordinates, trimmed username, and name."""
    path = create_players_db(
        tmp_path / "players.db",
        [{"id": 1, "data": player_blob(), "x": 5.0, "y": 6.0, "z": 0.0, "username": "  jane99 "}],
    )

    with closing(open_snapshot(path)) as connection:
        schema = discover_player_table(connection)
        entries = list(stream_player_entries(connection, schema, decode_blob))

    entry = entries[0]
    assert (entry.x, entry.y, entry.z) == (5.0, 6.0, 0.0)
    assert entry.username == "jane99"
    assert entry.name == "Jane"
    assert entry.profession == "base:burglar"


def test_stream_player_entries_handles_minimal_columns(tmp_path: Path) -> None:
    """Tables with only id and data should stream with defaults."""
    path = create_players_db(
        tmp_path / "players.db",
        [{"id": 9, "data": b"\x00\x00"}],
        table_name="localPlayers",
        columns=("id", "data"),
    )

    with closing(open_snapshot(path)) as connection:
        schema = discover_player_table(connection)
        entries = list(stream_player_entries(connection, schema, decode_blob))

    entry = entries[0]
    assert entry.name == "Player 9"
    assert (entry.x, entry.y, entry.z, entry.username, entry.profession) == (
        None,
        None,
        None,
        None,
        None,
    )


def test_stream_player_entries_raises_for_missing_table(tmp_path: Path) -> None:
    """Querying an absent player table should raise SchemaDiscoveryError."""
    path = create_vehicles_db(tmp_path / "vehicles.db", [])
    schema = PlayerTableSchema(table_name="networkPlayers", columns=("id", "data"))

    with closing(open_snapshot(path)) as connection:
        with pytest.raises(SchemaDiscoveryError):
            stream_player_entries(connection, schema, decode_blob)


def test_select_player_columns_keeps_known_optional_columns() -> None:
    """Only id, data, and recognized optional columns should be selected."""
    schema = PlayerTableSchema("networkPlayers", ("data", "extra", "id", "username", "x"))

    assert select_player_columns(schema) == ("id", "data", "x", "username")
