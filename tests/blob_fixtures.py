"""Shared builders for synthetic save blobs and source databases."""

from __future__ import annotations

from contextlib import closing
from pathlib import Path
import sqlite3
import struct
from typing import Iterable, Mapping, Sequence

from core.config import CacheConfig

PLAYER_COLUMNS = ("id", "data", "x", "y", "z", "username")


def length_prefixed(text: str) -> bytes:
    """Encode text with a 2-byte big-endian length prefix.

    Args:
        text: Text to encode.

    Returns:
        Prefixed UTF-8 bytes.
    """
    encoded = text.encode("utf-8")
    return len(encoded).to_bytes(2, "big") + encoded


def skill_level_bytes(name: str, level: int) -> bytes:
    """Encode a skill name followed by a zero byte and a 4-byte level."""
    return name.encode("utf-8") + b"\x00" + struct.pack(">I", level)


def vehicle_blob(vehicle_type: str = "Base.PickUpTruck", custom_name: str = "My Truck") -> bytes:
    """Build a vehicle blob with a type id, one part, and a custom name."""
    return length_prefixed(vehicle_type) + length_prefixed("Engine") + length_prefixed(custom_name)


def player_blob(
    name: str = "Jane",
    profession: str = "base:burglar",
    strength_level: int = 4,
) -> bytes:
    """Build a player blob with a name, profession, and Strength level."""
    return (
        length_prefixed(name)
        + length_prefixed(profession)
        + length_prefixed("Strength")
        + b"\x00"
        + struct.pack(">I", strength_level)
    )


def create_vehicles_db(
    path: Path,
    rows: Iterable[tuple[int, float | None, float | None, bytes | None]],
) -> Path:
    """Create a source vehicles database.

    Args:
        path: Database file to create.
        rows: ``(id, x, y, data)`` tuples.

    Returns:
        The database path.
    """
    with closing(sqlite3.connect(path)) as connection, connection:
        connection.execute(
            "CREATE TABLE vehicles (id INTEGER PRIMARY KEY, x REAL, y REAL, data BLOB)"
        )
        connection.executemany("INSERT INTO vehicles (id, x, y, data) VALUES (?, ?, ?, ?)", rows)
    return path


def create_players_db(
    path: Path,
    rows: Iterable[Mapping[str, object]],
    table_name: str = "networkPlayers",
    columns: Sequence[str] = PLAYER_COLUMNS,
) -> Path:
    """Create a source players database.

    Args:
        path: Database file to create.
        rows: Column-name keyed rows.
        table_name: Player table name.
        columns: Table columns; ``id`` and ``data`` are always present.

    Returns:
        The database path.
    """
    column_types = {"id": "INTEGER PRIMARY KEY", "data": "BLOB", "username": "TEXT"}
    column_sql = ", ".join(f"{column} {column_types.get(column, 'REAL')}" for column in columns)
    placeholders = ", ".join("?" for _ in columns)
    with closing(sqlite3.connect(path)) as connection, connection:
        connection.execute(f"CREATE TABLE {table_name} ({column_sql})")
        connection.executemany(
            f"INSERT INTO {table_name} ({', '.join(columns)}) VALUES ({placeholders})",
            [tuple(row.get(column) for column in columns) for row in rows],
        )
    return path


def build_config(root: Path) -> CacheConfig:
    """Build a config whose cache and save folder live under ``root``."""
    save_folder = root / "save"
    save_folder.mkdir(parents=True, exist_ok=True)
    return CacheConfig(
        cache_root=root / "cache",
        cache_db_path=root / "cache" / "cache.db",
        snapshot_root=root / "cache" / "snapshots",
        save_folder=save_folder,
        vehicles_db_path=save_folder / "vehicles.db",
        players_db_path=save_folder / "players.db",
    )
