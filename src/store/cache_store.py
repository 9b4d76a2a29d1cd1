"""SQLite cache of decoded vehicle and player rows.

This module owns the cache database schema, the two bulk-replace
writers used by the sync pipeline, and the summary and detail reads.
Each replace clears and repopulates one table inside one transaction,
so readers keep seeing the previous generation until the commit and a
failed replace leaves the previous generation in place.
"""

from __future__ import annotations

from contextlib import closing
import math
import sqlite3
from typing import Iterable

from core.config import CacheConfig
from core.constants import PLAYER_NAME_FALLBACK_TEMPLATE, UNKNOWN_VEHICLE_TYPE
from core.errors import CachePersistError
from core.logging_config import get_logger
from core.types import (
    PlayerCacheEntry,
    PlayerDetail,
    PlayerSummary,
    VehicleCacheEntry,
    VehicleDetail,
    VehicleSummary,
)
from store.record_payload import parse_extracted_json, parse_raw_json, string_list

_LOGGER = get_logger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS cache_vehicles (
    id INTEGER PRIMARY KEY,
    x REAL,
    y REAL,
    type TEXT,
    part_count INTEGER,
    extracted_json TEXT,
    raw_json TEXT
);
CREATE TABLE IF NOT EXISTS cache_players (
    id INTEGER PRIMARY KEY,
    x REAL,
    y REAL,
    z REAL,
    name TEXT,
    username TEXT,
    profession TEXT,
    extracted_json TEXT,
    raw_json TEXT
);
"""

_INSERT_VEHICLE_SQL = (
    "INSERT INTO cache_vehicles (id, x, y, type, part_count, extracted_json, raw_json) "
    "VALUES (?, ?, ?, ?, ?, ?, ?)"
)
_INSERT_PLAYER_SQL = (
    "INSERT INTO cache_players "
    "(id, x, y, z, name, username, profession, extracted_json, raw_json) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)"
)


class CacheStore:
    """Persisted mirror of decoded save rows.

    The sync pipeline is the only writer; everything else reads.
    """

    def __init__(self, config: CacheConfig) -> None:
        """Initialize the store from config.

        Args:
            config: Runtime configuration.
        """
        self._db_path = config.cache_db_path
        self._ready = False

    def initialize(self) -> None:
        """Create the cache directory and tables if missing.

        Raises:
            CachePersistError: If the database cannot be created.
        """
        if self._ready:
            return
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            with closing(sqlite3.connect(self._db_path)) as connection:
                connection.executescript(SCHEMA_SQL)
        except (OSError, sqlite3.Error) as error:
            raise CachePersistError(
                f"Failed to initialize cache database at {self._db_path}: {error}. "
                "Check that the cache root is writable."
            ) from error
        self._ready = True

    def replace_vehicles(self, entries: Iterable[VehicleCacheEntry]) -> int:
        """Replace all cached vehicles with a new generation.

        Args:
            entries: Decoded entries, consumed lazily inside the transaction.

        Returns:
            Number of rows written.

        Raises:
            CachePersistError: If the cache write fails; the previous
                generation is kept.
        """
        rows = (
            (
                entry.id,
                entry.x,
                entry.y,
                entry.type,
                entry.part_count,
                entry.extracted_json,
                entry.raw_json,
            )
            for entry in entries
        )
        return self._replace_table("cache_vehicles", _INSERT_VEHICLE_SQL, rows)

    def replace_players(self, entries: Iterable[PlayerCacheEntry]) -> int:
        """Replace all cached players with a new generation.

        Args:
            entries: Decoded entries, consumed lazily inside the transaction.

        Returns:
            Number of rows written.

        Raises:
            CachePersistError: If the cache write fails; the previous
                generation is kept.
        """
        rows = (
            (
                entry.id,
                entry.x,
                entry.y,
                entry.z,
                entry.name,
                entry.username,
                entry.profession,
                entry.extracted_json,
                entry.raw_json,
            )
            for entry in entries
        )
        return self._replace_table("cache_players", _INSERT_PLAYER_SQL, rows)

    def list_vehicles(self) -> list[VehicleSummary]:
        """List cached vehicles ordered by id."""
        rows = self._fetch_all(
            "SELECT id, x, y, type, part_count FROM cache_vehicles ORDER BY id", ()
        )
        return [
            VehicleSummary(
                id=row["id"],
                x=round_coordinate(row["x"]),
                y=round_coordinate(row["y"]),
                type=row["type"] or UNKNOWN_VEHICLE_TYPE,
                part_count=row["part_count"] if row["part_count"] is not None else 0,
            )
            for row in rows
        ]

    def get_vehicle(self, vehicle_id: int) -> VehicleDetail | None:
        """Return one cached vehicle with its full extraction, or ``None``."""
        rows = self._fetch_all(
            "SELECT id, x, y, extracted_json, raw_json FROM cache_vehicles WHERE id = ?",
            (vehicle_id,),
        )
        if not rows:
            return None
        row = rows[0]
        return VehicleDetail(
            id=row["id"],
            x=round_coordinate(row["x"]),
            y=round_coordinate(row["y"]),
            extracted=parse_extracted_json(row["extracted_json"]),
            raw=parse_raw_json(row["raw_json"]),
        )

    def list_players(self) -> list[PlayerSummary]:
        """List cached players ordered by id.

        Only the list-view subset of each extraction is read back.
        """
        rows = self._fetch_all(
            "SELECT id, x, y, z, name, username, profession, extracted_json "
            "FROM cache_players ORDER BY id",
            (),
        )
        summaries: list[PlayerSummary] = []
        for row in rows:
            extracted = parse_extracted_json(row["extracted_json"])
            summaries.append(
                PlayerSummary(
                    id=row["id"],
                    name=row["name"] or PLAYER_NAME_FALLBACK_TEMPLATE.format(id=row["id"]),
                    username=row["username"],
                    profession=row["profession"],
                    x=round_coordinate(row["x"]),
                    y=round_coordinate(row["y"]),
                    z=row["z"],
                    traits=string_list(extracted, "traitIds"),
                    recipe_ids=string_list(extracted, "recipeIds"),
                    stat_names=string_list(extracted, "statNames"),
                    appearance=string_list(extracted, "appearance"),
                    clothing_types=string_list(extracted, "clothingTypes"),
                )
            )
        return summaries

    def get_player(self, player_id: int) -> PlayerDetail | None:
        """Return one cached player with its full extraction, or ``None``."""
        rows = self._fetch_all(
            "SELECT id, x, y, z, name, username, extracted_json, raw_json "
            "FROM cache_players WHERE id = ?",
            (player_id,),
        )
        if not rows:
            return None
        row = rows[0]
        return PlayerDetail(
            id=row["id"],
            x=round_coordinate(row["x"]),
            y=round_coordinate(row["y"]),
            z=row["z"],
            name=row["name"] or PLAYER_NAME_FALLBACK_TEMPLATE.format(id=row["id"]),
            username=row["username"],
            extracted=parse_extracted_json(row["extracted_json"]),
            raw=parse_raw_json(row["raw_json"]),
        )

    def clear(self) -> None:
        """Delete every cached vehicle and player.

        Raises:
            CachePersistError: If the cache write fails.
        """
        self.initialize()
        try:
            with closing(self._connect()) as connection, connection:
                connection.execute("DELETE FROM cache_vehicles")
                connection.execute("DELETE FROM cache_players")
        except sqlite3.Error as error:
            raise CachePersistError(f"Failed to clear cache at {self._db_path}: {error}.") from error
        _LOGGER.info("cache_cleared", db_path=str(self._db_path))

    def _replace_table(
        self,
        table_name: str,
        insert_sql: str,
        rows: Iterable[tuple[object, ...]],
    ) -> int:
        self.initialize()
        try:
            with closing(self._connect()) as connection, connection:
                connection.execute(f"DELETE FROM {table_name}")
                cursor = connection.executemany(insert_sql, rows)
                row_count = max(cursor.rowcount, 0)
        except sqlite3.Error as error:
            raise CachePersistError(
                f"Failed to replace {table_name} in {self._db_path}: {error}. "
                "The previous cache generation was kept."
            ) from error
        _LOGGER.info("cache_table_replaced", table=table_name, row_count=row_count)
        return row_count

    def _fetch_all(self, sql: str, parameters: tuple[object, ...]) -> list[sqlite3.Row]:
        self.initialize()
        try:
            with closing(self._connect()) as connection:
                return connection.execute(sql, parameters).fetchall()
        except sqlite3.Error as error:
            raise CachePersistError(f"Failed to read cache at {self._db_path}: {error}.") from error

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._db_path)
        connection.row_factory = sqlite3.Row
        return connection


def round_coordinate(value: float | None) -> int | None:
    """Round a coordinate half-up for display; ``None`` stays ``None``."""
    if value is None:
        return None
    return int(math.floor(float(value) + 0.5))
