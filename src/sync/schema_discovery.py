"""Player table discovery.

Single-player saves keep players in ``localPlayers`` while multiplayer
saves use ``networkPlayers``, and the column set varies between game
versions. This module reads both from the snapshot's own catalog.
"""

from __future__ import annotations

import sqlite3

from core.constants import (
    DEFAULT_PLAYER_TABLE_NAME,
    MINIMAL_PLAYER_COLUMNS,
    PLAYER_TABLE_CANDIDATES,
)
from core.errors import SchemaDiscoveryError
from core.logging_config import get_logger
from core.types import PlayerTableSchema

_LOGGER = get_logger(__name__)


def discover_player_table(connection: sqlite3.Connection) -> PlayerTableSchema:
    """Discover the player table name and its columns.

    Args:
        connection: Open players snapshot.

    Returns:
        Discovered schema. Falls back to ``networkPlayers`` when no
        candidate table exists and to ``(id, data)`` when no columns
        are reported.

    Raises:
        SchemaDiscoveryError: If the catalog cannot be queried.
    """
    placeholders = ", ".join("?" for _ in PLAYER_TABLE_CANDIDATES)
    try:
        table_rows = connection.execute(
            "SELECT name FROM sqlite_master "
            f"WHERE type = 'table' AND name IN ({placeholders}) ORDER BY name",
            PLAYER_TABLE_CANDIDATES,
        ).fetchall()
        table_name = str(table_rows[0][0]) if table_rows else DEFAULT_PLAYER_TABLE_NAME
        column_rows = connection.execute(
            f"PRAGMA table_info({quote_identifier(table_name)})"
        ).fetchall()
    except sqlite3.Error as error:
        raise SchemaDiscoveryError(
            f"Failed to query the player table schema: {error}. "
            "Check that the players database is a valid save file."
        ) from error
    columns = tuple(str(row[1]) for row in column_rows) or MINIMAL_PLAYER_COLUMNS
    _LOGGER.info("player_schema_discovered", table_name=table_name, columns=list(columns))
    return PlayerTableSchema(table_name=table_name, columns=columns)


def quote_identifier(identifier: str) -> str:
    """Quote a SQLite identifier."""
    escaped = identifier.replace('"', '""')
    return f'"{escaped}"'
