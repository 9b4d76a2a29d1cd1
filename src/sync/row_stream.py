"""Lazy decoded-row streams over snapshot tables.

Each stream runs its SELECT eagerly, so a missing table fails before the
cache is touched, then decodes rows one at a time in source read order
as the cache store consumes them.
"""

from __future__ import annotations

import sqlite3
from typing import Callable, Iterator, cast

from core.constants import (
    MINIMAL_PLAYER_COLUMNS,
    OPTIONAL_PLAYER_COLUMNS,
    PLAYER_NAME_FALLBACK_TEMPLATE,
    UNKNOWN_VEHICLE_TYPE,
    VEHICLES_TABLE_NAME,
)
from core.errors import SchemaDiscoveryError, SnapshotIOError
from core.types import (
    ExtractionResult,
    PlayerCacheEntry,
    PlayerFields,
    PlayerTableSchema,
    RecordType,
    VehicleCacheEntry,
    VehicleFields,
)
from decode.blob_decoder import BlobInput
from store.record_payload import extraction_to_json, raw_bytes_to_json
from sync.schema_discovery import quote_identifier

BlobDecoder = Callable[[BlobInput, RecordType], ExtractionResult]

_FETCH_BATCH_SIZE = 256


def stream_vehicle_entries(
    connection: sqlite3.Connection,
    decoder: BlobDecoder,
) -> Iterator[VehicleCacheEntry]:
    """Stream decoded vehicle cache entries from a vehicles snapshot.

    Args:
        connection: Open vehicles snapshot.
        decoder: Blob decoder applied once per row.

    Returns:
        Lazy iterator of cache entries in source read order.

    Raises:
        SnapshotIOError: If the vehicles table cannot be read.
    """
    sql = f"SELECT id, x, y, data FROM {quote_identifier(VEHICLES_TABLE_NAME)}"
    try:
        cursor = connection.execute(sql)
    except sqlite3.Error as error:
        raise SnapshotIOError(
            f"Failed to read vehicles from snapshot: {error}. "
            "Check that the vehicles database is a valid save file."
        ) from error
    return (build_vehicle_entry(row, decoder) for row in _iterate_rows(cursor))


def stream_player_entries(
    connection: sqlite3.Connection,
    schema: PlayerTableSchema,
    decoder: BlobDecoder,
) -> Iterator[PlayerCacheEntry]:
    """Stream decoded player cache entries from a players snapshot.

    Args:
        connection: Open players snapshot.
        schema: Discovered player table and columns.
        decoder: Blob decoder applied once per row.

    Returns:
        Lazy iterator of cache entries in source read order.

    Raises:
        SchemaDiscoveryError: If the discovered table cannot be queried.
    """
    columns = select_player_columns(schema)
    column_sql = ", ".join(quote_identifier(column) for column in columns)
    sql = f"SELECT {column_sql} FROM {quote_identifier(schema.table_name)}"
    try:
        cursor = connection.execute(sql)
    except sqlite3.Error as error:
        raise SchemaDiscoveryError(
            f"Failed to query player table '{schema.table_name}': {error}. "
            "Check that the players database matches a supported save layout."
        ) from error
    return (build_player_entry(row, decoder) for row in _iterate_rows(cursor))


def select_player_columns(schema: PlayerTableSchema) -> tuple[str, ...]:
    """Return the columns to read: ``id``, ``data``, and optional extras present."""
    optional = tuple(column for column in OPTIONAL_PLAYER_COLUMNS if column in schema.columns)
    return MINIMAL_PLAYER_COLUMNS + optional


def build_vehicle_entry(row: sqlite3.Row, decoder: BlobDecoder) -> VehicleCacheEntry:
    """Decode one vehicle row into a cache entry."""
    result = decoder(row["data"], "vehicle")
    fields = cast(VehicleFields, result.fields)
    return VehicleCacheEntry(
        id=int(row["id"]),
        x=_to_float(row["x"]),
        y=_to_float(row["y"]),
        type=fields.vehicle_type or UNKNOWN_VEHICLE_TYPE,
        part_count=len(fields.part_names or ()),
        extracted_json=extraction_to_json(result),
        raw_json=raw_bytes_to_json(result.raw_bytes),
    )


def build_player_entry(row: sqlite3.Row, decoder: BlobDecoder) -> PlayerCacheEntry:
    """Decode one player row into a cache entry."""
    row_keys = row.keys()
    player_id = int(row["id"])
    result = decoder(row["data"], "player")
    fields = cast(PlayerFields, result.fields)
    names = fields.character_names or ()
    professions = fields.profession_ids or ()
    return PlayerCacheEntry(
        id=player_id,
        x=_to_float(row["x"]) if "x" in row_keys else None,
        y=_to_float(row["y"]) if "y" in row_keys else None,
        z=_to_float(row["z"]) if "z" in row_keys else None,
        name=names[0] if names else PLAYER_NAME_FALLBACK_TEMPLATE.format(id=player_id),
        username=_to_username(row["username"]) if "username" in row_keys else None,
        profession=professions[0] if professions else None,
        extracted_json=extraction_to_json(result),
        raw_json=raw_bytes_to_json(result.raw_bytes),
    )


def _iterate_rows(cursor: sqlite3.Cursor) -> Iterator[sqlite3.Row]:
    while True:
        try:
            rows = cursor.fetchmany(_FETCH_BATCH_SIZE)
        except sqlite3.Error as error:
            raise SnapshotIOError(f"Failed to read snapshot rows: {error}.") from error
        if not rows:
            return
        yield from rows


def _to_float(value: object) -> float | None:
    if value is None:
        return None
    try:
        return float(cast(float, value))
    except (TypeError, ValueError):
        return None


def _to_username(value: object) -> str | None:
    if value is None:
        return None
    username = str(value).strip()
    return username or None
