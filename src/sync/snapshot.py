"""Snapshot lifecycle for live source databases.

The game keeps its save databases open while running. Reading them in
place risks lock conflicts, so each sync byte-copies both files into a
fresh private directory, reads the copies, and removes the directory on
every exit path.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
import shutil
import sqlite3
import tempfile
from typing import Iterator

from core.constants import PLAYERS_DB_FILE_NAME, VEHICLES_DB_FILE_NAME
from core.errors import SnapshotIOError, SourceMissingError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class SnapshotSet:
    """Paths of one sync's snapshot copies.

    Attributes:
        directory: Private directory owned by the sync.
        vehicles_path: Copy of the vehicles database.
        players_path: Copy of the players database.
    """

    directory: Path
    vehicles_path: Path
    players_path: Path


def ensure_sources_exist(vehicles_source: Path, players_source: Path) -> None:
    """Fail fast when a configured source database is missing.

    Raises:
        SourceMissingError: If either path does not exist.
    """
    for label, source in (("Vehicles", vehicles_source), ("Players", players_source)):
        if not source.exists():
            raise SourceMissingError(
                f"{label} database not found at {source}. "
                "Check the save folder or database path settings."
            )


@contextmanager
def create_snapshots(
    vehicles_source: Path,
    players_source: Path,
    snapshot_root: Path,
) -> Iterator[SnapshotSet]:
    """Copy both source databases into a private snapshot directory.

    The directory and everything in it is removed when the context
    exits, whether the body succeeded or raised.

    Args:
        vehicles_source: Live vehicles database.
        players_source: Live players database.
        snapshot_root: Parent directory for snapshot directories.

    Yields:
        Paths of the snapshot copies.

    Raises:
        SnapshotIOError: If the directory or a copy cannot be created.
    """
    try:
        snapshot_root.mkdir(parents=True, exist_ok=True)
        directory = Path(tempfile.mkdtemp(prefix="sync-", dir=snapshot_root))
    except OSError as error:
        raise SnapshotIOError(
            f"Failed to create snapshot directory under {snapshot_root}: {error}. "
            "Check that the cache root is writable."
        ) from error
    snapshots = SnapshotSet(
        directory=directory,
        vehicles_path=directory / VEHICLES_DB_FILE_NAME,
        players_path=directory / PLAYERS_DB_FILE_NAME,
    )
    try:
        _copy_source(vehicles_source, snapshots.vehicles_path)
        _copy_source(players_source, snapshots.players_path)
        _LOGGER.info(
            "snapshot_created",
            directory=str(directory),
            vehicles_bytes=snapshots.vehicles_path.stat().st_size,
            players_bytes=snapshots.players_path.stat().st_size,
        )
        yield snapshots
    finally:
        shutil.rmtree(directory, ignore_errors=True)
        _LOGGER.info("snapshot_removed", directory=str(directory))


def open_snapshot(snapshot_path: Path) -> sqlite3.Connection:
    """Open a snapshot copy read-only and check it is a SQLite database.

    Args:
        snapshot_path: Snapshot database file.

    Returns:
        Open connection with name-addressable rows.

    Raises:
        SnapshotIOError: If the file cannot be opened as a database.
    """
    try:
        connection = sqlite3.connect(f"{snapshot_path.as_uri()}?mode=ro", uri=True)
    except sqlite3.Error as error:
        raise SnapshotIOError(
            f"Failed to open snapshot {snapshot_path}: {error}."
        ) from error
    connection.row_factory = sqlite3.Row
    try:
        connection.execute("SELECT name FROM sqlite_master LIMIT 1").fetchall()
    except sqlite3.Error as error:
        connection.close()
        raise SnapshotIOError(
            f"Snapshot {snapshot_path} is not a readable SQLite database: {error}. "
            "Check that the configured path points at the game's database file."
        ) from error
    return connection


def _copy_source(source: Path, destination: Path) -> None:
    try:
        shutil.copyfile(source, destination)
    except OSError as error:
        raise SnapshotIOError(
            f"Failed to copy {source} to snapshot {destination}: {error}. "
            "Check file permissions and free disk space."
        ) from error
