"""Sync orchestration from live save databases into the cache.

This module runs the snapshot, discovery, decode, and replace stages as
an explicit state machine. Every resource a run opens is owned by that
run's exit stack, so snapshot handles are closed and snapshot files are
removed on success and on every failure path.
"""

from __future__ import annotations

from contextlib import ExitStack, closing
from enum import Enum
from functools import partial
from pathlib import Path
import threading
import time

from core.config import CacheConfig
from core.errors import SyncInProgressError
from core.logging_config import get_logger
from core.types import SyncReport
from decode.blob_decoder import decode_blob
from store.cache_store import CacheStore
from sync.row_stream import BlobDecoder, stream_player_entries, stream_vehicle_entries
from sync.schema_discovery import discover_player_table
from sync.snapshot import create_snapshots, ensure_sources_exist, open_snapshot

_LOGGER = get_logger(__name__)

_RUN_LOCKS: dict[Path, threading.Lock] = {}
_RUN_LOCKS_GUARD = threading.Lock()


class SyncState(Enum):
    """Stages of one sync run."""

    IDLE = "idle"
    COPYING_SNAPSHOTS = "copying_snapshots"
    OPENING = "opening"
    DISCOVERING_SCHEMA = "discovering_schema"
    DECODING_VEHICLES = "decoding_vehicles"
    DECODING_PLAYERS = "decoding_players"
    CLEANUP = "cleanup"
    ABORTED = "aborted"


class SyncPipelineRunner:
    """Single-flight runner for the copy, decode, and replace sync.

    Runs into the same cache database are serialized across every runner
    in the process: a trigger arriving while a run is in flight is
    rejected with ``SyncInProgressError`` instead of interleaving its
    table replaces with the running generation.
    """

    def __init__(
        self,
        config: CacheConfig,
        store: CacheStore,
        decoder: BlobDecoder | None = None,
    ) -> None:
        self._config = config
        self._store = store
        self._decoder = decoder or partial(decode_blob, trace=config.debug_decode)
        self._lock = run_lock_for(config.cache_db_path)
        self._state = SyncState.IDLE
        self._history: list[SyncState] = []

    @property
    def state(self) -> SyncState:
        """Current state of the runner."""
        return self._state

    @property
    def history(self) -> tuple[SyncState, ...]:
        """States visited by the latest run, in order."""
        return tuple(self._history)

    @property
    def is_running(self) -> bool:
        """Whether any run into this runner's cache database is in flight."""
        return self._lock.locked()

    def run(self) -> SyncReport:
        """Run one sync to completion or failure.

        Returns:
            Counts of rows written per table.

        Raises:
            SyncInProgressError: If another run is in flight.
            SourceMissingError: If a source database does not exist.
            SnapshotIOError: If a snapshot cannot be created, opened, or read.
            SchemaDiscoveryError: If the player table cannot be queried.
            CachePersistError: If a cache write fails.
        """
        if not self._lock.acquire(blocking=False):
            raise SyncInProgressError(
                "A sync is already running. Wait for it to finish and retry."
            )
        try:
            return self._run_locked()
        finally:
            self._lock.release()

    def _run_locked(self) -> SyncReport:
        self._history = []
        started_at = time.monotonic()
        try:
            ensure_sources_exist(self._config.vehicles_db_path, self._config.players_db_path)
            with ExitStack() as stack:
                try:
                    counts = self._run_stages(stack)
                finally:
                    self._transition(SyncState.CLEANUP)
        except Exception as error:
            failed_in = self._history[-2] if len(self._history) > 1 else SyncState.IDLE
            self._transition(SyncState.ABORTED)
            _LOGGER.error(
                "sync_failed",
                failed_in=failed_in.value,
                error_type=type(error).__name__,
                error=str(error),
            )
            raise
        self._transition(SyncState.IDLE)
        vehicle_count, player_count, player_table = counts
        report = SyncReport(
            vehicle_count=vehicle_count,
            player_count=player_count,
            player_table=player_table,
            duration_seconds=time.monotonic() - started_at,
        )
        _LOGGER.info(
            "sync_completed",
            vehicle_count=report.vehicle_count,
            player_count=report.player_count,
            player_table=report.player_table,
            duration_seconds=round(report.duration_seconds, 3),
        )
        return report

    def _run_stages(self, stack: ExitStack) -> tuple[int, int, str]:
        self._transition(SyncState.COPYING_SNAPSHOTS)
        snapshots = stack.enter_context(
            create_snapshots(
                self._config.vehicles_db_path,
                self._config.players_db_path,
                self._config.snapshot_root,
            )
        )
        self._transition(SyncState.OPENING)
        vehicles_connection = stack.enter_context(closing(open_snapshot(snapshots.vehicles_path)))
        players_connection = stack.enter_context(closing(open_snapshot(snapshots.players_path)))
        self._transition(SyncState.DISCOVERING_SCHEMA)
        schema = discover_player_table(players_connection)
        self._transition(SyncState.DECODING_VEHICLES)
        vehicle_count = self._store.replace_vehicles(
            stream_vehicle_entries(vehicles_connection, self._decoder)
        )
        self._transition(SyncState.DECODING_PLAYERS)
        player_count = self._store.replace_players(
            stream_player_entries(players_connection, schema, self._decoder)
        )
        return vehicle_count, player_count, schema.table_name

    def _transition(self, state: SyncState) -> None:
        self._state = state
        self._history.append(state)
        _LOGGER.debug("sync_state_changed", state=state.value)


def run_lock_for(cache_db_path: Path) -> threading.Lock:
    """Return the process-wide sync lock for one cache database."""
    key = cache_db_path.expanduser().resolve()
    with _RUN_LOCKS_GUARD:
        return _RUN_LOCKS.setdefault(key, threading.Lock())


def run_sync(config: CacheConfig, store: CacheStore | None = None) -> SyncReport:
    """Run one sync with a fresh runner.

    Args:
        config: Runtime configuration.
        store: Optional cache store; built from config when omitted.

    Returns:
        Sync report.
    """
    runner = SyncPipelineRunner(config, store or CacheStore(config))
    return runner.run()
