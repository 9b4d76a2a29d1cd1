"""Python SDK for cache operations.

This module exposes high-level APIs for triggering a sync and reading
cached vehicles and players. Reads never touch the source databases or
the decoder; they only query the cache store.
"""

from __future__ import annotations

from core.config import CacheConfig
from core.types import (
    ExtractionResult,
    PlayerDetail,
    PlayerSummary,
    RecordType,
    SyncReport,
    VehicleDetail,
    VehicleSummary,
)
from decode.blob_decoder import BlobInput, decode_blob
from store.cache_store import CacheStore
from sync.pipeline import SyncPipelineRunner


class PzCacheClient:
    """Primary SDK entry point."""

    def __init__(self, config: CacheConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or CacheConfig.from_env()
        self._store = CacheStore(self._config)
        self._runner = SyncPipelineRunner(self._config, self._store)

    @property
    def config(self) -> CacheConfig:
        """Configuration the client was built with."""
        return self._config

    def sync(self) -> SyncReport:
        """Copy the source databases, decode every row, and replace the cache.

        Returns:
            Sync report with per-table row counts.

        Raises:
            PzCacheError: If any sync stage fails.
        """
        return self._runner.run()

    def list_vehicles(self) -> list[VehicleSummary]:
        """List cached vehicles ordered by id."""
        return self._store.list_vehicles()

    def get_vehicle(self, vehicle_id: int) -> VehicleDetail | None:
        """Get one cached vehicle, or ``None`` when absent."""
        return self._store.get_vehicle(vehicle_id)

    def list_players(self) -> list[PlayerSummary]:
        """List cached players ordered by id."""
        return self._store.list_players()

    def get_player(self, player_id: int) -> PlayerDetail | None:
        """Get one cached player, or ``None`` when absent."""
        return self._store.get_player(player_id)

    def clear_cache(self) -> None:
        """Delete all cached rows."""
        self._store.clear()

    def decode(self, data: BlobInput, record_type: RecordType) -> ExtractionResult:
        """Decode a single blob without touching the cache.

        Args:
            data: Blob bytes.
            record_type: ``"vehicle"`` or ``"player"``.

        Returns:
            Extraction result.
        """
        return decode_blob(data, record_type, trace=self._config.debug_decode)
