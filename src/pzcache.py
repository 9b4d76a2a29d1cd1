"""Public SDK surface for pzcache.

This module provides a stable import path for SDK users.
It re-exports the primary client, the decoder, and typed models.
"""

from __future__ import annotations

from core.config import CacheConfig, load_config
from core.errors import PzCacheError
from core.types import (
    ExtractionResult,
    PlayerDetail,
    PlayerFields,
    PlayerSummary,
    SyncReport,
    VehicleDetail,
    VehicleFields,
    VehicleSummary,
)
from decode.blob_decoder import decode_blob
from store.cache_sdk import PzCacheClient

__all__ = [
    "CacheConfig",
    "ExtractionResult",
    "PlayerDetail",
    "PlayerFields",
    "PlayerSummary",
    "PzCacheClient",
    "PzCacheError",
    "SyncReport",
    "VehicleDetail",
    "VehicleFields",
    "VehicleSummary",
    "decode_blob",
    "load_config",
]
