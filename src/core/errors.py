"""pzcache exception hierarchy.

Every failure a sync or cache read can surface derives from
``PzCacheError``, so callers such as the CLI can catch one type.
Decode anomalies are not exceptions; they travel as the ``error`` field.
"""

from __future__ import annotations


class PzCacheError(Exception):
    """Base exception for all pzcache failures."""


class ConfigError(PzCacheError):
    """Raised for invalid runtime configuration or settings files."""


class SourceMissingError(PzCacheError):
    """Raised when a configured source database does not exist."""


class SnapshotIOError(PzCacheError):
    """Raised when a snapshot copy cannot be created, opened, or read."""


class SchemaDiscoveryError(PzCacheError):
    """Raised when the player table or its columns cannot be queried."""


class CachePersistError(PzCacheError):
    """Raised for cache database failures."""


class SyncInProgressError(PzCacheError):
    """Raised when a sync is triggered while another one is running."""
