"""Runtime configuration model for pzcache.

This module owns all environment variable and settings-file parsing.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Mapping, cast

import yaml

from core.constants import (
    CACHE_DB_FILE_NAME,
    DEFAULT_CACHE_ROOT,
    DEFAULT_SAVE_FOLDER,
    PLAYERS_DB_FILE_NAME,
    SNAPSHOTS_DIR_NAME,
    VEHICLES_DB_FILE_NAME,
)
from core.errors import ConfigError

_SETTINGS_KEYS = ("save_folder", "vehicles_db_path", "players_db_path", "cache_root")
_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class CacheConfig:
    """Validated runtime configuration.

    Attributes:
        cache_root: Local directory holding the cache database and snapshots.
        cache_db_path: SQLite file of the Cache Store.
        snapshot_root: Parent directory for per-sync snapshot directories.
        save_folder: Game save folder used to derive default source paths.
        vehicles_db_path: Source vehicles database.
        players_db_path: Source players database.
        debug_decode: Emit per-occurrence skill scanner traces.
    """

    cache_root: Path
    cache_db_path: Path
    snapshot_root: Path
    save_folder: Path
    vehicles_db_path: Path
    players_db_path: Path
    debug_decode: bool = False

    @classmethod
    def from_env(cls) -> "CacheConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.
        """
        cache_root = _resolve_path(os.getenv("PZCACHE_ROOT") or str(DEFAULT_CACHE_ROOT))
        cache_db_value = os.getenv("PZCACHE_DB")
        save_folder = _resolve_path(os.getenv("PZ_SAVE_PATH") or str(DEFAULT_SAVE_FOLDER))
        vehicles_value = os.getenv("PZ_VEHICLES_DB")
        players_value = os.getenv("PZ_PLAYERS_DB")
        return cls(
            cache_root=cache_root,
            cache_db_path=(
                _resolve_path(cache_db_value)
                if cache_db_value
                else cache_root / CACHE_DB_FILE_NAME
            ),
            snapshot_root=cache_root / SNAPSHOTS_DIR_NAME,
            save_folder=save_folder,
            vehicles_db_path=(
                _resolve_path(vehicles_value)
                if vehicles_value
                else save_folder / VEHICLES_DB_FILE_NAME
            ),
            players_db_path=(
                _resolve_path(players_value)
                if players_value
                else save_folder / PLAYERS_DB_FILE_NAME
            ),
            debug_decode=_parse_flag(os.getenv("PZCACHE_DEBUG_DECODE", "")),
        )

    def with_cache_root(self, cache_root: str | Path) -> "CacheConfig":
        """Return a copy rooted at another cache directory.

        Args:
            cache_root: New cache root.

        Returns:
            Config whose cache database and snapshots live under ``cache_root``.
        """
        root = _resolve_path(str(cache_root))
        return replace(
            self,
            cache_root=root,
            cache_db_path=root / CACHE_DB_FILE_NAME,
            snapshot_root=root / SNAPSHOTS_DIR_NAME,
        )

    def with_save_folder(self, save_folder: str | Path) -> "CacheConfig":
        """Return a copy whose source paths derive from a save folder.

        Args:
            save_folder: Game save folder containing vehicles.db and players.db.

        Returns:
            Updated config.
        """
        folder = _resolve_path(str(save_folder))
        return replace(
            self,
            save_folder=folder,
            vehicles_db_path=folder / VEHICLES_DB_FILE_NAME,
            players_db_path=folder / PLAYERS_DB_FILE_NAME,
        )


def load_config(settings_path: str | None = None) -> CacheConfig:
    """Build config from environment, layered with an optional settings file.

    Settings file values override environment values. Explicit database
    paths win over paths derived from the save folder.

    Args:
        settings_path: Optional YAML settings file path.

    Returns:
        A validated config object.

    Raises:
        ConfigError: If the settings file is unreadable or invalid.
    """
    config = CacheConfig.from_env()
    if settings_path is None:
        return config
    settings = _load_settings(settings_path)
    if "cache_root" in settings:
        config = config.with_cache_root(settings["cache_root"])
    if "save_folder" in settings:
        config = config.with_save_folder(settings["save_folder"])
    if "vehicles_db_path" in settings:
        config = replace(config, vehicles_db_path=_resolve_path(settings["vehicles_db_path"]))
    if "players_db_path" in settings:
        config = replace(config, players_db_path=_resolve_path(settings["players_db_path"]))
    return config


def _load_settings(settings_path: str) -> dict[str, str]:
    settings_file = Path(settings_path).expanduser().resolve()
    if not settings_file.exists():
        raise ConfigError(
            f"Settings file does not exist at {settings_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(settings_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise ConfigError(
            f"Failed to read settings at {settings_file}: {error}. Check file permissions."
        ) from error
    except yaml.YAMLError as error:
        raise ConfigError(
            f"Failed to parse YAML settings at {settings_file}: {error}. Fix YAML syntax."
        ) from error
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ConfigError(
            f"Invalid settings at {settings_file}: expected a mapping, "
            f"got {type(payload).__name__}."
        )
    return _normalize_settings(payload, settings_file)


def _normalize_settings(payload: Mapping[object, object], settings_file: Path) -> dict[str, str]:
    unknown_keys = sorted(str(key) for key in payload if key not in _SETTINGS_KEYS)
    if unknown_keys:
        raise ConfigError(
            f"Unknown settings keys in {settings_file}: {unknown_keys}. "
            f"Supported keys: {list(_SETTINGS_KEYS)}."
        )
    settings: dict[str, str] = {}
    for key, value in payload.items():
        if value is None:
            continue
        if not isinstance(value, str):
            raise ConfigError(
                f"Invalid settings value for '{key}' in {settings_file}: "
                f"expected a path string, got {type(value).__name__}."
            )
        if value.strip():
            settings[str(key)] = value.strip()
    return settings


def _resolve_path(raw_value: str) -> Path:
    return Path(raw_value.strip()).expanduser().resolve()


def _parse_flag(raw_value: str) -> bool:
    return raw_value.strip().lower() in _TRUE_VALUES
