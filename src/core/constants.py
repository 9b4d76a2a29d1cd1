"""Core constants used across pzcache modules.

This module centralizes defaults, file names, and decoder limits.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_CACHE_ROOT = Path(".pzcache")
DEFAULT_SAVE_FOLDER = Path("~/Zomboid/Saves/Multiplayer/servertest")
CACHE_DB_FILE_NAME = "cache.db"
SNAPSHOTS_DIR_NAME = "snapshots"
VEHICLES_DB_FILE_NAME = "vehicles.db"
PLAYERS_DB_FILE_NAME = "players.db"
DEFAULT_LOG_LEVEL = "INFO"
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

VEHICLES_TABLE_NAME = "vehicles"
PLAYER_TABLE_CANDIDATES = ("localPlayers", "networkPlayers")
DEFAULT_PLAYER_TABLE_NAME = "networkPlayers"
MINIMAL_PLAYER_COLUMNS = ("id", "data")
OPTIONAL_PLAYER_COLUMNS = ("x", "y", "z", "username")

UNKNOWN_VEHICLE_TYPE = "Unknown"
PLAYER_NAME_FALLBACK_TEMPLATE = "Player {id}"

MAX_LENGTH_PREFIXED_STRING = 500
MIN_PRINTABLE_RUN = 2
MAX_PRINTABLE_RUN = 200

MIN_SKILL_LEVEL = 0
MAX_SKILL_LEVEL = 10
MAX_XP_SAMPLES_PER_SKILL = 15
XP_SAMPLE_UPPER_BOUND = 1e10
DEBUG_OCCURRENCE_TRACE_LIMIT = 3
