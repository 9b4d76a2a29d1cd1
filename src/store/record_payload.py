"""Shared JSON serialization for extraction payloads.

This module centralizes how typed field records and raw bytes are
persisted as JSON text, and how persisted text is read back. Reading is
tolerant: malformed JSON yields an empty payload instead of an error.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from core.types import ExtractedFields, ExtractionResult, PlayerFields

_VEHICLE_PAYLOAD_KEYS = (
    ("vehicle_type", "vehicleType"),
    ("part_names", "partNames"),
    ("custom_names", "customNames"),
    ("error", "_error"),
)
_PLAYER_PAYLOAD_KEYS = (
    ("character_names", "characterNames"),
    ("profession_ids", "professionIds"),
    ("trait_ids", "traitIds"),
    ("stat_names", "statNames"),
    ("appearance", "appearance"),
    ("clothing_types", "clothingTypes"),
    ("clothing_custom_names", "clothingCustomNames"),
    ("inventory_strings", "inventoryStrings"),
    ("recipe_ids", "recipeIds"),
    ("username_from_buffer", "usernameFromBuffer"),
    ("skill_levels", "skillLevels"),
    ("skill_xp", "skillXp"),
    ("player_level", "playerLevel"),
    ("error", "_error"),
)


def fields_to_payload(fields: ExtractedFields) -> dict[str, object]:
    """Serialize a typed field record into a sparse JSON-safe mapping.

    Args:
        fields: Vehicle or player field record.

    Returns:
        Dictionary keyed by payload names; undetected fields are omitted.
    """
    key_pairs = _PLAYER_PAYLOAD_KEYS if isinstance(fields, PlayerFields) else _VEHICLE_PAYLOAD_KEYS
    payload: dict[str, object] = {}
    for attribute, payload_key in key_pairs:
        value = getattr(fields, attribute)
        if value is None:
            continue
        payload[payload_key] = _to_json_value(value)
    return payload


def extraction_to_json(result: ExtractionResult) -> str:
    """Encode an extraction's field record as JSON text."""
    return json.dumps(fields_to_payload(result.fields), allow_nan=False)


def raw_bytes_to_json(raw_bytes: bytes) -> str:
    """Encode raw bytes as a JSON array of integers."""
    return json.dumps(list(raw_bytes))


def parse_extracted_json(text: str | None) -> dict[str, Any]:
    """Decode persisted extraction JSON, treating malformed input as empty.

    Args:
        text: Persisted JSON text, possibly ``None``.

    Returns:
        Extraction payload mapping.
    """
    payload = _loads_or_none(text)
    if isinstance(payload, dict):
        return payload
    return {}


def parse_raw_json(text: str | None) -> bytes:
    """Decode persisted raw-byte JSON, treating malformed input as empty.

    Args:
        text: Persisted JSON array of byte values, possibly ``None``.

    Returns:
        Raw bytes, or empty bytes when the payload is not a byte array.
    """
    payload = _loads_or_none(text)
    if not isinstance(payload, list):
        return b""
    try:
        return bytes(payload)
    except (TypeError, ValueError):
        return b""


def string_list(payload: Mapping[str, Any], key: str) -> tuple[str, ...]:
    """Read a list-of-strings payload entry, skipping non-string items."""
    value = payload.get(key)
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, str))


def _to_json_value(value: object) -> object:
    if isinstance(value, tuple):
        return [_to_json_value(item) for item in value]
    if isinstance(value, Mapping):
        return {str(key): _to_json_value(item) for key, item in value.items()}
    return value


def _loads_or_none(text: str | None) -> object:
    if not text:
        return None
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        return None
