"""Blob decoder.

This module composes string extraction, field classification, and the
skill scanners into one best-effort extraction per blob. Decoding never
raises: a failing stage is recorded as the ``error`` field and the
remaining stages still run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence, TypeVar, Union

from core.logging_config import get_logger
from core.types import (
    CandidateString,
    ExtractionResult,
    PlayerFields,
    RecordType,
    VehicleFields,
)
from decode.classifier import classify_fields
from decode.skills import scan_skill_levels, scan_skill_xp
from decode.strings import extract_strings
from decode.vocabulary import KNOWN_SKILL_NAMES

_LOGGER = get_logger(__name__)
_T = TypeVar("_T")

BlobInput = Union[bytes, bytearray, memoryview, str, Sequence[int], None]


@dataclass
class _StageErrors:
    """First failure message seen while decoding one blob."""

    record_type: RecordType
    message: str | None = None

    def run(self, stage: str, action: Callable[[], _T], fallback: _T) -> _T:
        try:
            return action()
        except Exception as error:  # noqa: BLE001
            if self.message is None:
                self.message = f"{stage}: {error}" if str(error) else f"{stage}: decode error"
            _LOGGER.warning(
                "decode_stage_failed",
                record_type=self.record_type,
                stage=stage,
                error=str(error),
            )
            return fallback


def decode_blob(
    data: BlobInput,
    record_type: RecordType,
    trace: bool = False,
) -> ExtractionResult:
    """Decode one raw blob into a sparse typed extraction.

    Args:
        data: Blob bytes from a source row; ``None`` is treated as empty.
            Cells that cannot hold a blob, such as REAL or INTEGER values,
            decode to empty fields with ``error`` set.
        record_type: ``"vehicle"`` or ``"player"``.
        trace: Log skill scanner readings for diagnosis.

    Returns:
        Extraction with the typed field record and a verbatim byte copy.
        The same input always yields an equal result.
    """
    buffer = _to_bytes(data)
    if buffer is None:
        message = f"input: unsupported blob type {type(data).__name__}"
        _LOGGER.warning(
            "decode_stage_failed",
            record_type=record_type,
            stage="input",
            error=message,
        )
        return ExtractionResult(record_type, _empty_fields(record_type, error=message), b"")
    if not buffer:
        return ExtractionResult(record_type, _empty_fields(record_type), b"")
    errors = _StageErrors(record_type)
    candidates = errors.run("strings", lambda: extract_strings(buffer), [])
    text = errors.run("text", lambda: buffer.decode("utf-8", errors="replace"), "")
    if record_type == "vehicle":
        fields = _decode_vehicle(candidates, text, errors)
    else:
        fields = _decode_player(buffer, candidates, text, errors, trace)
    return ExtractionResult(record_type, fields, buffer)


def _decode_vehicle(
    candidates: list[CandidateString],
    text: str,
    errors: _StageErrors,
) -> VehicleFields:
    buckets = errors.run("classify", lambda: classify_fields(candidates, text, "vehicle"), {})
    vehicle_type = buckets.get("vehicle_type")
    return VehicleFields(
        vehicle_type=vehicle_type[0] if vehicle_type else None,
        part_names=buckets.get("part_names"),
        custom_names=buckets.get("custom_names"),
        error=errors.message,
    )


def _decode_player(
    buffer: bytes,
    candidates: list[CandidateString],
    text: str,
    errors: _StageErrors,
    trace: bool,
) -> PlayerFields:
    buckets = errors.run("classify", lambda: classify_fields(candidates, text, "player"), {})
    stat_names = buckets.get("stat_names")
    skill_names = stat_names or KNOWN_SKILL_NAMES
    if trace:
        _LOGGER.info(
            "decode_player_buffer",
            buffer_length=len(buffer),
            detected_stat_names=len(stat_names or ()),
            scanned_skill_names=len(skill_names),
        )
    skill_xp = errors.run("skill_xp", lambda: scan_skill_xp(buffer, skill_names), {})
    skill_levels = errors.run(
        "skill_levels",
        lambda: scan_skill_levels(buffer, skill_names, trace=trace),
        {},
    )
    if skill_levels and not stat_names:
        stat_names = tuple(skill_levels)
    username = buckets.get("username_from_buffer")
    return PlayerFields(
        character_names=buckets.get("character_names"),
        profession_ids=buckets.get("profession_ids"),
        trait_ids=buckets.get("trait_ids"),
        stat_names=stat_names,
        appearance=buckets.get("appearance"),
        clothing_types=buckets.get("clothing_types"),
        clothing_custom_names=buckets.get("clothing_custom_names"),
        inventory_strings=buckets.get("inventory_strings"),
        recipe_ids=buckets.get("recipe_ids"),
        username_from_buffer=username[0] if username else None,
        skill_levels=skill_levels or None,
        skill_xp=skill_xp or None,
        player_level=sum(skill_levels.values()) if skill_levels else None,
        error=errors.message,
    )


def _empty_fields(
    record_type: RecordType,
    error: str | None = None,
) -> VehicleFields | PlayerFields:
    if record_type == "vehicle":
        return VehicleFields(error=error)
    return PlayerFields(error=error)


def _to_bytes(data: object) -> bytes | None:
    """Convert a source cell to bytes, or ``None`` when it cannot hold a blob."""
    if data is None:
        return b""
    if isinstance(data, bytes):
        return data
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, Sequence):
        try:
            return bytes(data)
        except (TypeError, ValueError):
            return None
    return None
