"""Skill level and skill XP scanners.

Both scanners locate every verbatim UTF-8 occurrence of a skill name in
the raw blob and read numbers from the bytes that follow it. They work
on the raw buffer directly and do not depend on string extraction.
"""

from __future__ import annotations

import math
import struct
from typing import Iterable, Iterator

from core.constants import (
    DEBUG_OCCURRENCE_TRACE_LIMIT,
    MAX_SKILL_LEVEL,
    MAX_XP_SAMPLES_PER_SKILL,
    MIN_SKILL_LEVEL,
    XP_SAMPLE_UPPER_BOUND,
)
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)
_UINT32_BE = struct.Struct(">I")
_DOUBLE_BE = struct.Struct(">d")


def scan_skill_levels(
    buffer: bytes,
    skill_names: Iterable[str],
    trace: bool = False,
) -> dict[str, int]:
    """Find the current level of each skill named in the buffer.

    A skill name can appear several times (declaration, then inside a
    larger structure). Levels only grow during play, so the maximum
    accepted value across all occurrences is reported.

    Args:
        buffer: Raw player blob.
        skill_names: Candidate skill names, scanned in order.
        trace: Log candidate readings for the first occurrences.

    Returns:
        Skill name to level in [0, 10]. Names without a valid reading
        are omitted.
    """
    levels: dict[str, int] = {}
    for name in skill_names:
        if not name or name in levels:
            continue
        name_bytes = name.encode("utf-8")
        best_level: int | None = None
        for index, start in enumerate(find_occurrences(buffer, name_bytes)):
            after = start + len(name_bytes)
            level = read_level_candidate(buffer, after)
            if trace and index < DEBUG_OCCURRENCE_TRACE_LIMIT:
                _trace_occurrence(buffer, name, start, after, level)
            if level is not None and (best_level is None or level > best_level):
                best_level = level
        if best_level is not None:
            levels[name] = best_level
    return levels


def read_level_candidate(buffer: bytes, after: int) -> int | None:
    """Read a skill level stored right after a skill name.

    Layouts are tried from most to least structurally specific:
    a zero byte then a 4-byte int, a bare 4-byte int, the second of two
    4-byte ints, then an 8-byte double holding a whole number.

    Args:
        buffer: Raw blob.
        after: Offset of the first byte after the skill name.

    Returns:
        Level in [0, 10], or ``None`` when no layout fits.
    """
    end = len(buffer)
    if after + 5 <= end and buffer[after] == 0:
        value = _UINT32_BE.unpack_from(buffer, after + 1)[0]
        if _is_level(value):
            return int(value)
    if after + 4 <= end:
        value = _UINT32_BE.unpack_from(buffer, after)[0]
        if _is_level(value):
            return int(value)
    if after + 8 <= end:
        value = _UINT32_BE.unpack_from(buffer, after + 4)[0]
        if _is_level(value):
            return int(value)
        double_value = _DOUBLE_BE.unpack_from(buffer, after)[0]
        if math.isfinite(double_value) and double_value.is_integer() and _is_level(double_value):
            return int(double_value)
    return None


def scan_skill_xp(buffer: bytes, skill_names: Iterable[str]) -> dict[str, tuple[float, ...]]:
    """Collect raw XP-like doubles that follow each skill name.

    No level is inferred; the samples are evidence for later reading.

    Args:
        buffer: Raw player blob.
        skill_names: Candidate skill names.

    Returns:
        Skill name to distinct samples in buffer order, at most 15 each.
    """
    samples_by_skill: dict[str, tuple[float, ...]] = {}
    for name in skill_names:
        if not name or name in samples_by_skill:
            continue
        name_bytes = name.encode("utf-8")
        samples: list[float] = []
        for start in find_occurrences(buffer, name_bytes):
            after = start + len(name_bytes)
            if after + 8 > len(buffer):
                continue
            value = _DOUBLE_BE.unpack_from(buffer, after)[0]
            if _is_xp_sample(value) and value not in samples:
                samples.append(value)
            if len(samples) >= MAX_XP_SAMPLES_PER_SKILL:
                break
        if samples:
            samples_by_skill[name] = tuple(samples)
    return samples_by_skill


def find_occurrences(buffer: bytes, needle: bytes) -> Iterator[int]:
    """Yield every start offset of ``needle`` in ``buffer``, overlaps included."""
    if not needle:
        return
    start = buffer.find(needle)
    while start != -1:
        yield start
        start = buffer.find(needle, start + 1)


def _is_level(value: float) -> bool:
    return MIN_SKILL_LEVEL <= value <= MAX_SKILL_LEVEL


def _is_xp_sample(value: float) -> bool:
    return math.isfinite(value) and 0 <= value < XP_SAMPLE_UPPER_BOUND


def _trace_occurrence(
    buffer: bytes,
    name: str,
    start: int,
    after: int,
    level: int | None,
) -> None:
    following = buffer[after : after + 8]
    first_word = _UINT32_BE.unpack_from(buffer, after)[0] if after + 4 <= len(buffer) else None
    second_word = (
        _UINT32_BE.unpack_from(buffer, after + 4)[0] if after + 8 <= len(buffer) else None
    )
    double_value = _DOUBLE_BE.unpack_from(buffer, after)[0] if after + 8 <= len(buffer) else None
    _LOGGER.info(
        "skill_level_occurrence",
        skill=name,
        offset=start,
        following_bytes=list(following),
        first_uint32=first_word,
        second_uint32=second_word,
        double=None if double_value is None or not math.isfinite(double_value) else double_value,
        level=level,
    )
