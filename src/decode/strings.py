"""String extraction engine.

This module scans raw blob bytes for human-readable strings. Two
encodings are recognized: a 2-byte big-endian length prefix followed by
UTF-8 bytes, and C-style runs of printable ASCII. The length-prefixed
reading wins whenever it validates.
"""

from __future__ import annotations

from core.constants import (
    MAX_LENGTH_PREFIXED_STRING,
    MAX_PRINTABLE_RUN,
    MIN_PRINTABLE_RUN,
)
from core.types import CandidateString

_PRINTABLE_LOW = 0x20
_PRINTABLE_HIGH = 0x7E
_TAB = 0x09
_INVALID_LEAD_LOW = 0x7F
_INVALID_LEAD_HIGH = 0xC1


def extract_strings(buffer: bytes) -> list[CandidateString]:
    """Extract plausible strings in first-occurrence order.

    Args:
        buffer: Raw blob bytes.

    Returns:
        Candidate strings deduplicated by value, first occurrence kept.
    """
    candidates: list[CandidateString] = []
    seen: set[str] = set()
    offset = 0
    end = len(buffer)
    while offset < end - 1:
        prefixed = _read_length_prefixed(buffer, offset)
        if prefixed is not None:
            text, next_offset = prefixed
            _append_unique(candidates, seen, CandidateString(text, offset, "length_prefixed"))
            offset = next_offset
            continue
        run = _read_printable_run(buffer, offset)
        if run is not None:
            text, next_offset = run
            _append_unique(candidates, seen, CandidateString(text, offset, "printable_run"))
            offset = next_offset
            continue
        offset += 1
    return candidates


def is_printable_utf8(chunk: bytes) -> bool:
    """Return whether bytes may hold printable UTF-8 text.

    Rejects NUL, control bytes other than tab, and bytes that can never
    start or continue a well-formed multi-byte sequence.
    """
    for byte in chunk:
        if byte < _PRINTABLE_LOW and byte != _TAB:
            return False
        if _INVALID_LEAD_LOW <= byte <= _INVALID_LEAD_HIGH:
            return False
    return True


def _read_length_prefixed(buffer: bytes, offset: int) -> tuple[str, int] | None:
    length = int.from_bytes(buffer[offset : offset + 2], "big")
    if length == 0 or length > MAX_LENGTH_PREFIXED_STRING:
        return None
    start = offset + 2
    stop = start + length
    if stop > len(buffer):
        return None
    chunk = buffer[start:stop]
    if not is_printable_utf8(chunk):
        return None
    text = chunk.decode("utf-8", errors="replace")
    if len(text) != length:
        return None
    return text, stop


def _read_printable_run(buffer: bytes, offset: int) -> tuple[str, int] | None:
    if not _is_printable_ascii(buffer[offset]):
        return None
    stop = offset
    while stop < len(buffer) and _is_printable_ascii(buffer[stop]):
        stop += 1
    run_length = stop - offset
    if run_length < MIN_PRINTABLE_RUN or run_length > MAX_PRINTABLE_RUN:
        return None
    text = buffer[offset:stop].decode("ascii")
    if stop < len(buffer) and buffer[stop] == 0:
        stop += 1
    return text, stop


def _is_printable_ascii(byte: int) -> bool:
    return _PRINTABLE_LOW <= byte <= _PRINTABLE_HIGH


def _append_unique(
    candidates: list[CandidateString],
    seen: set[str],
    candidate: CandidateString,
) -> None:
    if candidate.text in seen:
        return
    seen.add(candidate.text)
    candidates.append(candidate)
