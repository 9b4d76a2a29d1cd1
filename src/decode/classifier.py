"""Field classifier.

This module partitions extracted strings into semantic buckets per
record type by running the ordered rule tables from ``decode.rules``.
"""

from __future__ import annotations

from typing import Sequence

from core.types import CandidateString, RecordType
from decode.rules import PLAYER_RULES, VEHICLE_RULES, FieldRule


def rules_for(record_type: RecordType) -> tuple[FieldRule, ...]:
    """Return the ordered rule table for a record type."""
    if record_type == "vehicle":
        return VEHICLE_RULES
    return PLAYER_RULES


def classify_fields(
    candidates: Sequence[CandidateString],
    text: str,
    record_type: RecordType,
) -> dict[str, tuple[str, ...]]:
    """Classify candidate strings into sparse field buckets.

    Args:
        candidates: Strings extracted from the blob, in order.
        text: Best-effort UTF-8 decoding of the whole blob.
        record_type: Record type selecting the rule table.

    Returns:
        Mapping of field name to matched values. Fields that matched
        nothing are omitted.
    """
    strings = [candidate.text for candidate in candidates]
    claimed: dict[str, tuple[str, ...]] = {}
    for rule in rules_for(record_type):
        values = rule.apply(strings, text, claimed)
        if values:
            claimed[rule.field_name] = values
    return claimed
