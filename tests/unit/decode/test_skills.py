"""Unit tests for skill level and XP scanners."""

from __future__ import annotations

import struct

from decode.skills import find_occurrences, read_level_candidate, scan_skill_levels, scan_skill_xp
from tests.blob_fixtures import skill_level_bytes


def test_scan_skill_levels_reads_zero_byte_then_int_layout() -> None:
    """A zero byte followed by a big-endian int should read as the level."""
    levels = scan_skill_levels(skill_level_bytes("Strength", 7), ["Strength"])

    assert levels == {"Strength": 7}


def test_scan_skill_levels_keeps_highest_level_across_occurrences() -> None:
    """Several occurrences should report the maximum accepted level."""
    buffer = skill_level_bytes("Fitness", 3) + b"\xff" * 4 + skill_level_bytes("Fitness", 5)
    reversed_buffer = skill_level_bytes("Fitness", 5) + b"\xff" * 4 + skill_level_bytes("Fitness", 3)

    assert scan_skill_levels(buffer, ["Fitness"]) == {"Fitness": 5}
    assert scan_skill_levels(reversed_buffer, ["Fitness"]) == {"Fitness": 5}


def test_scan_skill_levels_reads_bare_int_layout() -> None:
    """A big-endian int directly after the name should read as the level."""
    assert scan_skill_levels(b"Axe" + struct.pack(">I", 5), ["Axe"]) == {"Axe": 5}


def test_scan_skill_levels_prefers_bare_int_when_zero_byte_reading_is_out_of_range() -> None:
    """A zero byte followed by an out-of-range int should fall through to the bare int."""
    assert scan_skill_levels(b"Axe\x00" + struct.pack(">I", 11), ["Axe"]) == {"Axe": 0}


def test_scan_skill_levels_reads_second_word_layout() -> None:
    """The second of two ints should be read when the first is out of range."""
    buffer = b"Cooking" + struct.pack(">I", 1000) + struct.pack(">I", 6)

    assert scan_skill_levels(buffer, ["Cooking"]) == {"Cooking": 6}


def test_scan_skill_levels_omits_out_of_range_values() -> None:
    """Names whose following bytes hold no level in [0, 10] are absent."""
    buffer = b"Sneak" + struct.pack(">I", 99) + struct.pack(">I", 77)

    assert scan_skill_levels(buffer, ["Sneak", "Nimble"]) == {}


def test_read_level_candidate_returns_none_at_buffer_end() -> None:
    """No layout should fit when fewer than four bytes follow the name."""
    assert read_level_candidate(b"Axe\x00\x01", 3) is None


def test_scan_skill_xp_collects_distinct_samples_in_order() -> None:
    """XP samples should be finite doubles, deduplicated, in buffer order."""
    buffer = b"".join(
        b"Strength" + struct.pack(">d", value) for value in (75.5, 75.5, 150.0)
    )

    assert scan_skill_xp(buffer, ["Strength"]) == {"Strength": (75.5, 150.0)}


def test_scan_skill_xp_rejects_negative_huge_and_nan_values() -> None:
    """Samples outside [0, 1e10) or non-finite should be dropped."""
    buffer = b"".join(
        b"Axe" + struct.pack(">d", value) for value in (-1.0, 1e12, float("nan"))
    )

    assert scan_skill_xp(buffer, ["Axe"]) == {}


def test_scan_skill_xp_caps_samples_per_skill() -> None:
    """At most fifteen samples should be kept for one skill."""
    buffer = b"".join(b"Axe" + struct.pack(">d", float(value)) for value in range(20))

    samples = scan_skill_xp(buffer, ["Axe"])["Axe"]

    assert samples == tuple(float(value) for value in range(15))


def test_find_occurrences_includes_overlapping_matches() -> None:
    """Overlapping occurrences should all be reported."""
    assert list(find_occurrences(b"aaaa", b"aa")) == [0, 1, 2]
    assert list(find_occurrences(b"abc", b"")) == []
