"""Shared typed models.

This module defines immutable data models used by the decoder, sync
pipeline, cache store, and SDK layers to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping, Union

RecordType = Literal["vehicle", "player"]
SUPPORTED_RECORD_TYPES: tuple[RecordType, ...] = ("vehicle", "player")

StringMethod = Literal["length_prefixed", "printable_run"]


@dataclass(frozen=True)
class CandidateString:
    """Printable text recognized inside a blob.

    Attributes:
        text: Decoded string value.
        offset: Byte offset where the string (or its length prefix) starts.
        method: Extraction strategy that produced the string.
    """

    text: str
    offset: int
    method: StringMethod


@dataclass(frozen=True)
class VehicleFields:
    """Sparse vehicle extraction; ``None`` means not detected.

    Attributes:
        vehicle_type: First ``Module.Identifier`` token in the blob text.
        part_names: Known part vocabulary found in the blob text.
        custom_names: Free-form names that look user-assigned.
        error: Diagnostic message when a decode stage failed.
    """

    vehicle_type: str | None = None
    part_names: tuple[str, ...] | None = None
    custom_names: tuple[str, ...] | None = None
    error: str | None = None


@dataclass(frozen=True)
class PlayerFields:
    """Sparse player extraction; ``None`` means not detected.

    Attributes:
        character_names: Name-shaped strings, most likely first.
        profession_ids: Known profession identifiers.
        trait_ids: ``base:`` identifiers that are not professions or slots.
        stat_names: Known skill names found as strings.
        appearance: Hair, beard, and face tokens.
        clothing_types: Item ids and tint tokens.
        clothing_custom_names: Residual short printable strings.
        inventory_strings: Descriptive item lines such as key labels.
        recipe_ids: Recipe identifiers.
        username_from_buffer: Best-effort username token.
        skill_levels: Skill name to level in [0, 10].
        skill_xp: Skill name to raw numeric samples.
        player_level: Sum of detected skill levels.
        error: Diagnostic message when a decode stage failed.
    """

    character_names: tuple[str, ...] | None = None
    profession_ids: tuple[str, ...] | None = None
    trait_ids: tuple[str, ...] | None = None
    stat_names: tuple[str, ...] | None = None
    appearance: tuple[str, ...] | None = None
    clothing_types: tuple[str, ...] | None = None
    clothing_custom_names: tuple[str, ...] | None = None
    inventory_strings: tuple[str, ...] | None = None
    recipe_ids: tuple[str, ...] | None = None
    username_from_buffer: str | None = None
    skill_levels: Mapping[str, int] | None = None
    skill_xp: Mapping[str, tuple[float, ...]] | None = None
    player_level: int | None = None
    error: str | None = None


ExtractedFields = Union[VehicleFields, PlayerFields]


@dataclass(frozen=True)
class ExtractionResult:
    """Decoder output for one blob.

    Attributes:
        record_type: Type tag the blob was decoded as.
        fields: Sparse typed field record.
        raw_bytes: Verbatim copy of the input bytes.
    """

    record_type: RecordType
    fields: ExtractedFields
    raw_bytes: bytes


@dataclass(frozen=True)
class PlayerTableSchema:
    """Player table discovered in a players snapshot."""

    table_name: str
    columns: tuple[str, ...]


@dataclass(frozen=True)
class VehicleCacheEntry:
    """One decoded vehicle row ready for the cache."""

    id: int
    x: float | None
    y: float | None
    type: str
    part_count: int
    extracted_json: str
    raw_json: str


@dataclass(frozen=True)
class PlayerCacheEntry:
    """One decoded player row ready for the cache."""

    id: int
    x: float | None
    y: float | None
    z: float | None
    name: str
    username: str | None
    profession: str | None
    extracted_json: str
    raw_json: str


@dataclass(frozen=True)
class VehicleSummary:
    """List view of a cached vehicle."""

    id: int
    x: int | None
    y: int | None
    type: str
    part_count: int


@dataclass(frozen=True)
class VehicleDetail:
    """Detail view of a cached vehicle."""

    id: int
    x: int | None
    y: int | None
    extracted: Mapping[str, object]
    raw: bytes


@dataclass(frozen=True)
class PlayerSummary:
    """List view of a cached player."""

    id: int
    name: str
    username: str | None
    profession: str | None
    x: int | None
    y: int | None
    z: float | None
    traits: tuple[str, ...]
    recipe_ids: tuple[str, ...]
    stat_names: tuple[str, ...]
    appearance: tuple[str, ...]
    clothing_types: tuple[str, ...]


@dataclass(frozen=True)
class PlayerDetail:
    """Detail view of a cached player."""

    id: int
    x: int | None
    y: int | None
    z: float | None
    name: str
    username: str | None
    extracted: Mapping[str, object]
    raw: bytes


@dataclass(frozen=True)
class SyncReport:
    """Outcome of one successful sync.

    Attributes:
        vehicle_count: Vehicle rows written to the cache.
        player_count: Player rows written to the cache.
        player_table: Player table name discovered in the snapshot.
        duration_seconds: Wall-clock duration of the sync.
    """

    vehicle_count: int
    player_count: int
    player_table: str
    duration_seconds: float
