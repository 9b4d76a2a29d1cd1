"""Declarative field classification rules.

Each rule names a target field, how a value qualifies, which earlier
fields' values it must not reuse, and how many values it keeps. Rule
tables are ordered: earlier, more specific rules claim values first.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Callable, Mapping, Sequence, Union

from decode.vocabulary import (
    APPEARANCE_KEYWORDS,
    CLOTHING_SLOT_IDS,
    PLAYER_RESIDUAL_STOPLIST,
    PROFESSION_IDS,
    SKILL_NAME_SET,
    VEHICLE_PART_NAMES,
    VEHICLE_STRUCTURAL_KEYWORDS,
)

ClaimedValues = Mapping[str, tuple[str, ...]]


@dataclass(frozen=True)
class StringRule:
    """Rule matched against each extracted candidate string.

    Attributes:
        field_name: Target field on the typed field record.
        accepts: Predicate over one candidate string.
        excludes: Fields whose already-claimed values are skipped.
        cap: Maximum number of values kept, unbounded when ``None``.
        first_only: Keep only the first qualifying value.
    """

    field_name: str
    accepts: Callable[[str], bool]
    excludes: tuple[str, ...] = ()
    cap: int | None = None
    first_only: bool = False

    def apply(self, strings: Sequence[str], text: str, claimed: ClaimedValues) -> tuple[str, ...]:
        """Return qualifying strings in first-occurrence order."""
        excluded = {value for field_name in self.excludes for value in claimed.get(field_name, ())}
        matches: list[str] = []
        for candidate in strings:
            if candidate in excluded or candidate in matches:
                continue
            if not self.accepts(candidate):
                continue
            matches.append(candidate)
            if self.first_only or _cap_reached(matches, self.cap):
                break
        return tuple(matches)


@dataclass(frozen=True)
class TextRule:
    """Rule matched by regex against the whole-buffer decoded text.

    Attributes:
        field_name: Target field on the typed field record.
        pattern: Compiled search pattern.
        cap: Maximum number of distinct matches kept.
        first_only: Keep only the first match.
    """

    field_name: str
    pattern: re.Pattern[str]
    cap: int | None = None
    first_only: bool = False

    def apply(self, strings: Sequence[str], text: str, claimed: ClaimedValues) -> tuple[str, ...]:
        """Return distinct regex matches in text order."""
        matches: list[str] = []
        for match in self.pattern.finditer(text):
            value = match.group(0)
            if not value or value in matches:
                continue
            matches.append(value)
            if self.first_only or _cap_reached(matches, self.cap):
                break
        return tuple(matches)


FieldRule = Union[StringRule, TextRule]


def _cap_reached(matches: list[str], cap: int | None) -> bool:
    return cap is not None and len(matches) >= cap


_PRINTABLE_ASCII = re.compile(r"^[\x20-\x7e]+$")
_VEHICLE_TYPE = re.compile(r"[A-Za-z0-9]+\.[A-Za-z0-9_]+")
_VEHICLE_PART = re.compile("|".join(re.escape(name) for name in VEHICLE_PART_NAMES))
_NAME_SHAPED = re.compile(r"^[A-Za-z0-9\s\-'_]+$", re.ASCII)
_DIGITS_ONLY = re.compile(r"^\d+$", re.ASCII)
_WORD_TOKEN = re.compile(r"^[A-Za-z0-9_]+$")
_APPEARANCE = re.compile(
    r"^(M_|F_)?(Hair|Beard|Beard_Stubble|Face)_[A-Za-z0-9_]+$"
    r"|^[A-Za-z]+(Chin|Nose|Eyes|Hair)$"
    r"|^(" + "|".join(APPEARANCE_KEYWORDS) + r")$",
    re.IGNORECASE,
)
_APPEARANCE_PART = re.compile(r"_(Hair|Beard|Chin|Nose|Eyes)", re.IGNORECASE)
_ITEM_ID = re.compile(r"^[A-Za-z0-9_.]+$")
_TINT = re.compile(r"^[A-Za-z0-9_]+TINT$", re.IGNORECASE)
_INVENTORY_PHRASE = re.compile(r"Key Ring|ID Card|Key\b", re.IGNORECASE)
_MAKE_RECIPE = re.compile(r"^Make[A-Za-z0-9_]*$", re.IGNORECASE)
_DOTTED_RECIPE = re.compile(r"^[A-Za-z]+\.[A-Za-z0-9_]+Recipe$", re.IGNORECASE)
_ALNUM = re.compile(r"^[A-Za-z0-9]+$")


def _is_vehicle_custom_name(value: str) -> bool:
    return (
        3 <= len(value) <= 79
        and _PRINTABLE_ASCII.match(value) is not None
        and "." not in value
        and value.lower() not in VEHICLE_STRUCTURAL_KEYWORDS
    )


def _is_character_name(value: str) -> bool:
    return (
        2 <= len(value) <= 20
        and len(value.strip()) >= 2
        and _NAME_SHAPED.match(value) is not None
        and _DIGITS_ONLY.match(value) is None
    )


def _is_profession_id(value: str) -> bool:
    return value in PROFESSION_IDS


def _is_trait_id(value: str) -> bool:
    return (
        value.startswith("base:")
        and 6 < len(value) < 60
        and value not in PROFESSION_IDS
        and value not in CLOTHING_SLOT_IDS
    )


def _is_stat_name(value: str) -> bool:
    return value in SKILL_NAME_SET


def _is_appearance_token(value: str) -> bool:
    if not 3 <= len(value) <= 50 or _WORD_TOKEN.match(value) is None:
        return False
    return _APPEARANCE.match(value) is not None or _APPEARANCE_PART.search(value) is not None


def _is_clothing_type(value: str) -> bool:
    if value.startswith("Base.") and len(value) < 80 and _ITEM_ID.match(value) is not None:
        return True
    return len(value) < 60 and _TINT.match(value) is not None


def _is_clothing_custom_name(value: str) -> bool:
    return (
        2 <= len(value) <= 40
        and _PRINTABLE_ASCII.match(value) is not None
        and "." not in value
        and not value.startswith("base:")
        and value.lower() not in PLAYER_RESIDUAL_STOPLIST
    )


def _is_inventory_string(value: str) -> bool:
    if not 10 <= len(value) <= 80 or _PRINTABLE_ASCII.match(value) is None:
        return False
    return ":" in value or "'" in value or _INVENTORY_PHRASE.search(value) is not None


def _is_recipe_id(value: str) -> bool:
    return _MAKE_RECIPE.match(value) is not None or _DOTTED_RECIPE.match(value) is not None


def _is_username_token(value: str) -> bool:
    return (
        3 <= len(value) <= 20
        and _ALNUM.match(value) is not None
        and _MAKE_RECIPE.match(value) is None
    )


VEHICLE_RULES: tuple[FieldRule, ...] = (
    TextRule("vehicle_type", _VEHICLE_TYPE, first_only=True),
    TextRule("part_names", _VEHICLE_PART),
    StringRule("custom_names", _is_vehicle_custom_name, cap=20),
)

_PLAYER_BUCKETS_BEFORE_USERNAME = (
    "character_names",
    "profession_ids",
    "trait_ids",
    "stat_names",
    "appearance",
    "clothing_types",
    "clothing_custom_names",
    "inventory_strings",
    "recipe_ids",
)

PLAYER_RULES: tuple[FieldRule, ...] = (
    StringRule("character_names", _is_character_name, cap=10),
    StringRule("profession_ids", _is_profession_id),
    StringRule("trait_ids", _is_trait_id, excludes=("profession_ids",), cap=50),
    StringRule("stat_names", _is_stat_name),
    StringRule("appearance", _is_appearance_token, cap=30),
    StringRule("clothing_types", _is_clothing_type, cap=50),
    StringRule(
        "clothing_custom_names",
        _is_clothing_custom_name,
        excludes=("character_names",),
        cap=20,
    ),
    StringRule("inventory_strings", _is_inventory_string, cap=30),
    StringRule("recipe_ids", _is_recipe_id, cap=100),
    StringRule(
        "username_from_buffer",
        _is_username_token,
        excludes=_PLAYER_BUCKETS_BEFORE_USERNAME,
        first_only=True,
    ),
)
