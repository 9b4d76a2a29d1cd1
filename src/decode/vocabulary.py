"""Fixed vocabularies recognized inside save blobs.

This module holds the closed identifier sets the classifier and skill
scanners match against. Sets are kept as frozensets for membership and
tuples where scan order matters.
"""

from __future__ import annotations

KNOWN_SKILL_NAMES: tuple[str, ...] = (
    "Strength",
    "Fitness",
    "Sneak",
    "Nimble",
    "Lightfoot",
    "Sprinting",
    "Voice",
    "Carpentry",
    "Cooking",
    "Farming",
    "Fishing",
    "Trapping",
    "Electrical",
    "Metalworking",
    "Mechanics",
    "Tailoring",
    "Aiming",
    "Reloading",
    "Blunt",
    "Axe",
    "SmallBlade",
    "LongBlade",
    "SmallBlunt",
    "Spear",
    "Maintenance",
    "FirstAid",
)
SKILL_NAME_SET = frozenset(KNOWN_SKILL_NAMES)

VEHICLE_PART_NAMES: tuple[str, ...] = (
    "TrunkDoor",
    "Engine",
    "Battery",
    "GasTank",
    "Muffler",
    "Windshield",
    "Seat",
    "Door",
    "Tire",
    "Brake",
    "GloveBox",
    "Radio",
    "customName",
)

VEHICLE_STRUCTURAL_KEYWORDS = frozenset(
    {
        "base",
        "customname",
        "tooltip",
        "contentamount",
        "trunk",
        "seat",
        "door",
        "engine",
        "battery",
        "gastank",
        "muffler",
        "windshield",
        "brake",
        "tire",
        "radio",
        "glovebox",
    }
)

PROFESSION_IDS = frozenset(
    {
        "base:unemployed",
        "base:fireofficer",
        "base:policeofficer",
        "base:parkranger",
        "base:constructionworker",
        "base:securityguard",
        "base:carpenter",
        "base:burglar",
        "base:chef",
        "base:repairman",
        "base:farmer",
        "base:fisherman",
        "base:doctor",
        "base:veteran",
        "base:nurse",
        "base:lumberjack",
        "base:fitnessinstructor",
        "base:burgerflipper",
        "base:electrician",
        "base:engineer",
        "base:metalworker",
        "base:mechanics",
    }
)

CLOTHING_SLOT_IDS = frozenset(
    {
        "base:hat",
        "base:fullhat",
        "base:mask",
        "base:maskeyes",
        "base:maskfull",
        "base:eyes",
        "base:lefteye",
        "base:righteye",
        "base:ears",
        "base:eartop",
        "base:nose",
        "base:neck",
        "base:necklace",
        "base:necklace_long",
        "base:scarf",
        "base:jacket",
        "base:jacket_bulky",
        "base:jacketsuit",
        "base:jacket_down",
        "base:fulltop",
        "base:sweater",
        "base:sweaterhat",
        "base:shirt",
        "base:tshirt",
        "base:shortsleeveshirt",
        "base:tanktop",
        "base:torso1",
        "base:torso1legs1",
        "base:torsoextra",
        "base:torsoextravest",
        "base:belt",
        "base:beltextra",
        "base:bellybutton",
        "base:fannypackfront",
        "base:fannypackback",
        "base:holster",
        "base:ammostrap",
        "base:back",
        "base:pants",
        "base:skirt",
        "base:legs1",
        "base:dress",
        "base:bathrobe",
        "base:boilersuit",
        "base:fullsuit",
        "base:fullsuithead",
        "base:jumpsuit",
        "base:underwear",
        "base:underweartop",
        "base:underwearbottom",
        "base:underwearextra1",
        "base:underwearextra2",
        "base:socks",
        "base:shoes",
        "base:hands",
        "base:lefthand",
        "base:righthand",
        "base:leftwrist",
        "base:rightwrist",
        "base:left_ringfinger",
        "base:right_ringfinger",
        "base:left_middlefinger",
        "base:right_middlefinger",
        "base:wound",
        "base:bandage",
    }
)

APPEARANCE_KEYWORDS: tuple[str, ...] = (
    "PointyChin",
    "ShortAfroCurly",
    "LongAfro",
    "Bald",
    "Stubble",
    "FullBeard",
    "Goatee",
    "Moustache",
)

PLAYER_RESIDUAL_STOPLIST = frozenset(
    {
        "base",
        "tooltip",
        "contentamount",
        "strength",
        "fitness",
        "sneak",
        "nimble",
        "make",
        "id card",
        "key ring",
    }
)
