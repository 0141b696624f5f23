"""
reference_data/keywords.py
Keyword tables for the free-text classifiers.

These tables are configuration data.  Order matters wherever a list of
(category, keywords) pairs is given: the first category whose keyword
appears in the text wins.  Bump KEYWORD_TABLE_VERSION whenever an entry
changes so downstream reports can tell which rules produced a number.
"""
from classification.enums import (
    ActivityCategory,
    ProjectType,
    VesselType,
)

KEYWORD_TABLE_VERSION = "2025.06.1"


# ── Project types (cost allocation lines) ─────────────────────────────────────
# P&A before Completions before Drilling: "workover drilling" is a completion.
PROJECT_TYPE_KEYWORDS: list[tuple[ProjectType, tuple[str, ...]]] = [
    (ProjectType.P_AND_A, ("p&a", "abandon", "plug")),
    (ProjectType.COMPLETIONS, (
        "completion", "fracturing", "perforation", "workover", "stimulation", "acidizing",
    )),
    (ProjectType.DRILLING, (
        "drill", "spud", "cementing", "casing", "mud", "logging", "wireline", "bha",
    )),
    (ProjectType.PRODUCTION, (
        "production", "facility", "platform", "processing", "separation", "export",
    )),
    (ProjectType.MAINTENANCE, ("maintenance", "repair", "inspection", "overhaul", "upgrade")),
    (ProjectType.OPERATOR_SHARING, ("operator", "sharing", "joint", "partner", "alliance")),
]


# ── Vessel types (fallback when the vessel is not in the classification table) ─
# Matched against " <lower-cased name> " so leading/trailing spaces act as word edges.
VESSEL_TYPE_KEYWORDS: list[tuple[VesselType, tuple[str, ...]]] = [
    (VesselType.AHTS, (" ahts ", "anchor handl")),
    (VesselType.MSV, (" msv ", "multi-purpose", "multipurpose")),
    (VesselType.PSV, (" psv ", "platform supply")),
    (VesselType.FSV, (" fast ", " fsv ", " crew ")),
    (VesselType.SUPPORT, (" lab ", " support ")),
    (VesselType.OSV, (" osv ", " hos ", " harvey ", " candies ")),
]


# ── Bulk fluids ───────────────────────────────────────────────────────────────
DRILLING_FLUID_KEYWORDS: tuple[str, ...] = (
    "wbm", "water based mud",
    "sbm", "synthetic based mud",
    "obm", "oil based mud",
    "premix", "pre-mix",
    "baseoil", "base oil", "base-oil",
    "drilling mud", "drilling fluid",
    "mud", "drill fluid",
)

COMPLETION_FLUID_KEYWORDS: tuple[str, ...] = (
    "calcium bromide", "cabr2", "ca br2",
    "calcium chloride", "cacl2", "ca cl2",
    "sodium chloride", "nacl", "na cl",
    "kcl", "potassium chloride",
    "clayfix", "clay fix",
    "completion fluid", "completion brine", "brine",
    "intervention fluid", "workover fluid",
)

PRODUCTION_FLUID_KEYWORDS: tuple[str, ...] = (
    "asphaltene inhibitor", "asphaltene",
    "calcium nitrate", "petrocare 45", "petrocare",
    "methanol",
    "xylene",
    "corrosion inhibitor",
    "scale inhibitor",
    "ldhi", "low dosage hydrate inhibitor",
    "subsea 525", "subsea525",
    "chemical",
)

DIESEL_KEYWORDS: tuple[str, ...] = ("diesel", "fuel", "marine gas oil", "mgo")

UTILITY_KEYWORDS: tuple[str, ...] = ("water",)

PETROLEUM_KEYWORDS: tuple[str, ...] = ("oil", "fuel", "diesel")

# (specific type, keywords): first hit names the specific fluid
DRILLING_SPECIFIC_TYPES: list[tuple[str, tuple[str, ...]]] = [
    ("WBM", ("wbm", "water based")),
    ("SBM", ("sbm", "synthetic")),
    ("OBM", ("obm", "oil based")),
    ("Premix", ("premix", "pre-mix")),
    ("Baseoil", ("baseoil", "base oil", "base-oil")),
]

COMPLETION_SPECIFIC_TYPES: list[tuple[str, tuple[str, ...]]] = [
    ("Calcium Chloride/Calcium Bromide", ("calcium chloride/calcium bromide", "cacl2/cabr2")),
    ("Calcium Bromide", ("calcium bromide", "cabr")),
    ("Calcium Chloride", ("calcium chloride", "cacl")),
    ("Sodium Chloride", ("sodium chloride", "nacl")),
    ("KCL", ("kcl", "potassium")),
    ("Clayfix", ("clayfix", "clay fix")),
]

PRODUCTION_SPECIFIC_TYPES: list[tuple[str, tuple[str, ...]]] = [
    ("Asphaltene Inhibitor", ("asphaltene",)),
    ("Calcium Nitrate (Petrocare 45)", ("calcium nitrate", "petrocare")),
    ("Methanol", ("methanol",)),
    ("Xylene", ("xylene",)),
    ("Corrosion Inhibitor", ("corrosion inhibitor",)),
    ("Scale Inhibitor", ("scale inhibitor",)),
    ("LDHI", ("ldhi", "low dosage hydrate")),
    ("Subsea 525", ("subsea 525", "subsea525")),
]


# ── Load / offload actions ────────────────────────────────────────────────────
OFFLOAD_ACTION_KEYWORDS: tuple[str, ...] = ("offload", "off-load", "off load", "discharge", "deliver")
LOAD_ACTION_KEYWORDS: tuple[str, ...] = ("load",)
NON_LOAD_ACTION_KEYWORDS: tuple[str, ...] = ("backload", "back-load", "back load")


# ── Voyage event activity ─────────────────────────────────────────────────────
ACTIVITY_KEYWORDS: list[tuple[ActivityCategory, tuple[str, ...]]] = [
    (ActivityCategory.NON_PRODUCTIVE, (
        "waiting", "weather", "downtime", "breakdown", "repair", "closed", "standby",
    )),
    (ActivityCategory.PRODUCTIVE, (
        "cargo", "transit", "maneuver", "manoeuvr", "loading", "discharg", "bulk",
        "tank cleaning", "mobiliz", "rov", "crew change",
    )),
]


# ── Locations ─────────────────────────────────────────────────────────────────
# Tokens removed (as whole words) before alias lookup.
LOCATION_STRIP_TOKENS: tuple[str, ...] = (
    "(drilling)", "(production)", "(drill/prod)", "drilling", "production", "pdq", "pq", "prod",
)

# normalized variant -> canonical normalized name
LOCATION_ALIASES: dict[str, str] = {
    "thunder horse":    "thunder horse",
    "thunderhorse":     "thunder horse",
    "th":               "thunder horse",
    "mad dog":          "mad dog",
    "maddog":           "mad dog",
    "md":               "mad dog",
    "atlantis":         "atlantis",
    "na kika":          "na kika",
    "nakika":           "na kika",
    "ocean blackhornet": "ocean blackhornet",
    "ocean black hornet": "ocean blackhornet",
    "blackhornet":      "ocean blackhornet",
    "ocean blacklion":  "ocean blacklion",
    "ocean black lion": "ocean blacklion",
    "blacklion":        "ocean blacklion",
    "stena icemax":     "stena icemax",
    "icemax":           "stena icemax",
    "deepwater invictus": "deepwater invictus",
    "invictus":         "deepwater invictus",
    "port fourchon":    "fourchon",
    "fourchon":         "fourchon",
    "c-constructor":    "c-constructor",
    "c constructor":    "c-constructor",
}

OFFSHORE_KEYWORDS: tuple[str, ...] = (
    "deepwater", "thunder horse", "mad dog", "atlantis", "na kika",
    "devil's tower", "devils tower", "blind faith", "great white", "cascade",
    "chinook", "st. malo", "pompano", "villa", "stena", "icemax", "argos",
    "ocean blackhornet", "ocean blacklion", "island venture", "auriga",
    "island intervention", "c-constructor",
)

BASE_KEYWORDS: tuple[str, ...] = ("fourchon", "galveston", "venice", "port ")
