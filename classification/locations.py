"""
classification/locations.py
Location name normalisation and matching.

Facility names arrive in many spellings ("Thunder Horse PDQ",
"Thunder Horse Prod", "Thunder Horse (Production)").  Everything that
compares locations goes through normalize_location first.
"""
import re
from typing import Any, Mapping, Optional

from classification.enums import MovementType
from reference_data.keywords import (
    BASE_KEYWORDS,
    LOCATION_ALIASES,
    LOCATION_STRIP_TOKENS,
    OFFSHORE_KEYWORDS,
)

_PAREN_TOKENS = [t for t in LOCATION_STRIP_TOKENS if t.startswith("(")]
_WORD_TOKENS = [t for t in LOCATION_STRIP_TOKENS if not t.startswith("(")]

_PAREN_RE = re.compile("|".join(re.escape(t) for t in _PAREN_TOKENS))
_WORD_RE = re.compile(r"\b(?:" + "|".join(re.escape(t) for t in _WORD_TOKENS) + r")\b")
_QUOTES_RE = re.compile(r"[\"`]")
_SPACE_RE = re.compile(r"\s+")


def strip_location(name: Any) -> str:
    """Lower-case, drop qualifier tokens and quotes, collapse whitespace.  No aliasing."""
    if not isinstance(name, str):
        return ""
    text = _QUOTES_RE.sub("", name.lower())
    text = _PAREN_RE.sub(" ", text)
    text = _WORD_RE.sub(" ", text)
    text = _SPACE_RE.sub(" ", text)
    return text.strip(" -/,")


def normalize_location(name: Any, alias_table: Optional[Mapping[str, str]] = None) -> str:
    stripped = strip_location(name)
    if not stripped:
        return ""
    aliases = LOCATION_ALIASES if alias_table is None else alias_table
    return aliases.get(stripped, stripped)


def locations_match(a: Any, b: Any, alias_table: Optional[Mapping[str, str]] = None) -> bool:
    """Equal after normalisation, or one normalised name contains the other.  Blank never matches."""
    na = normalize_location(a, alias_table)
    nb = normalize_location(b, alias_table)
    if not na or not nb:
        return False
    return na == nb or na in nb or nb in na


def is_offshore_location(name: Any) -> bool:
    if not isinstance(name, str) or not name.strip():
        return False
    lowered = name.lower()
    if any(kw in lowered for kw in OFFSHORE_KEYWORDS):
        return True
    normalized = normalize_location(name)
    return any(kw in normalized for kw in OFFSHORE_KEYWORDS)


def is_base_location(name: Any) -> bool:
    if not isinstance(name, str):
        return False
    lowered = f"{name.lower()} "
    return any(kw in lowered for kw in BASE_KEYWORDS)


def classify_movement_type(origin: Any, destination: Any) -> MovementType:
    norm_origin = normalize_location(origin)
    norm_destination = normalize_location(destination)

    if norm_origin and norm_origin == norm_destination:
        return MovementType.VESSEL_TO_FACILITY
    if "fourchon" in norm_origin and is_offshore_location(destination):
        return MovementType.FOURCHON_TO_OFFSHORE
    if is_offshore_location(origin) and is_offshore_location(destination):
        return MovementType.OFFSHORE_TO_OFFSHORE
    return MovementType.OTHER
