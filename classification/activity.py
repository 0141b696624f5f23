"""
classification/activity.py
Voyage event activity (Productive / Non-Productive) and bulk action direction.
"""
from typing import Any, Optional

from classification.enums import ActionKind, ActivityCategory
from reference_data.keywords import (
    ACTIVITY_KEYWORDS,
    LOAD_ACTION_KEYWORDS,
    NON_LOAD_ACTION_KEYWORDS,
    OFFLOAD_ACTION_KEYWORDS,
)

_EXPLICIT = {
    "productive":     ActivityCategory.PRODUCTIVE,
    "non-productive": ActivityCategory.NON_PRODUCTIVE,
    "non productive": ActivityCategory.NON_PRODUCTIVE,
    "nonproductive":  ActivityCategory.NON_PRODUCTIVE,
    "npt":            ActivityCategory.NON_PRODUCTIVE,
}


def _lower(value: Any) -> str:
    return value.strip().lower() if isinstance(value, str) else ""


def classify_activity(
    parent_event: Optional[str],
    event: Optional[str] = None,
    explicit: Optional[Any] = None,
) -> ActivityCategory:
    """Every event lands in exactly one of the two buckets; unknown text is Non-Productive."""
    if isinstance(explicit, ActivityCategory):
        return explicit
    category = _EXPLICIT.get(_lower(explicit))
    if category is not None:
        return category

    text = f"{_lower(parent_event)} {_lower(event)}".strip()
    for candidate, keywords in ACTIVITY_KEYWORDS:
        if any(kw in text for kw in keywords):
            return candidate
    return ActivityCategory.NON_PRODUCTIVE


def classify_action(action: Optional[str]) -> ActionKind:
    text = _lower(action)
    if not text:
        return ActionKind.OTHER
    if any(kw in text for kw in OFFLOAD_ACTION_KEYWORDS):
        return ActionKind.OFFLOAD
    if any(kw in text for kw in NON_LOAD_ACTION_KEYWORDS):
        return ActionKind.OTHER
    if any(kw in text for kw in LOAD_ACTION_KEYWORDS):
        return ActionKind.LOAD
    return ActionKind.OTHER
