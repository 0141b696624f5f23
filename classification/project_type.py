"""
classification/project_type.py
Maps cost-allocation text (description, cost element) to a ProjectType.
"""
from typing import Any, Optional

from classification.enums import ProjectType
from reference_data.keywords import PROJECT_TYPE_KEYWORDS

_BY_VALUE = {pt.value.lower(): pt for pt in ProjectType}


def _text(value: Any) -> str:
    return value.strip().lower() if isinstance(value, str) else ""


def classify_project_type(
    description: Optional[str] = None,
    cost_element: Optional[str] = None,
    lc_number: Optional[str] = None,
    explicit_type: Optional[str] = None,
) -> ProjectType:
    """
    Explicit data wins: a value already in the closed set is returned as-is.
    Otherwise the keyword groups are tried in priority order over
    description + cost element.  The LC number is accepted for call-site
    symmetry but carries no keywords of its own.
    """
    explicit = _BY_VALUE.get(_text(explicit_type))
    if explicit is not None:
        return explicit

    haystack = f"{_text(description)} {_text(cost_element)}".strip()
    if not haystack:
        return ProjectType.OTHER

    for project_type, keywords in PROJECT_TYPE_KEYWORDS:
        if any(kw in haystack for kw in keywords):
            return project_type
    return ProjectType.OTHER
