"""
classification/fluids.py
Bulk fluid classification.

Two views of the same text:
  classify_bulk_fluid -> reporting category + specific product name
  classify_fluid      -> the coarse FluidKind used for department scoping
"""
from dataclasses import dataclass
from typing import Any, Optional

from classification.enums import BulkFluidCategory, FluidKind
from reference_data.keywords import (
    COMPLETION_FLUID_KEYWORDS,
    COMPLETION_SPECIFIC_TYPES,
    DIESEL_KEYWORDS,
    DRILLING_FLUID_KEYWORDS,
    DRILLING_SPECIFIC_TYPES,
    PETROLEUM_KEYWORDS,
    PRODUCTION_FLUID_KEYWORDS,
    PRODUCTION_SPECIFIC_TYPES,
    UTILITY_KEYWORDS,
)


@dataclass(frozen=True)
class FluidClassification:
    category: BulkFluidCategory
    specific_type: str = ""
    is_drilling_fluid: bool = False
    is_completion_fluid: bool = False

    @property
    def is_production_chemical(self) -> bool:
        return self.category is BulkFluidCategory.PRODUCTION_CHEMICAL


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(kw in text for kw in keywords)


def _specific(text: str, table: list[tuple[str, tuple[str, ...]]], default: str) -> str:
    for name, keywords in table:
        if _contains_any(text, keywords):
            return name
    return default


def _combined(*parts: Any) -> str:
    return " ".join(p.strip().lower() for p in parts if isinstance(p, str) and p.strip())


def classify_bulk_fluid(bulk_type: Optional[str], description: Optional[str] = None) -> FluidClassification:
    text = _combined(bulk_type, description)
    if not text:
        return FluidClassification(BulkFluidCategory.OTHER)

    if _contains_any(text, DRILLING_FLUID_KEYWORDS):
        return FluidClassification(
            BulkFluidCategory.DRILLING,
            _specific(text, DRILLING_SPECIFIC_TYPES, "Drilling Fluid"),
            is_drilling_fluid=True,
        )
    if _contains_any(text, COMPLETION_FLUID_KEYWORDS):
        return FluidClassification(
            BulkFluidCategory.COMPLETION_INTERVENTION,
            _specific(text, COMPLETION_SPECIFIC_TYPES, "Completion Fluid"),
            is_completion_fluid=True,
        )
    if _contains_any(text, PRODUCTION_FLUID_KEYWORDS):
        return FluidClassification(
            BulkFluidCategory.PRODUCTION_CHEMICAL,
            _specific(text, PRODUCTION_SPECIFIC_TYPES, "Production Chemical"),
        )
    if _contains_any(text, UTILITY_KEYWORDS):
        return FluidClassification(BulkFluidCategory.UTILITY, "Water")
    if _contains_any(text, PETROLEUM_KEYWORDS):
        return FluidClassification(BulkFluidCategory.PETROLEUM, "Diesel/Fuel")
    return FluidClassification(BulkFluidCategory.OTHER, (bulk_type or "").strip())


def classify_fluid(action: Any) -> FluidKind:
    """
    Coarse fluid kind for a bulk action.  Upstream flags win; the keyword
    tables are only consulted when neither flag is set.
    """
    if getattr(action, "is_drilling_fluid", False):
        return FluidKind.DRILLING
    if getattr(action, "is_completion_fluid", False):
        return FluidKind.COMPLETION

    text = _combined(
        getattr(action, "bulk_type", ""),
        getattr(action, "bulk_description", ""),
        getattr(action, "fluid_specific_type", ""),
    )
    if not text:
        return FluidKind.NONE
    if _contains_any(text, DRILLING_FLUID_KEYWORDS):
        return FluidKind.DRILLING
    if _contains_any(text, COMPLETION_FLUID_KEYWORDS):
        return FluidKind.COMPLETION
    if _contains_any(text, PRODUCTION_FLUID_KEYWORDS):
        return FluidKind.PRODUCTION_CHEMICAL
    if _contains_any(text, DIESEL_KEYWORDS):
        return FluidKind.DIESEL
    return FluidKind.NONE


def fluid_department(action: Any) -> str:
    """Drilling owns drilling and completion fluids; everything else is Production."""
    if classify_fluid(action) in (FluidKind.DRILLING, FluidKind.COMPLETION):
        return "Drilling"
    return "Production"
