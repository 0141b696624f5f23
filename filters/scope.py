"""
filters/scope.py
AggregationScope: the filter parameters a dashboard view passes to the engine.
"""
from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from classification.enums import ProjectType
from filters.predicates import Period, is_all, parse_month_year, shift_years


class AggregationScope(BaseModel):
    """
    {month?, year?, department?, location?, project_type?}

    Month accepts anything parse_month_year understands; a month string
    that carries its own year ("Mar-25") fills `year` when it is not given.
    "YTD" as the month selects January 1 through `as_of` of the year.
    `as_of` is fixed when the scope is built so that re-running an
    aggregation gives the same answer.
    """
    model_config = ConfigDict(frozen=True)

    month:        Optional[int]         = Field(default=None, ge=1, le=12)
    year:         Optional[int]         = Field(default=None, ge=1900, le=2200)
    ytd:          bool                  = False
    department:   Optional[str]         = None
    location:     Optional[str]         = None
    project_type: Optional[ProjectType] = None
    as_of:        date                  = Field(default_factory=date.today)

    @model_validator(mode="before")
    @classmethod
    def _split_month(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        month = data.get("month")
        if isinstance(month, str) and month.strip().lower() == "ytd":
            data["month"] = None
            data["ytd"] = True
        elif month is not None and not isinstance(month, int):
            parsed_month, parsed_year = parse_month_year(month)
            data["month"] = parsed_month
            if parsed_year is not None and data.get("year") in (None, ""):
                data["year"] = parsed_year
        if isinstance(data.get("year"), str) and is_all(data["year"]):
            data["year"] = None
        return data

    @field_validator("department", "location", mode="before")
    @classmethod
    def _all_is_none(cls, v: Any) -> Optional[str]:
        if is_all(v):
            return None
        return str(v).strip()

    @field_validator("project_type", mode="before")
    @classmethod
    def _project_type(cls, v: Any) -> Optional[ProjectType]:
        if isinstance(v, ProjectType) or is_all(v):
            return v or None
        text = str(v).strip().lower()
        for pt in ProjectType:
            if pt.value.lower() == text:
                return pt
        raise ValueError(f"Unknown project type: {v!r}")

    # ── Derived ───────────────────────────────────────────────────────────────

    @property
    def period(self) -> Period:
        return Period(year=self.year, month=self.month, ytd=self.ytd, as_of=self.as_of)

    @property
    def is_all_department(self) -> bool:
        return self.department is None

    @property
    def is_all_location(self) -> bool:
        return self.location is None

    def cache_key(self) -> tuple:
        return (
            self.month, self.year, self.ytd,
            (self.department or "").lower(),
            (self.location or "").lower(),
            self.project_type.value if self.project_type else None,
            self.as_of.isoformat() if self.ytd else None,
        )

    def label(self) -> str:
        if self.ytd:
            when = f"YTD {self.year or self.as_of.year}"
        elif self.month and self.year:
            when = f"{self.year}-{self.month:02d}"
        elif self.month:
            when = f"month {self.month}"
        elif self.year:
            when = str(self.year)
        else:
            when = "all time"
        return " / ".join(p for p in (when, self.department, self.location) if p)


def previous_scope(scope: AggregationScope) -> Optional[AggregationScope]:
    """
    The comparison window one step back:
      month       -> previous month (January -> December of the prior year)
      YTD         -> same Jan-1..as_of window of the prior year
      year only   -> prior year
      no period   -> None
    """
    if scope.ytd:
        year = (scope.year or scope.as_of.year) - 1
        return scope.model_copy(update={"year": year, "as_of": shift_years(scope.as_of, -1)})
    if scope.month is not None:
        if scope.month == 1:
            year = scope.year - 1 if scope.year is not None else None
            return scope.model_copy(update={"month": 12, "year": year})
        return scope.model_copy(update={"month": scope.month - 1})
    if scope.year is not None:
        return scope.model_copy(update={"year": scope.year - 1})
    return None
