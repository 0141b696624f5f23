"""
filters/predicates.py
Total predicates over possibly-missing record fields.

None of these raise on record data: a missing or unreadable date, a blank
location or an unknown department simply fails to match a selection (and
matches when nothing is selected).
"""
import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Union

from classification.enums import VoyagePurpose
from classification.fluids import fluid_department
from classification.locations import locations_match
from classification.project_type import classify_project_type
from config.settings import settings
from records.dates import parse_date
from records.models import BulkAction, CostAllocation, VoyageListEntry

_MONTHS: dict[str, int] = {}
for _i in range(1, 13):
    _MONTHS[calendar.month_name[_i].lower()] = _i
    _MONTHS[calendar.month_abbr[_i].lower()] = _i
_MONTHS["sept"] = 9

_SPLIT = re.compile(r"[\s\-/.]+")


@dataclass(frozen=True)
class Period:
    year: Optional[int] = None
    month: Optional[int] = None        # 1-12
    ytd: bool = False
    as_of: Optional[date] = None

    @property
    def is_selected(self) -> bool:
        return self.ytd or self.year is not None or self.month is not None

    def ytd_cutoff(self) -> date:
        as_of = self.as_of or date.today()
        year = self.year or as_of.year
        return shift_years(as_of, year - as_of.year)


def shift_years(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        # 29 February in a non-leap target year
        return day.replace(year=day.year + years, day=28)


def is_all(value: Any) -> bool:
    """True for the "everything" sentinels: None, "", "All", "All Months", ..."""
    if value is None:
        return True
    return isinstance(value, str) and value.strip().lower() in settings.all_sentinels


# ── Month parsing ─────────────────────────────────────────────────────────────

def parse_month_year(value: Any) -> tuple[Optional[int], Optional[int]]:
    """
    Accepts 3, "3", "March", "Mar", "Mar-25", "March 2024", "03-25".
    Returns (month, year-or-None).  Sentinels give (None, None).

    Raises:
        ValueError: when the value is not a recognisable month.
    """
    if is_all(value):
        return None, None
    if isinstance(value, bool):
        raise ValueError(f"Unrecognised month: {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Unrecognised month: {value!r}")
        value = int(value)
    if isinstance(value, int):
        if 1 <= value <= 12:
            return value, None
        raise ValueError(f"Month out of range: {value}")

    parts = [p for p in _SPLIT.split(str(value).strip().lower()) if p]
    if not parts:
        raise ValueError(f"Unrecognised month: {value!r}")
    head, rest = parts[0], parts[1:]
    if head.isdigit():
        month = int(head)
        if not 1 <= month <= 12:
            raise ValueError(f"Month out of range: {value!r}")
    elif head in _MONTHS:
        month = _MONTHS[head]
    else:
        raise ValueError(f"Unrecognised month: {value!r}")

    year = None
    if rest:
        if not rest[0].isdigit():
            raise ValueError(f"Unrecognised year in month value: {value!r}")
        year = int(rest[0])
        if year < 100:
            year += 2000
    return month, year


def parse_month(value: Any) -> Optional[int]:
    return parse_month_year(value)[0]


# ── Predicates ────────────────────────────────────────────────────────────────

def matches_period(value: Any, period: Optional[Period]) -> bool:
    if period is None or not period.is_selected:
        return True
    when = value if isinstance(value, datetime) else parse_date(value)
    if when is None:
        return False

    if period.ytd:
        cutoff = period.ytd_cutoff()
        return when.year == cutoff.year and when.date() <= cutoff
    if period.year is not None and when.year != period.year:
        return False
    if period.month is not None and when.month != period.month:
        return False
    return True


def matches_location(
    location: Union[str, Iterable[str], None],
    selected: Optional[str],
    alias_table: Optional[Mapping[str, str]] = None,
) -> bool:
    if is_all(selected):
        return True
    if location is None:
        return False
    candidates = (location,) if isinstance(location, str) else tuple(location)
    return any(locations_match(candidate, selected, alias_table) for candidate in candidates)


def matches_department(department: Optional[str], selected: Optional[str]) -> bool:
    if is_all(selected):
        return True
    if not isinstance(department, str):
        return False
    return department.strip().lower() == selected.strip().lower()


def record_department(record: Any) -> str:
    """Bulk actions carry no department column; it is derived from the fluid."""
    if isinstance(record, BulkAction):
        return fluid_department(record)
    return getattr(record, "scope_department", "") or ""


def record_departments(record: Any) -> tuple[str, ...]:
    """Mixed-purpose voyages count toward both Drilling and Production."""
    if isinstance(record, VoyageListEntry) and record.voyage_purpose is VoyagePurpose.MIXED:
        return ("Drilling", "Production", VoyagePurpose.MIXED.value)
    return (record_department(record),)


def record_project_type(record: CostAllocation) -> str:
    return classify_project_type(
        record.description, record.cost_element, record.lc_number, record.project_type,
    ).value


def matches_scope(record: Any, scope: Any, alias_table: Optional[Mapping[str, str]] = None) -> bool:
    """Period AND department AND location (AND project type for cost allocations)."""
    if scope is None:
        return True
    if alias_table is None:
        from reference_data.store import reference_store
        alias_table = reference_store.alias_table()

    if not matches_period(getattr(record, "scope_date", None), scope.period):
        return False
    if not any(matches_department(d, scope.department) for d in record_departments(record)):
        return False
    if not matches_location(getattr(record, "scope_locations", ()), scope.location, alias_table):
        return False
    if scope.project_type is not None and isinstance(record, CostAllocation):
        return record_project_type(record) == scope.project_type.value
    return True


def filter_records(records: Iterable[Any], scope: Any, alias_table: Optional[Mapping[str, str]] = None) -> list:
    if alias_table is None:
        from reference_data.store import reference_store
        alias_table = reference_store.alias_table()
    return [r for r in records if matches_scope(r, scope, alias_table)]
