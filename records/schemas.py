"""
records/schemas.py
Pydantic row models for the ingestion boundary.

Raw rows arrive as dicts with camelCase keys (snake_case is accepted too)
and loosely typed values: numbers as strings, blanks, NaN, Excel serial
dates.  Every row model coerces leniently and then hands back the frozen
record dataclass from records.models, so nothing past this module ever
sees a raw value.

Coercion rules:
  - missing / unparseable numerics -> 0.0 (debug log), never NaN
  - hours, tonnages, lifts and volumes clamp to >= 0
  - dates that cannot be read -> None (debug log)
  - bulk volumes given in gallons are converted to barrels here, once
"""
import math
import re
from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
)
from pydantic.alias_generators import to_camel

from classification.activity import classify_activity
from classification.enums import VoyagePurpose
from monitoring import get_logger
from records.dates import parse_date
from records.models import (
    BulkAction,
    CostAllocation,
    LogisticsDataset,
    VesselManifest,
    VoyageEvent,
    VoyageListEntry,
)
from records.units import gallons_to_barrels

log = get_logger(__name__)

_LOCATION_SPLIT = re.compile(r"\s*(?:->|→|>|,)\s*")
_TRUE_STRINGS = {"true", "yes", "y", "1", "t"}


# ── Field coercers ────────────────────────────────────────────────────────────

def _coerce_number(value: Any, info: ValidationInfo) -> float:
    if value is None:
        number = None
    elif isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        cleaned = value.strip().replace(",", "").replace("$", "")
        try:
            number = float(cleaned) if cleaned else None
        except ValueError:
            number = None
    else:
        number = None

    if number is None or math.isnan(number) or math.isinf(number):
        if value not in (None, ""):
            log.debug("Unreadable numeric defaulted to 0", field=info.field_name, value=repr(value))
        return 0.0
    return number


def _coerce_non_negative(value: Any, info: ValidationInfo) -> float:
    number = _coerce_number(value, info)
    if number < 0:
        log.debug("Negative measure clamped to 0", field=info.field_name, value=number)
        return 0.0
    return number


def _coerce_optional_number(value: Any, info: ValidationInfo) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return _coerce_number(value, info)


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _coerce_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value) if value is not None else False


def _coerce_date(value: Any, info: ValidationInfo) -> Optional[datetime]:
    parsed = parse_date(value)
    if parsed is None and value not in (None, ""):
        log.debug("Unparseable date treated as missing", field=info.field_name, value=repr(value))
    return parsed


Number = Annotated[float, BeforeValidator(_coerce_number)]
Measure = Annotated[float, BeforeValidator(_coerce_non_negative)]
OptionalNumber = Annotated[Optional[float], BeforeValidator(_coerce_optional_number)]
Text = Annotated[str, BeforeValidator(_coerce_text)]
Flag = Annotated[bool, BeforeValidator(_coerce_flag)]
DateField = Annotated[Optional[datetime], BeforeValidator(_coerce_date)]


def split_locations(locations: str) -> tuple[str, ...]:
    """Split a delimited voyage path such as 'Fourchon -> Mad Dog -> Atlantis'."""
    return tuple(part for part in _LOCATION_SPLIT.split(locations or "") if part)


def coerce_voyage_purpose(value: Any) -> VoyagePurpose:
    text = _coerce_text(value).lower()
    for purpose in VoyagePurpose:
        if purpose.value.lower() == text:
            return purpose
    return VoyagePurpose.OTHER


# ── Row models ────────────────────────────────────────────────────────────────

class _Row(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class VoyageEventRow(_Row):
    event_date:         DateField      = None
    department:         Text           = ""
    location:           Text           = ""
    mapped_location:    Text           = ""
    vessel:             Text           = ""
    voyage_number:      Text           = ""
    parent_event:       Text           = ""
    event:              Text           = ""
    activity_category:  Text           = ""
    port_type:          Text           = ""
    final_hours:        Measure        = 0.0
    lc_number:          Text           = ""
    lc_percentage:      Measure        = 0.0
    vessel_cost_total:  OptionalNumber = None

    def to_record(self) -> VoyageEvent:
        return VoyageEvent(
            event_date=self.event_date,
            department=self.department,
            location=self.location,
            mapped_location=self.mapped_location or self.location,
            vessel=self.vessel,
            voyage_number=self.voyage_number,
            parent_event=self.parent_event,
            event=self.event,
            activity_category=classify_activity(self.parent_event, self.event, self.activity_category),
            port_type=self.port_type.lower(),
            final_hours=self.final_hours,
            lc_number=self.lc_number,
            lc_percentage=self.lc_percentage,
            vessel_cost_total=self.vessel_cost_total,
        )


class VesselManifestRow(_Row):
    manifest_date:     DateField = None
    manifest_number:   Text      = ""
    transporter:       Text      = ""
    final_department:  Text      = ""
    mapped_location:   Text      = ""
    offshore_location: Text      = ""
    cost_code:         Text      = ""
    deck_tons:         Measure   = 0.0
    rt_tons:           Measure   = 0.0
    lifts:             Measure   = 0.0
    wet_bulk_bbls:     Measure   = 0.0
    wet_bulk_gals:     Measure   = 0.0
    cargo_type:        Text      = ""
    remarks:           Text      = ""
    vessel_type:       Text      = ""

    def to_record(self) -> VesselManifest:
        return VesselManifest(**self.model_dump())


class CostAllocationRow(_Row):
    cost_allocation_date:    DateField      = None
    month_year:              Text           = ""
    lc_number:               Text           = Field(default="", validation_alias=AliasChoices("lcNumber", "lc_number", "LC Number"))
    rig_location:            Text           = ""
    location_reference:      Text           = ""
    department:              Text           = ""
    project_type:            Text           = ""
    cost_element:            Text           = ""
    description:             Text           = ""
    total_allocated_days:    Measure        = 0.0
    budgeted_vessel_cost:    OptionalNumber = None
    total_cost:              Number         = 0.0
    vessel_daily_rate_used:  Measure        = 0.0
    rig_type:                Text           = ""
    water_depth:             Measure        = 0.0

    def to_record(self) -> CostAllocation:
        values = self.model_dump()
        if values["cost_allocation_date"] is None and self.month_year:
            values["cost_allocation_date"] = parse_date(self.month_year) or _month_year_date(self.month_year)
        return CostAllocation(**values)


class BulkActionRow(_Row):
    action_id:                Text    = Field(default="", validation_alias=AliasChoices("id", "actionId", "action_id"))
    start_date:               DateField = None
    vessel_name:              Text    = ""
    bulk_type:                Text    = ""
    bulk_description:         Text    = ""
    fluid_specific_type:      Text    = ""
    action:                   Text    = ""
    volume_bbls:              Measure = 0.0
    volume_gals:              Measure = 0.0
    at_port:                  Text    = ""
    destination_port:         Text    = ""
    standardized_origin:      Text    = ""
    standardized_destination: Text    = ""
    production_platform:      Text    = ""
    port_type:                Text    = ""
    is_drilling_fluid:        Flag    = False
    is_completion_fluid:      Flag    = False
    is_return:                Flag    = False

    def to_record(self) -> BulkAction:
        values = self.model_dump(exclude={"volume_gals"})
        if not self.volume_bbls and self.volume_gals:
            values["volume_bbls"] = gallons_to_barrels(self.volume_gals)
        return BulkAction(**values)


class VoyageListRow(_Row):
    voyage_date:       DateField       = None
    start_date:        DateField       = None
    end_date:          DateField       = None
    vessel:            Text            = ""
    voyage_number:     Text            = ""
    voyage_purpose:    Text            = ""
    mission:           Text            = ""
    locations:         Text            = ""
    location_list:     Optional[list[Text]] = None
    duration_hours:    Measure         = 0.0
    stop_count:        Measure         = 0.0
    main_destination:  Text            = ""
    origin_port:       Text            = ""

    def to_record(self) -> VoyageListEntry:
        location_list = tuple(loc for loc in (self.location_list or ()) if loc) or split_locations(self.locations)
        return VoyageListEntry(
            voyage_date=self.voyage_date,
            start_date=self.start_date,
            end_date=self.end_date,
            vessel=self.vessel,
            voyage_number=self.voyage_number,
            voyage_purpose=coerce_voyage_purpose(self.voyage_purpose),
            mission=self.mission,
            locations=self.locations,
            location_list=location_list,
            duration_hours=self.duration_hours,
            stop_count=int(self.stop_count) or len(location_list),
            main_destination=self.main_destination or (location_list[-1] if location_list else ""),
            origin_port=self.origin_port or (location_list[0] if location_list else ""),
        )


def _month_year_date(month_year: str) -> Optional[datetime]:
    """'Mar-25' / 'March 2025' -> first of that month."""
    for fmt in ("%b-%y", "%B-%y", "%b %Y", "%B %Y", "%b-%Y", "%m-%y", "%m/%Y"):
        try:
            return datetime.strptime(month_year.strip(), fmt)
        except ValueError:
            continue
    return None


# ── Dataset assembly ──────────────────────────────────────────────────────────

# dataset attribute -> (accepted mapping keys, row model, record type)
_COLLECTIONS: dict[str, tuple[tuple[str, ...], type[_Row], type]] = {
    "voyage_events":    (("voyageEvents", "voyage_events"), VoyageEventRow, VoyageEvent),
    "vessel_manifests": (("vesselManifests", "vessel_manifests"), VesselManifestRow, VesselManifest),
    "cost_allocations": (("costAllocation", "costAllocations", "cost_allocations"), CostAllocationRow, CostAllocation),
    "bulk_actions":     (("bulkActions", "bulk_actions"), BulkActionRow, BulkAction),
    "voyage_list":      (("voyageList", "voyage_list"), VoyageListRow, VoyageListEntry),
}


def _rows_for(raw: dict[str, Any], keys: tuple[str, ...]) -> list[Any]:
    for key in keys:
        if raw.get(key):
            return list(raw[key])
    return []


def build_dataset(raw: dict[str, Any]) -> LogisticsDataset:
    """
    Build a LogisticsDataset from the ingestion layer's collection mapping.
    Rows that are already record instances pass through untouched; rows
    that are neither dicts nor records are skipped and counted.
    """
    collections: dict[str, tuple] = {}
    skipped: dict[str, int] = {}

    for attr, (keys, row_model, record_type) in _COLLECTIONS.items():
        records = []
        skipped[attr] = 0
        for row in _rows_for(raw or {}, keys):
            if isinstance(row, record_type):
                records.append(row)
                continue
            if not isinstance(row, dict):
                skipped[attr] += 1
                continue
            try:
                records.append(row_model.model_validate(row).to_record())
            except ValidationError as exc:
                skipped[attr] += 1
                log.warning("Row skipped", collection=attr, errors=exc.error_count())
        collections[attr] = tuple(records)

    dataset = LogisticsDataset(
        **collections,
        metadata={"skipped_rows": {k: v for k, v in skipped.items() if v}},
    )
    log.info("Dataset built", **dataset.counts(), skipped=sum(skipped.values()))
    return dataset
