"""
records/models.py
Record types consumed by the aggregation engine.  Kept free of behaviour
beyond derived measures so that classifiers, filters and aggregators can
share them without circular imports.

All records are immutable; the engine only ever derives new aggregates.
"""
import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from functools import cached_property
from typing import Any, Optional

from classification.enums import ActivityCategory, VoyagePurpose
from records.units import barrels_to_gallons, gallons_to_barrels


@dataclass(frozen=True)
class VoyageEvent:
    """One time-slice of a voyage: a parent event with hours at a location."""
    event_date: Optional[datetime] = None
    department: str = ""
    location: str = ""
    mapped_location: str = ""
    vessel: str = ""
    voyage_number: str = ""
    parent_event: str = ""
    event: str = ""
    activity_category: ActivityCategory = ActivityCategory.NON_PRODUCTIVE
    port_type: str = ""
    final_hours: float = 0.0
    lc_number: str = ""
    lc_percentage: float = 0.0       # 0 means the whole event belongs to this LC
    vessel_cost_total: Optional[float] = None

    @property
    def allocated_hours(self) -> float:
        share = self.lc_percentage / 100 if self.lc_percentage else 1.0
        return self.final_hours * share

    @property
    def scope_date(self) -> Optional[datetime]:
        return self.event_date

    @property
    def scope_department(self) -> str:
        return self.department

    @property
    def scope_locations(self) -> tuple[str, ...]:
        return (self.location, self.mapped_location)


@dataclass(frozen=True)
class VesselManifest:
    manifest_date: Optional[datetime] = None
    manifest_number: str = ""
    transporter: str = ""
    final_department: str = ""
    mapped_location: str = ""
    offshore_location: str = ""
    cost_code: str = ""
    deck_tons: float = 0.0
    rt_tons: float = 0.0
    lifts: float = 0.0
    wet_bulk_bbls: float = 0.0
    wet_bulk_gals: float = 0.0
    cargo_type: str = ""
    remarks: str = ""
    vessel_type: str = ""

    @property
    def cargo_tons(self) -> float:
        return self.deck_tons + self.rt_tons

    @property
    def wet_bulk_total_bbls(self) -> float:
        return self.wet_bulk_bbls + gallons_to_barrels(self.wet_bulk_gals)

    @property
    def scope_date(self) -> Optional[datetime]:
        return self.manifest_date

    @property
    def scope_department(self) -> str:
        return self.final_department

    @property
    def scope_locations(self) -> tuple[str, ...]:
        return (self.mapped_location, self.offshore_location)


@dataclass(frozen=True)
class CostAllocation:
    cost_allocation_date: Optional[datetime] = None
    month_year: str = ""
    lc_number: str = ""
    rig_location: str = ""
    location_reference: str = ""
    department: str = ""
    project_type: str = ""
    cost_element: str = ""
    description: str = ""
    total_allocated_days: float = 0.0
    budgeted_vessel_cost: Optional[float] = None
    total_cost: float = 0.0
    vessel_daily_rate_used: float = 0.0
    rig_type: str = ""
    water_depth: float = 0.0

    @property
    def effective_cost(self) -> float:
        # A zero budget is treated as "not budgeted" and falls back to actuals.
        if self.budgeted_vessel_cost:
            return self.budgeted_vessel_cost
        return self.total_cost

    @property
    def effective_days(self) -> float:
        return self.total_allocated_days

    @property
    def scope_date(self) -> Optional[datetime]:
        return self.cost_allocation_date

    @property
    def scope_department(self) -> str:
        return self.department

    @property
    def scope_locations(self) -> tuple[str, ...]:
        return (self.rig_location, self.location_reference)


@dataclass(frozen=True)
class BulkAction:
    """A single load / offload of bulk fluid.  Volumes are held in barrels."""
    action_id: str = ""
    start_date: Optional[datetime] = None
    vessel_name: str = ""
    bulk_type: str = ""
    bulk_description: str = ""
    fluid_specific_type: str = ""
    action: str = ""
    volume_bbls: float = 0.0
    at_port: str = ""
    destination_port: str = ""
    standardized_origin: str = ""
    standardized_destination: str = ""
    production_platform: str = ""
    port_type: str = ""
    is_drilling_fluid: bool = False
    is_completion_fluid: bool = False
    is_return: bool = False

    @property
    def volume_gals(self) -> float:
        return barrels_to_gallons(self.volume_bbls)

    @property
    def origin(self) -> str:
        return self.standardized_origin or self.at_port

    @property
    def destination(self) -> str:
        return self.standardized_destination or self.destination_port

    @property
    def scope_date(self) -> Optional[datetime]:
        return self.start_date

    @property
    def scope_locations(self) -> tuple[str, ...]:
        return (
            self.at_port, self.standardized_origin, self.destination_port,
            self.standardized_destination, self.production_platform,
        )


@dataclass(frozen=True)
class VoyageListEntry:
    voyage_date: Optional[datetime] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    vessel: str = ""
    voyage_number: str = ""
    voyage_purpose: VoyagePurpose = VoyagePurpose.OTHER
    mission: str = ""
    locations: str = ""
    location_list: tuple[str, ...] = ()
    duration_hours: float = 0.0
    stop_count: int = 0
    main_destination: str = ""
    origin_port: str = ""

    @property
    def scope_date(self) -> Optional[datetime]:
        return self.voyage_date or self.start_date

    @property
    def scope_department(self) -> str:
        return self.voyage_purpose.value

    @property
    def scope_locations(self) -> tuple[str, ...]:
        return (self.main_destination, *self.location_list)


@dataclass(frozen=True)
class LogisticsDataset:
    """
    The session read model: five collections loaded by the ingestion layer.
    Collections are tuples so a dataset can be fingerprinted and shared
    between concurrent aggregations without copying.
    """
    voyage_events: tuple[VoyageEvent, ...] = ()
    vessel_manifests: tuple[VesselManifest, ...] = ()
    cost_allocations: tuple[CostAllocation, ...] = ()
    bulk_actions: tuple[BulkAction, ...] = ()
    voyage_list: tuple[VoyageListEntry, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def is_data_ready(self) -> bool:
        return bool(
            self.voyage_events or self.vessel_manifests or self.cost_allocations
            or self.bulk_actions or self.voyage_list
        )

    @cached_property
    def fingerprint(self) -> str:
        digest = hashlib.sha256()
        for name in ("voyage_events", "vessel_manifests", "cost_allocations", "bulk_actions", "voyage_list"):
            digest.update(name.encode())
            for record in getattr(self, name):
                digest.update(repr(record).encode())
        return digest.hexdigest()

    def counts(self) -> dict[str, int]:
        return {
            "voyage_events":    len(self.voyage_events),
            "vessel_manifests": len(self.vessel_manifests),
            "cost_allocations": len(self.cost_allocations),
            "bulk_actions":     len(self.bulk_actions),
            "voyage_list":      len(self.voyage_list),
        }

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "LogisticsDataset":
        """Build a dataset from the ingestion layer's camelCase collection mapping."""
        from records.schemas import build_dataset
        return build_dataset(raw)
