"""
calculation_engine/aggregators.py
Per-dashboard KPI aggregators.

Every aggregator follows the same four steps:
  1. filter the relevant record collection to the scope
  2. reduce with sums / counts / group-bys
  3. derive rates with safe_divide (a zero divisor gives 0)
  4. attach trends against the previous window (see trends.py)

compute() is pure: the same dataset and scope always give an equal result.
An empty filtered set gives the zero-valued metrics object, never None.
"""
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping, Optional

from classification.enums import VesselType, VoyagePurpose
from classification.project_type import classify_project_type
from classification.vessel_type import classify_vessel_type
from calculation_engine.dedup import BulkFluidMetrics, calculate_bulk_fluid_metrics
from calculation_engine.trends import KPIValue, build_kpi, percentage, safe_divide
from config.settings import settings
from filters.predicates import filter_records, matches_department, matches_location, matches_period
from filters.scope import AggregationScope, previous_scope
from monitoring import get_logger, timed
from records.models import CostAllocation, LogisticsDataset, VesselManifest, VoyageEvent

log = get_logger(__name__)


def _month_key(when: Optional[datetime]) -> str:
    return when.strftime("%Y-%m") if when else "Unknown"


def _same(text: str, expected: str) -> bool:
    return (text or "").strip().lower() == expected


def _rounded(mapping: Mapping[str, float], digits: int = 2) -> dict[str, float]:
    return {k: round(v, digits) for k, v in sorted(mapping.items())}


def daily_rate_for(when: Optional[datetime]) -> float:
    """Charter day rate in force on a date (settings.vessel_daily_rates)."""
    if when is None or not settings.vessel_daily_rates:
        return 0.0
    day = when.date() if isinstance(when, datetime) else when
    for start, end, rate, _ in settings.vessel_daily_rates:
        if date.fromisoformat(start) <= day < date.fromisoformat(end):
            return rate
    first_start = date.fromisoformat(settings.vessel_daily_rates[0][0])
    return settings.vessel_daily_rates[0][2] if day < first_start else settings.vessel_daily_rates[-1][2]


def event_cost(event: VoyageEvent) -> float:
    """Recorded vessel cost when present, otherwise allocated hours at the dated day rate."""
    if event.vessel_cost_total:
        return event.vessel_cost_total
    if event.allocated_hours > 0 and event.event_date is not None:
        return event.allocated_hours / 24 * daily_rate_for(event.event_date)
    return 0.0


# ─────────────────────────────────────────────────────────────────────────────
# Metric types
# ─────────────────────────────────────────────────────────────────────────────
@dataclass
class ManifestMetrics:
    record_count: int = 0
    deck_tons: float = 0.0
    rt_tons: float = 0.0
    cargo_tons: float = 0.0
    outbound_tons: float = 0.0
    cargo_tonnage_per_visit: float = 0.0
    rt_percentage: float = 0.0
    outbound_percentage: float = 0.0
    total_lifts: float = 0.0
    vessel_visits: int = 0
    unique_manifests: int = 0
    wet_bulk_bbls: float = 0.0
    fluid_breakdown: dict[str, float] = field(default_factory=dict)
    by_location: dict[str, float] = field(default_factory=dict)
    by_month: dict[str, float] = field(default_factory=dict)
    by_vessel_type: dict[str, float] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return self.record_count > 0


@dataclass
class VoyageEventMetrics:
    record_count: int = 0
    total_hours: float = 0.0
    productive_hours: float = 0.0
    non_productive_hours: float = 0.0
    waiting_time: float = 0.0               # waiting on installation, at the rig
    weather_waiting: float = 0.0
    cargo_ops_hours: float = 0.0
    outbound_transit: float = 0.0
    return_transit: float = 0.0
    transit_time: float = 0.0
    maneuvering_hours: float = 0.0
    rig_activity_hours: float = 0.0
    total_offshore_time: float = 0.0
    vessel_utilization: float = 0.0
    waiting_time_percentage: float = 0.0
    npt_percentage: float = 0.0
    fsv_runs: int = 0
    unique_vessels: int = 0
    vessel_cost: float = 0.0
    by_parent_event: dict[str, float] = field(default_factory=dict)
    by_location: dict[str, float] = field(default_factory=dict)
    by_month: dict[str, float] = field(default_factory=dict)
    cost_by_vessel: dict[str, float] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return self.record_count > 0


@dataclass
class CostBreakdown:
    cost: float = 0.0
    days: float = 0.0
    count: int = 0
    percentage: float = 0.0

    @property
    def average_cost_per_day(self) -> float:
        return safe_divide(self.cost, self.days)


@dataclass
class CostMetrics:
    record_count: int = 0
    total_cost: float = 0.0                 # effective cost: budget, else actual
    total_budgeted_cost: float = 0.0
    total_actual_cost: float = 0.0
    total_days: float = 0.0
    average_cost_per_day: float = 0.0
    average_daily_rate: float = 0.0
    active_rigs: int = 0
    utilization_rate: float = 0.0
    budget_variance: float = 0.0
    most_efficient_project_type: str = ""
    by_project_type: dict[str, CostBreakdown] = field(default_factory=dict)
    by_department: dict[str, CostBreakdown] = field(default_factory=dict)
    by_location: dict[str, CostBreakdown] = field(default_factory=dict)
    by_month: dict[str, CostBreakdown] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return self.record_count > 0


@dataclass
class VoyageListMetrics:
    record_count: int = 0
    total_voyages: int = 0
    average_duration_hours: float = 0.0
    average_stops: float = 0.0
    multi_stop_percentage: float = 0.0
    mixed_voyage_percentage: float = 0.0
    active_vessels: int = 0
    voyages_per_vessel: float = 0.0
    purpose_distribution: dict[str, int] = field(default_factory=dict)
    popular_destinations: list[tuple[str, int, float]] = field(default_factory=list)
    voyages_by_month: dict[str, int] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return self.record_count > 0


@dataclass
class LCComparison:
    lc_number: str
    budgeted_cost: float = 0.0
    actual_cost: float = 0.0
    budgeted_days: float = 0.0
    actual_days: float = 0.0

    @property
    def variance(self) -> float:
        return self.actual_cost - self.budgeted_cost

    @property
    def variance_percentage(self) -> float:
        return percentage(self.variance, self.budgeted_cost)


@dataclass
class BudgetVsActualMetrics:
    record_count: int = 0
    total_budgeted_cost: float = 0.0
    total_actual_cost: float = 0.0
    total_variance: float = 0.0
    total_variance_percentage: float = 0.0
    lcs_over_budget: int = 0
    lcs_under_budget: int = 0
    by_lc: dict[str, LCComparison] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return self.record_count > 0


# ─────────────────────────────────────────────────────────────────────────────
# Shared base class
# ─────────────────────────────────────────────────────────────────────────────
class _Base:
    """Shared base: scope filtering, previous-window evaluation and KPI finalisation."""

    NAME = ""
    # kpi name -> (metrics attribute, unit)
    KPI_FIELDS: dict[str, tuple[str, str]] = {}

    def __init__(self, alias_table: Optional[Mapping[str, str]] = None) -> None:
        self._aliases = alias_table

    @property
    def aliases(self) -> Mapping[str, str]:
        if self._aliases is None:
            from reference_data.store import reference_store
            self._aliases = reference_store.alias_table()
        return self._aliases

    def _filter(self, records, scope: AggregationScope) -> list:
        return filter_records(records, scope, self.aliases)

    def compute(self, dataset: LogisticsDataset, scope: AggregationScope) -> Any:
        raise NotImplementedError

    def evaluate(self, dataset: LogisticsDataset, scope: AggregationScope) -> tuple[Any, dict[str, KPIValue]]:
        """Current metrics plus KPIs trended against the previous window."""
        current = self.compute(dataset, scope)
        prior = previous_scope(scope)
        previous = self.compute(dataset, prior) if prior is not None else None
        log.debug(
            "Aggregated",
            aggregator=self.NAME,
            scope=scope.label(),
            records=current.record_count,
            previous_records=previous.record_count if previous is not None else None,
        )
        return current, self._finalise(current, previous)

    def _finalise(self, current: Any, previous: Optional[Any]) -> dict[str, KPIValue]:
        baseline = previous if previous is not None and previous.has_data else None
        return {
            name: build_kpi(
                name,
                getattr(current, attr),
                getattr(baseline, attr) if baseline is not None else None,
                unit=unit,
                has_data=current.has_data,
            )
            for name, (attr, unit) in self.KPI_FIELDS.items()
        }


# ─────────────────────────────────────────────────────────────────────────────
# 1. VESSEL MANIFESTS
# ─────────────────────────────────────────────────────────────────────────────
class ManifestAggregator(_Base):
    NAME = "manifests"
    KPI_FIELDS = {
        "cargo_tons":              ("cargo_tons", "tons"),
        "deck_tons":               ("deck_tons", "tons"),
        "rt_tons":                 ("rt_tons", "tons"),
        "total_lifts":             ("total_lifts", "lifts"),
        "vessel_visits":           ("vessel_visits", "visits"),
        "cargo_tonnage_per_visit": ("cargo_tonnage_per_visit", "tons"),
        "rt_percentage":           ("rt_percentage", "%"),
        "wet_bulk_bbls":           ("wet_bulk_bbls", "bbls"),
    }

    @staticmethod
    def _fluid_bucket(manifest: VesselManifest) -> str:
        remarks = manifest.remarks.lower()
        if "fuel" in remarks or "diesel" in remarks:
            return "fuel"
        if "water" in remarks or "potable" in remarks:
            return "water"
        if "methanol" in remarks:
            return "methanol"
        if "mud" in remarks or "brine" in remarks or "drilling" in remarks:
            return "drilling_fluid"
        return "other"

    @timed("manifests")
    def compute(self, dataset: LogisticsDataset, scope: AggregationScope) -> ManifestMetrics:
        manifests: list[VesselManifest] = self._filter(dataset.vessel_manifests, scope)
        if not manifests:
            return ManifestMetrics()

        deck = sum(m.deck_tons for m in manifests)
        rt = sum(m.rt_tons for m in manifests)
        cargo = deck + rt
        unique_manifests = len({m.manifest_number or f"#{i}" for i, m in enumerate(manifests)})

        fluids: dict[str, float] = defaultdict(float)
        by_location: dict[str, float] = defaultdict(float)
        by_month: dict[str, float] = defaultdict(float)
        by_vessel_type: dict[str, float] = defaultdict(float)
        for m in manifests:
            if m.wet_bulk_total_bbls:
                fluids[self._fluid_bucket(m)] += m.wet_bulk_total_bbls
            by_location[m.mapped_location or m.offshore_location or "Unknown"] += m.cargo_tons
            by_month[_month_key(m.manifest_date)] += m.cargo_tons
            vessel_type = m.vessel_type or classify_vessel_type(m.transporter).value
            by_vessel_type[vessel_type or VesselType.UNKNOWN.value] += m.cargo_tons

        return ManifestMetrics(
            record_count=len(manifests),
            deck_tons=round(deck, 4),
            rt_tons=round(rt, 4),
            cargo_tons=round(cargo, 4),
            outbound_tons=round(deck, 4),
            cargo_tonnage_per_visit=round(safe_divide(cargo, unique_manifests), 4),
            rt_percentage=round(percentage(rt, cargo), 4),
            outbound_percentage=round(percentage(deck, cargo), 4),
            total_lifts=sum(m.lifts for m in manifests),
            vessel_visits=len({m.transporter for m in manifests if m.transporter}),
            unique_manifests=unique_manifests,
            wet_bulk_bbls=round(sum(m.wet_bulk_total_bbls for m in manifests), 4),
            fluid_breakdown=_rounded(fluids),
            by_location=_rounded(by_location),
            by_month=_rounded(by_month),
            by_vessel_type=_rounded(by_vessel_type),
        )


# ─────────────────────────────────────────────────────────────────────────────
# 2. VOYAGE EVENTS
# ─────────────────────────────────────────────────────────────────────────────
class VoyageEventAggregator(_Base):
    """
    Events carry their own department and location, but many rows only
    identify the work through an LC number.  An event is in scope when its
    own fields match or its LC belongs to a cost allocation that matches.
    """
    NAME = "voyage_events"
    KPI_FIELDS = {
        "productive_hours":     ("productive_hours", "hrs"),
        "non_productive_hours": ("non_productive_hours", "hrs"),
        "waiting_time":         ("waiting_time", "hrs"),
        "weather_waiting":      ("weather_waiting", "hrs"),
        "cargo_ops_hours":      ("cargo_ops_hours", "hrs"),
        "transit_time":         ("transit_time", "hrs"),
        "vessel_utilization":   ("vessel_utilization", "%"),
        "waiting_time_percentage": ("waiting_time_percentage", "%"),
        "npt_percentage":       ("npt_percentage", "%"),
        "fsv_runs":             ("fsv_runs", "runs"),
        "vessel_cost":          ("vessel_cost", "USD"),
    }

    def _scoped_lcs(self, dataset: LogisticsDataset, scope: AggregationScope) -> tuple[set[str], set[str]]:
        department_lcs: set[str] = set()
        location_lcs: set[str] = set()
        for ca in dataset.cost_allocations:
            if not ca.lc_number:
                continue
            if scope.department and matches_department(ca.department, scope.department):
                department_lcs.add(ca.lc_number)
            if scope.location and matches_location(ca.scope_locations, scope.location, self.aliases):
                location_lcs.add(ca.lc_number)
        return department_lcs, location_lcs

    def _filter_events(self, dataset: LogisticsDataset, scope: AggregationScope) -> list[VoyageEvent]:
        department_lcs, location_lcs = self._scoped_lcs(dataset, scope)
        events = []
        for e in dataset.voyage_events:
            if not matches_period(e.event_date, scope.period):
                continue
            if scope.department and not (
                matches_department(e.department, scope.department) or e.lc_number in department_lcs
            ):
                continue
            if scope.location and not (
                matches_location(e.scope_locations, scope.location, self.aliases) or e.lc_number in location_lcs
            ):
                continue
            events.append(e)
        return events

    @timed("voyage_events")
    def compute(self, dataset: LogisticsDataset, scope: AggregationScope) -> VoyageEventMetrics:
        events = self._filter_events(dataset, scope)
        if not events:
            return VoyageEventMetrics()

        hours: dict[str, float] = defaultdict(float)
        by_parent: dict[str, float] = defaultdict(float)
        by_location: dict[str, float] = defaultdict(float)
        by_month: dict[str, float] = defaultdict(float)
        cost_by_vessel: dict[str, float] = defaultdict(float)

        for e in events:
            h = e.allocated_hours
            parent = e.parent_event.strip().lower()
            port = e.port_type.strip().lower()

            hours["total"] += h
            hours[e.activity_category.value] += h
            if port == "rig" and parent == "waiting on installation":
                hours["waiting"] += h
            if parent == "waiting on weather":
                hours["weather"] += h
            if port == "rig" and parent != "waiting on weather":
                hours["rig"] += h
            if parent == "transit":
                hours["outbound" if port == "base" else "return" if port == "rig" else "transit_other"] += h
            if parent == "cargo ops":
                hours["cargo"] += h
            if parent == "maneuvering":
                hours["maneuvering"] += h

            by_parent[e.parent_event or "Unknown"] += h
            by_location[e.mapped_location or e.location or "Unknown"] += h
            by_month[_month_key(e.event_date)] += h
            cost_by_vessel[e.vessel or "Unknown"] += event_cost(e)

        transit = hours["outbound"] + hours["return"]
        offshore = hours["rig"] + transit
        productive = hours["Productive"]
        non_productive = hours["Non-Productive"]

        return VoyageEventMetrics(
            record_count=len(events),
            total_hours=round(hours["total"], 4),
            productive_hours=round(productive, 4),
            non_productive_hours=round(non_productive, 4),
            waiting_time=round(hours["waiting"], 4),
            weather_waiting=round(hours["weather"], 4),
            cargo_ops_hours=round(hours["cargo"], 4),
            outbound_transit=round(hours["outbound"], 4),
            return_transit=round(hours["return"], 4),
            transit_time=round(transit, 4),
            maneuvering_hours=round(hours["maneuvering"], 4),
            rig_activity_hours=round(hours["rig"], 4),
            total_offshore_time=round(offshore, 4),
            vessel_utilization=round(percentage(productive, offshore), 4),
            waiting_time_percentage=round(percentage(hours["waiting"], offshore), 4),
            npt_percentage=round(percentage(non_productive, hours["total"]), 4),
            fsv_runs=len({(e.vessel, e.voyage_number) for e in events if e.voyage_number}),
            unique_vessels=len({e.vessel for e in events if e.vessel}),
            vessel_cost=round(sum(cost_by_vessel.values()), 2),
            by_parent_event=_rounded(by_parent),
            by_location=_rounded(by_location),
            by_month=_rounded(by_month),
            cost_by_vessel=_rounded(cost_by_vessel),
        )


# ─────────────────────────────────────────────────────────────────────────────
# 3. BULK FLUIDS
# ─────────────────────────────────────────────────────────────────────────────
class BulkFluidAggregator(_Base):
    NAME = "bulk_actions"
    KPI_FIELDS = {
        "total_fluid_volume":         ("total_fluid_volume", "bbls"),
        "delivery_operations":        ("delivery_operations", "ops"),
        "drilling_fluid_volume":      ("drilling_fluid_volume", "bbls"),
        "completion_fluid_volume":    ("completion_fluid_volume", "bbls"),
        "production_chemical_volume": ("production_chemical_volume", "bbls"),
    }

    def compute(self, dataset: LogisticsDataset, scope: AggregationScope) -> BulkFluidMetrics:
        return calculate_bulk_fluid_metrics(dataset.bulk_actions, scope=scope)


# ─────────────────────────────────────────────────────────────────────────────
# 4. COST ALLOCATION
# ─────────────────────────────────────────────────────────────────────────────
class CostAllocationAggregator(_Base):
    NAME = "cost_allocation"
    KPI_FIELDS = {
        "total_cost":           ("total_cost", "USD"),
        "total_days":           ("total_days", "days"),
        "average_cost_per_day": ("average_cost_per_day", "USD/day"),
        "active_rigs":          ("active_rigs", "rigs"),
        "utilization_rate":     ("utilization_rate", "%"),
    }

    @staticmethod
    def _breakdown(allocations: list[CostAllocation], key) -> dict[str, CostBreakdown]:
        groups: dict[str, CostBreakdown] = {}
        total = sum(ca.effective_cost for ca in allocations)
        for ca in allocations:
            group = groups.setdefault(key(ca) or "Unknown", CostBreakdown())
            group.cost += ca.effective_cost
            group.days += ca.effective_days
            group.count += 1
        for group in groups.values():
            group.cost = round(group.cost, 2)
            group.days = round(group.days, 4)
            group.percentage = round(percentage(group.cost, total), 4)
        return dict(sorted(groups.items()))

    @timed("cost_allocation")
    def compute(self, dataset: LogisticsDataset, scope: AggregationScope) -> CostMetrics:
        allocations: list[CostAllocation] = self._filter(dataset.cost_allocations, scope)
        if not allocations:
            return CostMetrics()

        def project_type(ca: CostAllocation) -> str:
            return classify_project_type(ca.description, ca.cost_element, ca.lc_number, ca.project_type).value

        total_cost = sum(ca.effective_cost for ca in allocations)
        total_budget = sum(ca.budgeted_vessel_cost or 0.0 for ca in allocations)
        total_days = sum(ca.effective_days for ca in allocations)
        by_project_type = self._breakdown(allocations, project_type)

        efficient = [(pt, b.average_cost_per_day) for pt, b in by_project_type.items() if b.days > 0]
        most_efficient = min(efficient, key=lambda item: (item[1], item[0]))[0] if efficient else ""

        return CostMetrics(
            record_count=len(allocations),
            total_cost=round(total_cost, 2),
            total_budgeted_cost=round(total_budget, 2),
            total_actual_cost=round(sum(ca.total_cost for ca in allocations), 2),
            total_days=round(total_days, 4),
            average_cost_per_day=round(safe_divide(total_cost, total_days), 2),
            average_daily_rate=round(safe_divide(sum(ca.vessel_daily_rate_used for ca in allocations), len(allocations)), 2),
            active_rigs=len({ca.rig_location or ca.location_reference for ca in allocations} - {""}),
            utilization_rate=round(percentage(total_days, len(allocations) * 30), 4),
            budget_variance=round(total_cost - total_budget, 2),
            most_efficient_project_type=most_efficient,
            by_project_type=by_project_type,
            by_department=self._breakdown(allocations, lambda ca: ca.department),
            by_location=self._breakdown(allocations, lambda ca: ca.rig_location or ca.location_reference),
            by_month=self._breakdown(allocations, lambda ca: _month_key(ca.cost_allocation_date)),
        )


# ─────────────────────────────────────────────────────────────────────────────
# 5. VOYAGE LIST
# ─────────────────────────────────────────────────────────────────────────────
class VoyageListAggregator(_Base):
    NAME = "voyage_list"
    KPI_FIELDS = {
        "total_voyages":          ("total_voyages", "voyages"),
        "average_duration_hours": ("average_duration_hours", "hrs"),
        "average_stops":          ("average_stops", "stops"),
        "multi_stop_percentage":  ("multi_stop_percentage", "%"),
        "active_vessels":         ("active_vessels", "vessels"),
        "voyages_per_vessel":     ("voyages_per_vessel", "voyages"),
    }

    TOP_DESTINATIONS = 5

    @timed("voyage_list")
    def compute(self, dataset: LogisticsDataset, scope: AggregationScope) -> VoyageListMetrics:
        voyages = self._filter(dataset.voyage_list, scope)
        if not voyages:
            return VoyageListMetrics()

        total = len(voyages)
        purposes = Counter(v.voyage_purpose.value for v in voyages)
        vessels = {v.vessel for v in voyages if v.vessel}

        destinations: Counter = Counter()
        for v in voyages:
            stops = v.location_list[1:] if len(v.location_list) > 1 else (v.main_destination,)
            destinations.update(s for s in stops if s and not _same(s, (v.origin_port or "").lower()))
        visit_total = sum(destinations.values())
        popular = [
            (name, count, round(percentage(count, visit_total), 2))
            for name, count in sorted(destinations.items(), key=lambda item: (-item[1], item[0]))[:self.TOP_DESTINATIONS]
        ]

        return VoyageListMetrics(
            record_count=total,
            total_voyages=total,
            average_duration_hours=round(safe_divide(sum(v.duration_hours for v in voyages), total), 2),
            average_stops=round(safe_divide(sum(v.stop_count for v in voyages), total), 2),
            multi_stop_percentage=round(percentage(sum(1 for v in voyages if v.stop_count > 2), total), 2),
            mixed_voyage_percentage=round(percentage(purposes.get(VoyagePurpose.MIXED.value, 0), total), 2),
            active_vessels=len(vessels),
            voyages_per_vessel=round(safe_divide(total, len(vessels)), 2),
            purpose_distribution={p.value: purposes.get(p.value, 0) for p in VoyagePurpose},
            popular_destinations=popular,
            voyages_by_month=dict(sorted(Counter(_month_key(v.scope_date) for v in voyages).items())),
        )


# ─────────────────────────────────────────────────────────────────────────────
# 6. BUDGET VS ACTUAL
# ─────────────────────────────────────────────────────────────────────────────
class BudgetVsActual(_Base):
    """Budgeted vessel cost per LC against the vessel cost its voyage events actually incurred."""
    NAME = "budget_vs_actual"
    KPI_FIELDS = {
        "budgeted_cost":   ("total_budgeted_cost", "USD"),
        "actual_cost":     ("total_actual_cost", "USD"),
        "budget_variance": ("total_variance", "USD"),
    }

    @timed("budget_vs_actual")
    def compute(self, dataset: LogisticsDataset, scope: AggregationScope) -> BudgetVsActualMetrics:
        allocations: list[CostAllocation] = self._filter(dataset.cost_allocations, scope)
        events_scope = scope.model_copy(update={"project_type": None})
        events = VoyageEventAggregator(self.aliases)._filter_events(dataset, events_scope)
        events = [e for e in events if e.lc_number]
        if not allocations and not events:
            return BudgetVsActualMetrics()

        by_lc: dict[str, LCComparison] = {}
        for ca in allocations:
            if not ca.lc_number:
                continue
            lc = by_lc.setdefault(ca.lc_number, LCComparison(ca.lc_number))
            lc.budgeted_cost += ca.budgeted_vessel_cost or 0.0
            lc.budgeted_days += ca.total_allocated_days
        for e in events:
            lc = by_lc.setdefault(e.lc_number, LCComparison(e.lc_number))
            lc.actual_cost += event_cost(e)
            lc.actual_days += e.allocated_hours / 24

        budget = sum(lc.budgeted_cost for lc in by_lc.values())
        actual = sum(lc.actual_cost for lc in by_lc.values())
        return BudgetVsActualMetrics(
            record_count=len(allocations) + len(events),
            total_budgeted_cost=round(budget, 2),
            total_actual_cost=round(actual, 2),
            total_variance=round(actual - budget, 2),
            total_variance_percentage=round(percentage(actual - budget, budget), 4),
            lcs_over_budget=sum(1 for lc in by_lc.values() if lc.variance > 0),
            lcs_under_budget=sum(1 for lc in by_lc.values() if lc.variance < 0),
            by_lc=dict(sorted(by_lc.items())),
        )
