"""
tests/test_aggregators.py
Per-dashboard aggregators and the KPI trend rules they share.
"""
import sys
from datetime import datetime
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from calculation_engine.aggregators import (
    BudgetVsActual,
    CostAllocationAggregator,
    ManifestAggregator,
    VoyageEventAggregator,
    VoyageListAggregator,
    daily_rate_for,
    event_cost,
)
from calculation_engine.trends import build_kpi, percentage, safe_divide, trend_pct
from filters.scope import AggregationScope
from records.models import LogisticsDataset, VoyageEvent


def scope_with(**overrides) -> AggregationScope:
    values = {"month": 3, "year": 2024}
    values.update(overrides)
    return AggregationScope(**values)


# Trends

class TestTrends:

    def test_safe_divide(self):
        assert safe_divide(10, 4) == 2.5
        assert safe_divide(1, 0) == 0.0
        assert percentage(1, 4) == 25.0
        assert trend_pct(110, 100) == 10.0

    def test_synthetic_baseline_is_flagged(self):
        kpi = build_kpi("cargo_tons", 50, None, unit="tons")
        assert kpi.is_estimated
        assert kpi.previous_value == 45.0
        assert kpi.trend == 11.11
        assert kpi.is_positive

    def test_real_baseline(self):
        kpi = build_kpi("cargo_tons", 50, 40)
        assert not kpi.is_estimated
        assert kpi.trend == 25.0
        assert kpi.is_positive

    def test_tie_is_not_positive(self):
        assert not build_kpi("cargo_tons", 50, 50).is_positive

    def test_lower_is_better(self):
        kpi = build_kpi("waiting_time", 8, 10)
        assert kpi.trend == -20.0
        assert kpi.is_positive
        assert not build_kpi("waiting_time", 12, 10).is_positive

    def test_override_direction(self):
        assert build_kpi("custom", 8, 10, lower_is_better=True).is_positive

    def test_zero_previous_gives_zero_trend(self):
        assert build_kpi("cargo_tons", 5, 0).trend == 0.0

    def test_no_data_is_canonical_zero(self):
        kpi = build_kpi("cargo_tons", 123, None, unit="tons", has_data=False)
        assert (kpi.value, kpi.trend, kpi.is_positive, kpi.is_estimated) == (0.0, 0.0, False, False)
        assert kpi.unit == "tons"


# Manifests

class TestManifestAggregator:

    def test_drilling_march(self, dataset, aliases):
        m = ManifestAggregator(aliases).compute(dataset, scope_with(department="Drilling"))
        assert m.cargo_tons == 50
        assert m.deck_tons == 30
        assert m.rt_tons == 20
        assert m.rt_percentage == 40.0
        assert m.total_lifts == 24
        assert m.vessel_visits == 2
        assert m.unique_manifests == 3
        assert m.cargo_tonnage_per_visit == pytest.approx(16.6667)

    def test_breakdowns(self, dataset, aliases):
        m = ManifestAggregator(aliases).compute(dataset, scope_with(department="Drilling"))
        assert m.by_location == {"Thunder Horse Drilling": 20.0, "Thunder Horse PDQ": 30.0}
        assert m.by_month == {"2024-03": 50.0}
        assert m.by_vessel_type == {"FSV": 30.0, "OSV": 20.0}

    def test_location_scope(self, dataset, aliases):
        m = ManifestAggregator(aliases).compute(dataset, scope_with(location="Thunder Horse"))
        assert m.cargo_tons == 50

    def test_empty_scope(self, dataset, aliases):
        m = ManifestAggregator(aliases).compute(dataset, scope_with(year=2030))
        assert not m.has_data
        assert m.cargo_tons == 0

    def test_wet_bulk_buckets(self, aliases):
        ds = LogisticsDataset.from_raw({"vesselManifests": [
            {"manifestDate": "2024-03-01", "wetBulkBbls": 100, "remarks": "Potable water"},
            {"manifestDate": "2024-03-02", "wetBulkGals": 4200, "remarks": "Methanol"},
        ]})
        m = ManifestAggregator(aliases).compute(ds, scope_with())
        assert m.wet_bulk_bbls == 200
        assert m.fluid_breakdown == {"methanol": 100.0, "water": 100.0}

    def test_real_previous_month(self, raw, aliases):
        raw["vesselManifests"].append({
            "manifestDate": "2024-02-20", "manifestNumber": "M-0", "transporter": "Fast Tiger",
            "finalDepartment": "Drilling", "deckTons": 40,
        })
        ds = LogisticsDataset.from_raw(raw)
        _, kpis = ManifestAggregator(aliases).evaluate(ds, scope_with(department="Drilling"))
        cargo = kpis["cargo_tons"]
        assert not cargo.is_estimated
        assert cargo.previous_value == 40
        assert cargo.trend == 25.0

    def test_missing_previous_month_is_estimated(self, dataset, aliases):
        _, kpis = ManifestAggregator(aliases).evaluate(dataset, scope_with(department="Drilling"))
        assert kpis["cargo_tons"].is_estimated
        assert kpis["cargo_tons"].previous_value == 45.0


# Voyage events

class TestVoyageEventAggregator:

    def test_drilling_hours(self, dataset, aliases):
        m = VoyageEventAggregator(aliases).compute(dataset, scope_with(department="Drilling"))
        assert m.record_count == 4
        assert m.total_hours == 32
        assert m.productive_hours == 28
        assert m.non_productive_hours == 4
        assert m.waiting_time == 4
        assert m.cargo_ops_hours == 8
        assert m.outbound_transit == 10
        assert m.return_transit == 10
        assert m.transit_time == 20
        assert m.rig_activity_hours == 22
        assert m.total_offshore_time == 42

    def test_drilling_rates(self, dataset, aliases):
        m = VoyageEventAggregator(aliases).compute(dataset, scope_with(department="Drilling"))
        assert m.vessel_utilization == pytest.approx(66.6667)
        assert m.waiting_time_percentage == pytest.approx(9.5238)
        assert m.npt_percentage == 12.5
        assert m.fsv_runs == 1
        assert m.vessel_cost == 44000.0

    def test_weather_excluded_from_rig_time(self, dataset, aliases):
        m = VoyageEventAggregator(aliases).compute(dataset, scope_with(department="Production"))
        assert m.weather_waiting == 6
        assert m.rig_activity_hours == 0
        assert m.vessel_utilization == 0.0
        assert m.npt_percentage == 100.0

    def test_lc_number_brings_event_into_scope(self, raw, aliases):
        raw["voyageEvents"].append({
            "eventDate": "2024-03-07", "vessel": "Fast Tiger", "voyageNumber": "V-302",
            "parentEvent": "Cargo Ops", "portType": "Rig", "finalHours": 5, "lcNumber": "9358",
        })
        ds = LogisticsDataset.from_raw(raw)
        m = VoyageEventAggregator(aliases).compute(ds, scope_with(department="Drilling"))
        assert m.record_count == 5
        assert m.cargo_ops_hours == 13
        assert m.fsv_runs == 2

    def test_location_through_lc(self, dataset, aliases):
        # The Fourchon transit leg belongs to an LC allocated to Thunder Horse
        m = VoyageEventAggregator(aliases).compute(dataset, scope_with(location="Thunder Horse"))
        assert m.record_count == 4

    def test_lc_percentage_splits_hours(self, aliases):
        ds = LogisticsDataset.from_raw({"voyageEvents": [
            {"eventDate": "2024-03-05", "parentEvent": "Cargo Ops", "finalHours": 10, "lcPercentage": 25},
        ]})
        assert VoyageEventAggregator(aliases).compute(ds, scope_with()).cargo_ops_hours == 2.5


class TestVesselCost:

    def test_recorded_cost_wins(self):
        assert event_cost(VoyageEvent(vessel_cost_total=500, final_hours=24, event_date=datetime(2024, 3, 1))) == 500

    def test_day_rate_by_date(self):
        assert event_cost(VoyageEvent(final_hours=24, event_date=datetime(2024, 3, 1))) == 33000
        assert daily_rate_for(datetime(2025, 5, 1)) == 37800
        assert daily_rate_for(datetime(2020, 1, 1)) == 33000
        assert daily_rate_for(None) == 0.0

    def test_undated_event_has_no_cost(self):
        assert event_cost(VoyageEvent(final_hours=24)) == 0.0


# Cost allocation

class TestCostAllocationAggregator:

    def test_totals(self, dataset, aliases):
        m = CostAllocationAggregator(aliases).compute(dataset, scope_with())
        assert m.total_cost == 590000
        assert m.total_actual_cost == 594000
        assert m.total_days == 18
        assert m.average_cost_per_day == 32777.78
        assert m.active_rigs == 2
        assert m.utilization_rate == 30.0
        assert m.average_daily_rate == 33000

    def test_project_type_breakdown(self, dataset, aliases):
        m = CostAllocationAggregator(aliases).compute(dataset, scope_with())
        assert set(m.by_project_type) == {"Drilling", "Production"}
        assert m.by_project_type["Drilling"].cost == 400000
        assert sum(b.percentage for b in m.by_project_type.values()) == pytest.approx(100, abs=0.01)
        assert m.most_efficient_project_type == "Production"

    def test_department_scope(self, dataset, aliases):
        m = CostAllocationAggregator(aliases).compute(dataset, scope_with(department="Drilling"))
        assert m.total_cost == 400000
        assert m.average_cost_per_day == 33333.33
        assert m.utilization_rate == 40.0

    def test_project_type_scope(self, dataset, aliases):
        m = CostAllocationAggregator(aliases).compute(dataset, scope_with(project_type="Production"))
        assert m.record_count == 1
        assert m.total_cost == 190000

    def test_unbudgeted_falls_back_to_actual(self, aliases):
        ds = LogisticsDataset.from_raw({"costAllocation": [
            {"monthYear": "Mar-24", "lcNumber": "1", "totalCost": 1000, "totalAllocatedDays": 0},
        ]})
        m = CostAllocationAggregator(aliases).compute(ds, scope_with())
        assert m.total_cost == 1000
        assert m.average_cost_per_day == 0.0
        assert m.most_efficient_project_type == ""


# Voyage list

class TestVoyageListAggregator:

    def test_march(self, dataset, aliases):
        m = VoyageListAggregator(aliases).compute(dataset, scope_with())
        assert m.total_voyages == 2
        assert m.average_duration_hours == 45
        assert m.average_stops == 3.5
        assert m.multi_stop_percentage == 100.0
        assert m.mixed_voyage_percentage == 50.0
        assert m.active_vessels == 2
        assert m.purpose_distribution == {"Drilling": 1, "Production": 0, "Mixed": 1, "Other": 0}

    def test_origin_not_a_destination(self, dataset, aliases):
        m = VoyageListAggregator(aliases).compute(dataset, scope_with())
        names = [name for name, _, _ in m.popular_destinations]
        assert "Fourchon" not in names
        assert "Mad Dog" in names

    def test_mixed_voyage_counts_for_production(self, dataset, aliases):
        m = VoyageListAggregator(aliases).compute(dataset, scope_with(department="Production"))
        assert m.total_voyages == 1


# Budget vs actual

class TestBudgetVsActual:

    def test_by_lc(self, dataset, aliases):
        m = BudgetVsActual(aliases).compute(dataset, scope_with())
        assert m.total_budgeted_cost == 590000
        assert m.total_actual_cost == 52250
        assert m.total_variance == -537750
        assert m.lcs_under_budget == 2
        assert m.by_lc["9358"].actual_cost == pytest.approx(44000)
        assert m.by_lc["9358"].actual_days == pytest.approx(32 / 24)

    def test_empty(self, dataset, aliases):
        assert not BudgetVsActual(aliases).compute(dataset, scope_with(year=2030)).has_data
