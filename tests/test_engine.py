"""
tests/test_engine.py
Dashboard entry points end to end over the March 2024 fixture.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from calculation_engine.cache import AggregationCache
from calculation_engine.engine import DashboardEngine
from calculation_engine.trends import ZERO_KPI
from filters.scope import AggregationScope
from records.models import LogisticsDataset

MARCH = {"month": 3, "year": 2024}


@pytest.fixture
def engine() -> DashboardEngine:
    return DashboardEngine()


class TestDrillingDashboard:

    def test_cargo_tons(self, engine, dataset):
        result = engine.drilling(dataset, MARCH)
        cargo = result.kpis["cargo_tons"]
        assert cargo.value == 50
        assert cargo.is_estimated            # February has no records
        assert cargo.is_positive

    def test_department_forced(self, engine, dataset):
        result = engine.drilling(dataset, {**MARCH, "department": "Production"})
        assert result.scope.department == "Drilling"
        assert result.kpis["cargo_tons"].value == 50

    def test_lifts_per_hour(self, engine, dataset):
        # 24 lifts over 8 cargo-ops hours
        assert engine.drilling(dataset, MARCH).kpis["lifts_per_hour"].value == 3.0

    def test_lifts_per_hour_without_cargo_hours(self, engine):
        ds = LogisticsDataset.from_raw({"vesselManifests": [
            {"manifestDate": "2024-03-04", "finalDepartment": "Drilling", "deckTons": 10, "lifts": 12},
        ]})
        kpi = engine.drilling(ds, MARCH).kpis["lifts_per_hour"]
        assert kpi.value == 0.0
        assert kpi.trend == 0.0

    def test_bulk_deduplicated(self, engine, dataset):
        result = engine.drilling(dataset, MARCH)
        assert result.kpis["total_fluid_volume"].value == 100
        assert "deduplication_report" in result.calculation_metadata

    def test_breakdowns_present(self, engine, dataset):
        result = engine.drilling(dataset, MARCH)
        assert result.breakdowns["cargo_by_month"] == {"2024-03": 50.0}
        assert "hours_by_parent_event" in result.breakdowns
        assert "volume_by_fluid_kind" in result.breakdowns

    def test_month_string_scope(self, engine, dataset):
        assert engine.drilling(dataset, {"month": "Mar-24"}).kpis["cargo_tons"].value == 50


class TestProductionDashboard:

    def test_production_side(self, engine, dataset):
        result = engine.production(dataset, MARCH)
        assert result.kpis["cargo_tons"].value == 36
        assert result.kpis["weather_waiting"].value == 6
        assert result.kpis["total_fluid_volume"].value == 200


class TestOtherViews:

    def test_cost_allocation(self, engine, dataset):
        result = engine.cost_allocation(dataset, MARCH)
        assert result.kpis["total_cost"].value == 590000
        assert result.kpis["budget_variance"].value == -537750
        assert result.breakdowns["cost_by_project_type"] == {"Drilling": 400000, "Production": 190000}

    def test_voyage_analytics(self, engine, dataset):
        result = engine.voyage_analytics(dataset, MARCH)
        assert result.kpis["total_voyages"].value == 2
        assert result.breakdowns["voyage_purpose_distribution"]["Mixed"] == 1

    def test_bulk_actions(self, engine, dataset):
        result = engine.bulk_actions(dataset, MARCH)
        assert result.kpis["total_fluid_volume"].value == 300
        assert result.kpis["delivery_operations"].value == 2
        assert list(result.metrics) == ["bulk_actions"]

    def test_kpis_view_runs_every_collection(self, engine, dataset):
        result = engine.kpis(dataset, MARCH)
        assert set(result.calculation_metadata["aggregators_run"]) == {
            "manifests", "voyage_events", "bulk_actions", "cost_allocation", "voyage_list",
        }
        assert result.calculation_metadata["dataset_fingerprint"] == dataset.fingerprint

    def test_run_view_dispatch(self, engine, dataset):
        assert engine.run_view("cost_allocation", dataset, MARCH).dashboard == "cost_allocation"

    def test_unknown_view(self, engine, dataset):
        with pytest.raises(ValueError):
            engine.run_view("payroll", dataset, MARCH)

    def test_invalid_scope_rejected(self, engine, dataset):
        with pytest.raises(ValueError):
            engine.kpis(dataset, {"month": "Smarch"})

    def test_comparison_unknown_view(self, engine, dataset):
        with pytest.raises(ValueError, match="Unknown dashboard view"):
            engine.comparison(dataset, MARCH, MARCH, view="payroll")


class TestEmptyScopes:

    @pytest.mark.parametrize("view", ["drilling", "production", "cost_allocation", "voyage_analytics", "bulk_actions", "kpis"])
    def test_every_kpi_is_zero(self, engine, dataset, view):
        result = engine.run_view(view, dataset, {"month": 1, "year": 2030})
        assert not result.has_data
        assert result.kpis
        for kpi in result.kpis.values():
            assert (kpi.value, kpi.trend, kpi.is_positive, kpi.is_estimated) == (
                ZERO_KPI.value, ZERO_KPI.trend, ZERO_KPI.is_positive, ZERO_KPI.is_estimated,
            )

    def test_empty_dataset(self, engine):
        result = engine.kpis(LogisticsDataset(), None)
        assert not result.has_data
        assert result.kpis["cargo_tons"].value == 0


class TestDeterminism:

    def test_idempotent(self, engine, dataset):
        scope = AggregationScope(**MARCH)
        first = engine.kpis(dataset, scope)
        second = engine.kpis(dataset, scope)
        assert first.kpis == second.kpis
        assert first.metrics == second.metrics
        assert first.breakdowns == second.breakdowns

    def test_dataset_not_mutated(self, engine, dataset):
        before = dataset.fingerprint
        engine.kpis(dataset, MARCH)
        assert LogisticsDataset(
            dataset.voyage_events, dataset.vessel_manifests, dataset.cost_allocations,
            dataset.bulk_actions, dataset.voyage_list,
        ).fingerprint == before

    def test_cache_returns_equal_result(self, dataset):
        cache = AggregationCache(max_size=8)
        engine = DashboardEngine(cache=cache)
        scope = AggregationScope(**MARCH)
        first = engine.drilling(dataset, scope)
        second = engine.drilling(dataset, scope)
        assert second == first
        assert second is not first
        assert cache.stats()["hits"] == 1

    def test_cached_result_isolated_from_caller_edits(self, dataset):
        engine = DashboardEngine(cache=AggregationCache(max_size=8))
        scope = AggregationScope(**MARCH)
        first = engine.drilling(dataset, scope)
        first.kpis.clear()
        first.warnings.append("edited")
        second = engine.drilling(dataset, scope)
        assert second.kpis["cargo_tons"].value == 50
        assert "edited" not in second.warnings


class TestComparison:

    def test_drilling_vs_production(self, engine, dataset):
        result = engine.comparison(
            dataset,
            {**MARCH, "department": "Drilling"},
            {**MARCH, "department": "Production"},
        )
        delta = result.deltas["cargo_tons"]
        assert result.has_data
        assert delta.value == 50
        assert delta.previous_value == 36
        assert delta.trend == 38.89
        assert not delta.is_estimated

    def test_side_without_data_compares_to_zero(self, engine, dataset):
        result = engine.comparison(dataset, MARCH, {"month": 1, "year": 2030})
        delta = result.deltas["cargo_tons"]
        assert delta.previous_value == 0
        assert delta.trend == 0.0
        assert not delta.is_estimated

    @pytest.mark.parametrize("view,department", [("drilling", "Drilling"), ("production", "Production")])
    def test_department_view_pins_department(self, engine, dataset, view, department):
        result = engine.comparison(dataset, MARCH, {"month": 2, "year": 2024}, view=view)
        direct = engine.run_view(view, dataset, MARCH)
        assert result.scope_a.department == result.scope_b.department == department
        assert result.result_a.kpis == direct.kpis
        assert result.deltas["cargo_tons"].value == direct.kpis["cargo_tons"].value

    def test_drilling_view_excludes_production(self, engine, dataset):
        result = engine.comparison(dataset, MARCH, {"month": 2, "year": 2024}, view="drilling")
        assert result.result_a.kpis["cargo_tons"].value == 50
