"""
calculation_engine/engine.py
Coordinates the KPI aggregators behind each dashboard view and produces a
flat result: KPI values with trends, the underlying metrics, breakdown maps.
"""
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from calculation_engine.aggregators import (
    BudgetVsActual,
    BulkFluidAggregator,
    CostAllocationAggregator,
    ManifestAggregator,
    VoyageEventAggregator,
    VoyageListAggregator,
    _Base,
)
from calculation_engine.cache import AggregationCache
from calculation_engine.dedup import generate_deduplication_report, validate_fluid_movements
from calculation_engine.trends import KPIValue, build_kpi, safe_divide
from filters.scope import AggregationScope
from monitoring import AGGREGATION_REQUESTS, get_logger, timed
from records.models import LogisticsDataset

log = get_logger(__name__)

ScopeLike = Union[AggregationScope, dict, None]


@dataclass
class DashboardResult:
    """Aggregated output of one dashboard view."""
    dashboard: str
    scope: AggregationScope
    kpis: dict[str, KPIValue] = field(default_factory=dict)
    metrics: dict[str, Any] = field(default_factory=dict)
    breakdowns: dict[str, dict] = field(default_factory=dict)
    has_data: bool = False
    warnings: list[str] = field(default_factory=list)
    calculation_metadata: dict = field(default_factory=dict)


@dataclass
class ComparisonResult:
    """Two scopes side by side; `deltas` trends scope A against scope B."""
    scope_a: AggregationScope
    scope_b: AggregationScope
    result_a: DashboardResult
    result_b: DashboardResult
    deltas: dict[str, KPIValue] = field(default_factory=dict)
    has_data: bool = False


def _cost_map(breakdown: dict) -> dict[str, float]:
    return {k: b.cost for k, b in breakdown.items()}


# Aggregator name -> breakdowns it contributes
_BREAKDOWNS = {
    "manifests": lambda m: {
        "cargo_by_location": m.by_location,
        "cargo_by_month": m.by_month,
        "cargo_by_vessel_type": m.by_vessel_type,
        "wet_bulk_by_fluid": m.fluid_breakdown,
    },
    "voyage_events": lambda m: {
        "hours_by_parent_event": m.by_parent_event,
        "hours_by_location": m.by_location,
        "hours_by_month": m.by_month,
        "cost_by_vessel": m.cost_by_vessel,
    },
    "bulk_actions": lambda m: {
        "volume_by_movement_type": m.movement_type_breakdown,
        "volume_by_fluid_kind": m.fluid_kind_breakdown,
    },
    "cost_allocation": lambda m: {
        "cost_by_project_type": _cost_map(m.by_project_type),
        "cost_by_department": _cost_map(m.by_department),
        "cost_by_location": _cost_map(m.by_location),
        "cost_by_month": _cost_map(m.by_month),
    },
    "voyage_list": lambda m: {
        "voyage_purpose_distribution": m.purpose_distribution,
        "voyages_by_month": m.voyages_by_month,
    },
    "budget_vs_actual": lambda m: {
        "variance_by_lc": {lc: round(c.variance, 2) for lc, c in m.by_lc.items()},
    },
}


class DashboardEngine:
    """
    Entry points take (dataset, scope) and return a DashboardResult.
    Stateless apart from the optional cache; concurrent calls are independent.
    """

    _AGGREGATOR_MAP: dict[str, type] = {
        "manifests":        ManifestAggregator,
        "voyage_events":    VoyageEventAggregator,
        "bulk_actions":     BulkFluidAggregator,
        "cost_allocation":  CostAllocationAggregator,
        "voyage_list":      VoyageListAggregator,
        "budget_vs_actual": BudgetVsActual,
    }

    _VIEWS: dict[str, tuple[str, ...]] = {
        "drilling":         ("manifests", "voyage_events", "bulk_actions"),
        "production":       ("manifests", "voyage_events", "bulk_actions"),
        "cost_allocation":  ("cost_allocation", "budget_vs_actual"),
        "voyage_analytics": ("voyage_list",),
        "bulk_actions":     ("bulk_actions",),
        "kpis":             ("manifests", "voyage_events", "bulk_actions", "cost_allocation", "voyage_list"),
    }

    _DEPARTMENT_VIEWS: dict[str, str] = {
        "drilling":   "Drilling",
        "production": "Production",
    }

    def __init__(self, cache: Optional[AggregationCache] = None) -> None:
        self._cache = cache
        self._aggregators: dict[str, _Base] = {
            name: cls() for name, cls in self._AGGREGATOR_MAP.items()
        }

    # ── Entry points ──────────────────────────────────────────────────────────

    def drilling(self, dataset: LogisticsDataset, scope: ScopeLike = None) -> DashboardResult:
        return self._run("drilling", dataset, self._view_scope("drilling", scope))

    def production(self, dataset: LogisticsDataset, scope: ScopeLike = None) -> DashboardResult:
        return self._run("production", dataset, self._view_scope("production", scope))

    def cost_allocation(self, dataset: LogisticsDataset, scope: ScopeLike = None) -> DashboardResult:
        return self._run("cost_allocation", dataset, self._scope(scope))

    def voyage_analytics(self, dataset: LogisticsDataset, scope: ScopeLike = None) -> DashboardResult:
        return self._run("voyage_analytics", dataset, self._scope(scope))

    def bulk_actions(self, dataset: LogisticsDataset, scope: ScopeLike = None) -> DashboardResult:
        return self._run("bulk_actions", dataset, self._scope(scope))

    def kpis(self, dataset: LogisticsDataset, scope: ScopeLike = None) -> DashboardResult:
        return self._run("kpis", dataset, self._scope(scope))

    def comparison(
        self,
        dataset: LogisticsDataset,
        scope_a: ScopeLike,
        scope_b: ScopeLike,
        view: str = "kpis",
    ) -> ComparisonResult:
        """
        Run one view over two scopes (two locations, two months, drilling vs
        production) and trend A against B.  Deltas are real comparisons,
        never estimated: a side without data contributes 0.
        """
        self._check_view(view)
        a, b = self._view_scope(view, scope_a), self._view_scope(view, scope_b)
        result_a = self._run(view, dataset, a)
        result_b = self._run(view, dataset, b)
        has_data = result_a.has_data or result_b.has_data

        deltas = {
            name: build_kpi(
                name,
                kpi.value,
                result_b.kpis[name].value if name in result_b.kpis else 0.0,
                unit=kpi.unit,
                has_data=has_data,
            )
            for name, kpi in result_a.kpis.items()
        }
        log.info("Comparison complete", view=view, scope_a=a.label(), scope_b=b.label(), kpis=len(deltas))
        return ComparisonResult(a, b, result_a, result_b, deltas, has_data)

    def run_view(self, view: str, dataset: LogisticsDataset, scope: ScopeLike = None) -> DashboardResult:
        """Dispatch by view name (CLI / callers that hold the view as a string)."""
        self._check_view(view)
        return getattr(self, view)(dataset, scope)

    # ── Private ───────────────────────────────────────────────────────────────

    def _check_view(self, view: str) -> None:
        if view not in self._VIEWS:
            raise ValueError(f"Unknown dashboard view '{view}'. Valid views: {', '.join(sorted(self._VIEWS))}")

    def _view_scope(self, view: str, scope: ScopeLike) -> AggregationScope:
        """Scope as the view's entry point sees it: department views pin their department."""
        department = self._DEPARTMENT_VIEWS.get(view)
        if department:
            return self._with_department(scope, department)
        return self._scope(scope)

    @staticmethod
    def _scope(scope: ScopeLike) -> AggregationScope:
        if scope is None:
            return AggregationScope()
        if isinstance(scope, AggregationScope):
            return scope
        return AggregationScope(**scope)

    def _with_department(self, scope: ScopeLike, department: str) -> AggregationScope:
        return self._scope(scope).model_copy(update={"department": department})

    def _run(self, view: str, dataset: LogisticsDataset, scope: AggregationScope) -> DashboardResult:
        if self._cache is None:
            return self._evaluate(view, dataset, scope)
        key = AggregationCache.make_key(dataset.fingerprint, view, scope.cache_key())
        return self._cache.get_or_compute(key, lambda: self._evaluate(view, dataset, scope))

    @timed("dashboard")
    def _evaluate(self, view: str, dataset: LogisticsDataset, scope: AggregationScope) -> DashboardResult:
        log.info("Starting aggregation", view=view, scope=scope.label(), **dataset.counts())
        result = DashboardResult(dashboard=view, scope=scope)

        try:
            for name in self._VIEWS[view]:
                metrics, kpis = self._aggregators[name].evaluate(dataset, scope)
                result.metrics[name] = metrics
                result.kpis.update(kpis)
                result.breakdowns.update(_BREAKDOWNS[name](metrics))
        except Exception:
            AGGREGATION_REQUESTS.labels(dashboard=view, status="error").inc()
            log.error("Aggregation failed", view=view, scope=scope.label(), exc_info=True)
            raise

        if "manifests" in result.metrics and "voyage_events" in result.metrics:
            result.kpis["lifts_per_hour"] = self._lifts_per_hour(result)

        if "bulk_actions" in result.metrics:
            dedup = result.metrics["bulk_actions"].deduplication_result
            validation = validate_fluid_movements(dedup.consolidated_operations)
            result.warnings.extend(dedup.warnings)
            result.warnings.extend(validation.issues + validation.warnings)
            result.calculation_metadata["deduplication_report"] = generate_deduplication_report(dedup)

        result.has_data = any(m.has_data for m in result.metrics.values())
        result.calculation_metadata.update({
            "aggregators_run": list(result.metrics),
            "dataset_fingerprint": dataset.fingerprint,
            "estimated_kpis": sorted(n for n, k in result.kpis.items() if k.is_estimated),
        })
        if not result.has_data:
            log.info("No data in scope", view=view, scope=scope.label())

        AGGREGATION_REQUESTS.labels(dashboard=view, status="ok").inc()
        log.info("Aggregation complete", view=view, kpis=len(result.kpis), has_data=result.has_data)
        return result

    @staticmethod
    def _lifts_per_hour(result: DashboardResult) -> KPIValue:
        manifests = result.metrics["manifests"]
        events = result.metrics["voyage_events"]
        current = safe_divide(manifests.total_lifts, events.cargo_ops_hours)

        previous = None
        prior_lifts = result.kpis.get("total_lifts")
        prior_hours = result.kpis.get("cargo_ops_hours")
        if (prior_lifts and prior_hours and not prior_lifts.is_estimated and not prior_hours.is_estimated):
            previous = safe_divide(prior_lifts.previous_value or 0.0, prior_hours.previous_value or 0.0)

        return build_kpi(
            "lifts_per_hour", current, previous, unit="lifts/hr",
            has_data=manifests.has_data or events.has_data,
        )
