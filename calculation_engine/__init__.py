"""calculation_engine package"""
from .aggregators import (
    BudgetVsActual, BulkFluidAggregator, CostAllocationAggregator,
    ManifestAggregator, VoyageEventAggregator, VoyageListAggregator,
)
from .cache import AggregationCache
from .dedup import BulkFluidMetrics, DeduplicationResult, FluidMovementOperation, deduplicate_bulk_actions
from .engine import ComparisonResult, DashboardEngine, DashboardResult
from .trends import KPIValue, ZERO_KPI
__all__ = [
    "BudgetVsActual","BulkFluidAggregator","CostAllocationAggregator",
    "ManifestAggregator","VoyageEventAggregator","VoyageListAggregator",
    "AggregationCache","BulkFluidMetrics","DeduplicationResult","FluidMovementOperation",
    "deduplicate_bulk_actions","ComparisonResult","DashboardEngine","DashboardResult",
    "KPIValue","ZERO_KPI",
]
