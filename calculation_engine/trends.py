"""
calculation_engine/trends.py
KPI values with period-over-period trends.

A trend compares the current aggregate with the same aggregate over the
previous window.  When the previous window holds no records the baseline
is synthetic (current x settings.synthetic_baseline_multiplier) and the
KPI is flagged is_estimated so it is never mistaken for a real comparison.
"""
import math
from dataclasses import dataclass
from typing import Optional

from config.settings import settings
from monitoring import ESTIMATED_TRENDS

# KPIs where a decrease is an improvement
LOWER_IS_BETTER: frozenset[str] = frozenset({
    "waiting_time",
    "waiting_time_percentage",
    "weather_waiting",
    "non_productive_hours",
    "npt_percentage",
    "total_cost",
    "vessel_cost",
    "average_cost_per_day",
    "budget_variance",
})


@dataclass(frozen=True)
class KPIValue:
    value: float = 0.0
    trend: float = 0.0
    is_positive: bool = False
    is_estimated: bool = False
    previous_value: Optional[float] = None
    unit: str = ""


ZERO_KPI = KPIValue()


def safe_divide(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0 when the result would not be a finite number."""
    if not denominator:
        return 0.0
    result = numerator / denominator
    return result if math.isfinite(result) else 0.0


def percentage(part: float, whole: float) -> float:
    return safe_divide(part, whole) * 100


def trend_pct(current: float, previous: float) -> float:
    return round(safe_divide(current - previous, previous) * 100, 2)


def build_kpi(
    name: str,
    current: float,
    previous: Optional[float],
    unit: str = "",
    has_data: bool = True,
    lower_is_better: Optional[bool] = None,
) -> KPIValue:
    """
    Args:
        previous: the real prior-period value, or None to use the synthetic baseline.
        has_data: False returns the canonical zero KPI regardless of the other inputs.
    """
    if not has_data:
        return KPIValue(unit=unit)

    estimated = previous is None
    if estimated:
        previous = current * settings.synthetic_baseline_multiplier
        ESTIMATED_TRENDS.labels(kpi=name).inc()

    trend = trend_pct(current, previous)
    if lower_is_better is None:
        lower_is_better = name in LOWER_IS_BETTER
    is_positive = trend < 0 if lower_is_better else trend > 0

    return KPIValue(
        value=round(current, 4),
        trend=trend,
        is_positive=is_positive,
        is_estimated=estimated,
        previous_value=round(previous, 4),
        unit=unit,
    )
