"""monitoring package"""
from .logger import (
    logger,
    metrics,
    timed,
    start_metrics_server,
    get_logger,
    AGGREGATION_REQUESTS,
    AGGREGATION_LATENCY,
    DEDUP_RUNS,
    DUPLICATES_REMOVED,
    ESTIMATED_TRENDS,
    DATA_QUALITY_ISSUES,
)

__all__ = [
    "logger", "metrics", "timed", "start_metrics_server", "get_logger",
    "AGGREGATION_REQUESTS", "AGGREGATION_LATENCY", "DEDUP_RUNS",
    "DUPLICATES_REMOVED", "ESTIMATED_TRENDS", "DATA_QUALITY_ISSUES",
]
