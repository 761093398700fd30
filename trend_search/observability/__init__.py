"""
Observability module for metrics and logging.

This module provides observability for the Trend Search System:
- Prometheus metrics exporters
- Structured logging with per-run context
"""

from trend_search.observability.metrics import (
    metrics_registry,
    get_metrics,
    record_item_collected,
    record_trend_created,
    record_collector_run,
    record_update_run,
    update_cache_gauges,
)

from trend_search.observability.logging import (
    setup_logging,
    get_log_context,
    log_context,
)

__all__ = [
    # Metrics
    "metrics_registry",
    "get_metrics",
    "record_item_collected",
    "record_trend_created",
    "record_collector_run",
    "record_update_run",
    "update_cache_gauges",
    # Logging
    "setup_logging",
    "get_log_context",
    "log_context",
]
