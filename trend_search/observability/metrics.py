"""
Prometheus metrics exporters for the Trend Search System.

This module defines and exports Prometheus metrics for monitoring:
- API request rates and latencies
- Collector runs and items collected per source
- Update runs (scheduled and manual) and their duration
- Business metrics (trends created, cache size)
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
)

from trend_search import __version__

__all__ = [
    "CONTENT_TYPE_LATEST",
    "metrics_registry",
    "get_metrics",
    "record_api_request",
    "record_item_collected",
    "record_trend_created",
    "record_collector_run",
    "record_update_run",
    "update_cache_gauges",
]


# Create a custom registry for this application
metrics_registry = CollectorRegistry()


# ============================================================================
# API Metrics
# ============================================================================

api_request_counter = Counter(
    "api_requests_total",
    "Total number of API requests",
    ["method", "endpoint", "status_code"],
    registry=metrics_registry,
)

api_request_duration = Histogram(
    "api_request_duration_seconds",
    "API request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
    registry=metrics_registry,
)

# ============================================================================
# Collection Metrics
# ============================================================================

items_collected_counter = Counter(
    "items_collected_total",
    "Total number of items collected from sources",
    ["source"],
    registry=metrics_registry,
)

collector_run_counter = Counter(
    "collector_runs_total",
    "Total number of collector runs",
    ["collector", "status"],  # status: success, failure
    registry=metrics_registry,
)

collector_run_duration = Histogram(
    "collector_run_duration_seconds",
    "Collector run duration in seconds",
    ["collector"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
    registry=metrics_registry,
)

# ============================================================================
# Update Metrics
# ============================================================================

update_run_counter = Counter(
    "update_runs_total",
    "Total number of update runs",
    ["trigger", "status"],  # trigger: scheduled, manual
    registry=metrics_registry,
)

update_duration = Histogram(
    "update_duration_seconds",
    "Update run duration in seconds",
    buckets=[1, 5, 10, 30, 60, 120, 300, 600],
    registry=metrics_registry,
)

# ============================================================================
# Business Metrics
# ============================================================================

trends_created_counter = Counter(
    "trends_created_total",
    "Total number of trends created",
    ["category"],
    registry=metrics_registry,
)

cached_trends_gauge = Gauge(
    "cached_trends",
    "Number of aggregated trends currently cached",
    registry=metrics_registry,
)

cached_items_gauge = Gauge(
    "cached_items",
    "Number of raw items currently cached",
    registry=metrics_registry,
)

# ============================================================================
# Application Info
# ============================================================================

app_info = Info(
    "app",
    "Application information",
    registry=metrics_registry,
)

app_info.info({
    "name": "Trend Search System",
    "version": __version__,
})


# ============================================================================
# Metrics Endpoint Handler
# ============================================================================

def get_metrics() -> bytes:
    """
    Get Prometheus metrics in text format.

    Returns:
        Metrics data in Prometheus text format

    Example:
        metrics_data = get_metrics()
        return Response(content=metrics_data, media_type=CONTENT_TYPE_LATEST)
    """
    return generate_latest(metrics_registry)


# ============================================================================
# Helper Functions
# ============================================================================

def record_api_request(method: str, endpoint: str, status_code: int, duration: float):
    """
    Record a handled API request.

    Args:
        method: HTTP method
        endpoint: Route path template
        status_code: Response status code
        duration: Handling time in seconds
    """
    api_request_counter.labels(
        method=method,
        endpoint=endpoint,
        status_code=status_code,
    ).inc()
    api_request_duration.labels(method=method, endpoint=endpoint).observe(duration)


def record_item_collected(source: str, count: int = 1):
    """
    Record items collected from a source.

    Args:
        source: Source type value (rss, newsapi, etc.)
        count: Number of items collected
    """
    items_collected_counter.labels(source=source).inc(count)


def record_collector_run(collector: str, success: bool, duration: float = 0.0):
    """
    Record one collector run.

    Args:
        collector: Collector name
        success: Whether the run succeeded
        duration: Run duration in seconds
    """
    status = "success" if success else "failure"
    collector_run_counter.labels(collector=collector, status=status).inc()
    collector_run_duration.labels(collector=collector).observe(duration)


def record_trend_created(category: str, count: int = 1):
    """
    Record trends created.

    Args:
        category: Trend category
        count: Number of trends created
    """
    trends_created_counter.labels(category=category).inc(count)


def record_update_run(trigger: str, status: str, duration: float):
    """
    Record an update run.

    Args:
        trigger: What started the run (scheduled, manual)
        status: success or failure
        duration: Run duration in seconds
    """
    update_run_counter.labels(trigger=trigger, status=status).inc()
    update_duration.observe(duration)


def update_cache_gauges(trend_count: int, item_count: int):
    """
    Update cache size gauges.

    Args:
        trend_count: Number of cached aggregated trends
        item_count: Number of cached raw items
    """
    cached_trends_gauge.set(trend_count)
    cached_items_gauge.set(item_count)
