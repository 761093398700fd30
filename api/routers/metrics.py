"""
Prometheus metrics endpoint for the Trend Search System API.
"""

from fastapi import APIRouter, Response

from trend_search.observability.metrics import CONTENT_TYPE_LATEST, get_metrics

router = APIRouter(
    prefix="/metrics",
    tags=["Monitoring"],
)


@router.get("", response_class=Response)
async def prometheus_metrics():
    """
    Expose Prometheus metrics.

    Returns all metrics of the application registry in Prometheus text
    format, for scraping by a Prometheus server.

    Example metrics exposed:
        - items_collected_total{source="rss"} 120
        - collector_runs_total{collector="RSS Feed Collector",status="success"} 4
        - update_runs_total{trigger="scheduled",status="success"} 3
        - cached_trends 45
    """
    return Response(
        content=get_metrics(),
        media_type=CONTENT_TYPE_LATEST,
    )
