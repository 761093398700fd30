"""
Health check endpoints.

The basic check never touches the cache or collectors; the collector check
queries every registered source.
"""

from fastapi import APIRouter, Depends, status

from api.dependencies import get_orchestrator
from api.schemas.common import CollectorHealthResponse, HealthCheckResponse
from trend_search.collectors.orchestrator import CollectorOrchestrator
from trend_search.utils import utc_now


router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    response_model=HealthCheckResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Quick health check endpoint that always returns 200 OK if API is running.",
)
async def health_check() -> HealthCheckResponse:
    """
    Basic health check endpoint.

    Suitable for load balancer health checks.
    """
    return HealthCheckResponse(status="ok", timestamp=utc_now())


@router.get(
    "/collectors",
    response_model=CollectorHealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Collector health check",
    description="Run every registered collector's health check concurrently.",
)
async def collector_health_check(
    orchestrator: CollectorOrchestrator = Depends(get_orchestrator),
) -> CollectorHealthResponse:
    results = await orchestrator.check_health()
    return CollectorHealthResponse(
        healthy=all(results.values()),
        collectors=results,
    )
