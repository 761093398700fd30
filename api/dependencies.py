"""
FastAPI dependency injection providers.

The store, scheduler and orchestrator are built once at startup and attached
to ``app.state``; these providers hand them to the routers.
"""

from fastapi import HTTPException, Request, status

from trend_search.collectors.orchestrator import CollectorOrchestrator
from trend_search.scheduler import UpdateScheduler
from trend_search.storage.interfaces import TrendCache


def _state(request: Request, name: str):
    component = getattr(request.app.state, name, None)
    if component is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{name} not initialized",
        )
    return component


def get_store(request: Request) -> TrendCache:
    """
    Get the trend cache from application state.

    Raises:
        HTTPException: If the cache is not initialized
    """
    return _state(request, "store")


def get_scheduler(request: Request) -> UpdateScheduler:
    return _state(request, "scheduler")


def get_orchestrator(request: Request) -> CollectorOrchestrator:
    return _state(request, "orchestrator")
