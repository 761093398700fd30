"""
Update and status endpoints.

A manual update runs through the scheduler's single-flight guard, so it never
overlaps a scheduled run.
"""

import logging
from typing import Union

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_orchestrator, get_scheduler, get_store
from api.schemas.common import MessageResponse
from api.schemas.trends import StatusResponse, UpdateResponse
from trend_search.collectors.orchestrator import CollectorOrchestrator
from trend_search.scheduler import UpdateScheduler
from trend_search.storage.interfaces import TrendCache

logger = logging.getLogger(__name__)


router = APIRouter(tags=["Update"])


@router.post(
    "/update",
    response_model=UpdateResponse,
    status_code=status.HTTP_200_OK,
    responses={409: {"model": MessageResponse}},
    summary="Run an update now",
    description="Collect, aggregate and cache immediately. Returns 409 if an update is already running.",
)
async def trigger_update(
    store: TrendCache = Depends(get_store),
    scheduler: UpdateScheduler = Depends(get_scheduler),
) -> Union[UpdateResponse, JSONResponse]:
    result = await scheduler.trigger_now()

    if not result.started:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=MessageResponse(message="Update already in progress").model_dump(),
        )

    logger.info("Manual update completed")

    return UpdateResponse(
        message="Update completed",
        item_count=store.item_count,
        trend_count=store.aggregated_count,
    )


@router.get(
    "/status",
    response_model=StatusResponse,
    status_code=status.HTTP_200_OK,
    summary="System status",
    description="Scheduler state, cache sizes and per-collector status.",
)
async def get_status(
    store: TrendCache = Depends(get_store),
    scheduler: UpdateScheduler = Depends(get_scheduler),
    orchestrator: CollectorOrchestrator = Depends(get_orchestrator),
) -> StatusResponse:
    scheduler_status = scheduler.get_status()

    return StatusResponse(
        **scheduler_status.model_dump(),
        item_count=store.item_count,
        trend_count=store.aggregated_count,
        collectors=orchestrator.get_statuses(),
    )
