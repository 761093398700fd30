"""
FastAPI application for the Trend Search System API.

This module builds the FastAPI app, configures middleware and error handlers,
and includes all API routers. The core components are created by the caller
and attached to ``app.state``.
"""

import logging
import time
from typing import Any, Dict, Optional, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api import __version__
from api.routers import health, metrics, trends, update
from api.schemas.common import ErrorResponse
from trend_search.collectors.orchestrator import CollectorOrchestrator
from trend_search.observability.metrics import record_api_request
from trend_search.scheduler import UpdateScheduler
from trend_search.storage.interfaces import TrendCache
from trend_search.utils import utc_now

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return utc_now().isoformat()


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with consistent error response format."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=str(exc.detail),
            detail=str(exc.detail),
            code=f"HTTP_{exc.status_code}",
            timestamp=_timestamp(),
        ).model_dump(),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="Validation Error",
            detail=str(exc.errors()),
            code="VALIDATION_ERROR",
            timestamp=_timestamp(),
        ).model_dump(),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal Server Error",
            detail="An unexpected error occurred",
            code="INTERNAL_ERROR",
            timestamp=_timestamp(),
        ).model_dump(),
    )


async def track_requests(request: Request, call_next):
    """Record request count and latency per route template."""
    start_time = time.time()
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        record_api_request(request.method, endpoint, status_code, time.time() - start_time)


def create_app(
    store: TrendCache,
    scheduler: UpdateScheduler,
    orchestrator: CollectorOrchestrator,
    cors_origins: Optional[Sequence[str]] = None,
    lifespan=None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        store: Trend cache the endpoints read from
        scheduler: Update scheduler used for manual updates and status
        orchestrator: Collector orchestrator used for collector status
        cors_origins: Allowed CORS origins (default: any)
        lifespan: Optional lifespan context manager

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Trend Search System API",
        description="""
        ## Trend Search System

        Collects trending items from RSS feeds, NewsAPI, X (Twitter) and
        scraped pages, merges duplicate reports, clusters related items and
        serves the ranked result.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.store = store
    app.state.scheduler = scheduler
    app.state.orchestrator = orchestrator

    # CORS middleware configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors_origins or ["*"]),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(track_requests)

    # Exception handlers
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    @app.get("/", tags=["Root"])
    async def root() -> Dict[str, Any]:
        """API root endpoint providing basic information."""
        return {
            "name": "Trend Search System API",
            "version": __version__,
            "status": "operational",
            "docs": "/docs",
            "endpoints": {
                "health": "/api/health",
                "trends": "/api/trends",
                "update": "/api/update",
                "status": "/api/status",
                "metrics": "/metrics",
            },
        }

    # Include routers
    app.include_router(health.router, prefix="/api")
    app.include_router(trends.router, prefix="/api")
    app.include_router(update.router, prefix="/api")
    app.include_router(metrics.router)

    return app
