"""FastAPI application setup"""
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from fitquest import __version__
from fitquest.api.routes import router
from fitquest.api.middleware import setup_cors, setup_metrics, setup_rate_limiting
from fitquest.db.store import GamificationStore
from fitquest.exceptions import (
    FitQuestError,
    RecordNotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from fitquest.services.container import create_store, init_container, reset_container

logger = logging.getLogger(__name__)


def _status_for(exc: FitQuestError) -> int:
    if isinstance(exc, ValidationError):
        return 422
    if isinstance(exc, RecordNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, StoreUnavailableError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def create_api_application(store: Optional[GamificationStore] = None) -> FastAPI:
    """
    Create and configure FastAPI application

    Args:
        store: Store to serve; built from STORE_BACKEND at startup when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifecycle manager for FastAPI application"""
        logger.info("Starting API server...")
        active_store = store or await create_store()
        init_container(active_store)
        logger.info(f"Gamification store ready: {type(active_store).__name__}")

        yield

        logger.info("Shutting down API server...")
        await active_store.close()
        reset_container()
        logger.info("Gamification store closed")

    app = FastAPI(
        title="FitQuest Gamification API",
        description="XP, levels, streaks and badges for fitness tracking",
        version=__version__,
        lifespan=lifespan
    )

    # Setup middleware
    setup_cors(app)
    setup_rate_limiting(app)
    setup_metrics(app)

    # Include routes
    app.include_router(router)

    @app.exception_handler(FitQuestError)
    async def fitquest_exception_handler(request: Request, exc: FitQuestError):
        return JSONResponse(status_code=_status_for(exc), content=exc.to_dict())

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)}
        )

    logger.info("FastAPI application created")

    return app
