"""API routes for the gamification engine"""
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from fitquest.api.auth import verify_api_key
from fitquest.api.middleware import limiter
from fitquest.api.models import (
    ActivityResponse,
    BadgeCatalogResponse,
    BadgeOverviewResponse,
    GamificationResponse,
    HealthCheckResponse,
)
from fitquest.exceptions import RecordNotFoundError, StoreError
from fitquest.gamification.achievement_system import get_badge_catalog
from fitquest.gamification.xp_system import level_progress
from fitquest.models.gamification import ActivityCategory, LevelProgress
from fitquest.services.container import get_container
from fitquest.services.gamification_service import GamificationService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_gamification_service() -> GamificationService:
    """Dependency: the container's GamificationService"""
    return get_container().gamification_service


@router.get("/api/v1/users/{user_id}/gamification", response_model=GamificationResponse)
@limiter.limit("60/minute")
async def get_gamification(
    request: Request,
    user_id: str,
    api_key: str = Depends(verify_api_key),
    service: GamificationService = Depends(get_gamification_service)
):
    """Get the user's gamification record (Rate limit: 60/minute)"""
    record = await service.read_gamification(user_id)
    if record is None:
        raise RecordNotFoundError(
            f"No gamification record for user {user_id}",
            record_type="Gamification record",
            record_id=user_id,
            user_id=user_id,
            operation="read_gamification"
        )

    return GamificationResponse(
        user_id=user_id,
        gamification=record,
        level=level_progress(record.xp)
    )


@router.post("/api/v1/users/{user_id}/activities/{category}", response_model=ActivityResponse)
@limiter.limit("30/minute")
async def record_activity(
    request: Request,
    user_id: str,
    category: ActivityCategory,
    api_key: str = Depends(verify_api_key),
    service: GamificationService = Depends(get_gamification_service)
):
    """
    Record a workout, meal or water entry (Rate limit: 30/minute)

    Call after the activity itself has been saved.
    """
    result = await service.record_activity(user_id, category)
    return ActivityResponse(user_id=user_id, result=result, badge_names=result.badge_names)


@router.get("/api/v1/users/{user_id}/badges", response_model=BadgeOverviewResponse)
@limiter.limit("60/minute")
async def get_user_badges(
    request: Request,
    user_id: str,
    api_key: str = Depends(verify_api_key),
    service: GamificationService = Depends(get_gamification_service)
):
    """Get the user's unlocked and locked badges (Rate limit: 60/minute)"""
    overview = await service.get_badge_overview(user_id)
    return BadgeOverviewResponse(user_id=user_id, badges=overview)


@router.get("/api/v1/badges", response_model=BadgeCatalogResponse)
async def get_badges(api_key: str = Depends(verify_api_key)):
    """Full badge catalog"""
    return BadgeCatalogResponse(badges=get_badge_catalog())


@router.get("/api/v1/levels/{xp}", response_model=LevelProgress)
async def get_level(xp: int, api_key: str = Depends(verify_api_key)):
    """Level and progress for an XP total"""
    return level_progress(xp)


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(service: GamificationService = Depends(get_gamification_service)):
    """Health check endpoint (no auth)"""
    try:
        await service.store.get("__healthcheck__")
        store_status = "connected"
    except StoreError as e:
        logger.error(f"Health check store read failed: {e.message}")
        store_status = "disconnected"

    return HealthCheckResponse(
        status="healthy" if store_status == "connected" else "degraded",
        store=store_status,
        timestamp=datetime.now(timezone.utc)
    )


@router.get("/metrics")
async def metrics():
    """
    Prometheus metrics endpoint.

    Exposes all application metrics in Prometheus text format.
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
