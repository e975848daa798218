"""Pydantic models for API requests and responses"""
from typing import List
from pydantic import BaseModel, Field
from datetime import datetime

from fitquest.models.gamification import (
    ActivityResult,
    Badge,
    BadgeOverview,
    GamificationRecord,
    LevelProgress,
)


class GamificationResponse(BaseModel):
    """User's gamification record with level progress"""
    user_id: str
    gamification: GamificationRecord
    level: LevelProgress


class ActivityResponse(BaseModel):
    """Result of recording an activity"""
    user_id: str
    result: ActivityResult
    badge_names: List[str] = Field(default_factory=list, description="Display names of newly unlocked badges")


class BadgeOverviewResponse(BaseModel):
    """User's unlocked and locked badges"""
    user_id: str
    badges: BadgeOverview


class BadgeCatalogResponse(BaseModel):
    """All badges the engine knows about"""
    badges: List[Badge]


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str = Field(..., description="Service status")
    store: str = Field(..., description="Gamification store status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response model"""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    user_message: str = Field(..., description="Message safe to show to users")
    request_id: str = Field(..., description="Request id for tracing")
    timestamp: datetime = Field(..., description="Error timestamp")
