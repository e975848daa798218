"""Global test fixtures and utilities for fitquest tests"""
import pytest
from datetime import datetime, timedelta, timezone

from fitquest.db.store import InMemoryGamificationStore
from fitquest.gamification.streak_system import StreakPolicy
from fitquest.models.gamification import GamificationRecord
from fitquest.services.gamification_service import GamificationService


class FakeClock:
    """Settable clock passed to GamificationService"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


# ============================================================================
# Time Fixtures
# ============================================================================

@pytest.fixture
def noon():
    """Midday UTC: no time-of-day badge applies"""
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(noon):
    return FakeClock(noon)


# ============================================================================
# Store & Service Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "uid-123456789"


@pytest.fixture
def memory_store():
    return InMemoryGamificationStore()


@pytest.fixture
def service(memory_store, clock):
    """GamificationService on an in-memory store, lenient streaks, UTC"""
    return GamificationService(
        memory_store,
        clock=clock,
        streak_policy=StreakPolicy.LENIENT,
        tz_name="UTC"
    )


# ============================================================================
# Record Helpers
# ============================================================================

@pytest.fixture
def make_record(noon):
    """Build a GamificationRecord from camelCase document overrides"""

    def _make(**overrides):
        document = {"createdAt": (noon - timedelta(days=30)).isoformat()}
        document.update(overrides)
        return GamificationRecord.from_document(document)

    return _make
