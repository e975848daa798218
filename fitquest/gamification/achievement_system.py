"""
Badge System

Evaluates and awards badges after each recorded activity:
- First-time badges (first workout, meal, water)
- Volume badges (lifetime water / workout counts)
- Time-of-day badges (early bird, night owl)
- Workout streak badges
- Quick start (activity within minutes of account creation)
- Meta badges (total number of badges unlocked)

Badges are append-only: an unlocked badge is never re-evaluated or revoked.
Meta badges count both owned badges and badges unlocked in the same pass, so
the badge that crosses a meta threshold and the meta badge itself unlock
together.
"""

from typing import Dict, List, Optional, Union
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo
import logging

from fitquest.models.gamification import (
    ActivityCategory,
    Badge,
    BadgeKey,
    BadgeOverview,
    GamificationRecord,
    UnlockedBadge,
)
from fitquest.gamification.streak_system import resolve_timezone

logger = logging.getLogger(__name__)

HYDRATION_HERO_WATER = 3
WATER_MASTER_WATER = 10
DOUBLE_LOG_WORKOUTS = 2
TRIPLE_LOG_WORKOUTS = 3
EARLY_BIRD_BEFORE_HOUR = 7
NIGHT_OWL_FROM_HOUR = 20
QUICK_START_WINDOW = timedelta(minutes=5)
TEST_MASTER_BADGES = 5
PRESENTATION_PRO_BADGES = 8

_BADGES = [
    Badge(key=BadgeKey.FIRST_WORKOUT, name="First Workout ✅",
          description="Log your first workout."),
    Badge(key=BadgeKey.FIRST_MEAL, name="First Meal 🍽️",
          description="Log your first meal."),
    Badge(key=BadgeKey.FIRST_WATER, name="First Water 💧",
          description="Log your first glass of water."),
    Badge(key=BadgeKey.HYDRATION_HERO, name="3 Glasses of Water 💦",
          description=f"Log water {HYDRATION_HERO_WATER} times."),
    Badge(key=BadgeKey.WATER_MASTER, name="10 Glasses in a Day 🚰",
          description=f"Log water {WATER_MASTER_WATER} times."),
    Badge(key=BadgeKey.DOUBLE_LOG, name="Two Logs in a Row ✌️",
          description=f"Log {DOUBLE_LOG_WORKOUTS} workouts."),
    Badge(key=BadgeKey.TRIPLE_LOG, name="Three Logs in a Row 💥",
          description=f"Log {TRIPLE_LOG_WORKOUTS} workouts."),
    Badge(key=BadgeKey.EARLY_BIRD, name="Workout Before 7am 🌅",
          description="Log an activity before 7am."),
    Badge(key=BadgeKey.NIGHT_OWL, name="Workout After 8pm 🌙",
          description="Log an activity after 8pm."),
    Badge(key=BadgeKey.STREAK_3, name="3-Day Streak 🔥",
          description="Reach a 3-day workout streak."),
    Badge(key=BadgeKey.STREAK_7, name="7-Day Streak 🏅",
          description="Reach a 7-day workout streak."),
    Badge(key=BadgeKey.GOAL_CRUSHER, name="Reached a Goal 🎯",
          description="Reach one of your goals."),
    Badge(key=BadgeKey.QUICK_START, name="Logged Something in First 5 Minutes ⏱️",
          description="Log an activity within 5 minutes of getting started."),
    Badge(key=BadgeKey.TEST_MASTER, name="Unlocked 5 Badges 🧩",
          description=f"Unlock {TEST_MASTER_BADGES} badges.", meta=True),
    Badge(key=BadgeKey.PRESENTATION_PRO, name="Unlocked 8 Badges in One Demo 🏆",
          description=f"Unlock {PRESENTATION_PRO_BADGES} badges.", meta=True),
]

BADGE_CATALOG: Dict[BadgeKey, Badge] = {badge.key: badge for badge in _BADGES}


def badge_name(key: BadgeKey) -> str:
    return BADGE_CATALOG[key].name


def _local_hour(now: datetime, tz: Optional[Union[str, ZoneInfo]]) -> int:
    if now.tzinfo is None:
        return now.hour
    return now.astimezone(resolve_timezone(tz)).hour


def _since_creation(record: GamificationRecord, now: datetime) -> Optional[timedelta]:
    created = record.created_at
    if created is None:
        return None
    # Legacy naive timestamps are UTC
    if created.tzinfo is None and now.tzinfo is not None:
        created = created.replace(tzinfo=timezone.utc)
    elif created.tzinfo is not None and now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now - created


def evaluate_badges(
    record: GamificationRecord,
    category: ActivityCategory,
    now: datetime,
    tz: Optional[Union[str, ZoneInfo]] = None
) -> List[BadgeKey]:
    """
    Badges newly earned by an activity in `category`

    Pure: reads the record (with the lifetime counter and streak already
    updated for this activity) and returns the keys to add, in evaluation
    order. Owned badges are never returned.
    """
    pending: List[BadgeKey] = []

    def check(key: BadgeKey, condition: bool) -> None:
        if condition and not record.has_badge(key):
            pending.append(key)

    # First-time badge for this category
    check(category.first_badge, True)

    # Volume badges
    check(BadgeKey.HYDRATION_HERO, record.total_water >= HYDRATION_HERO_WATER)
    check(BadgeKey.WATER_MASTER, record.total_water >= WATER_MASTER_WATER)
    check(BadgeKey.DOUBLE_LOG, record.total_workouts >= DOUBLE_LOG_WORKOUTS)
    check(BadgeKey.TRIPLE_LOG, record.total_workouts >= TRIPLE_LOG_WORKOUTS)

    # Time-of-day badges
    hour = _local_hour(now, tz)
    check(BadgeKey.EARLY_BIRD, hour < EARLY_BIRD_BEFORE_HOUR)
    check(BadgeKey.NIGHT_OWL, hour >= NIGHT_OWL_FROM_HOUR)

    # Streak badges
    workout_streak = record.streak(ActivityCategory.WORKOUT)
    check(BadgeKey.STREAK_3, workout_streak >= 3)
    check(BadgeKey.STREAK_7, workout_streak >= 7)

    elapsed = _since_creation(record, now)
    check(BadgeKey.QUICK_START, elapsed is not None and elapsed <= QUICK_START_WINDOW)

    # Meta badges count what is owned plus what this pass unlocks
    total = len(record.owned_badges) + len(pending)
    check(BadgeKey.TEST_MASTER, total >= TEST_MASTER_BADGES)
    check(BadgeKey.PRESENTATION_PRO, total >= PRESENTATION_PRO_BADGES)

    return pending


def apply_badges(
    record: GamificationRecord,
    keys: List[BadgeKey],
    now: datetime
) -> List[UnlockedBadge]:
    """Mark badges unlocked on the record; returns them with display names"""
    unlocked = []
    for key in keys:
        if record.has_badge(key):
            continue
        record.badges[key.value] = True
        unlocked.append(UnlockedBadge(key=key, name=badge_name(key)))

    if unlocked:
        record.updated_at = now
        logger.info(f"Unlocked badges: {', '.join(b.key.value for b in unlocked)}")

    return unlocked


def get_badge_overview(record: Optional[GamificationRecord]) -> BadgeOverview:
    """
    Split the catalog into unlocked and locked badges for display

    Keys found on the record but missing from this catalog are reported in
    unknown_keys rather than dropped.
    """
    owned = set(record.owned_badges) if record else set()

    unlocked = [badge for badge in _BADGES if badge.key.value in owned]
    locked = [badge for badge in _BADGES if badge.key.value not in owned]
    known = {badge.key.value for badge in _BADGES}
    unknown = sorted(owned - known)

    return BadgeOverview(
        unlocked=unlocked,
        locked=locked,
        unknown_keys=unknown,
        total_unlocked=len(owned),
        total_badges=len(_BADGES),
    )


def get_badge_catalog() -> List[Badge]:
    """Full badge catalog in display order"""
    return list(_BADGES)
