"""
Per-Category Streak Tracking

Tracks day streaks for each activity category (workout, meal, water).

Rules:
- Activity on the same calendar day as the last one: no change
- First activity ever in a category: streak starts at 1
- Any later day: streak + 1 (lenient policy, the default)

Under the consecutive policy a gap of more than one calendar day resets the
streak to 1 instead.
"""

from enum import Enum
from typing import Optional, Union
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

from fitquest import config
from fitquest.exceptions import ConfigurationError
from fitquest.models.gamification import ActivityCategory, GamificationRecord

logger = logging.getLogger(__name__)


class StreakPolicy(str, Enum):
    LENIENT = "lenient"
    CONSECUTIVE = "consecutive"


def default_policy() -> StreakPolicy:
    return StreakPolicy(config.STREAK_POLICY)


def resolve_timezone(tz: Optional[Union[str, ZoneInfo]] = None) -> ZoneInfo:
    """
    ZoneInfo for a timezone name, defaulting to GAMIFICATION_TIMEZONE

    Raises:
        ConfigurationError: the name is not a known IANA timezone
    """
    if isinstance(tz, ZoneInfo):
        return tz

    name = tz or config.GAMIFICATION_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(
            f"Unknown timezone: {name}",
            config_key="GAMIFICATION_TIMEZONE",
            cause=e
        )


def activity_date(now: datetime, tz: Optional[Union[str, ZoneInfo]] = None) -> date:
    """Calendar day of `now` in the gamification timezone"""
    tz = resolve_timezone(tz)
    if now.tzinfo is None:
        return now.date()
    return now.astimezone(tz).date()


def next_streak(
    current: int,
    last_date: Optional[date],
    today: date,
    policy: StreakPolicy = StreakPolicy.LENIENT
) -> int:
    """Streak value after an activity on `today`"""
    if last_date is None:
        return 1

    if last_date == today:
        # A stored date without a streak still counts today's activity
        return max(current, 1)

    if policy is StreakPolicy.CONSECUTIVE and last_date != today - timedelta(days=1):
        return 1

    return current + 1


def update_streak(
    record: GamificationRecord,
    category: ActivityCategory,
    today: date,
    now: datetime,
    policy: Optional[StreakPolicy] = None
) -> int:
    """
    Update the streak for a category and stamp today's date

    Mutates the record in place (streaks, last_activity, updated_at).

    Returns:
        The new streak value
    """
    policy = policy or default_policy()

    old_streak = record.streak(category)
    last_date = record.last_activity_on(category)
    new_streak = next_streak(old_streak, last_date, today, policy)

    if policy is StreakPolicy.CONSECUTIVE and last_date and new_streak == 1 and old_streak > 1:
        logger.info(
            f"{category.value} streak broken: was {old_streak}, "
            f"gap was {(today - last_date).days} days"
        )

    record.streaks[category.value] = new_streak
    record.last_activity[category.value] = today
    record.updated_at = now

    logger.debug(f"Updated {category.value} streak: {old_streak} -> {new_streak} days")

    return new_streak
