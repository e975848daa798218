"""
GamificationService - Gamification Business Logic

Records workouts, meals and water intake against a user's gamification
record: lifetime counters, day streaks, XP/levels and badges.
"""

import logging
import time
from typing import Callable, Optional, Union
from datetime import datetime, timezone

from fitquest import config
from fitquest.db.store import GamificationStore
from fitquest.exceptions import ValidationError
from fitquest.gamification.achievement_system import (
    apply_badges,
    evaluate_badges,
    get_badge_overview,
)
from fitquest.gamification.streak_system import (
    StreakPolicy,
    activity_date,
    resolve_timezone,
    update_streak,
)
from fitquest.gamification.xp_system import award_xp, get_xp_for_activity, level_progress
from fitquest.models.gamification import (
    ActivityCategory,
    ActivityResult,
    BadgeOverview,
    GamificationRecord,
    LevelProgress,
)
from fitquest.observability.metrics import (
    activities_recorded_total,
    badges_unlocked_total,
    level_ups_total,
    recorder_duration_seconds,
    recorder_failures_total,
    xp_awarded_total,
)

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GamificationService:
    """
    Service for gamification features.

    Responsibilities:
    - Lazily creating a user's gamification record
    - Recording activities (counter, streak, XP, badges) per user
    - Read access for presentation (record, level progress, badges)

    Each recorder call runs its steps in order (counter, streak, XP, badges)
    inside one store transaction for the user. Store failures propagate to
    the caller; nothing is retried.
    """

    def __init__(
        self,
        store: GamificationStore,
        clock: Optional[Callable[[], datetime]] = None,
        streak_policy: Optional[Union[StreakPolicy, str]] = None,
        tz_name: Optional[str] = None
    ):
        """
        Initialize GamificationService.

        Args:
            store: Gamification document store
            clock: Returns the current time (timezone-aware); defaults to UTC now
            streak_policy: Streak policy; defaults to STREAK_POLICY
            tz_name: Timezone for calendar days and local hour; defaults to GAMIFICATION_TIMEZONE

        Raises:
            ConfigurationError: tz_name is not a known timezone
        """
        self.store = store
        self.clock = clock or _utc_now
        self.streak_policy = StreakPolicy(streak_policy or config.STREAK_POLICY)
        self.tz = resolve_timezone(tz_name)
        logger.debug(f"GamificationService initialized (streak policy: {self.streak_policy.value})")

    @staticmethod
    def _check_user_id(user_id: str) -> None:
        if not user_id or not str(user_id).strip():
            raise ValidationError(message="User id is required", field="user_id", value=user_id)

    @staticmethod
    def _category(category: Union[ActivityCategory, str]) -> ActivityCategory:
        try:
            return ActivityCategory(category)
        except ValueError:
            raise ValidationError(
                message=f"Unknown activity category: {category}",
                field="category",
                value=category
            )

    async def ensure_gamification(self, user_id: str) -> None:
        """Create a zero-valued record for the user if none exists"""
        self._check_user_id(user_id)
        created = await self.store.create_if_absent(
            user_id,
            GamificationRecord.new(self.clock()).to_document()
        )
        if created:
            logger.info(f"Created gamification record for user {user_id}")

    async def record_activity(
        self,
        user_id: str,
        category: Union[ActivityCategory, str]
    ) -> ActivityResult:
        """
        Record one activity event for a user.

        Steps, in order:
        1. Ensure the record exists
        2. Increment the lifetime counter for the category
        3. Update the category streak for today
        4. Award the category's XP
        5. Evaluate and unlock badges

        Returns:
            ActivityResult with the new counter, streak, XP award and
            newly unlocked badges
        """
        self._check_user_id(user_id)
        category = self._category(category)
        start_time = time.time()

        try:
            await self.ensure_gamification(user_id)

            async with self.store.transaction(user_id) as txn:
                now = self.clock()
                if txn.document is None:
                    record = GamificationRecord.new(now)
                else:
                    record = GamificationRecord.from_document(txn.document)

                total = record.increment_counter(category)
                streak = update_streak(
                    record,
                    category,
                    activity_date(now, self.tz),
                    now,
                    self.streak_policy
                )
                xp_award = award_xp(record, get_xp_for_activity(category), now)
                unlocked = apply_badges(
                    record,
                    evaluate_badges(record, category, now, self.tz),
                    now
                )

                txn.save(record.to_document())

        except Exception as e:
            recorder_failures_total.labels(category=category.value, error_type=type(e).__name__).inc()
            raise

        recorder_duration_seconds.labels(category=category.value).observe(time.time() - start_time)
        activities_recorded_total.labels(category=category.value).inc()
        xp_awarded_total.labels(category=category.value).inc(xp_award.xp_awarded)
        if xp_award.leveled_up:
            level_ups_total.labels(level=xp_award.level_name).inc()
        for badge in unlocked:
            badges_unlocked_total.labels(badge=badge.key.value).inc()

        logger.info(
            f"Recorded {category.value} for user {user_id}: total={total}, streak={streak}, "
            f"xp={xp_award.new_total_xp} ({xp_award.level_name}), badges_unlocked={len(unlocked)}"
        )

        return ActivityResult(
            category=category,
            total=total,
            streak=streak,
            xp=xp_award,
            badges_unlocked=unlocked,
        )

    async def record_workout(self, user_id: str) -> int:
        """Record a workout; returns the updated workout streak"""
        result = await self.record_activity(user_id, ActivityCategory.WORKOUT)
        return result.streak

    async def record_meal(self, user_id: str) -> None:
        """Record a logged meal"""
        await self.record_activity(user_id, ActivityCategory.MEAL)

    async def record_water(self, user_id: str) -> None:
        """Record a logged glass of water"""
        await self.record_activity(user_id, ActivityCategory.WATER)

    async def read_gamification(self, user_id: str) -> Optional[GamificationRecord]:
        """Current record for the user, or None if they have none"""
        self._check_user_id(user_id)
        document = await self.store.get(user_id)
        if document is None:
            return None
        return GamificationRecord.from_document(document)

    async def get_level_progress(self, user_id: str) -> LevelProgress:
        """Level progress for the user's XP (Bronze at 0 XP if no record)"""
        record = await self.read_gamification(user_id)
        return level_progress(record.xp if record else 0)

    async def get_badge_overview(self, user_id: str) -> BadgeOverview:
        """Unlocked and locked badges for the user"""
        record = await self.read_gamification(user_id)
        return get_badge_overview(record)
