"""Gamification models: activity categories, badges and the per-user record"""
import logging
from enum import Enum
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)


class ActivityCategory(str, Enum):
    """Activity categories that feed the gamification engine"""
    WORKOUT = "workout"
    MEAL = "meal"
    WATER = "water"

    @property
    def counter_field(self) -> str:
        """GamificationRecord attribute holding the lifetime counter"""
        return _COUNTER_FIELDS[self]

    @property
    def first_badge(self) -> "BadgeKey":
        return _FIRST_BADGES[self]


class BadgeKey(str, Enum):
    """
    Closed catalog of badge keys.

    Keys are stored verbatim in user records, so they may only ever be added,
    never renamed or removed.
    """
    FIRST_WORKOUT = "FIRST_WORKOUT"
    FIRST_MEAL = "FIRST_MEAL"
    FIRST_WATER = "FIRST_WATER"
    HYDRATION_HERO = "HYDRATION_HERO"
    WATER_MASTER = "WATER_MASTER"
    DOUBLE_LOG = "DOUBLE_LOG"
    TRIPLE_LOG = "TRIPLE_LOG"
    EARLY_BIRD = "EARLY_BIRD"
    NIGHT_OWL = "NIGHT_OWL"
    STREAK_3 = "STREAK_3"
    STREAK_7 = "STREAK_7"
    GOAL_CRUSHER = "GOAL_CRUSHER"
    QUICK_START = "QUICK_START"
    TEST_MASTER = "TEST_MASTER"
    PRESENTATION_PRO = "PRESENTATION_PRO"


_COUNTER_FIELDS = {
    ActivityCategory.WORKOUT: "total_workouts",
    ActivityCategory.MEAL: "total_meals",
    ActivityCategory.WATER: "total_water",
}

_FIRST_BADGES = {
    ActivityCategory.WORKOUT: BadgeKey.FIRST_WORKOUT,
    ActivityCategory.MEAL: BadgeKey.FIRST_MEAL,
    ActivityCategory.WATER: BadgeKey.FIRST_WATER,
}


def _drop_invalid(data: Dict[str, Any], loc: Sequence[Any]) -> bool:
    """Remove the deepest entry of `data` on an error location; False if none matched"""
    parent, key = None, None
    target: Any = data
    for part in loc:
        if isinstance(target, dict) and part in target:
            parent, key = target, part
            target = target[part]
        else:
            break

    if parent is None:
        return False
    del parent[key]
    return True


class Badge(BaseModel):
    """Badge definition"""
    key: BadgeKey
    name: str
    description: str
    meta: bool = False


class GamificationRecord(BaseModel):
    """
    Per-user gamification document.

    Field names are snake_case; aliases match the persisted camelCase shape.
    Build instances from stored documents with from_document() so missing or
    null fields fall back to zero/empty defaults.
    """
    model_config = ConfigDict(populate_by_name=True)

    xp: int = 0
    level_name: str = Field(default="Bronze", alias="levelName")
    streaks: Dict[str, int] = Field(default_factory=dict)
    last_activity: Dict[str, Optional[date]] = Field(default_factory=dict, alias="lastActivity")
    badges: Dict[str, bool] = Field(default_factory=dict)
    total_workouts: int = Field(default=0, alias="totalWorkouts")
    total_meals: int = Field(default=0, alias="totalMeals")
    total_water: int = Field(default=0, alias="totalWater")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @classmethod
    def new(cls, now: datetime) -> "GamificationRecord":
        """Zero-valued record created on a user's first activity"""
        record = cls(created_at=now, updated_at=now)
        record._fill_category_defaults()
        return record

    @classmethod
    def from_document(cls, doc: Optional[Mapping[str, Any]]) -> "GamificationRecord":
        """Parse a stored document, defaulting anything absent or null"""
        # Import here to avoid circular dependencies
        from fitquest.gamification.xp_system import level_from_xp

        data = {k: v for k, v in (doc or {}).items() if v is not None}
        for key in ("streaks", "lastActivity", "badges"):
            value = data.get(key)
            if isinstance(value, Mapping):
                data[key] = {k: v for k, v in value.items() if v is not None}
            else:
                data.pop(key, None)

        # Invalid values are dropped one by one and fall back to defaults
        while True:
            try:
                record = cls.model_validate(data)
                break
            except PydanticValidationError as e:
                dropped = [error["loc"] for error in e.errors() if _drop_invalid(data, error["loc"])]
                if not dropped:
                    raise
                logger.warning(f"Ignoring invalid gamification fields: {dropped}")

        record._fill_category_defaults()
        record.level_name = level_from_xp(max(record.xp, 0))
        return record

    def to_document(self) -> Dict[str, Any]:
        """Serialize to the persisted (JSON-compatible, camelCase) shape"""
        return self.model_dump(mode="json", by_alias=True)

    def _fill_category_defaults(self) -> None:
        for category in ActivityCategory:
            self.streaks.setdefault(category.value, 0)
            self.last_activity.setdefault(category.value, None)

    def counter(self, category: ActivityCategory) -> int:
        return getattr(self, category.counter_field)

    def increment_counter(self, category: ActivityCategory, amount: int = 1) -> int:
        setattr(self, category.counter_field, self.counter(category) + amount)
        return self.counter(category)

    def streak(self, category: ActivityCategory) -> int:
        return self.streaks.get(category.value, 0)

    def last_activity_on(self, category: ActivityCategory) -> Optional[date]:
        return self.last_activity.get(category.value)

    def has_badge(self, key: BadgeKey) -> bool:
        return bool(self.badges.get(key.value))

    @property
    def owned_badges(self) -> List[str]:
        """Keys of unlocked badges, including keys newer than this build's catalog"""
        return [key for key, unlocked in self.badges.items() if unlocked]


class XPAward(BaseModel):
    """Result of an XP award"""
    xp_awarded: int
    new_total_xp: int
    old_total_xp: int
    level_name: str
    old_level_name: str
    leveled_up: bool


class LevelProgress(BaseModel):
    """Progress towards the next level, for presentation"""
    xp: int
    level_name: str
    level_min_xp: int
    next_level_name: Optional[str] = None
    next_level_min_xp: Optional[int] = None
    xp_to_next_level: int = 0
    progress_percent: float = 100.0


class UnlockedBadge(BaseModel):
    """Badge unlocked by a recorder call"""
    key: BadgeKey
    name: str


class ActivityResult(BaseModel):
    """Outcome of one recorder call"""
    category: ActivityCategory
    total: int
    streak: int
    xp: XPAward
    badges_unlocked: List[UnlockedBadge] = Field(default_factory=list)

    @property
    def badge_names(self) -> List[str]:
        return [badge.name for badge in self.badges_unlocked]


class BadgeOverview(BaseModel):
    """Unlocked and locked badges for an achievements screen"""
    unlocked: List[Badge]
    locked: List[Badge]
    unknown_keys: List[str] = Field(default_factory=list)
    total_unlocked: int
    total_badges: int
