"""
XP and Leveling System

Manages XP awards and level derivation.

Leveling Table (name, minimum XP):
- Bronze: 0
- Silver: 500
- Gold: 1500
- Platinum: 4000

XP Award Rules:
- Workout logged: 50 XP
- Meal logged: 15 XP
- Water logged: 5 XP
"""

from typing import Dict, NamedTuple
from datetime import datetime
import logging

from fitquest.exceptions import ValidationError
from fitquest.models.gamification import ActivityCategory, GamificationRecord, LevelProgress, XPAward

logger = logging.getLogger(__name__)


class Level(NamedTuple):
    name: str
    min_xp: int


# Ascending by min_xp
LEVELS = (
    Level("Bronze", 0),
    Level("Silver", 500),
    Level("Gold", 1500),
    Level("Platinum", 4000),
)

XP_RULES: Dict[ActivityCategory, int] = {
    ActivityCategory.WORKOUT: 50,
    ActivityCategory.WATER: 5,
    ActivityCategory.MEAL: 15,
}


def _level_index(xp: int) -> int:
    if xp < 0:
        raise ValidationError(message="XP must not be negative", field="xp", value=xp)

    index = 0
    for i, level in enumerate(LEVELS):
        if level.min_xp <= xp:
            index = i
    return index


def level_from_xp(xp: int) -> str:
    """Name of the highest level whose threshold does not exceed xp"""
    return LEVELS[_level_index(xp)].name


def level_progress(xp: int) -> LevelProgress:
    """
    Calculate progress towards the next level

    At the top level there is no next level: next_level_* are None,
    xp_to_next_level is 0 and progress_percent is 100.
    """
    index = _level_index(xp)
    current = LEVELS[index]

    if index + 1 >= len(LEVELS):
        return LevelProgress(
            xp=xp,
            level_name=current.name,
            level_min_xp=current.min_xp,
        )

    following = LEVELS[index + 1]
    span = following.min_xp - current.min_xp
    return LevelProgress(
        xp=xp,
        level_name=current.name,
        level_min_xp=current.min_xp,
        next_level_name=following.name,
        next_level_min_xp=following.min_xp,
        xp_to_next_level=following.min_xp - xp,
        progress_percent=round((xp - current.min_xp) * 100 / span, 1),
    )


def get_xp_for_activity(category: ActivityCategory) -> int:
    """Fixed XP reward for an activity category"""
    return XP_RULES[ActivityCategory(category)]


def award_xp(record: GamificationRecord, amount: int, now: datetime) -> XPAward:
    """
    Add XP to a record and recompute its level

    Mutates the record in place (xp, level_name, updated_at); the caller
    persists it.

    Raises:
        ValidationError: amount is negative
    """
    if amount < 0:
        raise ValidationError(message="XP amount must not be negative", field="amount", value=amount)

    old_total_xp = record.xp
    old_level_name = record.level_name

    record.xp = old_total_xp + amount
    record.level_name = level_from_xp(record.xp)
    record.updated_at = now

    leveled_up = record.level_name != old_level_name
    if leveled_up:
        logger.info(f"Level up: {old_level_name} -> {record.level_name} at {record.xp} XP")

    return XPAward(
        xp_awarded=amount,
        new_total_xp=record.xp,
        old_total_xp=old_total_xp,
        level_name=record.level_name,
        old_level_name=old_level_name,
        leveled_up=leveled_up,
    )
