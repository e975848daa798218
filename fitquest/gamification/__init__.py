"""
Gamification engine for FitQuest

- XP and leveling (Bronze / Silver / Gold / Platinum)
- Per-category day streaks (workout, meal, water)
- Badge catalog and evaluation

Recording activities against a store is done by
fitquest.services.gamification_service.GamificationService; the hooks in
fitquest.gamification.integrations wrap it for activity-logging code.
"""

from fitquest.gamification.xp_system import LEVELS, XP_RULES, award_xp, level_from_xp, level_progress
from fitquest.gamification.streak_system import StreakPolicy, next_streak, update_streak
from fitquest.gamification.achievement_system import (
    BADGE_CATALOG,
    apply_badges,
    evaluate_badges,
    get_badge_overview,
)

__all__ = [
    "LEVELS",
    "XP_RULES",
    "award_xp",
    "level_from_xp",
    "level_progress",
    "StreakPolicy",
    "next_streak",
    "update_streak",
    "BADGE_CATALOG",
    "apply_badges",
    "evaluate_badges",
    "get_badge_overview",
]
