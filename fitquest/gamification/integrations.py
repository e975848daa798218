"""
Gamification Integration Hooks

Call these after an activity has been saved (workout, meal, water entry) to
update the user's gamification record. Gamification bookkeeping is kept
separate from the activity itself: a failure here is logged and swallowed so
the save that triggered it still succeeds.

Usage:
    from fitquest.gamification.integrations import on_workout_logged

    # After saving the workout
    result = await on_workout_logged(user_id)
    if result:
        show_badges(result.badge_names)
"""

import logging
from typing import Optional

from fitquest.exceptions import FitQuestError
from fitquest.models.gamification import ActivityCategory, ActivityResult

logger = logging.getLogger(__name__)


def _default_service():
    # Import here to avoid circular dependencies
    from fitquest.services.container import get_container
    return get_container().gamification_service


async def handle_activity_gamification(
    user_id: str,
    category: ActivityCategory,
    service=None
) -> Optional[ActivityResult]:
    """
    Record an activity for gamification without raising

    Returns:
        ActivityResult, or None if gamification failed
    """
    logger.debug(f"[GAMIFICATION] {category.value} logged: user={user_id}")

    try:
        service = service or _default_service()
        return await service.record_activity(user_id, category)
    except FitQuestError as e:
        # Already logged with full context on creation
        logger.warning(
            f"[GAMIFICATION] {category.value} not recorded for user {user_id} "
            f"(request {e.request_id}): {e.message}"
        )
        return None
    except Exception as e:
        logger.error(
            f"[GAMIFICATION] Error recording {category.value} for user {user_id}: {e}",
            exc_info=True
        )
        return None


async def on_workout_logged(user_id: str, service=None) -> Optional[ActivityResult]:
    """Gamification for a saved workout"""
    return await handle_activity_gamification(user_id, ActivityCategory.WORKOUT, service)


async def on_meal_logged(user_id: str, service=None) -> Optional[ActivityResult]:
    """Gamification for a saved meal"""
    return await handle_activity_gamification(user_id, ActivityCategory.MEAL, service)


async def on_water_logged(user_id: str, service=None) -> Optional[ActivityResult]:
    """Gamification for a saved water entry"""
    return await handle_activity_gamification(user_id, ActivityCategory.WATER, service)
