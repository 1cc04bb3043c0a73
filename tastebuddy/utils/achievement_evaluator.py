"""
Evaluate and award achievements after user actions.

Hooks are called from request handlers once the triggering change has been
committed; they log failures instead of raising so the action itself still
succeeds.
"""

import logging
from typing import Iterable, List

from sqlalchemy.ext.asyncio import AsyncSession

from tastebuddy.crud.achievement import grant, held_achievement_ids, list_active_achievements
from tastebuddy.models.achievement import Achievement, UserAchievement
from tastebuddy.schemas.enums import AchievementType
from tastebuddy.utils.achievement_criteria import criterion_for

logger = logging.getLogger(__name__)

ALL_TYPES = list(AchievementType)


class EvaluationOutcome:
    def __init__(self):
        self.new_achievements: List[UserAchievement] = []
        self.evaluated = 0
        self.already_earned = 0


async def evaluate_achievements(
    db: AsyncSession,
    user_id: str,
    types: Iterable[AchievementType]
) -> EvaluationOutcome:
    types = list(types)
    logger.info(f"Evaluating achievements for user {user_id}, types: {', '.join(t.value for t in types)}")

    # plain values, since a rollback below expires every loaded instance
    candidates = [
        (a.id, a.type, a.name, a.threshold)
        for a in await list_active_achievements(db, types)
    ]
    held = await held_achievement_ids(db, user_id, [c[0] for c in candidates])

    outcome = EvaluationOutcome()
    outcome.already_earned = len(held)

    for achievement_id, type_, name, threshold in candidates:
        outcome.evaluated += 1
        if achievement_id in held:
            continue

        criterion = criterion_for(type_, name)
        if criterion is None or threshold is None:
            continue

        try:
            progress = await criterion(db, user_id)
            if progress >= threshold:
                achievement = await db.get(Achievement, achievement_id)
                result = await grant(db, user_id, achievement, progress=progress)
                if not result.already_held:
                    logger.info(f"User {user_id} earned achievement: {name}")
                    outcome.new_achievements.append(result.user_achievement)
        except Exception as e:
            logger.error(f"Error evaluating achievement {name!r} for user {user_id}: {e}", exc_info=True)
            await db.rollback()

    logger.info(
        f"Achievement evaluation completed for user {user_id}: "
        f"{len(outcome.new_achievements)} new, {outcome.already_earned} already earned"
    )
    return outcome


async def _run_hook(db: AsyncSession, user_id: str, types: List[AchievementType]) -> List[UserAchievement]:
    try:
        outcome = await evaluate_achievements(db, user_id, types)
    except Exception as e:
        logger.warning(f"Achievement hook failed for user {user_id}: {e}", exc_info=True)
        await db.rollback()
        return []
    return outcome.new_achievements


async def evaluate_all_achievements(db: AsyncSession, user_id: str) -> EvaluationOutcome:
    return await evaluate_achievements(db, user_id, ALL_TYPES)


async def on_recipe_changed(db: AsyncSession, author_id: str):
    return await _run_hook(db, author_id, [
        AchievementType.RECIPE_COUNT, AchievementType.INGREDIENTS_COUNT, AchievementType.PHOTO_COUNT
    ])


async def on_meal_changed(db: AsyncSession, author_id: str):
    return await _run_hook(db, author_id, [AchievementType.MEAL_COUNT, AchievementType.PHOTO_COUNT])


async def on_follow_changed(db: AsyncSession, follower_id: str, following_id: str):
    # the followed user may gain a follower milestone, the follower a mutual follow
    followed = await _run_hook(db, following_id, [AchievementType.FOLLOWERS_COUNT])
    follower = await _run_hook(db, follower_id, [AchievementType.SPECIAL])
    return followed, follower


async def on_favorite_added(db: AsyncSession, recipe_author_id: str):
    return await _run_hook(db, recipe_author_id, [AchievementType.FAVORITES_COUNT])


async def on_rating_added(db: AsyncSession, recipe_author_id: str):
    return await _run_hook(db, recipe_author_id, [AchievementType.RATINGS_COUNT])


async def on_comment_added(db: AsyncSession, recipe_author_id: str):
    return await _run_hook(db, recipe_author_id, [AchievementType.COMMENTS_COUNT])
