"""
Achievement definitions and awards.

Awarding is two independent, idempotent steps:

1. find the achievement by (name, type), creating it from the descriptor
2. insert the (user, achievement) row unless it is already there

A crash between the steps leaves a defined but unawarded achievement, which
is safe to retry. The unique constraint on (user_id, achievement_id) settles
concurrent awards: the loser of the race reports ``already_held``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from tastebuddy.core.error_codes import ACHIEVEMENT_AWARD_FAILED
from tastebuddy.core.exceptions import internal_error
from tastebuddy.crud.user import get_user_or_404
from tastebuddy.models.achievement import Achievement, UserAchievement
from tastebuddy.schemas.achievement import AchievementDescriptor
from tastebuddy.schemas.enums import AchievementType
from tastebuddy.utils.dates import utcnow

logger = logging.getLogger(__name__)


@dataclass
class AwardResult:
    already_held: bool
    achievement: Achievement
    user_achievement: UserAchievement

    @property
    def earned_at(self) -> datetime:
        return self.user_achievement.earned_at


async def get_achievement(db: AsyncSession, name: str, type_: AchievementType) -> Optional[Achievement]:
    result = await db.execute(
        select(Achievement).where(
            Achievement.name == name,
            Achievement.type == type_
        )
    )
    return result.scalars().first()


async def get_or_create_achievement(db: AsyncSession, descriptor: AchievementDescriptor) -> Achievement:
    achievement = await get_achievement(db, descriptor.name, descriptor.type)
    if achievement:
        return achievement

    achievement = Achievement(**descriptor.model_dump())
    db.add(achievement)
    await db.commit()
    logger.info(f"Created achievement {achievement.name!r} ({achievement.type.value})")
    return achievement


async def get_user_achievement(db: AsyncSession, user_id: str, achievement_id: str) -> Optional[UserAchievement]:
    result = await db.execute(
        select(UserAchievement).where(
            UserAchievement.user_id == user_id,
            UserAchievement.achievement_id == achievement_id
        )
    )
    return result.scalars().first()


async def grant(
    db: AsyncSession,
    user_id: str,
    achievement: Achievement,
    progress: Optional[int] = None
) -> AwardResult:
    """Insert the award row for an existing achievement, at most once per user."""
    achievement_id = achievement.id

    existing = await get_user_achievement(db, user_id, achievement_id)
    if existing:
        return AwardResult(already_held=True, achievement=achievement, user_achievement=existing)

    user_achievement = UserAchievement(
        user_id=user_id,
        achievement_id=achievement_id,
        progress=progress,
        earned_at=utcnow()
    )
    user_achievement.achievement = achievement
    try:
        # Savepoint so losing the race only discards this insert
        async with db.begin_nested():
            db.add(user_achievement)
    except IntegrityError:
        existing = await get_user_achievement(db, user_id, achievement_id)
        if existing is None:
            raise
        achievement = await db.get(Achievement, achievement_id, populate_existing=True)
        logger.info(f"Concurrent award of {achievement_id} to user {user_id}; keeping existing row")
        return AwardResult(already_held=True, achievement=achievement, user_achievement=existing)
    await db.commit()

    logger.info(f"Awarded achievement {achievement.name!r} to user {user_id}")
    return AwardResult(already_held=False, achievement=achievement, user_achievement=user_achievement)


async def award_achievement(
    db: AsyncSession,
    user_id: str,
    descriptor: AchievementDescriptor,
    progress: Optional[int] = None
) -> AwardResult:
    """
    Give ``descriptor`` to ``user_id``, defining the achievement on first use.
    Calling it again for the same pair returns the original award unchanged.
    """
    await get_user_or_404(db, user_id)

    try:
        achievement = await get_or_create_achievement(db, descriptor)
        return await grant(db, user_id, achievement, progress=progress)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to award {descriptor.name!r} to user {user_id}: {e}", exc_info=True)
        raise internal_error("Failed to award achievement", e, ACHIEVEMENT_AWARD_FAILED)


async def list_user_achievements(db: AsyncSession, user_id: str) -> List[UserAchievement]:
    result = await db.execute(
        select(UserAchievement)
        .where(UserAchievement.user_id == user_id)
        .order_by(UserAchievement.earned_at.desc())
    )
    return list(result.scalars().all())


async def list_active_achievements(
    db: AsyncSession,
    types: Optional[Iterable[AchievementType]] = None
) -> List[Achievement]:
    query = select(Achievement).where(Achievement.is_active == True)  # noqa: E712
    if types is not None:
        query = query.where(Achievement.type.in_(list(types)))
    result = await db.execute(query.order_by(Achievement.type, Achievement.threshold))
    return list(result.scalars().all())


async def held_achievement_ids(db: AsyncSession, user_id: str, achievement_ids: List[str]) -> set:
    if not achievement_ids:
        return set()
    result = await db.execute(
        select(UserAchievement.achievement_id).where(
            UserAchievement.user_id == user_id,
            UserAchievement.achievement_id.in_(achievement_ids)
        )
    )
    return set(result.scalars().all())
