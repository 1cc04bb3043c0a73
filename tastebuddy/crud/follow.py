import logging
from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from tastebuddy.models.follow import Follow
from tastebuddy.models.user import User

logger = logging.getLogger(__name__)


async def is_following(db: AsyncSession, follower_id: str, following_id: str) -> bool:
    result = await db.execute(
        select(Follow).where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id
        )
    )
    return result.scalars().first() is not None


async def follow_user(db: AsyncSession, follower_id: str, following_id: str) -> bool:
    """Create the follow edge. Returns False when it already existed."""
    if await is_following(db, follower_id, following_id):
        return False

    db.add(Follow(follower_id=follower_id, following_id=following_id))
    try:
        await db.commit()
    except IntegrityError:
        # concurrent follow of the same pair
        await db.rollback()
        return False
    logger.info(f"User {follower_id} followed {following_id}")
    return True


async def unfollow_user(db: AsyncSession, follower_id: str, following_id: str) -> bool:
    """Remove the follow edge. Returns False when there was none."""
    result = await db.execute(
        select(Follow).where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id
        )
    )
    follow_entry = result.scalars().first()
    if not follow_entry:
        return False

    await db.delete(follow_entry)
    await db.commit()
    logger.info(f"User {follower_id} unfollowed {following_id}")
    return True


async def count_followers(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        select(func.count()).select_from(Follow).where(Follow.following_id == user_id)
    )
    return result.scalar() or 0


async def count_following(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        select(func.count()).select_from(Follow).where(Follow.follower_id == user_id)
    )
    return result.scalar() or 0


async def get_followers(db: AsyncSession, user_id: str) -> List[Tuple[User, object]]:
    """Users following ``user_id`` with the time they followed, newest first"""
    result = await db.execute(
        select(User, Follow.created_at)
        .join(Follow, User.id == Follow.follower_id)
        .where(Follow.following_id == user_id)
        .order_by(Follow.created_at.desc())
    )
    return list(result.all())


async def get_following(db: AsyncSession, user_id: str) -> List[Tuple[User, object]]:
    """Users ``user_id`` follows with the time they were followed, newest first"""
    result = await db.execute(
        select(User, Follow.created_at)
        .join(Follow, User.id == Follow.following_id)
        .where(Follow.follower_id == user_id)
        .order_by(Follow.created_at.desc())
    )
    return list(result.all())


async def has_mutual_follow(db: AsyncSession, user_id: str) -> bool:
    """True when someone ``user_id`` follows also follows them back"""
    following_ids = select(Follow.following_id).where(Follow.follower_id == user_id)
    result = await db.execute(
        select(func.count()).select_from(Follow).where(
            Follow.follower_id.in_(following_ids),
            Follow.following_id == user_id
        )
    )
    return (result.scalar() or 0) > 0


def _tastebuddies_of(user_id: str):
    """ids of users that ``user_id`` follows and who follow them back"""
    following_ids = select(Follow.following_id).where(Follow.follower_id == user_id)
    return select(Follow.follower_id).where(
        Follow.following_id == user_id,
        Follow.follower_id.in_(following_ids)
    )


async def get_tastebuddy_ids(db: AsyncSession, user_id: str) -> List[str]:
    result = await db.execute(_tastebuddies_of(user_id))
    return list(result.scalars().all())


async def get_tastebuddies(db: AsyncSession, user_id: str) -> List[User]:
    """Mutual follows of ``user_id``, ordered by name"""
    result = await db.execute(
        select(User)
        .where(User.id.in_(_tastebuddies_of(user_id)))
        .order_by(User.name)
    )
    return list(result.scalars().all())
