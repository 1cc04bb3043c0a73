"""
Progress functions for each achievement type.

Every criterion takes ``(db, user_id)`` and returns an integer that is
compared against the achievement's threshold.
"""

from typing import Awaitable, Callable, Dict

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from tastebuddy.crud.follow import count_followers, has_mutual_follow
from tastebuddy.crud.meal import count_meals, count_photos
from tastebuddy.models.comment import Comment
from tastebuddy.models.recipe import Favorite, Rating, Recipe
from tastebuddy.schemas.enums import AchievementType

Criterion = Callable[[AsyncSession, str], Awaitable[int]]

# A recipe needs this many comments to count as a hot topic
HOT_TOPIC_MIN_COMMENTS = 10


async def recipe_count(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        select(func.count()).select_from(Recipe).where(Recipe.author_id == user_id)
    )
    return result.scalar() or 0


async def favorites_received(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(Favorite)
        .join(Recipe, Recipe.id == Favorite.recipe_id)
        .where(Recipe.author_id == user_id)
    )
    return result.scalar() or 0


async def followers_count(db: AsyncSession, user_id: str) -> int:
    return await count_followers(db, user_id)


async def _rating_stats(db: AsyncSession, user_id: str):
    result = await db.execute(
        select(func.count(Rating.id), func.avg(Rating.rating))
        .join(Recipe, Recipe.id == Rating.recipe_id)
        .where(Recipe.author_id == user_id)
        .group_by(Rating.recipe_id)
    )
    return [(count, float(average)) for count, average in result.all()]


async def five_star_chef(db: AsyncSession, user_id: str) -> int:
    """1 when any recipe has at least 3 ratings averaging 4.5 or more"""
    for count, average in await _rating_stats(db, user_id):
        if count >= 3 and average >= 4.5:
            return 1
    return 0


async def consistent_quality(db: AsyncSession, user_id: str) -> int:
    """Number of recipes with at least 2 ratings averaging 4.0 or more"""
    return sum(
        1 for count, average in await _rating_stats(db, user_id)
        if count >= 2 and average >= 4.0
    )


async def hot_topic(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        select(func.count(Comment.id))
        .join(Recipe, Recipe.id == Comment.recipe_id)
        .where(Recipe.author_id == user_id)
        .group_by(Comment.recipe_id)
        .order_by(func.count(Comment.id).desc())
        .limit(1)
    )
    most_comments = result.scalar() or 0
    return 1 if most_comments > HOT_TOPIC_MIN_COMMENTS else 0


async def unique_ingredients(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        select(Recipe.ingredients).where(Recipe.author_id == user_id)
    )
    seen = set()
    for ingredients in result.scalars().all():
        for ingredient in ingredients or []:
            seen.add(ingredient.strip().lower())
    seen.discard("")
    return len(seen)


async def bff(db: AsyncSession, user_id: str) -> int:
    return 1 if await has_mutual_follow(db, user_id) else 0


async def meal_count(db: AsyncSession, user_id: str) -> int:
    return await count_meals(db, user_id)


async def photo_count(db: AsyncSession, user_id: str) -> int:
    return await count_photos(db, user_id)


CRITERIA_BY_TYPE: Dict[AchievementType, Criterion] = {
    AchievementType.RECIPE_COUNT: recipe_count,
    AchievementType.FAVORITES_COUNT: favorites_received,
    AchievementType.FOLLOWERS_COUNT: followers_count,
    AchievementType.COMMENTS_COUNT: hot_topic,
    AchievementType.INGREDIENTS_COUNT: unique_ingredients,
    AchievementType.MEAL_COUNT: meal_count,
    AchievementType.PHOTO_COUNT: photo_count,
}

# Types whose progress depends on the individual achievement
CRITERIA_BY_NAME: Dict[AchievementType, Dict[str, Criterion]] = {
    AchievementType.RATINGS_COUNT: {
        "5-Star Chef": five_star_chef,
        "Consistent Quality": consistent_quality,
    },
    AchievementType.SPECIAL: {
        "BFF": bff,
    },
}


def criterion_for(type_: AchievementType, name: str):
    """The progress function for an achievement, or None if it is only awarded by hand"""
    if type_ in CRITERIA_BY_NAME:
        return CRITERIA_BY_NAME[type_].get(name)
    return CRITERIA_BY_TYPE.get(type_)
