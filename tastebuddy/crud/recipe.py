import logging
from datetime import timedelta
from typing import List, Optional, Tuple

from fastapi import status
from sqlalchemy import func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from tastebuddy.core.error_codes import RECIPE_NOT_FOUND
from tastebuddy.core.exceptions import CustomHTTPException
from tastebuddy.models.comment import Comment
from tastebuddy.models.compliment import Compliment
from tastebuddy.models.meal import Meal
from tastebuddy.models.notification import Notification
from tastebuddy.models.recipe import Favorite, Rating, Recipe
from tastebuddy.models.recipe_book import RecipeBookEntry
from tastebuddy.models.user import User
from tastebuddy.schemas.recipe import RecipeCreate, RecipeUpdate
from tastebuddy.utils.dates import utcnow

logger = logging.getLogger(__name__)


async def get_recipe(db: AsyncSession, recipe_id: str) -> Optional[Recipe]:
    return await db.get(Recipe, recipe_id)


async def get_recipe_or_404(db: AsyncSession, recipe_id: str) -> Recipe:
    recipe = await get_recipe(db, recipe_id)
    if not recipe:
        raise CustomHTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Recipe not found",
            error_code=RECIPE_NOT_FOUND
        )
    return recipe


async def create_recipe(db: AsyncSession, author_id: str, data: RecipeCreate) -> Recipe:
    recipe = Recipe(author_id=author_id, **data.model_dump())
    db.add(recipe)
    await db.commit()
    await db.refresh(recipe)
    logger.info(f"User {author_id} created recipe {recipe.id}")
    return recipe


async def list_recipes(
    db: AsyncSession,
    q: Optional[str] = None,
    author_id: Optional[str] = None,
    skip: int = 0,
    limit: int = 20
) -> Tuple[List[Recipe], int]:
    filters = []
    if author_id:
        filters.append(Recipe.author_id == author_id)
    if q:
        pattern = f"%{q.strip()}%"
        filters.append(or_(
            Recipe.title.ilike(pattern),
            Recipe.description.ilike(pattern),
            Recipe.cuisine.ilike(pattern)
        ))

    total = (await db.execute(
        select(func.count()).select_from(Recipe).where(*filters)
    )).scalar() or 0

    result = await db.execute(
        select(Recipe)
        .where(*filters)
        .order_by(Recipe.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def update_recipe(db: AsyncSession, recipe: Recipe, data: RecipeUpdate) -> Recipe:
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(recipe, field, value)
    db.add(recipe)
    await db.commit()
    await db.refresh(recipe)
    return recipe


async def delete_recipe(db: AsyncSession, recipe: Recipe) -> None:
    """Delete a recipe together with its comments, ratings, favorites and recipe book entries"""
    for model in (Comment, Rating, Favorite, RecipeBookEntry):
        rows = await db.execute(select(model).where(model.recipe_id == recipe.id))
        for row in rows.scalars().all():
            await db.delete(row)

    compliments = await db.execute(select(Compliment).where(Compliment.recipe_id == recipe.id))
    for compliment in compliments.scalars().all():
        compliment.recipe_id = None
        db.add(compliment)

    await db.execute(
        update(Notification)
        .where(Notification.related_recipe_id == recipe.id)
        .values(related_recipe_id=None, related_comment_id=None)
    )
    # children must be gone before the recipe row
    await db.flush()

    await db.delete(recipe)
    await db.commit()


async def get_user_rating(db: AsyncSession, user_id: str, recipe_id: str) -> Optional[Rating]:
    result = await db.execute(
        select(Rating).where(Rating.user_id == user_id, Rating.recipe_id == recipe_id)
    )
    return result.scalars().first()


async def rate_recipe(db: AsyncSession, user_id: str, recipe_id: str, value: int) -> Rating:
    """Create or replace the caller's rating for a recipe"""
    rating = await get_user_rating(db, user_id, recipe_id)
    if rating is None:
        rating = Rating(user_id=user_id, recipe_id=recipe_id, rating=value)
        try:
            async with db.begin_nested():
                db.add(rating)
        except IntegrityError:
            # A concurrent first rating landed first; overwrite it
            rating = await get_user_rating(db, user_id, recipe_id)
            if rating is None:
                raise
            logger.info(f"Concurrent rating by user {user_id} on recipe {recipe_id}; updating existing row")

    rating.rating = value
    db.add(rating)
    await db.commit()
    await db.refresh(rating)
    return rating


async def get_rating_summary(db: AsyncSession, recipe_id: str, user_id: Optional[str] = None) -> dict:
    result = await db.execute(
        select(func.avg(Rating.rating), func.count(Rating.id)).where(Rating.recipe_id == recipe_id)
    )
    average, count = result.one()

    user_rating = None
    if user_id:
        own = await db.execute(
            select(Rating.rating).where(Rating.user_id == user_id, Rating.recipe_id == recipe_id)
        )
        user_rating = own.scalar()

    return {
        "average": round(float(average), 2) if average is not None else None,
        "count": count or 0,
        "user_rating": user_rating,
    }


async def add_favorite(db: AsyncSession, user_id: str, recipe_id: str) -> bool:
    """Favorite a recipe. Returns False when it was already a favorite."""
    existing = await db.execute(
        select(Favorite).where(Favorite.user_id == user_id, Favorite.recipe_id == recipe_id)
    )
    if existing.scalars().first():
        return False

    db.add(Favorite(user_id=user_id, recipe_id=recipe_id))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        return False
    return True


async def remove_favorite(db: AsyncSession, user_id: str, recipe_id: str) -> bool:
    result = await db.execute(
        select(Favorite).where(Favorite.user_id == user_id, Favorite.recipe_id == recipe_id)
    )
    favorite = result.scalars().first()
    if not favorite:
        return False
    await db.delete(favorite)
    await db.commit()
    return True


async def list_favorite_recipes(db: AsyncSession, user_id: str) -> List[Recipe]:
    result = await db.execute(
        select(Recipe)
        .join(Favorite, Favorite.recipe_id == Recipe.id)
        .where(Favorite.user_id == user_id)
        .order_by(Favorite.created_at.desc())
    )
    return list(result.scalars().all())


# Window used for the trending cuisines in the platform stats
TRENDING_WINDOW = timedelta(days=30)


def _stats_columns():
    favorites = (
        select(func.count(Favorite.id))
        .where(Favorite.recipe_id == Recipe.id)
        .correlate(Recipe)
        .scalar_subquery()
    )
    ratings = (
        select(func.count(Rating.id))
        .where(Rating.recipe_id == Recipe.id)
        .correlate(Recipe)
        .scalar_subquery()
    )
    average = (
        select(func.avg(Rating.rating))
        .where(Rating.recipe_id == Recipe.id)
        .correlate(Recipe)
        .scalar_subquery()
    )
    comments = (
        select(func.count(Comment.id))
        .where(Comment.recipe_id == Recipe.id)
        .correlate(Recipe)
        .scalar_subquery()
    )
    return favorites, ratings, average, comments


def _with_stats(recipe: Recipe, favorites, ratings, average, comments) -> dict:
    data = recipe.model_dump()
    data.update(
        favorites_count=favorites or 0,
        ratings_count=ratings or 0,
        comments_count=comments or 0,
        avg_rating=round(float(average), 2) if average is not None else None,
    )
    return data


async def list_user_recipes_with_stats(db: AsyncSession, author_id: str) -> List[dict]:
    favorites, ratings, average, comments = _stats_columns()
    result = await db.execute(
        select(Recipe, favorites, ratings, average, comments)
        .where(Recipe.author_id == author_id)
        .order_by(Recipe.created_at.desc())
    )
    return [_with_stats(*row) for row in result.all()]


async def _count(db: AsyncSession, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar() or 0


async def get_recipe_stats(db: AsyncSession, limit: int = 5) -> dict:
    """Community-wide recipe highlights and platform totals"""
    favorites, ratings, average, comments = _stats_columns()
    with_stats = select(Recipe, favorites, ratings, average, comments)

    most_popular = await db.execute(
        with_stats.order_by(favorites.desc(), Recipe.created_at.desc()).limit(limit)
    )
    highest_rated = await db.execute(
        with_stats.where(ratings >= 3).order_by(average.desc(), ratings.desc()).limit(limit)
    )
    newest = await db.execute(
        select(Recipe).order_by(Recipe.created_at.desc()).limit(limit)
    )
    trending = await db.execute(
        select(Recipe.cuisine, func.count(Recipe.id))
        .where(Recipe.cuisine.is_not(None), Recipe.created_at >= utcnow() - TRENDING_WINDOW)
        .group_by(Recipe.cuisine)
        .order_by(func.count(Recipe.id).desc())
        .limit(10)
    )

    return {
        "most_popular": [_with_stats(*row) for row in most_popular.all()],
        "newest": list(newest.scalars().all()),
        "highest_rated": [_with_stats(*row) for row in highest_rated.all()],
        "trending_cuisines": [
            {"cuisine": cuisine, "count": count} for cuisine, count in trending.all() if cuisine
        ],
        "platform_stats": {
            "total_recipes": await _count(db, Recipe),
            "total_meals": await _count(db, Meal),
            "total_users": await _count(db, User),
            "total_favorites": await _count(db, Favorite),
            "total_ratings": await _count(db, Rating),
        },
    }
