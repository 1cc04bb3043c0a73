import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from fastapi import status
from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from tastebuddy.core.error_codes import MEAL_NOT_FOUND
from tastebuddy.core.exceptions import CustomHTTPException
from tastebuddy.models.meal import Meal, MealImage
from tastebuddy.models.recipe import Recipe
from tastebuddy.models.user import User
from tastebuddy.schemas.meal import MealCreate, MealImageIn, MealUpdate
from tastebuddy.utils.dates import utcnow

logger = logging.getLogger(__name__)


def _image_rows(meal_id: str, images: Sequence[MealImageIn]) -> List[MealImage]:
    return [MealImage(meal_id=meal_id, **image.model_dump()) for image in images]


async def _images_by_meal(db: AsyncSession, meal_ids: List[str]) -> Dict[str, List[MealImage]]:
    grouped = defaultdict(list)
    if not meal_ids:
        return grouped
    result = await db.execute(
        select(MealImage)
        .where(MealImage.meal_id.in_(meal_ids))
        .order_by(MealImage.display_order)
    )
    for image in result.scalars().all():
        grouped[image.meal_id].append(image)
    return grouped


def as_read(meal: Meal, author: Optional[User], images: List[MealImage]) -> dict:
    return {
        "id": meal.id,
        "author_id": meal.author_id,
        "name": meal.name,
        "description": meal.description,
        "date": meal.date,
        "is_public": meal.is_public,
        "images": images,
        "author": {"id": author.id, "name": author.name, "image": author.image} if author else None,
        "created_at": meal.created_at,
        "updated_at": meal.updated_at,
    }


async def _read_rows(db: AsyncSession, rows) -> List[dict]:
    rows = list(rows)
    images = await _images_by_meal(db, [meal.id for meal, _ in rows])
    return [as_read(meal, author, images.get(meal.id, [])) for meal, author in rows]


async def get_meal(db: AsyncSession, meal_id: str) -> Optional[Meal]:
    return await db.get(Meal, meal_id)


async def get_meal_or_404(db: AsyncSession, meal_id: str) -> Meal:
    meal = await get_meal(db, meal_id)
    if not meal:
        raise CustomHTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Meal not found",
            error_code=MEAL_NOT_FOUND
        )
    return meal


async def read_meal(db: AsyncSession, meal: Meal) -> dict:
    author = await db.get(User, meal.author_id)
    images = await _images_by_meal(db, [meal.id])
    return as_read(meal, author, images.get(meal.id, []))


async def create_meal(db: AsyncSession, author_id: str, data: MealCreate) -> Meal:
    meal = Meal(
        author_id=author_id,
        name=data.name,
        description=data.description,
        date=data.date or utcnow(),
        is_public=data.is_public
    )
    db.add(meal)
    # no relationship() ties the tables, so the meal row has to exist first
    await db.flush()
    db.add_all(_image_rows(meal.id, data.images))
    await db.commit()
    logger.info(f"User {author_id} created meal {meal.id} with {len(data.images)} images")
    return meal


async def update_meal(db: AsyncSession, meal: Meal, data: MealUpdate) -> Meal:
    changes = data.model_dump(exclude_unset=True, exclude={"images"})
    for field, value in changes.items():
        if value is None and field in ("name", "date", "is_public"):
            continue
        setattr(meal, field, value)
    db.add(meal)

    if data.images is not None:
        old = await db.execute(select(MealImage).where(MealImage.meal_id == meal.id))
        for image in old.scalars().all():
            await db.delete(image)
        db.add_all(_image_rows(meal.id, data.images))

    await db.commit()
    await db.refresh(meal)
    return meal


async def delete_meal(db: AsyncSession, meal: Meal) -> None:
    images = await db.execute(select(MealImage).where(MealImage.meal_id == meal.id))
    for image in images.scalars().all():
        await db.delete(image)
    await db.flush()
    await db.delete(meal)
    await db.commit()


def _search_filter(search: Optional[str]):
    if not search or not search.strip():
        return None
    pattern = f"%{search.strip()}%"
    return or_(Meal.name.ilike(pattern), Meal.description.ilike(pattern))


async def list_meals(
    db: AsyncSession,
    author_ids: Optional[Sequence[str]] = None,
    public_only: bool = True,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 12
) -> Tuple[List[dict], int]:
    """Meals with their author and images, newest meal date first"""
    filters = []
    if author_ids is not None:
        filters.append(Meal.author_id.in_(list(author_ids)))
    if public_only:
        filters.append(Meal.is_public.is_(True))
    search_filter = _search_filter(search)
    if search_filter is not None:
        filters.append(search_filter)

    total = (await db.execute(
        select(func.count()).select_from(Meal).where(*filters)
    )).scalar() or 0

    result = await db.execute(
        select(Meal, User)
        .join(User, User.id == Meal.author_id)
        .where(*filters)
        .order_by(Meal.date.desc(), Meal.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return await _read_rows(db, result.all()), total


async def list_recent_public_meals(db: AsyncSession, limit: int = 6) -> List[dict]:
    result = await db.execute(
        select(Meal, User)
        .join(User, User.id == Meal.author_id)
        .where(Meal.is_public.is_(True))
        .order_by(Meal.created_at.desc())
        .limit(limit)
    )
    return await _read_rows(db, result.all())


async def count_meals(db: AsyncSession, user_id: Optional[str] = None) -> int:
    query = select(func.count()).select_from(Meal)
    if user_id is not None:
        query = query.where(Meal.author_id == user_id)
    return (await db.execute(query)).scalar() or 0


async def count_photos(db: AsyncSession, user_id: str) -> int:
    """Meal images plus recipes that carry a photo"""
    meal_images = (await db.execute(
        select(func.count())
        .select_from(MealImage)
        .join(Meal, Meal.id == MealImage.meal_id)
        .where(Meal.author_id == user_id)
    )).scalar() or 0
    recipe_images = (await db.execute(
        select(func.count())
        .select_from(Recipe)
        .where(Recipe.author_id == user_id, Recipe.image.is_not(None), Recipe.image != "")
    )).scalar() or 0
    return meal_images + recipe_images
