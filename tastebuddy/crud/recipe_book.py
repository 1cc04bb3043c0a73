"""
Personal recipe book: user-defined categories and the recipes saved into them.

A saved recipe is stored as one entry per category it is filed under, or a
single uncategorized entry.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from fastapi import status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from tastebuddy.core.error_codes import CATEGORY_NAME_TAKEN, CATEGORY_NOT_FOUND
from tastebuddy.core.exceptions import CustomHTTPException
from tastebuddy.models.recipe import Recipe
from tastebuddy.models.recipe_book import RecipeBookCategory, RecipeBookEntry
from tastebuddy.schemas.recipe_book import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)


def _name_taken(name: str) -> CustomHTTPException:
    return CustomHTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f'A category named "{name}" already exists',
        error_code=CATEGORY_NAME_TAKEN
    )


def category_as_read(category: RecipeBookCategory, recipe_count: int = 0) -> dict:
    return {
        "id": category.id,
        "name": category.name,
        "description": category.description,
        "color": category.color,
        "recipe_count": recipe_count,
        "created_at": category.created_at,
    }


async def _category_counts(db: AsyncSession, category_ids: Sequence[str]) -> Dict[str, int]:
    if not category_ids:
        return {}
    result = await db.execute(
        select(RecipeBookEntry.category_id, func.count(RecipeBookEntry.id))
        .where(RecipeBookEntry.category_id.in_(list(category_ids)))
        .group_by(RecipeBookEntry.category_id)
    )
    return dict(result.all())


async def get_category_or_404(db: AsyncSession, category_id: str, user_id: str) -> RecipeBookCategory:
    category = await db.get(RecipeBookCategory, category_id)
    # someone else's category is reported as missing
    if not category or category.user_id != user_id:
        raise CustomHTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
            error_code=CATEGORY_NOT_FOUND
        )
    return category


async def list_categories(db: AsyncSession, user_id: str) -> List[dict]:
    result = await db.execute(
        select(RecipeBookCategory)
        .where(RecipeBookCategory.user_id == user_id)
        .order_by(RecipeBookCategory.name)
    )
    categories = list(result.scalars().all())
    counts = await _category_counts(db, [c.id for c in categories])
    return [category_as_read(c, counts.get(c.id, 0)) for c in categories]


async def _name_in_use(db: AsyncSession, user_id: str, name: str, exclude_id: Optional[str] = None) -> bool:
    query = select(RecipeBookCategory.id).where(
        RecipeBookCategory.user_id == user_id,
        func.lower(RecipeBookCategory.name) == name.lower()
    )
    if exclude_id:
        query = query.where(RecipeBookCategory.id != exclude_id)
    return (await db.execute(query)).first() is not None


async def create_category(db: AsyncSession, user_id: str, data: CategoryCreate) -> RecipeBookCategory:
    if await _name_in_use(db, user_id, data.name):
        raise _name_taken(data.name)

    category = RecipeBookCategory(user_id=user_id, **data.model_dump())
    db.add(category)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise _name_taken(data.name)
    logger.info(f"User {user_id} created recipe book category {category.id}")
    return category


async def update_category(db: AsyncSession, category: RecipeBookCategory, data: CategoryUpdate) -> RecipeBookCategory:
    changes = data.model_dump(exclude_unset=True)
    name = changes.get("name")
    if name and await _name_in_use(db, category.user_id, name, exclude_id=category.id):
        raise _name_taken(name)

    for field, value in changes.items():
        if field == "name" and value is None:
            continue
        setattr(category, field, value)
    db.add(category)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise _name_taken(name)
    await db.refresh(category)
    return category


async def count_category_entries(db: AsyncSession, category_id: str) -> int:
    return (await _category_counts(db, [category_id])).get(category_id, 0)


async def delete_category(db: AsyncSession, category: RecipeBookCategory) -> None:
    await db.delete(category)
    await db.commit()


async def get_category_recipes(db: AsyncSession, category_id: str) -> List[Recipe]:
    result = await db.execute(
        select(Recipe)
        .join(RecipeBookEntry, RecipeBookEntry.recipe_id == Recipe.id)
        .where(RecipeBookEntry.category_id == category_id)
        .order_by(RecipeBookEntry.added_at.desc())
    )
    return list(result.scalars().all())


async def get_entries_for_recipe(db: AsyncSession, user_id: str, recipe_id: str) -> List[RecipeBookEntry]:
    result = await db.execute(
        select(RecipeBookEntry).where(
            RecipeBookEntry.user_id == user_id,
            RecipeBookEntry.recipe_id == recipe_id
        )
    )
    return list(result.scalars().all())


async def recipe_status(db: AsyncSession, user_id: str, recipe_id: str) -> dict:
    entries = await get_entries_for_recipe(db, user_id, recipe_id)
    category_ids = [e.category_id for e in entries if e.category_id]
    categories = []
    if category_ids:
        result = await db.execute(
            select(RecipeBookCategory)
            .where(RecipeBookCategory.id.in_(category_ids))
            .order_by(RecipeBookCategory.name)
        )
        categories = list(result.scalars().all())

    notes = next((e.notes for e in entries if e.notes), None)
    return {"in_book": bool(entries), "categories": categories, "notes": notes}


async def add_to_book(
    db: AsyncSession,
    user_id: str,
    recipe_id: str,
    category_ids: Sequence[str],
    notes: Optional[str]
) -> int:
    """
    File a recipe under the given categories (or uncategorized when empty).
    Returns how many entries were created; 0 means it was already filed there.
    """
    existing = await get_entries_for_recipe(db, user_id, recipe_id)
    filed_under = {e.category_id for e in existing}
    targets = list(dict.fromkeys(category_ids)) or [None]

    created = 0
    for category_id in targets:
        if category_id in filed_under:
            continue
        db.add(RecipeBookEntry(user_id=user_id, recipe_id=recipe_id, category_id=category_id, notes=notes))
        created += 1

    if created:
        await db.commit()
        logger.info(f"User {user_id} saved recipe {recipe_id} into {created} recipe book entries")
    return created


async def replace_categories(
    db: AsyncSession,
    user_id: str,
    recipe_id: str,
    category_ids: Sequence[str],
    notes: Optional[str]
) -> None:
    for entry in await get_entries_for_recipe(db, user_id, recipe_id):
        await db.delete(entry)
    # deletes must reach the database before re-adding the same (user, recipe, category)
    await db.flush()

    for category_id in list(dict.fromkeys(category_ids)) or [None]:
        db.add(RecipeBookEntry(user_id=user_id, recipe_id=recipe_id, category_id=category_id, notes=notes))
    await db.commit()


async def remove_from_book(db: AsyncSession, user_id: str, recipe_id: str, category_id: Optional[str] = None) -> int:
    removed = 0
    for entry in await get_entries_for_recipe(db, user_id, recipe_id):
        if category_id is None or entry.category_id == category_id:
            await db.delete(entry)
            removed += 1
    if removed:
        await db.commit()
    return removed


async def list_entries(
    db: AsyncSession,
    user_id: str,
    category_id: Optional[str] = None,
    skip: int = 0,
    limit: int = 12
) -> Tuple[List[dict], int]:
    filters = [RecipeBookEntry.user_id == user_id]
    if category_id:
        filters.append(RecipeBookEntry.category_id == category_id)

    total = (await db.execute(
        select(func.count()).select_from(RecipeBookEntry).where(*filters)
    )).scalar() or 0

    result = await db.execute(
        select(RecipeBookEntry, Recipe, RecipeBookCategory)
        .join(Recipe, Recipe.id == RecipeBookEntry.recipe_id)
        .outerjoin(RecipeBookCategory, RecipeBookCategory.id == RecipeBookEntry.category_id)
        .where(*filters)
        .order_by(RecipeBookEntry.added_at.desc())
        .offset(skip)
        .limit(limit)
    )
    entries = [
        {"recipe": recipe, "category": category, "notes": entry.notes, "added_at": entry.added_at}
        for entry, recipe, category in result.all()
    ]
    return entries, total


async def book_stats(db: AsyncSession, user_id: str) -> dict:
    result = await db.execute(
        select(
            func.count(func.distinct(RecipeBookEntry.recipe_id)),
            func.count(RecipeBookEntry.id)
        ).where(RecipeBookEntry.user_id == user_id)
    )
    unique_recipes, entries = result.one()
    return {"total_unique_recipes": unique_recipes or 0, "total_entries": entries or 0}


async def owned_category_ids(db: AsyncSession, user_id: str, category_ids: Sequence[str]) -> set:
    if not category_ids:
        return set()
    result = await db.execute(
        select(RecipeBookCategory.id).where(
            RecipeBookCategory.user_id == user_id,
            RecipeBookCategory.id.in_(list(category_ids))
        )
    )
    return set(result.scalars().all())
