"""
Personal recipe book
- Categories (create, rename, delete when empty)
- Saving recipes, optionally filed under categories
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tastebuddy.db.database import get_db
from tastebuddy.core.security import get_current_active_user
from tastebuddy.core.exceptions import CustomHTTPException, internal_error
from tastebuddy.core.error_codes import (
    ALREADY_IN_RECIPE_BOOK,
    CATEGORY_NOT_EMPTY,
    CATEGORY_NOT_FOUND,
    NOT_IN_RECIPE_BOOK
)
from tastebuddy.crud.recipe import get_recipe_or_404
from tastebuddy.crud.recipe_book import (
    add_to_book,
    book_stats,
    category_as_read,
    count_category_entries,
    create_category,
    delete_category,
    get_category_or_404,
    get_category_recipes,
    list_categories,
    list_entries,
    owned_category_ids,
    recipe_status,
    remove_from_book,
    replace_categories,
    update_category
)
from tastebuddy.models.user import User
from tastebuddy.schemas.common import ApiResponse, MessageResponse, ok, paginate
from tastebuddy.schemas.recipe_book import (
    CategoryCreate,
    CategoryDetail,
    CategoryRead,
    CategoryUpdate,
    RecipeBookAdd,
    RecipeBookList,
    RecipeBookStats,
    RecipeBookStatus,
    RecipeBookUpdate
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipe-book", tags=["Recipe Book"])


async def _check_categories(db: AsyncSession, user_id: str, category_ids: List[str]) -> None:
    missing = set(category_ids) - await owned_category_ids(db, user_id, category_ids)
    if missing:
        raise CustomHTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="One or more categories not found",
            error_code=CATEGORY_NOT_FOUND
        )


@router.get("", response_model=ApiResponse[RecipeBookList])
async def get_recipe_book(
    category_id: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    if category_id:
        await get_category_or_404(db, category_id, current_user.id)
    try:
        entries, total = await list_entries(
            db, current_user.id, category_id=category_id, skip=(page - 1) * limit, limit=limit
        )
    except SQLAlchemyError as e:
        logger.error(f"List recipe book error: {e}", exc_info=True)
        raise internal_error("Failed to fetch recipe book", e)
    return ok(RecipeBookList(entries=entries, pagination=paginate(page, limit, total)))


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def save_recipe(
    book_in: RecipeBookAdd,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    await get_recipe_or_404(db, book_in.recipe_id)
    await _check_categories(db, current_user.id, book_in.category_ids)

    try:
        created = await add_to_book(db, current_user.id, book_in.recipe_id, book_in.category_ids, book_in.notes)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Add to recipe book error: {e}", exc_info=True)
        raise internal_error("Failed to add recipe to recipe book", e)

    if not created:
        detail = (
            "Recipe is already in these categories" if book_in.category_ids
            else "Recipe is already in your recipe book"
        )
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=ALREADY_IN_RECIPE_BOOK
        )
    return MessageResponse(message="Recipe added to recipe book successfully")


@router.get("/stats", response_model=ApiResponse[RecipeBookStats])
async def get_book_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        return ok(await book_stats(db, current_user.id))
    except SQLAlchemyError as e:
        logger.error(f"Recipe book stats error: {e}", exc_info=True)
        raise internal_error("Failed to fetch recipe book stats", e)


@router.get("/categories", response_model=ApiResponse[List[CategoryRead]])
async def get_categories(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        return ok(await list_categories(db, current_user.id))
    except SQLAlchemyError as e:
        logger.error(f"List categories error: {e}", exc_info=True)
        raise internal_error("Failed to fetch categories", e)


@router.post("/categories", response_model=ApiResponse[CategoryRead], status_code=status.HTTP_201_CREATED)
async def add_category(
    category_in: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        category = await create_category(db, current_user.id, category_in)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Create category error: {e}", exc_info=True)
        raise internal_error("Failed to create category", e)
    return ok(category_as_read(category), "Category created successfully")


@router.get("/categories/{category_id}", response_model=ApiResponse[CategoryDetail])
async def get_category_detail(
    category_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    category = await get_category_or_404(db, category_id, current_user.id)
    try:
        recipes = await get_category_recipes(db, category.id)
    except SQLAlchemyError as e:
        logger.error(f"Get category error: {e}", exc_info=True)
        raise internal_error("Failed to fetch category", e)
    return ok({**category_as_read(category, len(recipes)), "recipes": recipes})


@router.put("/categories/{category_id}", response_model=ApiResponse[CategoryRead])
async def edit_category(
    category_id: str,
    category_in: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    category = await get_category_or_404(db, category_id, current_user.id)
    try:
        category = await update_category(db, category, category_in)
        recipe_count = await count_category_entries(db, category.id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Update category error: {e}", exc_info=True)
        raise internal_error("Failed to update category", e)
    return ok(category_as_read(category, recipe_count), "Category updated successfully")


@router.delete("/categories/{category_id}", response_model=MessageResponse)
async def remove_category(
    category_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    category = await get_category_or_404(db, category_id, current_user.id)
    recipe_count = await count_category_entries(db, category.id)
    if recipe_count:
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot delete category with {recipe_count} recipes. Move or remove recipes first.",
            error_code=CATEGORY_NOT_EMPTY
        )

    try:
        await delete_category(db, category)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Delete category error: {e}", exc_info=True)
        raise internal_error("Failed to delete category", e)
    return MessageResponse(message="Category deleted successfully")


@router.get("/recipes/{recipe_id}", response_model=ApiResponse[RecipeBookStatus])
async def get_recipe_status(
    recipe_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        return ok(await recipe_status(db, current_user.id, recipe_id))
    except SQLAlchemyError as e:
        logger.error(f"Recipe book status error: {e}", exc_info=True)
        raise internal_error("Failed to fetch recipe book status", e)


@router.put("/recipes/{recipe_id}", response_model=MessageResponse)
async def refile_recipe(
    recipe_id: str,
    book_in: RecipeBookUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    await get_recipe_or_404(db, recipe_id)
    await _check_categories(db, current_user.id, book_in.category_ids)

    try:
        await replace_categories(db, current_user.id, recipe_id, book_in.category_ids, book_in.notes)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Update recipe book entry error: {e}", exc_info=True)
        raise internal_error("Failed to update recipe categories", e)
    return MessageResponse(message="Recipe categories updated successfully")


@router.delete("/recipes/{recipe_id}", response_model=MessageResponse)
async def unsave_recipe(
    recipe_id: str,
    category_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Remove a recipe from the book, or only from ``category_id`` when given"""
    try:
        removed = await remove_from_book(db, current_user.id, recipe_id, category_id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Remove from recipe book error: {e}", exc_info=True)
        raise internal_error("Failed to remove recipe from recipe book", e)

    if not removed:
        raise CustomHTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Recipe not found in recipe book",
            error_code=NOT_IN_RECIPE_BOOK
        )
    return MessageResponse(message="Recipe removed from recipe book successfully")
