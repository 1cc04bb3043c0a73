"""
Meal memories
- Own meals, public feed and recent meals
- Create, edit and delete (author only)
- Public meals on a user's profile
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tastebuddy.db.database import get_db
from tastebuddy.core.security import get_current_active_user, get_optional_user
from tastebuddy.core.exceptions import CustomHTTPException, internal_error
from tastebuddy.core.error_codes import MEAL_NOT_FOUND, NOT_AUTHORIZED
from tastebuddy.crud.follow import get_tastebuddy_ids
from tastebuddy.crud.meal import (
    create_meal,
    delete_meal,
    get_meal_or_404,
    list_meals,
    list_recent_public_meals,
    read_meal,
    update_meal
)
from tastebuddy.crud.user import get_user_or_404
from tastebuddy.models.meal import Meal
from tastebuddy.models.user import User
from tastebuddy.schemas.common import ApiResponse, MessageResponse, ok, paginate
from tastebuddy.schemas.meal import MealCreate, MealList, MealRead, MealUpdate
from tastebuddy.utils.achievement_evaluator import on_meal_changed

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Meals"])

MAX_PAGE_SIZE = 50


def _ensure_author(meal: Meal, user_id: str, action: str) -> None:
    if meal.author_id != user_id:
        raise CustomHTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You can only {action} your own meals",
            error_code=NOT_AUTHORIZED
        )


def _meal_list(meals, total: int, page: int, limit: int) -> MealList:
    return MealList(meals=meals, pagination=paginate(page, limit, total))


@router.post("/meals", response_model=ApiResponse[MealRead], status_code=status.HTTP_201_CREATED)
async def add_meal(
    meal_in: MealCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    author_id = current_user.id
    try:
        meal = await create_meal(db, author_id, meal_in)
        data = await read_meal(db, meal)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Create meal error: {e}", exc_info=True)
        raise internal_error("Failed to create meal", e)

    await on_meal_changed(db, author_id)
    return ok(data, "Meal created successfully")


@router.get("/meals", response_model=ApiResponse[MealList])
async def my_meals(
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """The caller's own meals, private ones included"""
    try:
        meals, total = await list_meals(
            db,
            author_ids=[current_user.id],
            public_only=False,
            search=search,
            skip=(page - 1) * limit,
            limit=limit
        )
    except SQLAlchemyError as e:
        logger.error(f"List meals error: {e}", exc_info=True)
        raise internal_error("Failed to fetch meals", e)
    return ok(_meal_list(meals, total, page, limit))


@router.get("/meals/public", response_model=ApiResponse[MealList])
async def public_meals(
    search: Optional[str] = Query(None, max_length=100),
    tastebuddies_only: bool = False,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user)
):
    """
    Public meals from everyone. With ``tastebuddies_only`` the feed is limited
    to people the viewer follows who follow them back; anonymous viewers get
    an empty page.
    """
    try:
        author_ids = None
        if tastebuddies_only:
            author_ids = await get_tastebuddy_ids(db, viewer.id) if viewer else []
        meals, total = await list_meals(
            db,
            author_ids=author_ids,
            public_only=True,
            search=search,
            skip=(page - 1) * limit,
            limit=limit
        )
    except SQLAlchemyError as e:
        logger.error(f"List public meals error: {e}", exc_info=True)
        raise internal_error("Failed to fetch meals", e)
    return ok(_meal_list(meals, total, page, limit))


@router.get("/meals/recent", response_model=ApiResponse[List[MealRead]])
async def recent_meals(
    limit: int = Query(6, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db)
):
    try:
        return ok(await list_recent_public_meals(db, limit))
    except SQLAlchemyError as e:
        logger.error(f"Recent meals error: {e}", exc_info=True)
        raise internal_error("Failed to fetch recent meals", e)


@router.get("/meals/{meal_id}", response_model=ApiResponse[MealRead])
async def get_meal_detail(
    meal_id: str,
    db: AsyncSession = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user)
):
    meal = await get_meal_or_404(db, meal_id)
    # private meals do not exist for anyone but their author
    if not meal.is_public and (viewer is None or viewer.id != meal.author_id):
        raise CustomHTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Meal not found",
            error_code=MEAL_NOT_FOUND
        )
    return ok(await read_meal(db, meal))


@router.put("/meals/{meal_id}", response_model=ApiResponse[MealRead])
async def edit_meal(
    meal_id: str,
    meal_in: MealUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    meal = await get_meal_or_404(db, meal_id)
    _ensure_author(meal, current_user.id, "edit")

    author_id = current_user.id
    try:
        meal = await update_meal(db, meal, meal_in)
        data = await read_meal(db, meal)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Update meal error: {e}", exc_info=True)
        raise internal_error("Failed to update meal", e)

    if meal_in.images is not None:
        await on_meal_changed(db, author_id)
    return ok(data, "Meal updated successfully")


@router.delete("/meals/{meal_id}", response_model=MessageResponse)
async def remove_meal(
    meal_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    meal = await get_meal_or_404(db, meal_id)
    _ensure_author(meal, current_user.id, "delete")

    author_id = current_user.id
    try:
        await delete_meal(db, meal)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Delete meal error: {e}", exc_info=True)
        raise internal_error("Failed to delete meal", e)

    await on_meal_changed(db, author_id)
    return MessageResponse(message="Meal deleted successfully")


@router.get("/users/{user_id}/meals", response_model=ApiResponse[MealList])
async def user_meals(
    user_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db)
):
    await get_user_or_404(db, user_id)
    try:
        meals, total = await list_meals(
            db,
            author_ids=[user_id],
            public_only=True,
            skip=(page - 1) * limit,
            limit=limit
        )
    except SQLAlchemyError as e:
        logger.error(f"List user meals error: {e}", exc_info=True)
        raise internal_error("Failed to fetch meals", e)
    return ok(_meal_list(meals, total, page, limit))
