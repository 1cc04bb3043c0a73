import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tastebuddy.db.database import get_db
from tastebuddy.core.security import get_current_active_user, get_optional_user
from tastebuddy.core.exceptions import CustomHTTPException, internal_error
from tastebuddy.core.error_codes import NOT_AUTHORIZED
from tastebuddy.crud.recipe import (
    add_favorite,
    create_recipe,
    delete_recipe,
    get_rating_summary,
    get_recipe_stats,
    get_recipe_or_404,
    list_favorite_recipes,
    list_recipes,
    rate_recipe,
    remove_favorite,
    update_recipe
)
from tastebuddy.models.recipe import Recipe
from tastebuddy.models.user import User
from tastebuddy.schemas.common import ApiResponse, MessageResponse, ok
from tastebuddy.schemas.recipe import (
    RatingCreate,
    RatingSummary,
    RecipeCreate,
    RecipeList,
    RecipeRead,
    RecipeStats,
    RecipeUpdate
)
from tastebuddy.utils.achievement_evaluator import on_favorite_added, on_rating_added, on_recipe_changed
from tastebuddy.utils.notifier import notify_followers_of_recipe

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["Recipes"])


def _ensure_author(recipe: Recipe, user_id: str, action: str) -> None:
    if recipe.author_id != user_id:
        raise CustomHTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You can only {action} your own recipes",
            error_code=NOT_AUTHORIZED
        )


@router.post("", response_model=ApiResponse[RecipeRead], status_code=status.HTTP_201_CREATED)
async def add_recipe(
    recipe_in: RecipeCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    author_id = current_user.id
    author_name = current_user.name
    try:
        recipe = await create_recipe(db, author_id, recipe_in)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Create recipe error: {e}", exc_info=True)
        raise internal_error("Failed to create recipe", e)

    data = RecipeRead.model_validate(recipe)
    await on_recipe_changed(db, author_id)
    await notify_followers_of_recipe(db, author_id, author_name, data.id, data.title)
    return ok(data)


@router.get("", response_model=ApiResponse[RecipeList])
async def search_recipes(
    q: Optional[str] = Query(None, max_length=100),
    author_id: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
):
    try:
        recipes, total = await list_recipes(db, q=q, author_id=author_id, skip=skip, limit=limit)
    except SQLAlchemyError as e:
        logger.error(f"List recipes error: {e}", exc_info=True)
        raise internal_error("Failed to fetch recipes", e)
    return ok(RecipeList(recipes=recipes, total=total, skip=skip, limit=limit))


@router.get("/favorites", response_model=ApiResponse[List[RecipeRead]])
async def my_favorites(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        return ok(await list_favorite_recipes(db, current_user.id))
    except SQLAlchemyError as e:
        logger.error(f"List favorites error: {e}", exc_info=True)
        raise internal_error("Failed to fetch favorites", e)


@router.get("/stats", response_model=ApiResponse[RecipeStats])
async def recipe_stats(db: AsyncSession = Depends(get_db)):
    try:
        return ok(await get_recipe_stats(db))
    except SQLAlchemyError as e:
        logger.error(f"Recipe stats error: {e}", exc_info=True)
        raise internal_error("Failed to fetch recipe stats", e)


@router.get("/{recipe_id}", response_model=ApiResponse[RecipeRead])
async def get_recipe_detail(recipe_id: str, db: AsyncSession = Depends(get_db)):
    return ok(await get_recipe_or_404(db, recipe_id))


@router.put("/{recipe_id}", response_model=ApiResponse[RecipeRead])
async def edit_recipe(
    recipe_id: str,
    recipe_in: RecipeUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    recipe = await get_recipe_or_404(db, recipe_id)
    _ensure_author(recipe, current_user.id, "edit")

    author_id = current_user.id
    try:
        recipe = await update_recipe(db, recipe, recipe_in)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Update recipe error: {e}", exc_info=True)
        raise internal_error("Failed to update recipe", e)

    data = RecipeRead.model_validate(recipe)
    if recipe_in.ingredients is not None or recipe_in.image is not None:
        await on_recipe_changed(db, author_id)
    return ok(data)


@router.delete("/{recipe_id}", response_model=MessageResponse)
async def remove_recipe(
    recipe_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    recipe = await get_recipe_or_404(db, recipe_id)
    _ensure_author(recipe, current_user.id, "delete")

    author_id = current_user.id
    try:
        await delete_recipe(db, recipe)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Delete recipe error: {e}", exc_info=True)
        raise internal_error("Failed to delete recipe", e)

    await on_recipe_changed(db, author_id)
    return MessageResponse(message="Recipe deleted successfully")


@router.post("/{recipe_id}/rating", response_model=ApiResponse[RatingSummary])
async def rate(
    recipe_id: str,
    rating_in: RatingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    recipe = await get_recipe_or_404(db, recipe_id)
    user_id = current_user.id
    author_id = recipe.author_id

    try:
        await rate_recipe(db, user_id, recipe_id, rating_in.rating)
        summary = await get_rating_summary(db, recipe_id, user_id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Rate recipe error: {e}", exc_info=True)
        raise internal_error("Failed to save rating", e)

    await on_rating_added(db, author_id)
    return ok(summary)


@router.get("/{recipe_id}/rating", response_model=ApiResponse[RatingSummary])
async def rating_summary(
    recipe_id: str,
    db: AsyncSession = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user)
):
    await get_recipe_or_404(db, recipe_id)
    try:
        return ok(await get_rating_summary(db, recipe_id, viewer.id if viewer else None))
    except SQLAlchemyError as e:
        logger.error(f"Rating summary error: {e}", exc_info=True)
        raise internal_error("Failed to fetch ratings", e)


@router.post("/{recipe_id}/favorite", response_model=MessageResponse)
async def favorite(
    recipe_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    recipe = await get_recipe_or_404(db, recipe_id)
    author_id = recipe.author_id

    try:
        added = await add_favorite(db, current_user.id, recipe_id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Favorite recipe error: {e}", exc_info=True)
        raise internal_error("Failed to favorite recipe", e)

    if added:
        await on_favorite_added(db, author_id)
        return MessageResponse(message="Recipe added to favorites")
    return MessageResponse(message="Recipe is already a favorite")


@router.delete("/{recipe_id}/favorite", response_model=MessageResponse)
async def unfavorite(
    recipe_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    await get_recipe_or_404(db, recipe_id)
    try:
        removed = await remove_favorite(db, current_user.id, recipe_id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Unfavorite recipe error: {e}", exc_info=True)
        raise internal_error("Failed to remove favorite", e)

    message = "Recipe removed from favorites" if removed else "Recipe was not a favorite"
    return MessageResponse(message=message)
