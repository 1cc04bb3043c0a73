import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tastebuddy.db.database import get_db
from tastebuddy.core.security import get_current_active_user
from tastebuddy.core.exceptions import CustomHTTPException, internal_error
from tastebuddy.core.error_codes import COMMENT_NOT_FOUND, NOT_AUTHORIZED
from tastebuddy.crud.comment import (
    create_comment,
    delete_comment,
    get_comment_by_id,
    get_comments_for_recipe,
    update_comment
)
from tastebuddy.crud.recipe import get_recipe_or_404
from tastebuddy.models.comment import Comment
from tastebuddy.models.user import User
from tastebuddy.schemas.comment import CommentCreate, CommentRead, CommentUpdate
from tastebuddy.schemas.common import ApiResponse, MessageResponse, ok
from tastebuddy.utils.achievement_evaluator import on_comment_added
from tastebuddy.utils.notifier import notify_recipe_comment

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comments", tags=["Comments"])


async def _get_own_comment(db: AsyncSession, comment_id: str, user_id: str, action: str) -> Comment:
    comment = await get_comment_by_id(db, comment_id)
    if not comment:
        raise CustomHTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Comment not found",
            error_code=COMMENT_NOT_FOUND
        )
    if comment.user_id != user_id:
        raise CustomHTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You can only {action} your own comments",
            error_code=NOT_AUTHORIZED
        )
    return comment


@router.post("", response_model=ApiResponse[CommentRead], status_code=status.HTTP_201_CREATED)
async def add_comment(
    comment_in: CommentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    recipe = await get_recipe_or_404(db, comment_in.recipe_id)
    author_id = recipe.author_id
    recipe_title = recipe.title
    commenter_id = current_user.id
    commenter_name = current_user.name

    try:
        comment = await create_comment(db, current_user, comment_in)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Create comment error: {e}", exc_info=True)
        raise internal_error("Failed to create comment", e)

    await on_comment_added(db, author_id)
    await notify_recipe_comment(
        db, commenter_id, commenter_name, author_id, comment_in.recipe_id, recipe_title, comment["id"]
    )
    return ok(comment)


@router.get("", response_model=ApiResponse[List[CommentRead]])
async def list_comments(
    recipe_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db)
):
    try:
        return ok(await get_comments_for_recipe(db, recipe_id))
    except SQLAlchemyError as e:
        logger.error(f"List comments error: {e}", exc_info=True)
        raise internal_error("Failed to fetch comments", e)


@router.put("/{comment_id}", response_model=ApiResponse[CommentRead])
async def edit_comment(
    comment_id: str,
    comment_in: CommentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    comment = await _get_own_comment(db, comment_id, current_user.id, "edit")
    try:
        return ok(await update_comment(db, comment, current_user, comment_in))
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Update comment error: {e}", exc_info=True)
        raise internal_error("Failed to update comment", e)


@router.delete("/{comment_id}", response_model=MessageResponse)
async def remove_comment(
    comment_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    comment = await _get_own_comment(db, comment_id, current_user.id, "delete")
    try:
        await delete_comment(db, comment)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Delete comment error: {e}", exc_info=True)
        raise internal_error("Failed to delete comment", e)

    return MessageResponse(message="Comment deleted successfully")
