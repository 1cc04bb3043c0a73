import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tastebuddy.db.database import get_db
from tastebuddy.core.security import get_current_active_user
from tastebuddy.core.exceptions import CustomHTTPException, internal_error
from tastebuddy.core.error_codes import CANNOT_FOLLOW_SELF
from tastebuddy.crud.follow import (
    follow_user,
    unfollow_user,
    get_followers,
    get_following,
    count_followers,
    count_following,
    is_following
)
from tastebuddy.crud.user import get_user_or_404
from tastebuddy.models.user import User
from tastebuddy.schemas.common import ApiResponse, MessageResponse, ok
from tastebuddy.schemas.enums import FollowAction
from tastebuddy.schemas.follow import FollowRequest, FollowStatus, FollowUserRead
from tastebuddy.utils.achievement_evaluator import on_follow_changed
from tastebuddy.utils.notifier import notify_new_follower
from tastebuddy.utils.privacy import apply_privacy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Follow"])


@router.post("/follow", response_model=MessageResponse)
async def follow_action(
    follow_in: FollowRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    current_user_id = current_user.id
    current_user_name = current_user.name
    target_id = follow_in.user_id

    if target_id == current_user_id:
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot follow yourself",
            error_code=CANNOT_FOLLOW_SELF
        )

    await get_user_or_404(db, target_id)

    try:
        if follow_in.action == FollowAction.FOLLOW:
            changed = await follow_user(db, current_user_id, target_id)
            message = "Successfully followed user" if changed else "Already following this user"
        else:
            changed = await unfollow_user(db, current_user_id, target_id)
            message = "Successfully unfollowed user" if changed else "No existing follow relationship"
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Follow API error: {e}", exc_info=True)
        raise internal_error("Internal server error", e)

    if changed:
        await on_follow_changed(db, current_user_id, target_id)
        if follow_in.action == FollowAction.FOLLOW:
            await notify_new_follower(db, current_user_id, current_user_name, target_id)

    return MessageResponse(message=message)


@router.get("/{user_id}/followers", response_model=ApiResponse[List[FollowUserRead]])
async def list_followers(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        rows = await get_followers(db, user_id)
        followers = []
        for user, followed_at in rows:
            profile = await apply_privacy(db, user, current_user.id)
            followers.append({**profile, "followed_at": followed_at})
    except SQLAlchemyError as e:
        logger.error(f"Get followers API error: {e}", exc_info=True)
        raise internal_error("Internal server error", e)

    return ok(followers)


@router.get("/{user_id}/following", response_model=ApiResponse[List[FollowUserRead]])
async def list_following(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        rows = await get_following(db, user_id)
        following = []
        for user, followed_at in rows:
            profile = await apply_privacy(db, user, current_user.id)
            following.append({**profile, "followed_at": followed_at})
    except SQLAlchemyError as e:
        logger.error(f"Get following API error: {e}", exc_info=True)
        raise internal_error("Internal server error", e)

    return ok(following)


@router.get("/{user_id}/follow-status", response_model=ApiResponse[FollowStatus])
async def follow_status(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    is_self = current_user.id == user_id
    try:
        status_data = FollowStatus(
            following_count=await count_following(db, user_id),
            followers_count=await count_followers(db, user_id),
            is_following=False if is_self else await is_following(db, current_user.id, user_id),
            can_follow=not is_self
        )
    except SQLAlchemyError as e:
        logger.error(f"Get follow status API error: {e}", exc_info=True)
        raise internal_error("Internal server error", e)

    return ok(status_data)
