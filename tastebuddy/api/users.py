"""
Profile endpoints
- Profile viewing with email privacy applied
- Profile management (owner only)
- Privacy and notification settings
- Tastebuddies (mutual follows) and a user's recipes
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tastebuddy.db.database import get_db
from tastebuddy.core.security import get_current_active_user, get_optional_user
from tastebuddy.core.exceptions import CustomHTTPException, internal_error
from tastebuddy.core.error_codes import (
    EMPTY_PREFERENCES_UPDATE,
    NOT_AUTHORIZED,
    PROFILE_UPDATE_FAILED,
    USER_NOT_FOUND
)
from tastebuddy.crud.follow import get_tastebuddies
from tastebuddy.crud.notification import update_preferences
from tastebuddy.crud.recipe import list_user_recipes_with_stats
from tastebuddy.crud.user import get_user_or_404, update_user, update_email_visibility
from tastebuddy.models.user import User
from tastebuddy.schemas.common import ApiResponse, ok
from tastebuddy.schemas.notification import NotificationPreferences, NotificationPreferencesUpdate
from tastebuddy.schemas.recipe import RecipeWithStats
from tastebuddy.schemas.user import PrivacySettings, UserPublic, UserRead, UserUpdate
from tastebuddy.utils.privacy import apply_privacy, get_user_with_privacy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/privacy", response_model=ApiResponse[PrivacySettings])
async def get_privacy_settings(current_user: User = Depends(get_current_active_user)):
    return ok(PrivacySettings(email_visibility=current_user.email_visibility))


@router.put("/privacy", response_model=ApiResponse[PrivacySettings])
async def update_privacy_settings(
    settings_in: PrivacySettings,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        user = await update_email_visibility(db, current_user, settings_in.email_visibility)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Update privacy settings error: {e}", exc_info=True)
        raise internal_error("Internal server error", e)

    return ok(PrivacySettings(email_visibility=user.email_visibility))


@router.get("/tastebuddies", response_model=ApiResponse[List[UserPublic]])
async def list_tastebuddies(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """People the caller follows who follow them back"""
    try:
        buddies = [
            await apply_privacy(db, user, current_user.id)
            for user in await get_tastebuddies(db, current_user.id)
        ]
    except SQLAlchemyError as e:
        logger.error(f"Get tastebuddies error: {e}", exc_info=True)
        raise internal_error("Internal server error", e)
    return ok(buddies)


@router.get("/notification-preferences", response_model=ApiResponse[NotificationPreferences])
async def get_notification_preferences(current_user: User = Depends(get_current_active_user)):
    return ok(NotificationPreferences.model_validate(current_user))


@router.put("/notification-preferences", response_model=ApiResponse[NotificationPreferences])
async def update_notification_preferences(
    preferences_in: NotificationPreferencesUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    changes = preferences_in.model_dump(exclude_none=True)
    if not changes:
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No valid preferences to update",
            error_code=EMPTY_PREFERENCES_UPDATE
        )

    try:
        user = await update_preferences(db, current_user, changes)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Update notification preferences error: {e}", exc_info=True)
        raise internal_error("Internal server error", e)

    return ok(NotificationPreferences.model_validate(user), "Notification preferences updated successfully")


@router.get("/{user_id}", response_model=ApiResponse[UserPublic])
async def get_profile(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user)
):
    """
    Public profile; the email is included only when the owner's
    visibility setting allows this viewer to see it
    """
    viewer_id = viewer.id if viewer else None
    try:
        profile = await get_user_with_privacy(db, user_id, viewer_id)
    except SQLAlchemyError as e:
        logger.error(f"Get user API error: {e}", exc_info=True)
        raise internal_error("Internal server error", e)

    if profile is None:
        raise CustomHTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
            error_code=USER_NOT_FOUND
        )
    return ok(profile)


@router.put("/{user_id}", response_model=ApiResponse[UserRead])
async def update_profile(
    user_id: str,
    user_in: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    if current_user.id != user_id:
        raise CustomHTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: You can only edit your own profile",
            error_code=NOT_AUTHORIZED
        )

    user = await get_user_or_404(db, user_id)
    try:
        user = await update_user(db, user, user_in)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Update user API error: {e}", exc_info=True)
        raise internal_error("Internal server error", e, PROFILE_UPDATE_FAILED)

    return ok(UserRead.model_validate(user))


@router.get("/{user_id}/recipes", response_model=ApiResponse[List[RecipeWithStats]])
async def get_user_recipes(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """A user's recipes, newest first, with favorite, rating and comment counts"""
    await get_user_or_404(db, user_id)
    try:
        return ok(await list_user_recipes_with_stats(db, user_id))
    except SQLAlchemyError as e:
        logger.error(f"Get user recipes error: {e}", exc_info=True)
        raise internal_error("Failed to fetch recipes", e)
