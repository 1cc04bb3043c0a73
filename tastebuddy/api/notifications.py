import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tastebuddy.db.database import get_db
from tastebuddy.core.security import get_current_active_user
from tastebuddy.core.exceptions import CustomHTTPException, internal_error
from tastebuddy.core.error_codes import NOTIFICATION_NOT_FOUND
from tastebuddy.crud.notification import (
    get_unread_notification_count,
    list_notifications,
    mark_all_as_read,
    mark_as_read
)
from tastebuddy.models.user import User
from tastebuddy.schemas.common import ApiResponse, MessageResponse, ok, paginate
from tastebuddy.schemas.notification import NotificationList, ReadAllResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=ApiResponse[NotificationList])
async def get_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = False,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        notifications, total = await list_notifications(
            db,
            current_user.id,
            unread_only=unread_only,
            skip=(page - 1) * limit,
            limit=limit
        )
        unread_count = await get_unread_notification_count(db, current_user.id)
    except SQLAlchemyError as e:
        logger.error(f"List notifications error: {e}", exc_info=True)
        raise internal_error("Failed to fetch notifications", e)

    return ok(NotificationList(
        notifications=notifications,
        pagination=paginate(page, limit, total),
        unread_count=unread_count
    ))


@router.post("/read-all", response_model=ApiResponse[ReadAllResult])
async def read_all(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        updated = await mark_all_as_read(db, current_user.id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Mark all notifications read error: {e}", exc_info=True)
        raise internal_error("Failed to mark notifications as read", e)

    return ok(ReadAllResult(updated_count=updated), f"Marked {updated} notifications as read")


@router.put("/{notification_id}/read", response_model=MessageResponse)
async def read_one(
    notification_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    try:
        found = await mark_as_read(db, notification_id, current_user.id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Mark notification read error: {e}", exc_info=True)
        raise internal_error("Failed to mark notification as read", e)

    if not found:
        raise CustomHTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
            error_code=NOTIFICATION_NOT_FOUND
        )
    return MessageResponse(message="Notification marked as read")
