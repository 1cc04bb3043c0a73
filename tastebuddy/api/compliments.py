"""
Compliment endpoints

Compliments are private notes from one user to a chef. A compliment may carry
a tip; tips are recorded as pending and are only accepted while payments are
enabled in the settings.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tastebuddy.db.database import get_db
from tastebuddy.core.config import settings
from tastebuddy.core.security import get_current_active_user
from tastebuddy.core.exceptions import CustomHTTPException, internal_error
from tastebuddy.core.error_codes import (
    CANNOT_COMPLIMENT_SELF,
    COMPLIMENT_NOT_FOUND,
    FEATURE_DISABLED,
    INVALID_TIP_AMOUNT,
    NOT_AUTHORIZED,
    RECIPE_OWNER_MISMATCH,
    TIP_ALREADY_PROCESSED
)
from tastebuddy.crud.compliment import (
    as_read,
    create_compliment,
    delete_compliment,
    get_compliment,
    get_compliments_for_user,
    update_compliment_message
)
from tastebuddy.crud.recipe import get_recipe_or_404
from tastebuddy.crud.user import get_user_or_404
from tastebuddy.models.compliment import Compliment
from tastebuddy.models.user import User
from tastebuddy.schemas.common import ApiResponse, MessageResponse, ok
from tastebuddy.schemas.compliment import ComplimentCreate, ComplimentRead, ComplimentUpdate
from tastebuddy.schemas.enums import ComplimentType, PaymentStatus
from tastebuddy.utils.notifier import notify_compliment

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/compliments", tags=["Compliments"])


def _check_tip(compliment_in: ComplimentCreate) -> None:
    if compliment_in.type != ComplimentType.TIP:
        return

    if not settings.ENABLE_PAYMENTS:
        raise CustomHTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Tips are currently disabled",
            error_code=FEATURE_DISABLED
        )

    amount = compliment_in.tip_amount
    if amount is None or amount < settings.MIN_TIP_AMOUNT or amount > settings.MAX_TIP_AMOUNT:
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Tip amount must be between ${settings.MIN_TIP_AMOUNT:.2f} and ${settings.MAX_TIP_AMOUNT:.2f}",
            error_code=INVALID_TIP_AMOUNT
        )


async def _get_own_compliment(db: AsyncSession, compliment_id: str, user_id: str) -> Compliment:
    compliment = await get_compliment(db, compliment_id)
    if not compliment:
        raise CustomHTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Compliment not found",
            error_code=COMPLIMENT_NOT_FOUND
        )
    if compliment.from_user_id != user_id:
        raise CustomHTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only modify compliments you sent",
            error_code=NOT_AUTHORIZED
        )
    if compliment.type == ComplimentType.TIP and compliment.payment_status == PaymentStatus.COMPLETED:
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot modify a tip that has already been processed",
            error_code=TIP_ALREADY_PROCESSED
        )
    return compliment


@router.post("", response_model=ApiResponse[ComplimentRead], status_code=status.HTTP_201_CREATED)
async def send_compliment(
    compliment_in: ComplimentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    if compliment_in.to_user_id == current_user.id:
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot send a compliment to yourself",
            error_code=CANNOT_COMPLIMENT_SELF
        )

    _check_tip(compliment_in)
    await get_user_or_404(db, compliment_in.to_user_id)

    recipe_title = None
    if compliment_in.recipe_id:
        recipe = await get_recipe_or_404(db, compliment_in.recipe_id)
        recipe_title = recipe.title
        if recipe.author_id != compliment_in.to_user_id:
            raise CustomHTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Recipe does not belong to the recipient",
                error_code=RECIPE_OWNER_MISMATCH
            )

    try:
        compliment = await create_compliment(db, current_user, compliment_in)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Create compliment error: {e}", exc_info=True)
        raise internal_error("Failed to send compliment", e)

    logger.info(f"Compliment {compliment.id} sent to {compliment.to_user_id} ({compliment.type})")
    data = as_read(compliment, current_user)
    await notify_compliment(
        db,
        sender_id=current_user.id,
        sender_name=current_user.name,
        recipient_id=compliment.to_user_id,
        compliment_id=compliment.id,
        is_tip=compliment.type == ComplimentType.TIP,
        is_anonymous=compliment.is_anonymous,
        tip_amount=compliment.tip_amount,
        recipe_id=compliment.recipe_id,
        recipe_title=recipe_title
    )
    return ok(data)


@router.get("", response_model=ApiResponse[List[ComplimentRead]])
async def list_compliments(
    to_user_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Compliments received by the caller"""
    recipient_id = to_user_id or current_user.id
    if recipient_id != current_user.id:
        raise CustomHTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only view compliments sent to you",
            error_code=NOT_AUTHORIZED
        )

    try:
        return ok(await get_compliments_for_user(db, recipient_id))
    except SQLAlchemyError as e:
        logger.error(f"List compliments error: {e}", exc_info=True)
        raise internal_error("Failed to fetch compliments", e)


@router.put("/{compliment_id}", response_model=ApiResponse[ComplimentRead])
async def edit_compliment(
    compliment_id: str,
    compliment_in: ComplimentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    compliment = await _get_own_compliment(db, compliment_id, current_user.id)
    if compliment_in.message is None:
        return ok(as_read(compliment, current_user))

    try:
        compliment = await update_compliment_message(db, compliment, compliment_in.message)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Update compliment error: {e}", exc_info=True)
        raise internal_error("Failed to update compliment", e)

    return ok(as_read(compliment, current_user))


@router.delete("/{compliment_id}", response_model=MessageResponse)
async def remove_compliment(
    compliment_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    compliment = await _get_own_compliment(db, compliment_id, current_user.id)
    try:
        await delete_compliment(db, compliment)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Delete compliment error: {e}", exc_info=True)
        raise internal_error("Failed to delete compliment", e)

    return MessageResponse(message="Compliment deleted successfully")
