"""
Admin endpoints for defining and awarding achievements by hand
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tastebuddy.db.database import get_db
from tastebuddy.core.config import settings
from tastebuddy.core.security import get_admin_user
from tastebuddy.core.exceptions import CustomHTTPException, internal_error
from tastebuddy.core.error_codes import SPECIAL_USER_NOT_CONFIGURED
from tastebuddy.crud.achievement import AwardResult, award_achievement, get_achievement, get_user_achievement
from tastebuddy.crud.user import get_user_or_404
from tastebuddy.models.user import User
from tastebuddy.schemas.achievement import (
    AchievementRead,
    AchievementStatus,
    AwardRequest,
    AwardResponse
)
from tastebuddy.schemas.common import ApiResponse, ok
from tastebuddy.schemas.enums import AchievementType
from tastebuddy.utils.achievement_catalog import SPECIAL_ACHIEVEMENT

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def _award_response(result: AwardResult, user_name: Optional[str]) -> JSONResponse:
    """201 for a fresh award, 200 when the user already held it"""
    achievement_name = result.achievement.name
    if result.already_held:
        message = f'User "{user_name}" already has the "{achievement_name}" achievement'
    else:
        message = f'Successfully awarded "{achievement_name}" achievement to {user_name}!'

    data = AwardResponse(
        already_held=result.already_held,
        achievement=AchievementRead.model_validate(result.achievement),
        earned_at=result.earned_at
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK if result.already_held else status.HTTP_201_CREATED,
        content=jsonable_encoder(ok(data, message=message))
    )


async def _status(db: AsyncSession, user: User, name: str, type_: AchievementType) -> AchievementStatus:
    achievement = await get_achievement(db, name, type_)
    if achievement is None:
        return AchievementStatus(user_id=user.id, achievement_exists=False, user_has_achievement=False)

    held = await get_user_achievement(db, user.id, achievement.id)
    return AchievementStatus(
        user_id=user.id,
        achievement_exists=True,
        user_has_achievement=held is not None,
        achievement=AchievementRead.model_validate(achievement),
        earned_at=held.earned_at if held else None
    )


@router.post("/achievements/award", response_model=ApiResponse[AwardResponse])
async def award(
    award_in: AwardRequest,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    admin_id = admin.id
    target = await get_user_or_404(db, award_in.user_id)
    user_name = target.name

    result = await award_achievement(db, award_in.user_id, award_in.achievement)
    logger.info(f"Admin {admin_id} awarded {award_in.achievement.name!r} to {award_in.user_id} (already held: {result.already_held})")
    return _award_response(result, user_name)


@router.get("/achievements/status", response_model=ApiResponse[AchievementStatus])
async def achievement_status(
    user_id: str = Query(...),
    name: str = Query(...),
    type: AchievementType = Query(...),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    user = await get_user_or_404(db, user_id)
    try:
        return ok(await _status(db, user, name, type))
    except SQLAlchemyError as e:
        logger.error(f"Error checking achievement status: {e}", exc_info=True)
        raise internal_error("Failed to check achievement status", e)


def _special_user_id() -> str:
    if not settings.SPECIAL_USER_ID:
        raise CustomHTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Special user ID not configured",
            error_code=SPECIAL_USER_NOT_CONFIGURED
        )
    return settings.SPECIAL_USER_ID


@router.post("/special-achievement", response_model=ApiResponse[AwardResponse])
async def award_special_achievement(
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    special_user_id = _special_user_id()
    target = await get_user_or_404(db, special_user_id)
    user_name = target.name

    result = await award_achievement(db, special_user_id, SPECIAL_ACHIEVEMENT)
    return _award_response(result, user_name)


@router.get("/special-achievement", response_model=ApiResponse[AchievementStatus])
async def special_achievement_status(
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    user = await get_user_or_404(db, _special_user_id())
    try:
        return ok(await _status(db, user, SPECIAL_ACHIEVEMENT.name, SPECIAL_ACHIEVEMENT.type))
    except SQLAlchemyError as e:
        logger.error(f"Error checking special achievement: {e}", exc_info=True)
        raise internal_error("Failed to check special achievement", e)
