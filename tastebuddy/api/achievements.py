import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tastebuddy.db.database import get_db
from tastebuddy.core.security import get_current_active_user
from tastebuddy.core.exceptions import CustomHTTPException, internal_error
from tastebuddy.core.error_codes import NOT_AUTHORIZED
from tastebuddy.crud.achievement import list_active_achievements, list_user_achievements
from tastebuddy.models.user import User
from tastebuddy.schemas.achievement import AchievementRead, EvaluationResult, UserAchievementRead
from tastebuddy.schemas.common import ApiResponse, ok
from tastebuddy.utils.achievement_evaluator import evaluate_all_achievements

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Achievements"])


@router.get("/achievements", response_model=ApiResponse[List[AchievementRead]])
async def achievement_catalog(db: AsyncSession = Depends(get_db)):
    try:
        achievements = await list_active_achievements(db)
    except SQLAlchemyError as e:
        logger.error(f"Get achievement catalog error: {e}", exc_info=True)
        raise internal_error("Internal server error", e)
    return ok(achievements)


@router.get("/users/{user_id}/achievements", response_model=ApiResponse[List[UserAchievementRead]])
async def get_user_achievements(user_id: str, db: AsyncSession = Depends(get_db)):
    try:
        earned = await list_user_achievements(db, user_id)
    except SQLAlchemyError as e:
        logger.error(f"Get achievements error: {e}", exc_info=True)
        raise internal_error("Internal server error", e)
    return ok([UserAchievementRead.model_validate(item) for item in earned])


@router.post("/users/{user_id}/achievements", response_model=ApiResponse[EvaluationResult])
async def evaluate_user_achievements(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Evaluate every achievement type for the caller and award what is earned"""
    if current_user.id != user_id:
        raise CustomHTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized",
            error_code=NOT_AUTHORIZED
        )

    try:
        outcome = await evaluate_all_achievements(db, user_id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Evaluate achievements error: {e}", exc_info=True)
        raise internal_error("Internal server error", e)

    earned = len(outcome.new_achievements)
    if earned:
        message = f"Congratulations! You earned {earned} new achievement{'s' if earned != 1 else ''}!"
    else:
        message = "No new achievements earned at this time."

    data = EvaluationResult(
        new_achievements=[UserAchievementRead.model_validate(item) for item in outcome.new_achievements],
        evaluated=outcome.evaluated,
        already_earned=outcome.already_earned
    )
    return ok(data, message=message)
