"""
Authentication endpoints
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tastebuddy.db.database import get_db
from tastebuddy.core.security import (
    verify_password,
    create_access_token,
    get_current_active_user,
    scopes_for
)
from tastebuddy.core.exceptions import CustomHTTPException, internal_error
from tastebuddy.core.error_codes import INVALID_CREDENTIALS, ACCOUNT_DEACTIVATION
from tastebuddy.crud.user import create_user, get_user_by_email
from tastebuddy.models.user import User
from tastebuddy.schemas.auth import Token
from tastebuddy.schemas.common import ApiResponse, ok
from tastebuddy.schemas.user import UserCreate, UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=ApiResponse[UserRead], status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCreate, db: AsyncSession = Depends(get_db)):
    logger.info(f"[Registration] Starting registration for {user_in.email}")
    try:
        user = await create_user(db, user_in)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[Registration] Failed for {user_in.email}: {e}", exc_info=True)
        raise internal_error("Failed to create account. Please try again.", e)

    return ok(UserRead.model_validate(user), message="Account created successfully")


@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db)
):
    user = await get_user_by_email(db, form_data.username)
    if not user or not verify_password(form_data.password, user.hashed_password):
        logger.warning(f"Failed login attempt for: {form_data.username}")
        raise CustomHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            error_code=INVALID_CREDENTIALS,
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise CustomHTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account deactivated. Please contact support",
            error_code=ACCOUNT_DEACTIVATION,
        )

    return Token(access_token=create_access_token(user.id, scopes=scopes_for(user)))


@router.get("/me", response_model=ApiResponse[UserRead])
async def read_me(current_user: User = Depends(get_current_active_user)):
    return ok(UserRead.model_validate(current_user))
