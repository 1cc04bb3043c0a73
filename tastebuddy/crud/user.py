"""
User CRUD operations:
- Account creation
- Lookups by id and email
- Profile and privacy updates
"""
import logging
from typing import Optional

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tastebuddy.core.error_codes import EMAIL_ALREADY_REGISTERED, USER_NOT_FOUND
from tastebuddy.core.exceptions import CustomHTTPException
from tastebuddy.models.user import User
from tastebuddy.schemas.enums import EmailVisibility
from tastebuddy.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


async def get_user_by_id(session: AsyncSession, user_id: str) -> Optional[User]:
    result = await session.execute(
        select(User).where(User.id == str(user_id))
    )
    return result.scalars().first()


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(
        select(User).where(User.email == email.lower())
    )
    return result.scalars().first()


async def get_user_or_404(session: AsyncSession, user_id: str) -> User:
    user = await get_user_by_id(session, user_id)
    if not user:
        raise CustomHTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
            error_code=USER_NOT_FOUND
        )
    return user


async def create_user(session: AsyncSession, user_data: UserCreate) -> User:
    """Create a new account; emails are stored lower-cased"""
    email = user_data.email.lower()
    if await get_user_by_email(session, email):
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An account with this email already exists",
            error_code=EMAIL_ALREADY_REGISTERED
        )

    db_user = User(name=user_data.name, email=email, hashed_password="")
    db_user.set_password(user_data.password)

    session.add(db_user)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An account with this email already exists",
            error_code=EMAIL_ALREADY_REGISTERED
        )
    await session.refresh(db_user)
    logger.info(f"Created user {db_user.id}")
    return db_user


async def update_user(session: AsyncSession, user: User, data: UserUpdate) -> User:
    """Replace the editable profile fields; omitted fields are cleared"""
    user.bio = data.bio or None
    user.instagram_url = data.instagram_url or None
    user.website_url = data.website_url or None

    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def update_email_visibility(session: AsyncSession, user: User, visibility: EmailVisibility) -> User:
    user.email_visibility = visibility
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user
