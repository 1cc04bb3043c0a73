"""
Privacy helpers for profile data.

Email addresses are exposed according to the owner's ``email_visibility``
setting:

- HIDDEN: nobody but the owner
- FOLLOWING_ONLY: people the owner follows
- PUBLIC: everyone, including anonymous callers
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from tastebuddy.models.follow import Follow
from tastebuddy.models.user import User
from tastebuddy.schemas.enums import EmailVisibility


async def owner_follows_viewer(db: AsyncSession, profile_user_id: str, viewer_user_id: str) -> bool:
    result = await db.execute(
        select(Follow).where(
            Follow.follower_id == profile_user_id,
            Follow.following_id == viewer_user_id
        )
    )
    return result.scalars().first() is not None


async def resolve_email_visibility(
    db: AsyncSession,
    profile_user_id: str,
    viewer_user_id: Optional[str],
    setting: EmailVisibility
) -> bool:
    """Decide whether the profile owner's email is shown to the viewer."""
    if not viewer_user_id:
        return setting == EmailVisibility.PUBLIC

    if profile_user_id == viewer_user_id:
        return True

    if setting == EmailVisibility.HIDDEN:
        return False
    if setting == EmailVisibility.PUBLIC:
        return True
    if setting == EmailVisibility.FOLLOWING_ONLY:
        return await owner_follows_viewer(db, profile_user_id, viewer_user_id)

    return False


async def apply_privacy(db: AsyncSession, user: User, viewer_user_id: Optional[str]) -> dict:
    """Public profile dict for ``user`` as seen by ``viewer_user_id``."""
    email_visible = await resolve_email_visibility(
        db,
        profile_user_id=user.id,
        viewer_user_id=viewer_user_id,
        setting=user.email_visibility
    )
    is_owner = viewer_user_id is not None and viewer_user_id == user.id

    return {
        "id": user.id,
        "name": user.name,
        "email": user.email if email_visible else None,
        "image": user.image,
        "bio": user.bio,
        "instagram_url": user.instagram_url,
        "website_url": user.website_url,
        # the setting itself is only shown to its owner
        "email_visibility": user.email_visibility if is_owner else None,
        "created_at": user.created_at,
    }


async def get_user_with_privacy(
    db: AsyncSession,
    user_id: str,
    viewer_user_id: Optional[str]
) -> Optional[dict]:
    user = await db.get(User, user_id)
    if user is None:
        return None
    return await apply_privacy(db, user, viewer_user_id)
