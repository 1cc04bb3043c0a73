"""
Notifications sent after user actions.

Like the achievement hooks these run once the triggering change has been
committed and only log failures, so a notification problem never fails the
request that caused it.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from tastebuddy.crud.notification import create_notification, create_notifications
from tastebuddy.models.follow import Follow
from tastebuddy.schemas.enums import NotificationType

logger = logging.getLogger(__name__)


def _display_name(name: Optional[str]) -> str:
    return name or "Someone"


async def _send(db: AsyncSession, coro_factory, description: str) -> None:
    try:
        await coro_factory()
    except Exception as e:
        logger.warning(f"Notification failed ({description}): {e}", exc_info=True)
        await db.rollback()


async def notify_new_follower(db: AsyncSession, follower_id: str, follower_name: Optional[str], following_id: str):
    await _send(db, lambda: create_notification(
        db,
        following_id,
        NotificationType.NEW_FOLLOWER,
        title="New Follower!",
        message=f"{_display_name(follower_name)} started following you",
        from_user_id=follower_id
    ), f"new follower for {following_id}")


async def notify_recipe_comment(
    db: AsyncSession,
    commenter_id: str,
    commenter_name: Optional[str],
    recipe_author_id: str,
    recipe_id: str,
    recipe_title: str,
    comment_id: str
):
    if commenter_id == recipe_author_id:
        return
    await _send(db, lambda: create_notification(
        db,
        recipe_author_id,
        NotificationType.RECIPE_COMMENT,
        title="New Comment",
        message=f'{_display_name(commenter_name)} commented on your recipe "{recipe_title}"',
        from_user_id=commenter_id,
        related_recipe_id=recipe_id,
        related_comment_id=comment_id
    ), f"comment {comment_id}")


async def notify_compliment(
    db: AsyncSession,
    sender_id: str,
    sender_name: Optional[str],
    recipient_id: str,
    compliment_id: str,
    is_tip: bool,
    is_anonymous: bool,
    tip_amount: Optional[float] = None,
    recipe_id: Optional[str] = None,
    recipe_title: Optional[str] = None
):
    if sender_id == recipient_id:
        return
    name = "Someone" if is_anonymous else _display_name(sender_name)
    if is_tip:
        title = "New Tip Received!"
        message = f"{name} sent you a ${tip_amount or 0:.2f} tip"
    else:
        title = "New Compliment!"
        message = f"{name} sent you a compliment"
    if recipe_title:
        message += f' for your recipe "{recipe_title}"'

    await _send(db, lambda: create_notification(
        db,
        recipient_id,
        NotificationType.COMPLIMENT_RECEIVED,
        title=title,
        message=message,
        # anonymous senders stay anonymous in the notification too
        from_user_id=None if is_anonymous else sender_id,
        related_compliment_id=compliment_id,
        related_recipe_id=recipe_id
    ), f"compliment {compliment_id}")


async def notify_followers_of_recipe(
    db: AsyncSession,
    author_id: str,
    author_name: Optional[str],
    recipe_id: str,
    recipe_title: str
):
    async def fan_out():
        result = await db.execute(select(Follow.follower_id).where(Follow.following_id == author_id))
        await create_notifications(
            db,
            list(result.scalars().all()),
            NotificationType.NEW_RECIPE_FROM_FOLLOWING,
            title="New Recipe!",
            message=f'{_display_name(author_name)} posted a new recipe: "{recipe_title}"',
            from_user_id=author_id,
            related_recipe_id=recipe_id
        )

    await _send(db, fan_out, f"new recipe {recipe_id}")
