import logging
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from tastebuddy.models.notification import Notification
from tastebuddy.models.user import User
from tastebuddy.schemas.enums import NotificationType

logger = logging.getLogger(__name__)

# The recipient preference that gates each notification type
PREFERENCE_FOR_TYPE: Dict[NotificationType, str] = {
    NotificationType.NEW_FOLLOWER: "notify_on_new_follower",
    NotificationType.RECIPE_COMMENT: "notify_on_recipe_comment",
    NotificationType.COMPLIMENT_RECEIVED: "notify_on_compliment",
    NotificationType.NEW_RECIPE_FROM_FOLLOWING: "notify_on_new_recipe_from_following",
}


def wants(recipient: User, type_: NotificationType) -> bool:
    return bool(getattr(recipient, PREFERENCE_FOR_TYPE[type_], True))


async def create_notification(
    db: AsyncSession,
    recipient_id: str,
    type_: NotificationType,
    title: str,
    message: str,
    from_user_id: Optional[str] = None,
    **related
) -> Optional[Notification]:
    """
    Store a notification for ``recipient_id``.

    Returns None without writing anything when the recipient no longer
    exists or has switched this notification type off.
    """
    recipient = await db.get(User, recipient_id)
    if recipient is None or not wants(recipient, type_):
        return None

    notification = Notification(
        user_id=recipient_id,
        from_user_id=from_user_id,
        type=type_,
        title=title,
        message=message,
        **related
    )
    db.add(notification)
    await db.commit()
    logger.info(f"Notification {type_.value} sent to user {recipient_id}")
    return notification


async def create_notifications(
    db: AsyncSession,
    recipient_ids: Sequence[str],
    type_: NotificationType,
    title: str,
    message: str,
    from_user_id: Optional[str] = None,
    **related
) -> int:
    """Fan a notification out to several recipients in one commit"""
    if not recipient_ids:
        return 0

    preference = getattr(User, PREFERENCE_FOR_TYPE[type_])
    result = await db.execute(
        select(User.id).where(User.id.in_(list(recipient_ids)), preference.is_(True))
    )
    recipients = list(result.scalars().all())
    for recipient_id in recipients:
        db.add(Notification(
            user_id=recipient_id,
            from_user_id=from_user_id,
            type=type_,
            title=title,
            message=message,
            **related
        ))
    await db.commit()
    logger.info(f"Notification {type_.value} sent to {len(recipients)} users")
    return len(recipients)


async def get_unread_notification_count(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
    )
    return result.scalar() or 0


async def list_notifications(
    db: AsyncSession,
    user_id: str,
    unread_only: bool = False,
    skip: int = 0,
    limit: int = 20
) -> Tuple[List[dict], int]:
    filters = [Notification.user_id == user_id]
    if unread_only:
        filters.append(Notification.is_read.is_(False))

    total = (await db.execute(
        select(func.count()).select_from(Notification).where(*filters)
    )).scalar() or 0

    result = await db.execute(
        select(Notification, User)
        .outerjoin(User, User.id == Notification.from_user_id)
        .where(*filters)
        .order_by(Notification.created_at.desc())
        .offset(skip)
        .limit(limit)
    )

    notifications = []
    for notification, sender in result.all():
        data = notification.model_dump()
        data["from_user"] = (
            {"id": sender.id, "name": sender.name, "image": sender.image} if sender else None
        )
        notifications.append(data)
    return notifications, total


async def mark_as_read(db: AsyncSession, notification_id: str, user_id: str) -> bool:
    """Mark one of the user's notifications read; False when it is not theirs"""
    notification = await db.get(Notification, notification_id)
    if not notification or notification.user_id != user_id:
        return False
    if not notification.is_read:
        notification.is_read = True
        db.add(notification)
        await db.commit()
    return True


async def mark_all_as_read(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    await db.commit()
    return result.rowcount or 0


async def update_preferences(db: AsyncSession, user: User, changes: dict) -> User:
    for field, value in changes.items():
        setattr(user, field, value)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user
