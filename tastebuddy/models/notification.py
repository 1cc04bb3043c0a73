import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from tastebuddy.schemas.enums import NotificationType
from tastebuddy.utils.dates import utcnow


class Notification(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True, description="Recipient")
    from_user_id: Optional[str] = Field(default=None, foreign_key="user.id")
    type: NotificationType
    title: str = Field(..., max_length=200)
    message: str = Field(..., max_length=1000)
    is_read: bool = Field(default=False, index=True)

    # plain references; the target may be deleted after the notification is sent
    related_recipe_id: Optional[str] = Field(default=None)
    related_comment_id: Optional[str] = Field(default=None)
    related_compliment_id: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, index=True)
