from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from tastebuddy.schemas.common import Pagination
from tastebuddy.schemas.enums import NotificationType
from tastebuddy.schemas.user import MinimalUserRead


class NotificationRead(BaseModel):
    id: str
    type: NotificationType
    title: str
    message: str
    is_read: bool
    from_user: Optional[MinimalUserRead] = None
    related_recipe_id: Optional[str] = None
    related_comment_id: Optional[str] = None
    related_compliment_id: Optional[str] = None
    created_at: datetime


class NotificationList(BaseModel):
    notifications: List[NotificationRead]
    pagination: Pagination
    unread_count: int


class ReadAllResult(BaseModel):
    updated_count: int


class NotificationPreferences(BaseModel):
    notify_on_new_follower: bool
    notify_on_recipe_comment: bool
    notify_on_compliment: bool
    notify_on_new_recipe_from_following: bool

    class Config:
        from_attributes = True


class NotificationPreferencesUpdate(BaseModel):
    notify_on_new_follower: Optional[bool] = None
    notify_on_recipe_comment: Optional[bool] = None
    notify_on_compliment: Optional[bool] = None
    notify_on_new_recipe_from_following: Optional[bool] = None
