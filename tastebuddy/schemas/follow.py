from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from tastebuddy.schemas.enums import FollowAction
from tastebuddy.schemas.user import UserPublic


class FollowRequest(BaseModel):
    user_id: str
    action: FollowAction


class FollowUserRead(UserPublic):
    followed_at: Optional[datetime] = None


class FollowStatus(BaseModel):
    following_count: int
    followers_count: int
    is_following: bool
    can_follow: bool
