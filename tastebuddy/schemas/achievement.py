from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from tastebuddy.schemas.enums import AchievementType


class AchievementDescriptor(BaseModel):
    """Static definition used to create an achievement on first award"""
    type: AchievementType
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    icon: str = Field(default="🏅", max_length=32)
    color: str = Field(default="#F59E0B", max_length=16)
    threshold: Optional[int] = None
    is_active: bool = True


class AchievementRead(BaseModel):
    id: str
    type: AchievementType
    name: str
    description: str
    icon: str
    color: str
    threshold: Optional[int] = None
    is_active: bool

    class Config:
        from_attributes = True


class UserAchievementRead(BaseModel):
    id: str
    user_id: str
    achievement_id: str
    progress: Optional[int] = None
    earned_at: datetime
    achievement: AchievementRead

    class Config:
        from_attributes = True


class AwardRequest(BaseModel):
    user_id: str
    achievement: AchievementDescriptor


class AwardResponse(BaseModel):
    already_held: bool
    achievement: AchievementRead
    earned_at: datetime


class EvaluationResult(BaseModel):
    new_achievements: List[UserAchievementRead] = []
    evaluated: int = 0
    already_earned: int = 0


class AchievementStatus(BaseModel):
    user_id: str
    achievement_exists: bool
    user_has_achievement: bool
    achievement: Optional[AchievementRead] = None
    earned_at: Optional[datetime] = None
