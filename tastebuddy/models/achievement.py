import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship

from tastebuddy.schemas.enums import AchievementType
from tastebuddy.utils.dates import utcnow


class Achievement(SQLModel, table=True):
    """Achievement definition; looked up by (name, type)"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    type: AchievementType = Field(index=True)
    name: str = Field(..., max_length=100, index=True)
    description: str = Field(default="", max_length=500)
    icon: str = Field(default="🏅", max_length=32)
    color: str = Field(default="#F59E0B", max_length=16)
    threshold: Optional[int] = Field(default=None)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow)


class UserAchievement(SQLModel, table=True):
    """Join table recording when a user earned an achievement."""
    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    achievement_id: str = Field(foreign_key="achievement.id", index=True)
    progress: Optional[int] = Field(default=None)
    earned_at: datetime = Field(default_factory=utcnow)

    achievement: Optional["Achievement"] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin"}
    )
