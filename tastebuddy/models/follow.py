from datetime import datetime

from sqlmodel import SQLModel, Field

from tastebuddy.utils.dates import utcnow


class Follow(SQLModel, table=True):
    """Directed follow edge: follower_id follows following_id"""

    follower_id: str = Field(
        foreign_key="user.id",
        primary_key=True,
        index=True  # For faster following queries
    )
    following_id: str = Field(
        foreign_key="user.id",
        primary_key=True,
        index=True  # For faster follower queries
    )
    created_at: datetime = Field(default_factory=utcnow)
