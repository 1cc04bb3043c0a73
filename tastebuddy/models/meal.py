import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from tastebuddy.utils.dates import utcnow


class Meal(SQLModel, table=True):
    """A meal memory; private meals are only visible to their author"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    author_id: str = Field(foreign_key="user.id", index=True)
    name: str = Field(..., max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    date: datetime = Field(default_factory=utcnow, description="When the meal was eaten")
    is_public: bool = Field(default=True, index=True)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow}
    )


class MealImage(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    meal_id: str = Field(foreign_key="meal.id", index=True)
    url: str
    caption: Optional[str] = Field(default=None, max_length=300)
    alt: Optional[str] = Field(default=None, max_length=300)
    display_order: int = Field(default=0)
    is_primary: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow)
