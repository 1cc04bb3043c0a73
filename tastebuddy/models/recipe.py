import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field, Column, JSON

from tastebuddy.schemas.enums import Difficulty
from tastebuddy.utils.dates import utcnow


class Recipe(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    author_id: str = Field(foreign_key="user.id", index=True)
    title: str = Field(..., max_length=200, index=True)
    description: Optional[str] = Field(default=None, max_length=2000)
    ingredients: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSON),
        description="One free-text line per ingredient"
    )
    instructions: str = Field(default="")
    cooking_time: Optional[int] = Field(default=None, description="Minutes")
    servings: Optional[int] = Field(default=None)
    difficulty: Optional[Difficulty] = Field(default=None)
    cuisine: Optional[str] = Field(default=None, max_length=100)
    image: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow}
    )


class Rating(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("user_id", "recipe_id", name="uq_rating_user_recipe"),
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    recipe_id: str = Field(foreign_key="recipe.id", index=True)
    rating: int = Field(..., ge=1, le=5)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow}
    )


class Favorite(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("user_id", "recipe_id", name="uq_favorite_user_recipe"),
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    recipe_id: str = Field(foreign_key="recipe.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)
