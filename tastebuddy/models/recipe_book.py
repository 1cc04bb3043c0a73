import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field

from tastebuddy.utils.dates import utcnow


class RecipeBookCategory(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_recipe_book_category_user_name"),
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    name: str = Field(..., max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    color: Optional[str] = Field(default=None, max_length=20)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow}
    )


class RecipeBookEntry(SQLModel, table=True):
    """A saved recipe; one row per category, or a single row with no category"""
    __table_args__ = (
        UniqueConstraint("user_id", "recipe_id", "category_id", name="uq_recipe_book_entry"),
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    recipe_id: str = Field(foreign_key="recipe.id", index=True)
    category_id: Optional[str] = Field(default=None, foreign_key="recipebookcategory.id")
    notes: Optional[str] = Field(default=None, max_length=1000)
    added_at: datetime = Field(default_factory=utcnow)
