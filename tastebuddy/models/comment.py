import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field

from tastebuddy.utils.dates import utcnow


class Comment(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    content: str = Field(..., max_length=1000)
    recipe_id: str = Field(foreign_key="recipe.id", index=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow}
    )
