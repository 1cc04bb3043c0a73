from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from tastebuddy.schemas.user import MinimalUserRead


class CommentCreate(BaseModel):
    recipe_id: str
    content: str = Field(..., min_length=1, max_length=1000)


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)


class CommentRead(BaseModel):
    id: str
    content: str
    user_id: str
    recipe_id: str
    user: Optional[MinimalUserRead] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
