from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from tastebuddy.schemas.common import Pagination
from tastebuddy.schemas.user import MinimalUserRead

MAX_MEAL_IMAGES = 5


class MealImageIn(BaseModel):
    url: str = Field(..., min_length=1)
    caption: Optional[str] = Field(default=None, max_length=300)
    alt: Optional[str] = Field(default=None, max_length=300)
    display_order: Optional[int] = Field(default=None, ge=0)
    is_primary: bool = False


class MealImageRead(BaseModel):
    id: str
    url: str
    caption: Optional[str] = None
    alt: Optional[str] = None
    display_order: int
    is_primary: bool

    class Config:
        from_attributes = True


def _normalize_images(images: List[MealImageIn]) -> List[MealImageIn]:
    """Order images and make sure exactly one is primary"""
    if len(images) > MAX_MEAL_IMAGES:
        raise ValueError(f"A meal can have at most {MAX_MEAL_IMAGES} images")
    if sum(1 for image in images if image.is_primary) > 1:
        raise ValueError("Only one image can be marked as primary")

    normalized = []
    for index, image in enumerate(images):
        order = image.display_order if image.display_order is not None else index
        normalized.append(image.model_copy(update={"display_order": order}))
    if normalized and not any(image.is_primary for image in normalized):
        normalized[0] = normalized[0].model_copy(update={"is_primary": True})
    return normalized


class MealCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    date: Optional[datetime] = None
    is_public: bool = True
    images: List[MealImageIn] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Meal name is required")
        return v

    @model_validator(mode="after")
    def check_images(self):
        self.images = _normalize_images(self.images)
        return self


class MealUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    date: Optional[datetime] = None
    is_public: Optional[bool] = None
    # replaces every image when given
    images: Optional[List[MealImageIn]] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Meal name is required")
        return v

    @model_validator(mode="after")
    def check_images(self):
        if self.images is not None:
            self.images = _normalize_images(self.images)
        return self


class MealRead(BaseModel):
    id: str
    author_id: str
    name: str
    description: Optional[str] = None
    date: datetime
    is_public: bool
    images: List[MealImageRead] = []
    author: Optional[MinimalUserRead] = None
    created_at: datetime
    updated_at: datetime


class MealList(BaseModel):
    meals: List[MealRead]
    pagination: Pagination
