from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from tastebuddy.schemas.common import Pagination
from tastebuddy.schemas.recipe import RecipeRead

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    color: Optional[str] = Field(default=None, pattern=COLOR_PATTERN)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    color: Optional[str] = Field(default=None, pattern=COLOR_PATTERN)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v


class CategorySummary(BaseModel):
    id: str
    name: str
    color: Optional[str] = None

    class Config:
        from_attributes = True


class CategoryRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    recipe_count: int = 0
    created_at: datetime


class CategoryDetail(CategoryRead):
    recipes: List[RecipeRead] = []


class RecipeBookAdd(BaseModel):
    recipe_id: str
    category_ids: List[str] = Field(default_factory=list)
    notes: Optional[str] = Field(default=None, max_length=1000)


class RecipeBookUpdate(BaseModel):
    category_ids: List[str] = Field(default_factory=list)
    notes: Optional[str] = Field(default=None, max_length=1000)


class RecipeBookItem(BaseModel):
    recipe: RecipeRead
    category: Optional[CategorySummary] = None
    notes: Optional[str] = None
    added_at: datetime


class RecipeBookList(BaseModel):
    entries: List[RecipeBookItem]
    pagination: Pagination


class RecipeBookStatus(BaseModel):
    in_book: bool
    categories: List[CategorySummary] = []
    notes: Optional[str] = None


class RecipeBookStats(BaseModel):
    total_unique_recipes: int
    total_entries: int
