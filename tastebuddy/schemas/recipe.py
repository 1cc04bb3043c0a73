from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from tastebuddy.schemas.enums import Difficulty


class RecipeBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    ingredients: List[str] = Field(default_factory=list)
    instructions: str = Field(..., min_length=1)
    cooking_time: Optional[int] = Field(default=None, ge=0)
    servings: Optional[int] = Field(default=None, ge=1)
    difficulty: Optional[Difficulty] = None
    cuisine: Optional[str] = Field(default=None, max_length=100)
    image: Optional[str] = None

    @field_validator("ingredients")
    @classmethod
    def drop_blank_ingredients(cls, v: List[str]) -> List[str]:
        return [item.strip() for item in v if item and item.strip()]


class RecipeCreate(RecipeBase):
    pass


class RecipeUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    ingredients: Optional[List[str]] = None
    instructions: Optional[str] = Field(default=None, min_length=1)
    cooking_time: Optional[int] = Field(default=None, ge=0)
    servings: Optional[int] = Field(default=None, ge=1)
    difficulty: Optional[Difficulty] = None
    cuisine: Optional[str] = Field(default=None, max_length=100)
    image: Optional[str] = None


class RecipeRead(RecipeBase):
    id: str
    author_id: str
    instructions: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RecipeList(BaseModel):
    recipes: List[RecipeRead]
    total: int
    skip: int
    limit: int


class RatingCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)


class RatingSummary(BaseModel):
    average: Optional[float] = None
    count: int = 0
    user_rating: Optional[int] = None


class RecipeWithStats(RecipeRead):
    favorites_count: int = 0
    ratings_count: int = 0
    comments_count: int = 0
    avg_rating: Optional[float] = None


class PlatformStats(BaseModel):
    total_recipes: int
    total_meals: int
    total_users: int
    total_favorites: int
    total_ratings: int


class CuisineCount(BaseModel):
    cuisine: str
    count: int


class RecipeStats(BaseModel):
    most_popular: List[RecipeWithStats]
    newest: List[RecipeRead]
    highest_rated: List[RecipeWithStats]
    trending_cuisines: List[CuisineCount]
    platform_stats: PlatformStats
