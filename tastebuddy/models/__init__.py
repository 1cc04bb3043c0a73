"""
Models package initialization
"""

from .user import User
from .follow import Follow
from .achievement import Achievement, UserAchievement
from .recipe import Recipe, Rating, Favorite
from .comment import Comment
from .compliment import Compliment
from .meal import Meal, MealImage
from .notification import Notification
from .recipe_book import RecipeBookCategory, RecipeBookEntry

__all__ = [
    "User", "Follow",
    "Achievement", "UserAchievement",
    "Recipe", "Rating", "Favorite",
    "Comment",
    "Compliment",
    "Meal", "MealImage",
    "Notification",
    "RecipeBookCategory", "RecipeBookEntry",
]
