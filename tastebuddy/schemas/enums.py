"""
Enumeration definitions for all fixed options.
"""

from enum import Enum


class EmailVisibility(str, Enum):
    """Who may see a user's email address on their profile"""
    HIDDEN = "HIDDEN"
    FOLLOWING_ONLY = "FOLLOWING_ONLY"  # people the owner follows
    PUBLIC = "PUBLIC"


class AchievementType(str, Enum):
    RECIPE_COUNT = "RECIPE_COUNT"
    FAVORITES_COUNT = "FAVORITES_COUNT"
    FOLLOWERS_COUNT = "FOLLOWERS_COUNT"
    MEAL_COUNT = "MEAL_COUNT"
    PHOTO_COUNT = "PHOTO_COUNT"
    RATINGS_COUNT = "RATINGS_COUNT"
    SPECIAL = "SPECIAL"
    COMMENTS_COUNT = "COMMENTS_COUNT"
    INGREDIENTS_COUNT = "INGREDIENTS_COUNT"


class FollowAction(str, Enum):
    FOLLOW = "follow"
    UNFOLLOW = "unfollow"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ComplimentType(str, Enum):
    MESSAGE = "message"
    TIP = "tip"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class NotificationType(str, Enum):
    NEW_FOLLOWER = "NEW_FOLLOWER"
    RECIPE_COMMENT = "RECIPE_COMMENT"
    COMPLIMENT_RECEIVED = "COMPLIMENT_RECEIVED"
    NEW_RECIPE_FROM_FOLLOWING = "NEW_RECIPE_FROM_FOLLOWING"
