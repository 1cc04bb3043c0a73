"""
Default achievements seeded into every environment.
"""

from tastebuddy.schemas.achievement import AchievementDescriptor
from tastebuddy.schemas.enums import AchievementType

ACHIEVEMENT_CATALOG = [
    # Recipes shared
    AchievementDescriptor(
        type=AchievementType.RECIPE_COUNT, name="First Recipe",
        description="Share your very first recipe with the community",
        icon="🍳", color="#10B981", threshold=1,
    ),
    AchievementDescriptor(
        type=AchievementType.RECIPE_COUNT, name="Home Cook",
        description="Share 5 delicious recipes",
        icon="👨‍🍳", color="#10B981", threshold=5,
    ),
    AchievementDescriptor(
        type=AchievementType.RECIPE_COUNT, name="Recipe Master",
        description="Share 25 amazing recipes with the community",
        icon="🏆", color="#F59E0B", threshold=25,
    ),
    AchievementDescriptor(
        type=AchievementType.RECIPE_COUNT, name="Culinary Legend",
        description="Share 100 incredible recipes - you're a true legend!",
        icon="👑", color="#8B5CF6", threshold=100,
    ),

    # Favorites received
    AchievementDescriptor(
        type=AchievementType.FAVORITES_COUNT, name="Community Favorite",
        description="Receive 50 total favorites on your recipes",
        icon="❤️", color="#EF4444", threshold=50,
    ),
    AchievementDescriptor(
        type=AchievementType.FAVORITES_COUNT, name="Beloved Chef",
        description="Receive 200 total favorites - you're beloved by the community!",
        icon="💖", color="#EC4899", threshold=200,
    ),
    AchievementDescriptor(
        type=AchievementType.FAVORITES_COUNT, name="Recipe Superstar",
        description="Receive 1000 total favorites - you're a true superstar!",
        icon="🌟", color="#F59E0B", threshold=1000,
    ),

    # Followers
    AchievementDescriptor(
        type=AchievementType.FOLLOWERS_COUNT, name="Social Butterfly",
        description="Gain 10 followers who love your recipes",
        icon="🦋", color="#06B6D4", threshold=10,
    ),
    AchievementDescriptor(
        type=AchievementType.FOLLOWERS_COUNT, name="Influencer",
        description="Gain 100 followers - you're becoming an influencer!",
        icon="📢", color="#8B5CF6", threshold=100,
    ),
    AchievementDescriptor(
        type=AchievementType.FOLLOWERS_COUNT, name="Celebrity Chef",
        description="Gain 500 followers - you're a celebrity in the kitchen!",
        icon="⭐", color="#F59E0B", threshold=500,
    ),

    # Special
    AchievementDescriptor(
        type=AchievementType.SPECIAL, name="BFF",
        description="Become TasteBuddies with someone (mutual following)",
        icon="👯", color="#EC4899", threshold=1,
    ),

    # Ratings
    AchievementDescriptor(
        type=AchievementType.RATINGS_COUNT, name="5-Star Chef",
        description="Have a recipe with 4.5+ average rating",
        icon="⭐", color="#F59E0B", threshold=1,
    ),
    AchievementDescriptor(
        type=AchievementType.RATINGS_COUNT, name="Consistent Quality",
        description="Have 10 recipes with 4+ average rating",
        icon="🎯", color="#10B981", threshold=10,
    ),

    # Comments
    AchievementDescriptor(
        type=AchievementType.COMMENTS_COUNT, name="Hot Topic",
        description="Have a recipe with more than 10 comments",
        icon="🌶️", color="#EF4444", threshold=1,
    ),

    # Ingredients
    AchievementDescriptor(
        type=AchievementType.INGREDIENTS_COUNT, name="Resourceful",
        description="Use 50 unique ingredients across all your recipes",
        icon="🧑‍🍳", color="#8B5CF6", threshold=50,
    ),

    # Meals shared
    AchievementDescriptor(
        type=AchievementType.MEAL_COUNT, name="First Meal",
        description="Post your first meal memory",
        icon="🍽️", color="#3B82F6", threshold=1,
    ),
    AchievementDescriptor(
        type=AchievementType.MEAL_COUNT, name="Meal Explorer",
        description="Share 5 meal memories",
        icon="🗺️", color="#3B82F6", threshold=5,
    ),
    AchievementDescriptor(
        type=AchievementType.MEAL_COUNT, name="Meal Curator",
        description="Document 10 delicious meals",
        icon="📚", color="#3B82F6", threshold=10,
    ),
    AchievementDescriptor(
        type=AchievementType.MEAL_COUNT, name="Meal Master",
        description="Share 25 amazing meal experiences",
        icon="🏆", color="#3B82F6", threshold=25,
    ),
    AchievementDescriptor(
        type=AchievementType.MEAL_COUNT, name="Meal Legend",
        description="Document 50 incredible meals",
        icon="👑", color="#3B82F6", threshold=50,
    ),

    # Photos on meals and recipes
    AchievementDescriptor(
        type=AchievementType.PHOTO_COUNT, name="First Shot",
        description="Upload your first photo",
        icon="📸", color="#10B981", threshold=1,
    ),
    AchievementDescriptor(
        type=AchievementType.PHOTO_COUNT, name="Photographer",
        description="Share 10 beautiful food photos",
        icon="📷", color="#10B981", threshold=10,
    ),
    AchievementDescriptor(
        type=AchievementType.PHOTO_COUNT, name="Visual Storyteller",
        description="Capture 50 stunning food moments",
        icon="🎨", color="#10B981", threshold=50,
    ),
]

# Awarded by hand through the admin special-achievement endpoint
SPECIAL_ACHIEVEMENT = AchievementDescriptor(
    type=AchievementType.SPECIAL, name="Best Girlfriend",
    description="Awarded to the most amazing girlfriend ever! 💕",
    icon="👑", color="#FF69B4", threshold=None,
)
