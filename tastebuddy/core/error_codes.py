"""
Machine-readable error codes returned alongside error messages.
"""

# Generic
VALIDATION_ERROR = "VALIDATION_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"
NOT_AUTHORIZED = "NOT_AUTHORIZED"
UNAUTHORIZED_ERROR = "UNAUTHORIZED_ERROR"
ADMIN_PRIVILEGE_REQUIRED = "ADMIN_PRIVILEGE_REQUIRED"
FEATURE_DISABLED = "FEATURE_DISABLED"

# Auth
EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"
INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
ACCOUNT_DEACTIVATION = "ACCOUNT_DEACTIVATION"

# Users
USER_NOT_FOUND = "USER_NOT_FOUND"
PROFILE_UPDATE_FAILED = "PROFILE_UPDATE_FAILED"

# Follow
CANNOT_FOLLOW_SELF = "CANNOT_FOLLOW_SELF"

# Achievements
ACHIEVEMENT_AWARD_FAILED = "ACHIEVEMENT_AWARD_FAILED"
SPECIAL_USER_NOT_CONFIGURED = "SPECIAL_USER_NOT_CONFIGURED"

# Recipes
RECIPE_NOT_FOUND = "RECIPE_NOT_FOUND"
COMMENT_NOT_FOUND = "COMMENT_NOT_FOUND"

# Compliments
COMPLIMENT_NOT_FOUND = "COMPLIMENT_NOT_FOUND"
CANNOT_COMPLIMENT_SELF = "CANNOT_COMPLIMENT_SELF"
INVALID_TIP_AMOUNT = "INVALID_TIP_AMOUNT"
RECIPE_OWNER_MISMATCH = "RECIPE_OWNER_MISMATCH"
TIP_ALREADY_PROCESSED = "TIP_ALREADY_PROCESSED"

# Meals
MEAL_NOT_FOUND = "MEAL_NOT_FOUND"

# Notifications
NOTIFICATION_NOT_FOUND = "NOTIFICATION_NOT_FOUND"
EMPTY_PREFERENCES_UPDATE = "EMPTY_PREFERENCES_UPDATE"

# Recipe book
CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
CATEGORY_NAME_TAKEN = "CATEGORY_NAME_TAKEN"
CATEGORY_NOT_EMPTY = "CATEGORY_NOT_EMPTY"
ALREADY_IN_RECIPE_BOOK = "ALREADY_IN_RECIPE_BOOK"
NOT_IN_RECIPE_BOOK = "NOT_IN_RECIPE_BOOK"
