"""
Enumerations for domain models
"""
from enum import Enum


class Platform(str, Enum):
    """Social platforms a recipe video can come from"""
    TIKTOK = "tiktok"
    INSTAGRAM = "instagram"
    YOUTUBE = "youtube"
    PINTEREST = "pinterest"
    FACEBOOK = "facebook"
    TWITTER = "twitter"  # Also handles x.com
    MANUAL = "manual"  # Recipe typed in by the user
    UNKNOWN = "unknown"


class DifficultyLevel(str, Enum):
    """Recipe difficulty levels"""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class MealType(str, Enum):
    """Meal types used by the roulette filters"""
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    DESSERT = "dessert"


class ContentStatus(str, Enum):
    """Processing status of a submitted social media post"""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class RecipeStatus(str, Enum):
    """Publication status of an extracted recipe"""
    DRAFT = "draft"
    PUBLISHED = "published"


class UserAction(str, Enum):
    """Actions a user can record against a recipe"""
    COOKED = "cooked"
    LIKED = "liked"
    SHARED = "shared"
    BOOKMARKED = "bookmarked"


class ChallengeType(str, Enum):
    """Challenge cadence"""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    SEASONAL = "seasonal"


class PlanType(str, Enum):
    """Subscription plans"""
    FREE = "free"
    PRO = "pro"


class BillingDuration(str, Enum):
    """Subscription billing periods"""
    MONTHLY = "monthly"
