"""
Repository layer for database operations
Repositories handle all database interactions using Supabase
"""

from app.repositories.base import BaseRepository
from app.repositories.user_repository import UserRepository
from app.repositories.social_media_content_repository import SocialMediaContentRepository
from app.repositories.extracted_recipe_repository import ExtractedRecipeRepository
from app.repositories.challenge_repository import ChallengeRepository, UserChallengeRepository
from app.repositories.user_recipe_action_repository import UserRecipeActionRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "SocialMediaContentRepository",
    "ExtractedRecipeRepository",
    "ChallengeRepository",
    "UserChallengeRepository",
    "UserRecipeActionRepository",
]
