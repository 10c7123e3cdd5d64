"""
User recipe action repository for database operations
"""
from supabase import Client

from app.repositories.base import BaseRepository


class UserRecipeActionRepository(BaseRepository):
    """Repository for cooked/liked/shared/bookmarked events"""

    def __init__(self, supabase: Client):
        super().__init__(supabase, "user_recipe_actions")
