"""
Recipe roulette: pick a random recipe from the user's filtered library
"""
import random
from typing import Optional, Dict, Any
from supabase import Client
import logging

from app.domain.models import RecipeFilters
from app.services.recipe_service import RecipeService

logger = logging.getLogger(__name__)

SPIN_FIELDS = (
    "id",
    "title",
    "description",
    "difficulty",
    "cuisine",
    "prepTime",
    "cookTime",
    "platform",
    "username",
    "imageUrl",
)


class RouletteService:
    """Service for the random recipe picker"""

    def __init__(self, supabase: Client, rng: Optional[random.Random] = None):
        self.recipe_service = RecipeService(supabase)
        self.rng = rng or random.Random()

    async def spin(self, user_id: str, filters: Optional[RecipeFilters] = None) -> Optional[Dict[str, Any]]:
        """
        Pick one recipe uniformly at random among the user's matching recipes.

        Returns:
            Compact recipe view, or None when nothing matches the filters
        """
        candidates = await self.recipe_service.list_user_recipes(user_id, filters)
        if not candidates:
            logger.info(f"No roulette candidates for user {user_id}")
            return None

        pick = self.rng.choice(candidates)
        logger.info(f"Roulette picked '{pick['title']}' out of {len(candidates)} recipes")
        return {field: pick.get(field) for field in SPIN_FIELDS}
