"""
Extracted recipe repository for database operations
"""
from typing import Optional, List, Dict, Any
from supabase import Client
import logging

from app.repositories.base import BaseRepository
from app.domain.enums import RecipeStatus
from app.domain.models import RecipeFilters

logger = logging.getLogger(__name__)


class ExtractedRecipeRepository(BaseRepository):
    """
    Repository for recipes extracted from social media content.

    Recipes carry no owner column, ownership goes through the linked
    social_media_content row. Callers resolve the user's content IDs first.
    """

    uuid_ids = True

    def __init__(self, supabase: Client):
        super().__init__(supabase, "extracted_recipes")

    async def get_by_content_id(self, content_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = self.supabase.table(self.table_name)\
                .select("*")\
                .eq("social_media_content_id", content_id)\
                .order("created_at", desc=True)\
                .limit(1)\
                .execute()
            return response.data[0] if response.data else None
        except Exception as e:
            logger.error(f"Error fetching recipe for content {content_id}: {str(e)}")
            raise

    async def list_for_content(
        self,
        content_ids: List[str],
        filters: Optional[RecipeFilters] = None,
        status: Optional[RecipeStatus] = RecipeStatus.PUBLISHED,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Recipes linked to any of the given content rows, newest first

        Args:
            content_ids: social_media_content IDs to scope the query to
            filters: Optional roulette/library filters
            status: Recipe status to keep, None for all
            limit: Optional cap on rows
        """
        if not content_ids:
            return []

        try:
            query = self.supabase.table(self.table_name)\
                .select("*")\
                .in_("social_media_content_id", content_ids)

            if status:
                query = query.eq("status", status.value)

            if filters:
                if filters.cuisine_type:
                    query = query.eq("cuisine_type", filters.cuisine_type)
                if filters.difficulty_level:
                    query = query.eq("difficulty_level", filters.difficulty_level.value)
                if filters.meal_type:
                    query = query.eq("meal_type", filters.meal_type.value)
                if filters.max_prep_time is not None:
                    query = query.lte("prep_time", filters.max_prep_time)
                if filters.max_cook_time is not None:
                    query = query.lte("cook_time", filters.max_cook_time)
                if filters.dietary_tags:
                    query = query.overlaps("dietary_tags", filters.dietary_tags)

            query = query.order("created_at", desc=True)
            if limit:
                query = query.limit(limit)

            response = query.execute()
            return response.data or []
        except Exception as e:
            logger.error(f"Error listing extracted recipes: {str(e)}")
            raise
