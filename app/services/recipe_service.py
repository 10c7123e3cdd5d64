"""
Recipe library service.

Recipes are owned through their social_media_content row. Every read joins
the two tables in Python and returns the camelCase view the web client
renders.
"""
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from supabase import Client
import logging

from app.domain.enums import ContentStatus, Platform, RecipeStatus
from app.domain.exceptions import RecipeAccessDeniedError, RecipeNotFoundError
from app.domain.models import RecipeFilters
from app.repositories.extracted_recipe_repository import ExtractedRecipeRepository
from app.repositories.social_media_content_repository import SocialMediaContentRepository
from app.services import platform_service

logger = logging.getLogger(__name__)

# Update payload keys mapped to extracted_recipes columns
UPDATE_FIELD_MAP = {
    "title": "recipe_title",
    "description": "description",
    "ingredients": "ingredients",
    "instructions": "instructions",
    "prep_time": "prep_time",
    "cook_time": "cook_time",
    "total_time": "total_time",
    "servings": "servings",
    "difficulty": "difficulty_level",
    "cuisine": "cuisine_type",
    "meal_type": "meal_type",
    "dietary_tags": "dietary_tags",
}


def to_recipe_view(recipe: Dict[str, Any], content: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Shape a recipe row and its content row for the client"""
    content = content or {}
    prep_time = recipe.get("prep_time") or 0
    cook_time = recipe.get("cook_time") or 0
    platform = content.get("platform") or Platform.UNKNOWN.value
    confidence = recipe.get("ai_confidence_score")

    return {
        "id": recipe["id"],
        "title": recipe.get("recipe_title"),
        "description": recipe.get("description"),
        "ingredients": recipe.get("ingredients") or [],
        "instructions": recipe.get("instructions") or [],
        "prepTime": prep_time,
        "cookTime": cook_time,
        "totalTime": recipe.get("total_time") or prep_time + cook_time,
        "servings": recipe.get("servings") or 1,
        "difficulty": recipe.get("difficulty_level") or "medium",
        "cuisine": recipe.get("cuisine_type") or "International",
        "category": recipe.get("meal_type") or "Main Course",
        "dietaryTags": recipe.get("dietary_tags") or [],
        "platform": platform,
        "originalUrl": content.get("original_url"),
        "username": (
            content.get("author_username")
            or content.get("author")
            or content.get("title")
            or "Unknown Chef"
        ),
        "confidence": float(confidence) if confidence is not None else None,
        "createdAt": recipe.get("created_at"),
        "imageUrl": platform_service.get_default_image(platform),
        "rating": 0,
    }


def dedupe_by_title(views: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Drop recipes whose title was already seen, keeping the first occurrence"""
    seen = set()
    unique = []
    for view in views:
        title = view.get("title")
        if title in seen:
            continue
        seen.add(title)
        unique.append(view)
    return unique


class RecipeService:
    """Service for the user's recipe library"""

    def __init__(self, supabase: Client):
        self.recipe_repo = ExtractedRecipeRepository(supabase)
        self.content_repo = SocialMediaContentRepository(supabase)

    async def _user_content_by_id(self, user_id: str) -> Dict[str, Dict[str, Any]]:
        content_rows = await self.content_repo.get_user_content(user_id)
        return {row["id"]: row for row in content_rows}

    async def _views_for_user(
        self,
        user_id: str,
        filters: Optional[RecipeFilters] = None,
        status: Optional[RecipeStatus] = RecipeStatus.PUBLISHED,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        content_by_id = await self._user_content_by_id(user_id)
        recipes = await self.recipe_repo.list_for_content(
            list(content_by_id.keys()),
            filters=filters,
            status=status,
            limit=limit
        )
        return [
            to_recipe_view(recipe, content_by_id.get(recipe.get("social_media_content_id")))
            for recipe in recipes
        ]

    async def _get_owned(self, user_id: str, recipe_id: str):
        """Fetch a recipe and its content row, enforcing ownership"""
        recipe = await self.recipe_repo.get_by_id(recipe_id)
        if not recipe:
            raise RecipeNotFoundError(recipe_id)

        content = None
        if recipe.get("social_media_content_id"):
            content = await self.content_repo.get_by_id(recipe["social_media_content_id"])

        if not content or content.get("user_id") != user_id:
            raise RecipeAccessDeniedError(recipe_id)

        return recipe, content

    async def list_user_recipes(
        self,
        user_id: str,
        filters: Optional[RecipeFilters] = None
    ) -> List[Dict[str, Any]]:
        """
        Published recipes captured by a user, newest first, one per title

        Args:
            user_id: Owner of the captured content
            filters: Optional cuisine/difficulty/meal type/time/dietary filters

        Returns:
            List of recipe views
        """
        views = await self._views_for_user(user_id, filters=filters)
        unique = dedupe_by_title(views)
        logger.info(f"Found {len(views)} recipes for user {user_id}, {len(unique)} unique")
        return unique

    async def get_recent_recipes(self, user_id: str, limit: int = 5) -> List[Dict[str, Any]]:
        return await self._views_for_user(user_id, limit=limit)

    async def get_latest_recipe(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Most recently created recipe of a user, whatever its status"""
        views = await self._views_for_user(user_id, status=None, limit=1)
        return views[0] if views else None

    async def get_recipe_by_id(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        """Joined recipe view, or None when the recipe does not exist"""
        recipe = await self.recipe_repo.get_by_id(recipe_id)
        if not recipe:
            return None

        content = None
        if recipe.get("social_media_content_id"):
            content = await self.content_repo.get_by_id(recipe["social_media_content_id"])
        return to_recipe_view(recipe, content)

    async def get_recipe_details(self, user_id: str, recipe_id: str) -> Dict[str, Any]:
        """
        Full view of an owned recipe with its social media metadata

        Raises:
            RecipeNotFoundError: Recipe does not exist
            RecipeAccessDeniedError: Recipe belongs to another user
        """
        recipe, content = await self._get_owned(user_id, recipe_id)

        view = to_recipe_view(recipe, content)
        view["socialMedia"] = {
            "platform": content.get("platform"),
            "author": content.get("author"),
            "authorUsername": content.get("author_username"),
            "duration": content.get("duration"),
            "views": content.get("views"),
            "likes": content.get("likes"),
            "originalUrl": content.get("original_url"),
        }
        return view

    async def update_recipe(self, user_id: str, recipe_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """Apply a partial update to an owned recipe"""
        recipe, content = await self._get_owned(user_id, recipe_id)

        data = {
            column: updates[key]
            for key, column in UPDATE_FIELD_MAP.items()
            if key in updates and updates[key] is not None
        }
        if not data:
            return to_recipe_view(recipe, content)

        updated = await self.recipe_repo.update(recipe_id, data)
        logger.info(f"Updated recipe {recipe_id} fields: {list(data.keys())}")
        return to_recipe_view(updated or {**recipe, **data}, content)

    async def create_manual_recipe(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Store a recipe typed in by the user, with its own content row"""
        source_url = data.get("source_url")
        platform = Platform.MANUAL.value
        if source_url:
            detected = platform_service.get_platform(source_url)
            if detected != Platform.UNKNOWN.value:
                platform = detected

        now = datetime.now(timezone.utc).isoformat()
        content = await self.content_repo.create({
            "user_id": user_id,
            "original_url": source_url or "",
            "platform": platform,
            "content_type": "manual",
            "title": data.get("title"),
            "author": data.get("author"),
            "status": ContentStatus.COMPLETED.value,
            "processed_at": now,
        })
        if not content:
            raise RuntimeError("Failed to create content record for manual recipe")

        recipe = await self.recipe_repo.create({
            "social_media_content_id": content["id"],
            "recipe_title": data.get("title"),
            "description": data.get("description"),
            "ingredients": data.get("ingredients") or [],
            "instructions": data.get("instructions") or [],
            "prep_time": data.get("prep_time") or 0,
            "cook_time": data.get("cook_time") or 0,
            "total_time": data.get("total_time"),
            "servings": data.get("servings") or 1,
            "difficulty_level": data.get("difficulty") or "medium",
            "cuisine_type": data.get("cuisine"),
            "meal_type": data.get("meal_type"),
            "dietary_tags": data.get("dietary_tags") or [],
            "chef_attribution": data.get("author"),
            "ai_confidence_score": 1.0,
            "status": RecipeStatus.PUBLISHED.value,
        })
        if not recipe:
            raise RuntimeError("Failed to create manual recipe")

        logger.info(f"User {user_id} created manual recipe {recipe['id']}")
        return to_recipe_view(recipe, content)

    async def delete_recipe(self, user_id: str, recipe_id: str) -> bool:
        await self._get_owned(user_id, recipe_id)
        deleted = await self.recipe_repo.delete(recipe_id)
        logger.info(f"User {user_id} deleted recipe {recipe_id}")
        return deleted
