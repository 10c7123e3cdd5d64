"""
User profile service
"""
from datetime import datetime, timezone
from typing import Optional, Dict, Any
from supabase import Client
import logging

from app.domain.exceptions import UserNotFoundError, UsernameTakenError
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("first_name", "last_name", "username", "profile_image_url")

PUBLIC_FIELDS = (
    "id",
    "username",
    "first_name",
    "last_name",
    "profile_image_url",
    "points",
    "streak",
    "recipes_cooked",
    "weekly_points",
    "created_at",
)


class UserService:
    """Service for user profiles"""

    def __init__(self, supabase: Client):
        self.user_repo = UserRepository(supabase)

    async def get_or_create_profile(self, current_user: Dict[str, Any]) -> Dict[str, Any]:
        """Profile of the authenticated user, created with zeroed stats on first access"""
        metadata = current_user.get("user_metadata") or {}
        full_name = metadata.get("full_name") or metadata.get("name") or ""
        first_name, _, last_name = full_name.partition(" ")

        return await self.user_repo.ensure_profile(
            current_user["id"],
            email=current_user.get("email"),
            first_name=metadata.get("first_name") or first_name or None,
            last_name=metadata.get("last_name") or last_name or None,
            profile_image_url=metadata.get("avatar_url") or metadata.get("picture"),
        )

    async def update_profile(self, user_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update editable profile fields. Blank strings clear a field.

        Raises:
            UserNotFoundError: No profile for the user
            UsernameTakenError: Username belongs to another user
        """
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(user_id)

        data: Dict[str, Any] = {}
        for key in EDITABLE_FIELDS:
            if key not in updates:
                continue
            value = updates[key]
            if isinstance(value, str):
                value = value.strip() or None
            data[key] = value

        username = data.get("username")
        if username:
            owner = await self.user_repo.get_by_username(username)
            if owner and owner["id"] != user_id:
                raise UsernameTakenError(username)

        if not data:
            return user

        data["updated_at"] = datetime.now(timezone.utc).isoformat()
        updated = await self.user_repo.update(user_id, data)
        logger.info(f"Updated profile for user {user_id}: {list(data.keys())}")
        return updated or {**user, **data}

    async def get_public_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            return None
        return {key: user.get(key) for key in PUBLIC_FIELDS}
