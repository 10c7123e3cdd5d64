"""
User profile repository for database operations
"""
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from supabase import Client
import logging

from app.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

# Stats every new profile starts with
ZEROED_STATS = {
    "points": 0,
    "streak": 0,
    "recipes_cooked": 0,
    "weekly_points": 0,
    "is_pro": False,
}


class UserRepository(BaseRepository):
    """Repository for the users table (profiles keyed by auth user ID)"""

    def __init__(self, supabase: Client):
        super().__init__(supabase, "users")

    async def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        try:
            response = self.supabase.table(self.table_name)\
                .select("*")\
                .eq("email", email)\
                .limit(1)\
                .execute()
            return response.data[0] if response.data else None
        except Exception as e:
            logger.error(f"Error fetching user by email: {str(e)}")
            raise

    async def get_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        try:
            response = self.supabase.table(self.table_name)\
                .select("*")\
                .eq("username", username)\
                .limit(1)\
                .execute()
            return response.data[0] if response.data else None
        except Exception as e:
            logger.error(f"Error fetching user by username: {str(e)}")
            raise

    async def ensure_profile(
        self,
        user_id: str,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        profile_image_url: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Get the profile for an auth user, creating it on first access.

        A row that already exists under the same email (e.g. created by an
        earlier login provider) is taken over by the new auth ID instead of
        creating a duplicate.
        """
        existing = await self.get_by_id(user_id)
        if existing:
            return existing

        now = datetime.now(timezone.utc).isoformat()

        if email:
            by_email = await self.get_by_email(email)
            if by_email:
                logger.info(f"Merging profile {by_email['id']} into auth user {user_id} by email")
                merged = await self.update(by_email["id"], {
                    "id": user_id,
                    "first_name": first_name or by_email.get("first_name"),
                    "last_name": last_name or by_email.get("last_name"),
                    "profile_image_url": profile_image_url or by_email.get("profile_image_url"),
                    "updated_at": now,
                })
                return merged or {**by_email, "id": user_id}

        profile = {
            "id": user_id,
            "email": email,
            "first_name": first_name,
            "last_name": last_name,
            "profile_image_url": profile_image_url,
            "created_at": now,
            "updated_at": now,
            **ZEROED_STATS,
        }
        created = await self.create(profile)
        logger.info(f"Created profile for user {user_id}")
        return created or profile

    async def add_points(
        self,
        user_id: str,
        points: int,
        recipes_cooked: int = 0
    ) -> Optional[Dict[str, Any]]:
        """
        Atomically add to points, weekly points and the cooked counter.

        Returns:
            Updated user row, or None when the user does not exist
        """
        try:
            response = self.supabase.rpc(
                "increment_user_points",
                {
                    "p_user_id": user_id,
                    "p_points": points,
                    "p_recipes_cooked": recipes_cooked
                }
            ).execute()
            return response.data[0] if response.data else None
        except Exception as e:
            logger.error(f"Error adding points for user {user_id}: {str(e)}")
            raise

    async def get_leaderboard(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Users ordered by weekly points, highest first"""
        try:
            response = self.supabase.table(self.table_name)\
                .select("id, username, first_name, last_name, profile_image_url, points, weekly_points, streak")\
                .order("weekly_points", desc=True)\
                .limit(limit)\
                .execute()
            return response.data or []
        except Exception as e:
            logger.error(f"Error fetching leaderboard: {str(e)}")
            raise

    async def reset_weekly_points(self) -> int:
        """Zero weekly points for every user that has any. Returns rows touched."""
        try:
            response = self.supabase.table(self.table_name)\
                .update({"weekly_points": 0})\
                .gt("weekly_points", 0)\
                .execute()
            return len(response.data or [])
        except Exception as e:
            logger.error(f"Error resetting weekly points: {str(e)}")
            raise
