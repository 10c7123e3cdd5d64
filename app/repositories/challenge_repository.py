"""
Challenge repositories for database operations
"""
from typing import Optional, List, Dict, Any
from supabase import Client
import logging

from app.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ChallengeRepository(BaseRepository):
    """Repository for challenge definitions"""

    def __init__(self, supabase: Client):
        super().__init__(supabase, "challenges")

    async def get_active(self) -> List[Dict[str, Any]]:
        try:
            response = self.supabase.table(self.table_name)\
                .select("*")\
                .eq("is_active", True)\
                .order("id")\
                .execute()
            return response.data or []
        except Exception as e:
            logger.error(f"Error fetching active challenges: {str(e)}")
            raise

    async def get_by_title(self, title: str) -> Optional[Dict[str, Any]]:
        try:
            response = self.supabase.table(self.table_name)\
                .select("*")\
                .eq("title", title)\
                .limit(1)\
                .execute()
            return response.data[0] if response.data else None
        except Exception as e:
            logger.error(f"Error fetching challenge by title: {str(e)}")
            raise


class UserChallengeRepository(BaseRepository):
    """Repository for a user's participation in challenges"""

    def __init__(self, supabase: Client):
        super().__init__(supabase, "user_challenges")

    async def get(self, user_id: str, challenge_id: int) -> Optional[Dict[str, Any]]:
        try:
            response = self.supabase.table(self.table_name)\
                .select("*")\
                .eq("user_id", user_id)\
                .eq("challenge_id", challenge_id)\
                .limit(1)\
                .execute()
            return response.data[0] if response.data else None
        except Exception as e:
            logger.error(f"Error fetching user challenge: {str(e)}")
            raise

    async def get_incomplete(self, user_id: str) -> List[Dict[str, Any]]:
        """Challenges the user joined and has not completed yet"""
        try:
            response = self.supabase.table(self.table_name)\
                .select("*")\
                .eq("user_id", user_id)\
                .eq("completed", False)\
                .order("id")\
                .execute()
            return response.data or []
        except Exception as e:
            logger.error(f"Error fetching incomplete user challenges: {str(e)}")
            raise
