"""
Social media content repository for database operations
"""
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from supabase import Client
import logging

from app.repositories.base import BaseRepository
from app.domain.enums import ContentStatus

logger = logging.getLogger(__name__)


class SocialMediaContentRepository(BaseRepository):
    """Repository for submitted social media posts"""

    uuid_ids = True

    def __init__(self, supabase: Client):
        super().__init__(supabase, "social_media_content")

    async def get_user_content(self, user_id: str) -> List[Dict[str, Any]]:
        """All content rows submitted by a user, newest first"""
        try:
            response = self.supabase.table(self.table_name)\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .execute()
            return response.data or []
        except Exception as e:
            logger.error(f"Error fetching user content: {str(e)}")
            raise

    async def update_status(
        self,
        content_id: str,
        status: ContentStatus,
        processed_at: Optional[datetime] = None
    ) -> Optional[Dict[str, Any]]:
        data: Dict[str, Any] = {"status": status.value}
        if status in (ContentStatus.COMPLETED, ContentStatus.ERROR):
            data["processed_at"] = (processed_at or datetime.now(timezone.utc)).isoformat()
        return await self.update(content_id, data)
