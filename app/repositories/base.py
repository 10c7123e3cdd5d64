"""
Base repository with common database operations
"""
from typing import Optional, List, Dict, Any, Iterable
from uuid import UUID
from supabase import Client
import logging

logger = logging.getLogger(__name__)


def is_uuid(value: Any) -> bool:
    try:
        UUID(str(value))
    except ValueError:
        return False
    return True


class BaseRepository:
    """Base repository class with common CRUD operations"""

    # Tables keyed by UUID reject malformed IDs in Postgres; treat them as missing rows
    uuid_ids = False

    def __init__(self, supabase: Client, table_name: str):
        self.supabase = supabase
        self.table_name = table_name

    async def create(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Create a new record"""
        try:
            response = self.supabase.table(self.table_name).insert(data).execute()
            return response.data[0] if response.data else None
        except Exception as e:
            logger.error(f"Error creating record in {self.table_name}: {str(e)}")
            raise

    async def get_by_id(self, record_id: Any) -> Optional[Dict[str, Any]]:
        """Get a record by ID"""
        if self.uuid_ids and not is_uuid(record_id):
            return None
        try:
            response = self.supabase.table(self.table_name).select("*").eq("id", record_id).execute()
            return response.data[0] if response.data else None
        except Exception as e:
            logger.error(f"Error fetching record from {self.table_name}: {str(e)}")
            raise

    async def get_by_ids(self, record_ids: Iterable[Any]) -> List[Dict[str, Any]]:
        """Get several records at once, order not guaranteed"""
        ids = list(record_ids)
        if self.uuid_ids:
            ids = [record_id for record_id in ids if is_uuid(record_id)]
        if not ids:
            return []
        try:
            response = self.supabase.table(self.table_name).select("*").in_("id", ids).execute()
            return response.data or []
        except Exception as e:
            logger.error(f"Error fetching records from {self.table_name}: {str(e)}")
            raise

    async def update(self, record_id: Any, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Update a record by ID"""
        try:
            logger.debug(f"Updating {self.table_name} id={record_id} with keys: {list(data.keys())}")
            response = self.supabase.table(self.table_name).update(data).eq("id", record_id).execute()
            return response.data[0] if response.data else None
        except Exception as e:
            logger.error(f"Error updating record in {self.table_name}: {str(e)}")
            raise

    async def delete(self, record_id: Any) -> bool:
        """Delete a record by ID"""
        try:
            response = self.supabase.table(self.table_name).delete().eq("id", record_id).execute()
            return len(response.data or []) > 0
        except Exception as e:
            logger.error(f"Error deleting record from {self.table_name}: {str(e)}")
            raise
