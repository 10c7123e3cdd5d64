"""
Shared pytest fixtures.

The API and services run against FakeSupabase, an in-memory stand-in for
the subset of the Supabase query builder the repositories use.
"""
import os

# Settings are read when the app module is imported
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_PUBLISHABLE_KEY", "test-publishable-key")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import copy
import itertools
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.core.app import create_app
from app.core.database import get_supabase_admin_client, get_supabase_client
from app.core.security import get_current_user

TEST_USER = {
    "id": "user-1",
    "email": "cook@example.com",
    "user_metadata": {"full_name": "Julia Child"},
}

OTHER_USER_ID = "user-2"

# Tables whose primary key is a generated UUID; the rest get serial integers
UUID_TABLES = {"social_media_content", "extracted_recipes"}


class FakeResponse:
    def __init__(self, data: List[Dict[str, Any]], count: Optional[int] = None):
        self.data = data
        self.count = count


class FakeQuery:
    """Chainable query mirroring the postgrest builder calls used by the repositories"""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.operation = "select"
        self.payload: Any = None
        self.filters = []
        self.ordering = []
        self._limit: Optional[int] = None
        self._offset = 0
        self._count = None

    # Operations

    def select(self, columns: str = "*", count: Optional[str] = None):
        self.operation = "select"
        self._count = count
        return self

    def insert(self, data):
        self.operation = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.operation = "update"
        self.payload = data
        return self

    def delete(self):
        self.operation = "delete"
        return self

    # Filters

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def gt(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) > value)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) >= value)
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) <= value)
        return self

    def in_(self, column, values):
        allowed = list(values)
        self.filters.append(lambda row: row.get(column) in allowed)
        return self

    def overlaps(self, column, values):
        wanted = set(values)
        self.filters.append(lambda row: bool(wanted & set(row.get(column) or [])))
        return self

    # Modifiers

    def order(self, column, desc: bool = False):
        self.ordering.append((column, desc))
        return self

    def limit(self, size: int):
        self._limit = size
        return self

    def offset(self, start: int):
        self._offset = start
        return self

    def _matching(self) -> List[Dict[str, Any]]:
        rows = self.db.tables.setdefault(self.table, [])
        return [row for row in rows if all(f(row) for f in self.filters)]

    def execute(self) -> FakeResponse:
        if self.operation == "insert":
            records = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = [self.db.insert_row(self.table, record) for record in records]
            return FakeResponse(copy.deepcopy(inserted))

        if self.operation == "update":
            matched = self._matching()
            for row in matched:
                row.update(copy.deepcopy(self.payload))
            return FakeResponse(copy.deepcopy(matched))

        if self.operation == "delete":
            matched = self._matching()
            rows = self.db.tables.setdefault(self.table, [])
            self.db.tables[self.table] = [row for row in rows if row not in matched]
            return FakeResponse(copy.deepcopy(matched))

        rows = self._matching()
        for column, desc in reversed(self.ordering):
            rows = sorted(rows, key=lambda row: (row.get(column) is None, row.get(column)), reverse=desc)
        total = len(rows)
        rows = rows[self._offset:]
        if self._limit is not None:
            rows = rows[:self._limit]
        return FakeResponse(copy.deepcopy(rows), total if self._count else None)


class FakeAuth:
    def __init__(self):
        self.tokens: Dict[str, Dict[str, Any]] = {}

    def get_user(self, token: str):
        user = self.tokens.get(token)
        if not user:
            raise Exception("invalid JWT")
        return SimpleNamespace(user=SimpleNamespace(**user))


class FakeSupabase:
    """In-memory Supabase client"""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.auth = FakeAuth()
        self._serial = itertools.count(1)
        self._last_created: Optional[datetime] = None
        self.rpc_calls: List[tuple] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, fn: str, params: Dict[str, Any]):
        self.rpc_calls.append((fn, dict(params)))
        handler = getattr(self, f"_rpc_{fn}")
        return SimpleNamespace(execute=lambda: FakeResponse(handler(**params)))

    def _rpc_increment_user_points(self, p_user_id, p_points, p_recipes_cooked=0):
        rows = [row for row in self.tables.get("users", []) if row["id"] == p_user_id]
        for row in rows:
            row["points"] = (row.get("points") or 0) + p_points
            row["weekly_points"] = (row.get("weekly_points") or 0) + p_points
            row["recipes_cooked"] = (row.get("recipes_cooked") or 0) + p_recipes_cooked
        return copy.deepcopy(rows)

    def _next_timestamp(self) -> str:
        now = datetime.now(timezone.utc)
        if self._last_created and now <= self._last_created:
            now = self._last_created + timedelta(microseconds=1)
        self._last_created = now
        return now.isoformat()

    def insert_row(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        row = copy.deepcopy(record)
        if "id" not in row:
            row["id"] = str(uuid.uuid4()) if table in UUID_TABLES else next(self._serial)
        row.setdefault("created_at", self._next_timestamp())
        self.tables.setdefault(table, []).append(row)
        return row

    def seed(self, table: str, **record) -> Dict[str, Any]:
        return copy.deepcopy(self.insert_row(table, record))


# ============= Seeding helpers =============

def add_user(db: FakeSupabase, user_id: str = TEST_USER["id"], **fields) -> Dict[str, Any]:
    row = {
        "id": user_id,
        "email": f"{user_id}@example.com",
        "username": None,
        "points": 0,
        "streak": 0,
        "recipes_cooked": 0,
        "weekly_points": 0,
        "is_pro": False,
        "last_cooked_at": None,
        "pro_expires_at": None,
    }
    row.update(fields)
    return db.seed("users", **row)


def add_recipe(
    db: FakeSupabase,
    user_id: str = TEST_USER["id"],
    title: str = "Garlic Butter Pasta",
    platform: str = "tiktok",
    content: Optional[Dict[str, Any]] = None,
    **fields
) -> Dict[str, Any]:
    """Seed a content row and a published recipe linked to it"""
    content_fields = {
        "user_id": user_id,
        "original_url": f"https://www.{platform}.com/@chef/video/1",
        "platform": platform,
        "content_type": "video",
        "status": "completed",
    }
    content_fields.update(content or {})
    content_row = db.seed("social_media_content", **content_fields)

    recipe = {
        "social_media_content_id": content_row["id"],
        "recipe_title": title,
        "description": f"{title} description",
        "ingredients": ["pasta", "butter"],
        "instructions": ["boil", "toss"],
        "prep_time": 10,
        "cook_time": 15,
        "total_time": 25,
        "servings": 2,
        "difficulty_level": "easy",
        "cuisine_type": "Italian",
        "meal_type": "dinner",
        "dietary_tags": ["vegetarian"],
        "ai_confidence_score": 0.9,
        "status": "published",
    }
    recipe.update(fields)
    return db.seed("extracted_recipes", **recipe)


# ============= Fixtures =============

@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def app(fake_supabase):
    application = create_app()
    application.dependency_overrides[get_supabase_admin_client] = lambda: fake_supabase
    application.dependency_overrides[get_supabase_client] = lambda: fake_supabase
    application.dependency_overrides[get_current_user] = lambda: TEST_USER
    return application


@pytest.fixture
def client(app) -> TestClient:
    # Not used as a context manager so the lifespan scheduler never starts
    return TestClient(app)
