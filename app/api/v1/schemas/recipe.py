"""
Recipe API schemas
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from app.api.v1.schemas.common import CamelModel
from app.domain.enums import DifficultyLevel


# ============= Request Schemas =============

class RecipeCreateRequest(BaseModel):
    """Manually entered recipe"""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)
    total_time: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=1)
    difficulty: Optional[DifficultyLevel] = None
    cuisine: Optional[str] = None
    meal_type: Optional[str] = None
    dietary_tags: List[str] = Field(default_factory=list)
    source_url: Optional[str] = None
    author: Optional[str] = None


class RecipeUpdateRequest(BaseModel):
    """Partial recipe update"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    ingredients: Optional[List[str]] = None
    instructions: Optional[List[str]] = None
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)
    total_time: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=1)
    difficulty: Optional[DifficultyLevel] = None
    cuisine: Optional[str] = None
    meal_type: Optional[str] = None
    dietary_tags: Optional[List[str]] = None


# ============= Response Schemas =============

class RecipeResponse(CamelModel):
    """Recipe as rendered by the web client"""
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    prep_time: int = 0
    cook_time: int = 0
    total_time: int = 0
    servings: int = 1
    difficulty: str = "medium"
    cuisine: str = "International"
    category: str = "Main Course"
    dietary_tags: List[str] = Field(default_factory=list)
    platform: str = "unknown"
    original_url: Optional[str] = None
    username: str = "Unknown Chef"
    confidence: Optional[float] = None
    created_at: Optional[str] = None
    image_url: Optional[str] = None
    rating: int = 0


class SocialMediaInfo(CamelModel):
    """Metadata of the post a recipe was extracted from"""
    platform: Optional[str] = None
    author: Optional[str] = None
    author_username: Optional[str] = None
    duration: Optional[int] = None
    views: Optional[int] = None
    likes: Optional[int] = None
    original_url: Optional[str] = None


class RecipeDetailResponse(RecipeResponse):
    social_media: SocialMediaInfo


class RouletteRecipeResponse(CamelModel):
    """Compact recipe returned by a roulette spin"""
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    difficulty: str
    cuisine: str
    prep_time: int
    cook_time: int
    platform: str
    username: str
    image_url: Optional[str] = None


class PlatformsResponse(CamelModel):
    """Supported capture platforms with extraction hints"""
    platforms: List[str]
    hints: dict
