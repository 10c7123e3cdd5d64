"""
Recipe capture API schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional

from app.api.v1.schemas.common import CamelModel


class CaptureRequest(BaseModel):
    """Submit a social media video URL for extraction"""
    url: str = Field(..., min_length=1, description="Video URL (TikTok, Instagram, YouTube, ...)")
    recipe_name: Optional[str] = Field(None, alias="recipeName", max_length=200)

    model_config = {"populate_by_name": True}

    @field_validator("url")
    @classmethod
    def strip_url(cls, v: str) -> str:
        return v.strip()


class CaptureStatusResponse(CamelModel):
    """Processing status of a submitted URL"""
    content_id: str
    status: Optional[str] = None
    processed_at: Optional[str] = None
    platform: Optional[str] = None
    recipe_id: Optional[str] = None
