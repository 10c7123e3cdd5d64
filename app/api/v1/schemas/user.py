"""
User profile API schemas
"""
from pydantic import BaseModel, Field
from typing import Optional

from app.api.v1.schemas.common import CamelModel


class ProfileUpdateRequest(BaseModel):
    """Editable profile fields, blank strings clear the field"""
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    username: Optional[str] = Field(None, max_length=50)
    profile_image_url: Optional[str] = None


class PublicProfileResponse(CamelModel):
    """Profile stats visible to anyone"""
    id: str
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    points: int = 0
    streak: int = 0
    recipes_cooked: int = 0
    weekly_points: int = 0
    created_at: Optional[str] = None


class ProfileResponse(PublicProfileResponse):
    """The caller's own profile"""
    email: Optional[str] = None
    last_cooked_at: Optional[str] = None
    is_pro: bool = False
    pro_expires_at: Optional[str] = None
