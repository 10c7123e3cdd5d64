"""
Gamification API schemas
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from app.api.v1.schemas.common import CamelModel
from app.domain.enums import UserAction


class UserActionRequest(BaseModel):
    """Record an action on a recipe. The user always comes from the token."""
    recipe_id: str = Field(..., alias="recipeId")
    action: UserAction

    model_config = {"populate_by_name": True}


class UserActionResponse(CamelModel):
    id: Optional[int] = None
    user_id: str
    recipe_id: str
    action: UserAction
    created_at: Optional[str] = None
    points_awarded: int = 0
    completed_challenges: List[int] = Field(default_factory=list)


class ChallengeResponse(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    type: str
    target: int
    reward: int
    is_active: bool = True


class UserChallengeResponse(CamelModel):
    id: Optional[int] = None
    user_id: str
    challenge_id: int
    progress: int = 0
    completed: bool = False
    completed_at: Optional[str] = None
    challenge: Optional[ChallengeResponse] = None


class LeaderboardEntry(CamelModel):
    rank: int
    id: str
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    points: int = 0
    weekly_points: int = 0
    streak: int = 0
