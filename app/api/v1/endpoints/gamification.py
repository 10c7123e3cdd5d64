"""
Gamification endpoints: user actions, challenges and the leaderboard
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from supabase import Client
from typing import List
import logging

from app.core.database import get_supabase_admin_client
from app.core.security import get_current_user
from app.domain.exceptions import ChallengeNotFoundError, RecipeNotFoundError, UserNotFoundError
from app.services.gamification_service import GamificationService
from app.services.user_service import UserService
from app.api.v1.schemas.gamification import (
    ChallengeResponse,
    LeaderboardEntry,
    UserActionRequest,
    UserActionResponse,
    UserChallengeResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Gamification"])


@router.post("/user-actions", response_model=UserActionResponse, status_code=status.HTTP_201_CREATED)
async def record_user_action(
    request: UserActionRequest,
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client)
):
    """
    Record that the caller cooked, liked, shared or bookmarked a recipe.

    Cooking awards points, extends the daily streak and advances joined
    challenges. Returns the stored action with the points awarded.
    """
    try:
        await UserService(supabase).get_or_create_profile(current_user)
        result = await GamificationService(supabase).record_action(
            current_user["id"], request.recipe_id, request.action
        )
        return UserActionResponse(
            **result["action"],
            points_awarded=result["points_awarded"],
            completed_challenges=result["completed_challenges"]
        )
    except RecipeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except Exception as e:
        logger.error(f"Error recording user action: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to record user action"
        )


@router.get("/challenges", response_model=List[ChallengeResponse])
async def list_challenges(
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client)
):
    """Active challenges"""
    try:
        challenges = await GamificationService(supabase).list_challenges()
        return [ChallengeResponse(**challenge) for challenge in challenges]
    except Exception as e:
        logger.error(f"Error fetching challenges: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch challenges"
        )


@router.post("/challenges/{challenge_id}/join", response_model=UserChallengeResponse)
async def join_challenge(
    challenge_id: int,
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client)
):
    """Join a challenge. Joining again returns the existing progress."""
    try:
        await UserService(supabase).get_or_create_profile(current_user)
        user_challenge = await GamificationService(supabase).join_challenge(current_user["id"], challenge_id)
        return UserChallengeResponse(**user_challenge)
    except ChallengeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except Exception as e:
        logger.error(f"Error joining challenge: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to join challenge"
        )


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    limit: int = Query(10, ge=1, le=100),
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client)
):
    """Users ranked by points earned this week"""
    try:
        entries = await GamificationService(supabase).get_leaderboard(limit)
        return [LeaderboardEntry(**entry) for entry in entries]
    except Exception as e:
        logger.error(f"Error fetching leaderboard: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch leaderboard"
        )
