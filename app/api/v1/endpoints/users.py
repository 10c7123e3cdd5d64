"""
User profile endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client
from typing import List
import logging

from app.core.database import get_supabase_admin_client
from app.core.security import get_current_user, ensure_same_user
from app.domain.exceptions import UserNotFoundError, UsernameTakenError
from app.services.gamification_service import GamificationService
from app.services.subscription_service import SubscriptionService
from app.services.user_service import UserService
from app.api.v1.schemas.gamification import UserChallengeResponse
from app.api.v1.schemas.subscription import SubscriptionStatusResponse
from app.api.v1.schemas.user import ProfileResponse, ProfileUpdateRequest, PublicProfileResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client)
):
    """Get the caller's profile, creating it on first access"""
    try:
        profile = await UserService(supabase).get_or_create_profile(current_user)
        return ProfileResponse(**profile)
    except Exception as e:
        logger.error(f"Error fetching profile: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch user"
        )


@router.patch("/me", response_model=ProfileResponse)
async def update_my_profile(
    updates: ProfileUpdateRequest,
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client)
):
    """
    Update the caller's profile.

    Only fields present in the request are changed. A username already used
    by someone else is rejected with 409.
    """
    service = UserService(supabase)
    try:
        await service.get_or_create_profile(current_user)
        profile = await service.update_profile(
            current_user["id"],
            updates.model_dump(exclude_unset=True)
        )
        return ProfileResponse(**profile)
    except UsernameTakenError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except Exception as e:
        logger.error(f"Error updating profile: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile"
        )


@router.get("/{user_id}", response_model=PublicProfileResponse)
async def get_user_profile(
    user_id: str,
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client)
):
    """Get a user's public profile stats"""
    try:
        profile = await UserService(supabase).get_public_profile(user_id)
    except Exception as e:
        logger.error(f"Error fetching user {user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch user"
        )

    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    return PublicProfileResponse(**profile)


@router.get("/{user_id}/challenges", response_model=List[UserChallengeResponse])
async def get_user_challenges(
    user_id: str,
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client)
):
    """Get the challenges a user joined and has not completed"""
    ensure_same_user(current_user, user_id)

    try:
        rows = await GamificationService(supabase).get_active_user_challenges(user_id)
        return [UserChallengeResponse(**row) for row in rows]
    except Exception as e:
        logger.error(f"Error fetching user challenges: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch user challenges"
        )


@router.get("/{user_id}/subscription", response_model=SubscriptionStatusResponse)
async def get_subscription_status(
    user_id: str,
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client)
):
    """Get a user's Pro subscription status"""
    ensure_same_user(current_user, user_id)

    try:
        await UserService(supabase).get_or_create_profile(current_user)
        subscription = await SubscriptionService(supabase).get_status(user_id)
        return SubscriptionStatusResponse(**subscription)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except Exception as e:
        logger.error(f"Error fetching subscription status: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch subscription status"
        )
