"""
Subscription endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client
import logging

from app.core.database import get_supabase_admin_client
from app.core.security import get_current_user
from app.domain.exceptions import UserNotFoundError
from app.services.subscription_service import SubscriptionService
from app.services.user_service import UserService
from app.api.v1.schemas.subscription import SubscribeRequest, SubscriptionStatusResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


@router.post("", response_model=SubscriptionStatusResponse)
async def subscribe(
    request: SubscribeRequest,
    current_user: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_admin_client)
):
    """
    Subscribe the caller to Chef Roulette Pro.

    Checkout is simulated, no payment is taken. Pro is active for 30 days
    from now.
    """
    try:
        await UserService(supabase).get_or_create_profile(current_user)
        subscription = await SubscriptionService(supabase).subscribe(
            current_user["id"], request.plan_type, request.duration
        )
        return SubscriptionStatusResponse(**subscription)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except Exception as e:
        logger.error(f"Error creating subscription: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create subscription"
        )
