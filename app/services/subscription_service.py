"""
Subscription service for Chef Roulette Pro.

Checkout is simulated: subscribing flips the Pro flag on the user profile
and sets an expiry PRO_SUBSCRIPTION_DAYS in the future. No payment
provider is involved.
"""
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Dict, Any
from supabase import Client
import logging

from app.core.config import get_settings
from app.domain.enums import BillingDuration, PlanType
from app.domain.exceptions import UserNotFoundError
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Service for managing user subscriptions"""

    def __init__(
        self,
        supabase: Client,
        subscription_days: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.user_repo = UserRepository(supabase)
        self.subscription_days = (
            subscription_days if subscription_days is not None else get_settings().PRO_SUBSCRIPTION_DAYS
        )
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def subscribe(
        self,
        user_id: str,
        plan_type: PlanType = PlanType.PRO,
        duration: BillingDuration = BillingDuration.MONTHLY
    ) -> Dict[str, Any]:
        """
        Activate Pro for a user.

        Raises:
            UserNotFoundError: No profile for the user
        """
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(user_id)

        now = self.clock()
        expires_at = now + timedelta(days=self.subscription_days)

        await self.user_repo.update(user_id, {
            "is_pro": plan_type == PlanType.PRO,
            "pro_expires_at": expires_at.isoformat(),
            "updated_at": now.isoformat(),
        })

        logger.info(f"User {user_id} subscribed to {plan_type.value} ({duration.value}) until {expires_at.isoformat()}")

        return await self.get_status(user_id)

    async def is_premium(self, user_id: str) -> bool:
        """Check if user has an unexpired Pro subscription"""
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            return False
        return self._is_active(user)

    def _is_active(self, user: Dict[str, Any]) -> bool:
        if not user.get("is_pro"):
            return False

        expires_at = user.get("pro_expires_at")
        if not expires_at:
            return False

        expires = datetime.fromisoformat(str(expires_at).replace("Z", "+00:00"))
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        return expires > self.clock()

    async def get_status(self, user_id: str) -> Dict[str, Any]:
        """
        Subscription status for a user.

        Raises:
            UserNotFoundError: No profile for the user
        """
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(user_id)

        is_pro = self._is_active(user)
        return {
            "is_pro": is_pro,
            "expires_at": user.get("pro_expires_at"),
            "plan_type": PlanType.PRO.value if is_pro else PlanType.FREE.value,
        }
