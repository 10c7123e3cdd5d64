"""
Subscription API schemas
"""
from pydantic import BaseModel, Field
from typing import Optional

from app.api.v1.schemas.common import CamelModel
from app.domain.enums import BillingDuration, PlanType


class SubscribeRequest(BaseModel):
    """Simulated checkout"""
    plan_type: PlanType = Field(PlanType.PRO, alias="planType")
    duration: BillingDuration = BillingDuration.MONTHLY

    model_config = {"populate_by_name": True}


class SubscriptionStatusResponse(CamelModel):
    is_pro: bool
    expires_at: Optional[str] = None
    plan_type: PlanType
