from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class MembershipTier(str, Enum):
    BASIC = "basic"
    PREMIUM = "premium"
    ROYAL = "royal"


class PlanWrite(BaseModel):
    name: str = Field(min_length=1)
    tier: MembershipTier
    price_monthly: Decimal = Field(gt=0)
    description: str = ""
    features: list[Any] = []
    active: bool = True


class PlanResponse(BaseModel):
    id: str
    name: str
    tier: str
    price_monthly: Decimal
    description: str
    features: Any
    active: bool

    class Config:
        from_attributes = True


class PurchaseRequest(BaseModel):
    plan_id: str


class SubscriptionResponse(BaseModel):
    id: str
    plan_id: str
    status: str
    current_period_start: datetime
    current_period_end: datetime

    class Config:
        from_attributes = True


class BenefitsResponse(BaseModel):
    tier: str
    discount_percent: int
    free_delivery_threshold: Decimal | None
    priority: str
    early_access: bool
    custom_cakes: bool
    birthday_special: bool
