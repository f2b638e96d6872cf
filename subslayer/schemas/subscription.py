# subslayer/schemas/subscription.py
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
import uuid
from subslayer.models.subscription import (
    BillingCycle,
    SubscriptionStatus,
    DEFAULT_COLOR,
    DEFAULT_CURRENCY,
)

class SubscriptionBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=150, description="Service name, e.g. Netflix")
    description: Optional[str] = None
    cost: float = Field(..., ge=0, description="Amount charged per billing cycle")
    currency: str = Field(DEFAULT_CURRENCY, min_length=3, max_length=3)
    billing_cycle: BillingCycle = BillingCycle.monthly
    next_billing: date
    category: Optional[str] = None
    status: SubscriptionStatus = SubscriptionStatus.active
    color: Optional[str] = DEFAULT_COLOR

class SubscriptionCreate(SubscriptionBase):
    pass

class SubscriptionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    cost: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    billing_cycle: Optional[BillingCycle] = None
    next_billing: Optional[date] = None
    category: Optional[str] = None
    status: Optional[SubscriptionStatus] = None
    color: Optional[str] = None

    # Omitting a field leaves it unchanged; these columns cannot be cleared
    @field_validator("name", "cost", "currency", "billing_cycle", "next_billing", "status", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

class SubscriptionRead(SubscriptionBase):
    id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class BulkDeleteRequest(BaseModel):
    ids: List[uuid.UUID] = Field(..., min_length=1)

class ExtractedSubscription(BaseModel):
    """Form pre-fill produced by the file intake lookup"""
    name: str
    cost: float
    currency: str
    billing_cycle: BillingCycle
    category: str
    description: str
    next_billing: date
    matched: bool = False
