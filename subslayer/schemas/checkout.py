# subslayer/schemas/checkout.py
from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, Field

class CheckoutSessionRequest(BaseModel):
    price_id: str = Field(..., min_length=1)
    mode: Literal["payment", "subscription"] = "subscription"
    success_url: Optional[str] = None
    cancel_url: Optional[str] = None

class CheckoutSessionResponse(BaseModel):
    sessionId: str
    url: str

class ProductRead(BaseModel):
    id: str
    name: str
    description: str
    mode: Literal["payment", "subscription"]
    monthly_price_id: Optional[str] = None
    annual_price_id: Optional[str] = None

class PlanStatusRead(BaseModel):
    customer_id: Optional[str] = None
    subscription_id: Optional[str] = None
    subscription_status: str = "not_started"
    price_id: Optional[str] = None
    product_name: Optional[str] = None
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: bool = False
    payment_method_brand: Optional[str] = None
    payment_method_last4: Optional[str] = None
