# subslayer/client/plan.py
"""
The signed-in user's SubSlayer Pro plan, as reported by the payment provider.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from subslayer.client.api import ApiClient
from subslayer.client.errors import RequestError

logger = logging.getLogger(__name__)


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass
class PlanStatus:
    subscription_status: str = "not_started"
    customer_id: Optional[str] = None
    subscription_id: Optional[str] = None
    price_id: Optional[str] = None
    product_name: Optional[str] = None
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: bool = False
    payment_method_brand: Optional[str] = None
    payment_method_last4: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlanStatus":
        return cls(
            subscription_status=data.get("subscription_status") or "not_started",
            customer_id=data.get("customer_id"),
            subscription_id=data.get("subscription_id"),
            price_id=data.get("price_id"),
            product_name=data.get("product_name"),
            current_period_start=_parse_datetime(data.get("current_period_start")),
            current_period_end=_parse_datetime(data.get("current_period_end")),
            cancel_at_period_end=bool(data.get("cancel_at_period_end")),
            payment_method_brand=data.get("payment_method_brand"),
            payment_method_last4=data.get("payment_method_last4"),
        )

    @property
    def is_active(self) -> bool:
        return self.subscription_status == "active"

    @property
    def is_trialing(self) -> bool:
        return self.subscription_status == "trialing"

    @property
    def is_paused(self) -> bool:
        return self.subscription_status == "paused"

    @property
    def is_canceled(self) -> bool:
        return self.subscription_status == "canceled"


class PlanStore:
    def __init__(self, api: ApiClient):
        self.api = api
        self.plan: Optional[PlanStatus] = None
        self.error: Optional[str] = None

    async def refresh(self) -> Optional[PlanStatus]:
        self.error = None
        try:
            data = await self.api.get_plan_status()
        except RequestError as e:
            logger.error(f"Error fetching subscription: {e}")
            self.error = str(e)
            self.plan = None
            return None
        self.plan = PlanStatus.from_dict(data or {})
        return self.plan

    def clear(self) -> None:
        self.plan = None
        self.error = None
