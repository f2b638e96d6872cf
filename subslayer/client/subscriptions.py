# subslayer/client/subscriptions.py
import logging
from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from subslayer.client.api import ApiClient
from subslayer.client.events import EventBus, Topic

logger = logging.getLogger(__name__)


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass
class SubscriptionRecord:
    id: str
    name: str
    cost: float
    currency: str
    billing_cycle: str
    next_billing: date
    category: str
    status: str
    color: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "SubscriptionRecord":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            cost=float(data["cost"]),
            currency=data.get("currency") or "USD",
            billing_cycle=data["billing_cycle"],
            next_billing=date.fromisoformat(data["next_billing"]),
            category=data.get("category") or "",
            status=data.get("status") or "active",
            color=data.get("color") or "#8B5CF6",
            description=data.get("description"),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SubscriptionRepository:
    """Subscription reads and writes; every successful write announces SUBSCRIPTIONS_CHANGED"""

    def __init__(self, api: ApiClient, events: EventBus):
        self.api = api
        self.events = events

    async def _changed(self, reason: str, subscription_id: Optional[str] = None) -> None:
        await self.events.publish(Topic.SUBSCRIPTIONS_CHANGED, {"reason": reason, "id": subscription_id})

    async def list(self) -> List[SubscriptionRecord]:
        rows = await self.api.list_subscriptions()
        return [SubscriptionRecord.from_api(row) for row in rows]

    async def create(self, data: Dict[str, Any]) -> SubscriptionRecord:
        record = SubscriptionRecord.from_api(await self.api.create_subscription(_jsonable(data)))
        logger.info(f"Created subscription {record.name}")
        await self._changed("created", record.id)
        return record

    async def update(self, subscription_id: str, data: Dict[str, Any]) -> SubscriptionRecord:
        record = SubscriptionRecord.from_api(await self.api.update_subscription(subscription_id, _jsonable(data)))
        await self._changed("updated", record.id)
        return record

    async def toggle(self, subscription_id: str) -> SubscriptionRecord:
        record = SubscriptionRecord.from_api(await self.api.toggle_subscription(subscription_id))
        await self._changed("toggled", record.id)
        return record

    async def cancel(self, subscription_id: str) -> SubscriptionRecord:
        record = SubscriptionRecord.from_api(await self.api.cancel_subscription(subscription_id))
        await self._changed("cancelled", record.id)
        return record

    async def delete(self, subscription_id: str) -> None:
        await self.api.delete_subscription(subscription_id)
        await self._changed("deleted", subscription_id)

    async def bulk_delete(self, ids: List[str]) -> int:
        deleted = await self.api.bulk_delete_subscriptions(ids)
        await self._changed("bulk_deleted")
        return deleted


def _jsonable(data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: value.isoformat() if isinstance(value, (date, datetime)) else value
        for key, value in data.items()
    }
