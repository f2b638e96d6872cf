# subslayer/client/spending.py
"""
Spending chart data for the dashboard.

The series is computed locally from the user's subscriptions with the same
aggregation the server uses. Any failure degrades to an all-zero series; the
error text is only kept when the client is configured, so an unconfigured
install shows an empty chart instead of a warning.
"""
import logging
import random
from datetime import datetime
from typing import List, Optional

from subslayer.client.errors import RequestError
from subslayer.client.events import EventBus, Topic
from subslayer.client.session import SessionStore
from subslayer.client.subscriptions import SubscriptionRepository
from subslayer.utils.spending import SpendingPoint, build_spending_series, zero_series

logger = logging.getLogger(__name__)


class SpendingService:
    def __init__(
        self,
        session: SessionStore,
        subscriptions: SubscriptionRepository,
        events: EventBus,
        is_configured: bool = True,
        rng: Optional[random.Random] = None,
    ):
        self.session = session
        self.subscriptions = subscriptions
        self.is_configured = is_configured
        self.rng = rng
        self.series: List[SpendingPoint] = zero_series()
        self.error: Optional[str] = None
        self._unsubscribers = [
            events.subscribe(Topic.SUBSCRIPTIONS_CHANGED, self._on_subscriptions_changed),
            events.subscribe(Topic.SESSION_CHANGED, self._on_session_changed),
        ]

    async def _on_subscriptions_changed(self, payload) -> None:
        if self.session.is_authenticated:
            await self.refresh()

    async def _on_session_changed(self, payload) -> None:
        # Signing in loads the new user's figures; signing out drops the old ones
        await self.refresh()

    async def refresh(self, now: Optional[datetime] = None) -> List[SpendingPoint]:
        self.error = None
        if not self.session.is_authenticated:
            self.series = zero_series(now)
            return self.series

        try:
            records = await self.subscriptions.list()
        except RequestError as e:
            logger.error(f"Error generating spending data: {e}")
            self.error = str(e) if self.is_configured else None
            self.series = zero_series(now)
            return self.series

        self.series = build_spending_series(records, now=now, rng=self.rng)
        return self.series

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
