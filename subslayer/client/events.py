# subslayer/client/events.py
"""
In-process publish/subscribe for client state changes.

Components announce changes here instead of reaching into each other:
the subscription repository publishes SUBSCRIPTIONS_CHANGED after every
write, the profile store PROFILE_UPDATED after a save, the session store
SESSION_CHANGED on every state transition.
"""
import inspect
import logging
from enum import Enum
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class Topic(str, Enum):
    SUBSCRIPTIONS_CHANGED = "subscriptions_changed"
    PROFILE_UPDATED = "profile_updated"
    SESSION_CHANGED = "session_changed"


Callback = Callable[[Any], Any]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[Topic, List[Callback]] = {topic: [] for topic in Topic}

    def subscribe(self, topic: Topic, callback: Callback) -> Callable[[], None]:
        """Register ``callback`` for ``topic``; call the returned function to unsubscribe"""
        self._subscribers[topic].append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers[topic]:
                self._subscribers[topic].remove(callback)

        return unsubscribe

    async def publish(self, topic: Topic, payload: Any = None) -> None:
        # Copy so callbacks may unsubscribe while being notified
        for callback in list(self._subscribers[topic]):
            result = callback(payload)
            if inspect.isawaitable(result):
                await result
        logger.debug(f"Published {topic.value} to {len(self._subscribers[topic])} subscriber(s)")
