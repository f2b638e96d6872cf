# subslayer/client/app.py
"""
Client façade: builds every client component around one API connection,
one local storage file and one event bus.

    client = create_client()
    await client.start()
    await client.checkout.redirect_to_checkout(price_id)
"""
import logging
from typing import Any, Callable, Optional

import httpx

from subslayer.client.api import ApiClient
from subslayer.client.checkout import CheckoutRedirector
from subslayer.client.config import ClientSettings
from subslayer.client.errors import ConfigurationError
from subslayer.client.events import EventBus, Topic
from subslayer.client.plan import PlanStore
from subslayer.client.profile import ProfileStore
from subslayer.client.session import SessionStore
from subslayer.client.settings import SettingsStore
from subslayer.client.spending import SpendingService
from subslayer.client.storage import LocalStorage
from subslayer.client.subscriptions import SubscriptionRepository

logger = logging.getLogger(__name__)


class SubSlayerClient:
    def __init__(
        self,
        settings: ClientSettings,
        navigate: Optional[Callable[[str], Any]] = None,
        prompt_sign_in: Optional[Callable[[], Any]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.events = EventBus()
        self.storage = LocalStorage(settings.STORAGE_PATH)
        self.api = ApiClient(settings.api_base, settings.API_KEY or "", transport=transport)
        self.session = SessionStore(self.api, self.storage, self.events, navigate=navigate)
        self.profile = ProfileStore(self.storage, self.events)
        self.settings_store = SettingsStore(self.storage)
        self.plan = PlanStore(self.api)
        self.subscriptions = SubscriptionRepository(self.api, self.events)
        self.spending = SpendingService(
            self.session,
            self.subscriptions,
            self.events,
            is_configured=settings.is_configured,
        )
        self.checkout = CheckoutRedirector(
            self.api,
            self.session,
            settings.SITE_URL,
            navigate=self.session.navigate,
            prompt_sign_in=prompt_sign_in,
        )
        self.events.subscribe(Topic.SESSION_CHANGED, self._on_session_changed)

    async def _on_session_changed(self, payload) -> None:
        user = payload.get("user")
        self.profile.load(user)
        self.settings_store.load(user)
        if user:
            await self.plan.refresh()
        else:
            self.plan.clear()

    async def start(self) -> None:
        """Restore the stored session; dependent state reloads on SESSION_CHANGED"""
        await self.session.initialize()

    async def aclose(self) -> None:
        self.spending.close()
        await self.api.aclose()


def create_client(
    settings: Optional[ClientSettings] = None,
    navigate: Optional[Callable[[str], Any]] = None,
    prompt_sign_in: Optional[Callable[[], Any]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> SubSlayerClient:
    settings = settings or ClientSettings()
    missing = [name for name in ("API_URL", "API_KEY") if not getattr(settings, name)]
    if missing:
        names = ", ".join(f"SUBSLAYER_{name}" for name in missing)
        raise ConfigurationError(f"Missing client configuration: {names}")
    return SubSlayerClient(settings, navigate=navigate, prompt_sign_in=prompt_sign_in, transport=transport)
