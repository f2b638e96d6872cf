# subslayer/client/checkout.py
import logging
from typing import Any, Callable, Optional

from subslayer.client.api import ApiClient
from subslayer.client.errors import RequestError
from subslayer.client.session import SessionStore

logger = logging.getLogger(__name__)

RECURRING_MISCONFIGURED = (
    "This subscription plan is not properly configured. The price needs to be set up as a "
    "recurring subscription in Stripe. Please contact support for assistance."
)
PLAN_UNAVAILABLE = "This pricing plan is currently unavailable. Please try a different plan or contact support."
ACCOUNT_ISSUE = "There was an issue with your account. Please try again or contact support."
GENERIC_FAILURE = "Unable to process payment. Please try again or contact support."


def map_checkout_error(message: Optional[str]) -> str:
    """Turn a payment provider error into something a customer can act on"""
    if not message:
        return GENERIC_FAILURE
    if any(hint in message for hint in ("recurring price", "subscription mode", "one-time", "recurring")):
        return RECURRING_MISCONFIGURED
    if "price" in message and "not found" in message:
        return PLAN_UNAVAILABLE
    if "customer" in message:
        return ACCOUNT_ISSUE
    return message


class CheckoutRedirector:
    def __init__(
        self,
        api: ApiClient,
        session: SessionStore,
        site_url: str,
        navigate: Callable[[str], Any],
        prompt_sign_in: Optional[Callable[[], Any]] = None,
    ):
        self.api = api
        self.session = session
        self.site_url = site_url.rstrip("/")
        self.navigate = navigate
        self.prompt_sign_in = prompt_sign_in
        self.loading = False
        self.last_error: Optional[str] = None

    async def redirect_to_checkout(
        self,
        price_id: str,
        mode: str = "subscription",
        success_url: Optional[str] = None,
        cancel_url: Optional[str] = None,
    ) -> Optional[str]:
        """
        Open the hosted checkout page for ``price_id``.

        Returns the checkout URL, or None when the user is not signed in or
        the session could not be created (see ``last_error``).
        """
        self.last_error = None
        if not self.session.is_authenticated:
            self.last_error = "User must be authenticated"
            if self.prompt_sign_in:
                self.prompt_sign_in()
            return None

        payload = {
            "price_id": price_id,
            "mode": mode,
            "success_url": success_url or f"{self.site_url}/success",
            "cancel_url": cancel_url or f"{self.site_url}/pricing",
        }

        self.loading = True
        try:
            checkout = await self.api.create_checkout_session(payload)
        except RequestError as e:
            self.last_error = map_checkout_error(e.message)
            logger.error(f"Checkout session creation failed for {price_id}: {e}")
            return None
        finally:
            self.loading = False

        url = checkout.get("url")
        if url:
            self.navigate(url)
        return url
