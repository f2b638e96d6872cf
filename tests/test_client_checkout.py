import json

import httpx
import pytest

from subslayer.client.checkout import (
    ACCOUNT_ISSUE,
    PLAN_UNAVAILABLE,
    RECURRING_MISCONFIGURED,
    CheckoutRedirector,
    map_checkout_error,
)
from subslayer.client.events import EventBus
from subslayer.client.session import SessionStore

PRICE_ID = "price_1RglYeCIxTxdP6ph0ajymCf0"


@pytest.fixture
def navigated():
    return []


@pytest.fixture
def session(api, storage, navigated):
    return SessionStore(api, storage, EventBus(), navigate=navigated.append)


@pytest.fixture
async def signed_in(session, backend, user_record):
    backend.on("POST", "/auth/jwt/login", lambda request: httpx.Response(200, json={"access_token": "tok"}))
    backend.on("GET", "/users/me", lambda request: httpx.Response(200, json=user_record))
    await session.sign_in("alice@example.com", "pw")
    backend.calls.clear()
    return session


def _redirector(api, session, navigated, prompts=None):
    return CheckoutRedirector(
        api,
        session,
        "https://subslayer.app",
        navigate=navigated.append,
        prompt_sign_in=(lambda: prompts.append(True)) if prompts is not None else None,
    )


async def test_unauthenticated_prompts_sign_in_without_request(api, session, backend, navigated):
    prompts = []
    redirector = _redirector(api, session, navigated, prompts)

    assert await redirector.redirect_to_checkout(PRICE_ID) is None
    assert prompts == [True]
    assert backend.calls == []
    assert navigated == []


async def test_redirects_to_checkout_url(api, signed_in, backend, navigated):
    url = "https://checkout.stripe.com/c/cs_test_1"
    backend.on("POST", "/checkout/session", lambda request: httpx.Response(
        200, json={"sessionId": "cs_test_1", "url": url}
    ))

    redirector = _redirector(api, signed_in, navigated)
    assert await redirector.redirect_to_checkout(PRICE_ID, "subscription") == url
    assert navigated == [url]

    request = backend.calls[0][2]
    assert request.headers["Authorization"] == "Bearer tok"
    assert json.loads(request.content) == {
        "price_id": PRICE_ID,
        "mode": "subscription",
        "success_url": "https://subslayer.app/success",
        "cancel_url": "https://subslayer.app/pricing",
    }


async def test_server_error_is_mapped(api, signed_in, backend, navigated):
    backend.on("POST", "/checkout/session", lambda request: httpx.Response(
        400, json={"error": "You specified `payment` mode but passed a recurring price."}
    ))

    redirector = _redirector(api, signed_in, navigated)
    assert await redirector.redirect_to_checkout(PRICE_ID, "payment") is None
    assert redirector.last_error == RECURRING_MISCONFIGURED
    assert navigated == []
    assert len(backend.calls) == 1


@pytest.mark.parametrize("message, expected", [
    ("This price cannot be used in subscription mode", RECURRING_MISCONFIGURED),
    ("No such price: price_123 was not found", PLAN_UNAVAILABLE),
    ("No such customer: cus_1", ACCOUNT_ISSUE),
    ("Card declined", "Card declined"),
])
def test_map_checkout_error(message, expected):
    assert map_checkout_error(message) == expected
