from urllib.parse import parse_qs

import httpx

from subslayer.api.v1.routes import checkout as checkout_routes
from subslayer.core.config import settings

PRICE_ID = "price_1RglYeCIxTxdP6ph0ajymCf0"


def _stripe(monkeypatch, handler):
    monkeypatch.setattr(settings, "STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setattr(
        checkout_routes,
        "stripe_client",
        lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


async def test_products(client):
    response = await client.get("/api/v1/checkout/products")
    assert response.status_code == 200
    [product] = response.json()
    assert product["name"] == "SubSlayer Pro"
    assert product["monthly_price_id"] == PRICE_ID


async def test_session_requires_authentication(client):
    response = await client.post("/api/v1/checkout/session", json={"price_id": PRICE_ID})
    assert response.status_code == 401


async def test_session_without_stripe_key(client, auth_headers):
    response = await client.post("/api/v1/checkout/session", json={"price_id": PRICE_ID}, headers=auth_headers)
    assert response.status_code == 500
    assert "error" in response.json()


async def test_invalid_mode_rejected(client, auth_headers):
    response = await client.post(
        "/api/v1/checkout/session", json={"price_id": PRICE_ID, "mode": "rental"}, headers=auth_headers
    )
    assert response.status_code == 422


async def test_session_created(client, auth_headers, monkeypatch):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={"id": "cs_test_1", "url": "https://checkout.stripe.com/c/cs_test_1"})

    _stripe(monkeypatch, handler)
    response = await client.post(
        "/api/v1/checkout/session",
        json={"price_id": PRICE_ID, "mode": "subscription"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json() == {"sessionId": "cs_test_1", "url": "https://checkout.stripe.com/c/cs_test_1"}

    assert seen["url"].endswith("/checkout/sessions")
    assert seen["auth"] == "Bearer sk_test_123"
    assert seen["form"]["line_items[0][price]"] == [PRICE_ID]
    assert seen["form"]["mode"] == ["subscription"]
    assert seen["form"]["customer_email"] == ["alice@example.com"]
    assert seen["form"]["success_url"] == [f"{settings.FRONTEND_URL}/success"]


async def test_stripe_error_is_passed_through(client, auth_headers, monkeypatch):
    message = "You specified `payment` mode but passed a recurring price."

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"message": message}})

    _stripe(monkeypatch, handler)
    response = await client.post(
        "/api/v1/checkout/session", json={"price_id": PRICE_ID, "mode": "payment"}, headers=auth_headers
    )
    assert response.status_code == 400
    assert response.json() == {"error": message}


async def test_stripe_unreachable(client, auth_headers, monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    _stripe(monkeypatch, handler)
    response = await client.post("/api/v1/checkout/session", json={"price_id": PRICE_ID}, headers=auth_headers)
    assert response.status_code == 502


async def test_stripe_html_reply_is_bad_gateway(client, auth_headers, monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            502, text="<html><body>Bad Gateway</body></html>", headers={"content-type": "text/html"}
        )

    _stripe(monkeypatch, handler)
    response = await client.post("/api/v1/checkout/session", json={"price_id": PRICE_ID}, headers=auth_headers)
    assert response.status_code == 502
    assert response.json() == {"error": "Unexpected response from payment provider"}


async def test_stripe_error_without_message(client, auth_headers, monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "bad"})

    _stripe(monkeypatch, handler)
    response = await client.post("/api/v1/checkout/session", json={"price_id": PRICE_ID}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Unable to create checkout session"}


async def test_plan_status_without_customer(client, auth_headers, monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/customers")
        assert request.url.params["email"] == "alice@example.com"
        return httpx.Response(200, json={"object": "list", "data": []})

    _stripe(monkeypatch, handler)
    response = await client.get("/api/v1/checkout/subscription", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["subscription_status"] == "not_started"
    assert response.json()["customer_id"] is None


async def test_plan_status_for_subscriber(client, auth_headers, monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/customers"):
            return httpx.Response(200, json={"data": [{"id": "cus_1"}]})
        assert request.url.params["customer"] == "cus_1"
        return httpx.Response(200, json={"data": [{
            "id": "sub_1",
            "status": "active",
            "cancel_at_period_end": True,
            "current_period_start": 1735689600,
            "current_period_end": 1738368000,
            "items": {"data": [{"price": {"id": PRICE_ID}}]},
            "default_payment_method": {"card": {"brand": "visa", "last4": "4242"}},
        }]})

    _stripe(monkeypatch, handler)
    response = await client.get("/api/v1/checkout/subscription", headers=auth_headers)
    assert response.status_code == 200
    plan = response.json()
    assert plan["subscription_id"] == "sub_1"
    assert plan["subscription_status"] == "active"
    assert plan["product_name"] == "SubSlayer Pro"
    assert plan["cancel_at_period_end"] is True
    assert plan["current_period_end"].startswith("2025-02-01")
    assert plan["payment_method_last4"] == "4242"


async def test_plan_status_stripe_failure(client, auth_headers, monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": {"message": "Invalid API Key provided"}})

    _stripe(monkeypatch, handler)
    response = await client.get("/api/v1/checkout/subscription", headers=auth_headers)
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid API Key provided"}


async def test_plan_status_requires_authentication(client):
    response = await client.get("/api/v1/checkout/subscription")
    assert response.status_code == 401
