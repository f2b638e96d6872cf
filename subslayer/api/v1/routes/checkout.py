# subslayer/api/v1/routes/checkout.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from subslayer.api.deps import get_current_user
from subslayer.core.auth import User
from subslayer.core.config import settings
from subslayer.core.products import PRODUCTS, get_price_id, get_product_by_price_id
from subslayer.schemas.checkout import (
    CheckoutSessionRequest,
    CheckoutSessionResponse,
    PlanStatusRead,
    ProductRead,
)

router = APIRouter(prefix="/checkout", tags=["Checkout"])
logger = logging.getLogger(__name__)

UNEXPECTED_REPLY = "Unexpected response from payment provider"

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})

def stripe_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=30.0)

def _stripe_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {settings.STRIPE_SECRET_KEY}"}

def _json_body(response: httpx.Response) -> Optional[Dict[str, Any]]:
    """Decoded Stripe reply, ``{}`` for an empty or non-object body, None when it is not JSON"""
    try:
        body = response.json() if response.content else {}
    except ValueError:
        return None
    return body if isinstance(body, dict) else {}

def _stripe_message(body: Dict[str, Any], fallback: str) -> str:
    error = body.get("error")
    return (error.get("message") if isinstance(error, dict) else None) or fallback

def _timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    return None

@router.get("/products", response_model=List[ProductRead])
async def list_products():
    """Plans offered on the pricing page, with the price ids for the current Stripe mode"""
    return [
        ProductRead(
            id=product.id,
            name=product.name,
            description=product.description,
            mode=product.mode,
            monthly_price_id=get_price_id(product.id, annual=False),
            annual_price_id=get_price_id(product.id, annual=True),
        )
        for product in PRODUCTS
    ]

@router.post("/session", response_model=CheckoutSessionResponse)
async def create_checkout_session(
    payload: CheckoutSessionRequest,
    user: User = Depends(get_current_user),
):
    """
    Create a Stripe Checkout Session for the current user.

    Returns ``{sessionId, url}``; on failure ``{error}`` with Stripe's message
    and status so the client can explain price/mode mismatches.
    """
    if not settings.STRIPE_SECRET_KEY:
        logger.error("Stripe secret key not configured; cannot create checkout session")
        return _error(500, "Payment processing is not configured")

    product = get_product_by_price_id(payload.price_id)
    if product is None:
        logger.warning(f"Checkout requested for price {payload.price_id} outside the catalogue")

    form = {
        "mode": payload.mode,
        "line_items[0][price]": payload.price_id,
        "line_items[0][quantity]": "1",
        "success_url": payload.success_url or f"{settings.FRONTEND_URL}/success",
        "cancel_url": payload.cancel_url or f"{settings.FRONTEND_URL}/pricing",
        "customer_email": user.email,
        "client_reference_id": str(user.id),
    }

    try:
        async with stripe_client() as client:
            response = await client.post(
                f"{settings.STRIPE_API_BASE}/checkout/sessions",
                headers=_stripe_headers(),
                data=form,
            )
    except httpx.HTTPError as e:
        logger.error(f"❌ Stripe request failed for {user.email}: {str(e)}")
        return _error(502, "Unable to reach payment provider")

    body = _json_body(response)
    if body is None:
        logger.error(f"❌ Stripe returned a non-JSON reply for {user.email} ({response.status_code})")
        return _error(502, UNEXPECTED_REPLY)

    if response.status_code != 200:
        message = _stripe_message(body, "Unable to create checkout session")
        logger.warning(f"Stripe rejected checkout for {user.email} ({response.status_code}): {message}")
        return _error(response.status_code, message)

    if not body.get("id") or not body.get("url"):
        logger.error(f"❌ Stripe checkout reply for {user.email} is missing the session id or url")
        return _error(502, UNEXPECTED_REPLY)

    plan = product.name if product else payload.price_id
    logger.info(f"✅ Checkout session {body['id']} created for {user.email} ({plan})")
    return {"sessionId": body["id"], "url": body["url"]}

@router.get("/subscription", response_model=PlanStatusRead)
async def get_plan_status(user: User = Depends(get_current_user)):
    """
    The user's SubSlayer Pro subscription as Stripe sees it.

    The Stripe customer is found by the account email; a user who never
    checked out gets ``subscription_status="not_started"``.
    """
    if not settings.STRIPE_SECRET_KEY:
        logger.error("Stripe secret key not configured; cannot read plan status")
        return _error(500, "Payment processing is not configured")

    try:
        async with stripe_client() as client:
            response = await client.get(
                f"{settings.STRIPE_API_BASE}/customers",
                headers=_stripe_headers(),
                params={"email": user.email, "limit": 1},
            )
            customers = _json_body(response)
            if customers is None or response.status_code != 200:
                return _plan_lookup_failed(user, response, customers)

            found = customers.get("data") or []
            if not found:
                return PlanStatusRead()
            customer_id = found[0].get("id")

            response = await client.get(
                f"{settings.STRIPE_API_BASE}/subscriptions",
                headers=_stripe_headers(),
                params={
                    "customer": customer_id,
                    "status": "all",
                    "limit": 1,
                    "expand[]": "data.default_payment_method",
                },
            )
            subscriptions = _json_body(response)
            if subscriptions is None or response.status_code != 200:
                return _plan_lookup_failed(user, response, subscriptions)
    except httpx.HTTPError as e:
        logger.error(f"❌ Stripe request failed for {user.email}: {str(e)}")
        return _error(502, "Unable to reach payment provider")

    found = subscriptions.get("data") or []
    if not found:
        return PlanStatusRead(customer_id=customer_id)
    return _plan_status(customer_id, found[0])

def _plan_lookup_failed(user: User, response: httpx.Response, body: Optional[Dict[str, Any]]) -> JSONResponse:
    if body is None:
        logger.error(f"❌ Stripe returned a non-JSON reply for {user.email} ({response.status_code})")
        return _error(502, UNEXPECTED_REPLY)
    message = _stripe_message(body, "Unable to load subscription")
    logger.warning(f"Stripe plan lookup failed for {user.email} ({response.status_code}): {message}")
    return _error(response.status_code, message)

def _plan_status(customer_id: str, subscription: Dict[str, Any]) -> PlanStatusRead:
    items = (subscription.get("items") or {}).get("data") or [{}]
    item = items[0]
    price_id = (item.get("price") or {}).get("id")
    product = get_product_by_price_id(price_id) if price_id else None

    card = {}
    payment_method = subscription.get("default_payment_method")
    if isinstance(payment_method, dict):
        card = payment_method.get("card") or {}

    # Newer Stripe API versions report the billing period per item
    return PlanStatusRead(
        customer_id=customer_id,
        subscription_id=subscription.get("id"),
        subscription_status=subscription.get("status") or "not_started",
        price_id=price_id,
        product_name=product.name if product else None,
        current_period_start=_timestamp(subscription.get("current_period_start") or item.get("current_period_start")),
        current_period_end=_timestamp(subscription.get("current_period_end") or item.get("current_period_end")),
        cancel_at_period_end=bool(subscription.get("cancel_at_period_end")),
        payment_method_brand=card.get("brand"),
        payment_method_last4=card.get("last4"),
    )
