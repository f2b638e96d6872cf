# subslayer/client/api.py
"""
Thin async wrapper around the SubSlayer HTTP API.

Every method returns decoded JSON or raises ``RequestError`` carrying the
server's message (``detail`` or ``error``) and status code. No timeouts and no
retries are configured.
"""
import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import httpx

from subslayer.client.errors import RequestError

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        detail = body.get("error") or body.get("detail")
        if isinstance(detail, str):
            return detail
        if detail is not None:
            return str(detail)
    return response.reason_phrase


class ApiClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.access_token: Optional[str] = None
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=None, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        headers = {"apikey": self.api_key}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"❌ {method} {path} failed: {e}")
            raise RequestError(f"Unable to reach SubSlayer: {e}") from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(f"{method} {path} returned {response.status_code}: {message}")
            raise RequestError(message, response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------
    async def login(self, email: str, password: str) -> Dict[str, Any]:
        return await self._request(
            "POST", "/auth/jwt/login", data={"username": email, "password": password}
        )

    async def register(self, email: str, password: str, full_name: Optional[str] = None) -> Dict[str, Any]:
        payload = {"email": email, "password": password}
        if full_name:
            payload["full_name"] = full_name
        return await self._request("POST", "/auth/register", json=payload)

    async def refresh(self) -> Dict[str, Any]:
        return await self._request("POST", "/auth/jwt/refresh")

    async def logout(self) -> None:
        await self._request("POST", "/auth/jwt/logout")

    async def resend_confirmation(self, email: str) -> Dict[str, Any]:
        return await self._request("POST", "/auth/resend-confirmation", json={"email": email})

    async def get_me(self) -> Dict[str, Any]:
        return await self._request("GET", "/users/me")

    # ------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------
    async def list_subscriptions(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/subscriptions/")

    async def create_subscription(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/subscriptions/", json=data)

    async def update_subscription(self, subscription_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PATCH", f"/subscriptions/{subscription_id}", json=data)

    async def toggle_subscription(self, subscription_id: str) -> Dict[str, Any]:
        return await self._request("POST", f"/subscriptions/{subscription_id}/toggle")

    async def cancel_subscription(self, subscription_id: str) -> Dict[str, Any]:
        return await self._request("POST", f"/subscriptions/{subscription_id}/cancel")

    async def delete_subscription(self, subscription_id: str) -> None:
        await self._request("DELETE", f"/subscriptions/{subscription_id}")

    async def bulk_delete_subscriptions(self, ids: List[str]) -> int:
        body = await self._request("POST", "/subscriptions/bulk-delete", json={"ids": ids})
        return body["deleted"]

    async def analyze_file(self, path: Union[str, Path], content_type: Optional[str] = None) -> Dict[str, Any]:
        """Upload a receipt / screenshot and get back a pre-filled subscription"""
        path = Path(path)
        if content_type is None:
            content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        files = {"file": (path.name, path.read_bytes(), content_type)}
        return await self._request("POST", "/subscriptions/intake", files=files)

    # ------------------------------------------------------------
    # Dashboard / profile / checkout / email
    # ------------------------------------------------------------
    async def get_spending(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/dashboard/spending")

    async def get_summary(self) -> Dict[str, Any]:
        return await self._request("GET", "/dashboard/summary")

    async def get_profile(self) -> Dict[str, Any]:
        return await self._request("GET", "/profile")

    async def update_profile(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PATCH", "/profile", json=data)

    async def create_checkout_session(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/checkout/session", json=payload)

    async def get_plan_status(self) -> Dict[str, Any]:
        return await self._request("GET", "/checkout/subscription")

    async def send_email(self, to: str, subject: str, html_content: str) -> Dict[str, Any]:
        return await self._request(
            "POST", "/email/send", json={"to": to, "subject": subject, "htmlContent": html_content}
        )
