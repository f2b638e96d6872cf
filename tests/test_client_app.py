import httpx
import pytest

from subslayer.client.app import create_client
from subslayer.client.config import ClientSettings
from subslayer.client.errors import ConfigurationError
from subslayer.client.session import SessionState


def test_missing_configuration_is_fatal(tmp_path):
    settings = ClientSettings(API_URL=None, API_KEY=None, STORAGE_PATH=tmp_path / "s.json")
    with pytest.raises(ConfigurationError, match="SUBSLAYER_API_URL"):
        create_client(settings)


async def test_start_without_session(tmp_path, backend):
    settings = ClientSettings(API_URL="http://api.test", API_KEY="pk_test", STORAGE_PATH=tmp_path / "s.json")
    client = create_client(settings, transport=httpx.MockTransport(backend))
    try:
        await client.start()
        assert client.session.state == SessionState.unauthenticated
        assert [p.amount for p in client.spending.series] == [0.0] * 7
        assert backend.calls == []
    finally:
        await client.aclose()


async def test_sign_in_loads_profile(tmp_path, backend, user_record):
    backend.on("POST", "/auth/jwt/login", lambda request: httpx.Response(200, json={"access_token": "tok"}))
    backend.on("GET", "/users/me", lambda request: httpx.Response(200, json=user_record))

    settings = ClientSettings(API_URL="http://api.test/", API_KEY="pk_test", STORAGE_PATH=tmp_path / "s.json")
    client = create_client(settings, transport=httpx.MockTransport(backend))
    try:
        await client.session.sign_in("alice@example.com", "pw")
        assert client.profile.profile.display_name == "Alice Doe"
    finally:
        await client.aclose()


async def test_analyze_file_uploads_with_guessed_type(tmp_path, backend, api):
    seen = {}

    def intake(request):
        seen["body"] = request.content
        return httpx.Response(200, json={"name": "Netflix", "cost": 15.99, "matched": True})

    backend.on("POST", "/subscriptions/intake", intake)
    receipt = tmp_path / "Netflix-receipt.png"
    receipt.write_bytes(b"\x89PNG")

    result = await api.analyze_file(receipt)
    assert result["name"] == "Netflix"
    assert b'filename="Netflix-receipt.png"' in seen["body"]
    assert b"Content-Type: image/png" in seen["body"]


async def test_session_changes_reload_user_state(tmp_path, backend, user_record):
    backend.on("POST", "/auth/jwt/login", lambda request: httpx.Response(200, json={"access_token": "tok"}))
    backend.on("GET", "/users/me", lambda request: httpx.Response(200, json=user_record))
    backend.on("POST", "/auth/jwt/logout", lambda request: httpx.Response(200, json={"detail": "ok"}))
    backend.on("GET", "/subscriptions/", lambda request: httpx.Response(200, json=[]))
    backend.on("GET", "/checkout/subscription", lambda request: httpx.Response(
        200, json={"subscription_status": "active"}
    ))

    settings = ClientSettings(API_URL="http://api.test", API_KEY="pk_test", STORAGE_PATH=tmp_path / "s.json")
    client = create_client(settings, transport=httpx.MockTransport(backend), navigate=lambda path: None)
    try:
        await client.session.sign_in("alice@example.com", "pw")
        assert client.plan.plan.is_active
        assert client.settings_store.save({"currency": "EUR"}).success

        await client.session.sign_out()
        assert client.plan.plan is None
        assert client.settings_store.settings.currency == "USD"
    finally:
        await client.aclose()
