import os
import tempfile

_tmp_dir = tempfile.mkdtemp(prefix="subslayer-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp_dir}/test.db"
os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789abcdef")
os.environ["SENDGRID_API_KEY"] = ""
os.environ["STRIPE_SECRET_KEY"] = ""

import httpx
import pytest

from subslayer.core.database import Base, engine, AsyncSessionLocal
from subslayer.main import app

PASSWORD = "Sup3r-secret-pass"


@pytest.fixture
async def tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(tables):
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def client(tables):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def register_and_login(client: httpx.AsyncClient, email: str, full_name: str | None = None) -> dict:
    """Create an account and return the bearer headers for it"""
    payload = {"email": email, "password": PASSWORD}
    if full_name:
        payload["full_name"] = full_name
    response = await client.post("/api/v1/auth/register", json=payload)
    assert response.status_code == 201, response.text

    response = await client.post(
        "/api/v1/auth/jwt/login",
        data={"username": email, "password": PASSWORD},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
async def auth_headers(client):
    return await register_and_login(client, "alice@example.com", full_name="Alice Doe")


@pytest.fixture
def register():
    return register_and_login


USER = {
    "id": "8d3c1a52-6a9e-4c7a-9d0b-2f1e5b6c7d80",
    "email": "alice@example.com",
    "full_name": "Alice Doe",
    "created_at": "2025-01-10T09:30:00",
    "is_active": True,
    "is_verified": True,
    "is_superuser": False,
}


class FakeBackend:
    """Routes httpx requests to per-path handlers and records every call"""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def on(self, method: str, path: str, handler):
        self.routes[(method, path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api/v1")
        self.calls.append((request.method, path, request))
        handler = self.routes.get((request.method, path))
        if handler is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        return handler(request)

    def paths(self):
        return [(method, path) for method, path, _ in self.calls]


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def storage(tmp_path):
    from subslayer.client.storage import LocalStorage
    return LocalStorage(tmp_path / "storage.json")


@pytest.fixture
async def api(backend):
    from subslayer.client.api import ApiClient
    api = ApiClient("http://api.test/api/v1", "pk_test", transport=httpx.MockTransport(backend))
    yield api
    await api.aclose()


@pytest.fixture
def user_record():
    return dict(USER)
