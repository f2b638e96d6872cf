import httpx

from subslayer.client.events import EventBus, Topic
from subslayer.client.session import SESSION_KEY, SessionState, SessionStore


def _store(api, storage, navigated=None, events=None):
    navigated = navigated if navigated is not None else []
    return SessionStore(api, storage, events or EventBus(), navigate=navigated.append)


async def test_no_stored_token(api, storage, backend):
    session = _store(api, storage)
    assert await session.initialize() == SessionState.unauthenticated
    assert backend.calls == []


async def test_stored_token_restores_user(api, storage, backend, user_record):
    storage.set_json(SESSION_KEY, {"access_token": "tok-1"})
    backend.on("GET", "/users/me", lambda request: httpx.Response(200, json=user_record))

    session = _store(api, storage)
    assert await session.initialize() == SessionState.authenticated
    assert session.user["email"] == "alice@example.com"
    assert backend.calls[0][2].headers["Authorization"] == "Bearer tok-1"
    assert backend.calls[0][2].headers["apikey"] == "pk_test"


async def test_expired_token_is_refreshed(api, storage, backend, user_record):
    storage.set_json(SESSION_KEY, {"access_token": "old"})

    def me(request):
        if request.headers["Authorization"] == "Bearer new":
            return httpx.Response(200, json=user_record)
        return httpx.Response(401, json={"detail": "Token has expired"})

    backend.on("GET", "/users/me", me)
    backend.on("POST", "/auth/jwt/refresh", lambda request: httpx.Response(
        200, json={"access_token": "new", "token_type": "bearer", "expires_in": 3600}
    ))

    session = _store(api, storage)
    assert await session.initialize() == SessionState.authenticated
    assert storage.get_json(SESSION_KEY) == {"access_token": "new"}


async def test_refresh_failure_hard_resets(api, storage, backend):
    storage.set_json(SESSION_KEY, {"access_token": "old"})
    storage.set_item("subslayer_session_backup", "x")
    storage.set_json("subslayer_profile_1", {"bio": "kept"})

    backend.on("GET", "/users/me", lambda request: httpx.Response(401, json={"detail": "Token has expired"}))
    backend.on("POST", "/auth/jwt/refresh", lambda request: httpx.Response(
        401, json={"detail": "Invalid Refresh Token"}
    ))

    navigated = []
    session = _store(api, storage, navigated)
    assert await session.initialize() == SessionState.unauthenticated

    assert navigated == ["/"]
    assert storage.keys() == ["subslayer_profile_1"]
    assert api.access_token is None


async def test_other_errors_clear_without_navigation(api, storage, backend):
    storage.set_json(SESSION_KEY, {"access_token": "tok"})
    backend.on("GET", "/users/me", lambda request: httpx.Response(500, json={"detail": "Internal server error"}))

    navigated = []
    session = _store(api, storage, navigated)
    assert await session.initialize() == SessionState.unauthenticated
    assert navigated == []
    assert storage.get_item(SESSION_KEY) is None


async def test_sign_in_and_out(api, storage, backend, user_record):
    backend.on("POST", "/auth/jwt/login", lambda request: httpx.Response(
        200, json={"access_token": "tok-2", "token_type": "bearer"}
    ))
    backend.on("GET", "/users/me", lambda request: httpx.Response(200, json=user_record))
    backend.on("POST", "/auth/jwt/logout", lambda request: httpx.Response(200, json={"detail": "ok"}))

    events = EventBus()
    states = []
    events.subscribe(Topic.SESSION_CHANGED, lambda payload: states.append(payload["state"]))

    navigated = []
    session = _store(api, storage, navigated, events)

    await session.sign_in("alice@example.com", "pw")
    assert session.is_authenticated
    assert storage.get_json(SESSION_KEY) == {"access_token": "tok-2"}
    login_form = backend.calls[0][2].content.decode()
    assert "username=alice%40example.com" in login_form

    await session.sign_out()
    assert session.state == SessionState.unauthenticated
    assert storage.get_item(SESSION_KEY) is None
    assert navigated == ["/"]
    assert states == ["authenticated", "unauthenticated"]


async def test_refresh_without_token_hard_resets(api, storage, backend):
    storage.set_json(SESSION_KEY, {"access_token": "old"})
    backend.on("GET", "/users/me", lambda request: httpx.Response(401, json={"detail": "Token has expired"}))
    backend.on("POST", "/auth/jwt/refresh", lambda request: httpx.Response(200, json={}))

    navigated = []
    session = _store(api, storage, navigated)
    assert await session.initialize() == SessionState.unauthenticated
    assert navigated == ["/"]
    assert storage.get_item(SESSION_KEY) is None
    assert api.access_token is None
