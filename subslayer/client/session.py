# subslayer/client/session.py
"""
Client-side session state: who is signed in, and the token used for requests.

The stored artifact lives under ``subslayer_session`` in local storage. When a
stored token can no longer be refreshed the store performs a hard reset:
every local key containing the session prefix is purged and the app is sent
back to ``/``.
"""
import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

from subslayer.client.api import ApiClient
from subslayer.client.errors import AuthenticationError, RequestError
from subslayer.client.events import EventBus, Topic
from subslayer.client.storage import LocalStorage, SESSION_PREFIX

logger = logging.getLogger(__name__)

SESSION_KEY = SESSION_PREFIX


class SessionState(str, Enum):
    loading = "loading"
    authenticated = "authenticated"
    unauthenticated = "unauthenticated"


def _log_navigation(path: str) -> None:
    logger.info(f"Navigate to {path}")


class SessionStore:
    def __init__(
        self,
        api: ApiClient,
        storage: LocalStorage,
        events: EventBus,
        navigate: Optional[Callable[[str], Any]] = None,
    ):
        self.api = api
        self.storage = storage
        self.events = events
        self.navigate = navigate or _log_navigation
        self.state = SessionState.loading
        self.user: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.authenticated

    @property
    def access_token(self) -> Optional[str]:
        return self.api.access_token

    async def _set_state(self, state: SessionState, user: Optional[Dict[str, Any]] = None) -> None:
        self.state = state
        self.user = user
        await self.events.publish(Topic.SESSION_CHANGED, {"state": state.value, "user": user})

    def _store_token(self, token: str) -> None:
        self.api.access_token = token
        self.storage.set_json(SESSION_KEY, {"access_token": token})

    def clear_local_session(self) -> None:
        self.api.access_token = None
        removed = self.storage.purge(SESSION_PREFIX)
        logger.info(f"Cleared {removed} local session key(s)")

    async def _refresh(self) -> None:
        try:
            token = await self.api.refresh()
        except RequestError as e:
            raise AuthenticationError(str(e.message)) from e
        access_token = token.get("access_token") if isinstance(token, dict) else None
        if not access_token:
            raise AuthenticationError("Refresh response did not include an access token")
        self._store_token(access_token)

    async def initialize(self) -> SessionState:
        """Restore the stored session; never raises"""
        self.state = SessionState.loading
        stored = self.storage.get_json(SESSION_KEY)
        token = stored.get("access_token") if isinstance(stored, dict) else None

        if not token:
            await self._set_state(SessionState.unauthenticated)
            return self.state

        self.api.access_token = token
        try:
            try:
                user = await self.api.get_me()
            except RequestError as e:
                if e.status_code != 401:
                    raise
                await self._refresh()
                user = await self.api.get_me()
        except AuthenticationError as e:
            logger.warning(f"Session refresh failed, resetting: {e}")
            self.clear_local_session()
            await self._set_state(SessionState.unauthenticated)
            self.navigate("/")
            return self.state
        except RequestError as e:
            logger.error(f"Auth initialization error: {e}")
            self.clear_local_session()
            await self._set_state(SessionState.unauthenticated)
            return self.state

        await self._set_state(SessionState.authenticated, user)
        return self.state

    async def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        token = await self.api.login(email, password)
        self._store_token(token["access_token"])
        user = await self.api.get_me()
        await self._set_state(SessionState.authenticated, user)
        logger.info(f"Signed in as {email}")
        return user

    async def sign_up(self, email: str, password: str, full_name: Optional[str] = None) -> Dict[str, Any]:
        """Create the account; the user still has to confirm the email before signing in"""
        user = await self.api.register(email, password, full_name)
        logger.info(f"Registered {email}; confirmation email requested")
        return user

    async def sign_out(self) -> None:
        try:
            await self.api.logout()
        except RequestError as e:
            logger.warning(f"Sign out request failed, clearing local session anyway: {e}")
        self.clear_local_session()
        await self._set_state(SessionState.unauthenticated)
        self.navigate("/")
