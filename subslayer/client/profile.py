# subslayer/client/profile.py
"""
Local-first profile store.

The profile lives in device storage under ``subslayer_profile_<user_id>`` and
is the source of truth for the profile screen. Records written by older
clients under ``profile_<user_id>`` are read and copied forward; saves write
both keys.
"""
import logging
from dataclasses import dataclass, asdict, field
from datetime import datetime
from typing import Any, Dict, Optional

from subslayer.client.events import EventBus, Topic
from subslayer.client.storage import LocalStorage, PROFILE_PREFIX, LEGACY_PROFILE_PREFIX

logger = logging.getLogger(__name__)

DEFAULT_BIO = "Subscription management enthusiast"


@dataclass
class Profile:
    display_name: str = ""
    email: str = ""
    bio: str = DEFAULT_BIO
    location: str = ""
    website: str = ""
    avatar: Optional[str] = None
    join_date: str = field(default_factory=lambda: datetime.utcnow().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        known = {key: value for key, value in data.items() if key in cls.__dataclass_fields__}
        return cls(**known)


@dataclass
class SaveResult:
    success: bool
    error: Optional[str] = None


def seed_profile(user: Dict[str, Any]) -> Profile:
    email = user.get("email") or ""
    return Profile(
        display_name=user.get("full_name") or email.split("@")[0],
        email=email,
        join_date=user.get("created_at") or datetime.utcnow().isoformat(),
    )


class ProfileStore:
    def __init__(self, storage: LocalStorage, events: EventBus):
        self.storage = storage
        self.events = events
        self.user: Optional[Dict[str, Any]] = None
        self.profile = Profile()

    def _key(self) -> str:
        return f"{PROFILE_PREFIX}{self.user['id']}"

    def _legacy_key(self) -> str:
        return f"{LEGACY_PROFILE_PREFIX}{self.user['id']}"

    def load(self, user: Optional[Dict[str, Any]]) -> Profile:
        """Read the stored profile for ``user``, seeding and persisting one if none exists"""
        self.user = user
        if not user:
            self.profile = Profile()
            return self.profile

        stored = self.storage.get_json(self._key())
        if not isinstance(stored, dict):
            stored = self.storage.get_json(self._legacy_key())
            if isinstance(stored, dict):
                self.storage.set_json(self._key(), stored)
                logger.info("Migrated profile data to new storage key format")

        if isinstance(stored, dict):
            self.profile = Profile.from_dict(stored)
            return self.profile

        self.profile = seed_profile(user)
        try:
            self._persist()
        except OSError as e:
            logger.error(f"Could not persist seeded profile: {e}")
        return self.profile

    def _persist(self) -> None:
        data = self.profile.to_dict()
        self.storage.set_json(self._key(), data)
        self.storage.set_json(self._legacy_key(), data)

    async def save(self, partial: Dict[str, Any]) -> SaveResult:
        if not self.user:
            return SaveResult(success=False, error="Not signed in")

        merged = {**self.profile.to_dict(), **partial}
        previous = self.profile
        self.profile = Profile.from_dict(merged)
        try:
            self._persist()
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error saving profile: {e}")
            self.profile = previous
            return SaveResult(success=False, error="Failed to save profile")

        await self.events.publish(Topic.PROFILE_UPDATED, self.profile.to_dict())
        return SaveResult(success=True)

    async def update_avatar(self, data: Optional[str]) -> SaveResult:
        return await self.save({"avatar": data})
