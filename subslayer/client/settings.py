# subslayer/client/settings.py
"""
Per-user app preferences kept in device storage.

Stored under ``subslayer_settings_<user_id>``; older clients wrote
``settings_<user_id>``, which is read and copied forward on load. Saves write
both keys and a reset removes both. Signed out, the defaults apply.
"""
import json
import logging
import re
from dataclasses import dataclass, asdict
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

from subslayer.client.profile import SaveResult
from subslayer.client.storage import LocalStorage, SETTINGS_PREFIX, LEGACY_SETTINGS_PREFIX

logger = logging.getLogger(__name__)

NOT_SIGNED_IN = "User not authenticated"

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "C$",
    "AUD": "A$",
}


def _snake_case(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


@dataclass
class AppSettings:
    currency: str = "USD"
    date_format: str = "MM/DD/YYYY"
    theme: str = "light"
    language: str = "en"
    timezone: str = "America/New_York"
    email_notifications: bool = True
    push_notifications: bool = True
    weekly_digest: bool = True
    monthly_report: bool = True
    data_sharing: bool = False
    analytics: bool = True
    reminder_days: int = 7

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppSettings":
        # Records written by the web app use camelCase keys
        normalized = {_snake_case(key): value for key, value in data.items()}
        known = {key: value for key, value in normalized.items() if key in cls.__dataclass_fields__}
        return cls(**known)


class SettingsStore:
    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self.user: Optional[Dict[str, Any]] = None
        self.settings = AppSettings()

    def _keys(self):
        user_id = self.user["id"]
        return f"{SETTINGS_PREFIX}{user_id}", f"{LEGACY_SETTINGS_PREFIX}{user_id}"

    def load(self, user: Optional[Dict[str, Any]]) -> AppSettings:
        self.user = user
        self.settings = AppSettings()
        if not user:
            return self.settings

        key, legacy_key = self._keys()
        stored = self.storage.get_json(key)
        if not isinstance(stored, dict):
            stored = self.storage.get_json(legacy_key)
            if isinstance(stored, dict):
                self.storage.set_json(key, stored)
                logger.info("Migrated settings to new storage key format")

        if isinstance(stored, dict):
            self.settings = AppSettings.from_dict(stored)
        return self.settings

    def save(self, partial: Dict[str, Any]) -> SaveResult:
        if not self.user:
            return SaveResult(success=False, error=NOT_SIGNED_IN)

        updated = AppSettings.from_dict({**self.settings.to_dict(), **partial})
        try:
            for key in self._keys():
                self.storage.set_json(key, updated.to_dict())
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error saving settings: {e}")
            return SaveResult(success=False, error="Failed to save settings")

        self.settings = updated
        return SaveResult(success=True)

    def reset(self) -> SaveResult:
        if not self.user:
            return SaveResult(success=False, error=NOT_SIGNED_IN)

        try:
            for key in self._keys():
                self.storage.remove_item(key)
        except OSError as e:
            logger.error(f"Error resetting settings: {e}")
            return SaveResult(success=False, error="Failed to reset settings")

        self.settings = AppSettings()
        return SaveResult(success=True)

    def export(self, directory: Union[str, Path], now: Optional[datetime] = None) -> Path:
        """Write the current settings to ``subslayer-settings-<date>.json`` in ``directory``"""
        now = now or datetime.utcnow()
        path = Path(directory) / f"subslayer-settings-{now.date().isoformat()}.json"
        data = {
            "settings": self.settings.to_dict(),
            "exportDate": now.isoformat(),
            "userId": self.user["id"] if self.user else None,
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    def format_date(self, value: Union[date, datetime, str]) -> str:
        if isinstance(value, str):
            value = datetime.fromisoformat(value)
        fmt = self.settings.date_format
        if fmt == "DD/MM/YYYY":
            return value.strftime("%d/%m/%Y")
        if fmt == "YYYY-MM-DD":
            return value.strftime("%Y-%m-%d")
        if fmt == "MMMM DD, YYYY":
            return f"{value.strftime('%B')} {value.day}, {value.year}"
        return f"{value.month}/{value.day}/{value.year}"

    def format_currency(self, amount: float) -> str:
        currency = self.settings.currency
        symbol = CURRENCY_SYMBOLS.get(currency, CURRENCY_SYMBOLS["USD"])
        # Yen has no minor unit
        if currency == "JPY":
            return f"{symbol}{amount:,.0f}"
        return f"{symbol}{amount:,.2f}"
