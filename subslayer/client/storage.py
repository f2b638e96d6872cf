# subslayer/client/storage.py
"""
Device-local key/value storage backed by one JSON file.

Keys are namespaced by prefix plus user id (``subslayer_profile_<id>``).
Reads and writes are synchronous and unlocked; the last writer wins.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

PROFILE_PREFIX = "subslayer_profile_"
LEGACY_PROFILE_PREFIX = "profile_"
SETTINGS_PREFIX = "subslayer_settings_"
LEGACY_SETTINGS_PREFIX = "settings_"
SESSION_PREFIX = "subslayer_session"


class LocalStorage:
    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            logger.warning(f"Local storage at {self.path} unreadable, starting empty: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)

    def keys(self) -> List[str]:
        return list(self._read_all())

    def clear(self) -> None:
        self._write_all({})

    def purge(self, fragment: str) -> int:
        """Remove every key containing ``fragment``; returns how many were removed"""
        data = self._read_all()
        doomed = [key for key in data if fragment in key]
        for key in doomed:
            del data[key]
        if doomed:
            self._write_all(data)
        return len(doomed)

    def get_json(self, key: str) -> Optional[Any]:
        raw = self.get_item(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding unparseable value stored under {key}")
            return None

    def set_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value))
