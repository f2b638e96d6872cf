# subslayer/client/config.py

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STORAGE_PATH = Path.home() / ".subslayer" / "storage.json"

class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SUBSLAYER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Backend location and the publishable key sent with every request
    API_URL: Optional[str] = None
    API_KEY: Optional[str] = None

    # Device-local storage (profile, settings, session artifact)
    STORAGE_PATH: Path = DEFAULT_STORAGE_PATH

    # Where checkout returns to
    SITE_URL: str = "http://localhost:5173"

    @property
    def is_configured(self) -> bool:
        return bool(self.API_URL and self.API_KEY)

    @property
    def api_base(self) -> str:
        return f"{(self.API_URL or '').rstrip('/')}/api/v1"
