# subslayer/client/errors.py
from typing import Optional


class SubSlayerError(Exception):
    """Base class for everything the client raises"""


class ConfigurationError(SubSlayerError):
    """Required client settings are missing; the client cannot start"""


class AuthenticationError(SubSlayerError):
    """The stored session could not be restored or refreshed"""


class RequestError(SubSlayerError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (HTTP {self.status_code})"
