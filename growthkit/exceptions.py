"""Custom exceptions raised inside the GrowthKit SDK.

Public client methods convert these into failure envelopes; they are only
seen by code that talks to the dispatchers or token managers directly.
"""

from __future__ import annotations

from typing import Any, Optional


class GrowthKitSDKError(Exception):
    """Base exception for all SDK specific failures."""

    code = "sdk_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NetworkError(GrowthKitSDKError):
    """Raised when the transport fails before a response is received."""

    code = "network_error"


class AuthError(GrowthKitSDKError):
    """Raised when no bearer token can be obtained or a 401 recurs during recovery."""

    code = "auth_error"


class BusinessError(GrowthKitSDKError):
    """Raised when the GrowthKit API rejects a request."""

    code = "business_error"

    def __init__(self, message: str, status_code: int, response: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response

    def __str__(self) -> str:  # pragma: no cover - repr helper
        return f"{self.status_code}: {self.message}"
