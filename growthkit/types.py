"""Typed values shared by the sync and async clients."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .exceptions import GrowthKitSDKError

TEMPORARILY_UNAVAILABLE_CODE = "temporarily_unavailable"
TEMPORARILY_UNAVAILABLE_MESSAGE = "Service temporarily unavailable. Please try again later."


@dataclass
class APIResponse:
    """Uniform result envelope returned by every client operation.

    ``error_code`` is a stable identifier callers can branch on:
    ``auth_error``, ``business_error``, ``network_error`` or
    ``temporarily_unavailable``.
    """

    success: bool
    data: Any = None
    error: str | None = None
    message: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, data: Any) -> APIResponse:
        return cls(success=True, data=data)

    @classmethod
    def from_error(cls, exc: GrowthKitSDKError) -> APIResponse:
        return cls(success=False, error=exc.message, error_code=exc.code)

    @classmethod
    def unavailable(cls) -> APIResponse:
        return cls(
            success=False,
            error=TEMPORARILY_UNAVAILABLE_MESSAGE,
            error_code=TEMPORARILY_UNAVAILABLE_CODE,
        )


@dataclass
class RetryState:
    """Failure streak of the token acquisition loop."""

    attempt_count: int = 0
