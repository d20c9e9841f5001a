"""Bearer token value type and its serialized form."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Raises:
        ValueError: If the value is not an ISO-8601 string.
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO-8601 string, got {type(value).__name__}")
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass(frozen=True)
class Token:
    """A short-lived bearer token issued for a public key."""

    value: str
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.expires_at <= (now or utcnow())

    def seconds_remaining(self, now: datetime | None = None) -> float:
        return (self.expires_at - (now or utcnow())).total_seconds()

    def to_dict(self) -> dict[str, str]:
        return {
            "token": self.value,
            "expiresAt": self.expires_at.isoformat().replace("+00:00", "Z"),
        }

    @classmethod
    def from_dict(cls, data: Any) -> Token:
        """Build a token from ``{"token": ..., "expiresAt": ...}``.

        Raises:
            ValueError: If the payload is not a well-formed token record.
        """
        if not isinstance(data, dict):
            raise ValueError("Token payload must be an object")
        value = data.get("token")
        if not isinstance(value, str) or not value:
            raise ValueError("Token payload is missing 'token'")
        return cls(value=value, expires_at=parse_timestamp(data.get("expiresAt")))

    def __repr__(self) -> str:
        return f"Token(value='***', expires_at={self.expires_at.isoformat()!r})"
