"""Credential classification.

The authentication mode is decided once per client from the supplied
credentials and threaded explicitly through every later decision:

* ``PUBLIC_KEY`` - a public key is exchanged for short-lived bearer tokens
* ``PROXY`` - no key; a trusted middleware injects credentials server-side
* ``DIRECT`` - the private key itself is sent as the bearer credential
"""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from typing import Any

from .constants import API_KEY_ENV_VAR, API_URL_ENV_VAR, PUBLIC_KEY_ENV_VAR

logger = logging.getLogger(__name__)

_PLACEHOLDER_KEYS = frozenset({"YOUR_API_KEY", "YOUR_PUBLIC_KEY"})


class AuthMode(str, enum.Enum):
    PROXY = "proxy"
    PUBLIC_KEY = "public_key"
    DIRECT = "direct"


@dataclass(frozen=True)
class Credentials:
    private_key: Any = None
    public_key: Any = None
    base_url: str | None = None


@dataclass(frozen=True)
class ResolvedAuth:
    """An auth mode together with the key it operates on (None for proxy)."""

    mode: AuthMode
    key: str | None = None

    def __repr__(self) -> str:
        return f"ResolvedAuth(mode={self.mode.value!r}, key={mask_key(self.key)!r})"


def mask_key(key: str | None) -> str | None:
    if key is None:
        return None
    if len(key) >= 12:
        return key[:6] + "..." + key[-4:]
    return "***"


def _is_real_key(key: Any) -> bool:
    return isinstance(key, str) and bool(key.strip()) and key.strip() not in _PLACEHOLDER_KEYS


def _is_absent(key: Any) -> bool:
    return key is None or (isinstance(key, str) and not _is_real_key(key))


def classify_credentials(credentials: Credentials) -> ResolvedAuth:
    """Pick the auth mode for a set of credentials.

    A public key wins over a private key. Keys that are neither strings nor
    absent cannot be classified and fall back to proxy mode.
    """
    public_key = credentials.public_key
    private_key = credentials.private_key

    if not (_is_absent(public_key) or _is_real_key(public_key)) or not (
        _is_absent(private_key) or _is_real_key(private_key)
    ):
        logger.warning("Unrecognised credential types; falling back to proxy mode")
        return ResolvedAuth(AuthMode.PROXY)

    if _is_real_key(public_key):
        return ResolvedAuth(AuthMode.PUBLIC_KEY, public_key.strip())
    if _is_absent(private_key):
        return ResolvedAuth(AuthMode.PROXY)
    return ResolvedAuth(AuthMode.DIRECT, private_key.strip())


def resolve_credentials(
    private_key: str | None = None,
    public_key: str | None = None,
    base_url: str | None = None,
) -> Credentials:
    """Resolve credentials using the standard precedence chain.

    Order: explicit parameter > environment variable. Placeholder values like
    ``"YOUR_API_KEY"`` are treated as missing.
    """
    if private_key is None:
        env_key = os.environ.get(API_KEY_ENV_VAR)
        private_key = env_key if _is_real_key(env_key) else None
    if public_key is None:
        env_key = os.environ.get(PUBLIC_KEY_ENV_VAR)
        public_key = env_key if _is_real_key(env_key) else None
    if base_url is None:
        base_url = os.environ.get(API_URL_ENV_VAR) or None
    return Credentials(private_key=private_key, public_key=public_key, base_url=base_url)


def log_auth_mode(auth: ResolvedAuth) -> None:
    """Report the selected mode once, when a client is built."""
    if auth.mode is AuthMode.DIRECT:
        logger.warning(
            "Using direct API mode with a client-held private key. "
            "Consider proxy mode (no key) or a public key for better security."
        )
    else:
        logger.debug("Using %s mode", auth.mode.value)
