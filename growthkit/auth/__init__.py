"""Authentication utilities for the GrowthKit SDK.

Lightweight imports (modes, tokens, stores) are eager. The token managers
pull in the HTTP helpers and are loaded lazily to keep ``growthkit.auth``
importable from those helpers.
"""

from .modes import AuthMode, Credentials, ResolvedAuth, classify_credentials, resolve_credentials
from .store import FileTokenStore, MappingTokenStore, NullTokenStore, TokenStore
from .token import Token


def __getattr__(name: str):
    if name in ("AsyncTokenManager", "TokenManager"):
        from . import acquisition

        return getattr(acquisition, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "AsyncTokenManager",
    "AuthMode",
    "Credentials",
    "FileTokenStore",
    "MappingTokenStore",
    "NullTokenStore",
    "ResolvedAuth",
    "Token",
    "TokenManager",
    "TokenStore",
    "classify_credentials",
    "resolve_credentials",
]
