"""GrowthKit Python SDK - client for the GrowthKit referral and credits API."""

from importlib.metadata import PackageNotFoundError, version

from .async_client import AsyncGrowthKitClient
from .auth import AuthMode, FileTokenStore, MappingTokenStore, NullTokenStore, Token
from .client import GrowthKitClient
from .exceptions import AuthError, BusinessError, GrowthKitSDKError, NetworkError
from .types import APIResponse

__all__ = [
    "GrowthKitClient",
    "AsyncGrowthKitClient",
    "APIResponse",
    "AuthMode",
    "Token",
    "FileTokenStore",
    "MappingTokenStore",
    "NullTokenStore",
    "GrowthKitSDKError",
    "NetworkError",
    "AuthError",
    "BusinessError",
]

try:
    __version__ = version("growthkit")
except PackageNotFoundError:
    __version__ = "0.1.0"
