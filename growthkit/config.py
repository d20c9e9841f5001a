"""Configuration helpers for the GrowthKit SDK."""

from __future__ import annotations

DEFAULT_BASE_URL = "https://growth.fenixblack.ai/api"
# Mount point of the GrowthKit middleware proxy in the host application.
DEFAULT_PROXY_URL = "http://localhost:3000/api/growthkit"
DEFAULT_TIMEOUT_SECONDS = 30.0

# Token acquisition backoff: min(base * 2**attempt, max)
TOKEN_BACKOFF_BASE_SECONDS = 1.0
TOKEN_BACKOFF_MAX_SECONDS = 30.0
TOKEN_REFRESH_RATIO = 0.8

# Per-request retry for credit-consuming operations
DEFAULT_MAX_RETRIES = 3
RETRY_FIRST_DELAY_SECONDS = 1.0
RETRY_LATER_DELAY_SECONDS = 2.0


def sanitize_base_url(url: str) -> str:
    """Ensure the base URL never ends with a trailing slash."""

    return url.rstrip("/")
