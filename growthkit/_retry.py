"""Backoff schedules and the request retry policy.

Two tiers share this module:

* token acquisition retries forever (or up to a configured ceiling) with
  exponential backoff, see :func:`token_backoff_delay`;
* credit-consuming requests are retried a bounded number of times, but only
  when the failure looks like a transport problem, see :func:`with_retry`.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

from .config import (
    RETRY_FIRST_DELAY_SECONDS,
    RETRY_LATER_DELAY_SECONDS,
    TOKEN_BACKOFF_BASE_SECONDS,
    TOKEN_BACKOFF_MAX_SECONDS,
)
from .types import APIResponse

logger = logging.getLogger(__name__)

NETWORK_ERROR_MARKERS = (
    "failed to fetch",
    "network error",
    "networkerror",
    "connection refused",
    "econnrefused",
    "timeout",
    "timed out",
    "dns",
    "enotfound",
    "getaddrinfo",
    "name resolution",
    "token acquisition failed",
)

# 2**16 seconds is far above the cap; keeps the float conversion finite.
_MAX_EXPONENT = 16


def token_backoff_delay(attempt_count: int) -> float:
    """Seconds to wait after the failure that brought the streak to ``attempt_count + 1``."""
    exponent = min(max(attempt_count, 0), _MAX_EXPONENT)
    return min(TOKEN_BACKOFF_BASE_SECONDS * 2**exponent, TOKEN_BACKOFF_MAX_SECONDS)


def retry_delay(attempt: int) -> float:
    """Seconds to wait after the given (1-based) request attempt fails."""
    return RETRY_FIRST_DELAY_SECONDS if attempt <= 1 else RETRY_LATER_DELAY_SECONDS


def is_network_error(text: str | None) -> bool:
    if not text:
        return False
    lowered = text.lower()
    return any(marker in lowered for marker in NETWORK_ERROR_MARKERS)


def _should_retry(result: APIResponse) -> bool:
    return not result.success and is_network_error(result.error)


def _validate_attempts(max_attempts: int) -> None:
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")


async def with_retry(
    op: Callable[[], Awaitable[APIResponse]],
    max_attempts: int,
    *,
    sleep: Callable[[float], Awaitable[None]] | None = None,
) -> APIResponse:
    """Run ``op`` until it succeeds, fails for a business reason, or attempts run out.

    Business failures are returned untouched after a single attempt. Network
    failures (and exceptions raised by ``op``) are retried; once attempts
    are exhausted a generic "temporarily unavailable" envelope is returned.
    """
    _validate_attempts(max_attempts)
    sleep = sleep or asyncio.sleep

    for attempt in range(1, max_attempts + 1):
        try:
            result = await op()
        except Exception as exc:
            detail = str(exc)
        else:
            if not _should_retry(result):
                return result
            detail = result.error or ""

        if attempt == max_attempts:
            break
        delay = retry_delay(attempt)
        logger.info("Attempt %d/%d failed (%s); retrying in %.1fs", attempt, max_attempts, detail, delay)
        await sleep(delay)

    logger.warning("Giving up after %d attempts", max_attempts)
    return APIResponse.unavailable()


def with_retry_sync(
    op: Callable[[], APIResponse],
    max_attempts: int,
    *,
    sleep: Callable[[float], None] | None = None,
) -> APIResponse:
    """Blocking counterpart of :func:`with_retry`."""
    _validate_attempts(max_attempts)
    sleep = sleep or time.sleep

    for attempt in range(1, max_attempts + 1):
        try:
            result = op()
        except Exception as exc:
            detail = str(exc)
        else:
            if not _should_retry(result):
                return result
            detail = result.error or ""

        if attempt == max_attempts:
            break
        delay = retry_delay(attempt)
        logger.info("Attempt %d/%d failed (%s); retrying in %.1fs", attempt, max_attempts, detail, delay)
        sleep(delay)

    logger.warning("Giving up after %d attempts", max_attempts)
    return APIResponse.unavailable()
