"""Bearer token acquisition for public-key clients.

The token manager keeps one token per client. ``ensure_valid_token()``
returns immediately when the in-memory token is still valid, adopts a
persisted token when one survives, and otherwise requests a new one,
backing off exponentially between failures (1s, 2s, 4s ... capped at 30s).
There is no attempt ceiling unless ``max_attempts`` is given: callers that
need bounded behavior wrap the call in their own timeout.

The async manager also refreshes proactively: once a token is in place a
one-shot timer fires at 80% of its remaining lifetime and reacquires in the
background, with the same backoff.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from .._http import handle_response
from .._retry import token_backoff_delay
from ..config import TOKEN_REFRESH_RATIO
from ..exceptions import AuthError, GrowthKitSDKError, NetworkError
from ..types import RetryState
from .constants import ERROR_MALFORMED_TOKEN, TOKEN_ENDPOINT
from .store import NullTokenStore, TokenStore
from .token import Token, utcnow

logger = logging.getLogger(__name__)

FingerprintSource = Callable[[], Optional[str]]
ContextProvider = Callable[[], Dict[str, Any]]


def parse_token_response(response: httpx.Response) -> Token:
    """Decode a token endpoint response.

    Raises:
        BusinessError: If the endpoint rejected the request.
        AuthError: If the response carries no usable token.
    """
    data = handle_response(response)
    try:
        return Token.from_dict(data)
    except ValueError as exc:
        raise AuthError(ERROR_MALFORMED_TOKEN) from exc


class _BaseTokenManager:
    def __init__(
        self,
        base_url: str,
        public_key: str,
        *,
        fingerprint_source: FingerprintSource,
        context_provider: ContextProvider | None = None,
        store: TokenStore | None = None,
        max_attempts: int | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if max_attempts is not None and max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

        self._token_url = f"{base_url}{TOKEN_ENDPOINT}"
        self._public_key = public_key
        self._fingerprint_source = fingerprint_source
        self._context_provider = context_provider
        self._store: TokenStore = store if store is not None else NullTokenStore()
        self._max_attempts = max_attempts
        self._clock = clock
        self._token: Token | None = None
        self.retry_state = RetryState()

    @property
    def token(self) -> Token | None:
        return self._token

    @property
    def attempt_count(self) -> int:
        return self.retry_state.attempt_count

    def has_valid_token(self) -> bool:
        return self._token is not None and not self._token.is_expired(self._clock())

    def invalidate(self) -> None:
        """Forget the current token, in memory and in the store."""
        self._token = None
        self._store.clear()

    def _token_payload(self, fingerprint: str) -> dict[str, Any]:
        context: dict[str, Any] = {}
        if self._context_provider is not None:
            try:
                context = self._context_provider() or {}
            except Exception:
                logger.warning("Context provider failed; requesting token without context", exc_info=True)
        return {"publicKey": self._public_key, "fingerprint": fingerprint, "context": context}

    def _record_failure(self, exc: GrowthKitSDKError, attempts: int) -> float | None:
        """Advance the failure streak. Returns the delay to wait, or None to give up.

        The backoff delay follows the streak across calls; the ceiling only
        counts the ``attempts`` made by the current acquisition.
        """
        delay = token_backoff_delay(self.retry_state.attempt_count)
        self.retry_state.attempt_count += 1
        if self._max_attempts is not None and attempts >= self._max_attempts:
            logger.warning(
                "Token acquisition failed %d times; giving up: %s",
                attempts,
                exc.message,
            )
            return None
        logger.info("Token acquisition failed (%s); retrying in %.1fs", exc.message, delay)
        return delay

    def _store_token(self, token: Token) -> None:
        self._token = token
        self._store.save(token)
        self.retry_state.attempt_count = 0
        logger.debug("Acquired token valid until %s", token.expires_at.isoformat())

    def _current_fingerprint(self) -> str | None:
        fingerprint = self._fingerprint_source()
        if not fingerprint:
            logger.warning("No fingerprint available; cannot request a token")
            return None
        return fingerprint


class AsyncTokenManager(_BaseTokenManager):
    """Token lifecycle for :class:`~growthkit.AsyncGrowthKitClient`."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        public_key: str,
        *,
        sleep: Callable[[float], Awaitable[None]] | None = None,
        refresh_ratio: float = TOKEN_REFRESH_RATIO,
        **kwargs: Any,
    ) -> None:
        super().__init__(base_url, public_key, **kwargs)
        self._client = client
        self._sleep = sleep or asyncio.sleep
        self._refresh_ratio = refresh_ratio
        self._refresh_handle: asyncio.TimerHandle | None = None
        self._refresh_task: asyncio.Future[None] | None = None

    @property
    def refresh_scheduled(self) -> bool:
        return self._refresh_handle is not None

    async def ensure_valid_token(self) -> bool:
        """Make sure a valid token is in place, acquiring one if needed."""
        if self.has_valid_token():
            return True

        stored = self._store.load()
        if stored is not None:
            self._token = stored
            self._schedule_refresh(stored)
            return True

        return await self.acquire()

    async def acquire(self) -> bool:
        """Request a new token, backing off between failures."""
        attempts = 0
        while True:
            fingerprint = self._current_fingerprint()
            if fingerprint is None:
                return False

            try:
                token = await self._request_token(fingerprint)
            except GrowthKitSDKError as exc:
                attempts += 1
                delay = self._record_failure(exc, attempts)
                if delay is None:
                    return False
                await self._sleep(delay)
                continue

            self._store_token(token)
            self._schedule_refresh(token)
            return True

    def invalidate(self) -> None:
        self._cancel_refresh_timer()
        super().invalidate()

    async def close(self) -> None:
        """Cancel the refresh timer and any background refresh; drop the in-memory token."""
        self._cancel_refresh_timer()
        task, self._refresh_task = self._refresh_task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._token = None

    async def _request_token(self, fingerprint: str) -> Token:
        try:
            response = await self._client.request(
                "POST",
                self._token_url,
                headers={"Content-Type": "application/json"},
                json=self._token_payload(fingerprint),
            )
        except httpx.RequestError as exc:
            raise NetworkError(f"Token acquisition failed: {exc}") from exc
        return parse_token_response(response)

    def _schedule_refresh(self, token: Token) -> None:
        self._cancel_refresh_timer()
        remaining = token.seconds_remaining(self._clock())
        if remaining <= 0:
            return
        loop = asyncio.get_running_loop()
        self._refresh_handle = loop.call_later(remaining * self._refresh_ratio, self._start_refresh)

    def _cancel_refresh_timer(self) -> None:
        if self._refresh_handle is not None:
            self._refresh_handle.cancel()
            self._refresh_handle = None

    def _start_refresh(self) -> None:
        self._refresh_handle = None
        if self._refresh_task is not None and not self._refresh_task.done():
            return
        self._refresh_task = asyncio.ensure_future(self._refresh())

    async def _refresh(self) -> None:
        logger.debug("Refreshing token ahead of expiry")
        await self.acquire()


class TokenManager(_BaseTokenManager):
    """Token lifecycle for the blocking :class:`~growthkit.GrowthKitClient`.

    Backoff sleeps block the calling thread. There is no background timer:
    an expired token is replaced on the next request instead.
    """

    def __init__(
        self,
        client: httpx.Client,
        base_url: str,
        public_key: str,
        *,
        sleep: Callable[[float], None] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(base_url, public_key, **kwargs)
        self._client = client
        self._sleep = sleep or time.sleep

    def ensure_valid_token(self) -> bool:
        """Make sure a valid token is in place, acquiring one if needed."""
        if self.has_valid_token():
            return True

        stored = self._store.load()
        if stored is not None:
            self._token = stored
            return True

        return self.acquire()

    def acquire(self) -> bool:
        """Request a new token, backing off between failures."""
        attempts = 0
        while True:
            fingerprint = self._current_fingerprint()
            if fingerprint is None:
                return False

            try:
                token = self._request_token(fingerprint)
            except GrowthKitSDKError as exc:
                attempts += 1
                delay = self._record_failure(exc, attempts)
                if delay is None:
                    return False
                self._sleep(delay)
                continue

            self._store_token(token)
            return True

    def close(self) -> None:
        self._token = None

    def _request_token(self, fingerprint: str) -> Token:
        try:
            response = self._client.request(
                "POST",
                self._token_url,
                headers={"Content-Type": "application/json"},
                json=self._token_payload(fingerprint),
            )
        except httpx.RequestError as exc:
            raise NetworkError(f"Token acquisition failed: {exc}") from exc
        return parse_token_response(response)
