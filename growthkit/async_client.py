"""Asynchronous HTTP client for the GrowthKit SDK."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from ._async import (
    AsyncClaimsNamespace,
    AsyncCreditsNamespace,
    AsyncDispatcher,
    AsyncEventsNamespace,
    AsyncReferralsNamespace,
    AsyncWaitlistNamespace,
)
from ._http import build_payload
from ._routes import ME
from .auth.acquisition import AsyncTokenManager
from .auth.modes import AuthMode, classify_credentials, log_auth_mode, resolve_credentials
from .auth.store import TokenStore
from .config import (
    DEFAULT_BASE_URL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_PROXY_URL,
    DEFAULT_TIMEOUT_SECONDS,
    sanitize_base_url,
)
from .types import APIResponse

logger = logging.getLogger(__name__)


class AsyncGrowthKitClient:
    """Asynchronous client for the GrowthKit API.

    Example:
        >>> import asyncio
        >>> from growthkit import AsyncGrowthKitClient
        >>>
        >>> async def main():
        ...     async with AsyncGrowthKitClient(public_key="pk_...", fingerprint="fp-1") as client:
        ...         me = await client.get_me()
        ...         print(me.data["credits"])
        >>>
        >>> asyncio.run(main())

    The authentication mode follows from the credentials and never changes:
        - public_key: short-lived bearer tokens, refreshed automatically
        - private_key: the key itself is the bearer credential
        - neither: proxy mode, the host's middleware adds credentials

    The client provides namespaced access to different API areas:
        - client.credits: Complete actions, redeem invitations
        - client.claims: Claim name/email, verify email
        - client.waitlist: Join app or product waitlists
        - client.referrals: Referral visits and codes
        - client.events: Analytics events
    """

    def __init__(
        self,
        private_key: str | None = None,
        public_key: str | None = None,
        *,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        fingerprint: str | None = None,
        fingerprint_provider: Callable[[], Optional[str]] | None = None,
        context_provider: Callable[[], Dict[str, Any]] | None = None,
        token_store: TokenStore | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        max_token_attempts: int | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        """Initialize the async GrowthKit client.

        Args:
            private_key: Secret API key for direct mode. If not provided,
                reads from the GROWTHKIT_API_KEY environment variable.
            public_key: Public key ("pk_...") for token mode. If not provided,
                reads from the GROWTHKIT_PUBLIC_KEY environment variable.
            base_url: API base URL. Defaults to GROWTHKIT_API_URL, then to the
                hosted API (or the local proxy mount in proxy mode).
            timeout: Request timeout in seconds (default: 30).
            fingerprint: Device fingerprint of the end user.
            fingerprint_provider: Called once, on first use, when no
                fingerprint was given.
            context_provider: Returns browser/device context sent with
                token requests.
            token_store: Where tokens persist between clients (default: nowhere).
            max_retries: Attempts for credit-consuming operations (default: 3).
            max_token_attempts: Give up token acquisition after this many
                failures (default: retry forever).
            sleep: Coroutine used for backoff waits (default: asyncio.sleep).

        Raises:
            ValueError: If max_retries or max_token_attempts is below 1.
        """
        if max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {max_retries}")

        credentials = resolve_credentials(private_key, public_key, base_url)
        self._auth = classify_credentials(credentials)
        default_url = DEFAULT_PROXY_URL if self._auth.mode is AuthMode.PROXY else DEFAULT_BASE_URL
        self._base_url = sanitize_base_url(credentials.base_url or default_url)
        self._fingerprint = fingerprint
        self._fingerprint_provider = fingerprint_provider
        self._client = httpx.AsyncClient(timeout=timeout)
        log_auth_mode(self._auth)

        self._tokens: AsyncTokenManager | None = None
        if self._auth.mode is AuthMode.PUBLIC_KEY:
            self._tokens = AsyncTokenManager(
                self._client,
                self._base_url,
                self._auth.key,
                fingerprint_source=self._current_fingerprint,
                context_provider=context_provider,
                store=token_store,
                max_attempts=max_token_attempts,
                sleep=sleep,
            )

        self._dispatcher = AsyncDispatcher(
            self._client,
            self._base_url,
            self._auth,
            fingerprint_source=self._current_fingerprint,
            token_manager=self._tokens,
            max_retries=max_retries,
            sleep=sleep,
        )

        # Initialize async namespaces
        self.credits = AsyncCreditsNamespace(self._dispatcher)
        self.claims = AsyncClaimsNamespace(self._dispatcher)
        self.waitlist = AsyncWaitlistNamespace(self._dispatcher)
        self.referrals = AsyncReferralsNamespace(self._dispatcher)
        self.events = AsyncEventsNamespace(self._dispatcher)

    @property
    def auth_mode(self) -> AuthMode:
        return self._auth.mode

    @property
    def token_manager(self) -> AsyncTokenManager | None:
        """Token lifecycle of a public-key client; None in other modes."""
        return self._tokens

    def set_fingerprint(self, fingerprint: str) -> None:
        self._fingerprint = fingerprint

    def _current_fingerprint(self) -> str | None:
        if self._fingerprint is None and self._fingerprint_provider is not None:
            try:
                self._fingerprint = self._fingerprint_provider()
            except Exception:
                logger.warning("Fingerprint provider failed", exc_info=True)
        return self._fingerprint

    async def get_me(self, claim: str | None = None) -> APIResponse:
        """Get the current user's credits, policy and profile.

        Args:
            claim: Referral claim token to apply on first visit.

        Returns:
            Envelope whose data holds credits, usage, referral code, policy,
            claimed name/email and waitlist state.
        """
        payload = build_payload(fingerprint=self._current_fingerprint(), claim=claim)
        return await self._dispatcher.execute(ME, payload)

    async def close(self) -> None:
        """Cancel pending token refreshes and release the HTTP client.

        Requests already in flight are not aborted.
        """
        if self._tokens is not None:
            await self._tokens.close()
        await self._client.aclose()

    async def __aenter__(self) -> AsyncGrowthKitClient:
        return self

    async def __aexit__(self, exc_type: type | None, exc: BaseException | None, traceback: Any) -> None:
        await self.close()
