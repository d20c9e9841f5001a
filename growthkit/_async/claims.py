"""Claims namespace for the GrowthKit SDK (async)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .._http import build_payload
from .._routes import CLAIM_EMAIL, CLAIM_NAME, VERIFY_EMAIL
from ..types import APIResponse

if TYPE_CHECKING:
    from .dispatcher import AsyncDispatcher


class AsyncClaimsNamespace:
    """Async namespace for profile claims that award credits."""

    def __init__(self, dispatcher: AsyncDispatcher) -> None:
        self._dispatcher = dispatcher

    async def name(self, name: str) -> APIResponse:
        """Claim a display name for the current user."""
        payload = build_payload(fingerprint=self._dispatcher.fingerprint, name=name)
        return await self._dispatcher.execute(CLAIM_NAME, payload)

    async def email(self, email: str) -> APIResponse:
        """Claim an email address; the service sends a verification mail."""
        payload = build_payload(fingerprint=self._dispatcher.fingerprint, email=email)
        return await self._dispatcher.execute(CLAIM_EMAIL, payload)

    async def verify_email(self, token: str) -> APIResponse:
        """Confirm a claimed email with the token from the verification mail."""
        payload = build_payload(fingerprint=self._dispatcher.fingerprint, token=token)
        return await self._dispatcher.execute(VERIFY_EMAIL, payload)
