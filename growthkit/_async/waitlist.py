"""Waitlist namespace for the GrowthKit SDK (async)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .._http import build_payload
from .._routes import WAITLIST
from ..types import APIResponse

if TYPE_CHECKING:
    from .dispatcher import AsyncDispatcher


class AsyncWaitlistNamespace:
    """Async namespace for app and product waitlists."""

    def __init__(self, dispatcher: AsyncDispatcher) -> None:
        self._dispatcher = dispatcher

    async def join(
        self,
        email: str,
        *,
        metadata: dict[str, Any] | None = None,
        product_tag: str | None = None,
    ) -> APIResponse:
        """Join the app waitlist, or a product's waitlist when product_tag is given.

        Returns:
            Envelope whose data holds the waitlist position and status.
        """
        payload = build_payload(
            email=email,
            fingerprint=self._dispatcher.fingerprint,
            metadata=metadata,
            productTag=product_tag,
        )
        return await self._dispatcher.execute(WAITLIST, payload)
