"""Waitlist namespace for the GrowthKit SDK (sync)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .._http import build_payload
from .._routes import WAITLIST
from ..types import APIResponse

if TYPE_CHECKING:
    from .dispatcher import Dispatcher


class WaitlistNamespace:
    """Namespace for app and product waitlists."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    def join(
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
        return self._dispatcher.execute(WAITLIST, payload)
