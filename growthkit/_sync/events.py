"""Events namespace for the GrowthKit SDK (sync)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .._http import build_payload
from .._routes import TRACK
from ..types import APIResponse

if TYPE_CHECKING:
    from .dispatcher import Dispatcher


class EventsNamespace:
    """Namespace for product analytics events."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    def track(
        self,
        events: list[dict[str, Any]],
        *,
        context: dict[str, Any] | None = None,
        session_id: str | None = None,
    ) -> APIResponse:
        """Send a batch of events.

        Args:
            events: Items shaped ``{"eventName", "properties", "timestamp"}``.
            context: Browser/device context shared by the batch.
            session_id: Session the events belong to.
        """
        payload = build_payload(events=events, context=context, sessionId=session_id)
        return self._dispatcher.execute(TRACK, payload)
