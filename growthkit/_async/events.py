"""Events namespace for the GrowthKit SDK (async)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .._http import build_payload
from .._routes import TRACK
from ..types import APIResponse

if TYPE_CHECKING:
    from .dispatcher import AsyncDispatcher


class AsyncEventsNamespace:
    """Async namespace for product analytics events."""

    def __init__(self, dispatcher: AsyncDispatcher) -> None:
        self._dispatcher = dispatcher

    async def track(
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
        return await self._dispatcher.execute(TRACK, payload)
