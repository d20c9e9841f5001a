"""Credits namespace for the GrowthKit SDK (sync)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .._http import build_payload
from .._routes import COMPLETE, INVITATION_REDEEM
from ..types import APIResponse

if TYPE_CHECKING:
    from .dispatcher import Dispatcher


class CreditsNamespace:
    """Namespace for credit-spending and credit-earning operations.

    Both calls are retried on transient network failures; business
    rejections such as insufficient credits are returned after one attempt.
    """

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    def complete_action(
        self,
        action: str = "default",
        *,
        credits_required: int | None = None,
        usd_value: float | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> APIResponse:
        """Record a completed action and consume its credits.

        Args:
            action: Action name from the app's credit policy.
            credits_required: Override the policy's credit cost.
            usd_value: Monetary value of the action, for revenue tracking.
            metadata: Free-form data stored with the usage record.

        Returns:
            Envelope whose data holds the remaining and consumed credits.
        """
        payload = build_payload(
            fingerprint=self._dispatcher.fingerprint,
            action=action,
            creditsRequired=credits_required,
            usdValue=usd_value,
            metadata=metadata,
        )
        return self._dispatcher.execute(COMPLETE, payload)

    def redeem_invitation(self, invitation_code: str) -> APIResponse:
        """Redeem a waitlist invitation code."""
        payload = build_payload(fingerprint=self._dispatcher.fingerprint, invitationCode=invitation_code)
        return self._dispatcher.execute(INVITATION_REDEEM, payload)
