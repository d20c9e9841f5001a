"""Referrals namespace for the GrowthKit SDK (sync)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .._http import build_payload
from .._routes import REFERRAL_CHECK, REFERRAL_VISIT
from ..types import APIResponse

if TYPE_CHECKING:
    from .dispatcher import Dispatcher


class ReferralsNamespace:
    """Namespace for referral tracking."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    def track_visit(self, claim: str | None = None) -> APIResponse:
        """Record a visit that arrived through a referral link."""
        return self._dispatcher.execute(REFERRAL_VISIT, build_payload(claim=claim))

    def check(self, referral_code: str) -> APIResponse:
        """Validate a referral code for the current user."""
        payload = build_payload(fingerprint=self._dispatcher.fingerprint, referralCode=referral_code)
        return self._dispatcher.execute(REFERRAL_CHECK, payload)
