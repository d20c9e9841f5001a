"""Sync namespace classes for the GrowthKit SDK."""

from .claims import ClaimsNamespace
from .credits import CreditsNamespace
from .dispatcher import Dispatcher
from .events import EventsNamespace
from .referrals import ReferralsNamespace
from .waitlist import WaitlistNamespace

__all__ = [
    "Dispatcher",
    "CreditsNamespace",
    "ClaimsNamespace",
    "WaitlistNamespace",
    "ReferralsNamespace",
    "EventsNamespace",
]
