"""Async namespace classes for the GrowthKit SDK."""

from .claims import AsyncClaimsNamespace
from .credits import AsyncCreditsNamespace
from .dispatcher import AsyncDispatcher
from .events import AsyncEventsNamespace
from .referrals import AsyncReferralsNamespace
from .waitlist import AsyncWaitlistNamespace

__all__ = [
    "AsyncDispatcher",
    "AsyncCreditsNamespace",
    "AsyncClaimsNamespace",
    "AsyncWaitlistNamespace",
    "AsyncReferralsNamespace",
    "AsyncEventsNamespace",
]
