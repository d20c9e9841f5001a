"""Logical operation paths and their wire routes per auth mode.

Proxy and direct clients call the ``/v1`` paths as-is. Public-key clients
are served by a separate ``/public`` route set. Paths without a public
counterpart pass through unchanged so newly added endpoints keep working
before this table learns about them.
"""

from __future__ import annotations

from typing import NamedTuple

from .auth.modes import AuthMode

ME = "/v1/me"
COMPLETE = "/v1/complete"
CLAIM_NAME = "/v1/claim/name"
CLAIM_EMAIL = "/v1/claim/email"
VERIFY_EMAIL = "/v1/verify/email"
WAITLIST = "/v1/waitlist"
REFERRAL_VISIT = "/v1/referral/visit"
REFERRAL_CHECK = "/v1/referral/check"
TRACK = "/v1/track"
INVITATION_REDEEM = "/v1/invitation/redeem"

# Operations that earn or spend credits; wrapped in the request retry policy.
CREDIT_OPERATIONS = frozenset({COMPLETE, CLAIM_NAME, CLAIM_EMAIL, VERIFY_EMAIL, INVITATION_REDEEM})


class Route(NamedTuple):
    method: str
    path: str


_PUBLIC_ROUTES: dict[str, Route] = {
    ME: Route("GET", "/public/user"),
    COMPLETE: Route("POST", "/public/complete"),
    CLAIM_NAME: Route("POST", "/public/claim/name"),
    CLAIM_EMAIL: Route("POST", "/public/claim/email"),
    VERIFY_EMAIL: Route("POST", "/public/verify/email"),
    WAITLIST: Route("POST", "/public/waitlist/join"),
    TRACK: Route("POST", "/public/track"),
    REFERRAL_CHECK: Route("POST", "/public/referral/check"),
    INVITATION_REDEEM: Route("POST", "/public/invitation/redeem"),
}


def resolve_route(mode: AuthMode, path: str, method: str = "POST") -> Route:
    """Map a logical path to the route to call in the given auth mode."""
    if mode is AuthMode.PUBLIC_KEY:
        return _PUBLIC_ROUTES.get(path, Route(method, path))
    return Route(method, path)
