"""Request dispatch for the sync client."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

import httpx

from .._http import build_headers, handle_response, request_options, transport_error
from .._retry import with_retry_sync
from .._routes import CREDIT_OPERATIONS, Route, resolve_route
from ..auth.constants import ERROR_REAUTH_FAILED, ERROR_TOKEN_UNAVAILABLE
from ..auth.modes import AuthMode, ResolvedAuth
from ..exceptions import AuthError, GrowthKitSDKError, NetworkError
from ..types import APIResponse

if TYPE_CHECKING:
    from ..auth.acquisition import TokenManager

logger = logging.getLogger(__name__)


class Dispatcher:
    """Sends requests for one client, handling auth headers, 401 recovery and retries."""

    def __init__(
        self,
        client: httpx.Client,
        base_url: str,
        auth: ResolvedAuth,
        *,
        fingerprint_source: Callable[[], Optional[str]],
        token_manager: TokenManager | None = None,
        max_retries: int,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        if auth.mode is AuthMode.PUBLIC_KEY and token_manager is None:
            raise ValueError("Public key mode requires a token manager")
        self._client = client
        self._base_url = base_url
        self._auth = auth
        self._fingerprint_source = fingerprint_source
        self._tokens = token_manager
        self._max_retries = max_retries
        self._sleep = sleep

    @property
    def fingerprint(self) -> str | None:
        return self._fingerprint_source()

    def execute(self, path: str, payload: dict[str, Any] | None = None, *, method: str = "POST") -> APIResponse:
        """Run an operation and return its envelope."""
        if path in CREDIT_OPERATIONS:
            return with_retry_sync(
                lambda: self.call(path, payload, method=method),
                self._max_retries,
                sleep=self._sleep,
            )

        result = self.call(path, payload, method=method)
        if result.error_code == NetworkError.code:
            return APIResponse.unavailable()
        return result

    def call(self, path: str, payload: dict[str, Any] | None = None, *, method: str = "POST") -> APIResponse:
        try:
            data = self.request(path, payload, method=method)
        except GrowthKitSDKError as exc:
            logger.debug("%s %s failed: %s", method, path, exc.message)
            return APIResponse.from_error(exc)
        return APIResponse.ok(data)

    def request(self, path: str, payload: dict[str, Any] | None = None, *, method: str = "POST") -> Any:
        route = resolve_route(self._auth.mode, path, method)
        reauth_in_flight = False

        while True:
            response = self._send(route, payload)
            if not self._is_unauthorized(response):
                return handle_response(response)
            if reauth_in_flight:
                raise AuthError(ERROR_REAUTH_FAILED)

            logger.info("Token rejected for %s; re-authenticating", route.path)
            reauth_in_flight = True
            self._tokens.invalidate()

    def _send(self, route: Route, payload: dict[str, Any] | None) -> httpx.Response:
        token = None
        if self._tokens is not None:
            if not self._tokens.ensure_valid_token():
                raise AuthError(ERROR_TOKEN_UNAVAILABLE)
            token = self._tokens.token.value

        headers = build_headers(self._auth, token=token, fingerprint=self._fingerprint_source())
        try:
            return self._client.request(
                route.method,
                f"{self._base_url}{route.path}",
                headers=headers,
                **request_options(route.method, payload),
            )
        except httpx.RequestError as exc:
            raise transport_error(exc) from exc

    def _is_unauthorized(self, response: httpx.Response) -> bool:
        return response.status_code == 401 and self._auth.mode is AuthMode.PUBLIC_KEY
