"""Shared HTTP request utilities for sync and async clients."""

from __future__ import annotations

from typing import Any

import httpx

from .auth.constants import FINGERPRINT_HEADER
from .auth.modes import AuthMode, ResolvedAuth
from .exceptions import BusinessError, NetworkError


def build_headers(
    auth: ResolvedAuth,
    *,
    token: str | None = None,
    fingerprint: str | None = None,
) -> dict[str, str]:
    """Build request headers with the authentication the mode calls for.

    Public-key requests carry the bearer token (the fingerprint is embedded
    in it); direct requests carry the private key and the fingerprint
    header; proxy requests carry only the fingerprint header.
    """
    headers = {"Content-Type": "application/json"}

    if auth.mode is AuthMode.PUBLIC_KEY:
        if token is None:
            raise ValueError("Public key requests require a bearer token")
        headers["Authorization"] = f"Bearer {token}"
        return headers

    if fingerprint:
        headers[FINGERPRINT_HEADER] = fingerprint
    if auth.mode is AuthMode.DIRECT:
        headers["Authorization"] = f"Bearer {auth.key}"

    return headers


def build_query_params(**kwargs: Any) -> dict[str, Any]:
    """Build query parameters, filtering out None values."""
    return {k: v for k, v in kwargs.items() if v is not None}


def build_payload(**kwargs: Any) -> dict[str, Any]:
    """Build a JSON body, filtering out None values."""
    return {k: v for k, v in kwargs.items() if v is not None}


def request_options(method: str, payload: dict[str, Any] | None) -> dict[str, Any]:
    """Place the payload in the query string for GET and in the body otherwise."""
    if not payload:
        return {}
    if method == "GET":
        return {"params": build_query_params(**payload)}
    return {"json": payload}


def transport_error(exc: httpx.RequestError) -> NetworkError:
    if isinstance(exc, httpx.TimeoutException):
        return NetworkError(f"Request timeout: {exc}")
    return NetworkError(f"Failed to fetch: {exc}")


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _error_text(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    for field in ("message", "error"):
        value = body.get(field)
        if isinstance(value, str) and value:
            return value
    return None


def handle_response(response: httpx.Response) -> Any:
    """Decode the response envelope, raising BusinessError for rejections.

    Returns the envelope's ``data`` member when present, otherwise the whole
    body (``{}`` for an empty body).
    """
    body = _decode_body(response)
    status = response.status_code

    if not 200 <= status < 300:
        raise BusinessError(
            message=_error_text(body) or f"Request failed ({status})",
            status_code=status,
            response=response,
        )

    if isinstance(body, dict) and body.get("success") is False:
        raise BusinessError(
            message=_error_text(body) or "Request failed",
            status_code=status,
            response=response,
        )

    if body is None:
        return {}
    if isinstance(body, dict) and body.get("data") is not None:
        return body["data"]
    return body
