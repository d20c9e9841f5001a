"""Test configuration for GrowthKit SDK tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
import pytest

BASE_URL = "https://growth.fenixblack.ai/api"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep credentials from the developer's shell out of the tests."""
    for name in ("GROWTHKIT_API_KEY", "GROWTHKIT_PUBLIC_KEY", "GROWTHKIT_API_URL", "GROWTHKIT_FINGERPRINT"):
        monkeypatch.delenv(name, raising=False)


def json_response(status_code: int, body: Any) -> httpx.Response:
    return httpx.Response(status_code, json=body)


def token_response(value: str = "abc", seconds: float = 60) -> httpx.Response:
    expires_at = datetime.now(timezone.utc) + timedelta(seconds=seconds)
    return json_response(200, {"success": True, "data": {"token": value, "expiresAt": expires_at.isoformat()}})


@dataclass
class Call:
    method: str
    url: str
    kwargs: dict[str, Any]

    @property
    def headers(self) -> dict[str, str]:
        return self.kwargs.get("headers") or {}


@dataclass
class FakeAPI:
    """Stands in for ``httpx.(Async)Client.request``.

    Each route holds a queue of responses (or exceptions to raise); the last
    entry repeats once the queue is drained.
    """

    routes: list[tuple[str, str, list[Any]]] = field(default_factory=list)
    calls: list[Call] = field(default_factory=list)

    def add(self, method: str, path: str, *outcomes: Any) -> FakeAPI:
        self.routes.append((method, path, list(outcomes)))
        return self

    def __call__(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        self.calls.append(Call(method, url, kwargs))
        for route_method, path, outcomes in self.routes:
            if route_method == method and url.endswith(path):
                outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        raise AssertionError(f"Unexpected request: {method} {url}")

    def calls_to(self, path: str) -> list[Call]:
        return [call for call in self.calls if call.url.endswith(path)]


class RecordingSleep:
    """Async sleep replacement that records the requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def fake_api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
