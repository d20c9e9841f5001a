"""Tests for the async AsyncGrowthKitClient."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from conftest import BASE_URL, json_response, token_response
from growthkit import APIResponse, AsyncGrowthKitClient, AuthMode, MappingTokenStore
from growthkit.auth.constants import ERROR_REAUTH_FAILED, TOKEN_ENDPOINT, TOKEN_STORAGE_KEY
from growthkit.config import DEFAULT_PROXY_URL


class TestAsyncGrowthKitClientInit:
    @pytest.mark.asyncio
    async def test_public_key_client(self):
        client = AsyncGrowthKitClient(public_key="pk_test")
        assert client.auth_mode is AuthMode.PUBLIC_KEY
        assert client.token_manager is not None
        assert client._base_url == BASE_URL
        await client.close()

    @pytest.mark.asyncio
    async def test_proxy_client_uses_proxy_mount(self):
        client = AsyncGrowthKitClient()
        assert client.auth_mode is AuthMode.PROXY
        assert client.token_manager is None
        assert client._base_url == DEFAULT_PROXY_URL
        await client.close()

    @pytest.mark.asyncio
    async def test_direct_client_from_env(self, monkeypatch):
        monkeypatch.setenv("GROWTHKIT_API_KEY", "gk_env")
        monkeypatch.setenv("GROWTHKIT_API_URL", "https://custom.example.com/api/")
        client = AsyncGrowthKitClient()
        assert client.auth_mode is AuthMode.DIRECT
        assert client._base_url == "https://custom.example.com/api"
        await client.close()

    def test_invalid_max_retries(self):
        with pytest.raises(ValueError):
            AsyncGrowthKitClient(max_retries=0)


@pytest.mark.asyncio
class TestPublicKeyMode:
    async def test_get_me_uses_token_on_public_route(self, fake_api):
        fake_api.add("POST", TOKEN_ENDPOINT, token_response("abc", seconds=60))
        fake_api.add("GET", "/public/user", json_response(200, {"success": True, "data": {"credits": 10}}))

        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock, side_effect=fake_api):
            async with AsyncGrowthKitClient(public_key="pk_test", fingerprint="fp-1") as client:
                result = await client.get_me()

        assert result == APIResponse(success=True, data={"credits": 10})
        (call,) = fake_api.calls_to("/public/user")
        assert call.url == f"{BASE_URL}/public/user"
        assert call.headers["Authorization"] == "Bearer abc"
        assert call.headers["Content-Type"] == "application/json"
        assert "X-Fingerprint" not in call.headers

    async def test_token_reused_across_requests(self, fake_api):
        fake_api.add("POST", TOKEN_ENDPOINT, token_response("abc"))
        fake_api.add("POST", "/public/claim/name", json_response(200, {"claimed": True}))
        fake_api.add("POST", "/public/track", json_response(200, {"tracked": True}))

        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock, side_effect=fake_api):
            async with AsyncGrowthKitClient(public_key="pk_test", fingerprint="fp-1") as client:
                await client.claims.name("Ada")
                await client.events.track([{"eventName": "open", "timestamp": 1}])

        assert len(fake_api.calls_to(TOKEN_ENDPOINT)) == 1

    async def test_single_401_is_recovered_transparently(self, fake_api):
        fake_api.add("POST", TOKEN_ENDPOINT, token_response("stale"), token_response("fresh"))
        fake_api.add(
            "GET",
            "/public/user",
            json_response(401, {"error": "Unauthorized"}),
            json_response(200, {"success": True, "data": {"credits": 3}}),
        )
        storage: dict[str, str] = {}

        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock, side_effect=fake_api):
            async with AsyncGrowthKitClient(
                public_key="pk_test", fingerprint="fp-1", token_store=MappingTokenStore(storage)
            ) as client:
                result = await client.get_me()

        assert result.success
        assert result.data == {"credits": 3}
        user_calls = fake_api.calls_to("/public/user")
        assert [c.headers["Authorization"] for c in user_calls] == ["Bearer stale", "Bearer fresh"]
        assert '"fresh"' in storage[TOKEN_STORAGE_KEY]

    async def test_repeated_401_runs_one_recovery_and_surfaces(self, fake_api):
        fake_api.add("POST", TOKEN_ENDPOINT, token_response("t1"), token_response("t2"), token_response("t3"))
        fake_api.add("GET", "/public/user", json_response(401, {"error": "Unauthorized"}))

        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock, side_effect=fake_api):
            async with AsyncGrowthKitClient(public_key="pk_test", fingerprint="fp-1") as client:
                result = await client.get_me()

        assert not result.success
        assert result.error == ERROR_REAUTH_FAILED
        assert result.error_code == "auth_error"
        assert len(fake_api.calls_to(TOKEN_ENDPOINT)) == 2
        assert len(fake_api.calls_to("/public/user")) == 2

    async def test_token_unavailable_surfaces_auth_error(self, fake_api, recording_sleep):
        fake_api.add("POST", TOKEN_ENDPOINT, json_response(401, {"error": "Invalid public key"}))

        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock, side_effect=fake_api):
            async with AsyncGrowthKitClient(
                public_key="pk_bad", fingerprint="fp-1", max_token_attempts=2, sleep=recording_sleep
            ) as client:
                result = await client.get_me()

        assert result.error_code == "auth_error"
        assert fake_api.calls_to("/public/user") == []

    async def test_fingerprint_provider_called_once(self, fake_api):
        fake_api.add("POST", TOKEN_ENDPOINT, token_response("abc"))
        fake_api.add("GET", "/public/user", json_response(200, {"credits": 1}))
        calls = []

        def provider():
            calls.append(1)
            return "fp-provided"

        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock, side_effect=fake_api):
            async with AsyncGrowthKitClient(public_key="pk_test", fingerprint_provider=provider) as client:
                await client.get_me()
                await client.get_me()

        assert len(calls) == 1
        assert fake_api.calls_to(TOKEN_ENDPOINT)[0].kwargs["json"]["fingerprint"] == "fp-provided"


@pytest.mark.asyncio
class TestCreditRetry:
    async def test_insufficient_credits_is_returned_after_one_attempt(self, fake_api, recording_sleep):
        fake_api.add("POST", TOKEN_ENDPOINT, token_response("abc"))
        fake_api.add("POST", "/public/complete", json_response(402, {"success": False, "error": "insufficient credits"}))

        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock, side_effect=fake_api):
            async with AsyncGrowthKitClient(public_key="pk_test", fingerprint="fp-1", sleep=recording_sleep) as client:
                result = await client.credits.complete_action("generate")

        assert not result.success
        assert result.error == "insufficient credits"
        assert result.error_code == "business_error"
        assert len(fake_api.calls_to("/public/complete")) == 1
        assert recording_sleep.delays == []

    async def test_fetch_failures_retried_until_success(self, fake_api, recording_sleep):
        fake_api.add("POST", TOKEN_ENDPOINT, token_response("abc"))
        fake_api.add(
            "POST",
            "/public/complete",
            httpx.ConnectError("Failed to fetch"),
            httpx.ConnectError("Failed to fetch"),
            json_response(200, {"success": True, "data": {"creditsRemaining": 9, "creditsConsumed": 1}}),
        )

        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock, side_effect=fake_api):
            async with AsyncGrowthKitClient(public_key="pk_test", fingerprint="fp-1", sleep=recording_sleep) as client:
                result = await client.credits.complete_action("generate", credits_required=1, usd_value=2.5)

        assert result.success
        assert result.data["creditsRemaining"] == 9
        complete_calls = fake_api.calls_to("/public/complete")
        assert len(complete_calls) == 3
        assert recording_sleep.delays == [1.0, 2.0]
        assert complete_calls[0].kwargs["json"] == {
            "fingerprint": "fp-1",
            "action": "generate",
            "creditsRequired": 1,
            "usdValue": 2.5,
        }

    async def test_exhausted_retries_hide_transport_detail(self, fake_api, recording_sleep):
        fake_api.add("POST", "/v1/claim/email", httpx.ConnectError("[Errno 111] Connection refused"))

        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock, side_effect=fake_api):
            async with AsyncGrowthKitClient(fingerprint="fp-1", sleep=recording_sleep) as client:
                result = await client.claims.email("ada@example.com")

        assert result.error_code == "temporarily_unavailable"
        assert "Errno" not in result.error
        assert len(fake_api.calls) == 3

    async def test_non_credit_operation_is_not_retried(self, fake_api, recording_sleep):
        fake_api.add("POST", "/v1/track", httpx.ReadTimeout("timed out"))

        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock, side_effect=fake_api):
            async with AsyncGrowthKitClient(fingerprint="fp-1", sleep=recording_sleep) as client:
                result = await client.events.track([{"eventName": "open", "timestamp": 1}], session_id="s1")

        assert result.error_code == "temporarily_unavailable"
        assert len(fake_api.calls) == 1
        assert recording_sleep.delays == []


@pytest.mark.asyncio
class TestOtherModes:
    async def test_direct_mode_headers_and_paths(self, fake_api):
        fake_api.add("POST", "/v1/me", json_response(200, {"success": True, "data": {"credits": 2}}))

        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock, side_effect=fake_api):
            async with AsyncGrowthKitClient(private_key="gk_secret", fingerprint="fp-1") as client:
                result = await client.get_me(claim="c1")

        assert result.data == {"credits": 2}
        (call,) = fake_api.calls
        assert call.method == "POST"
        assert call.url == f"{BASE_URL}/v1/me"
        assert call.headers["Authorization"] == "Bearer gk_secret"
        assert call.headers["X-Fingerprint"] == "fp-1"
        assert call.kwargs["json"] == {"fingerprint": "fp-1", "claim": "c1"}

    async def test_direct_mode_401_is_a_business_failure(self, fake_api):
        fake_api.add("POST", "/v1/me", json_response(401, {"error": "Invalid API key"}))

        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock, side_effect=fake_api):
            async with AsyncGrowthKitClient(private_key="gk_wrong", fingerprint="fp-1") as client:
                result = await client.get_me()

        assert result.error == "Invalid API key"
        assert result.error_code == "business_error"
        assert len(fake_api.calls) == 1

    async def test_proxy_mode_sends_no_authorization(self, fake_api):
        fake_api.add("POST", "/v1/waitlist", json_response(200, {"joined": True, "position": 4}))

        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock, side_effect=fake_api):
            async with AsyncGrowthKitClient(fingerprint="fp-1") as client:
                result = await client.waitlist.join("ada@example.com", product_tag="pro")

        assert result.data == {"joined": True, "position": 4}
        (call,) = fake_api.calls
        assert call.url == f"{DEFAULT_PROXY_URL}/v1/waitlist"
        assert "Authorization" not in call.headers
        assert call.headers["X-Fingerprint"] == "fp-1"
        assert call.kwargs["json"] == {"email": "ada@example.com", "fingerprint": "fp-1", "productTag": "pro"}

    async def test_referral_visit_passes_through_in_public_mode(self, fake_api):
        fake_api.add("POST", TOKEN_ENDPOINT, token_response("abc"))
        fake_api.add("POST", "/v1/referral/visit", json_response(200, {"success": True, "data": {}}))

        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock, side_effect=fake_api):
            async with AsyncGrowthKitClient(public_key="pk_test", fingerprint="fp-1") as client:
                result = await client.referrals.track_visit(claim="c1")

        assert result.success
        (call,) = fake_api.calls_to("/v1/referral/visit")
        assert call.headers["Authorization"] == "Bearer abc"


@pytest.mark.asyncio
class TestRequestErrors:
    async def test_token_decoding_error_returns_envelope(self, fake_api, recording_sleep):
        fake_api.add("POST", TOKEN_ENDPOINT, httpx.DecodingError("corrupt gzip"))

        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock, side_effect=fake_api):
            async with AsyncGrowthKitClient(
                public_key="pk_test", fingerprint="fp-1", max_token_attempts=2, sleep=recording_sleep
            ) as client:
                result = await client.get_me()

        assert not result.success
        assert result.error_code == "auth_error"
        assert recording_sleep.delays == [1.0]
        assert fake_api.calls_to("/public/user") == []

    async def test_too_many_redirects_returns_envelope(self, fake_api):
        fake_api.add("POST", "/v1/me", httpx.TooManyRedirects("Exceeded maximum allowed redirects."))

        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock, side_effect=fake_api):
            async with AsyncGrowthKitClient(private_key="gk_secret", fingerprint="fp-1") as client:
                result = await client.get_me()

        assert result.error_code == "temporarily_unavailable"

    async def test_decoding_error_on_credit_operation_is_retried(self, fake_api, recording_sleep):
        fake_api.add(
            "POST",
            "/v1/complete",
            httpx.DecodingError("corrupt gzip"),
            json_response(200, {"success": True, "data": {"creditsRemaining": 1}}),
        )

        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock, side_effect=fake_api):
            async with AsyncGrowthKitClient(private_key="gk_secret", fingerprint="fp-1", sleep=recording_sleep) as client:
                result = await client.credits.complete_action()

        assert result.data == {"creditsRemaining": 1}
        assert recording_sleep.delays == [1.0]
