"""Tests for rate-limit header inspection."""

import logging

import httpx
import pytest

from proposify_client.transport import RateLimitInfo, RateLimitLoggingTransport


class TestRateLimitInfo:
    """Test parsing of the quota headers."""

    @pytest.mark.unit
    def test_reads_headers(self):
        headers = httpx.Headers({"X-RateLimit-Remaining": "42", "X-RateLimit-Reset": "17"})

        assert RateLimitInfo.from_headers(headers) == RateLimitInfo(remaining=42, reset_in=17)

    @pytest.mark.unit
    def test_defaults_when_absent(self):
        assert RateLimitInfo.from_headers({}) == RateLimitInfo(remaining=100, reset_in=60)

    @pytest.mark.unit
    def test_defaults_when_malformed(self):
        headers = {"x-ratelimit-remaining": "many", "x-ratelimit-reset": ""}

        assert RateLimitInfo.from_headers(headers) == RateLimitInfo(remaining=100, reset_in=60)


class TestRateLimitLoggingTransport:
    """Test the recording transport wrapper."""

    @pytest.mark.unit
    async def test_records_latest_quota(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={}, headers={"x-ratelimit-remaining": "80", "x-ratelimit-reset": "30"})

        transport = RateLimitLoggingTransport(wrapped_transport=httpx.MockTransport(handler))

        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.get("https://api.proposify.com/v1/users/me")

        assert response.status_code == 200
        assert transport.last_rate_limit == RateLimitInfo(remaining=80, reset_in=30)

    @pytest.mark.unit
    async def test_no_headers_leaves_quota_unknown(self):
        transport = RateLimitLoggingTransport(wrapped_transport=httpx.MockTransport(lambda r: httpx.Response(204)))

        async with httpx.AsyncClient(transport=transport) as client:
            await client.get("https://api.proposify.com/v1/users/me")

        assert transport.last_rate_limit is None

    @pytest.mark.unit
    async def test_warns_when_quota_low(self, caplog):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={}, headers={"x-ratelimit-remaining": "3"})

        transport = RateLimitLoggingTransport(wrapped_transport=httpx.MockTransport(handler), warn_below=5)

        with caplog.at_level(logging.WARNING, logger="proposify_client.transport.rate_limit"):
            async with httpx.AsyncClient(transport=transport) as client:
                await client.get("https://api.proposify.com/v1/proposals")

        assert "3 requests left" in caplog.text
        assert "/v1/proposals" in caplog.text

    @pytest.mark.unit
    async def test_never_retries(self):
        attempts = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal attempts
            attempts += 1
            return httpx.Response(429, headers={"retry-after": "1", "x-ratelimit-remaining": "0"})

        transport = RateLimitLoggingTransport(wrapped_transport=httpx.MockTransport(handler))

        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.get("https://api.proposify.com/v1/proposals")

        assert response.status_code == 429
        assert attempts == 1
