"""Pytest configuration and shared fixtures for proposify-client tests."""

import httpx
import pytest

from proposify_client import ProposifyClient
from proposify_client.auth import static_credential
from proposify_client.testing import MockProposifyAPI

TEST_API_KEY = "test-api-key"


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear Proposify environment variables before each test.

    This prevents a developer's real key or .env values leaking into tests.
    """
    import os

    for key in list(os.environ.keys()):
        if key.startswith("PROPOSIFY_"):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def api() -> MockProposifyAPI:
    """Fake Proposify API; register responses with ``api.add(...)``."""
    return MockProposifyAPI()


@pytest.fixture
async def client(api):
    """ProposifyClient wired to the fake API."""
    async with ProposifyClient(static_credential(TEST_API_KEY), transport=httpx.MockTransport(api)) as proposify:
        yield proposify
