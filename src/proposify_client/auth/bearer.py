"""Bearer token authentication for httpx."""

from collections.abc import Generator

import httpx

from proposify_client.auth.credentials import CredentialProvider


class BearerAuth(httpx.Auth):
    """Attach ``Authorization: Bearer <api key>`` to every request.

    The key is fetched from the provider per request, so the client never
    caches it.
    """

    def __init__(self, credential_provider: CredentialProvider):
        self._credential_provider = credential_provider

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        credential = self._credential_provider()
        request.headers["Authorization"] = f"Bearer {credential.api_key}"
        yield request
