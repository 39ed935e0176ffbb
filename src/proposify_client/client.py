"""Authenticated request client for the Proposify REST API.

Example:
    ```python
    from proposify_client import ProposifyClient
    from proposify_client.auth import EnvCredentialProvider

    async with ProposifyClient(EnvCredentialProvider()) as client:
        me = await client.request("GET", "/users/me")
        proposals = await client.request_all_items("GET", "/proposals", query={"status": "sent"})
        pdf = await client.download(f"/proposals/{proposals[0]['id']}/pdf")
    ```
"""

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import httpx

from proposify_client.auth.bearer import BearerAuth
from proposify_client.auth.credentials import CredentialProvider, EnvCredentialProvider
from proposify_client.errors.exceptions import ResponseDecodeError, TransportError
from proposify_client.errors.handler import raise_for_status
from proposify_client.pagination import fetch_all
from proposify_client.transport.rate_limit import RateLimitLoggingTransport

if TYPE_CHECKING:
    from proposify_client.config import ProposifySettings

logger = logging.getLogger(__name__)

BASE_URL = "https://api.proposify.com/v1"

ALLOWED_METHODS: frozenset[str] = frozenset(["GET", "POST", "PUT", "DELETE"])


class ProposifyClient:
    """Issue single authenticated calls against the Proposify API.

    There is no retry and no timeout override: httpx defaults apply and every
    failure surfaces immediately as an ``APIError``.

    Args:
        credential_provider: Called once per request for the API key
        base_url: API root, without trailing slash
        transport: Underlying httpx transport (``httpx.MockTransport`` in tests)
        rate_limit_warn_below: Remaining-quota threshold for warnings
    """

    def __init__(
        self,
        credential_provider: CredentialProvider,
        *,
        base_url: str = BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        rate_limit_warn_below: int = 10,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.transport = RateLimitLoggingTransport(
            wrapped_transport=transport or httpx.AsyncHTTPTransport(),
            warn_below=rate_limit_warn_below,
        )
        self._client = httpx.AsyncClient(
            auth=BearerAuth(credential_provider),
            transport=self.transport,
            headers={"Accept": "application/json"},
        )

    @classmethod
    def from_settings(
        cls,
        settings: "ProposifySettings",
        credential_provider: CredentialProvider | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "ProposifyClient":
        """Build a client from ``ProposifySettings``.

        Falls back to ``EnvCredentialProvider`` when no provider is given.
        """
        return cls(
            credential_provider or EnvCredentialProvider(),
            base_url=settings.base_url,
            transport=transport,
            rate_limit_warn_below=settings.rate_limit_warn_below,
        )

    async def __aenter__(self) -> "ProposifyClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _url(self, path: str) -> str:
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}{path}"

    async def _send(
        self,
        method: str,
        path: str,
        *,
        body: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        method = method.upper()
        if method not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported HTTP method {method!r}, expected one of {sorted(ALLOWED_METHODS)}")

        kwargs: dict[str, Any] = {}
        # Empty payloads are never attached
        if body:
            kwargs["json"] = dict(body)
        if query:
            kwargs["params"] = dict(query)

        logger.debug(f"{method} {path} query={sorted(query) if query else []}")

        try:
            response = await self._client.request(method, self._url(path), **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}", cause=e) from e

        raise_for_status(response)
        return response

    async def request(
        self,
        method: str,
        path: str,
        body: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Args:
            method: GET, POST, PUT or DELETE
            path: Path relative to the base URL, e.g. ``/proposals/123``
            body: JSON body, sent only when non-empty
            query: Query parameters, sent only when non-empty

        Returns:
            Decoded JSON. An empty 2xx body (e.g. after DELETE) yields ``{}``.

        Raises:
            ValueError: For methods outside GET/POST/PUT/DELETE
            APIError: For non-2xx responses, network failures and bad JSON
        """
        response = await self._send(method, path, body=body, query=query)

        if not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise ResponseDecodeError(
                f"{method.upper()} {path} returned invalid JSON: {e}",
                status_code=response.status_code,
                response=response,
            ) from e

    async def download(self, path: str, query: Mapping[str, Any] | None = None) -> bytes:
        """GET ``path`` and return the raw response bytes (PDF/CSV exports).

        Raises:
            APIError: Same wrapping as ``request``
        """
        response = await self._send("GET", path, query=query)
        return response.content

    async def request_all_items(
        self,
        method: str,
        path: str,
        body: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
    ) -> list[dict]:
        """Fetch every page of a list endpoint. See ``pagination.fetch_all``."""
        return await fetch_all(self, method, path, body=body, query=query)
