"""Rate-limit header inspection for Proposify responses.

Proposify reports its quota in ``X-RateLimit-Remaining`` and
``X-RateLimit-Reset``. The client does not retry or sleep on its own; this
transport only records the latest values and warns when the quota runs low,
so the host can decide whether to slow down.

Example:
    ```python
    import httpx

    from proposify_client.transport import RateLimitLoggingTransport

    transport = RateLimitLoggingTransport(
        wrapped_transport=httpx.AsyncHTTPTransport(),
        warn_below=10,
    )
    async with httpx.AsyncClient(transport=transport) as client:
        await client.get("https://api.proposify.com/v1/users/me")
    print(transport.last_rate_limit)
    ```
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)

DEFAULT_REMAINING = 100
DEFAULT_RESET_SECONDS = 60


def _header_int(headers: Mapping[str, str], name: str, default: int) -> int:
    value = headers.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


@dataclass(frozen=True)
class RateLimitInfo:
    """Quota reported by the provider on one response."""

    remaining: int = DEFAULT_REMAINING
    reset_in: int = DEFAULT_RESET_SECONDS

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "RateLimitInfo":
        """Read the quota headers, falling back to defaults when absent or malformed.

        ``headers`` should be case-insensitive (``httpx.Headers``) or use
        lower-case keys.
        """
        return cls(
            remaining=_header_int(headers, "x-ratelimit-remaining", DEFAULT_REMAINING),
            reset_in=_header_int(headers, "x-ratelimit-reset", DEFAULT_RESET_SECONDS),
        )


class RateLimitLoggingTransport(httpx.AsyncBaseTransport):
    """Transport that records rate-limit headers from every response.

    Args:
        wrapped_transport: The underlying transport to delegate to
        warn_below: Log a warning when remaining quota drops below this
    """

    def __init__(
        self,
        *,
        wrapped_transport: httpx.AsyncBaseTransport,
        warn_below: int = 10,
    ) -> None:
        self._wrapped_transport = wrapped_transport
        self.warn_below = warn_below
        self.last_rate_limit: RateLimitInfo | None = None

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        response = await self._wrapped_transport.handle_async_request(request)

        if "x-ratelimit-remaining" in response.headers:
            info = RateLimitInfo.from_headers(response.headers)
            self.last_rate_limit = info
            if info.remaining < self.warn_below:
                logger.warning(
                    f"Proposify rate limit low after {request.method} {request.url.path}: "
                    f"{info.remaining} requests left, resets in {info.reset_in}s"
                )

        return response

    async def aclose(self) -> None:
        await self._wrapped_transport.aclose()
