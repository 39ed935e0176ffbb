"""Transport layers for the Proposify client.

Transport layers wrap an httpx async transport. The client stacks
``RateLimitLoggingTransport`` over ``httpx.AsyncHTTPTransport`` by default;
tests pass an ``httpx.MockTransport`` as the wrapped transport.
"""

from proposify_client.transport.rate_limit import RateLimitInfo, RateLimitLoggingTransport

__all__ = ["RateLimitInfo", "RateLimitLoggingTransport"]
