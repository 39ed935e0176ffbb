"""Proposify client - async client core for the Proposify workflow node.

This library provides:
- An authenticated request client with typed API errors
- Page-increment aggregation for list endpoints
- Webhook registration lifecycle and signed delivery handling
- A (resource, operation) dispatch table over the Proposify REST API

Example:
    ```python
    from proposify_client import ProposifyClient
    from proposify_client.auth import EnvCredentialProvider
    from proposify_client.operations import Resource, execute

    async with ProposifyClient(EnvCredentialProvider()) as client:
        won = await execute(client, Resource.PROPOSAL, "getAll", query={"status": "won"}, return_all=True)
    ```
"""

from proposify_client.client import BASE_URL, ProposifyClient
from proposify_client.errors import APIError
from proposify_client.pagination import PAGE_SIZE, fetch_all

__version__ = "0.1.0"

__all__ = [
    "BASE_URL",
    "PAGE_SIZE",
    "APIError",
    "ProposifyClient",
    "__version__",
    "fetch_all",
]
