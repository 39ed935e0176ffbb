"""Page-increment aggregation for Proposify list endpoints.

List endpoints take ``page`` (1-based) and ``limit`` and answer with
``{"data": [...], ...}``. ``fetch_all`` walks the pages in order until the
provider returns a short page.

When the total is an exact multiple of ``PAGE_SIZE`` the loop costs one
extra request, which comes back empty and ends the walk.
"""

import logging
from collections.abc import Mapping
from typing import Any, Protocol

logger = logging.getLogger(__name__)

PAGE_SIZE = 50


class SupportsRequest(Protocol):
    async def request(
        self,
        method: str,
        path: str,
        body: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
    ) -> Any: ...


async def fetch_all(
    client: SupportsRequest,
    method: str,
    path: str,
    body: Mapping[str, Any] | None = None,
    query: Mapping[str, Any] | None = None,
) -> list[dict]:
    """Collect the ``data`` records of every page.

    Pages are fetched one after another. A response without a ``data`` list
    ends the walk and the records gathered so far are returned; it is not
    treated as an error. There is no page cap: cancel the awaiting task to
    abort.

    Args:
        client: Anything with an async ``request`` (normally ``ProposifyClient``)
        method: HTTP method, normally GET
        path: List endpoint path
        body: Request body, passed through unchanged on every page
        query: Filters; copied, ``page`` and ``limit`` are added to the copy

    Returns:
        Records in provider order, pages concatenated
    """
    records: list[dict] = []
    page_query: dict[str, Any] = dict(query or {})
    page_query["limit"] = PAGE_SIZE
    page = 1

    while True:
        page_query["page"] = page
        response = await client.request(method, path, body, page_query)

        data = response.get("data") if isinstance(response, Mapping) else None
        if not isinstance(data, list):
            logger.debug(f"{path}: page {page} has no data list, stopping with {len(records)} records")
            break

        records.extend(data)
        if len(data) < PAGE_SIZE:
            break

        page += 1

    logger.debug(f"{path}: fetched {len(records)} records over {page} page(s)")
    return records
