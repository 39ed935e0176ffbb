"""Resource/operation dispatch for the Proposify node.

Every operation the node offers is one row in ``ROUTES``: the HTTP method,
the path template and how the response is consumed. ``execute`` looks the
row up and issues the call; there is no per-resource code.

Example:
    ```python
    proposal = await execute(client, Resource.PROPOSAL, "get", {"proposal_id": "42"})
    every_fee = await execute(client, Resource.FEE, "getAll", {"proposal_id": "42"}, return_all=True)
    ```
"""

import logging
import string
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import Any
from urllib.parse import quote

from proposify_client.auth.exceptions import CredentialError
from proposify_client.client import ProposifyClient
from proposify_client.errors.exceptions import APIError
from proposify_client.pagination import PAGE_SIZE

logger = logging.getLogger(__name__)


class Resource(StrEnum):
    ANALYTICS = "analytics"
    COMMENT = "comment"
    CONTACT = "contact"
    FEE = "fee"
    PROPOSAL = "proposal"
    PROSPECT = "prospect"
    SECTION = "section"
    SIGNATURE = "signature"
    TEMPLATE = "template"
    USER = "user"


class RouteKind(Enum):
    ONE = "one"  # single JSON request
    LIST = "list"  # paginated list, "data" array
    BINARY = "binary"  # raw file download


class UnsupportedOperationError(LookupError):
    """No route is registered for a (resource, operation) pair."""

    def __init__(self, resource: str, operation: str):
        super().__init__(f"Operation {operation!r} is not supported for resource {resource!r}")
        self.resource = resource
        self.operation = operation


@dataclass(frozen=True)
class Route:
    method: str
    path: str
    kind: RouteKind = RouteKind.ONE

    @property
    def path_params(self) -> list[str]:
        return [name for _, name, _, _ in string.Formatter().parse(self.path) if name]

    def format_path(self, params: Mapping[str, Any]) -> str:
        """Fill the path template, URL-quoting each value.

        Raises:
            ValueError: If a path parameter is missing or empty
        """
        values = {}
        for name in self.path_params:
            value = params.get(name)
            if value is None or value == "":
                raise ValueError(f"Missing required parameter {name!r} for {self.method} {self.path}")
            values[name] = quote(str(value), safe="")
        return self.path.format(**values)


def _crud(prefix: str, id_param: str) -> dict[str, Route]:
    item = f"{prefix}/{{{id_param}}}"
    return {
        "get": Route("GET", item),
        "getAll": Route("GET", prefix, RouteKind.LIST),
        "create": Route("POST", prefix),
        "update": Route("PUT", item),
        "delete": Route("DELETE", item),
    }


_PROPOSAL = "/proposals/{proposal_id}"

_RESOURCE_ROUTES: dict[Resource, dict[str, Route]] = {
    Resource.PROPOSAL: {
        **_crud("/proposals", "proposal_id"),
        "duplicate": Route("POST", f"{_PROPOSAL}/duplicate"),
        "send": Route("POST", f"{_PROPOSAL}/send"),
        "archive": Route("POST", f"{_PROPOSAL}/archive"),
        "restore": Route("POST", f"{_PROPOSAL}/restore"),
        "getMetrics": Route("GET", f"{_PROPOSAL}/metrics"),
        "getContent": Route("GET", f"{_PROPOSAL}/content"),
        "updateContent": Route("PUT", f"{_PROPOSAL}/content"),
        "downloadPdf": Route("GET", f"{_PROPOSAL}/pdf", RouteKind.BINARY),
        "setWon": Route("POST", f"{_PROPOSAL}/won"),
        "setLost": Route("POST", f"{_PROPOSAL}/lost"),
    },
    Resource.TEMPLATE: {
        **_crud("/templates", "template_id"),
        "duplicate": Route("POST", "/templates/{template_id}/duplicate"),
        "getContent": Route("GET", "/templates/{template_id}/content"),
        "updateContent": Route("PUT", "/templates/{template_id}/content"),
        "getSections": Route("GET", "/templates/{template_id}/sections"),
        "getVariables": Route("GET", "/templates/{template_id}/variables"),
    },
    Resource.PROSPECT: {
        **_crud("/prospects", "prospect_id"),
        "getProposals": Route("GET", "/prospects/{prospect_id}/proposals"),
        "merge": Route("POST", "/prospects/{prospect_id}/merge"),
    },
    Resource.CONTACT: {
        **_crud("/contacts", "contact_id"),
        "addToProspect": Route("POST", "/contacts/{contact_id}/prospect"),
        "removeFromProspect": Route("DELETE", "/contacts/{contact_id}/prospect/{prospect_id}"),
    },
    Resource.SECTION: {
        **_crud("/sections", "section_id"),
        "duplicate": Route("POST", "/sections/{section_id}/duplicate"),
        "addToLibrary": Route("POST", "/sections/{section_id}/library"),
        "getVersions": Route("GET", "/sections/{section_id}/versions"),
    },
    Resource.FEE: {
        **_crud(f"{_PROPOSAL}/fees", "fee_id"),
        "reorder": Route("POST", f"{_PROPOSAL}/fees/reorder"),
        "calculate": Route("POST", f"{_PROPOSAL}/fees/calculate"),
    },
    Resource.SIGNATURE: {
        **_crud(f"{_PROPOSAL}/signatures", "signature_id"),
        "getStatus": Route("GET", f"{_PROPOSAL}/signatures/{{signature_id}}/status"),
        "sendReminder": Route("POST", f"{_PROPOSAL}/signatures/{{signature_id}}/remind"),
        "revoke": Route("POST", f"{_PROPOSAL}/signatures/{{signature_id}}/revoke"),
    },
    Resource.COMMENT: {
        **_crud(f"{_PROPOSAL}/comments", "comment_id"),
        "resolve": Route("POST", f"{_PROPOSAL}/comments/{{comment_id}}/resolve"),
        # a reply is a new comment carrying parent_id in the body
        "reply": Route("POST", f"{_PROPOSAL}/comments"),
    },
    Resource.USER: {
        "get": Route("GET", "/users/{user_id}"),
        "getAll": Route("GET", "/users", RouteKind.LIST),
        "getCurrent": Route("GET", "/users/me"),
        "getProposals": Route("GET", "/users/{user_id}/proposals", RouteKind.LIST),
        "getActivity": Route("GET", "/users/{user_id}/activity"),
    },
    Resource.ANALYTICS: {
        "getProposalViews": Route("GET", f"{_PROPOSAL}/analytics/views"),
        "getViewers": Route("GET", f"{_PROPOSAL}/analytics/viewers"),
        "getViewerDetails": Route("GET", f"{_PROPOSAL}/analytics/viewers/{{viewer_id}}"),
        "getEngagement": Route("GET", f"{_PROPOSAL}/analytics/engagement"),
        "getPageViews": Route("GET", f"{_PROPOSAL}/analytics/pages"),
        "getTimeSpent": Route("GET", f"{_PROPOSAL}/analytics/time"),
        "getDeviceInfo": Route("GET", f"{_PROPOSAL}/analytics/devices"),
        "exportReport": Route("GET", f"{_PROPOSAL}/analytics/export", RouteKind.BINARY),
    },
}

ROUTES: dict[tuple[Resource, str], Route] = {
    (resource, operation): route
    for resource, routes in _RESOURCE_ROUTES.items()
    for operation, route in routes.items()
}


def get_route(resource: Resource | str, operation: str) -> Route:
    """Look up the route for a (resource, operation) pair.

    Raises:
        UnsupportedOperationError: For unknown resources or operations
    """
    try:
        key = (Resource(resource), operation)
    except ValueError:
        raise UnsupportedOperationError(str(resource), operation) from None
    if key not in ROUTES:
        raise UnsupportedOperationError(str(resource), operation)
    return ROUTES[key]


async def execute(
    client: ProposifyClient,
    resource: Resource | str,
    operation: str,
    params: Mapping[str, Any] | None = None,
    *,
    body: Mapping[str, Any] | None = None,
    query: Mapping[str, Any] | None = None,
    return_all: bool = False,
    limit: int = PAGE_SIZE,
) -> Any:
    """Run one operation.

    Args:
        client: Request client
        resource: Resource name or ``Resource``
        operation: Operation name, e.g. ``"getAll"``
        params: Path parameters (``proposal_id``, ``fee_id``, ...)
        body: Request body
        query: Query parameters
        return_all: For list operations, walk every page
        limit: For list operations without ``return_all``, the page size

    Returns:
        Decoded JSON for single calls, a list of records for list
        operations, bytes for downloads

    Raises:
        UnsupportedOperationError: Unknown (resource, operation)
        ValueError: A path parameter is missing
        APIError: The request failed
    """
    route = get_route(resource, operation)
    path = route.format_path(params or {})

    if route.kind is RouteKind.BINARY:
        return await client.download(path, query)

    if route.kind is RouteKind.LIST:
        if return_all:
            return await client.request_all_items(route.method, path, body, query)
        page_query = {**(query or {}), "limit": limit, "page": 1}
        response = await client.request(route.method, path, body, page_query)
        data = response.get("data") if isinstance(response, dict) else None
        return data if isinstance(data, list) else []

    return await client.request(route.method, path, body, query)


@dataclass
class OperationInput:
    """Arguments for one input record of a batch."""

    params: dict[str, Any] = field(default_factory=dict)
    body: dict[str, Any] | None = None
    query: dict[str, Any] | None = None
    return_all: bool = False
    limit: int = PAGE_SIZE


@dataclass
class OutputItem:
    """One output record, paired with the input record that produced it."""

    json: dict[str, Any]
    item_index: int
    binary: bytes | None = None


def _to_output(result: Any, route: Route, index: int) -> list[OutputItem]:
    if isinstance(result, bytes):
        return [OutputItem(json={"size": len(result)}, item_index=index, binary=result)]
    if isinstance(result, list):
        return [
            OutputItem(json=record if isinstance(record, dict) else {"value": record}, item_index=index)
            for record in result
        ]
    if route.method == "DELETE" and not result:
        return [OutputItem(json={"success": True}, item_index=index)]
    if not isinstance(result, dict):
        result = {"value": result}
    return [OutputItem(json=result, item_index=index)]


async def run_batch(
    client: ProposifyClient,
    resource: Resource | str,
    operation: str,
    items: Iterable[OperationInput],
    *,
    continue_on_fail: bool = False,
) -> list[OutputItem]:
    """Run an operation once per input record, in order.

    With ``continue_on_fail`` a failing record yields an ``{"error": ...}``
    output record and the batch goes on; otherwise the first failure is
    raised and the batch stops.

    Raises:
        UnsupportedOperationError: Unknown (resource, operation), before any I/O
    """
    route = get_route(resource, operation)
    output: list[OutputItem] = []

    for index, item in enumerate(items):
        try:
            result = await execute(
                client,
                resource,
                operation,
                item.params,
                body=item.body,
                query=item.query,
                return_all=item.return_all,
                limit=item.limit,
            )
        except (APIError, CredentialError, ValueError) as e:
            if not continue_on_fail:
                raise
            logger.warning(f"{resource}.{operation} failed for item {index}: {e}")
            error = e.to_dict() if isinstance(e, APIError) else {"error": str(e)}
            output.append(OutputItem(json=error, item_index=index))
            continue

        output.extend(_to_output(result, route, index))

    return output
