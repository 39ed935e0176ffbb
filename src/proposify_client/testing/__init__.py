"""Testing utilities for code built on the Proposify client.

``MockProposifyAPI`` is a request handler for ``httpx.MockTransport`` that
answers from a route table and records every request it sees.

Example:
    ```python
    import httpx

    from proposify_client import ProposifyClient
    from proposify_client.auth import static_credential
    from proposify_client.testing import MockProposifyAPI


    async def test_lists_proposals():
        api = MockProposifyAPI()
        api.add("GET", "/proposals", json={"data": [{"id": 1}]})
        client = ProposifyClient(static_credential("test-key"), transport=httpx.MockTransport(api))

        assert await client.request_all_items("GET", "/proposals") == [{"id": 1}]
        assert api.calls[0].url.params["page"] == "1"
    ```
"""

import json as jsonlib
from collections import defaultdict, deque
from collections.abc import Callable

import httpx

Responder = httpx.Response | Callable[[httpx.Request], httpx.Response]

API_PREFIX = "/v1"


class MockProposifyAPI:
    """Route-table fake of the Proposify API.

    Routes are keyed by method and path (without the ``/v1`` prefix). Each
    route holds a queue of responses; the last one repeats once the queue
    drains. Unknown routes answer 404.
    """

    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], deque[Responder]] = defaultdict(deque)
        self.calls: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        response: Responder | None = None,
        *,
        status_code: int = 200,
        json: object | None = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> "MockProposifyAPI":
        if response is None:
            if json is not None:
                response = httpx.Response(status_code, json=json, headers=headers)
            else:
                response = httpx.Response(status_code, content=content or b"", headers=headers)
        self._routes[(method.upper(), path)].append(response)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)

        path = request.url.path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX) :]

        queue = self._routes.get((request.method, path))
        if not queue:
            return httpx.Response(404, json={"message": f"No mock for {request.method} {path}"})

        responder = queue.popleft() if len(queue) > 1 else queue[0]
        if isinstance(responder, httpx.Response):
            # fresh copy, a Response instance is bound to one request
            return httpx.Response(responder.status_code, headers=responder.headers, content=responder.content)
        return responder(request)

    def requests_to(self, method: str, path: str) -> list[httpx.Request]:
        return [
            call
            for call in self.calls
            if call.method == method.upper() and call.url.path.removeprefix(API_PREFIX) == path
        ]

    @staticmethod
    def json_body(request: httpx.Request) -> object | None:
        """Decoded JSON body of a recorded request, None when it has none."""
        return jsonlib.loads(request.content) if request.content else None


__all__ = ["MockProposifyAPI"]
