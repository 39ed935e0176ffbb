"""Tests for the Proposify request client."""

import httpx
import pytest

from proposify_client import ProposifyClient
from proposify_client.auth import Credential, static_credential
from proposify_client.config import ProposifySettings
from proposify_client.errors import (
    APIError,
    ClientError,
    NotFoundError,
    ResponseDecodeError,
    ServerError,
    TransportError,
    UnauthorizedError,
)
from proposify_client.testing import MockProposifyAPI


@pytest.mark.unit
async def test_request_returns_decoded_json(api, client):
    """Test a GET returns the JSON body."""
    api.add("GET", "/users/me", json={"id": 7, "email": "owner@example.com"})

    result = await client.request("GET", "/users/me")

    assert result == {"id": 7, "email": "owner@example.com"}


@pytest.mark.unit
async def test_request_targets_base_url_with_bearer_token(api, client):
    """Test the URL is built from the base URL and the key is sent as a bearer token."""
    api.add("GET", "/proposals/42", json={"id": 42})

    await client.request("GET", "/proposals/42")

    sent = api.calls[0]
    assert str(sent.url) == "https://api.proposify.com/v1/proposals/42"
    assert sent.headers["Authorization"] == "Bearer test-api-key"


@pytest.mark.unit
async def test_request_accepts_path_without_leading_slash(api, client):
    """Test a relative path without a slash still lands under the base URL."""
    api.add("GET", "/templates", json={"data": []})

    await client.request("GET", "templates")

    assert api.calls[0].url.path == "/v1/templates"


@pytest.mark.unit
@pytest.mark.parametrize("body, query", [(None, None), ({}, {})])
async def test_empty_body_and_query_are_not_attached(api, client, body, query):
    """Test empty or missing body/query produce no payload and no query string."""
    api.add("POST", "/proposals/42/archive", json={"archived": True})

    await client.request("POST", "/proposals/42/archive", body, query)

    sent = api.calls[0]
    assert sent.content == b""
    assert "content-type" not in sent.headers
    assert len(sent.url.params) == 0


@pytest.mark.unit
async def test_body_and_query_are_attached_when_present(api, client):
    """Test a non-empty body is sent as JSON and query as parameters."""
    api.add("PUT", "/prospects/9", json={"id": 9, "name": "Acme"})

    await client.request("PUT", "/prospects/9", {"name": "Acme"}, {"notify": "false"})

    sent = api.calls[0]
    assert MockProposifyAPI.json_body(sent) == {"name": "Acme"}
    assert sent.url.params["notify"] == "false"


@pytest.mark.unit
async def test_empty_success_body_returns_empty_dict(api, client):
    """Test a 204 after DELETE decodes to an empty dict."""
    api.add("DELETE", "/contacts/3", status_code=204)

    assert await client.request("DELETE", "/contacts/3") == {}


@pytest.mark.unit
async def test_unsupported_method_is_rejected_before_sending(api, client):
    """Test methods outside GET/POST/PUT/DELETE raise ValueError without I/O."""
    with pytest.raises(ValueError, match="PATCH"):
        await client.request("PATCH", "/proposals/1")

    assert api.calls == []


@pytest.mark.unit
async def test_method_is_case_insensitive(api, client):
    """Test lower-case methods are accepted."""
    api.add("GET", "/users", json={"data": []})

    await client.request("get", "/users")

    assert api.calls[0].method == "GET"


@pytest.mark.unit
async def test_not_found_raises_typed_api_error(api, client):
    """Test a 404 becomes NotFoundError carrying status and message."""
    api.add("GET", "/proposals/404", status_code=404, json={"message": "Proposal not found"})

    with pytest.raises(NotFoundError) as exc_info:
        await client.request("GET", "/proposals/404")

    assert isinstance(exc_info.value, ClientError)
    assert isinstance(exc_info.value, APIError)
    assert exc_info.value.status_code == 404
    assert "Proposal not found" in str(exc_info.value)


@pytest.mark.unit
async def test_unauthorized_raises(api, client):
    """Test a revoked key surfaces as UnauthorizedError."""
    api.add("GET", "/users/me", status_code=401, json={"message": "Unauthenticated."})

    with pytest.raises(UnauthorizedError):
        await client.request("GET", "/users/me")


@pytest.mark.unit
async def test_server_error_raises_server_error(api, client):
    """Test a 5xx becomes ServerError and is not retried."""
    api.add("GET", "/proposals", status_code=503, content=b"Service Unavailable")

    with pytest.raises(ServerError) as exc_info:
        await client.request("GET", "/proposals")

    assert exc_info.value.status_code == 503
    assert len(api.calls) == 1


@pytest.mark.unit
async def test_network_failure_raises_transport_error(api, client):
    """Test connection errors are wrapped in TransportError."""

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    api.add("GET", "/users/me", refuse)

    with pytest.raises(TransportError) as exc_info:
        await client.request("GET", "/users/me")

    assert isinstance(exc_info.value, APIError)
    assert isinstance(exc_info.value.cause, httpx.ConnectError)
    assert exc_info.value.status_code is None


@pytest.mark.unit
async def test_invalid_json_raises_decode_error(api, client):
    """Test a 200 with a non-JSON body raises ResponseDecodeError."""
    api.add("GET", "/proposals/1", content=b"<html>maintenance</html>")

    with pytest.raises(ResponseDecodeError) as exc_info:
        await client.request("GET", "/proposals/1")

    assert exc_info.value.status_code == 200


@pytest.mark.unit
async def test_download_returns_raw_bytes(api, client):
    """Test download returns the body untouched."""
    pdf = b"%PDF-1.7\n%\xe2\xe3\xcf\xd3\n"
    api.add("GET", "/proposals/42/pdf", content=pdf, headers={"content-type": "application/pdf"})

    result = await client.download("/proposals/42/pdf")

    assert result == pdf
    assert api.calls[0].headers["Authorization"] == "Bearer test-api-key"


@pytest.mark.unit
async def test_download_wraps_errors(api, client):
    """Test download failures use the same error mapping."""
    api.add("GET", "/proposals/42/pdf", status_code=404, json={"message": "No PDF"})

    with pytest.raises(NotFoundError):
        await client.download("/proposals/42/pdf")


@pytest.mark.unit
async def test_credential_provider_called_per_request(api):
    """Test the API key is read on every request, never cached."""
    keys = iter(["first-key", "second-key"])

    def rotating() -> Credential:
        return Credential(api_key=next(keys))

    api.add("GET", "/users/me", json={})
    async with ProposifyClient(rotating, transport=httpx.MockTransport(api)) as proposify:
        await proposify.request("GET", "/users/me")
        await proposify.request("GET", "/users/me")

    assert [call.headers["Authorization"] for call in api.calls] == ["Bearer first-key", "Bearer second-key"]


@pytest.mark.unit
async def test_request_all_items_delegates_to_pagination(api, client):
    """Test request_all_items walks pages through the aggregator."""
    api.add("GET", "/users", json={"data": [{"id": 1}, {"id": 2}]})

    users = await client.request_all_items("GET", "/users")

    assert users == [{"id": 1}, {"id": 2}]
    assert api.calls[0].url.params["limit"] == "50"
    assert api.calls[0].url.params["page"] == "1"


@pytest.mark.unit
async def test_from_settings_uses_base_url(api):
    """Test from_settings applies the configured base URL."""
    settings = ProposifySettings(base_url="https://sandbox.proposify.test/v1/")
    api.add("GET", "/users/me", json={"id": 1})

    async with ProposifyClient.from_settings(
        settings, static_credential("k"), transport=httpx.MockTransport(api)
    ) as proposify:
        await proposify.request("GET", "/users/me")

    assert str(api.calls[0].url) == "https://sandbox.proposify.test/v1/users/me"
