"""Unit tests for RestTransport against httpx.MockTransport."""

from urllib.parse import parse_qsl

import httpx
import pytest

from firetables.domain.exceptions import AuthenticationException, TransportException
from firetables.infrastructure.firebase.rest_client import RestTransport
from firetables.infrastructure.firebase.token_cache import TokenCache
from tests.conftest import BASE_URL, FakeTokenProvider


def _json(payload, status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=payload)

    return handler


async def test_read_builds_json_url_and_bearer_header(make_rest_transport) -> None:
    transport, requests = make_rest_transport(_json({"name": "Pen"}))

    assert await transport.read("/products/r1/") == {"name": "Pen"}

    request = requests[0]
    assert request.method == "GET"
    assert str(request.url) == f"{BASE_URL}/products/r1.json"
    assert request.headers["Authorization"] == "Bearer token-1"
    assert request.headers["Cache-Control"] == "no-cache"
    assert "Content-Type" not in request.headers


async def test_read_missing_node_returns_none(make_rest_transport) -> None:
    transport, _ = make_rest_transport(_json(None))
    assert await transport.read("settings") is None


async def test_read_404_returns_none(make_rest_transport) -> None:
    transport, _ = make_rest_transport(_json({"error": "not found"}, status=404))
    assert await transport.read("settings") is None


async def test_read_filtered_encodes_query(make_rest_transport) -> None:
    transport, requests = make_rest_transport(_json({"r1": {"name": "Pen"}}))

    out = await transport.read_filtered("products", {"orderBy": "name", "equalTo": "Pen"})

    assert out == {"r1": {"name": "Pen"}}
    assert requests[0].url.path == "/products.json"
    assert dict(parse_qsl(requests[0].url.query.decode())) == {
        "orderBy": '"name"',
        "equalTo": '"Pen"',
    }


async def test_write_puts_json_body(make_rest_transport) -> None:
    transport, requests = make_rest_transport(_json({"name": "Pen", "price": 1}))

    assert await transport.write("products/r1", {"name": "Pen", "price": 1}) is None

    request = requests[0]
    assert request.method == "PUT"
    assert request.headers["Content-Type"] == "application/json; charset=utf-8"
    assert requests.json_body() == {"name": "Pen", "price": 1}


async def test_append_returns_generated_name(make_rest_transport) -> None:
    transport, requests = make_rest_transport(_json({"name": "-NxYz123"}))

    assert await transport.append("products", {"name": "Pen"}) == "-NxYz123"
    assert requests[0].method == "POST"
    assert str(requests[0].url) == f"{BASE_URL}/products.json"


async def test_append_without_name_raises(make_rest_transport) -> None:
    transport, _ = make_rest_transport(_json({}))
    with pytest.raises(TransportException):
        await transport.append("products", {"name": "Pen"})


async def test_merge_patches(make_rest_transport) -> None:
    transport, requests = make_rest_transport(_json({"price": 2}))

    await transport.merge("products/r1", {"price": 2})

    assert requests[0].method == "PATCH"
    assert requests.json_body() == {"price": 2}


async def test_remove_deletes(make_rest_transport) -> None:
    transport, requests = make_rest_transport(_json(None))

    await transport.remove("products/r1")

    assert requests[0].method == "DELETE"
    assert str(requests[0].url) == f"{BASE_URL}/products/r1.json"


async def test_token_reused_across_requests(make_rest_transport, token_provider) -> None:
    transport, requests = make_rest_transport(_json(None))

    await transport.read("a")
    await transport.read("b")

    assert token_provider.calls == 1
    assert {r.headers["Authorization"] for r in requests} == {"Bearer token-1"}


@pytest.mark.parametrize("method", ["write", "merge"])
async def test_non_success_status_raises_transport_exception(make_rest_transport, method) -> None:
    transport, _ = make_rest_transport(_json({"error": "Permission denied"}, status=403))

    with pytest.raises(TransportException) as exc_info:
        await getattr(transport, method)("products/r1", {"name": "Pen"})

    exc = exc_info.value
    assert exc.error_code == "TRANSPORT_ERROR"
    assert exc.status_code == 403
    assert "Permission denied" in exc.details["body"]


async def test_delete_404_is_an_error(make_rest_transport) -> None:
    transport, _ = make_rest_transport(_json({"error": "nope"}, status=404))
    with pytest.raises(TransportException):
        await transport.remove("products/r1")


async def test_unauthorized_invalidates_token(make_rest_transport, token_provider) -> None:
    transport, requests = make_rest_transport(_json({"error": "Unauthorized"}, status=401))

    with pytest.raises(TransportException):
        await transport.read("a")
    with pytest.raises(TransportException):
        await transport.read("a")

    assert token_provider.calls == 2
    assert requests[1].headers["Authorization"] == "Bearer token-2"


async def test_network_error_wrapped(make_rest_transport) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport, _ = make_rest_transport(handler)

    with pytest.raises(TransportException) as exc_info:
        await transport.read("a")

    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


async def test_auth_failure_sends_no_request() -> None:
    requests_seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        return httpx.Response(200, json=None)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        cache = TokenCache(FakeTokenProvider(error=RuntimeError("bad key")))
        transport = RestTransport(BASE_URL, cache, http_client=client)
        with pytest.raises(AuthenticationException):
            await transport.write("a", {"x": 1})

    assert requests_seen == []


async def test_injected_client_not_closed_by_aclose(token_provider) -> None:
    async with httpx.AsyncClient(transport=httpx.MockTransport(_json(None))) as client:
        transport = RestTransport(BASE_URL + "/", TokenCache(token_provider), http_client=client)
        await transport.aclose()
        assert not client.is_closed
        assert transport.url_for("a/b") == f"{BASE_URL}/a/b.json"
