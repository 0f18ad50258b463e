from __future__ import annotations

import httpx
import pytest

from scoreline.errors import DecodingError, TransportError
from scoreline.mappers import map_logo_data
from scoreline.remote import HTTPResponse, HttpxClient, remote_loader
from scoreline.result import Failure, Success
from tests.conftest import FakeHTTPClient

pytestmark = pytest.mark.unit


def _client(handler) -> HttpxClient:
    transport = httpx.MockTransport(handler)
    return HttpxClient(client=httpx.AsyncClient(transport=transport))


@pytest.mark.asyncio
async def test_httpx_client_returns_status_and_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        return httpx.Response(404, content=b"missing")

    response = await _client(handler).get("https://x/teams")

    assert response == HTTPResponse(status_code=404, body=b"missing")


@pytest.mark.asyncio
async def test_httpx_timeout_becomes_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(TransportError, match="timed out") as exc_info:
        await _client(handler).get("https://x/teams")
    assert exc_info.value.url == "https://x/teams"
    assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)


@pytest.mark.asyncio
async def test_httpx_connect_error_becomes_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(TransportError, match="Request failed"):
        await _client(handler).get("https://x/teams")


@pytest.mark.asyncio
async def test_injected_client_is_not_closed() -> None:
    transport = httpx.MockTransport(lambda _: httpx.Response(200))
    inner = httpx.AsyncClient(transport=transport)
    client = HttpxClient(client=inner)

    await client.aclose()

    assert not inner.is_closed
    await inner.aclose()


@pytest.mark.asyncio
async def test_remote_loader_decodes_success() -> None:
    http = FakeHTTPClient(
        routes={"https://x/a.png": HTTPResponse(status_code=200, body=b"png")}
    )

    result = await remote_loader(http, "https://x/a.png", map_logo_data)()

    assert result == Success(b"png")
    assert http.requests == ["https://x/a.png"]


@pytest.mark.asyncio
async def test_remote_loader_reports_transport_and_decoding_failures() -> None:
    http = FakeHTTPClient(
        routes={"https://x/empty.png": HTTPResponse(status_code=200, body=b"")}
    )

    unreachable = await remote_loader(http, "https://x/a.png", map_logo_data)()
    empty = await remote_loader(http, "https://x/empty.png", map_logo_data)()

    assert isinstance(unreachable, Failure)
    assert isinstance(unreachable.error, TransportError)
    assert isinstance(empty, Failure)
    assert isinstance(empty.error, DecodingError)


@pytest.mark.asyncio
async def test_invalid_url_becomes_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request should be sent")

    with pytest.raises(TransportError, match="Invalid URL") as exc_info:
        await _client(handler).get("http://[::1/x")
    assert exc_info.value.url == "http://[::1/x"
    assert isinstance(exc_info.value.__cause__, httpx.InvalidURL)

    result = await remote_loader(_client(handler), "http://[::1/x", map_logo_data)()

    assert isinstance(result, Failure)
    assert isinstance(result.error, TransportError)
