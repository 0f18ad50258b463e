"""Remote fetching: an HTTP client seam and the loaders built on it."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Protocol, TypeVar

import httpx

from scoreline.errors import TransportError
from scoreline.loader import load_from

if TYPE_CHECKING:
    from collections.abc import Callable

    from scoreline.loader import Loader

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class HTTPResponse:
    """Status and raw body of a completed GET."""

    status_code: int
    body: bytes


class HTTPClient(Protocol):
    """Performs a single GET; raises ``TransportError`` when no response arrives."""

    async def get(self, url: str) -> HTTPResponse: ...  # noqa: D102


class HttpxClient:
    """``HTTPClient`` backed by ``httpx.AsyncClient``.

    Non-2xx responses are returned as-is; deciding whether a status is usable
    is the decoder's job.
    """

    def __init__(
        self,
        *,
        timeout_s: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_s)

    async def get(self, url: str) -> HTTPResponse:
        try:
            response = await self._client.get(url)
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"Request timed out: {url}",
                hint="Check connectivity or raise SCORELINE_TIMEOUT_S.",
                url=url,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Request failed: {exc}", url=url) from exc
        except httpx.InvalidURL as exc:
            raise TransportError(f"Invalid URL: {url!r}", url=url) from exc
        log.debug("GET %s -> %d", url, response.status_code)
        return HTTPResponse(status_code=response.status_code, body=response.content)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def remote_loader(
    client: HTTPClient,
    url: str,
    decode: Callable[[HTTPResponse], T],
) -> Loader[T]:
    """Build a loader that GETs *url* and decodes the response."""

    async def _fetch() -> T:
        return decode(await client.get(url))

    return load_from(_fetch)
