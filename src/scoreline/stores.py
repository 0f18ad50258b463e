"""Local store seams and in-process implementations.

Stores answer loads with ``LoadResult`` values and raise ``StoreWriteError``
from saves. They own their own write serialization; callers never lock.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar

from scoreline.errors import StoreMissError
from scoreline.models import Match, Team
from scoreline.result import Failure, Success

if TYPE_CHECKING:
    from scoreline.result import LoadResult

log = logging.getLogger(__name__)

T = TypeVar("T")


class CollectionStore(Protocol[T]):
    """One cached snapshot per collection type."""

    async def load(self) -> LoadResult[T]:
        """Return the cached snapshot, or a ``StoreReadError`` failure."""
        ...

    async def save(self, value: T) -> None:
        """Replace the cached snapshot."""
        ...


class ImageDataStore(Protocol):
    """Image bytes keyed by their source URL."""

    async def load_image(self, url: str) -> LoadResult[bytes]:
        """Return cached bytes for *url*, or a ``StoreReadError`` failure."""
        ...

    async def save_image(self, url: str, data: bytes) -> None:
        """Cache *data* under *url*."""
        ...


class TeamStore(CollectionStore[list[Team]], ImageDataStore, Protocol):
    """Teams and their logos share one store."""


MatchStore = CollectionStore[list[Match]]


class InMemoryStore(Generic[T]):
    """Process-local store for a collection snapshot and image bytes.

    Writes are serialized by a per-instance lock that is safe across event
    loops and threads; the last writer wins.
    """

    def __init__(self, name: str = "memory") -> None:
        self.name = name
        self._lock = threading.Lock()
        self._snapshot: T | None = None
        self._images: dict[str, bytes] = {}

    async def load(self) -> LoadResult[T]:
        snapshot = self._snapshot
        if snapshot is None:
            return Failure(StoreMissError(f"Nothing cached in {self.name!r} store"))
        return Success(snapshot)

    async def save(self, value: T) -> None:
        with self._lock:
            self._snapshot = value
        log.debug("Cached snapshot in %s store", self.name)

    async def load_image(self, url: str) -> LoadResult[bytes]:
        data = self._images.get(url)
        if data is None:
            return Failure(StoreMissError(f"No image cached for {url}"))
        return Success(data)

    async def save_image(self, url: str, data: bytes) -> None:
        with self._lock:
            self._images[url] = data
        log.debug("Cached %d bytes for %s", len(data), url)


class NullStore:
    """Store that never holds anything.

    Stands in when a real store cannot be opened, so pipelines still work
    remote-only.
    """

    async def load(self) -> LoadResult[object]:
        return Failure(StoreMissError("Null store holds no data"))

    async def save(self, value: object) -> None:
        del value

    async def load_image(self, url: str) -> LoadResult[bytes]:
        return Failure(StoreMissError(f"Null store holds no image for {url}"))

    async def save_image(self, url: str, data: bytes) -> None:
        del url, data
