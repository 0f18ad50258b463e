"""Cache-on-success decorator.

Successful values are handed to a save coroutine that runs as a detached
background task; the caller gets the value back without waiting for it.
Write failures never reach the caller.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from scoreline.errors import StoreWriteError
from scoreline.result import Success

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Coroutine

    from scoreline.loader import Loader
    from scoreline.result import LoadResult

log = logging.getLogger(__name__)

T = TypeVar("T")


class BackgroundWrites:
    """Owns fire-and-forget write tasks until they finish.

    The event loop only keeps weak references to tasks, so something has to
    hold them. Tasks may live on different loops (a worker loop and the
    caller's loop); ``drain()`` waits for each on its own loop, including
    writes spawned while draining.
    """

    __slots__ = ("_lock", "_tasks")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tasks: set[asyncio.Task[None]] = set()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(coro)
        with self._lock:
            self._tasks.add(task)
        task.add_done_callback(self._discard)
        return task

    async def drain(self) -> None:
        current = asyncio.get_running_loop()
        while pending := self._pending():
            by_loop: dict[asyncio.AbstractEventLoop, list[asyncio.Task[None]]] = {}
            for task in pending:
                by_loop.setdefault(task.get_loop(), []).append(task)
            waits: list[Awaitable[Any]] = list(by_loop.pop(current, []))
            for loop, tasks in by_loop.items():
                if loop.is_closed():
                    continue
                future = asyncio.run_coroutine_threadsafe(_settle(tasks), loop)
                waits.append(asyncio.wrap_future(future))
            if not waits:
                return
            await asyncio.gather(*waits, return_exceptions=True)

    def _pending(self) -> list[asyncio.Task[None]]:
        with self._lock:
            return [task for task in self._tasks if not task.done()]

    def _discard(self, task: asyncio.Task[None]) -> None:
        with self._lock:
            self._tasks.discard(task)


class CachingLoader(Generic[T]):
    """Forward the wrapped loader's result, saving successes on the side."""

    __slots__ = ("_loader", "_on_save_error", "_save", "_writes")

    def __init__(
        self,
        loader: Loader[T],
        save: Callable[[T], Awaitable[None]],
        *,
        writes: BackgroundWrites | None = None,
        on_save_error: Callable[[StoreWriteError], None] | None = None,
    ) -> None:
        self._loader = loader
        self._save = save
        self._writes = writes if writes is not None else BackgroundWrites()
        self._on_save_error = on_save_error

    async def __call__(self) -> LoadResult[T]:
        result = await self._loader()
        if isinstance(result, Success):
            self._writes.spawn(self._write(result.value))
        return result

    async def flush(self) -> None:
        """Wait for outstanding cache writes started by this loader."""
        await self._writes.drain()

    async def _write(self, value: T) -> None:
        try:
            await self._save(value)
        except asyncio.CancelledError:
            raise
        except StoreWriteError as exc:
            log.warning("Cache write failed: %s", exc)
            self._report(exc)
        except Exception as exc:
            log.warning("Cache write failed: %s", exc)
            error = StoreWriteError(f"Cache write failed: {exc}")
            error.__cause__ = exc
            self._report(error)

    def _report(self, error: StoreWriteError) -> None:
        if self._on_save_error is None:
            return
        try:
            self._on_save_error(error)
        except Exception as exc:
            # A broken hook must not turn into an unretrieved task exception.
            log.warning("Cache write error hook failed: %s", exc)


def cache(
    loader: Loader[T],
    save: Callable[[T], Awaitable[None]],
    *,
    writes: BackgroundWrites | None = None,
    on_save_error: Callable[[StoreWriteError], None] | None = None,
) -> CachingLoader[T]:
    """Wrap *loader* so its successful values are persisted with *save*."""
    return CachingLoader(loader, save, writes=writes, on_save_error=on_save_error)


async def _settle(tasks: list[asyncio.Task[None]]) -> None:
    await asyncio.gather(*tasks, return_exceptions=True)
