"""Execution contexts and the scheduling decorator.

A context decides which event loop runs a unit of work. ``LoopContext`` stays
on the caller's loop in a separate task; ``WorkerContext`` owns a loop in a
background thread so the caller's loop stays free while loads run.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING, Any, Generic, Protocol, Self, TypeVar

from scoreline.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import TracebackType

    from scoreline.loader import Loader
    from scoreline.result import LoadResult

log = logging.getLogger(__name__)

T = TypeVar("T")


class ExecutionContext(Protocol):
    """Runs a unit of work somewhere and delivers its result to the awaiter."""

    async def run(self, factory: Callable[[], Awaitable[T]]) -> T:
        """Run ``factory()`` on this context and return its result."""
        ...


class LoopContext:
    """Run work on the caller's loop, in its own task.

    The task gets a copy of the caller's context variables, so changes made
    by the work do not leak back.
    """

    async def run(self, factory: Callable[[], Awaitable[T]]) -> T:
        task = asyncio.get_running_loop().create_task(_invoke(factory))
        return await task


class WorkerContext:
    """Run work on a dedicated event loop in a daemon thread.

    Many loads may be in flight on the worker loop at once. The loop starts
    lazily on first use; ``close()`` lets outstanding tasks (pending cache
    writes included) finish before stopping it.
    """

    def __init__(
        self,
        name: str = "scoreline-worker",
        *,
        shutdown_timeout_s: float = 5.0,
    ) -> None:
        self.name = name
        self.shutdown_timeout_s = shutdown_timeout_s
        self._lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._closed = False

    def __enter__(self) -> Self:
        return self.start()

    def __exit__(
        self,
        _: type[BaseException] | None,
        __: BaseException | None,
        ___: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def is_running(self) -> bool:
        return self._loop is not None

    def start(self) -> Self:
        """Start the worker thread if it is not running yet."""
        with self._lock:
            if self._closed:
                raise ConfigurationError(
                    f"Execution context {self.name!r} is closed",
                    hint="Create a new WorkerContext instead of reusing a closed one.",
                )
            if self._loop is not None:
                return self
            loop = asyncio.new_event_loop()
            ready = threading.Event()
            thread = threading.Thread(
                target=_serve, args=(loop, ready), name=self.name, daemon=True
            )
            thread.start()
            ready.wait()
            self._loop, self._thread = loop, thread
        log.debug("Started worker loop %s", self.name)
        return self

    def close(self) -> None:
        """Wait for in-flight work, then stop the worker loop and thread."""
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = self._thread = None
            self._closed = True
        if loop is None or thread is None:
            return
        try:
            asyncio.run_coroutine_threadsafe(_settle(), loop).result(
                self.shutdown_timeout_s
            )
        except TimeoutError:
            log.warning(
                "Worker loop %s still busy after %.1fs; cancelling remaining work",
                self.name,
                self.shutdown_timeout_s,
            )
        finally:
            loop.call_soon_threadsafe(loop.stop)
            thread.join()
        log.debug("Stopped worker loop %s", self.name)

    async def run(self, factory: Callable[[], Awaitable[T]]) -> T:
        loop = self.start()._loop
        if loop is None:  # pragma: no cover - closed concurrently
            raise ConfigurationError(f"Execution context {self.name!r} is closed")
        if asyncio.get_running_loop() is loop:
            return await factory()
        future = asyncio.run_coroutine_threadsafe(_invoke(factory), loop)
        # Cancelling the awaiter cancels the wrapped future, which in turn
        # cancels the task on the worker loop.
        return await asyncio.wrap_future(future)


class ScheduledLoader(Generic[T]):
    """Run the wrapped loader on an execution context."""

    __slots__ = ("_context", "_loader")

    def __init__(self, loader: Loader[T], context: ExecutionContext) -> None:
        self._loader = loader
        self._context = context

    async def __call__(self) -> LoadResult[T]:
        return await self._context.run(self._loader)


def schedule_on(loader: Loader[T], context: ExecutionContext) -> ScheduledLoader[T]:
    """Wrap *loader* so its work and result run on *context*."""
    return ScheduledLoader(loader, context)


async def _invoke(factory: Callable[[], Awaitable[T]]) -> T:
    return await factory()


async def _settle() -> None:
    current = asyncio.current_task()
    pending = [t for t in asyncio.all_tasks() if t is not current]
    while pending:
        await asyncio.gather(*pending, return_exceptions=True)
        pending = [t for t in asyncio.all_tasks() if t is not current]


def _serve(loop: asyncio.AbstractEventLoop, ready: threading.Event) -> None:
    asyncio.set_event_loop(loop)
    loop.call_soon(ready.set)
    try:
        loop.run_forever()
    finally:
        leftover: set[asyncio.Task[Any]] = asyncio.all_tasks(loop)
        for task in leftover:
            task.cancel()
        if leftover:
            loop.run_until_complete(asyncio.gather(*leftover, return_exceptions=True))
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.close()
