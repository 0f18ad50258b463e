"""Loader contract.

A loader is any zero-argument async callable that returns a single
``LoadResult``. Decorators and pipelines only ever depend on this shape, so
fakes, stores and remote fetches are interchangeable underneath them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar

from scoreline.errors import ScorelineError
from scoreline.result import Failure, LoadResult, Success

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Loader(Protocol[T_co]):
    """Asynchronous unit of work producing one result per call.

    Calls are independent: invoking a loader twice evaluates it twice.
    Cancelling the awaiting task stops that call only.
    """

    async def __call__(self) -> LoadResult[T_co]:
        """Run one load and return its terminal result."""
        ...


def load_from(factory: Callable[[], Awaitable[T]]) -> Loader[T]:
    """Adapt a raising coroutine factory into a loader.

    ``ScorelineError`` becomes ``Failure``; any other exception is a bug and
    propagates, as does cancellation.
    """

    async def _load() -> LoadResult[T]:
        try:
            value = await factory()
        except ScorelineError as exc:
            return Failure(exc)
        return Success(value)

    return _load


def unwrap(result: LoadResult[T]) -> T:
    """Return the value of *result* or raise its error."""
    if isinstance(result, Failure):
        raise result.error
    return result.value
