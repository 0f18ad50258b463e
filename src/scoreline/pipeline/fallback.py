"""Fallback-on-failure decorator."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Generic, TypeVar

from scoreline.result import Success

if TYPE_CHECKING:
    from scoreline.loader import Loader
    from scoreline.result import LoadResult

log = logging.getLogger(__name__)

T = TypeVar("T")


class FallbackLoader(Generic[T]):
    """Try *primary*; on failure, return whatever *secondary* produces.

    The secondary starts only after the primary has failed, so the two
    results can never interleave. There is no retry on either side.
    """

    __slots__ = ("_primary", "_secondary")

    def __init__(self, primary: Loader[T], secondary: Loader[T]) -> None:
        self._primary = primary
        self._secondary = secondary

    async def __call__(self) -> LoadResult[T]:
        result = await self._primary()
        if isinstance(result, Success):
            return result
        log.debug("Primary load failed, falling back: %s", result.error)
        return await self._secondary()


def fallback(primary: Loader[T], secondary: Loader[T]) -> FallbackLoader[T]:
    """Wrap *primary* so a failure is replaced by *secondary*'s outcome."""
    return FallbackLoader(primary, secondary)
