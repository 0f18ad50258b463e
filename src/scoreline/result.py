"""Result primitives for loads.

Every load ends in exactly one of these two values, so failures travel as
data through the decorators instead of as exceptions.
"""

from __future__ import annotations

import dataclasses
import typing

from scoreline.errors import ScorelineError

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=ScorelineError)


@dataclasses.dataclass(frozen=True, slots=True)
class Success(typing.Generic[TSuccess]):
    """A load that produced a value."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure(typing.Generic[TFailure]):
    """A load that terminated with an error."""

    error: TFailure


LoadResult = Success[TSuccess] | Failure[ScorelineError]
