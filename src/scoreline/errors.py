"""Exception hierarchy for Scoreline."""

from __future__ import annotations


class ScorelineError(Exception):
    """Base exception for all Scoreline errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(ScorelineError):
    """Configuration validation or resolution failed."""


class TransportError(ScorelineError):
    """The remote request never produced a usable response.

    Covers unreachable hosts, timeouts and protocol failures. ``status_code``
    is set when the server answered but the exchange still failed.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.url = url
        self.status_code = status_code


class DecodingError(ScorelineError):
    """A response payload could not be mapped to a domain value."""


class StoreReadError(ScorelineError):
    """Local data is absent or unreadable."""


class StoreMissError(StoreReadError):
    """Nothing is cached under the requested key."""


class StoreWriteError(ScorelineError):
    """Persisting a value to the local store failed."""
