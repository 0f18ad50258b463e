"""Configuration: frozen Config with environment fallbacks."""

from __future__ import annotations

from dataclasses import dataclass
import os

import httpx

from scoreline.errors import ConfigurationError

DEFAULT_BASE_URL = "https://jmde6xvjr4.execute-api.us-east-1.amazonaws.com"
DEFAULT_TIMEOUT_S = 10.0

_BASE_URL_ENV = "SCORELINE_BASE_URL"
_TIMEOUT_ENV = "SCORELINE_TIMEOUT_S"


def _load_dotenv() -> None:
    """Load a .env file if python-dotenv finds one."""
    from dotenv import load_dotenv

    load_dotenv()


@dataclass(frozen=True)
class Config:
    """Immutable configuration for loader composition.

    Fields left as *None* resolve from ``SCORELINE_BASE_URL`` and
    ``SCORELINE_TIMEOUT_S``, then from the built-in defaults.

    Example:
        config = Config(base_url="https://api.example.com", timeout_s=5)
    """

    base_url: str | None = None
    timeout_s: float | None = None
    #: Run loads on a dedicated worker loop instead of the caller's loop.
    use_worker_thread: bool = True

    def __post_init__(self) -> None:
        """Resolve environment fallbacks and validate."""
        if self.base_url is None or self.timeout_s is None:
            _load_dotenv()

        base_url = self.base_url or os.environ.get(_BASE_URL_ENV) or DEFAULT_BASE_URL
        try:
            url = httpx.URL(base_url)
        except httpx.InvalidURL as exc:
            raise ConfigurationError(
                f"Invalid base_url: {base_url!r}",
                hint=f"Pass base_url=... or set {_BASE_URL_ENV}.",
            ) from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigurationError(
                f"base_url must be an absolute http(s) URL, got {base_url!r}",
                hint=f"Pass base_url=... or set {_BASE_URL_ENV}.",
            )
        object.__setattr__(self, "base_url", base_url.rstrip("/"))

        timeout_s = self.timeout_s
        if timeout_s is None:
            raw = os.environ.get(_TIMEOUT_ENV)
            try:
                timeout_s = float(raw) if raw else DEFAULT_TIMEOUT_S
            except ValueError as exc:
                raise ConfigurationError(
                    f"{_TIMEOUT_ENV} must be a number, got {raw!r}",
                ) from exc
        if timeout_s <= 0:
            raise ConfigurationError(
                f"timeout_s must be > 0, got {timeout_s}",
                hint="This bounds each remote request in seconds.",
            )
        object.__setattr__(self, "timeout_s", float(timeout_s))

    def endpoint(self, path: str) -> str:
        """Return the absolute URL for an API *path*."""
        return f"{self.base_url}/{path.lstrip('/')}"

    def __str__(self) -> str:
        """Return a compact, developer-friendly representation."""
        return (
            f"Config(base_url={self.base_url!r}, timeout_s={self.timeout_s}, "
            f"use_worker_thread={self.use_worker_thread})"
        )

    __repr__ = __str__
