"""Pytest configuration and fixtures.

Provides environment isolation, marker registration and the small test
doubles shared across suites. All fixtures here are autouse unless noted.
"""

from __future__ import annotations

import asyncio
from contextlib import suppress
from dataclasses import dataclass, field
import os
from typing import Any

import pytest

from scoreline.errors import StoreMissError, StoreWriteError, TransportError
from scoreline.remote import HTTPResponse
from scoreline.result import Failure, LoadResult, Success

# =============================================================================
# Test Doubles
# =============================================================================


@dataclass
class ScriptedLoader:
    """Loader double that returns a fixed result and counts calls."""

    result: LoadResult[Any]
    calls: int = 0
    delay_s: float = 0.0

    async def __call__(self) -> LoadResult[Any]:
        self.calls += 1
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        return self.result


@dataclass
class RecordingStore:
    """Collection and image store double that records every call.

    Set ``fail_saves`` to make every save raise ``StoreWriteError``.
    """

    snapshot: Any = None
    images: dict[str, bytes] = field(default_factory=dict)
    fail_saves: bool = False
    load_calls: int = 0
    saves: list[Any] = field(default_factory=list)
    image_loads: list[str] = field(default_factory=list)
    image_saves: list[tuple[str, bytes]] = field(default_factory=list)

    async def load(self) -> LoadResult[Any]:
        self.load_calls += 1
        if self.snapshot is None:
            return Failure(StoreMissError("Nothing cached"))
        return Success(self.snapshot)

    async def save(self, value: Any) -> None:
        self.saves.append(value)
        if self.fail_saves:
            raise StoreWriteError("disk full")
        self.snapshot = value

    async def load_image(self, url: str) -> LoadResult[bytes]:
        self.image_loads.append(url)
        data = self.images.get(url)
        if data is None:
            return Failure(StoreMissError(f"No image for {url}"))
        return Success(data)

    async def save_image(self, url: str, data: bytes) -> None:
        self.image_saves.append((url, data))
        if self.fail_saves:
            raise StoreWriteError("disk full")
        self.images[url] = data


@dataclass
class FakeHTTPClient:
    """HTTP client double serving canned responses per URL.

    Unknown URLs fail like an unreachable host.
    """

    routes: dict[str, HTTPResponse | BaseException] = field(default_factory=dict)
    requests: list[str] = field(default_factory=list)
    closed: bool = False

    async def get(self, url: str) -> HTTPResponse:
        self.requests.append(url)
        outcome = self.routes.get(url)
        if outcome is None:
            raise TransportError(f"No route to {url}", url=url)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def aclose(self) -> None:
        self.closed = True


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_scoreline_env(monkeypatch):
    """Clear SCORELINE_* env vars so configuration tests start clean."""
    for key in list(os.environ.keys()):
        if key.startswith("SCORELINE_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Pytest Hooks
# =============================================================================


def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Pipelines assembled over fake collaborators",
        "allow_dotenv: Let python-dotenv read .env files",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)
