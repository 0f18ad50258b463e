"""Application composition: ready-to-call loaders for teams, matches and logos.

Everything the loaders need is passed in explicitly, so tests can swap any
collaborator for a fake.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, TypeVar

from scoreline.errors import ScorelineError
from scoreline.mappers import map_logo_data, map_matches, map_teams
from scoreline.pipeline import (
    BackgroundWrites,
    LoopContext,
    WorkerContext,
    collection_pipeline,
    image_pipeline,
)
from scoreline.remote import HttpxClient, remote_loader
from scoreline.stores import InMemoryStore, NullStore

if TYPE_CHECKING:
    from collections.abc import Callable

    from scoreline.config import Config
    from scoreline.errors import StoreWriteError
    from scoreline.loader import Loader
    from scoreline.models import Match, Team
    from scoreline.pipeline import ExecutionContext
    from scoreline.remote import HTTPClient
    from scoreline.stores import MatchStore, TeamStore

log = logging.getLogger(__name__)

TEAMS_PATH = "teams"
MATCHES_PATH = "matches"

S = TypeVar("S")


@dataclass
class LoaderFactory:
    """Builds the collection and image pipelines over shared collaborators."""

    config: Config
    client: HTTPClient
    team_store: TeamStore
    match_store: MatchStore
    context: ExecutionContext
    on_save_error: Callable[[StoreWriteError], None] | None = None
    writes: BackgroundWrites = field(default_factory=BackgroundWrites)

    def teams(self) -> Loader[list[Team]]:
        """Remote teams with local fallback."""
        remote = remote_loader(
            self.client, self.config.endpoint(TEAMS_PATH), map_teams
        )
        return collection_pipeline(
            remote,
            self.team_store,
            self.context,
            writes=self.writes,
            on_save_error=self.on_save_error,
        )

    def matches(self) -> Loader[list[Match]]:
        """Remote matches with local fallback."""
        remote = remote_loader(
            self.client, self.config.endpoint(MATCHES_PATH), map_matches
        )
        return collection_pipeline(
            remote,
            self.match_store,
            self.context,
            writes=self.writes,
            on_save_error=self.on_save_error,
        )

    def team_logo(self, url: str) -> Loader[bytes]:
        """Cached logo bytes with remote fallback."""
        return image_pipeline(
            url,
            self.team_store,
            self._fetch_logo,
            self.context,
            writes=self.writes,
            on_save_error=self.on_save_error,
        )

    async def flush(self) -> None:
        """Wait for pending cache writes on the factory's context."""
        await self.context.run(self.writes.drain)

    async def aclose(self) -> None:
        """Flush writes, then release the HTTP client and execution context.

        The context is closed even when flushing or closing the client fails.
        """
        try:
            await self.flush()
            aclose = getattr(self.client, "aclose", None)
            if callable(aclose):
                await self.context.run(aclose)
        finally:
            close = getattr(self.context, "close", None)
            if callable(close):
                await asyncio.to_thread(close)

    def _fetch_logo(self, url: str) -> Loader[bytes]:
        return remote_loader(self.client, url, map_logo_data)


def create_factory(
    config: Config,
    *,
    on_save_error: Callable[[StoreWriteError], None] | None = None,
    team_store: Callable[[], TeamStore] | None = None,
    match_store: Callable[[], MatchStore] | None = None,
) -> LoaderFactory:
    """Build a factory with default collaborators for *config*.

    ``team_store`` and ``match_store`` build the local stores (in-memory by
    default). A store that fails to open is replaced by ``NullStore``, so
    loads still work remote-only.
    """
    context: ExecutionContext = (
        WorkerContext() if config.use_worker_thread else LoopContext()
    )
    log.debug("Composing loaders for %s", config)
    return LoaderFactory(
        config=config,
        client=HttpxClient(timeout_s=config.timeout_s),
        team_store=_open_store(
            team_store or (lambda: InMemoryStore(name="teams")), "teams"
        ),
        match_store=_open_store(
            match_store or (lambda: InMemoryStore(name="matches")), "matches"
        ),
        context=context,
        on_save_error=on_save_error,
    )


def _open_store(build: Callable[[], S], name: str) -> S:
    try:
        return build()
    except (ScorelineError, OSError) as exc:
        log.warning("Could not open %s store, continuing without cache: %s", name, exc)
        return NullStore()  # type: ignore[return-value]
