"""Scoreline: football data loaders with local caching and fallback.

Public API:
    - create_factory(): Ready-made team, match and logo loaders
    - cache() / fallback() / schedule_on(): Load decorators
    - collection_pipeline() / image_pipeline(): Fixed compositions
    - Config: Configuration dataclass
"""

from __future__ import annotations

import logging

from scoreline.composition import LoaderFactory, create_factory
from scoreline.config import Config
from scoreline.errors import (
    ConfigurationError,
    DecodingError,
    ScorelineError,
    StoreMissError,
    StoreReadError,
    StoreWriteError,
    TransportError,
)
from scoreline.loader import Loader, load_from, unwrap
from scoreline.models import Match, Team
from scoreline.pipeline import (
    LoopContext,
    WorkerContext,
    cache,
    collection_pipeline,
    fallback,
    image_pipeline,
    schedule_on,
)
from scoreline.result import Failure, LoadResult, Success
from scoreline.stores import InMemoryStore, NullStore

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("scoreline")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("scoreline").addHandler(logging.NullHandler())

__all__ = [
    "Config",
    "ConfigurationError",
    "DecodingError",
    "Failure",
    "InMemoryStore",
    "LoadResult",
    "Loader",
    "LoaderFactory",
    "LoopContext",
    "Match",
    "NullStore",
    "ScorelineError",
    "StoreMissError",
    "StoreReadError",
    "StoreWriteError",
    "Success",
    "Team",
    "TransportError",
    "WorkerContext",
    "cache",
    "collection_pipeline",
    "create_factory",
    "fallback",
    "image_pipeline",
    "load_from",
    "schedule_on",
    "unwrap",
]
