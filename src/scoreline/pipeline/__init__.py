"""Composable load decorators and the pipelines built from them."""

from scoreline.pipeline.assembly import collection_pipeline, image_pipeline
from scoreline.pipeline.caching import BackgroundWrites, CachingLoader, cache
from scoreline.pipeline.fallback import FallbackLoader, fallback
from scoreline.pipeline.scheduling import (
    ExecutionContext,
    LoopContext,
    ScheduledLoader,
    WorkerContext,
    schedule_on,
)

__all__ = [
    "BackgroundWrites",
    "CachingLoader",
    "ExecutionContext",
    "FallbackLoader",
    "LoopContext",
    "ScheduledLoader",
    "WorkerContext",
    "cache",
    "collection_pipeline",
    "fallback",
    "image_pipeline",
    "schedule_on",
]
