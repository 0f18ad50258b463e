"""Pipeline assembly.

Two fixed compositions of the decorators:

- collection: remote, cached into the store, falling back to the store.
- image: the store first, falling back to a remote fetch that is cached
  under the image URL.

Both are scheduled on the given execution context and hold no state of
their own beyond the decorators they build.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, TypeVar

from scoreline.pipeline.caching import cache
from scoreline.pipeline.fallback import fallback
from scoreline.pipeline.scheduling import schedule_on

if TYPE_CHECKING:
    from collections.abc import Callable

    from scoreline.errors import StoreWriteError
    from scoreline.loader import Loader
    from scoreline.pipeline.caching import BackgroundWrites
    from scoreline.pipeline.scheduling import ExecutionContext
    from scoreline.stores import CollectionStore, ImageDataStore

T = TypeVar("T")


def collection_pipeline(
    remote: Loader[T],
    store: CollectionStore[T],
    context: ExecutionContext,
    *,
    writes: BackgroundWrites | None = None,
    on_save_error: Callable[[StoreWriteError], None] | None = None,
) -> Loader[T]:
    """Load from *remote*, caching successes; serve the store on failure."""
    cached_remote = cache(
        remote, store.save, writes=writes, on_save_error=on_save_error
    )
    return schedule_on(fallback(cached_remote, store.load), context)


def image_pipeline(
    url: str,
    store: ImageDataStore,
    fetch: Callable[[str], Loader[bytes]],
    context: ExecutionContext,
    *,
    writes: BackgroundWrites | None = None,
    on_save_error: Callable[[StoreWriteError], None] | None = None,
) -> Loader[bytes]:
    """Serve image bytes for *url* from the store, fetching and caching on a miss."""
    local = partial(store.load_image, url)
    cached_remote = cache(
        fetch(url),
        partial(store.save_image, url),
        writes=writes,
        on_save_error=on_save_error,
    )
    return schedule_on(fallback(local, cached_remote), context)
