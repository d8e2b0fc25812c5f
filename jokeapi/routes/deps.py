"""Request dependencies and response caching helpers for routers.

The cache and store are created once by ``create_app`` and live on
``app.state``; routers reach them only through these dependencies.
"""

from collections.abc import Awaitable, Callable
import logging
from typing import Any, TypeVar

from fastapi import Request
from fastapi.encoders import jsonable_encoder

from jokeapi.settings import Settings
from jokeapi.stores.cache import ResponseCache
from jokeapi.stores.jokes import JokeStore

logger = logging.getLogger("uvicorn.error")

T = TypeVar("T")

_MISS = object()


def get_cache(request: Request) -> ResponseCache:
    return request.app.state.cache


def get_store(request: Request) -> JokeStore:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def cache_key(request: Request) -> str:
    """Build the cache key for a request: path plus query string, if any."""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def cache_lookup(cache: ResponseCache, key: str) -> Any:
    """Return the cached payload for key, or ``_MISS``.

    A failing cache is treated as a miss.
    """
    try:
        value = cache.get(key, _MISS)
    except Exception:
        logger.warning(f"Cache lookup failed for {key}", exc_info=True)
        return _MISS
    logger.debug(f"Cache {'miss' if value is _MISS else 'hit'}: {key}")
    return value


def cache_generation(cache: ResponseCache) -> int | None:
    """Read the invalidation counter before loading; None if the cache is failing."""
    try:
        return cache.generation
    except Exception:
        logger.warning("Cache generation read failed", exc_info=True)
        return None


def cache_store(cache: ResponseCache, key: str, payload: Any, ttl: float, generation: int | None) -> None:
    """Store a JSON-ready copy of payload unless the cache was invalidated meanwhile.

    Failures are logged and ignored.
    """
    if generation is None:
        return
    try:
        if not cache.set_if_unchanged(key, jsonable_encoder(payload), generation, ttl):
            logger.debug(f"Cache invalidated while loading, not storing: {key}")
    except Exception:
        logger.warning(f"Cache store failed for {key}", exc_info=True)


def is_miss(value: Any) -> bool:
    return value is _MISS


async def cached(
    request: Request,
    cache: ResponseCache,
    ttl: float,
    loader: Callable[[], Awaitable[T]],
) -> T | Any:
    """Serve a GET from cache, or run loader and cache its result.

    Loader errors propagate; cache errors never do.
    """
    key = cache_key(request)
    hit = cache_lookup(cache, key)
    if not is_miss(hit):
        return hit

    generation = cache_generation(cache)
    result = await loader()
    cache_store(cache, key, result, ttl, generation)
    return result
