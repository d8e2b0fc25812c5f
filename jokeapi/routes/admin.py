"""Admin endpoints for response cache management.

These endpoints are intended for manual testing and admin operations.
In production, consider adding authentication (API key or admin token).
"""

import logging

from fastapi import APIRouter, Depends, Response

from jokeapi.routes.deps import get_cache
from jokeapi.schemas import CacheStatsResponse, CleanupResponse
from jokeapi.stores.cache import ResponseCache

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


@router.get("/cache/stats", response_model=CacheStatsResponse)
async def cache_stats(cache: ResponseCache = Depends(get_cache)) -> CacheStatsResponse:
    """Live entries and hit/miss rates. Expired entries are purged first."""
    stats = cache.stats()
    return CacheStatsResponse(
        size=stats.size,
        keys=stats.keys,
        hit_rate=stats.hit_rate,
        miss_rate=stats.miss_rate,
    )


@router.post("/cache/cleanup", response_model=CleanupResponse)
async def cache_cleanup(cache: ResponseCache = Depends(get_cache)) -> CleanupResponse:
    removed = cache.cleanup()
    logger.info(f"Cache cleanup removed {removed} expired entries")
    return CleanupResponse(removed=removed)


@router.delete("/cache", status_code=204)
async def cache_clear(cache: ResponseCache = Depends(get_cache)) -> Response:
    """Drop every cached response and reset hit/miss counters."""
    cache.clear()
    logger.info("Response cache cleared")
    return Response(status_code=204)
