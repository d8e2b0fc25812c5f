"""Tests for cache admin endpoints."""

import pytest
from httpx import AsyncClient

from jokeapi.stores.cache import ResponseCache


@pytest.mark.asyncio
async def test_cache_stats(client: AsyncClient):
    await client.get("/types")
    await client.get("/types")
    await client.get("/jokes/1")

    response = await client.get("/admin/cache/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["size"] == 2
    assert sorted(data["keys"]) == ["/jokes/1", "/types"]
    assert data["hitRate"] == 0.33
    assert data["missRate"] == 0.67


@pytest.mark.asyncio
async def test_cache_stats_empty(client: AsyncClient):
    data = (await client.get("/admin/cache/stats")).json()
    assert data == {"size": 0, "keys": [], "hitRate": 0.0, "missRate": 0.0}


@pytest.mark.asyncio
async def test_cache_cleanup(client: AsyncClient, cache: ResponseCache, clock):
    cache.set("/jokes/random", [], ttl=1)
    cache.set("/types", [], ttl=100)
    clock.advance(5)

    response = await client.post("/admin/cache/cleanup")
    assert response.json() == {"removed": 1}


@pytest.mark.asyncio
async def test_cache_clear(client: AsyncClient, cache: ResponseCache):
    await client.get("/types")

    response = await client.delete("/admin/cache")
    assert response.status_code == 204
    assert cache.stats().size == 0
