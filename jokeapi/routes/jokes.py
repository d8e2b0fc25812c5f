"""Joke endpoints.

Reads are served through the response cache (except search); writes go
through services, which invalidate the cached joke responses.

Routers are thin: call services for business logic. Route order matters:
fixed paths like /jokes/search and /jokes/random/{num} must be declared
before the catch-all /jokes/{joke_id}.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Path, Query, Request
from fastapi.responses import PlainTextResponse

from jokeapi.errors import JokeNotFoundError, ValidationError
from jokeapi.routes.deps import (
    cache_generation,
    cache_key,
    cache_lookup,
    cache_store,
    cached,
    get_app_settings,
    get_cache,
    get_store,
    is_miss,
)
from jokeapi.schemas import Joke, JokeIn
from jokeapi.services.jokes import add_joke, random_selection, rate_joke, update_joke
from jokeapi.settings import Settings
from jokeapi.stores.cache import ResponseCache
from jokeapi.stores.jokes import JokeStore

router = APIRouter()

USAGE = (
    "Try /random_joke, /random_ten, /jokes/random, /jokes/search?q=term, "
    "or /jokes/ten, /jokes/random/<any-number>"
)


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def index() -> str:
    return USAGE


@router.get("/ping", response_class=PlainTextResponse)
async def ping() -> str:
    return "pong"


async def _one_random(store: JokeStore) -> Joke:
    jokes = await store.random(1)
    if not jokes:
        raise JokeNotFoundError("random")
    return jokes[0]


@router.get("/random_joke", response_model=Joke)
async def random_joke(
    request: Request,
    cache: ResponseCache = Depends(get_cache),
    store: JokeStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Any:
    """Get one random joke."""
    return await cached(request, cache, settings.cache_ttl_random, lambda: _one_random(store))


@router.get("/random_ten", response_model=list[Joke])
async def random_ten(
    request: Request,
    cache: ResponseCache = Depends(get_cache),
    store: JokeStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Any:
    """Get ten random jokes."""
    return await cached(request, cache, settings.cache_ttl_random, lambda: store.random(10))


@router.get("/jokes/search", response_model=list[Joke])
async def search_jokes(
    q: str | None = Query(default=None, description="Case-insensitive substring to look for"),
    store: JokeStore = Depends(get_store),
) -> list[Joke]:
    """Search setup, punchline and type. Never cached."""
    if not q:
        raise ValidationError("Missing search query. Use ?q=searchterm")
    return await store.search(q)


@router.get("/jokes/random", response_model=Joke)
async def jokes_random(
    request: Request,
    cache: ResponseCache = Depends(get_cache),
    store: JokeStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Any:
    return await cached(request, cache, settings.cache_ttl_random, lambda: _one_random(store))


@router.get("/jokes/ten", response_model=list[Joke])
async def jokes_ten(
    request: Request,
    cache: ResponseCache = Depends(get_cache),
    store: JokeStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Any:
    return await cached(request, cache, settings.cache_ttl_random, lambda: store.random(10))


@router.get("/jokes/random/{num}", response_model=None)
async def jokes_random_n(
    request: Request,
    num: str = Path(description="How many random jokes to return"),
    cache: ResponseCache = Depends(get_cache),
    store: JokeStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Any:
    """Get ``num`` random jokes.

    Answers with a plain-text message (status 200) when ``num`` is not a
    positive number or is larger than the number of jokes.
    """
    key = cache_key(request)
    hit = cache_lookup(cache, key)
    if not is_miss(hit):
        return hit

    generation = cache_generation(cache)
    result = await random_selection(store, num)
    if isinstance(result, str):
        return PlainTextResponse(result)

    cache_store(cache, key, result, settings.cache_ttl_random, generation)
    return result


@router.get("/jokes/{joke_type}/random", response_model=list[Joke])
async def jokes_by_type_random(
    request: Request,
    joke_type: str,
    cache: ResponseCache = Depends(get_cache),
    store: JokeStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Any:
    return await cached(request, cache, settings.cache_ttl_random, lambda: store.by_type(joke_type, 1))


@router.get("/jokes/{joke_type}/ten", response_model=list[Joke])
async def jokes_by_type_ten(
    request: Request,
    joke_type: str,
    cache: ResponseCache = Depends(get_cache),
    store: JokeStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Any:
    return await cached(request, cache, settings.cache_ttl_random, lambda: store.by_type(joke_type, 10))


@router.post("/jokes/{joke_id}/rate", response_model=Joke)
async def rate(
    joke_id: str,
    value: Any = Body(default=None, embed=True, description="Rating between 0 and 5"),
    cache: ResponseCache = Depends(get_cache),
    store: JokeStore = Depends(get_store),
) -> Joke:
    """Rate a joke and return it with the updated average."""
    return await rate_joke(store, cache, joke_id, value)


@router.get("/jokes/{joke_id}", response_model=Joke)
async def get_joke(
    request: Request,
    joke_id: str,
    cache: ResponseCache = Depends(get_cache),
    store: JokeStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Any:
    async def load() -> Joke:
        joke = await store.get(joke_id)
        if joke is None:
            raise JokeNotFoundError(joke_id)
        return joke

    return await cached(request, cache, settings.cache_ttl_joke, load)


@router.post("/jokes", response_model=Joke, status_code=201)
async def create_joke(
    payload: JokeIn,
    cache: ResponseCache = Depends(get_cache),
    store: JokeStore = Depends(get_store),
) -> Joke:
    """Add a joke. It starts with rating 0 and no votes."""
    return await add_joke(store, cache, payload)


@router.put("/jokes/{joke_id}", response_model=Joke)
async def edit_joke(
    joke_id: str,
    payload: JokeIn,
    cache: ResponseCache = Depends(get_cache),
    store: JokeStore = Depends(get_store),
) -> Joke:
    """Edit a joke's type, setup and punchline. Rating and votes are kept."""
    return await update_joke(store, cache, joke_id, payload)


@router.get("/types", response_model=list[str])
async def get_types(
    request: Request,
    cache: ResponseCache = Depends(get_cache),
    store: JokeStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Any:
    """List distinct joke types."""
    return await cached(request, cache, settings.cache_ttl_types, store.get_types)
