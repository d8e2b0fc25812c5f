"""Joke write operations and the cache invalidation that must follow them.

Every successful add, edit or rate drops all cached joke responses so the
next read sees the new data instead of waiting for TTL expiry.
"""

import logging
import re

from jokeapi.errors import JokeNotFoundError
from jokeapi.schemas import Joke, JokeIn
from jokeapi.services.rating import apply_rating, validate_rating_value
from jokeapi.stores.cache import JOKE_PATTERNS, ResponseCache
from jokeapi.stores.jokes import JokeStore

logger = logging.getLogger("uvicorn.error")

NOT_A_NUMBER_MESSAGE = "The passed path is not a number."

# Leading integer, so "5abc" and "1.5" read as 5 and 1
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def invalidate_joke_caches(cache: ResponseCache) -> int:
    """Drop cached listings, lookups and the type catalog.

    Never raises: a failed invalidation only means stale data until TTL.

    Returns:
        Number of cache entries removed.
    """
    removed = 0
    for pattern in JOKE_PATTERNS:
        try:
            removed += cache.invalidate_pattern(pattern)
        except Exception:
            logger.warning(f"Cache invalidation failed for pattern {pattern!r}", exc_info=True)
    logger.debug(f"Invalidated {removed} cached joke responses")
    return removed


async def add_joke(store: JokeStore, cache: ResponseCache, data: JokeIn) -> Joke:
    joke = await store.add(data)
    logger.info(f"Joke added: {joke.id} ({joke.type})")
    invalidate_joke_caches(cache)
    return joke


async def update_joke(store: JokeStore, cache: ResponseCache, joke_id: str, data: JokeIn) -> Joke:
    """Replace a joke's text fields, keeping its rating and votes.

    Raises:
        JokeNotFoundError: If no joke has this id.
    """
    joke = await store.update(joke_id, data)
    if joke is None:
        raise JokeNotFoundError(joke_id)
    invalidate_joke_caches(cache)
    return joke


async def rate_joke(store: JokeStore, cache: ResponseCache, joke_id: str, value: object) -> Joke:
    """Validate a vote and fold it into the joke's rating.

    Args:
        store: Joke store.
        cache: Response cache to invalidate after the write.
        joke_id: Public joke id.
        value: Raw vote from the request body.

    Returns:
        The joke with its new rating and vote count.

    Raises:
        RatingValidationError: If the vote is not a number in [0, 5].
        JokeNotFoundError: If no joke has this id.
    """
    vote = validate_rating_value(value)

    current = await store.get(joke_id)
    if current is None:
        raise JokeNotFoundError(joke_id)

    new_rating = apply_rating(current.rating, current.votes, vote)
    joke = await store.set_rating(joke_id, new_rating, current.votes + 1)
    if joke is None:
        raise JokeNotFoundError(joke_id)

    logger.info(f"Joke {joke_id} rated {vote}: rating={joke.rating:.2f} votes={joke.votes}")
    invalidate_joke_caches(cache)
    return joke


async def random_selection(store: JokeStore, raw_num: str) -> list[Joke] | str:
    """Pick ``raw_num`` random jokes.

    Only the leading integer of ``raw_num`` counts.

    Returns:
        The jokes, or a plain-text explanation when ``raw_num`` does not
        start with a positive integer or exceeds the number of jokes.
    """
    match = _LEADING_INT.match(raw_num)
    if match is None:
        return NOT_A_NUMBER_MESSAGE
    digits = match.group(1)
    if digits.startswith("-"):
        return NOT_A_NUMBER_MESSAGE
    try:
        num = int(digits)
    except ValueError:
        # more digits than int() will parse; certainly more than we have
        num = None
    if num is not None and num <= 0:
        return NOT_A_NUMBER_MESSAGE

    total = await store.count()
    if num is None or num > total:
        return f"The passed path exceeds the number of jokes ({total})."
    return await store.random(num)
