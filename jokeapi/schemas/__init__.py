"""Pydantic schemas for API request/response validation."""

from jokeapi.schemas.common import ErrorDetail, ErrorResponse
from jokeapi.schemas.joke import (
    CacheStatsResponse,
    CleanupResponse,
    Joke,
    JokeIn,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "CacheStatsResponse",
    "CleanupResponse",
    "Joke",
    "JokeIn",
]
