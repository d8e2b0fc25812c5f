"""Schemas for joke endpoints."""

from pydantic import BaseModel, Field


class JokeIn(BaseModel):
    """Request body for adding or editing a joke.

    Rating and votes are not accepted here: new jokes start at 0/0 and edits
    keep whatever the joke already has.
    """

    type: str = Field(min_length=1, examples=["programming"])
    setup: str = Field(min_length=1)
    punchline: str = Field(min_length=1)


class Joke(JokeIn):
    """A joke as returned by the API."""

    id: str
    rating: float = Field(default=0.0, ge=0, le=5)
    votes: int = Field(default=0, ge=0)


class CacheStatsResponse(BaseModel):
    """Response payload for GET /admin/cache/stats."""

    size: int = Field(ge=0)
    keys: list[str]
    hit_rate: float = Field(alias="hitRate", ge=0, le=1)
    miss_rate: float = Field(alias="missRate", ge=0, le=1)

    model_config = {"populate_by_name": True}


class CleanupResponse(BaseModel):
    removed: int = Field(ge=0)
