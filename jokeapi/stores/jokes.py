"""Joke repositories.

Two interchangeable backends implement ``JokeStore``:
- ``FileJokeStore``: JSON file loaded into memory, rewritten on every change
- ``SqlJokeStore``: PostgreSQL table ``jokes`` via async SQLAlchemy

Stores only move data; rating arithmetic and cache invalidation live in services.
"""

from typing import Protocol

from jokeapi.schemas import Joke, JokeIn
from jokeapi.settings import Settings


class JokeStore(Protocol):
    async def get_types(self) -> list[str]: ...

    async def count(self) -> int: ...

    async def random(self, n: int) -> list[Joke]: ...

    async def by_type(self, joke_type: str, n: int) -> list[Joke]: ...

    async def search(self, query: str) -> list[Joke]: ...

    async def get(self, joke_id: str) -> Joke | None: ...

    async def add(self, data: JokeIn) -> Joke: ...

    async def update(self, joke_id: str, data: JokeIn) -> Joke | None: ...

    async def set_rating(self, joke_id: str, rating: float, votes: int) -> Joke | None: ...

    async def close(self) -> None: ...


async def open_store(settings: Settings) -> JokeStore:
    """Build and connect the backend selected by ``settings.store_backend``."""
    if settings.store_backend == "postgres":
        from jokeapi.stores.postgres import Database
        from jokeapi.stores.sql_store import SqlJokeStore

        db = Database(settings)
        await db.connect()
        await db.ping()
        return SqlJokeStore(db)

    from jokeapi.stores.file_store import FileJokeStore

    return FileJokeStore.load(settings.jokes_file)
