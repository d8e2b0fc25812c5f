#!/usr/bin/env python3
"""Seed the PostgreSQL jokes table from a JSON file.

Idempotent: a joke whose (type, setup) pair already exists is skipped, so the
script can be re-run after adding jokes to the file.

Usage:
    alembic upgrade head
    python -m scripts.seed [path/to/jokes.json]
"""

import asyncio
import json
from pathlib import Path
import sys

from dotenv import load_dotenv
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from jokeapi.models import JokeRow
from jokeapi.settings import DEFAULT_JOKES_FILE, Settings

load_dotenv()


async def seed_database(jokes_file: Path = DEFAULT_JOKES_FILE) -> None:
    """Insert every joke from ``jokes_file`` that is not in the table yet."""
    settings = Settings()
    engine = create_async_engine(settings.async_database_url, echo=False)
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    jokes = json.loads(jokes_file.read_text(encoding="utf-8"))

    async with async_session() as session:
        print(f"Seeding {len(jokes)} jokes from {jokes_file}...")
        added = await seed_jokes(session, jokes)
        await session.commit()
        print(f"Done: {added} added, {len(jokes) - added} already present.")

    await engine.dispose()


async def seed_jokes(session: AsyncSession, jokes: list[dict]) -> int:
    """Add missing jokes and return how many were inserted."""
    added = 0
    for joke_def in jokes:
        result = await session.execute(
            select(JokeRow.id).where(
                JokeRow.type == joke_def["type"],
                JokeRow.setup == joke_def["setup"],
            )
        )
        if result.scalar_one_or_none() is not None:
            print(f"  skip  [{joke_def['type']}] {joke_def['setup'][:50]}")
            continue

        session.add(
            JokeRow(
                type=joke_def["type"],
                setup=joke_def["setup"],
                punchline=joke_def["punchline"],
                rating=float(joke_def.get("rating", 0) or 0),
                votes=int(joke_def.get("votes", 0) or 0),
            )
        )
        added += 1
        print(f"  add   [{joke_def['type']}] {joke_def['setup'][:50]}")

    return added


if __name__ == "__main__":
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_JOKES_FILE
    asyncio.run(seed_database(path))
