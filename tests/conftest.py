"""Shared fixtures: a temp-file joke store, a cache on a fake clock, and an HTTP client."""

import json
from pathlib import Path
import random

import pytest
from httpx import ASGITransport, AsyncClient

from jokeapi.main import create_app
from jokeapi.settings import Settings
from jokeapi.stores.cache import ResponseCache
from jokeapi.stores.file_store import FileJokeStore

SAMPLE_JOKES = [
    {"id": "1", "type": "programming", "setup": "Why do programmers prefer dark mode?", "punchline": "Because light attracts bugs!", "rating": 0, "votes": 0},
    {"id": "2", "type": "general", "setup": "What do you call a fake noodle?", "punchline": "An impasta.", "rating": 4.5, "votes": 2},
    {"id": "3", "type": "programming", "setup": "Why did the programmer quit his job?", "punchline": "Because he didn't get arrays.", "rating": 0, "votes": 0},
]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ResponseCache:
    return ResponseCache(default_ttl=300, clock=clock)


@pytest.fixture
def jokes_file(tmp_path: Path) -> Path:
    path = tmp_path / "jokes.json"
    path.write_text(json.dumps(SAMPLE_JOKES), encoding="utf-8")
    return path


@pytest.fixture
def store(jokes_file: Path) -> FileJokeStore:
    return FileJokeStore.load(jokes_file, rng=random.Random(42))


@pytest.fixture
def settings(jokes_file: Path) -> Settings:
    return Settings(_env_file=None, jokes_file=jokes_file, cache_cleanup_interval=0)


@pytest.fixture
def app(settings: Settings, store: FileJokeStore, cache: ResponseCache):
    return create_app(settings, store=store, cache=cache)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
