"""Flat-file joke store.

The whole file is a JSON array of jokes. It is read once at startup and kept
in memory; every mutation rewrites the file through a temp file + rename so a
crash never leaves a half-written array behind. The write runs in a worker
thread so the event loop keeps serving reads meanwhile.

Mutating methods never await between reading and writing their joke, so on a
single event loop they cannot interleave. Snapshots are taken in mutation
order and written in that order under ``_write_lock``.
"""

import asyncio
import json
import logging
import os
from pathlib import Path
import random
import tempfile
from uuid import uuid4

from jokeapi.schemas import Joke, JokeIn

logger = logging.getLogger("uvicorn.error")


class FileJokeStore:
    def __init__(self, path: Path, jokes: list[Joke], *, rng: random.Random | None = None):
        self._path = Path(path)
        self._jokes: dict[str, Joke] = {joke.id: joke for joke in jokes}
        self._rng = rng or random.Random()
        self._write_lock = asyncio.Lock()

    @classmethod
    def load(cls, path: Path | str, *, rng: random.Random | None = None) -> "FileJokeStore":
        """Read jokes from a JSON file.

        Entries without an ``id`` get sequential ids continuing after the
        largest numeric id in the file. Missing rating/votes default to 0.
        """
        path = Path(path)
        raw = json.loads(path.read_text(encoding="utf-8")) if path.exists() else []
        if not isinstance(raw, list):
            raise ValueError(f"{path} must contain a JSON array of jokes")

        numeric_ids = [int(item["id"]) for item in raw if str(item.get("id", "")).isdigit()]
        next_id = max(numeric_ids, default=0) + 1

        jokes: list[Joke] = []
        for item in raw:
            if item.get("id") is None:
                item = {**item, "id": str(next_id)}
                next_id += 1
            jokes.append(Joke.model_validate({**item, "id": str(item["id"])}))

        logger.info(f"Loaded {len(jokes)} jokes from {path}")
        return cls(path, jokes, rng=rng)

    async def _persist(self) -> None:
        payload = [joke.model_dump() for joke in self._jokes.values()]
        async with self._write_lock:
            await asyncio.to_thread(self._write, payload)

    def _write(self, payload: list[dict]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".jokes-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _sample(self, jokes: list[Joke], n: int) -> list[Joke]:
        return [joke.model_copy() for joke in self._rng.sample(jokes, min(max(n, 0), len(jokes)))]

    async def get_types(self) -> list[str]:
        return list(dict.fromkeys(joke.type for joke in self._jokes.values()))

    async def count(self) -> int:
        return len(self._jokes)

    async def random(self, n: int) -> list[Joke]:
        return self._sample(list(self._jokes.values()), n)

    async def by_type(self, joke_type: str, n: int) -> list[Joke]:
        return self._sample([j for j in self._jokes.values() if j.type == joke_type], n)

    async def search(self, query: str) -> list[Joke]:
        term = query.lower()
        return [
            joke.model_copy()
            for joke in self._jokes.values()
            if term in joke.setup.lower() or term in joke.punchline.lower() or term in joke.type.lower()
        ]

    async def get(self, joke_id: str) -> Joke | None:
        joke = self._jokes.get(joke_id)
        return joke.model_copy() if joke else None

    async def add(self, data: JokeIn) -> Joke:
        joke = Joke(id=str(uuid4()), type=data.type, setup=data.setup, punchline=data.punchline)
        self._jokes[joke.id] = joke
        await self._persist()
        return joke.model_copy()

    async def update(self, joke_id: str, data: JokeIn) -> Joke | None:
        current = self._jokes.get(joke_id)
        if current is None:
            return None
        updated = current.model_copy(update={"type": data.type, "setup": data.setup, "punchline": data.punchline})
        self._jokes[joke_id] = updated
        await self._persist()
        return updated.model_copy()

    async def set_rating(self, joke_id: str, rating: float, votes: int) -> Joke | None:
        current = self._jokes.get(joke_id)
        if current is None:
            return None
        updated = current.model_copy(update={"rating": rating, "votes": votes})
        self._jokes[joke_id] = updated
        await self._persist()
        return updated.model_copy()

    async def close(self) -> None:
        return None
