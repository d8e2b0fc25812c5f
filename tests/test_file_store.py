import asyncio
import json
from pathlib import Path
import threading

import pytest

from jokeapi.schemas import JokeIn
from jokeapi.stores.file_store import FileJokeStore


@pytest.mark.asyncio
async def test_load_assigns_ids_and_defaults(tmp_path: Path):
    path = tmp_path / "jokes.json"
    path.write_text(
        json.dumps(
            [
                {"id": 7, "type": "general", "setup": "s1", "punchline": "p1"},
                {"type": "dad", "setup": "s2", "punchline": "p2"},
            ]
        ),
        encoding="utf-8",
    )

    store = FileJokeStore.load(path)

    first = await store.get("7")
    second = await store.get("8")
    assert first is not None and first.rating == 0 and first.votes == 0
    assert second is not None and second.type == "dad"


def test_load_rejects_non_array(tmp_path: Path):
    path = tmp_path / "jokes.json"
    path.write_text('{"type": "general"}', encoding="utf-8")
    with pytest.raises(ValueError):
        FileJokeStore.load(path)


@pytest.mark.asyncio
async def test_types_and_count(store: FileJokeStore):
    assert await store.get_types() == ["programming", "general"]
    assert await store.count() == 3


@pytest.mark.asyncio
async def test_random_never_exceeds_available(store: FileJokeStore):
    assert len(await store.random(2)) == 2
    jokes = await store.random(10)
    assert sorted(j.id for j in jokes) == ["1", "2", "3"]


@pytest.mark.asyncio
async def test_by_type_filters_exactly(store: FileJokeStore):
    jokes = await store.by_type("programming", 10)
    assert {j.id for j in jokes} == {"1", "3"}
    assert await store.by_type("program", 10) == []


@pytest.mark.asyncio
async def test_search_is_case_insensitive_substring(store: FileJokeStore):
    assert [j.id for j in await store.search("DARK")] == ["1"]
    assert [j.id for j in await store.search("impasta")] == ["2"]
    assert {j.id for j in await store.search("programm")} == {"1", "3"}
    assert await store.search("nothing like this") == []


@pytest.mark.asyncio
async def test_add_starts_unrated_and_persists(store: FileJokeStore, jokes_file: Path):
    joke = await store.add(JokeIn(type="pun", setup="setup", punchline="punchline"))

    assert joke.rating == 0
    assert joke.votes == 0
    assert joke.id not in {"1", "2", "3"}

    reloaded = FileJokeStore.load(jokes_file)
    assert await reloaded.get(joke.id) == joke


@pytest.mark.asyncio
async def test_update_keeps_rating(store: FileJokeStore):
    joke = await store.update("2", JokeIn(type="food", setup="new setup", punchline="new punchline"))

    assert joke is not None
    assert (joke.type, joke.setup, joke.punchline) == ("food", "new setup", "new punchline")
    assert (joke.rating, joke.votes) == (4.5, 2)


@pytest.mark.asyncio
async def test_set_rating_persists(store: FileJokeStore, jokes_file: Path):
    await store.set_rating("1", 3.5, 4)

    reloaded = FileJokeStore.load(jokes_file)
    joke = await reloaded.get("1")
    assert joke is not None
    assert (joke.rating, joke.votes) == (3.5, 4)
    assert joke.setup == "Why do programmers prefer dark mode?"


@pytest.mark.asyncio
async def test_unknown_ids_return_none(store: FileJokeStore):
    assert await store.get("999") is None
    assert await store.update("999", JokeIn(type="a", setup="b", punchline="c")) is None
    assert await store.set_rating("999", 1, 1) is None


@pytest.mark.asyncio
async def test_returned_jokes_are_copies(store: FileJokeStore):
    joke = await store.get("1")
    joke.setup = "mutated"
    assert (await store.get("1")).setup != "mutated"


@pytest.mark.asyncio
async def test_file_writes_run_off_the_event_loop(store: FileJokeStore, monkeypatch: pytest.MonkeyPatch):
    loop_thread = threading.get_ident()
    writer_threads: list[int] = []
    original = store._write

    def recording_write(payload):
        writer_threads.append(threading.get_ident())
        original(payload)

    monkeypatch.setattr(store, "_write", recording_write)
    await store.set_rating("1", 2, 1)

    assert writer_threads and all(ident != loop_thread for ident in writer_threads)


@pytest.mark.asyncio
async def test_concurrent_writes_land_in_mutation_order(store: FileJokeStore, jokes_file: Path):
    await asyncio.gather(
        store.set_rating("1", 1, 1),
        store.set_rating("1", 2, 2),
        store.set_rating("1", 3, 3),
    )

    joke = await FileJokeStore.load(jokes_file).get("1")
    assert (joke.rating, joke.votes) == (3, 3)
