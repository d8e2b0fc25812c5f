"""PostgreSQL joke store."""

from sqlalchemy import func, or_, select

from jokeapi.models import JokeRow
from jokeapi.schemas import Joke, JokeIn
from jokeapi.stores.postgres import Database


def _to_joke(row: JokeRow) -> Joke:
    return Joke(
        id=row.joke_id,
        type=row.type,
        setup=row.setup,
        punchline=row.punchline,
        rating=float(row.rating or 0),
        votes=int(row.votes or 0),
    )


class SqlJokeStore:
    def __init__(self, db: Database):
        self._db = db

    async def get_types(self) -> list[str]:
        async with self._db.session() as session:
            result = await session.execute(select(JokeRow.type).distinct())
            return list(result.scalars().all())

    async def count(self) -> int:
        async with self._db.session() as session:
            result = await session.execute(select(func.count(JokeRow.id)))
            return result.scalar() or 0

    async def random(self, n: int) -> list[Joke]:
        async with self._db.session() as session:
            result = await session.execute(select(JokeRow).order_by(func.random()).limit(max(n, 0)))
            return [_to_joke(row) for row in result.scalars().all()]

    async def by_type(self, joke_type: str, n: int) -> list[Joke]:
        async with self._db.session() as session:
            query = (
                select(JokeRow)
                .where(JokeRow.type == joke_type)
                .order_by(func.random())
                .limit(max(n, 0))
            )
            result = await session.execute(query)
            return [_to_joke(row) for row in result.scalars().all()]

    async def search(self, query: str) -> list[Joke]:
        async with self._db.session() as session:
            stmt = select(JokeRow).where(
                or_(
                    JokeRow.setup.icontains(query, autoescape=True),
                    JokeRow.punchline.icontains(query, autoescape=True),
                    JokeRow.type.icontains(query, autoescape=True),
                )
            )
            result = await session.execute(stmt)
            return [_to_joke(row) for row in result.scalars().all()]

    async def _row(self, session, joke_id: str) -> JokeRow | None:
        result = await session.execute(select(JokeRow).where(JokeRow.joke_id == joke_id))
        return result.scalar_one_or_none()

    async def get(self, joke_id: str) -> Joke | None:
        async with self._db.session() as session:
            row = await self._row(session, joke_id)
            return _to_joke(row) if row else None

    async def add(self, data: JokeIn) -> Joke:
        async with self._db.session() as session:
            row = JokeRow(type=data.type, setup=data.setup, punchline=data.punchline, rating=0, votes=0)
            session.add(row)
            await session.flush()
            return _to_joke(row)

    async def update(self, joke_id: str, data: JokeIn) -> Joke | None:
        async with self._db.session() as session:
            row = await self._row(session, joke_id)
            if row is None:
                return None
            row.type = data.type
            row.setup = data.setup
            row.punchline = data.punchline
            await session.flush()
            return _to_joke(row)

    async def set_rating(self, joke_id: str, rating: float, votes: int) -> Joke | None:
        async with self._db.session() as session:
            row = await self._row(session, joke_id)
            if row is None:
                return None
            row.rating = rating
            row.votes = votes
            await session.flush()
            return _to_joke(row)

    async def close(self) -> None:
        await self._db.close()
