"""SQLAlchemy ORM models.

Models represent database tables:
- jokes: Jokes with their aggregated rating
"""

from jokeapi.models.joke import JokeRow

__all__ = ["JokeRow"]
