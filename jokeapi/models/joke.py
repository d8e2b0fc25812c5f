"""Joke model.

One row per joke. ``rating`` is the running mean of all votes and ``votes``
the number of votes folded into it; individual votes are not stored.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from jokeapi.stores.postgres import Base


def generate_joke_id() -> str:
    """Generate unique public joke ID."""
    return str(uuid4())


class JokeRow(Base):
    """Joke with its aggregated rating."""

    __tablename__ = "jokes"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Public joke ID (used in URLs)
    joke_id: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        default=generate_joke_id,
    )

    type: Mapped[str] = mapped_column(String(50), index=True)  # e.g., "programming"
    setup: Mapped[str] = mapped_column(Text)
    punchline: Mapped[str] = mapped_column(Text)

    # Aggregated rating (0-5) and vote count
    rating: Mapped[float] = mapped_column(default=0, server_default="0")
    votes: Mapped[int] = mapped_column(default=0, server_default="0")

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<JokeRow {self.joke_id} type={self.type}>"
