"""Joke API: jokes with ratings behind an in-memory response cache."""
