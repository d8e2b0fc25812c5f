"""Data stores for persistence and caching.

Stores handle:
- Jokes: flat JSON file or PostgreSQL, behind the JokeStore protocol
- Response cache: in-memory TTL cache with pattern invalidation

No rating or invalidation policy in stores - that belongs in services.
"""
