"""In-memory response cache with TTL expiry.

Handles:
- Caching JSON-ready response payloads keyed by request URL
- Lazy, read-time expiry (no timers)
- Bulk invalidation by key substring
- Hit/miss accounting for stats

TTL policies (seconds, overridable via settings):
- Random listings: 60
- Joke by id: 300
- Type catalog: 600
- Search results: never cached

One instance per process, created by the application root and kept on
``app.state.cache``. All methods are synchronous, so on the asyncio loop
each call completes without interleaving.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
import time
from typing import Any

# TTL constants (in seconds)
TTL_DEFAULT = 300
TTL_RANDOM = 60
TTL_JOKE = 300
TTL_TYPES = 600

# Key patterns touched by joke mutations
PATTERN_JOKES = "/jokes"
PATTERN_RANDOM = "/random_"
PATTERN_TYPES = "/types"
JOKE_PATTERNS = (PATTERN_JOKES, PATTERN_RANDOM, PATTERN_TYPES)


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


@dataclass(frozen=True)
class CacheStats:
    size: int
    keys: list[str]
    hit_rate: float
    miss_rate: float


class ResponseCache:
    """Key/value store of cached responses with per-entry expiry."""

    def __init__(
        self,
        default_ttl: float = TTL_DEFAULT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Create a cache.

        Args:
            default_ttl: TTL in seconds used when ``set`` gets no explicit ttl.
            clock: Monotonic time source; injectable for tests.
        """
        self._entries: dict[str, CacheEntry] = {}
        self._default_ttl = default_ttl
        self._clock = clock
        self._hits = 0
        self._misses = 0
        self._generation = 0

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    @property
    def generation(self) -> int:
        """Counter bumped by every invalidation and clear."""
        return self._generation

    def _is_live(self, entry: CacheEntry, now: float) -> bool:
        return now <= entry.expires_at

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store value under key, replacing any existing entry.

        Args:
            key: Cache key (request path + query string).
            value: Payload to cache.
            ttl: Time-to-live in seconds. None uses the default TTL.
        """
        lifetime = self._default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + lifetime)

    def set_if_unchanged(self, key: str, value: Any, generation: int, ttl: float | None = None) -> bool:
        """Store value only if no invalidation happened since ``generation`` was read.

        A reader that loaded its payload before a write must not put that
        payload back after the write invalidated the cache.

        Returns:
            True if the value was stored.
        """
        if generation != self._generation:
            return False
        self.set(key, value, ttl)
        return True

    def get(self, key: str, default: Any = None) -> Any:
        """Get a live value, evicting the entry if it has expired.

        Returns:
            Cached value, or ``default`` on a miss.
        """
        entry = self._entries.get(key)
        if entry is None or not self._is_live(entry, self._clock()):
            if entry is not None:
                del self._entries[key]
            self._misses += 1
            return default

        self._hits += 1
        return entry.value

    def has(self, key: str) -> bool:
        """Check for a live entry. Counts toward metrics, never evicts."""
        entry = self._entries.get(key)
        exists = entry is not None and self._is_live(entry, self._clock())
        if exists:
            self._hits += 1
        else:
            self._misses += 1
        return exists

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove all entries and reset hit/miss metrics."""
        self._entries.clear()
        self._generation += 1
        self.reset_metrics()

    def reset_metrics(self) -> None:
        self._hits = 0
        self._misses = 0

    def cleanup(self) -> int:
        """Purge every expired entry.

        Returns:
            Number of entries removed.
        """
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if not self._is_live(entry, now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def invalidate_pattern(self, pattern: str) -> int:
        """Delete every key containing ``pattern`` as a substring.

        Returns:
            Number of entries removed.
        """
        self._generation += 1
        matched = [key for key in self._entries if pattern in key]
        for key in matched:
            del self._entries[key]
        return len(matched)

    def stats(self) -> CacheStats:
        """Report live entries and hit/miss rates since the last reset."""
        self.cleanup()

        total = self._hits + self._misses
        hit_rate = self._hits / total if total else 0.0
        miss_rate = self._misses / total if total else 0.0

        return CacheStats(
            size=len(self._entries),
            keys=list(self._entries),
            hit_rate=round(hit_rate, 2),
            miss_rate=round(miss_rate, 2),
        )

    def set_many(self, entries: Mapping[str, Any] | Iterable[tuple[str, Any]], ttl: float | None = None) -> None:
        items = entries.items() if isinstance(entries, Mapping) else entries
        for key, value in items:
            self.set(key, value, ttl)

    def touch(self, key: str, ttl: float) -> bool:
        """Push a live entry's expiry out to now + ttl.

        Returns:
            True if the entry was live and got extended, False otherwise.
        """
        entry = self._entries.get(key)
        now = self._clock()
        if entry is None or not self._is_live(entry, now):
            return False
        entry.expires_at = now + ttl
        return True

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for entry in self._entries.values() if self._is_live(entry, now))

    def __contains__(self, key: object) -> bool:
        entry = self._entries.get(key) if isinstance(key, str) else None
        return entry is not None and self._is_live(entry, self._clock())
