"""In-memory per-IP request limiter.

Fixed windows: each client IP gets ``limit`` requests per ``window`` seconds,
counted from its first request in the window. State is per process, like the
response cache, and lives on ``app.state.rate_limiter``.
"""

from collections.abc import Callable
from dataclasses import dataclass
import time

DEFAULT_LIMIT = 100
DEFAULT_WINDOW = 3600  # 1 hour

# Expired windows are purged once this many IPs are tracked
MAX_TRACKED_IPS = 10_000


@dataclass
class RateWindow:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateDecision:
    allowed: bool
    limit: int
    remaining: int
    retry_after: float


class IpRateLimiter:
    def __init__(
        self,
        limit: int = DEFAULT_LIMIT,
        window: float = DEFAULT_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = limit
        self._window = window
        self._clock = clock
        self._windows: dict[str, RateWindow] = {}

    def hit(self, ip: str) -> RateDecision:
        """Count one request from ``ip`` and decide whether it may proceed."""
        now = self._clock()
        current = self._windows.get(ip)
        if current is None or now >= current.reset_at:
            if len(self._windows) >= MAX_TRACKED_IPS:
                self._purge(now)
            current = RateWindow(count=0, reset_at=now + self._window)
            self._windows[ip] = current

        if current.count >= self._limit:
            return RateDecision(
                allowed=False,
                limit=self._limit,
                remaining=0,
                retry_after=current.reset_at - now,
            )

        current.count += 1
        return RateDecision(
            allowed=True,
            limit=self._limit,
            remaining=self._limit - current.count,
            retry_after=0.0,
        )

    def _purge(self, now: float) -> None:
        expired = [ip for ip, w in self._windows.items() if now >= w.reset_at]
        for ip in expired:
            del self._windows[ip]
