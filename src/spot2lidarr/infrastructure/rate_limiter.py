"""
Rate Limiter for External API Calls.

Hey future me - this is the ONE place that paces our traffic to Lidarr, MusicBrainz
and Spotify. Each service gets its own limiter instance, so a slow MusicBrainz
queue never blocks Lidarr calls and vice versa.

ALGORITHM: FIFO burst queue
- Callers hand us an async operation via execute() and await the result
- Operations wait in a FIFO queue (no priorities, no cancellation, unbounded)
- A single drain task releases up to burst_size operations at a time
- Operations inside one burst run concurrently (asyncio.gather)
- The next burst starts no earlier than 1/requests_per_second after the
  previous burst FINISHED, so start-to-start spacing is always >= 1/R
- Every operation resolves or rejects on its own, one failure never takes down
  its burst siblings

USAGE:
    limiter = get_musicbrainz_limiter()
    response = await limiter.execute(lambda: client.get(url))
"""

import asyncio
import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RateLimiterConfig:
    """Configuration for rate limiter.

    Hey future me - requests_per_second is really "bursts per second". With
    burst_size=3 and requests_per_second=6 Spotify sees up to 3 concurrent
    requests every ~167ms.
    """

    requests_per_second: float = 1.0
    burst_size: int = 1

    def __post_init__(self) -> None:
        if self.requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        if self.burst_size < 1:
            raise ValueError("burst_size must be at least 1")

    @property
    def min_interval(self) -> float:
        """Seconds between the end of one burst and the start of the next."""
        return 1.0 / self.requests_per_second


@dataclass
class RateLimiter:
    """FIFO burst rate limiter.

    Attributes:
        config: Rate limiter configuration
        _queue: Pending (operation, future) pairs in arrival order
        _processing: True while a drain task is running
        _last_release: Monotonic time the previous burst finished
        _drain_task: Reference to the running drain task (keeps it alive)
    """

    config: RateLimiterConfig = field(default_factory=RateLimiterConfig)

    # Internal state (not in __init__ signature)
    _queue: deque[tuple[Callable[[], Awaitable[Any]], "asyncio.Future[Any]"]] = field(
        default_factory=deque, init=False
    )
    _processing: bool = field(default=False, init=False)
    _last_release: float | None = field(default=None, init=False)
    _drain_task: "asyncio.Task[None] | None" = field(default=None, init=False)
    _name: str = field(default="default", init=False)

    @classmethod
    def for_lidarr(cls) -> "RateLimiter":
        """Create rate limiter for a (usually self-hosted) Lidarr instance.

        Hey future me - Lidarr has no published limit, but it's often running on a
        NAS next to the download client. One request per second keeps it responsive.
        """
        limiter = cls(config=RateLimiterConfig(requests_per_second=1.0, burst_size=1))
        limiter._name = "lidarr"
        return limiter

    @classmethod
    def for_musicbrainz(cls) -> "RateLimiter":
        """Create rate limiter for MusicBrainz API.

        Hey future me - MusicBrainz is STRICT: 1 req/sec per client, no bursts.
        Aggressive clients get their IP blocked for hours.
        """
        limiter = cls(config=RateLimiterConfig(requests_per_second=1.0, burst_size=1))
        limiter._name = "musicbrainz"
        return limiter

    @classmethod
    def for_spotify(cls) -> "RateLimiter":
        """Create rate limiter for Spotify Web API.

        Spotify allows short bursts. 6 bursts of 3 per second stays well below the
        rolling window limit for library reads.
        """
        limiter = cls(config=RateLimiterConfig(requests_per_second=6.0, burst_size=3))
        limiter._name = "spotify"
        return limiter

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Queue an operation and wait for its result.

        Args:
            operation: Zero-argument callable returning an awaitable (usually a lambda
                around an httpx call). It is NOT invoked until its burst is released.

        Returns:
            Whatever the operation returns

        Raises:
            Whatever the operation raises, unchanged
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[T] = loop.create_future()

        # Yo future me - no await between append and the _processing check! That's what
        # makes enqueue + "start drain if idle" atomic on the event loop.
        self._queue.append((operation, future))
        if not self._processing:
            self._processing = True
            self._drain_task = loop.create_task(self._process_queue())

        return await future

    async def _process_queue(self) -> None:
        """Drain the queue burst by burst until it's empty."""
        try:
            while self._queue:
                if self._last_release is not None:
                    elapsed = time.monotonic() - self._last_release
                    wait_time = self.config.min_interval - elapsed
                    if wait_time > 0:
                        logger.debug(
                            f"RateLimiter[{self._name}]: waiting {wait_time:.3f}s "
                            f"({len(self._queue)} queued)"
                        )
                        await asyncio.sleep(wait_time)

                burst_size = min(self.config.burst_size, len(self._queue))
                burst = [self._queue.popleft() for _ in range(burst_size)]
                await asyncio.gather(
                    *(self._run_one(operation, future) for operation, future in burst)
                )
                # CRITICAL: stamp AFTER the burst completes, slow responses must not
                # shorten the gap to the next burst.
                self._last_release = time.monotonic()
        finally:
            self._processing = False

    @staticmethod
    async def _run_one(
        operation: Callable[[], Awaitable[Any]], future: "asyncio.Future[Any]"
    ) -> None:
        """Run one operation and settle its future independently."""
        try:
            result = await operation()
        except Exception as e:
            # The caller may have been cancelled while waiting, then nobody listens.
            if not future.done():
                future.set_exception(e)
        else:
            if not future.done():
                future.set_result(result)

    @property
    def queue_length(self) -> int:
        """Number of operations waiting for a burst (for debugging)."""
        return len(self._queue)

    @property
    def name(self) -> str:
        """Get limiter name for logging."""
        return self._name


# Module-level rate limiters (singleton pattern)
# Hey future me - these are what the clients use when no limiter is injected.
# One limiter per service, shared by every client instance in the process.
_lidarr_limiter: RateLimiter | None = None
_musicbrainz_limiter: RateLimiter | None = None
_spotify_limiter: RateLimiter | None = None


def get_lidarr_limiter() -> RateLimiter:
    """Get singleton Lidarr rate limiter."""
    global _lidarr_limiter
    if _lidarr_limiter is None:
        _lidarr_limiter = RateLimiter.for_lidarr()
    return _lidarr_limiter


def get_musicbrainz_limiter() -> RateLimiter:
    """Get singleton MusicBrainz rate limiter."""
    global _musicbrainz_limiter
    if _musicbrainz_limiter is None:
        _musicbrainz_limiter = RateLimiter.for_musicbrainz()
    return _musicbrainz_limiter


def get_spotify_limiter() -> RateLimiter:
    """Get singleton Spotify rate limiter."""
    global _spotify_limiter
    if _spotify_limiter is None:
        _spotify_limiter = RateLimiter.for_spotify()
    return _spotify_limiter


__all__ = [
    "RateLimiter",
    "RateLimiterConfig",
    "get_lidarr_limiter",
    "get_musicbrainz_limiter",
    "get_spotify_limiter",
]
