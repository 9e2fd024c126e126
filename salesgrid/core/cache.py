"""
TTL cache holders - one instance per cached value, created at startup
and handed to request handlers through FastAPI dependencies.
"""
import asyncio
import time
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TTLCache(Generic[T]):
    """
    Single-value cache with an expiry.

    `get_or_load` returns the cached value while it is fresh, otherwise awaits
    the loader and stores its result for `ttl_seconds`. Concurrent callers on
    an expired entry share one load.
    """

    def __init__(
        self,
        name: str,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._value: Optional[T] = None
        self._expires_at: float = 0.0
        self._lock = asyncio.Lock()

    @property
    def is_fresh(self) -> bool:
        return self._value is not None and self._clock() < self._expires_at

    def peek(self) -> Optional[T]:
        """Cached value if still fresh, else None"""
        return self._value if self.is_fresh else None

    def set(self, value: T) -> None:
        self._value = value
        self._expires_at = self._clock() + self.ttl_seconds

    def invalidate(self) -> None:
        self._value = None
        self._expires_at = 0.0

    async def get_or_load(self, loader: Callable[[], Awaitable[T]]) -> T:
        if self.is_fresh:
            return self._value

        async with self._lock:
            # Another caller may have refreshed while we waited
            if self.is_fresh:
                return self._value

            value = await loader()
            self.set(value)
            logger.info(f"[cache] {self.name} refreshed (ttl={self.ttl_seconds}s)")
            return value


class AppCaches:
    """Process-wide caches, built once in the app lifespan"""

    def __init__(self, ttl_seconds: float):
        self.ml_token: TTLCache[str] = TTLCache("ml_token", ttl_seconds)
        self.seller_id: TTLCache[Any] = TTLCache("seller_id", ttl_seconds)
        self.cost_table: TTLCache[dict] = TTLCache("cost_table", ttl_seconds)

    def clear(self) -> None:
        for cache in (self.ml_token, self.seller_id, self.cost_table):
            cache.invalidate()
