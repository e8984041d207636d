"""In-memory store client implementation."""

import time
from collections.abc import Callable, Sequence
from datetime import timedelta

from cachetools import TLRUCache  # type: ignore[import-untyped]


def _time_to_use(_key: str, item: tuple[bytes, float], now: float) -> float:
    return now + item[1]


class InMemoryStoreClient:
    """In-memory store client with per-item TTL.

    Suitable for single-process deployments and tests. Uses cachetools'
    TLRUCache so every write honors its own TTL, with LRU eviction once
    ``maxsize`` is reached.
    """

    def __init__(
        self,
        maxsize: int = 1000,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory store.

        Args:
            maxsize: Maximum number of items in the store.
            timer: Clock used for TTL bookkeeping, in seconds.
        """
        self._maxsize = maxsize
        self._cache: TLRUCache[str, tuple[bytes, float]] = TLRUCache(
            maxsize=maxsize,
            ttu=_time_to_use,
            timer=timer,
        )

    async def read(self, key: str) -> bytes | None:
        """Retrieve stored bytes by key.

        Args:
            key: The key to read.

        Returns:
            The stored bytes, or None if absent or evicted.
        """
        item = self._cache.get(key)
        return item[0] if item is not None else None

    async def write(self, key: str, value: bytes, ttl: timedelta) -> None:
        """Store bytes with a physical TTL.

        Args:
            key: The key to write.
            value: The bytes to store.
            ttl: How long the bytes are retained.
        """
        self._cache[key] = (value, ttl.total_seconds())

    async def multi_read(self, keys: Sequence[str]) -> list[bytes | None]:
        """Retrieve several keys, in input order."""
        items = [self._cache.get(key) for key in keys]
        return [item[0] if item is not None else None for item in items]

    async def multi_write(
        self,
        items: Sequence[tuple[str, bytes, timedelta]],
    ) -> list[Exception | None]:
        """Store several entries; in memory every write succeeds."""
        outcomes: list[Exception | None] = []
        for key, value, ttl in items:
            self._cache[key] = (value, ttl.total_seconds())
            outcomes.append(None)
        return outcomes

    async def scan_by_prefix(self, prefix: str) -> list[str]:
        """List live keys starting with the given prefix.

        Args:
            prefix: Literal key prefix.

        Returns:
            Matching keys.
        """
        self._cache.expire()
        return [key for key in list(self._cache.keys()) if key.startswith(prefix)]

    async def clear(self) -> None:
        """Remove every stored key."""
        self._cache.clear()

    def __len__(self) -> int:
        """Return the number of items in the store."""
        return len(self._cache)

    @property
    def maxsize(self) -> int:
        """Return the maximum size of the store."""
        return self._maxsize
