"""Redis store client implementation."""

import asyncio
import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import timedelta
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from cacheaside.core.entities.cache_config import CacheConfig
from cacheaside.core.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

_GLOB_SPECIAL = "\\*?[]"


def escape_glob(value: str) -> str:
    """Escape Redis glob metacharacters so the value matches literally."""
    return "".join(f"\\{char}" if char in _GLOB_SPECIAL else char for char in value)


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (RedisError, OSError, asyncio.TimeoutError) as e:
        raise StoreUnavailableError(f"Redis {operation} failed: {e}") from e


class RedisStoreClient:
    """Redis store client for distributed deployments.

    Every Redis, socket or timeout error is raised as
    StoreUnavailableError. Timeouts come from the connection settings:
    ``socket_connect_timeout`` for connects and ``socket_timeout`` for
    each read and write.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        key_prefix: str | None = None,
        connect_timeout: float = 5.0,
        operation_timeout: float = 5.0,
        client: Any = None,
        scan_count: int = 100,
    ) -> None:
        """Initialize the Redis store client.

        Args:
            redis_url: Redis connection URL. Ignored when client is given.
            key_prefix: Optional namespace prepended to every key.
            connect_timeout: Connect timeout in seconds.
            operation_timeout: Read/write timeout in seconds.
            client: Pre-built redis.asyncio client to use instead.
            scan_count: COUNT hint for each SCAN iteration.
        """
        if client is None:
            client = redis.from_url(  # type: ignore[no-untyped-call]
                redis_url,
                socket_connect_timeout=connect_timeout,
                socket_timeout=operation_timeout,
            )
        self._redis: redis.Redis = client
        self._key_prefix = key_prefix
        self._scan_count = scan_count

    @classmethod
    def from_config(cls, config: CacheConfig) -> "RedisStoreClient":
        """Create a client from a CacheConfig."""
        return cls(
            redis_url=config.redis_url,
            key_prefix=config.key_prefix,
            connect_timeout=config.connect_timeout,
            operation_timeout=config.operation_timeout,
        )

    async def read(self, key: str) -> bytes | None:
        """Retrieve stored bytes by key.

        Args:
            key: The key to read.

        Returns:
            The stored bytes, or None if the key is absent.

        Raises:
            StoreUnavailableError: On connection, timeout or Redis errors.
        """
        with _store_errors("GET"):
            return await self._redis.get(self._prefixed_key(key))

    async def write(self, key: str, value: bytes, ttl: timedelta) -> None:
        """Store bytes with a physical TTL.

        Args:
            key: The key to write.
            value: The bytes to store.
            ttl: Physical TTL, rounded down to whole seconds (minimum 1).

        Raises:
            StoreUnavailableError: On connection, timeout or Redis errors.
        """
        with _store_errors("SET"):
            await self._redis.set(self._prefixed_key(key), value, ex=_seconds(ttl))

    async def multi_read(self, keys: Sequence[str]) -> list[bytes | None]:
        """Retrieve several keys with a single MGET.

        Raises:
            StoreUnavailableError: On connection, timeout or Redis errors.
        """
        if not keys:
            return []
        with _store_errors("MGET"):
            values = await self._redis.mget([self._prefixed_key(key) for key in keys])
        return list(values)

    async def multi_write(
        self,
        items: Sequence[tuple[str, bytes, timedelta]],
    ) -> list[Exception | None]:
        """Store several entries through one non-transactional pipeline.

        All SET commands are sent together and the pipeline is executed
        with ``raise_on_error=False`` so that every command reports its
        own result.

        Args:
            items: (key, value, ttl) tuples to write.

        Returns:
            One outcome per item: None on success, or a
            StoreUnavailableError describing that write's failure.

        Raises:
            StoreUnavailableError: If the pipeline could not be executed.
        """
        if not items:
            return []

        with _store_errors("pipeline SET"):
            async with self._redis.pipeline(transaction=False) as pipe:
                for key, value, ttl in items:
                    pipe.set(self._prefixed_key(key), value, ex=_seconds(ttl))
                results = await pipe.execute(raise_on_error=False)

        outcomes: list[Exception | None] = []
        for (key, _, _), result in zip(items, results):
            if isinstance(result, Exception):
                error = StoreUnavailableError(f"Redis SET failed for {key}: {result}")
                error.__cause__ = result
                outcomes.append(error)
            else:
                outcomes.append(None)
        return outcomes

    async def scan_by_prefix(self, prefix: str) -> list[str]:
        """List keys starting with the given prefix using SCAN.

        Uses SCAN instead of KEYS for production safety. The prefix is
        matched literally; glob metacharacters in it are escaped.

        Args:
            prefix: Literal key prefix, without the client namespace.

        Returns:
            Matching keys, without the client namespace.

        Raises:
            StoreUnavailableError: On connection, timeout or Redis errors.
        """
        pattern = escape_glob(self._prefixed_key(prefix)) + "*"
        keys: list[str] = []
        with _store_errors("SCAN"):
            async for raw_key in self._redis.scan_iter(
                match=pattern, count=self._scan_count
            ):
                key = raw_key.decode() if isinstance(raw_key, bytes) else raw_key
                keys.append(self._unprefixed_key(key))
        logger.debug("Scanned %d keys for prefix %s", len(keys), prefix)
        return keys

    async def ping(self) -> bool:
        """Check connectivity.

        Raises:
            StoreUnavailableError: If Redis cannot be reached.
        """
        with _store_errors("PING"):
            return bool(await self._redis.ping())

    def _prefixed_key(self, key: str) -> str:
        """Add the namespace to a key.

        Args:
            key: The cache key.

        Returns:
            The key with namespace, or the key itself when none is set.
        """
        if not self._key_prefix:
            return key
        return f"{self._key_prefix}:{key}"

    def _unprefixed_key(self, key: str) -> str:
        if not self._key_prefix:
            return key
        return key.removeprefix(f"{self._key_prefix}:")

    async def close(self) -> None:
        """Close the Redis connection."""
        await self._redis.aclose()

    async def __aenter__(self) -> "RedisStoreClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.close()


def _seconds(ttl: timedelta) -> int:
    return max(1, int(ttl.total_seconds()))
