"""Cache-aside service - orchestrates get-or-compute and soft expiration."""

import inspect
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import Any, TypeVar

from cacheaside.core.entities.cache_config import CacheConfig
from cacheaside.core.entities.cache_entry import CacheEntry
from cacheaside.core.entities.cache_outcome import (
    CacheOutcome,
    CacheResult,
    PrefixExpiration,
)
from cacheaside.core.exceptions import SerializationError, StoreUnavailableError
from cacheaside.core.interfaces.entry_codec import IEntryCodec
from cacheaside.core.interfaces.store_client import IStoreClient

T = TypeVar("T")

Validator = Callable[[Any], bool]

logger = logging.getLogger(__name__)

_QUIET_OUTCOMES = frozenset(
    {CacheOutcome.BYPASSED, CacheOutcome.HIT, CacheOutcome.MISS_LOADED}
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CacheAsideService:
    """Domain service implementing the cache-aside protocol.

    Values produced by an application loader are memoized in the store
    together with a logical expiration. Entries are kept physically for
    ``absolute_expiration`` so that logically expired copies remain
    available as a stale fallback.

    Store and codec problems never reach the caller: reads degrade to a
    direct loader call, and writes and expirations are logged and
    skipped. Loader exceptions propagate unchanged.

    The service keeps no per-key state. Concurrent misses for the same
    key each run the loader and write their own result, last write wins.
    """

    def __init__(
        self,
        store: IStoreClient,
        codec: IEntryCodec | None = None,
        config: CacheConfig | None = None,
        is_valid: Validator | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the cache-aside service.

        Args:
            store: The store client used for persistence.
            codec: Codec for cache entries. Defaults to JsonEntryCodec.
            config: Optional cache configuration. Uses defaults if not provided.
            is_valid: Default predicate deciding whether a loader result
                may be cached. Defaults to accepting every result.
            clock: Source of the current time. Naive results are taken
                as UTC.
        """
        if codec is None:
            from cacheaside.infrastructure.serializers.json import JsonEntryCodec

            codec = JsonEntryCodec()

        self._store = store
        self._codec = codec
        self._config = config or CacheConfig()
        self._is_valid = is_valid
        self._clock = clock or _utc_now

        self._stats: dict[str, int] = {}
        self.reset_stats()

    @property
    def config(self) -> CacheConfig:
        """Get the cache configuration."""
        return self._config

    @property
    def store(self) -> IStoreClient:
        """Get the store client."""
        return self._store

    @property
    def stats(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with one counter per outcome, the total number of
            get_or_set calls, and the number of store read and write errors.
        """
        stats = dict(self._stats)
        stats["total"] = sum(self._stats[outcome.value] for outcome in CacheOutcome)
        return stats

    def reset_stats(self) -> None:
        """Reset all statistics counters to zero."""
        self._stats = {outcome.value: 0 for outcome in CacheOutcome}
        self._stats["store_errors"] = 0
        self._stats["write_errors"] = 0

    async def get_or_set(
        self,
        key: str,
        loader: Callable[[], Awaitable[T]],
        *,
        disable_cache: bool = False,
        use_stale_on_invalid: bool = False,
        is_valid: Validator | None = None,
    ) -> T:
        """Return the cached value for key, computing it on a miss.

        Args:
            key: The cache key.
            loader: Zero-argument callable producing the value.
            disable_cache: Call the loader directly without touching the store.
            use_stale_on_invalid: When the loader result is invalid, serve
                a logically expired copy if one exists.
            is_valid: Predicate for this call, overriding the service default.

        Returns:
            The cached, freshly loaded or stale value.
        """
        result = await self.get_or_set_result(
            key,
            loader,
            disable_cache=disable_cache,
            use_stale_on_invalid=use_stale_on_invalid,
            is_valid=is_valid,
        )
        return result.value

    async def get_or_set_result(
        self,
        key: str,
        loader: Callable[[], Awaitable[T]],
        *,
        disable_cache: bool = False,
        use_stale_on_invalid: bool = False,
        is_valid: Validator | None = None,
    ) -> CacheResult[T]:
        """Same as get_or_set, also reporting how the value was obtained.

        Returns:
            A CacheResult holding the value and its CacheOutcome.
        """
        if disable_cache or not self._config.enabled:
            value = await _call_loader(loader)
            return self._finish(key, value, CacheOutcome.BYPASSED)

        try:
            cached = await self._read_entry(key)
        except (StoreUnavailableError, SerializationError) as e:
            self._stats["store_errors"] += 1
            logger.warning(
                "Cache read failed for key %s, falling back to loader: %s",
                key,
                e,
                extra={"cache_key": key},
            )
            value = await _call_loader(loader)
            return self._finish(key, value, CacheOutcome.LOADER_FALLBACK_ON_STORE_FAILURE)

        stale: CacheEntry[Any] | None = None
        if cached is not None:
            if not cached.is_expired(self._now()):
                return self._finish(key, cached.value, CacheOutcome.HIT)
            stale = cached

        value = await _call_loader(loader)

        if not self._check_valid(value, is_valid):
            if use_stale_on_invalid and stale is not None:
                return self._finish(key, stale.value, CacheOutcome.STALE_SERVED)
            return self._finish(
                key, value, CacheOutcome.LOADER_FALLBACK_ON_INVALID_RESULT
            )

        await self._write_entry(key, value)
        return self._finish(key, value, CacheOutcome.MISS_LOADED)

    async def expire(self, key: str) -> bool:
        """Logically expire a single entry without deleting it.

        The entry keeps its value and is rewritten with an expiration of
        now and a fresh physical TTL, so the next get_or_set reloads it
        while stale fallback stays possible.

        Args:
            key: The cache key to expire.

        Returns:
            True if an entry was rewritten, False if it was absent or the
            store could not be used.
        """
        try:
            data = await self._store.read(key)
            if data is None:
                logger.info("No cache entry to expire for key %s", key)
                return False
            rewritten = self._codec.rewrite_expiration(data, self._now())
            await self._store.write(key, rewritten, self._config.absolute_expiration)
        except StoreUnavailableError as e:
            self._stats["store_errors"] += 1
            logger.warning("Could not expire key %s: %s", key, e, extra={"cache_key": key})
            return False
        except SerializationError as e:
            logger.warning(
                "Could not expire key %s, stored entry is unreadable: %s",
                key,
                e,
                extra={"cache_key": key},
            )
            return False

        logger.info("Expiration updated for key %s", key)
        return True

    async def expire_by_prefix(self, prefix: str) -> PrefixExpiration:
        """Logically expire every entry whose key starts with prefix.

        Reads all matching entries with one batched read and rewrites
        them with one pipelined write. The scan is not a point-in-time
        snapshot, so keys written concurrently may or may not be
        expired. Individual write failures do not undo the other writes.

        Args:
            prefix: Literal key prefix, usually ending with a delimiter
                (e.g. "orders:").

        Returns:
            A PrefixExpiration report.

        Raises:
            ValueError: If prefix is empty.
        """
        if not prefix:
            raise ValueError("prefix must not be empty")

        report = PrefixExpiration(prefix=prefix)

        try:
            report.matched = await self._store.scan_by_prefix(prefix)
            if not report.matched:
                logger.info("No keys found with prefix %s", prefix)
                return report
            values = await self._store.multi_read(report.matched)
        except StoreUnavailableError as e:
            return self._abort_prefix(report, e)

        now = self._now()
        ttl = self._config.absolute_expiration
        writes: list[tuple[str, bytes, timedelta]] = []
        for key, data in zip(report.matched, values):
            if data is None:
                report.skipped.append(key)
                continue
            try:
                writes.append((key, self._codec.rewrite_expiration(data, now), ttl))
            except SerializationError as e:
                logger.warning("Skipping unreadable entry %s: %s", key, e)
                report.skipped.append(key)

        if not writes:
            return report

        try:
            outcomes = await self._store.multi_write(writes)
        except StoreUnavailableError as e:
            return self._abort_prefix(report, e)

        for (key, _, _), error in zip(writes, outcomes):
            if error is None:
                report.expired.append(key)
            else:
                report.failed[key] = error

        if report.failed:
            logger.warning(
                "Expired %d of %d entries with prefix %s; failed keys: %s",
                len(report.expired),
                len(writes),
                prefix,
                ", ".join(report.failed),
            )
        else:
            logger.info(
                "Expired %d entries with prefix %s", len(report.expired), prefix
            )
        return report

    async def _read_entry(self, key: str) -> CacheEntry[Any] | None:
        data = await self._store.read(key)
        if data is None:
            return None
        return self._codec.decode(data)

    async def _write_entry(self, key: str, value: Any) -> None:
        entry = CacheEntry.create(value, self._config.cache_duration, now=self._now())
        try:
            data = self._codec.encode(entry)
            await self._store.write(key, data, self._config.absolute_expiration)
        except (StoreUnavailableError, SerializationError) as e:
            self._stats["write_errors"] += 1
            logger.warning(
                "Cache write failed for key %s: %s", key, e, extra={"cache_key": key}
            )

    def _now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            return now.replace(tzinfo=timezone.utc)
        return now

    def _check_valid(self, value: Any, is_valid: Validator | None) -> bool:
        predicate = is_valid or self._is_valid
        if predicate is None:
            return True
        return bool(predicate(value))

    def _abort_prefix(
        self, report: PrefixExpiration, error: StoreUnavailableError
    ) -> PrefixExpiration:
        self._stats["store_errors"] += 1
        report.error = error
        logger.warning("Could not expire prefix %s: %s", report.prefix, error)
        return report

    def _finish(self, key: str, value: T, outcome: CacheOutcome) -> CacheResult[T]:
        self._stats[outcome.value] += 1
        level = logging.DEBUG if outcome in _QUIET_OUTCOMES else logging.WARNING
        logger.log(
            level,
            "Cache %s for key %s",
            outcome.value,
            key,
            extra={"cache_key": key, "cache_outcome": outcome.value},
        )
        return CacheResult(value=value, outcome=outcome)


async def _call_loader(loader: Callable[[], Awaitable[T]]) -> T:
    result = loader()
    if inspect.isawaitable(result):
        return await result
    return result
