"""Cache entry entity."""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """Immutable envelope around a memoized value.

    The entry carries its own logical expiration instant. The store
    usually keeps the bytes for longer (the physical TTL), so an entry
    can be logically expired while still being readable; that copy is
    what stale fallback serves.
    """

    value: T
    expire_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check if the entry is logically expired.

        Args:
            now: Reference instant. Defaults to the current UTC time.

        Returns:
            True once expire_at has been reached.
        """
        current = now or datetime.now(timezone.utc)
        return self.expire_at <= current

    def expired(self, at: datetime) -> "CacheEntry[T]":
        """Return a copy of this entry expiring at the given instant."""
        return replace(self, expire_at=at)

    @classmethod
    def create(
        cls,
        value: T,
        duration: timedelta,
        now: datetime | None = None,
    ) -> "CacheEntry[T]":
        """Factory method to create a fresh cache entry.

        Args:
            value: The value to cache.
            duration: Logical freshness window.
            now: Creation instant. Defaults to the current UTC time.

        Returns:
            A new CacheEntry expiring at now + duration.
        """
        created_at = now or datetime.now(timezone.utc)
        return cls(value=value, expire_at=created_at + duration)
