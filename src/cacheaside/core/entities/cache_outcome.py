"""Per-call results reported by the cache-aside service."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class CacheOutcome(Enum):
    """How a get_or_set call produced its value."""

    BYPASSED = "bypassed"
    HIT = "hit"
    MISS_LOADED = "miss_loaded"
    STALE_SERVED = "stale_served"
    LOADER_FALLBACK_ON_INVALID_RESULT = "loader_fallback_on_invalid_result"
    LOADER_FALLBACK_ON_STORE_FAILURE = "loader_fallback_on_store_failure"


@dataclass(frozen=True)
class CacheResult(Generic[T]):
    """Value returned by get_or_set together with its outcome."""

    value: T
    outcome: CacheOutcome

    @property
    def from_cache(self) -> bool:
        """Check if the value was served from the store."""
        return self.outcome in (CacheOutcome.HIT, CacheOutcome.STALE_SERVED)


@dataclass
class PrefixExpiration:
    """Report of a single expire_by_prefix run.

    Attributes:
        prefix: The prefix that was expired.
        matched: Keys returned by the prefix scan.
        expired: Keys whose rewrite was acknowledged by the store.
        skipped: Keys that vanished before the read or held bytes that
            could not be decoded.
        failed: Keys whose individual write failed, with the error.
        error: Store failure that aborted the whole operation, if any.
    """

    prefix: str
    matched: list[str] = field(default_factory=list)
    expired: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, Exception] = field(default_factory=dict)
    error: Exception | None = None

    @property
    def is_partial_failure(self) -> bool:
        """Check if some writes succeeded while others failed."""
        return bool(self.failed) and bool(self.expired)

    @property
    def ok(self) -> bool:
        """Check if every matched entry was handled without errors."""
        return self.error is None and not self.failed
