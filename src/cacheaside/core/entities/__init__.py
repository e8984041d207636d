"""Domain entities for cacheaside."""

from cacheaside.core.entities.cache_config import CacheConfig
from cacheaside.core.entities.cache_entry import CacheEntry
from cacheaside.core.entities.cache_outcome import (
    CacheOutcome,
    CacheResult,
    PrefixExpiration,
)

__all__ = [
    "CacheEntry",
    "CacheConfig",
    "CacheOutcome",
    "CacheResult",
    "PrefixExpiration",
]
