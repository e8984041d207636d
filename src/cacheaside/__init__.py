"""cacheaside - Resilient cache-aside layer for async Python applications.

Memoizes the results of expensive async computations in a key-value
store with native TTL support (Redis or in-memory). Entries carry a
logical expiration separate from their physical TTL, so they can be
expired without being deleted and served as a stale fallback when a
fresh computation returns an invalid result. When the store is down,
every call degrades to running the computation directly.

Example:
    from cacheaside import CacheAsideService, CacheConfig, RedisStoreClient

    config = CacheConfig(
        cache_duration_minutes=5,
        absolute_expiration_minutes=60,
    )
    cache = CacheAsideService(
        store=RedisStoreClient.from_config(config),
        config=config,
    )

    forecast = await cache.get_or_set(
        "forecast:1",
        lambda: weather_api.get_forecast(1),
        use_stale_on_invalid=True,
        is_valid=lambda result: result.is_valid,
    )

    # Mark one entry, or a whole family of keys, as stale
    await cache.expire("forecast:1")
    await cache.expire_by_prefix("forecast:")

Decorators:
    from cacheaside.decorators import cached, configure, expires

    configure(cache)

    @cached(key="orders:{order_id}")
    async def get_order(order_id: int) -> dict:
        ...

    @expires(keys=["orders:{order_id}"])
    async def update_order(order_id: int, data: dict) -> dict:
        ...
"""

from cacheaside.core.entities import (
    CacheConfig,
    CacheEntry,
    CacheOutcome,
    CacheResult,
    PrefixExpiration,
)
from cacheaside.core.exceptions import (
    CacheAsideError,
    ConfigurationError,
    SerializationError,
    StoreUnavailableError,
)
from cacheaside.core.interfaces import IEntryCodec, IStoreClient
from cacheaside.core.services import CacheAsideService
from cacheaside.decorators import cached, configure, expires
from cacheaside.infrastructure import (
    DefaultKeyBuilder,
    InMemoryStoreClient,
    JsonEntryCodec,
    RedisStoreClient,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core entities
    "CacheConfig",
    "CacheEntry",
    "CacheOutcome",
    "CacheResult",
    "PrefixExpiration",
    # Exceptions
    "CacheAsideError",
    "ConfigurationError",
    "SerializationError",
    "StoreUnavailableError",
    # Core interfaces
    "IStoreClient",
    "IEntryCodec",
    # Core services
    "CacheAsideService",
    # Infrastructure implementations
    "InMemoryStoreClient",
    "RedisStoreClient",
    "DefaultKeyBuilder",
    "JsonEntryCodec",
    # Decorators
    "cached",
    "expires",
    "configure",
]
