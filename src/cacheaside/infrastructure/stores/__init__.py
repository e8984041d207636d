"""Store client implementations."""

from cacheaside.infrastructure.stores.memory import InMemoryStoreClient
from cacheaside.infrastructure.stores.redis import RedisStoreClient

__all__ = [
    "InMemoryStoreClient",
    "RedisStoreClient",
]
