"""Infrastructure layer implementations for cacheaside."""

from cacheaside.infrastructure.key_builders import DefaultKeyBuilder
from cacheaside.infrastructure.serializers import JsonEntryCodec
from cacheaside.infrastructure.stores import InMemoryStoreClient, RedisStoreClient

__all__ = [
    "InMemoryStoreClient",
    "RedisStoreClient",
    "DefaultKeyBuilder",
    "JsonEntryCodec",
]
