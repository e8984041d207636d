"""Core domain layer for cacheaside."""

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

__all__ = [
    # Entities
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
    # Interfaces
    "IStoreClient",
    "IEntryCodec",
    # Services
    "CacheAsideService",
]
