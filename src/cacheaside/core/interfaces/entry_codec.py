"""Entry codec interface."""

from datetime import datetime
from typing import Any, Protocol

from cacheaside.core.entities.cache_entry import CacheEntry


class IEntryCodec(Protocol):
    """Contract for converting cache entries to and from bytes."""

    def encode(self, entry: CacheEntry[Any]) -> bytes:
        """Serialize an entry to bytes.

        Raises:
            SerializationError: If the value cannot be serialized.
        """
        ...

    def decode(self, data: bytes) -> CacheEntry[Any]:
        """Deserialize bytes to an entry.

        Raises:
            SerializationError: If the data is not a valid entry.
        """
        ...

    def rewrite_expiration(self, data: bytes, expire_at: datetime) -> bytes:
        """Replace the expiration of a serialized entry.

        The stored value is passed through without being interpreted.

        Raises:
            SerializationError: If the data is not a valid entry.
        """
        ...
