"""Store client interface."""

from collections.abc import Sequence
from datetime import timedelta
from typing import Protocol


class IStoreClient(Protocol):
    """Contract for key-value stores with native per-key TTL.

    Methods are async to support network-backed stores. Connectivity
    and timeout problems are raised as StoreUnavailableError; a missing
    key is reported as None and is never an error.
    """

    async def read(self, key: str) -> bytes | None:
        """Retrieve stored bytes by key.

        Args:
            key: The key to read.

        Returns:
            The stored bytes, or None if the key is absent.

        Raises:
            StoreUnavailableError: If the store cannot be reached.
        """
        ...

    async def write(self, key: str, value: bytes, ttl: timedelta) -> None:
        """Store bytes with a physical TTL.

        Args:
            key: The key to write.
            value: The bytes to store.
            ttl: How long the store retains the bytes.

        Raises:
            StoreUnavailableError: If the store cannot be reached.
        """
        ...

    async def multi_read(self, keys: Sequence[str]) -> list[bytes | None]:
        """Retrieve several keys in one round-trip.

        Args:
            keys: The keys to read.

        Returns:
            One item per key, in input order; None for absent keys.

        Raises:
            StoreUnavailableError: If the store cannot be reached.
        """
        ...

    async def multi_write(
        self,
        items: Sequence[tuple[str, bytes, timedelta]],
    ) -> list[Exception | None]:
        """Store several entries as one pipelined batch.

        The batch is not atomic: individual writes may fail while others
        succeed, and successful writes are never rolled back.

        Args:
            items: (key, value, ttl) tuples to write.

        Returns:
            One outcome per item, in input order: None on success or the
            error that made that write fail.

        Raises:
            StoreUnavailableError: If the batch could not be sent at all.
        """
        ...

    async def scan_by_prefix(self, prefix: str) -> list[str]:
        """List keys starting with the given prefix.

        The result is not guaranteed to be a point-in-time snapshot; keys
        written during the scan may or may not be included.

        Args:
            prefix: Literal key prefix.

        Returns:
            Matching keys.

        Raises:
            StoreUnavailableError: If the store cannot be reached.
        """
        ...
