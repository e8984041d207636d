"""Core interfaces (Protocol classes) for cacheaside."""

from cacheaside.core.interfaces.entry_codec import IEntryCodec
from cacheaside.core.interfaces.store_client import IStoreClient

__all__ = [
    "IStoreClient",
    "IEntryCodec",
]
