"""Entry codec implementations."""

from cacheaside.infrastructure.serializers.json import JsonEntryCodec

__all__ = ["JsonEntryCodec"]
