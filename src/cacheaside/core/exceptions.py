"""Exceptions raised by cacheaside components."""


class CacheAsideError(Exception):
    """Base class for all cacheaside errors."""


class StoreUnavailableError(CacheAsideError):
    """Raised by store clients on connectivity or timeout problems.

    A missing key is never reported through this exception; store
    clients return None for absent keys.
    """


class SerializationError(CacheAsideError):
    """Raised when a cache entry cannot be encoded or decoded."""


class ConfigurationError(CacheAsideError, ValueError):
    """Raised when cache configuration values are out of range."""
