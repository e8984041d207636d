"""Domain services for cacheaside."""

from cacheaside.core.services.cache_aside_service import CacheAsideService

__all__ = ["CacheAsideService"]
