"""Pytest configuration for cacheaside tests."""

from datetime import datetime, timedelta, timezone

import pytest

from cacheaside import CacheAsideService, CacheConfig, InMemoryStoreClient


class FakeClock:
    """Controllable UTC clock for the cache service."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def reset_decorator_config():
    """Reset decorator configuration before each test."""
    import cacheaside.decorators

    # Store original values
    original_service = cacheaside.decorators._cache_service
    original_builder = cacheaside.decorators._key_builder

    yield

    # Restore original values after test
    cacheaside.decorators._cache_service = original_service
    cacheaside.decorators._key_builder = original_builder


@pytest.fixture
def clock() -> FakeClock:
    """Create a clock fixed at a known instant."""
    return FakeClock()


@pytest.fixture
def config() -> CacheConfig:
    """Create a configuration with short, distinct durations."""
    return CacheConfig(cache_duration_minutes=5, absolute_expiration_minutes=60)


@pytest.fixture
def store() -> InMemoryStoreClient:
    """Create an in-memory store for testing."""
    return InMemoryStoreClient(maxsize=100)


@pytest.fixture
def cache_service(
    store: InMemoryStoreClient, config: CacheConfig, clock: FakeClock
) -> CacheAsideService:
    """Create a cache service over the in-memory store."""
    return CacheAsideService(store=store, config=config, clock=clock)
