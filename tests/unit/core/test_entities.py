"""Tests for core entities."""

from datetime import datetime, timedelta, timezone

import pytest

from cacheaside import (
    CacheConfig,
    CacheEntry,
    CacheOutcome,
    CacheResult,
    ConfigurationError,
    PrefixExpiration,
    StoreUnavailableError,
)

NOW = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


class TestCacheEntry:
    """Tests for CacheEntry entity."""

    def test_create_sets_expiration(self) -> None:
        """Test that create computes expire_at from the duration."""
        entry = CacheEntry.create({"id": 1}, timedelta(minutes=5), now=NOW)

        assert entry.value == {"id": 1}
        assert entry.expire_at == NOW + timedelta(minutes=5)

    def test_create_defaults_to_utc_now(self) -> None:
        """Test that create without now uses an aware UTC timestamp."""
        entry = CacheEntry.create("v", timedelta(minutes=1))

        assert entry.expire_at.tzinfo is not None
        assert not entry.is_expired()

    def test_is_expired(self) -> None:
        """Test logical expiration around expire_at."""
        entry = CacheEntry(value="v", expire_at=NOW)

        assert not entry.is_expired(NOW - timedelta(seconds=1))
        assert entry.is_expired(NOW)
        assert entry.is_expired(NOW + timedelta(seconds=1))

    def test_expired_returns_copy(self) -> None:
        """Test that expired() leaves the original untouched."""
        entry = CacheEntry.create("v", timedelta(minutes=5), now=NOW)

        expired = entry.expired(NOW)

        assert expired.expire_at == NOW
        assert expired.value == "v"
        assert entry.expire_at == NOW + timedelta(minutes=5)

    def test_entry_is_immutable(self) -> None:
        """Test that CacheEntry is frozen."""
        entry = CacheEntry(value="v", expire_at=NOW)

        with pytest.raises(AttributeError):
            entry.value = "other"  # type: ignore[misc]


class TestCacheResult:
    """Tests for CacheResult."""

    @pytest.mark.parametrize(
        ("outcome", "from_cache"),
        [
            (CacheOutcome.HIT, True),
            (CacheOutcome.STALE_SERVED, True),
            (CacheOutcome.MISS_LOADED, False),
            (CacheOutcome.BYPASSED, False),
            (CacheOutcome.LOADER_FALLBACK_ON_INVALID_RESULT, False),
            (CacheOutcome.LOADER_FALLBACK_ON_STORE_FAILURE, False),
        ],
    )
    def test_from_cache(self, outcome: CacheOutcome, from_cache: bool) -> None:
        """Test which outcomes count as served from the store."""
        assert CacheResult(value=1, outcome=outcome).from_cache is from_cache


class TestPrefixExpiration:
    """Tests for PrefixExpiration reports."""

    def test_empty_report_is_ok(self) -> None:
        """Test that a report without matches is ok."""
        report = PrefixExpiration(prefix="orders:")

        assert report.ok
        assert not report.is_partial_failure

    def test_partial_failure(self) -> None:
        """Test that mixed results count as a partial failure."""
        report = PrefixExpiration(
            prefix="orders:",
            expired=["orders:1"],
            failed={"orders:2": StoreUnavailableError("boom")},
        )

        assert report.is_partial_failure
        assert not report.ok

    def test_total_failure_is_not_partial(self) -> None:
        """Test that all writes failing is not reported as partial."""
        report = PrefixExpiration(
            prefix="orders:",
            failed={"orders:1": StoreUnavailableError("boom")},
        )

        assert not report.is_partial_failure
        assert not report.ok


class TestCacheConfig:
    """Tests for CacheConfig entity."""

    def test_defaults(self) -> None:
        """Test default configuration values."""
        config = CacheConfig()

        assert config.enabled is True
        assert config.cache_duration == timedelta(minutes=5)
        assert config.absolute_expiration == timedelta(minutes=60)
        assert config.connect_timeout == 5.0
        assert config.operation_timeout == 5.0
        assert config.key_prefix is None

    def test_custom_values(self) -> None:
        """Test custom configuration values."""
        config = CacheConfig(
            cache_duration_minutes=10,
            absolute_expiration_minutes=10,
            connect_timeout_ms=250,
            operation_timeout_ms=1500,
        )

        assert config.cache_duration == timedelta(minutes=10)
        assert config.absolute_expiration == timedelta(minutes=10)
        assert config.connect_timeout == 0.25
        assert config.operation_timeout == 1.5

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"cache_duration_minutes": 0},
            {"cache_duration_minutes": -1},
            {"cache_duration_minutes": 10, "absolute_expiration_minutes": 5},
            {"connect_timeout_ms": 0},
            {"operation_timeout_ms": -5},
        ],
    )
    def test_invalid_values(self, kwargs: dict[str, int]) -> None:
        """Test that out-of-range values are rejected."""
        with pytest.raises(ConfigurationError):
            CacheConfig(**kwargs)

    def test_configuration_error_is_value_error(self) -> None:
        """Test that configuration errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            CacheConfig(cache_duration_minutes=0)

    def test_from_env(self) -> None:
        """Test loading configuration from environment variables."""
        config = CacheConfig.from_env(
            {
                "CACHEASIDE_REDIS_URL": "redis://cache:6379/1",
                "CACHEASIDE_CACHE_DURATION_MINUTES": "2",
                "CACHEASIDE_ABSOLUTE_EXPIRATION_MINUTES": "30",
                "CACHEASIDE_CONNECT_TIMEOUT_MS": "100",
                "CACHEASIDE_OPERATION_TIMEOUT_MS": "200",
                "CACHEASIDE_KEY_PREFIX": "app",
                "CACHEASIDE_ENABLED": "false",
            }
        )

        assert config.redis_url == "redis://cache:6379/1"
        assert config.cache_duration_minutes == 2
        assert config.absolute_expiration_minutes == 30
        assert config.connect_timeout_ms == 100
        assert config.operation_timeout_ms == 200
        assert config.key_prefix == "app"
        assert config.enabled is False

    def test_from_env_defaults(self) -> None:
        """Test that missing variables keep the defaults."""
        assert CacheConfig.from_env({}) == CacheConfig()

    def test_from_env_custom_prefix(self) -> None:
        """Test reading variables with a custom prefix."""
        config = CacheConfig.from_env(
            {"MYAPP_CACHE_DURATION_MINUTES": "7"}, prefix="MYAPP_"
        )

        assert config.cache_duration_minutes == 7

    def test_from_env_malformed_integer(self) -> None:
        """Test that non-integer values raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            CacheConfig.from_env({"CACHEASIDE_CACHE_DURATION_MINUTES": "five"})

    def test_from_env_validates_ranges(self) -> None:
        """Test that environment values go through validation."""
        with pytest.raises(ConfigurationError):
            CacheConfig.from_env(
                {
                    "CACHEASIDE_CACHE_DURATION_MINUTES": "90",
                    "CACHEASIDE_ABSOLUTE_EXPIRATION_MINUTES": "60",
                }
            )

    def test_from_env_reads_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that os.environ is used when no mapping is passed."""
        monkeypatch.setenv("CACHEASIDE_CACHE_DURATION_MINUTES", "3")

        assert CacheConfig.from_env().cache_duration_minutes == 3
