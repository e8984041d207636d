"""Cache configuration entity."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta

from cacheaside.core.exceptions import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class CacheConfig:
    """Cache configuration.

    Two independent durations drive the cache:

    - ``cache_duration_minutes`` is the logical freshness window written
      into every entry.
    - ``absolute_expiration_minutes`` is the physical TTL handed to the
      store. It must be at least as long as the logical window so that
      logically expired entries remain available for stale fallback.

    Store operations are bounded by the connect and operation timeouts;
    a timeout is reported the same way as a connection failure.
    """

    redis_url: str = "redis://localhost:6379"
    cache_duration_minutes: int = 5
    absolute_expiration_minutes: int = 60
    connect_timeout_ms: int = 5000
    operation_timeout_ms: int = 5000
    key_prefix: str | None = None
    enabled: bool = True

    def __post_init__(self) -> None:
        """Validate durations and timeouts."""
        if self.cache_duration_minutes <= 0:
            raise ConfigurationError("cache_duration_minutes must be greater than 0")
        if self.absolute_expiration_minutes < self.cache_duration_minutes:
            raise ConfigurationError(
                "absolute_expiration_minutes must be greater than or equal to "
                "cache_duration_minutes"
            )
        if self.connect_timeout_ms <= 0:
            raise ConfigurationError("connect_timeout_ms must be greater than 0")
        if self.operation_timeout_ms <= 0:
            raise ConfigurationError("operation_timeout_ms must be greater than 0")

    @property
    def cache_duration(self) -> timedelta:
        """Logical freshness window."""
        return timedelta(minutes=self.cache_duration_minutes)

    @property
    def absolute_expiration(self) -> timedelta:
        """Physical TTL of stored entries."""
        return timedelta(minutes=self.absolute_expiration_minutes)

    @property
    def connect_timeout(self) -> float:
        """Connect timeout in seconds."""
        return self.connect_timeout_ms / 1000

    @property
    def operation_timeout(self) -> float:
        """Read/write timeout in seconds."""
        return self.operation_timeout_ms / 1000

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        prefix: str = "CACHEASIDE_",
    ) -> "CacheConfig":
        """Build a configuration from environment variables.

        Recognized variables (shown with the default prefix):
        ``CACHEASIDE_REDIS_URL``, ``CACHEASIDE_CACHE_DURATION_MINUTES``,
        ``CACHEASIDE_ABSOLUTE_EXPIRATION_MINUTES``,
        ``CACHEASIDE_CONNECT_TIMEOUT_MS``, ``CACHEASIDE_OPERATION_TIMEOUT_MS``,
        ``CACHEASIDE_KEY_PREFIX`` and ``CACHEASIDE_ENABLED``. Unset
        variables keep their defaults.

        Args:
            environ: Mapping to read from. Defaults to os.environ.
            prefix: Prefix shared by all variable names.

        Returns:
            A validated CacheConfig.

        Raises:
            ConfigurationError: If a value is malformed or out of range.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}

        redis_url = env.get(f"{prefix}REDIS_URL")
        if redis_url:
            kwargs["redis_url"] = redis_url

        for field_name in (
            "cache_duration_minutes",
            "absolute_expiration_minutes",
            "connect_timeout_ms",
            "operation_timeout_ms",
        ):
            raw = env.get(f"{prefix}{field_name.upper()}")
            if raw is None or raw == "":
                continue
            try:
                kwargs[field_name] = int(raw)
            except ValueError as e:
                raise ConfigurationError(
                    f"{prefix}{field_name.upper()} must be an integer, got {raw!r}"
                ) from e

        key_prefix = env.get(f"{prefix}KEY_PREFIX")
        if key_prefix:
            kwargs["key_prefix"] = key_prefix

        enabled = env.get(f"{prefix}ENABLED")
        if enabled is not None and enabled != "":
            kwargs["enabled"] = enabled.strip().lower() in _TRUE_VALUES

        if not kwargs:
            return cls()
        return cls(**kwargs)  # type: ignore[arg-type]
