"""Cache-aside decorators for async functions.

These decorators route function calls through a configured
CacheAsideService so call sites do not need to build keys or loaders
by hand.
"""

import functools
import inspect
import logging
import re
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from cacheaside.core.services.cache_aside_service import CacheAsideService, Validator
from cacheaside.infrastructure.key_builders.default import DefaultKeyBuilder

F = TypeVar("F", bound=Callable[..., Any])

KeySpec = str | Callable[..., str] | None

logger = logging.getLogger(__name__)

# Module-level cache service reference
_cache_service: CacheAsideService | None = None
_key_builder: DefaultKeyBuilder | None = None

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def configure(
    cache_service: CacheAsideService,
    key_builder: DefaultKeyBuilder | None = None,
) -> None:
    """Configure the cache service for decorators.

    Must be called before @cached or @expires take effect; until then
    decorated functions run uncached.

    Args:
        cache_service: The cache service instance to use.
        key_builder: Builder for generated keys. Defaults to a
            DefaultKeyBuilder without prefix.

    Example:
        cache_service = CacheAsideService(store=InMemoryStoreClient())
        configure(cache_service)
    """
    global _cache_service, _key_builder
    _cache_service = cache_service
    _key_builder = key_builder or DefaultKeyBuilder()


def get_cache_service() -> CacheAsideService | None:
    """Get the configured cache service.

    Returns:
        The configured cache service, or None if not configured.
    """
    return _cache_service


def cached(
    key: KeySpec = None,
    *,
    disable_cache: bool = False,
    use_stale_on_invalid: bool = False,
    is_valid: Validator | None = None,
) -> Callable[[F], F]:
    """Decorator memoizing async function results with get_or_set.

    Args:
        key: Cache key for the call. A string may use {arg_name}
            placeholders filled from the call's arguments; a callable
            receives (*args, **kwargs) and returns the key. When None,
            the key is derived from the function name and arguments.
        disable_cache: Always call the function directly.
        use_stale_on_invalid: Serve a logically expired copy when the
            function returns an invalid result.
        is_valid: Predicate deciding whether a result may be cached.

    Returns:
        Decorated function.

    Example:
        @cached(key="orders:{order_id}")
        async def get_order(order_id: int) -> dict:
            return await db.get_order(order_id)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            if _cache_service is None:
                # Cache not configured, execute directly
                return await func(*args, **kwargs)

            cache_key = _build_cache_key(func, args, kwargs, key)
            return await _cache_service.get_or_set(
                cache_key,
                lambda: func(*args, **kwargs),
                disable_cache=disable_cache,
                use_stale_on_invalid=use_stale_on_invalid,
                is_valid=is_valid,
            )

        return wrapper  # type: ignore

    return decorator


def expires(
    keys: Sequence[str] | None = None,
    prefixes: Sequence[str] | None = None,
) -> Callable[[F], F]:
    """Decorator soft-expiring cache entries after a mutation.

    Executes the decorated function and then logically expires the
    given keys and key prefixes. Nothing is expired when the function
    raises.

    Args:
        keys: Keys to expire. Support {arg_name} interpolation.
        prefixes: Key prefixes to expire. Support {arg_name} interpolation.

    Returns:
        Decorated function.

    Example:
        @expires(keys=["orders:{order_id}"], prefixes=["reports:"])
        async def update_order(order_id: int, data: dict) -> dict:
            return await db.update_order(order_id, data)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            result = await func(*args, **kwargs)

            if _cache_service is not None:
                arguments = _bind_arguments(func, args, kwargs)
                for template in keys or ():
                    await _cache_service.expire(_interpolate_string(template, arguments))
                for template in prefixes or ():
                    prefix = _interpolate_string(template, arguments)
                    if not prefix:
                        logger.warning(
                            "Skipping empty prefix from template %r in %s",
                            template,
                            func.__qualname__,
                        )
                        continue
                    await _cache_service.expire_by_prefix(prefix)

            return result

        return wrapper  # type: ignore

    return decorator


def _build_cache_key(
    func: Callable[..., Any],
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
    custom_key: KeySpec,
) -> str:
    """Build cache key for a function call.

    Args:
        func: The function being cached.
        args: Positional arguments.
        kwargs: Keyword arguments.
        custom_key: Custom key template or key builder function.

    Returns:
        The cache key string.
    """
    if _key_builder is None:
        raise RuntimeError("Cache not configured. Call configure() first.")

    if custom_key is not None:
        if callable(custom_key):
            return custom_key(*args, **kwargs)
        return _interpolate_string(custom_key, _bind_arguments(func, args, kwargs))

    return _key_builder.build_call_key(func, _bind_arguments(func, args, kwargs))


def _bind_arguments(
    func: Callable[..., Any],
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> dict[str, Any]:
    """Map positional and keyword arguments to parameter names."""
    try:
        bound = inspect.signature(func).bind_partial(*args, **kwargs)
    except (TypeError, ValueError):
        return dict(kwargs)
    bound.apply_defaults()
    return dict(bound.arguments)


def _interpolate_string(template: str, arguments: dict[str, Any]) -> str:
    """Interpolate {arg_name} placeholders in string.

    Args:
        template: String with {arg_name} placeholders.
        arguments: Call arguments by parameter name.

    Returns:
        Interpolated string. Unknown placeholders are kept as-is.
    """

    def replacer(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in arguments:
            return str(arguments[name])
        return match.group(0)

    return _PLACEHOLDER.sub(replacer, template)
