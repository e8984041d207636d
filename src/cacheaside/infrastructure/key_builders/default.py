"""Default key builder implementation."""

from collections.abc import Callable, Mapping
from typing import Any

from cacheaside.utils.hashing import hash_value

DEFAULT_DELIMITER = ":"


class DefaultKeyBuilder:
    """Builds delimiter-separated cache keys.

    Keys of one family share a textual prefix that ends with the
    delimiter, which is what ``expire_by_prefix`` matches against::

        builder = DefaultKeyBuilder(prefix="app")
        builder.build("orders", 42)        # "app:orders:42"
        builder.build_prefix("orders")     # "app:orders:"
    """

    def __init__(
        self,
        prefix: str | None = None,
        delimiter: str = DEFAULT_DELIMITER,
    ) -> None:
        """Initialize the key builder.

        Args:
            prefix: Optional leading segment for all keys.
            delimiter: Separator placed between segments.
        """
        if not delimiter:
            raise ValueError("delimiter must not be empty")
        self._prefix = prefix
        self._delimiter = delimiter

    @property
    def delimiter(self) -> str:
        """Separator placed between key segments."""
        return self._delimiter

    def build(self, *parts: Any) -> str:
        """Build a key from its segments.

        Args:
            *parts: Key segments, converted with str().

        Returns:
            The joined key.
        """
        segments = [self._prefix] if self._prefix else []
        segments.extend(str(part) for part in parts)
        return self._delimiter.join(segments)

    def build_prefix(self, *parts: Any) -> str:
        """Build a key family prefix, terminated by the delimiter."""
        return self.build(*parts) + self._delimiter

    def build_call_key(
        self,
        func: Callable[..., Any],
        arguments: Mapping[str, Any] | None = None,
    ) -> str:
        """Build a key for a function call.

        Args:
            func: The function whose result is cached.
            arguments: Bound call arguments by parameter name.

        Returns:
            A key made of module, qualified name and an argument hash.
        """
        module = (func.__module__ or "default").split(".")[-1]
        parts: list[Any] = [module, func.__qualname__]
        if arguments:
            parts.append(f"a{self._delimiter}{hash_value(dict(arguments))}")
        return self.build(*parts)
