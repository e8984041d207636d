"""Tests for DefaultKeyBuilder."""

import pytest

from cacheaside import DefaultKeyBuilder


async def get_order(order_id: int) -> dict:
    return {"id": order_id}


class TestDefaultKeyBuilder:
    """Tests for DefaultKeyBuilder."""

    def test_build_without_prefix(self) -> None:
        """Test joining segments with the default delimiter."""
        assert DefaultKeyBuilder().build("orders", 42) == "orders:42"

    def test_build_with_prefix(self) -> None:
        """Test that the prefix leads every key."""
        builder = DefaultKeyBuilder(prefix="app")

        assert builder.build("orders", 42) == "app:orders:42"

    def test_build_prefix_ends_with_delimiter(self) -> None:
        """Test that family prefixes match their members textually."""
        builder = DefaultKeyBuilder(prefix="app")

        prefix = builder.build_prefix("orders")

        assert prefix == "app:orders:"
        assert builder.build("orders", 1).startswith(prefix)
        assert not builder.build("orders_archive", 1).startswith(prefix)

    def test_custom_delimiter(self) -> None:
        """Test building keys with a custom delimiter."""
        builder = DefaultKeyBuilder(prefix="app", delimiter="/")

        assert builder.build("orders", 1) == "app/orders/1"
        assert builder.build_prefix("orders") == "app/orders/"
        assert builder.delimiter == "/"

    def test_empty_delimiter_rejected(self) -> None:
        """Test that an empty delimiter is refused."""
        with pytest.raises(ValueError):
            DefaultKeyBuilder(delimiter="")

    def test_call_key_is_deterministic(self) -> None:
        """Test that equal arguments produce equal keys."""
        builder = DefaultKeyBuilder()

        key1 = builder.build_call_key(get_order, {"order_id": 1})
        key2 = builder.build_call_key(get_order, {"order_id": 1})

        assert key1 == key2
        assert key1.startswith("test_key_builder:get_order:a:")

    def test_call_key_differs_by_arguments(self) -> None:
        """Test that different arguments produce different keys."""
        builder = DefaultKeyBuilder()

        assert builder.build_call_key(get_order, {"order_id": 1}) != (
            builder.build_call_key(get_order, {"order_id": 2})
        )

    def test_call_key_without_arguments(self) -> None:
        """Test keys for calls without arguments."""
        assert DefaultKeyBuilder(prefix="app").build_call_key(get_order) == (
            "app:test_key_builder:get_order"
        )
