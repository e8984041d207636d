"""Utility helpers for cacheaside."""

from cacheaside.utils.hashing import hash_value

__all__ = ["hash_value"]
