# src/menuboard/utils/chunking.py
"""Helpers for splitting work into store-sized pieces."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TypeVar

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """Yield consecutive slices of ``items`` holding at most ``size`` elements.

    Raises:
        ValueError: If ``size`` is smaller than one.
    """
    if size < 1:
        raise ValueError(f"Chunk size must be at least 1, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])
