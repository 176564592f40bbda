"""Sequence partitioning shared by the load and embedding stages."""

from collections.abc import Iterator, Sequence
from typing import TypeVar

T = TypeVar("T")


def chunk(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Split a sequence into contiguous chunks of at most ``size`` items.

    Yields ceil(len(items) / size) chunks; only the last may be shorter.

    Args:
        items: Sequence to partition.
        size: Maximum chunk length, must be positive.

    Raises:
        ValueError: If size is not positive.
    """
    if size <= 0:
        raise ValueError(f"chunk size must be positive, got {size}")

    for start in range(0, len(items), size):
        yield items[start : start + size]


def batch_count(total: int, size: int) -> int:
    """Number of chunks ``chunk`` yields for ``total`` items."""
    if size <= 0:
        raise ValueError(f"chunk size must be positive, got {size}")
    return (total + size - 1) // size
