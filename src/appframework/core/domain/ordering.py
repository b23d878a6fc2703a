"""Ordering contract shared by apps and extensions."""
from __future__ import annotations

from typing import Iterable, List, Literal, Protocol, TypeVar

SortDirection = Literal["descending", "ascending"]


class Orderable(Protocol):
    """Anything carrying an integer ``order`` sort key."""

    order: int


T = TypeVar("T", bound=Orderable)


def sort_by_order(items: Iterable[T], direction: SortDirection = "descending") -> List[T]:
    """Return ``items`` sorted by ``order``.

    The sort is stable in both directions: items with equal order keep the
    relative order they had in ``items``.
    """
    return sorted(items, key=lambda item: item.order or 0, reverse=direction == "descending")


__all__ = ["Orderable", "SortDirection", "sort_by_order"]
