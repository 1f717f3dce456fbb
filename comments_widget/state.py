"""
Pure state transitions for the widget.

Lists are immutable tuples: every mutation returns a new tuple, so the
controller swaps a single reference and no half-updated list is ever
observable. Items are matched by their ``id``.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import TypeVar

T = TypeVar("T")


class ItemState(Enum):
    """Display state of one comment item."""

    VIEW = "VIEW"
    EDIT = "EDIT"


def toggle(state: ItemState) -> ItemState:
    """VIEW -> EDIT, EDIT -> VIEW."""
    return ItemState.EDIT if state is ItemState.VIEW else ItemState.VIEW


def merge_page(items: tuple[T, ...], page: Iterable[T]) -> tuple[T, ...]:
    """Append a fetched page, skipping ids already present (server order kept)."""
    seen = {item.id for item in items}
    merged = list(items)
    for item in page:
        if item.id in seen:
            continue
        seen.add(item.id)
        merged.append(item)
    return tuple(merged)


def prepend(items: tuple[T, ...], new: T) -> tuple[T, ...]:
    """Put `new` at the head; an older copy with the same id is dropped."""
    return (new,) + tuple(item for item in items if item.id != new.id)


def remove(items: tuple[T, ...], target: T) -> tuple[T, ...]:
    """Drop the item with the target's id; others keep their order."""
    return tuple(item for item in items if item.id != target.id)


def replace(items: tuple[T, ...], new: T, old: T | None = None) -> tuple[T, ...]:
    """Swap the item matching `old` (or `new`) by id, in place."""
    key = (old if old is not None else new).id
    return tuple(new if item.id == key else item for item in items)
