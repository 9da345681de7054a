from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, NamedTuple, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sparray.sparray import sparray

V = TypeVar("V")


class Entry(NamedTuple):
    """An element paired with its position, as produced by ``sparray.enumerate()``."""

    index: int
    value: Any


class KeyValue(NamedTuple):
    """A single key/value record of a :class:`Grouping`."""

    key: str
    value: Any


class Grouping(Mapping[str, V]):
    """Read-only, ordered mapping from string keys to values.

    Returned by ``sparray.group_by()`` and ``sparray.index_by()``. Iteration
    follows the order in which each key was first produced.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Mapping[str, V] | None = None) -> None:
        """Initialize a Grouping.

        Args:
            items: Initial key/value pairs (copied; defaults to empty)
        """
        self._items: dict[str, V] = dict(items) if items is not None else {}

    def __getitem__(self, key: str) -> V:
        """Return the value stored under key."""
        return self._items[key]

    def __iter__(self) -> Iterator[str]:
        """Iterate over keys in insertion order."""
        return iter(self._items)

    def __len__(self) -> int:
        """Return the number of keys."""
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        """Return True if other holds the same keys and values.

        Key order is not significant, as with ``dict``.
        """
        if isinstance(other, Grouping):
            return self._items == other._items
        if isinstance(other, Mapping):
            return self._items == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        """Return a representation showing the underlying items."""
        return f"Grouping({self._items!r})"

    def entries(self) -> sparray[KeyValue]:
        """Return the mapping as a sparray of ``KeyValue(key, value)`` records.

        Returns:
            New sparray in key order
        """
        from sparray.sparray import sparray

        return sparray([KeyValue(key, value) for key, value in self._items.items()])

    def to_dict(self) -> dict[str, V]:
        """Return a plain dict copy of the mapping."""
        return dict(self._items)
