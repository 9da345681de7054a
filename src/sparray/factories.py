"""Functions that build sparrays from other values.

``from_`` is the general entry point; it inspects its arguments and dispatches
to one of the named constructors (``of_single``, ``of_collection``,
``of_variadic``, ``copy_of``), which can also be called directly.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence, Set
from numbers import Real
from operator import index as op_index
from typing import TYPE_CHECKING, TypeVar

from sparray.errors import InvalidCountError, InvalidInputError, InvalidStepError, MissingArgumentError
from sparray.sparray import sparray

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import Any, SupportsIndex

T = TypeVar("T")


def _is_array_like(obj: object) -> bool:
    """Return True for values whose elements ``from_`` copies instead of wrapping.

    Strings, bytes and mappings are single values.
    """
    if isinstance(obj, (str, bytes, bytearray)):
        return False
    return isinstance(obj, (sparray, Sequence, Set, Iterator))


def from_(*data: Any) -> sparray[Any]:
    """Build a sparray from its arguments.

    - no argument: an empty sparray
    - a single sparray: a copy of it
    - a single list, tuple, set, other sequence or iterator: its elements
    - any other single value: a sparray holding just that value
    - several arguments: a sparray of the arguments, in order

    Args:
        *data: Elements or a collection of elements

    Returns:
        New sparray
    """
    if not data:
        return empty()
    if len(data) > 1:
        return of_variadic(*data)

    value = data[0]
    if isinstance(value, sparray):
        return copy_of(value)
    if _is_array_like(value):
        return of_collection(value)
    return of_single(value)


def of_single(element: T) -> sparray[T]:
    """Build a sparray of exactly one element."""
    return sparray([element])


def of_collection(collection: Iterable[T]) -> sparray[T]:
    """Build a sparray holding the elements of a collection, in iteration order.

    Args:
        collection: Sparray, list, tuple, set, other sequence or iterator.
            Iterators are consumed.

    Returns:
        New sparray

    Raises:
        InvalidInputError: If collection is a string, bytes, mapping or scalar
    """
    if not _is_array_like(collection):
        raise InvalidInputError(f"expected a collection, got {type(collection).__name__!r}")
    return sparray(list(collection))


def of_variadic(*elements: T) -> sparray[T]:
    """Build a sparray whose elements are exactly the arguments."""
    return sparray(elements)


def copy_of(source: sparray[T]) -> sparray[T]:
    """Build a sparray holding the same elements as another sparray.

    Raises:
        InvalidInputError: If source is not a sparray
    """
    if not isinstance(source, sparray):
        raise InvalidInputError(f"expected a sparray, got {type(source).__name__!r}")
    return sparray(source.to_array())


def from_set(source: Iterable[T]) -> sparray[T]:
    """Build a sparray from the iteration order of a set."""
    return sparray(list(source))


def range_(
    start: SupportsIndex | None = None, end: SupportsIndex | None = None, step: SupportsIndex | None = None
) -> sparray[int]:
    """Build a sparray of integers.

    - ``range_(n)``: 0 up to n (exclusive), counting down when n is negative
    - ``range_(start, end)``: start (inclusive) to end (exclusive), by 1 or -1
    - ``range_(start, end, step)``: start (inclusive) to end (exclusive), by step

    Args:
        start: First value, or the end when it is the only argument
        end: Stop value (exclusive, optional)
        step: Increment (optional, inferred from the direction)

    Returns:
        New sparray of integers

    Raises:
        MissingArgumentError: If called without arguments
        InvalidStepError: If the sign of step contradicts the direction from start to end
    """
    if start is None:
        raise MissingArgumentError("range_() requires at least one argument")

    first = op_index(start)
    if end is None:
        first, stop = 0, first
    else:
        stop = op_index(end)

    increment = (-1 if stop < first else 1) if step is None else op_index(step)

    if (stop < first and increment >= 0) or (first < stop and increment <= 0):
        raise InvalidStepError(f"invalid step {increment} for a range from {first} to {stop}")

    # start == end never raises, whatever the step
    if first == stop:
        return empty()
    return sparray(list(range(first, stop, increment)))


def fill_of(n: float, value: T | None = None) -> sparray[T | None]:
    """Build a sparray of n references to the same value.

    Args:
        n: Number of elements; zero or negative gives an empty sparray
        value: The element (not copied, defaults to None)

    Returns:
        New sparray

    Raises:
        InvalidCountError: If n is not an integral number
    """
    if isinstance(n, bool) or not isinstance(n, Real) or not math.isfinite(n) or int(n) != n:
        raise InvalidCountError(f"invalid number of elements: {n!r}")
    return sparray([value] * max(int(n), 0))


def empty() -> sparray[Any]:
    """Build an empty sparray."""
    return sparray()


def is_sparray(obj: object) -> bool:
    """Return True if obj is a sparray."""
    return isinstance(obj, sparray)
