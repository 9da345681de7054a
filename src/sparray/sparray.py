from __future__ import annotations

import logging
import math
import random
from functools import cmp_to_key
from inspect import Parameter, signature
from numbers import Number
from operator import index as op_index
from typing import TYPE_CHECKING, Generic, TypeVar, overload

from sparray.errors import (
    EmptyReduceError,
    InvalidInputError,
    InvalidSizeError,
    InvalidStepError,
    SampleSizeExceededError,
)
from sparray.grouping import Entry, Grouping

if TYPE_CHECKING:
    import sys
    from collections.abc import Callable, Iterator
    from typing import Any, SupportsIndex

    if sys.version_info < (3, 11):
        from typing_extensions import Self
    else:
        from typing import Self

T = TypeVar("T")
U = TypeVar("U")

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = ","

# Element callbacks receive at most (element, index, sparray)
_ELEMENT_CALLBACK_ARGS = 3
# Reducers receive at most (accumulator, element, index, sparray)
_REDUCE_CALLBACK_ARGS = 4

_MISSING: Any = object()


def _positional_arity(fn: Callable[..., Any]) -> int | None:
    """Count the positional arguments fn requires.

    This is the number of required positional parameters, or 1 when all of
    them are optional. Returns None when the count is unknown: the callable
    takes ``*args`` or its signature cannot be inspected (``max``, ``min``
    and other builtins).
    """
    try:
        params = signature(fn).parameters.values()
    except (TypeError, ValueError):
        return None

    required = 0
    optional = 0
    for param in params:
        if param.kind is Parameter.VAR_POSITIONAL:
            return None
        if param.kind in (Parameter.POSITIONAL_ONLY, Parameter.POSITIONAL_OR_KEYWORD):
            if param.default is Parameter.empty:
                required += 1
            else:
                optional += 1
    if required == 0 and optional:
        return 1
    return required


def _bind(fn: Callable[..., U], max_args: int = _ELEMENT_CALLBACK_ARGS, base_args: int = 1) -> Callable[..., U]:
    """Wrap fn so it is called with only as many leading arguments as it requires.

    Callables of unknown arity are passed the first base_args arguments.
    """
    arity = _positional_arity(fn)
    n = base_args if arity is None else min(arity, max_args)
    if n >= max_args:
        return fn
    return lambda *args: fn(*args[:n])


def _is_collection(obj: object) -> bool:
    """Return True for values whose elements are spread by concat, flatten and friends."""
    return isinstance(obj, (sparray, list, tuple))


def _elements(obj: sparray[Any] | list[Any] | tuple[Any, ...]) -> list[Any] | tuple[Any, ...]:
    return obj._data if isinstance(obj, sparray) else obj


def _is_number(value: object) -> bool:
    # bool is an int subclass but does not count as numeric here
    return isinstance(value, Number) and not isinstance(value, bool)


def _render(value: object) -> str:
    if isinstance(value, sparray):
        return value.to_string()
    return repr(value)


def _text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, sparray):
        return value.join(DEFAULT_SEPARATOR)
    return str(value)


def _sort_keys(key: object) -> list[Any] | tuple[Any, ...]:
    if isinstance(key, sparray):
        return key._data
    if isinstance(key, (list, tuple)):
        return key
    return (key,)


class sparray(Generic[T]):  # noqa: N801
    """An immutable sequence with a chainable, functional API.

    Every transformation returns a new sparray. The backing list is never
    shared with callers: input data is copied on construction and
    ``to_array()`` hands out a fresh copy. Elements themselves are not copied.
    """

    __slots__ = ("_data",)

    _data: list[T]

    def __init__(self, data: list[T] | tuple[T, ...] = ()) -> None:
        """Initialize a sparray from a list or tuple.

        Most code should build sparrays through the factory functions
        (``from_``, ``range_``, ``fill_of``, ``empty``) instead.

        Args:
            data: Elements of the new sparray (copied, defaults to empty)

        Raises:
            InvalidInputError: If data is not a list or tuple
        """
        if not isinstance(data, (list, tuple)):
            raise InvalidInputError(f"sparray data must be a list or tuple, not {type(data).__name__!r}")
        self._data = list(data)

    @classmethod
    def _wrap(cls, data: list[U]) -> sparray[U]:
        """Adopt a freshly built list without copying it.

        Only for lists created inside this module that nothing else references.
        """
        result = cls.__new__(cls)
        result._data = data
        return result

    def _resolve_index(self, index: int) -> int:
        if index < 0:
            return len(self._data) + index
        return index

    # ---------------------
    # Python data model
    # ---------------------
    def __len__(self) -> int:
        """Return the number of elements."""
        return len(self._data)

    def __iter__(self) -> Iterator[T]:
        """Iterate over the elements in order."""
        return iter(self._data)

    def __reversed__(self) -> Iterator[T]:
        """Iterate over the elements from last to first."""
        return reversed(self._data)

    def __contains__(self, value: object) -> bool:
        """Return True if value is an element, as ``includes`` does."""
        return self.includes(value)  # type: ignore[arg-type]

    @overload
    def __getitem__(self, key: SupportsIndex) -> T: ...

    @overload
    def __getitem__(self, key: slice) -> sparray[T]: ...

    def __getitem__(self, key: SupportsIndex | slice) -> T | sparray[T]:
        """Get item(s) by index or slice.

        Unlike ``get()``, this follows the Python sequence protocol and raises
        for out-of-range indices.

        Args:
            key: Integer index or slice

        Returns:
            Single value for int index, new sparray for slice

        Raises:
            TypeError: If key is not an integer or slice
            IndexError: If index is out of range
            ValueError: If slice step is zero
        """
        if isinstance(key, slice):
            return self._wrap(self._data[key])
        idx = op_index(key)
        if not -len(self._data) <= idx < len(self._data):
            raise IndexError("sparray index out of range")
        return self._data[idx]

    def __eq__(self, other: object) -> bool:
        """Return True if other holds equal elements in the same order.

        Supports comparison with other sparrays, lists and tuples.
        """
        if self is other:
            return True
        if isinstance(other, sparray):
            return self._data == other._data
        if isinstance(other, (list, tuple)):
            return self._data == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        """Hash the elements as a tuple would.

        Raises:
            TypeError: If any element is unhashable
        """
        return hash(tuple(self._data))

    def _comparable(self, other: object) -> list[Any] | None:
        if isinstance(other, sparray):
            return other._data
        if isinstance(other, (list, tuple)):
            return list(other)
        return None

    def __lt__(self, other: object) -> bool:
        """Return True if self is lexicographically less than other."""
        data = self._comparable(other)
        if data is None:
            return NotImplemented
        return self._data < data

    def __le__(self, other: object) -> bool:
        """Return True if self is lexicographically less than or equal to other."""
        data = self._comparable(other)
        if data is None:
            return NotImplemented
        return self._data <= data

    def __gt__(self, other: object) -> bool:
        """Return True if self is lexicographically greater than other."""
        data = self._comparable(other)
        if data is None:
            return NotImplemented
        return self._data > data

    def __ge__(self, other: object) -> bool:
        """Return True if self is lexicographically greater than or equal to other."""
        data = self._comparable(other)
        if data is None:
            return NotImplemented
        return self._data >= data

    def __add__(self, other: object) -> sparray[Any]:
        """Return the concatenation of self and a sparray, list or tuple."""
        if not _is_collection(other):
            return NotImplemented
        return self.concat(other)

    def __radd__(self, other: object) -> sparray[Any]:
        """Return the concatenation of a list or tuple and self."""
        if not isinstance(other, (list, tuple)):
            return NotImplemented
        return self._wrap([*other, *self._data])

    def __reduce_ex__(self, protocol: SupportsIndex) -> tuple[type[Self], tuple[list[T]]]:
        """Return pickle data built from the element list."""
        return (self.__class__, (self._data,))

    def __copy__(self) -> sparray[T]:
        """Return a shallow copy holding the same elements."""
        return self._wrap(list(self._data))

    def __repr__(self) -> str:
        """Return a constructor-style representation."""
        return f"sparray({self._data!r})"

    def __str__(self) -> str:
        """Return the ``to_string`` rendering."""
        return self.to_string()

    # ---------------------
    # Access and iteration
    # ---------------------
    @property
    def length(self) -> int:
        """The number of elements of the sparray."""
        return len(self._data)

    def size(self) -> int:
        """Return the number of elements of the sparray."""
        return len(self._data)

    def get(self, index: SupportsIndex) -> T | None:
        """Get an element by index.

        Negative indices count backwards from the end (``-1`` is the last
        element). Out-of-range indices return None instead of raising.

        Args:
            index: Position of the element

        Returns:
            The element, or None if index is out of range
        """
        idx = self._resolve_index(op_index(index))
        if not 0 <= idx < len(self._data):
            return None
        return self._data[idx]

    def keys(self) -> Iterator[int]:
        """Return a fresh iterator over the indices."""
        return iter(range(len(self._data)))

    def values(self) -> Iterator[T]:
        """Return a fresh iterator over the elements."""
        return iter(self._data)

    def entries(self) -> Iterator[tuple[int, T]]:
        """Return a fresh iterator over ``(index, element)`` pairs."""
        return enumerate(self._data)

    def first(self, n: SupportsIndex | None = None) -> T | sparray[T] | None:
        """Return the first element, or the first n elements as a new sparray.

        Args:
            n: Number of elements (optional)

        Returns:
            The first element (None if empty) when n is omitted,
            otherwise a sparray of at most n elements
        """
        if n is None:
            return self.get(0)
        count = op_index(n)
        return self._wrap(self._data[: max(count, 0)])

    def last(self, n: SupportsIndex | None = None) -> T | sparray[T] | None:
        """Return the last element, or the last n elements as a new sparray.

        Args:
            n: Number of elements (optional)

        Returns:
            The last element (None if empty) when n is omitted,
            otherwise a sparray of at most n elements
        """
        if n is None:
            return self.get(-1)
        count = op_index(n)
        if count <= 0:
            return self._wrap([])
        return self._wrap(self._data[-count:])

    def is_empty(self) -> bool:
        """Return True if the sparray has no elements."""
        return not self._data

    def is_not_empty(self) -> bool:
        """Return True if the sparray has at least one element."""
        return bool(self._data)

    def to_array(self) -> list[T]:
        """Return the elements as a new list."""
        return list(self._data)

    def to_string(self) -> str:
        """Return a bracketed rendering such as ``[ 1, 2, 3 ]`` (``[ ]`` when empty)."""
        if not self._data:
            return "[ ]"
        return f"[ {', '.join(_render(value) for value in self._data)} ]"

    def join(self, separator: str | Callable[[int, int], str] | None = None) -> str:
        """Join the elements into a string.

        None elements render as empty strings and nested sparrays are joined
        with the default separator.

        Args:
            separator: A string placed between elements (default ``","``), or
                a function called once per gap as
                ``separator(index_from_start, index_from_end)`` that returns
                the string for that gap

        Returns:
            The joined string

        Raises:
            TypeError: If separator is neither a string nor callable
        """
        if separator is None:
            separator = DEFAULT_SEPARATOR
        if isinstance(separator, str):
            return separator.join(_text(value) for value in self._data)
        if not callable(separator):
            raise TypeError("separator must be a string or a callable")

        gaps = len(self._data) - 1
        parts: list[str] = []
        for i, value in enumerate(self._data):
            if i > 0:
                parts.append(separator(i - 1, gaps - i))
            parts.append(_text(value))
        return "".join(parts)

    # ---------------------
    # Transformations
    # ---------------------
    def for_each(self, fn: Callable[..., Any]) -> Self:
        """Call fn for every element in index order.

        Args:
            fn: Called as ``fn(element[, index[, sparray]])``

        Returns:
            self, for chaining
        """
        call = _bind(fn)
        for i, value in enumerate(self._data):
            call(value, i, self)
        return self

    def map(self, fn: Callable[..., U]) -> sparray[U]:
        """Build a new sparray by applying fn to every element.

        Args:
            fn: Called as ``fn(element[, index[, sparray]])``

        Returns:
            New sparray of the same length
        """
        call = _bind(fn)
        return self._wrap([call(value, i, self) for i, value in enumerate(self._data)])

    def filter(self, fn: Callable[..., Any]) -> sparray[T]:
        """Build a new sparray with only the elements for which fn is truthy.

        Args:
            fn: Called as ``fn(element[, index[, sparray]])``

        Returns:
            New sparray preserving the relative order of kept elements
        """
        call = _bind(fn)
        return self._wrap([value for i, value in enumerate(self._data) if call(value, i, self)])

    def flat_map(self, fn: Callable[..., Any]) -> sparray[Any]:
        """Map every element and splice collection results into the output.

        Sparray, list and tuple results are spread one level, None results are
        skipped and any other result is appended as a single element.

        Args:
            fn: Called as ``fn(element[, index[, sparray]])``

        Returns:
            New sparray
        """
        call = _bind(fn)
        flattened: list[Any] = []
        for i, value in enumerate(self._data):
            mapped = call(value, i, self)
            if mapped is None:
                continue
            if _is_collection(mapped):
                flattened.extend(_elements(mapped))
            else:
                flattened.append(mapped)
        return self._wrap(flattened)

    def flatten(self, depth: float | None = None) -> sparray[Any]:
        """Splice nested sparrays, lists and tuples into the sparray.

        Args:
            depth: How many nesting levels to flatten. 0 returns self,
                None or a negative depth means 1, ``math.inf`` flattens
                completely.

        Returns:
            New sparray (or self when depth is 0)
        """
        if depth is None or depth < 0:
            depth = 1
        if depth == 0:
            return self

        data: list[Any] = self._data
        while depth > 0:
            flattened: list[Any] = []
            nested = False
            for value in data:
                if _is_collection(value):
                    flattened.extend(_elements(value))
                    nested = True
                else:
                    flattened.append(value)
            data = flattened
            if not nested:
                break
            depth -= 1
        return self._wrap(data)

    def distinct(self) -> sparray[T]:
        """Remove duplicates, keeping the first occurrence of each element.

        Hashable elements are compared by value, unhashable ones by identity.
        """
        seen: set[Any] = set()
        seen_ids: set[int] = set()
        unique: list[T] = []
        for value in self._data:
            try:
                if value in seen:
                    continue
                seen.add(value)
            except TypeError:
                if id(value) in seen_ids:
                    continue
                seen_ids.add(id(value))
            unique.append(value)
        return self._wrap(unique)

    def concat(self, *items: Any) -> sparray[Any]:
        """Append sparrays, lists, tuples or single elements, in argument order.

        Args:
            *items: Collections are spread element-wise, anything else is
                appended as one element

        Returns:
            New sparray
        """
        data: list[Any] = list(self._data)
        for item in items:
            if _is_collection(item):
                data.extend(_elements(item))
            else:
                data.append(item)
        return self._wrap(data)

    def reverse(self) -> sparray[T]:
        """Return a new sparray with the elements in reverse order."""
        return self._wrap(self._data[::-1])

    def sort(self, cmp: Callable[[T, T], float] | None = None) -> sparray[T]:
        """Return a new sparray sorted by natural order or by a comparator.

        Args:
            cmp: Optional two-argument comparator; a negative result places
                the first argument before the second

        Returns:
            New sorted sparray (the sort is stable)

        Raises:
            TypeError: If elements cannot be compared
        """
        if cmp is None:
            return self._wrap(sorted(self._data))  # type: ignore[type-var]
        return self._wrap(sorted(self._data, key=cmp_to_key(cmp)))

    def sort_by(self, key_fn: Callable[[T], Any], reverse: bool = False) -> sparray[T]:
        """Return a new sparray sorted by one or more keys per element.

        key_fn may return a single key or a sparray, list or tuple of keys.
        Keys are compared in order and the first difference decides; when one
        key list is a prefix of the other the elements are considered equal.

        Args:
            key_fn: Called as ``key_fn(element)``
            reverse: If True, sort in descending order

        Returns:
            New sorted sparray (the sort is stable)
        """
        keys = [_sort_keys(key_fn(value)) for value in self._data]
        before, after = (1, -1) if reverse else (-1, 1)

        def compare(i: int, j: int) -> int:
            for key_a, key_b in zip(keys[i], keys[j]):
                if key_a < key_b:
                    return before
                if key_a > key_b:
                    return after
            return 0

        order = sorted(range(len(self._data)), key=cmp_to_key(compare))
        return self._wrap([self._data[i] for i in order])

    def slice(self, start: SupportsIndex, end: SupportsIndex | None = None) -> sparray[T]:
        """Return a new sparray with the elements from start up to (excluding) end.

        Negative indices count backwards from the end, as in ``get()``.

        Args:
            start: First index (inclusive)
            end: Last index (exclusive, optional, defaults to the end)
        """
        start_idx = self._resolve_index(op_index(start))
        if end is None:
            return self._wrap(self._data[start_idx:])
        end_idx = self._resolve_index(op_index(end))
        return self._wrap(self._data[start_idx:end_idx])

    def sliding(self, size: SupportsIndex, step: SupportsIndex | None = None) -> sparray[sparray[T]]:
        """Partition the sparray into windows.

        Windows start every step elements and hold up to size elements. The
        last window may be shorter; no window starts once one has reached the
        end of the sparray.

        Args:
            size: Maximum window length
            step: Distance between window starts (defaults to size)

        Returns:
            New sparray of sparrays

        Raises:
            InvalidSizeError: If size is less than 1
            InvalidStepError: If step is less than 1
        """
        size_val = op_index(size)
        if size_val < 1:
            raise InvalidSizeError("size must be a positive integer")
        step_val = size_val if step is None else op_index(step)
        if step_val < 1:
            raise InvalidStepError("step must be a positive integer")

        windows: list[sparray[T]] = []
        length = len(self._data)
        i = 0
        while i < length:
            windows.append(self._wrap(self._data[i : i + size_val]))
            if i + size_val >= length:
                break
            i += step_val
        return self._wrap(windows)

    def to_numeric(self) -> sparray[Any]:
        """Return a new sparray with non-numeric elements replaced by NaN."""
        return self._wrap([value if _is_number(value) else math.nan for value in self._data])

    def enumerate(self) -> sparray[Entry]:
        """Return a new sparray of ``Entry(index, value)`` records."""
        return self._wrap([Entry(i, value) for i, value in enumerate(self._data)])

    def zip(self, *others: Any) -> sparray[sparray[Any]]:
        """Combine self with other sources row by row.

        Each row is a sparray holding the i-th element of self followed by
        the i-th element of every other source. Sparrays, lists and tuples
        shorter than the result are padded with None; any other argument is
        repeated on every row.

        Args:
            *others: Sparrays, lists, tuples or single values

        Returns:
            New sparray of rows, as long as the longest collection
        """
        length = max([len(self._data)] + [len(_elements(other)) for other in others if _is_collection(other)])

        rows: list[sparray[Any]] = []
        for i in range(length):
            row = [self._data[i] if i < len(self._data) else None]
            for other in others:
                if _is_collection(other):
                    items = _elements(other)
                    row.append(items[i] if i < len(items) else None)
                else:
                    row.append(other)
            rows.append(self._wrap(row))
        return self._wrap(rows)

    def cross(self, other: Any, combine_fn: Callable[[T, Any], U] | None = None) -> sparray[U]:
        """Return the cartesian product of self and other.

        Args:
            other: Sparray, list, tuple or single value
            combine_fn: Called as ``combine_fn(left, right)`` for every pair;
                defaults to building a ``(left, right)`` tuple

        Returns:
            New sparray, self as the outer loop and other as the inner loop
        """
        right_items = _elements(other) if _is_collection(other) else (other,)
        combine: Callable[[T, Any], Any] = combine_fn if combine_fn is not None else (lambda left, right: (left, right))
        return self._wrap([combine(left, right) for left in self._data for right in right_items])

    # ---------------------
    # Aggregation and queries
    # ---------------------
    def reduce(self, fn: Callable[..., Any], initial: Any = _MISSING) -> Any:
        """Fold the elements from left to right.

        Args:
            fn: Called as ``fn(accumulator, element[, index[, sparray]])``
            initial: Initial accumulator (optional, defaults to the first element)

        Returns:
            The final accumulator

        Raises:
            EmptyReduceError: If the sparray is empty and no initial value is given
        """
        if initial is _MISSING:
            if not self._data:
                raise EmptyReduceError("reduce of empty sparray with no initial value")
            start, accumulator = 1, self._data[0]
        else:
            start, accumulator = 0, initial

        call = _bind(fn, _REDUCE_CALLBACK_ARGS, base_args=2)
        for i in range(start, len(self._data)):
            accumulator = call(accumulator, self._data[i], i, self)
        return accumulator

    def reduce_right(self, fn: Callable[..., Any], initial: Any = _MISSING) -> Any:
        """Fold the elements from right to left.

        Args:
            fn: Called as ``fn(accumulator, element[, index[, sparray]])``
            initial: Initial accumulator (optional, defaults to the last element)

        Returns:
            The final accumulator

        Raises:
            EmptyReduceError: If the sparray is empty and no initial value is given
        """
        last = len(self._data) - 1
        if initial is _MISSING:
            if not self._data:
                raise EmptyReduceError("reduce of empty sparray with no initial value")
            start, accumulator = last - 1, self._data[last]
        else:
            start, accumulator = last, initial

        call = _bind(fn, _REDUCE_CALLBACK_ARGS, base_args=2)
        for i in range(start, -1, -1):
            accumulator = call(accumulator, self._data[i], i, self)
        return accumulator

    def count(self, fn: Callable[..., Any] | None = None) -> int:
        """Count the elements, optionally only those for which fn is truthy."""
        if fn is None:
            return len(self._data)
        call = _bind(fn)
        return sum(1 for i, value in enumerate(self._data) if call(value, i, self))

    def some(self, fn: Callable[..., Any]) -> bool:
        """Return True if fn is truthy for at least one element (short-circuits)."""
        call = _bind(fn)
        return any(call(value, i, self) for i, value in enumerate(self._data))

    def every(self, fn: Callable[..., Any]) -> bool:
        """Return True if fn is truthy for all elements (short-circuits)."""
        call = _bind(fn)
        return all(call(value, i, self) for i, value in enumerate(self._data))

    def find(self, fn: Callable[..., Any]) -> T | None:
        """Return the first element for which fn is truthy, or None."""
        call = _bind(fn)
        for i, value in enumerate(self._data):
            if call(value, i, self):
                return value
        return None

    def find_index(self, fn: Callable[..., Any]) -> int:
        """Return the index of the first element for which fn is truthy, or -1."""
        call = _bind(fn)
        for i, value in enumerate(self._data):
            if call(value, i, self):
                return i
        return -1

    def index_of(self, value: T) -> int:
        """Return the first index of an element equal to value, or -1."""
        for i, item in enumerate(self._data):
            if item is value or item == value:
                return i
        return -1

    def last_index_of(self, value: T) -> int:
        """Return the last index of an element equal to value, or -1."""
        for i in range(len(self._data) - 1, -1, -1):
            item = self._data[i]
            if item is value or item == value:
                return i
        return -1

    def includes(self, value: T) -> bool:
        """Return True if any element equals value."""
        return value in self._data

    def includes_all(self, values: Any) -> bool:
        """Return True if every given value is an element of the sparray.

        Args:
            values: A sparray, list, tuple or set of values, or a single value
        """
        if isinstance(values, (set, frozenset)) or _is_collection(values):
            return all(value in self._data for value in values)
        return self.includes(values)

    def sum(self) -> Any:
        """Sum the elements.

        Returns:
            The sum (0 when empty), or NaN if any element is not a number
        """
        total: Any = 0
        for value in self._data:
            if not _is_number(value):
                return math.nan
            total += value
        return total

    def avg(self) -> Any:
        """Return the arithmetic mean, or NaN if empty or any element is not a number."""
        if not self._data:
            return math.nan
        return self.sum() / len(self._data)

    def min(self) -> T | None:
        """Return the smallest element by natural order, or None if empty.

        Raises:
            TypeError: If elements cannot be compared
        """
        if not self._data:
            return None
        return min(self._data)  # type: ignore[type-var]

    def max(self) -> T | None:
        """Return the largest element by natural order, or None if empty.

        Raises:
            TypeError: If elements cannot be compared
        """
        if not self._data:
            return None
        return max(self._data)  # type: ignore[type-var]

    def _extremal_by(self, fn: Callable[..., Any], pick: Callable[[list[Any]], Any]) -> sparray[T]:
        call = _bind(fn)
        values = [call(value, i, self) for i, value in enumerate(self._data)]
        if not values:
            return self._wrap([])
        target = pick(values)
        return self._wrap([item for item, value in zip(self._data, values) if value == target])

    def min_by(self, fn: Callable[..., Any]) -> sparray[T]:
        """Return all elements whose fn value is the minimum.

        Args:
            fn: Called as ``fn(element[, index[, sparray]])``

        Returns:
            New sparray with every element tied for the minimum (empty if self is empty)
        """
        return self._extremal_by(fn, min)

    def max_by(self, fn: Callable[..., Any]) -> sparray[T]:
        """Return all elements whose fn value is the maximum.

        Args:
            fn: Called as ``fn(element[, index[, sparray]])``

        Returns:
            New sparray with every element tied for the maximum (empty if self is empty)
        """
        return self._extremal_by(fn, max)

    def index_by(self, key_fn: Callable[[T], Any], value_fn: Callable[..., Any] | None = None) -> Grouping[Any]:
        """Index the elements by a string key.

        When several elements produce the same key the last one wins.

        Args:
            key_fn: Called as ``key_fn(element)``; the result is converted with ``str()``
            value_fn: Optional, called as ``value_fn(element[, key])`` to compute the stored value

        Returns:
            Grouping from key to element (or value_fn result)
        """
        make_value = _bind(value_fn, 2) if value_fn is not None else None
        indexed: dict[str, Any] = {}
        for value in self._data:
            key = str(key_fn(value))
            indexed[key] = make_value(value, key) if make_value is not None else value
        return Grouping(indexed)

    def group_by(
        self, key_fn: Callable[[T], Any], values_fn: Callable[..., Any] | None = None
    ) -> Grouping[Any]:
        """Group the elements by a string key.

        Keys appear in the order in which they were first produced.

        Args:
            key_fn: Called as ``key_fn(element)``; the result is converted with ``str()``
            values_fn: Optional, called as ``values_fn(group[, key])`` with each
                group sparray to compute the stored value

        Returns:
            Grouping from key to sparray of elements (or values_fn result)
        """
        groups: dict[str, list[T]] = {}
        for value in self._data:
            groups.setdefault(str(key_fn(value)), []).append(value)

        make_values = _bind(values_fn, 2) if values_fn is not None else None
        grouped: dict[str, Any] = {}
        for key, members in groups.items():
            group = self._wrap(members)
            grouped[key] = make_values(group, key) if make_values is not None else group
        return Grouping(grouped)

    def sample(
        self, n: SupportsIndex | None = None, with_replacement: bool = False, *, rng: random.Random | None = None
    ) -> T | sparray[T] | None:
        """Draw elements uniformly at random.

        Args:
            n: Number of elements to draw (optional)
            with_replacement: If True, draws are independent; otherwise each
                drawn element is removed from the pool
            rng: Random generator to draw from (defaults to the ``random`` module)

        Returns:
            A single element (None if empty) when n is omitted, otherwise a
            new sparray of n elements

        Raises:
            SampleSizeExceededError: If n exceeds the length without replacement,
                or n is positive with replacement on an empty sparray
        """
        source = rng if rng is not None else random

        if n is None:
            if not self._data:
                return None
            return self._data[source.randrange(len(self._data))]

        count = op_index(n)
        if not with_replacement and count > len(self._data):
            raise SampleSizeExceededError(
                f"cannot sample {count} elements from a sparray of length {len(self._data)} without replacement"
            )
        if with_replacement and count > 0 and not self._data:
            raise SampleSizeExceededError("cannot sample from an empty sparray")

        pool = list(self._data)
        selected: list[T] = []
        for _ in range(count):
            j = source.randrange(len(pool))
            selected.append(pool[j])
            if not with_replacement:
                del pool[j]

        logger.debug(
            "Sampled %d of %d elements (with_replacement=%s)", len(selected), len(self._data), with_replacement
        )
        return self._wrap(selected)
