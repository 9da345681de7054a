"""Exceptions raised by sparray.

Every error derives from :class:`SparrayError` and from the builtin exception
Python itself would raise in the same situation, so callers can catch either.
"""

from __future__ import annotations


class SparrayError(Exception):
    """Base class for all sparray errors."""


class InvalidInputError(SparrayError, TypeError):
    """Raised when a sparray is constructed from something that is not a list or tuple."""


class MissingArgumentError(SparrayError, TypeError):
    """Raised when ``range_()`` is called without arguments."""


class InvalidStepError(SparrayError, ValueError):
    """Raised when a step contradicts the range direction or is not positive."""


class InvalidCountError(SparrayError, TypeError):
    """Raised when ``fill_of()`` receives a count that is not an integral number."""


class EmptyReduceError(SparrayError, TypeError):
    """Raised when reducing an empty sparray without an initial value."""


class InvalidSizeError(SparrayError, ValueError):
    """Raised when a window size is not positive."""


class SampleSizeExceededError(SparrayError, ValueError):
    """Raised when sampling more elements than are available without replacement."""
