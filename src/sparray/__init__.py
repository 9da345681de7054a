"""An immutable sequence with a fluent, chainable functional API.

See README.md for complete documentation and usage examples.
"""

import logging

from sparray.errors import (
    EmptyReduceError,
    InvalidCountError,
    InvalidInputError,
    InvalidSizeError,
    InvalidStepError,
    MissingArgumentError,
    SampleSizeExceededError,
    SparrayError,
)
from sparray.factories import (
    copy_of,
    empty,
    fill_of,
    from_,
    from_set,
    is_sparray,
    of_collection,
    of_single,
    of_variadic,
    range_,
)
from sparray.grouping import Entry, Grouping, KeyValue
from sparray.sparray import sparray

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "EmptyReduceError",
    "Entry",
    "Grouping",
    "InvalidCountError",
    "InvalidInputError",
    "InvalidSizeError",
    "InvalidStepError",
    "KeyValue",
    "MissingArgumentError",
    "SampleSizeExceededError",
    "SparrayError",
    "copy_of",
    "empty",
    "fill_of",
    "from_",
    "from_set",
    "is_sparray",
    "of_collection",
    "of_single",
    "of_variadic",
    "range_",
    "sparray",
]
