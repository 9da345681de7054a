# tests/test_factories.py
import math

import pytest

from sparray import (
    InvalidCountError,
    InvalidInputError,
    InvalidStepError,
    MissingArgumentError,
    SparrayError,
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
    sparray,
)


# ---------------------
# from_ tests
# ---------------------
@pytest.mark.parametrize(
    "args, expected_list",
    [
        ((), []),
        ((1,), [1]),
        (("a",), ["a"]),
        (({"a": 1},), [{"a": 1}]),
        ((True,), [True]),
        ((None,), [None]),
        (("abc",), ["abc"]),
        ((b"ab",), [b"ab"]),
        (([],), []),
        (([1],), [1]),
        (([{"a": 1}],), [{"a": 1}]),
        (([1, 2, 3],), [1, 2, 3]),
        ((["a", 1, False],), ["a", 1, False]),
        (((4, 5),), [4, 5]),
        ((range(3),), [0, 1, 2]),
        ((frozenset([7]),), [7]),
        ((iter([1, 2]),), [1, 2]),
        ((1, 2, 3), [1, 2, 3]),
        (([1], 2, "3", {"a": 4}), [[1], 2, "3", {"a": 4}]),
        (([], []), [[], []]),
    ],
    ids=[
        "no_args",
        "single_int",
        "single_str",
        "single_dict",
        "single_bool",
        "single_none",
        "str_is_scalar",
        "bytes_is_scalar",
        "empty_list",
        "one_item_list",
        "list_of_dict",
        "list",
        "mixed_list",
        "tuple",
        "range",
        "frozenset",
        "iterator",
        "variadic",
        "variadic_mixed",
        "variadic_lists",
    ],
)
def test_from_normalization(args, expected_list):
    """Test from_ dispatches on the shape of its arguments."""
    sp = from_(*args)
    assert isinstance(sp, sparray)
    assert sp.to_array() == expected_list


@pytest.mark.parametrize(
    "source, expected_list",
    [
        (sparray(), []),
        (sparray([1, 2, 3]), [1, 2, 3]),
        (sparray([[1], [2]]), [[1], [2]]),
    ],
    ids=["empty", "flat", "nested"],
)
def test_from_sparray_copies(source, expected_list):
    """Test from_ with a sparray builds an equal but distinct sparray."""
    sp = from_(source)
    assert sp == source
    assert sp is not source
    assert sp.to_array() == expected_list


def test_from_set_input():
    """Test from_ with a set keeps every element once."""
    assert sorted(from_({3, 1, 2}).to_array()) == [1, 2, 3]


def test_from_copies_input_list():
    """Test later changes to the input list do not reach the sparray."""
    data = [1, 2]
    sp = from_(data)
    data.append(3)
    assert sp.to_array() == [1, 2]


def test_from_does_not_copy_elements():
    """Test elements are shared, only the container is copied."""
    inner = {"a": 1}
    sp = from_([inner])
    assert sp.get(0) is inner


def test_round_trip_through_to_array():
    """Test from_(seq.to_array()) rebuilds the same sequence."""
    sp = from_(3, "b", None, [1])
    assert from_(sp.to_array()) == sp


# ---------------------
# Named constructor tests
# ---------------------
def test_of_single_wraps_collections():
    """Test of_single never spreads its argument."""
    assert of_single([1, 2]).to_array() == [[1, 2]]
    assert of_single(None).to_array() == [None]


def test_of_variadic():
    """Test of_variadic keeps the argument order."""
    assert of_variadic().to_array() == []
    assert of_variadic([1], 2).to_array() == [[1], 2]


@pytest.mark.parametrize(
    "collection, expected_list",
    [
        ([1, 2], [1, 2]),
        ((1, 2), [1, 2]),
        (sparray([1, 2]), [1, 2]),
        (range(2, 4), [2, 3]),
        ((x * 2 for x in range(3)), [0, 2, 4]),
    ],
    ids=["list", "tuple", "sparray", "range", "generator"],
)
def test_of_collection(collection, expected_list):
    """Test of_collection copies the elements of a collection."""
    assert of_collection(collection).to_array() == expected_list


@pytest.mark.parametrize(
    "bad_input",
    [5, "abc", b"abc", {"a": 1}, None],
    ids=["int", "str", "bytes", "dict", "none"],
)
def test_of_collection_invalid(bad_input):
    """Test of_collection rejects values that are not collections."""
    with pytest.raises(InvalidInputError):
        of_collection(bad_input)
    with pytest.raises(TypeError):
        of_collection(bad_input)


def test_copy_of():
    """Test copy_of accepts only sparrays."""
    source = from_(1, 2)
    copied = copy_of(source)
    assert copied == source
    assert copied is not source

    with pytest.raises(InvalidInputError):
        copy_of([1, 2])


@pytest.mark.parametrize(
    "bad_data",
    [5, "abc", {1, 2}, {"a": 1}, None],
    ids=["int", "str", "set", "dict", "none"],
)
def test_constructor_rejects_non_list(bad_data):
    """Test the class constructor accepts only lists and tuples."""
    with pytest.raises(InvalidInputError):
        sparray(bad_data)


def test_from_set():
    """Test from_set follows the iteration order of the set."""
    assert from_set(set()).to_array() == []
    source = {1, 2, 3, 1, 2, 3}
    assert from_set(source).to_array() == list(source)


# ---------------------
# range_ tests
# ---------------------
@pytest.mark.parametrize(
    "args, expected_list",
    [
        ((0,), []),
        ((3,), [0, 1, 2]),
        ((-3,), [0, -1, -2]),
        ((3, 3), []),
        ((0, 3), [0, 1, 2]),
        ((3, 6), [3, 4, 5]),
        ((-3, 3), [-3, -2, -1, 0, 1, 2]),
        ((3, -3), [3, 2, 1, 0, -1, -2]),
        ((5, 10, 1), [5, 6, 7, 8, 9]),
        ((5, 10, 2), [5, 7, 9]),
        ((5, 11, 2), [5, 7, 9]),
        ((11, 5, -2), [11, 9, 7]),
        ((3, 3, 1), []),
        ((3, 3, -1), []),
        ((3, 3, 0), []),
    ],
    ids=[
        "zero",
        "positive_end",
        "negative_end",
        "equal_bounds",
        "from_zero",
        "positive_span",
        "crossing_zero",
        "descending",
        "explicit_step_1",
        "explicit_step_2",
        "step_overshoots_end",
        "descending_step",
        "equal_bounds_positive_step",
        "equal_bounds_negative_step",
        "equal_bounds_zero_step",
    ],
)
def test_range(args, expected_list):
    """Test range_ with one, two and three arguments."""
    assert range_(*args).to_array() == expected_list


@pytest.mark.parametrize(
    "args",
    [(5, 10, -1), (10, 5, 1), (0, 3, 0), (3, 0, 0)],
    ids=["ascending_negative_step", "descending_positive_step", "ascending_zero_step", "descending_zero_step"],
)
def test_range_invalid_step(args):
    """Test a step pointing away from the end raises InvalidStepError."""
    with pytest.raises(InvalidStepError):
        range_(*args)
    with pytest.raises(ValueError):
        range_(*args)


def test_range_missing_argument():
    """Test range_ without arguments raises MissingArgumentError."""
    with pytest.raises(MissingArgumentError):
        range_()
    with pytest.raises(SparrayError):
        range_()


@pytest.mark.parametrize(
    "start, end, step",
    [(0, 10, 3), (5, 10, 2), (-7, 8, 4), (10, -10, -3), (1, 2, 5)],
    ids=["from_zero", "odd_span", "negative_start", "descending", "step_larger_than_span"],
)
def test_range_length_and_values(start, end, step):
    """Test range_ produces ceil((end - start) / step) values start, start + step, ..."""
    values = range_(start, end, step).to_array()
    assert len(values) == math.ceil((end - start) / step)
    assert values == [start + i * step for i in range(len(values))]


def test_range_rejects_non_integers():
    """Test range_ bounds must support __index__."""
    with pytest.raises(TypeError):
        range_(1.5)


# ---------------------
# fill_of tests
# ---------------------
@pytest.mark.parametrize(
    "args, expected_list",
    [
        ((3, 1), [1, 1, 1]),
        ((3,), [None, None, None]),
        ((1, 1), [1]),
        ((0, 1), []),
        ((-1, 1), []),
        ((2.0, "x"), ["x", "x"]),
    ],
    ids=["three", "default_value", "one", "zero", "negative", "integral_float"],
)
def test_fill_of(args, expected_list):
    """Test fill_of repeats the value n times."""
    assert fill_of(*args).to_array() == expected_list


def test_fill_of_shares_reference():
    """Test fill_of does not copy the value."""
    value = []
    sp = fill_of(3, value)
    assert all(item is value for item in sp)


@pytest.mark.parametrize(
    "bad_count",
    ["asdf", None, 2.5, True, math.nan, math.inf, [3]],
    ids=["str", "none", "fractional", "bool", "nan", "inf", "list"],
)
def test_fill_of_invalid_count(bad_count):
    """Test a count that is not an integral number raises InvalidCountError."""
    with pytest.raises(InvalidCountError):
        fill_of(bad_count, 1)


# ---------------------
# empty / is_sparray tests
# ---------------------
def test_empty():
    """Test empty returns a fresh zero-length sparray."""
    first = empty()
    assert first.to_array() == []
    assert len(first) == 0
    assert empty() is not first


@pytest.mark.parametrize(
    "obj, expected",
    [(sparray(), True), (from_(1, 2), True), ([1, 2], False), (None, False), ("sparray", False)],
    ids=["empty_sparray", "sparray", "list", "none", "str"],
)
def test_is_sparray(obj, expected):
    """Test is_sparray recognizes only sparray instances."""
    assert is_sparray(obj) is expected
