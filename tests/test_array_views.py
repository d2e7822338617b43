import pytest

from jsonnet_core import arrays
from jsonnet_core.array_views import (
    ExtendedArray,
    MappedArray,
    ReverseArray,
    extended,
    map_array,
    repeated,
    reversed_array,
    slice_array,
)
from jsonnet_core.errors import ErrorKind, JsonnetError
from jsonnet_core.pending import Thunk


def _lazy(values):
    return arrays.lazy([Thunk(lambda v=v: v) for v in values])


def test_extended_with_empty_returns_other():
    a = arrays.eager([1.0, 2.0])
    assert extended(arrays.empty(), a) is a
    assert extended(a, arrays.empty()) is a


def test_extended_small_cheap_is_eager():
    a = arrays.eager(["x"])
    b = arrays.range_exclusive(0, 3)
    result = extended(a, b)
    assert isinstance(result, arrays.EagerArray)
    assert list(result) == list(a) + list(b)


def test_extended_small_lazy_shares_thunks():
    a = _lazy([1.0, 2.0])
    b = arrays.eager([3.0])
    result = extended(a, b)
    assert isinstance(result, arrays.LazyArray)
    assert result.get_lazy(0) is a.get_lazy(0)
    assert list(result) == list(a) + list(b)


def test_extended_large_is_view():
    a = arrays.range_exclusive(0, 60)
    b = arrays.range_exclusive(100, 160)
    result = extended(a, b)
    assert isinstance(result, ExtendedArray)
    assert len(result) == len(a) + len(b)
    assert list(result) == list(a) + list(b)
    assert result.is_cheap()
    assert list(result.iter_cheap()) == list(result)
    assert arrays.ptr_eq(result, result)
    assert not arrays.ptr_eq(result, extended(a, b))


def test_extended_large_with_lazy_part_is_not_cheap():
    a = _lazy([float(i) for i in range(60)])
    b = arrays.range_exclusive(0, 60)
    result = extended(a, b)
    assert isinstance(result, ExtendedArray)
    assert not result.is_cheap()
    assert result.iter_cheap() is None
    assert [t.evaluate() for t in result.iter_lazy()] == list(a) + list(b)


def test_extended_out_of_bounds():
    result = extended(arrays.range_exclusive(0, 60), arrays.range_exclusive(0, 60))
    with pytest.raises(IndexError):
        result.get(len(result))


@pytest.mark.parametrize(
    "start,end,step",
    [(None, None, None), (2, 8, 3), (1, None, 2), (0, 100, 1), (3, 4, None)],
)
def test_slice_matches_python_slicing(start, end, step):
    base = arrays.range_exclusive(0, 10)
    result = slice_array(base, start, end, step)
    expected = list(base)[slice(start, end, step)]
    assert list(result) == expected
    assert len(result) == len(expected)


@pytest.mark.parametrize(
    "start,end,step", [(5, 5, 1), (6, 2, 1), (0, 10, 0), (12, None, None)]
)
def test_slice_selecting_nothing_is_none(start, end, step):
    assert slice_array(arrays.range_exclusive(0, 10), start, end, step) is None


def test_slice_cheapness_follows_inner():
    cheap = slice_array(arrays.eager(["a", "b", "c"]), 1, None, None)
    assert cheap.is_cheap()
    assert cheap.get_cheap(0) == cheap.get(0)
    lazy_slice = slice_array(_lazy(["a", "b", "c"]), 1, None, None)
    assert not lazy_slice.is_cheap()
    assert list(lazy_slice) == list(cheap)


def test_slice_out_of_bounds():
    result = slice_array(arrays.range_exclusive(0, 10), 0, 4, 2)
    with pytest.raises(IndexError):
        result.get(len(result))


def test_reverse_reads_back_to_front():
    base = arrays.eager(["a", "b", "c"])
    result = reversed_array(base)
    assert isinstance(result, ReverseArray)
    assert list(result) == list(base)[::-1]
    assert result.get_lazy(0).evaluate() == base.get(len(base) - 1)


def test_reverse_twice_gives_original():
    base = arrays.range_exclusive(0, 5)
    assert reversed_array(reversed_array(base)) is base


def test_reverse_out_of_bounds():
    with pytest.raises(IndexError):
        reversed_array(arrays.eager([1.0])).get(1)


def test_map_is_lazy_and_cached():
    calls = []

    def mapper(value):
        calls.append(value)
        return value * 2

    base = arrays.eager([1.0, 2.0, 3.0])
    mapped = map_array(base, mapper)
    assert isinstance(mapped, MappedArray)
    assert calls == []
    assert mapped.get(1) == base.get(1) * 2
    assert mapped.get(1) == base.get(1) * 2
    assert calls == [base.get(1)]
    assert list(mapped) == [v * 2 for v in base]


def test_map_caches_errors():
    calls = []

    def mapper(value):
        calls.append(value)
        raise JsonnetError(ErrorKind.RUNTIME_ERROR, "bad")

    mapped = map_array(arrays.eager([1.0]), mapper)
    for _ in range(2):
        with pytest.raises(JsonnetError) as info:
            mapped.get(0)
        assert info.value.kind is ErrorKind.RUNTIME_ERROR
    assert len(calls) == 1


def test_map_detects_self_reference():
    holder = []
    mapped = map_array(arrays.eager([1.0]), lambda value: holder[0].get(0))
    holder.append(mapped)
    with pytest.raises(JsonnetError) as info:
        mapped.get(0)
    assert info.value.kind is ErrorKind.INFINITE_RECURSION_DETECTED


def test_map_is_not_cheap():
    mapped = map_array(arrays.eager([1.0]), lambda v: v)
    assert not mapped.is_cheap()
    assert mapped.iter_cheap() is None


def test_repeated_repeats_elements():
    data = arrays.eager(["a", "b"])
    result = repeated(data, 3)
    assert len(result) == len(data) * 3
    assert list(result) == list(data) * 3
    assert result.is_cheap()
    assert result.get_lazy(len(data)).evaluate() == data.get(0)


def test_repeated_zero_times_is_empty():
    result = repeated(arrays.eager(["a"]), 0)
    assert len(result) == 0
    with pytest.raises(IndexError):
        result.get(0)


def test_repeated_negative_count_rejected():
    with pytest.raises(ValueError):
        repeated(arrays.eager(["a"]), -1)


def test_repeated_lazy_data_not_cheap():
    result = repeated(_lazy(["x"]), 2)
    assert not result.is_cheap()
    assert list(result) == ["x", "x"]