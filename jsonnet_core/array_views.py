"""Array views: concatenation, slicing, reversal, mapping and repetition."""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import Any, Optional

from jsonnet_core.arrays import ArrValue, EagerArray, LazyArray
from jsonnet_core.pending import Thunk

_EXTEND_THRESHOLD = 100


class ExtendedArray(ArrValue):
    """Concatenation of two arrays, read through without copying."""

    __slots__ = ("a", "b", "_split", "_len")

    def __init__(self, a: ArrValue, b: ArrValue) -> None:
        self.a = a
        self.b = b
        self._split = len(a)
        self._len = len(a) + len(b)

    def __len__(self) -> int:
        return self._len

    def get(self, index: int) -> Any:
        self._check_index(index)
        if index < self._split:
            return self.a.get(index)
        return self.b.get(index - self._split)

    def get_lazy(self, index: int) -> Thunk:
        self._check_index(index)
        if index < self._split:
            return self.a.get_lazy(index)
        return self.b.get_lazy(index - self._split)

    def is_cheap(self) -> bool:
        return self.a.is_cheap() and self.b.is_cheap()

    def _same_storage(self, other: ArrValue) -> bool:
        return self is other

    def __repr__(self) -> str:
        return f"ExtendedArray({self.a!r}, {self.b!r})"


class SliceArray(ArrValue):
    """A stepped window onto another array."""

    __slots__ = ("inner", "_indices")

    def __init__(self, inner: ArrValue, start: int, end: int, step: int) -> None:
        self.inner = inner
        self._indices = range(start, end, step)

    def __len__(self) -> int:
        return len(self._indices)

    def get(self, index: int) -> Any:
        self._check_index(index)
        return self.inner.get(self._indices[index])

    def get_lazy(self, index: int) -> Thunk:
        self._check_index(index)
        return self.inner.get_lazy(self._indices[index])

    def is_cheap(self) -> bool:
        return self.inner.is_cheap()

    def __repr__(self) -> str:
        r = self._indices
        return f"SliceArray({self.inner!r}, {r.start}, {r.stop}, {r.step})"


class ReverseArray(ArrValue):
    """Another array read back to front."""

    __slots__ = ("inner",)

    def __init__(self, inner: ArrValue) -> None:
        self.inner = inner

    def __len__(self) -> int:
        return len(self.inner)

    def get(self, index: int) -> Any:
        self._check_index(index)
        return self.inner.get(len(self.inner) - index - 1)

    def get_lazy(self, index: int) -> Thunk:
        self._check_index(index)
        return self.inner.get_lazy(len(self.inner) - index - 1)

    def is_cheap(self) -> bool:
        return self.inner.is_cheap()

    def __repr__(self) -> str:
        return f"ReverseArray({self.inner!r})"


class MappedArray(ArrValue):
    """Another array with a function applied to each element on first access."""

    __slots__ = ("inner", "mapper", "_thunks")

    def __init__(self, inner: ArrValue, mapper: Callable[[Any], Any]) -> None:
        self.inner = inner
        self.mapper = mapper
        self._thunks = [Thunk(partial(self._compute, i)) for i in range(len(inner))]

    def _compute(self, index: int) -> Any:
        return self.mapper(self.inner.get(index))

    def __len__(self) -> int:
        return len(self._thunks)

    def get(self, index: int) -> Any:
        return self.get_lazy(index).evaluate()

    def get_lazy(self, index: int) -> Thunk:
        self._check_index(index)
        return self._thunks[index]

    def __repr__(self) -> str:
        return f"MappedArray({self.inner!r})"


class RepeatedArray(ArrValue):
    """Another array repeated a number of times."""

    __slots__ = ("data", "repeats", "_len")

    def __init__(self, data: ArrValue, repeats: int) -> None:
        if repeats < 0:
            raise ValueError("repeat count must not be negative")
        self.data = data
        self.repeats = repeats
        self._len = len(data) * repeats

    def __len__(self) -> int:
        return self._len

    def get(self, index: int) -> Any:
        self._check_index(index)
        return self.data.get(index % len(self.data))

    def get_lazy(self, index: int) -> Thunk:
        self._check_index(index)
        return self.data.get_lazy(index % len(self.data))

    def is_cheap(self) -> bool:
        return self.data.is_cheap()

    def __repr__(self) -> str:
        return f"RepeatedArray({self.data!r}, {self.repeats})"


def extended(a: ArrValue, b: ArrValue) -> ArrValue:
    """Concatenate two arrays, copying small ones and viewing large ones."""
    if len(a) == 0:
        return b
    if len(b) == 0:
        return a
    if len(a) + len(b) > _EXTEND_THRESHOLD:
        return ExtendedArray(a, b)
    cheap_a, cheap_b = a.iter_cheap(), b.iter_cheap()
    if cheap_a is not None and cheap_b is not None:
        return EagerArray([*cheap_a, *cheap_b])
    return LazyArray([*a.iter_lazy(), *b.iter_lazy()])


def slice_array(
    array: ArrValue,
    start: Optional[int] = None,
    end: Optional[int] = None,
    step: Optional[int] = None,
) -> Optional[SliceArray]:
    """A slice view, or None when the slice selects nothing."""
    length = len(array)
    start = 0 if start is None else start
    end = length if end is None else min(end, length)
    step = 1 if step is None else step
    if start >= end or step == 0:
        return None
    return SliceArray(array, start, end, step)


def reversed_array(array: ArrValue) -> ArrValue:
    """A reversed view; reversing a reversed view gives back the original."""
    if isinstance(array, ReverseArray):
        return array.inner
    return ReverseArray(array)


def map_array(array: ArrValue, mapper: Callable[[Any], Any]) -> MappedArray:
    """A view applying mapper to each element once, when it is first read."""
    return MappedArray(array, mapper)


def repeated(data: ArrValue, repeats: int) -> RepeatedArray:
    """The given array repeated the given number of times."""
    return RepeatedArray(data, repeats)