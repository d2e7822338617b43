"""Array values: a common interface and the basic storage kinds."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from functools import partial
from typing import Any, Optional

from jsonnet_core.pending import Thunk, evaluated


class ArrValue(ABC):
    """A Jsonnet array whose elements may be stored, computed or viewed."""

    __slots__ = ()

    @abstractmethod
    def __len__(self) -> int:
        """Number of elements."""

    @abstractmethod
    def get(self, index: int) -> Any:
        """Element at index, evaluating it if needed; IndexError when out of bounds."""

    @abstractmethod
    def get_lazy(self, index: int) -> Thunk:
        """Element at index without evaluating it; IndexError when out of bounds."""

    def get_cheap(self, index: int) -> Any:
        """Element at index for arrays that need no evaluation to read."""
        if not self.is_cheap():
            raise ValueError("array elements are not cheap to get")
        return self.get(index)

    def is_cheap(self) -> bool:
        """Whether elements can be read without evaluating anything."""
        return False

    def _same_storage(self, other: "ArrValue") -> bool:
        return False

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self):
            raise IndexError(f"array index {index} is not within [0,{len(self)})")

    def __iter__(self) -> Iterator[Any]:
        for i in range(len(self)):
            yield self.get(i)

    def iter_lazy(self) -> Iterator[Thunk]:
        """Iterate over elements as unevaluated thunks."""
        for i in range(len(self)):
            yield self.get_lazy(i)

    def iter_cheap(self) -> Optional[Iterator[Any]]:
        """An iterator over elements if the array is cheap, otherwise None."""
        if not self.is_cheap():
            return None
        return (self.get_cheap(i) for i in range(len(self)))

    def filter(self, predicate: Callable[[Any], bool]) -> "EagerArray":
        """A new array of the elements for which predicate holds."""
        return EagerArray([value for value in self if predicate(value)])


class EagerArray(ArrValue):
    """An array whose elements are all evaluated already."""

    __slots__ = ("_values",)

    def __init__(self, values: Iterable[Any]) -> None:
        self._values = list(values)

    def __len__(self) -> int:
        return len(self._values)

    def get(self, index: int) -> Any:
        self._check_index(index)
        return self._values[index]

    def get_lazy(self, index: int) -> Thunk:
        return evaluated(self.get(index))

    def is_cheap(self) -> bool:
        return True

    def _same_storage(self, other: ArrValue) -> bool:
        return self is other

    def __repr__(self) -> str:
        return f"EagerArray({self._values!r})"


class LazyArray(ArrValue):
    """An array of thunks, each evaluated on first access."""

    __slots__ = ("_thunks",)

    def __init__(self, thunks: list[Thunk]) -> None:
        self._thunks = thunks

    def __len__(self) -> int:
        return len(self._thunks)

    def get(self, index: int) -> Any:
        return self.get_lazy(index).evaluate()

    def get_lazy(self, index: int) -> Thunk:
        self._check_index(index)
        return self._thunks[index]

    def _same_storage(self, other: ArrValue) -> bool:
        return isinstance(other, LazyArray) and self._thunks is other._thunks

    def __repr__(self) -> str:
        return f"LazyArray(len={len(self)})"


class ExprArray(ArrValue):
    """An array of source items, each evaluated once by the given evaluator."""

    __slots__ = ("_thunks",)

    def __init__(self, items: Iterable[Any], evaluator: Callable[[Any], Any]) -> None:
        self._thunks = [Thunk(partial(evaluator, item)) for item in items]

    def __len__(self) -> int:
        return len(self._thunks)

    def get(self, index: int) -> Any:
        return self.get_lazy(index).evaluate()

    def get_lazy(self, index: int) -> Thunk:
        self._check_index(index)
        return self._thunks[index]

    def _same_storage(self, other: ArrValue) -> bool:
        return self is other

    def __repr__(self) -> str:
        return f"ExprArray(len={len(self)})"


@dataclass(frozen=True)
class RangeArray(ArrValue):
    """The integers from start to end, both inclusive, as numbers."""

    start: int
    end: int

    def __len__(self) -> int:
        return max(self.end - self.start + 1, 0)

    def get(self, index: int) -> float:
        self._check_index(index)
        return float(self.start + index)

    def get_lazy(self, index: int) -> Thunk:
        return evaluated(self.get(index))

    def is_cheap(self) -> bool:
        return True

    def _same_storage(self, other: ArrValue) -> bool:
        return self == other


class BytesArray(ArrValue):
    """A byte string seen as an array of numbers."""

    __slots__ = ("data",)

    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)

    def __len__(self) -> int:
        return len(self.data)

    def get(self, index: int) -> float:
        self._check_index(index)
        return float(self.data[index])

    def get_lazy(self, index: int) -> Thunk:
        return evaluated(self.get(index))

    def is_cheap(self) -> bool:
        return True

    def _same_storage(self, other: ArrValue) -> bool:
        return isinstance(other, BytesArray) and self.data == other.data

    def __repr__(self) -> str:
        return f"BytesArray({self.data!r})"


class CharArray(ArrValue):
    """A sequence of characters seen as an array of one-character strings."""

    __slots__ = ("_chars",)

    def __init__(self, chars: Iterable[str]) -> None:
        self._chars = tuple(chars)

    def __len__(self) -> int:
        return len(self._chars)

    def get(self, index: int) -> str:
        self._check_index(index)
        return self._chars[index]

    def get_lazy(self, index: int) -> Thunk:
        return evaluated(self.get(index))

    def is_cheap(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"CharArray({''.join(self._chars)!r})"


def empty() -> RangeArray:
    """An array with no elements."""
    return range_exclusive(0, 0)


def eager(values: Iterable[Any]) -> EagerArray:
    """An array of already evaluated values."""
    return EagerArray(values)


def lazy(thunks: list[Thunk]) -> LazyArray:
    """An array over a list of thunks, sharing that list."""
    return LazyArray(thunks)


def expr_array(items: Iterable[Any], evaluator: Callable[[Any], Any]) -> ExprArray:
    """An array whose elements are evaluator(item), computed on demand."""
    return ExprArray(items, evaluator)


def range_exclusive(start: int, end: int) -> RangeArray:
    """Integers from start up to, but not including, end."""
    return RangeArray(start, end - 1)


def range_inclusive(start: int, end: int) -> RangeArray:
    """Integers from start up to and including end."""
    return RangeArray(start, end)


def byte_array(data: bytes) -> BytesArray:
    """An array of the numeric values of the given bytes."""
    return BytesArray(data)


def char_array(chars: Iterable[str]) -> CharArray:
    """An array of the given characters."""
    return CharArray(chars)


def ptr_eq(a: ArrValue, b: ArrValue) -> bool:
    """Whether two arrays are known to share the same storage."""
    return a._same_storage(b)