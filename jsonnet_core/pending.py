"""Late-bound cells and lazily evaluated, memoised values."""

from __future__ import annotations

from enum import Enum, auto
from typing import Any, Callable, Generic, TypeVar

from jsonnet_core.errors import ErrorKind, JsonnetError

T = TypeVar("T")

_EMPTY: Any = object()


class Pending(Generic[T]):
    """A cell filled once, after it has already been handed out."""

    __slots__ = ("_value",)

    def __init__(self, value: Any = _EMPTY) -> None:
        self._value = value

    def is_filled(self) -> bool:
        """Whether a value has been stored."""
        return self._value is not _EMPTY

    def fill(self, value: T) -> None:
        """Store the value; a cell can be filled only once."""
        if self.is_filled():
            raise RuntimeError("wrapper is filled already")
        self._value = value

    def unwrap(self) -> T:
        """Return the stored value; fails if the cell is still empty."""
        if not self.is_filled():
            raise RuntimeError("wrapper is not yet filled")
        return self._value


class _State(Enum):
    WAITING = auto()
    PENDING = auto()
    COMPUTED = auto()
    ERRORED = auto()


class Thunk(Generic[T]):
    """A value computed on first use, with its result or error cached."""

    __slots__ = ("_state", "_payload")

    def __init__(self, compute: Callable[[], T]) -> None:
        self._state = _State.WAITING
        self._payload: Any = compute

    def evaluate(self) -> T:
        """Compute the value once; detect a thunk that depends on itself."""
        if self._state is _State.COMPUTED:
            return self._payload
        if self._state is _State.ERRORED:
            raise self._payload
        if self._state is _State.PENDING:
            raise JsonnetError(ErrorKind.INFINITE_RECURSION_DETECTED)
        compute = self._payload
        self._state = _State.PENDING
        try:
            value = compute()
        except JsonnetError as err:
            self._state, self._payload = _State.ERRORED, err
            raise
        except BaseException:
            self._state = _State.WAITING
            raise
        self._state, self._payload = _State.COMPUTED, value
        return value

    def __repr__(self) -> str:
        return f"Thunk({self._state.name.lower()})"


def evaluated(value: T) -> Thunk[T]:
    """A thunk that already holds a value."""
    thunk: Thunk[T] = Thunk(lambda: value)
    thunk.evaluate()
    return thunk


def errored(error: JsonnetError) -> Thunk[Any]:
    """A thunk whose evaluation always raises the given error."""
    thunk: Thunk[Any] = Thunk(lambda: None)
    thunk._state, thunk._payload = _State.ERRORED, error
    return thunk