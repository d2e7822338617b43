"""Lexical evaluation context: local bindings, $, self and super."""

from __future__ import annotations

from collections import ChainMap
from collections.abc import Mapping
from typing import Any, Optional

from jsonnet_core.errors import ErrorKind, JsonnetError, suggest_similar
from jsonnet_core.pending import Pending, Thunk, evaluated


class Context:
    """The current code location's variables and object references.

    Contexts are immutable; extending one yields a new context and two
    contexts are equal only when they are the same object.
    """

    __slots__ = ("_state", "_bindings", "dollar", "sup", "this")

    def __init__(
        self,
        state: Any = None,
        bindings: Optional[Mapping[str, Thunk]] = None,
        dollar: Any = None,
        sup: Any = None,
        this: Any = None,
    ) -> None:
        self._state = state
        if isinstance(bindings, ChainMap):
            self._bindings = bindings
        else:
            self._bindings = ChainMap(dict(bindings or {}))
        self.dollar = dollar
        self.sup = sup
        self.this = this

    @property
    def state(self) -> Any:
        """The evaluator state; a context built without one cannot give it."""
        if self._state is None:
            raise RuntimeError("used state from dummy context")
        return self._state

    @property
    def super_obj(self) -> Any:
        return self.sup

    def binding(self, name: str) -> Thunk:
        """Look up a variable, suggesting similar names when it is missing."""
        try:
            return self._bindings[name]
        except KeyError:
            similar = suggest_similar(self._bindings.keys(), name)
            raise JsonnetError(
                ErrorKind.VARIABLE_IS_NOT_DEFINED, name, similar
            ) from None

    def contains_binding(self, name: str) -> bool:
        return name in self._bindings

    def with_var(self, name: str, value: Any) -> "Context":
        """A new context with one more, already evaluated, variable."""
        return self.extend({name: evaluated(value)})

    def extend(
        self,
        bindings: Optional[Mapping[str, Thunk]] = None,
        dollar: Any = None,
        sup: Any = None,
        this: Any = None,
    ) -> "Context":
        """A new context layering bindings over this one; None keeps the current object."""
        layered = (
            self._bindings.new_child(dict(bindings)) if bindings else self._bindings
        )
        return Context(
            self._state,
            layered,
            self.dollar if dollar is None else dollar,
            self.sup if sup is None else sup,
            self.this if this is None else this,
        )

    def into_future(self, pending: Pending["Context"]) -> "Context":
        """Fill a pending cell with this context and return the context."""
        pending.fill(self)
        return pending.unwrap()

    def __repr__(self) -> str:
        return "Context()"


class ContextBuilder:
    """Collects bindings for a fresh context or for an extension of a parent."""

    def __init__(self, state: Any = None) -> None:
        self._state = state
        self._bindings: dict[str, Thunk] = {}
        self._parent: Optional[Context] = None

    @classmethod
    def extending(cls, parent: Context) -> "ContextBuilder":
        """A builder whose result extends the given context."""
        builder = cls(parent._state)
        builder._parent = parent
        return builder

    def bind(self, name: str, value: Thunk) -> "ContextBuilder":
        """Add a binding; binding the same name twice is an error."""
        if name in self._bindings:
            raise ValueError("variable bound twice in single context call")
        self._bindings[name] = value
        return self

    def build(self) -> Context:
        if self._parent is not None:
            return self._parent.extend(self._bindings)
        return Context(self._state, self._bindings)