"""Evaluation errors, their messages and stack traces."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


def format_found(names: Sequence[str], what: str) -> str:
    """Describe similarly named candidates, or return "" when there are none."""
    if not names:
        return ""
    plural = "s" if len(names) > 1 else ""
    return (
        f"\nThere is {what}{plural} with similar name{plural} present: "
        + ", ".join(names)
    )


def format_signature(signature: Sequence[tuple[Optional[str], bool]]) -> str:
    """Render a function signature given as (name or None, has_default) pairs."""
    if not signature:
        params = "/*no arguments*/"
    else:
        params = ", ".join(
            ("<unnamed>" if name is None else name)
            + (" = <default>" if has_default else "")
            for name, has_default in signature
        )
    return f"\nFunction has the following signature: ({params})"


def _format_empty_str(text: str) -> str:
    return '"" (empty string)' if text == "" else text


def _jaro(a: str, b: str) -> float:
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    search_range = max(max(len(a), len(b)) // 2 - 1, 0)
    b_flags = [False] * len(b)
    a_matched: list[str] = []
    for i, ch in enumerate(a):
        low = max(0, i - search_range)
        high = min(len(b) - 1, i + search_range)
        for j in range(low, high + 1):
            if not b_flags[j] and b[j] == ch:
                b_flags[j] = True
                a_matched.append(ch)
                break
    matches = len(a_matched)
    if matches == 0:
        return 0.0
    b_matched = [ch for ch, flag in zip(b, b_flags) if flag]
    transpositions = sum(x != y for x, y in zip(a_matched, b_matched)) / 2
    return (
        matches / len(a) + matches / len(b) + (matches - transpositions) / matches
    ) / 3


def jaro_winkler(a: str, b: str) -> float:
    """Jaro-Winkler similarity of two strings, from 0.0 to 1.0."""
    similarity = _jaro(a, b)
    if similarity <= 0.7:
        return similarity
    prefix = 0
    for x, y in zip(a[:4], b[:4]):
        if x != y:
            break
        prefix += 1
    return similarity + 0.1 * prefix * (1.0 - similarity)


def suggest_similar(candidates: Iterable[str], key: str) -> list[str]:
    """Return candidates whose similarity to key is at least 0.8, best first."""
    scored = [
        (score, name)
        for name in candidates
        if (score := jaro_winkler(name, key)) >= 0.8
    ]
    scored.sort(key=lambda item: item[0], reverse=True)
    return [name for _, name in scored]


class ErrorKind(Enum):
    """Every kind of evaluation error, with its message template."""

    INTRINSIC_NOT_FOUND = "intrinsic not found: {0}"
    UNARY_OPERATOR_DOES_NOT_OPERATE_ON_TYPE = "operator {0} does not operate on type {1}"
    BINARY_OPERATOR_DOES_NOT_OPERATE_ON_VALUES = (
        "binary operation {1} {0} {2} is not implemented"
    )
    NO_TOP_LEVEL_OBJECT_FOUND = "no top level object in this context"
    CANT_USE_SELF_OUTSIDE_OF_OBJECT = "self is only usable inside objects"
    NO_SUPER_FOUND = "no super found"
    IN_COMPREHENSION_CAN_ONLY_ITERATE_OVER_ARRAY = "for loop can only iterate over arrays"
    ARRAY_BOUNDS_ERROR = "array out of bounds: {0} is not within [0,{1})"
    STRING_BOUNDS_ERROR = "string out of bounds: {0} is not within [0,{1})"
    ASSERTION_FAILED = "assert failed: {0}"
    VARIABLE_IS_NOT_DEFINED = "variable is not defined: {0}{1}"
    DUPLICATE_LOCAL_VAR = "duplicate local var: {0}"
    TYPE_MISMATCH = "type mismatch: expected {1}, got {2} {0}"
    NO_SUCH_FIELD = "no such field: {0}{1}"
    ONLY_FUNCTIONS_CAN_BE_CALLED_GOT = "only functions can be called, got {0}"
    UNKNOWN_FUNCTION_PARAMETER = "parameter {0} is not defined"
    BINDING_PARAMETER_A_SECOND_TIME = "argument {0} is already bound"
    TOO_MANY_ARGS_FUNCTION_HAS = "too many args, function has {0}{1}"
    FUNCTION_PARAMETER_NOT_BOUND_IN_CALL = "function argument is not passed: {0}{1}"
    UNDEFINED_EXTERNAL_VARIABLE = "external variable is not defined: {0}"
    FIELD_MUST_BE_STRING_GOT = "field name should be string, got {0}"
    DUPLICATE_FIELD_NAME = "duplicate field name: {0}"
    ATTEMPTED_INDEX_AN_ARRAY_WITH_STRING = "attempted to index array with string {0}"
    VALUE_INDEX_MUST_BE_TYPE_GOT = "{0} index type should be {1}, got {2}"
    CANT_INDEX_INTO = "cant index into {0}"
    VALUE_IS_NOT_INDEXABLE = "{0} is not indexable"
    STANDALONE_SUPER = "super can't be used standalone"
    IMPORT_FILE_NOT_FOUND = "can't resolve {1} from {0}"
    ABSOLUTE_IMPORT_FILE_NOT_FOUND = "can't resolve absolute {0}"
    RESOLVED_FILE_NOT_FOUND = "resolved file not found: {0!r}"
    IMPORT_IS_A_DIRECTORY = "can't import {0}: is a directory"
    IMPORT_BAD_FILE_UTF8 = "imported file is not valid utf-8: {0!r}"
    IMPORT_IO = "import io error: {0}"
    IMPORT_NOT_SUPPORTED = "tried to import {1} from {0}, but imports are not supported"
    ABSOLUTE_IMPORT_NOT_SUPPORTED = (
        "tried to import {0}, but absolute imports are not supported"
    )
    CANT_IMPORT_FROM_VIRTUAL_FILE = "can't import from virtual file"
    IMPORT_SYNTAX_ERROR = "syntax error: expected {0}, got {1}"
    RUNTIME_ERROR = "runtime error: {0}"
    STACK_OVERFLOW = (
        "stack overflow, try to reduce recursion, or set --max-stack to bigger value"
    )
    INFINITE_RECURSION_DETECTED = "infinite recursion detected"
    FRACTIONAL_INDEX = "tried to index by fractional value"
    DIVISION_BY_ZERO = "attempted to divide by zero"
    STRING_MANIFEST_OUTPUT_IS_NOT_A_STRING = "string manifest output is not an string"
    STREAM_MANIFEST_OUTPUT_IS_NOT_A_ARRAY = "stream manifest output is not an array"
    MULTI_MANIFEST_OUTPUT_IS_NOT_A_OBJECT = "multi manifest output is not an object"
    STREAM_MANIFEST_OUTPUT_CANNOT_BE_RECURSED = "cant recurse stream manifest"
    STREAM_MANIFEST_CANNOT_NEST_STRING = (
        "stream manifest output cannot consist of raw strings"
    )
    IMPORT_CALLBACK_ERROR = "{0} "
    INVALID_UNICODE_CODEPOINT_GOT = "invalid unicode codepoint: {0}"
    FORMAT = "format error: {0}"
    TYPE_ERROR = "type error: {0}"

    def format(self, *args: Any) -> str:
        """Render the message of this kind for the given details."""
        prepare = _PREPARE.get(self)
        if prepare is not None:
            args = prepare(*args)
        return self.value.format(*args).rstrip(" ") if self is ErrorKind.IMPORT_CALLBACK_ERROR else self.value.format(*args)


def _syntax_got(code: str, offset: int) -> str:
    found = code[offset] if 0 <= offset < len(code) else "EOF"
    return f'"{found}"'


_PREPARE = {
    ErrorKind.ASSERTION_FAILED: lambda msg: (_format_empty_str(msg),),
    ErrorKind.VARIABLE_IS_NOT_DEFINED: lambda name, similar=(): (
        name,
        format_found(list(similar), "variable"),
    ),
    ErrorKind.TYPE_MISMATCH: lambda where, expected, got: (
        where,
        ", ".join(str(e) for e in expected),
        got,
    ),
    ErrorKind.NO_SUCH_FIELD: lambda name, similar=(): (
        _format_empty_str(name),
        format_found(list(similar), "field"),
    ),
    ErrorKind.TOO_MANY_ARGS_FUNCTION_HAS: lambda count, signature: (
        count,
        format_signature(signature),
    ),
    ErrorKind.FUNCTION_PARAMETER_NOT_BOUND_IN_CALL: lambda name, signature: (
        "<unnamed>" if name is None else name,
        format_signature(signature),
    ),
    ErrorKind.DUPLICATE_FIELD_NAME: lambda name: (_format_empty_str(name),),
    ErrorKind.ATTEMPTED_INDEX_AN_ARRAY_WITH_STRING: lambda name: (
        _format_empty_str(name),
    ),
    ErrorKind.RUNTIME_ERROR: lambda msg: (_format_empty_str(msg),),
    ErrorKind.IMPORT_CALLBACK_ERROR: lambda msg: (_format_empty_str(msg),),
    ErrorKind.IMPORT_SYNTAX_ERROR: lambda expected, code, offset: (
        expected,
        _syntax_got(code, offset),
    ),
}


@dataclass(frozen=True)
class StackTraceElement:
    """One stack trace frame; some frames only describe and carry no location."""

    desc: str
    location: Optional[Any] = None


class JsonnetError(Exception):
    """An evaluation error of a given kind, with the frames it passed through."""

    def __init__(self, kind: ErrorKind, *details: Any) -> None:
        self.kind = kind
        self.details = details
        self.message = kind.format(*details)
        self.trace: list[StackTraceElement] = []
        super().__init__(self.message)

    def add_frame(self, desc: str, location: Optional[Any] = None) -> "JsonnetError":
        """Append a frame to the stack trace and return the error."""
        self.trace.append(StackTraceElement(desc, location))
        return self

    def __str__(self) -> str:
        lines = [self.message + "\n"]
        for frame in self.trace:
            line = f"\t{frame.desc}"
            if frame.location is not None:
                line += f"at {frame.location}"
            lines.append(line + "\n")
        return "".join(lines)

    def __repr__(self) -> str:
        return f"JsonnetError({self.kind.name}, {self.message!r})"