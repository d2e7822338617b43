"""Unary and binary operators on evaluated values.

Values are None (null), bool, numbers, str, ArrValue (array),
mappings (object) and callables (function).
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

from jsonnet_core.array_views import extended
from jsonnet_core.arrays import ArrValue
from jsonnet_core.errors import ErrorKind, JsonnetError

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


class UnaryOp(Enum):
    """Unary operators, valued by their symbol."""

    PLUS = "+"
    MINUS = "-"
    BIT_NOT = "~"
    NOT = "!"

    def __str__(self) -> str:
        return self.value


class BinaryOp(Enum):
    """Binary operators, valued by their symbol."""

    MUL = "*"
    DIV = "/"
    MOD = "%"
    ADD = "+"
    SUB = "-"
    LHS = "<<"
    RHS = ">>"
    LT = "<"
    GT = ">"
    LTE = "<="
    GTE = ">="
    BIT_AND = "&"
    BIT_OR = "|"
    BIT_XOR = "^"
    EQ = "=="
    NEQ = "!="
    AND = "&&"
    OR = "||"
    IN = "in"

    def __str__(self) -> str:
        return self.value


def _is_num(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def value_type(value: Any) -> str:
    """The Jsonnet type name of a value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if _is_num(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, ArrValue):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    if callable(value):
        return "function"
    raise TypeError(f"not a Jsonnet value: {value!r}")


def _checked_num(value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise JsonnetError(ErrorKind.RUNTIME_ERROR, "overflow")
    return value


def _format_number(value: float) -> str:
    value = float(value)
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text:
        text = format(Decimal(text), "f")
    return text


def _manifest(value: Any) -> str:
    kind = value_type(value)
    if kind == "null":
        return "null"
    if kind == "boolean":
        return "true" if value else "false"
    if kind == "number":
        return _format_number(value)
    if kind == "string":
        return json.dumps(value, ensure_ascii=False)
    if kind == "array":
        if len(value) == 0:
            return "[ ]"
        return "[" + ", ".join(_manifest(item) for item in value) + "]"
    if kind == "object":
        if not value:
            return "{ }"
        fields = (
            f"{json.dumps(key, ensure_ascii=False)}: {_manifest(value[key])}"
            for key in sorted(value)
        )
        return "{" + ", ".join(fields) + "}"
    raise JsonnetError(ErrorKind.RUNTIME_ERROR, "tried to manifest function")


def _to_string(value: Any) -> str:
    return value if isinstance(value, str) else _manifest(value)


def _binary_error(op: BinaryOp, a: Any, b: Any) -> JsonnetError:
    return JsonnetError(
        ErrorKind.BINARY_OPERATOR_DOES_NOT_OPERATE_ON_VALUES,
        op.value,
        value_type(a),
        value_type(b),
    )


def _to_i32(value: float) -> int:
    value = float(value)
    if math.isnan(value):
        return 0
    if value >= _I32_MAX:
        return _I32_MAX
    if value <= _I32_MIN:
        return _I32_MIN
    return int(value)


def _wrap_i32(value: int) -> int:
    return ((value - _I32_MIN) % 2**32) + _I32_MIN


def _to_count(value: float) -> int:
    value = float(value)
    if math.isnan(value) or value <= 0:
        return 0
    return int(value)


def values_equal(a: Any, b: Any) -> bool:
    """Deep equality; values of different types are never equal."""
    kind = value_type(a)
    if kind != value_type(b):
        return False
    if kind == "function":
        raise JsonnetError(ErrorKind.RUNTIME_ERROR, "cannot test equality of functions")
    if kind == "array":
        return len(a) == len(b) and all(values_equal(x, y) for x, y in zip(a, b))
    if kind == "object":
        return set(a) == set(b) and all(values_equal(a[k], b[k]) for k in a)
    if kind == "number":
        return float(a) == float(b)
    return a == b


def evaluate_unary_op(op: UnaryOp, value: Any) -> Any:
    """Apply a unary operator."""
    if op is UnaryOp.NOT and isinstance(value, bool):
        return not value
    if op is UnaryOp.MINUS and _is_num(value):
        return -float(value)
    if op is UnaryOp.BIT_NOT and _is_num(value):
        return float(~_to_i32(value))
    raise JsonnetError(
        ErrorKind.UNARY_OPERATOR_DOES_NOT_OPERATE_ON_TYPE, op.value, value_type(value)
    )


def evaluate_add_op(a: Any, b: Any) -> Any:
    """The + operator: strings, numbers, arrays and objects."""
    if isinstance(a, str) and isinstance(b, str):
        return a + b
    if _is_num(a) and isinstance(b, str):
        return _format_number(a) + b
    if isinstance(a, str) and _is_num(b):
        return a + _format_number(b)
    if isinstance(a, str):
        return a + _to_string(b)
    if isinstance(b, str):
        return _to_string(a) + b
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        return {**a, **b}
    if isinstance(a, ArrValue) and isinstance(b, ArrValue):
        return extended(a, b)
    if _is_num(a) and _is_num(b):
        return _checked_num(float(a) + float(b))
    raise _binary_error(BinaryOp.ADD, a, b)


def _format_arg(value: Any) -> Any:
    if isinstance(value, str):
        return value
    if _is_num(value):
        value = float(value)
        return int(value) if value.is_integer() else value
    return _to_string(value)


def _format_string(template: str, values: Any) -> str:
    args: Any
    if isinstance(values, ArrValue):
        args = tuple(_format_arg(v) for v in values)
    elif isinstance(values, Mapping):
        args = {key: _format_arg(v) for key, v in values.items()}
    else:
        args = (_format_arg(values),)
    try:
        return template % args
    except (TypeError, ValueError, KeyError) as err:
        raise JsonnetError(ErrorKind.FORMAT, err) from None


def evaluate_mod_op(a: Any, b: Any) -> Any:
    """The % operator: remainder on numbers, formatting on strings."""
    if _is_num(a) and _is_num(b):
        if float(b) == 0.0:
            raise JsonnetError(ErrorKind.DIVISION_BY_ZERO)
        return math.fmod(float(a), float(b))
    if isinstance(a, str):
        return _format_string(a, b)
    raise _binary_error(BinaryOp.MOD, a, b)


def _sign(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def evaluate_compare_op(a: Any, b: Any, op: BinaryOp) -> int:
    """Order two values: negative, zero or positive."""
    if isinstance(a, str) and isinstance(b, str):
        return _sign(a, b)
    if _is_num(a) and _is_num(b):
        return _sign(float(a), float(b))
    if isinstance(a, ArrValue) and isinstance(b, ArrValue):
        for x, y in zip(a, b):
            order = evaluate_compare_op(x, y, op)
            if order:
                return order
        return _sign(len(a), len(b))
    raise _binary_error(op, a, b)


_COMPARISONS = {
    BinaryOp.LT: lambda order: order < 0,
    BinaryOp.GT: lambda order: order > 0,
    BinaryOp.LTE: lambda order: order <= 0,
    BinaryOp.GTE: lambda order: order >= 0,
}

_BITWISE = {
    BinaryOp.BIT_AND: lambda x, y: x & y,
    BinaryOp.BIT_OR: lambda x, y: x | y,
    BinaryOp.BIT_XOR: lambda x, y: x ^ y,
}


def _numeric_op(a: float, op: BinaryOp, b: float) -> Any:
    if op is BinaryOp.MUL:
        return _checked_num(a * b)
    if op is BinaryOp.DIV:
        if b == 0.0:
            raise JsonnetError(ErrorKind.DIVISION_BY_ZERO)
        return _checked_num(a / b)
    if op is BinaryOp.SUB:
        return _checked_num(a - b)
    if op in _BITWISE:
        return float(_BITWISE[op](_to_i32(a), _to_i32(b)))
    if op in (BinaryOp.LHS, BinaryOp.RHS):
        if b < 0.0:
            raise JsonnetError(ErrorKind.RUNTIME_ERROR, "shift by negative exponent")
        shift = _to_i32(b) & 31
        if op is BinaryOp.LHS:
            return float(_wrap_i32(_to_i32(a) << shift))
        return float(_to_i32(a) >> shift)
    return None


def evaluate_binary_op(a: Any, op: BinaryOp, b: Any) -> Any:
    """Apply a binary operator to two evaluated operands."""
    if op is BinaryOp.ADD:
        return evaluate_add_op(a, b)
    if op is BinaryOp.EQ:
        return values_equal(a, b)
    if op is BinaryOp.NEQ:
        return not values_equal(a, b)
    if op in _COMPARISONS:
        return _COMPARISONS[op](evaluate_compare_op(a, b, op))
    if op is BinaryOp.IN and isinstance(a, str) and isinstance(b, Mapping):
        return a in b
    if op is BinaryOp.MOD:
        return evaluate_mod_op(a, b)
    if op is BinaryOp.MUL and isinstance(a, str) and _is_num(b):
        return a * _to_count(b)
    if isinstance(a, bool) and isinstance(b, bool):
        if op is BinaryOp.AND:
            return a and b
        if op is BinaryOp.OR:
            return a or b
    if _is_num(a) and _is_num(b):
        result = _numeric_op(float(a), op, float(b))
        if result is not None:
            return result
    raise _binary_error(op, a, b)