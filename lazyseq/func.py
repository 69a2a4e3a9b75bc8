"""
Function helpers
================

Small factories for the callables typically passed to map, filter and
reduce. Every accessor is an explicit closure over a single field name or
key; nothing is looked up by name at call time beyond that field.
"""

from __future__ import annotations

import operator as _op
import typing
from collections.abc import Callable, Iterable

from ._errors import InvalidArgumentError
from ._types import HOLE, Hole, Operation, Predicate

# ============================================================================
# Accessors
# ============================================================================


def method(name: str, /, *args: typing.Any, **kwargs: typing.Any) -> Callable[[typing.Any], typing.Any]:
    """
    Call obj.name(*args, **kwargs).

    Example:
        func.method("strip", "/")("/path/")  # "path"
    """
    return _op.methodcaller(name, *args, **kwargs)


def attribute(name: str, default: typing.Any = None) -> Callable[[typing.Any], typing.Any]:
    """Read obj.name, or default when the attribute is missing."""

    def get(obj: typing.Any) -> typing.Any:
        return getattr(obj, name, default)

    return get


def index(key: typing.Any, default: typing.Any = None) -> Callable[[typing.Any], typing.Any]:
    """Read obj[key], or default when the key/index is missing."""

    def get(obj: typing.Any) -> typing.Any:
        try:
            return obj[key]
        except (KeyError, IndexError):
            return default

    return get


# ============================================================================
# Adapters & predicates
# ============================================================================


def unary[T, R](fn: Callable[[T], R]) -> Callable[..., R]:
    """Call fn with the first argument only (drops keys passed by keyed operations)."""

    def call(value: T, *_: typing.Any) -> R:
        return fn(value)

    return call


def truthy() -> Predicate[typing.Any]:
    return bool


def falsey() -> Predicate[typing.Any]:
    return _op.not_


def not_(fn: Callable[..., typing.Any]) -> Callable[..., bool]:
    """Negate a predicate."""

    def negated(*args: typing.Any) -> bool:
        return not fn(*args)

    return negated


def odd() -> Predicate[int]:
    return lambda value: value % 2 == 1


def even() -> Predicate[int]:
    return lambda value: value % 2 == 0


def compose(operations: Iterable[Operation]) -> Operation:
    """
    Left-to-right composition of unary callables.

    compose([f, g, h])(x) == h(g(f(x))). The operations are captured when
    compose() is called, so one-shot iterables are fine.
    """
    steps = tuple(operations)

    def composed(data: typing.Any) -> typing.Any:
        for step in steps:
            data = step(data)
        return data

    return composed


# ============================================================================
# Operators
# ============================================================================

_OPERATORS: typing.Final[dict[str, Callable[[typing.Any, typing.Any], typing.Any]]] = {
    "+": _op.add,
    "-": _op.sub,
    "*": _op.mul,
    "/": _op.truediv,
    "//": _op.floordiv,
    "%": _op.mod,
    "**": _op.pow,
    "|": _op.or_,
    "&": _op.and_,
    "^": _op.xor,
    ">>": _op.rshift,
    "<<": _op.lshift,
    "==": _op.eq,
    "!=": _op.ne,
    ">": _op.gt,
    ">=": _op.ge,
    "<": _op.lt,
    "<=": _op.le,
    "is": _op.is_,
    "is not": _op.is_not,
    "in": lambda left, right: left in right,
    "and": lambda left, right: left and right,
    "or": lambda left, right: left or right,
    "<=>": lambda left, right: (left > right) - (left < right),
    "isinstance": isinstance,
}


def operator(symbol: str, right: typing.Any = HOLE) -> Callable[..., typing.Any]:
    """
    Callable applying a binary operator.

    With a right operand it maps: operator("*", 2)(3) == 6.
    Without one (the HOLE default) the right operand comes from the second
    argument, which suits reduce/scan: operator("+")(3, 7) == 10.

    Example:
        ops.filter(items, func.operator(">=", 20))
        ops.reduce(items, func.operator("+"), 0)
    """
    try:
        apply = _OPERATORS[symbol]
    except KeyError:
        raise InvalidArgumentError(f"unexpected operator: {symbol!r}") from None

    def call(left: typing.Any, operand: typing.Any = HOLE, *_: typing.Any) -> typing.Any:
        value = operand if isinstance(right, Hole) else right
        if isinstance(value, Hole):
            raise InvalidArgumentError(f"missing right operand for operator {symbol!r}")
        return apply(left, value)

    return call


__all__ = (
    "attribute",
    "compose",
    "even",
    "falsey",
    "index",
    "method",
    "not_",
    "odd",
    "operator",
    "truthy",
    "unary",
)
