"""
Pipeline
========

Left-to-right application of unary operations:

    pipe(source, [op1, op2, op3]) == op3(op2(op1(normalize(source))))

Each operation is a unary callable closed over its own parameters, usually
built with the `stages` factories or with stage() and a HOLE placeholder.
"""

from __future__ import annotations

import typing
from collections.abc import Callable, Iterable

from ._types import HOLE, Hole, Operation
from .func import compose
from .normalize import Source, normalize


def pipe(source: Source[typing.Any, typing.Any], operations: Iterable[Operation]) -> typing.Any:
    """
    Apply operations in declared order.

    An empty list returns the normalized source. The result is whatever the
    last operation returns: a lazy Seq, or a concrete value for terminals.

    Example:
        pipe(people, [
            stages.filter(func.compose([func.index("age"), func.operator(">=", 20)])),
            stages.map(func.index("name")),
            stages.debounce(),
        ])
    """
    return compose(operations)(normalize(source))


def stage(op: Callable[..., typing.Any], /, *args: typing.Any, **kwargs: typing.Any) -> Operation:
    """
    Partially apply op, leaving one slot for the pipeline value.

    The value replaces every Hole among the positional and keyword
    arguments; without a Hole it is passed first.

    Example:
        stage(ops.take, 3)                       # lambda seq: ops.take(seq, 3)
        stage(ops.replace_keys, ["a", "b"], HOLE)  # value goes second
    """
    if not any(isinstance(arg, Hole) for arg in (*args, *kwargs.values())):

        def prepend(value: typing.Any) -> typing.Any:
            return op(value, *args, **kwargs)

        return prepend

    def fill(value: typing.Any) -> typing.Any:
        positional = [value if isinstance(arg, Hole) else arg for arg in args]
        named = {name: value if isinstance(arg, Hole) else arg for name, arg in kwargs.items()}
        return op(*positional, **named)

    return fill


__all__ = ("HOLE", "Hole", "compose", "pipe", "stage")
