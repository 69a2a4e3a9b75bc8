"""
Effect operations
=================

Pass-through stages that observe or check values, and running accumulation.
"""

from __future__ import annotations

import typing
from collections.abc import Callable

from .._errors import ValidationError
from .._helpers import MISSING
from .._types import Predicate, Reducer
from ..normalize import Source, normalize
from ..protocol import Seq, Stage


class _Tapped[K, V](Stage[K, V]):
    """Calls `effect(value, key)` as each element passes through."""

    __slots__ = ("_effect",)

    def __init__(self, source: Seq[K, V], effect: Callable[[V, K], typing.Any]) -> None:
        super().__init__(source)
        self._effect = effect

    def _pull(self) -> tuple[K, V] | None:
        pair = self._upstream.next()
        if pair is not None:
            self._effect(pair[1], pair[0])
        return pair


class _Validated[K, V](Stage[K, V]):
    __slots__ = ("_predicate",)

    def __init__(self, source: Seq[K, V], predicate: Predicate[V]) -> None:
        super().__init__(source)
        self._predicate = predicate

    def _pull(self) -> tuple[K, V] | None:
        pair = self._upstream.next()
        if pair is not None and not self._predicate(pair[1]):
            raise ValidationError(*pair)
        return pair


class _Scanned[A, V](Stage[int, A]):
    """
    Running fold, one accumulator per source value. Without an initial value
    the first source value seeds the accumulator and is emitted as-is.
    """

    __slots__ = ("_fn", "_initial", "_accumulator", "_position")

    def __init__(self, source: Seq[typing.Any, V], fn: Reducer[A, V], initial: typing.Any) -> None:
        super().__init__(source)
        self._fn = fn
        self._initial = initial
        self._restart()

    def _restart(self) -> None:
        self._accumulator: typing.Any = self._initial
        self._position = 0

    def _pull(self) -> tuple[int, A] | None:
        pair = self._upstream.next()
        if pair is None:
            return None
        if self._accumulator is MISSING:
            self._accumulator = pair[1]
        else:
            self._accumulator = self._fn(self._accumulator, pair[1])
        position = self._position
        self._position += 1
        return position, self._accumulator


def tap[K, V](source: Source[K, V], fn: Callable[[V, K], typing.Any]) -> Seq[K, V]:
    """
    Call fn(value, key) for every element without changing it.

    Example:
        ops.tap(items, lambda value, key: log.append(value))
    """
    return _Tapped(normalize(source), fn)


def validate[K, V](source: Source[K, V], fn: Predicate[V]) -> Seq[K, V]:
    """
    Pass values through, raising ValidationError at the first one failing fn.

    The check runs lazily: elements before the offending one are delivered.
    """
    return _Validated(normalize(source), fn)


def scan[A, V](source: Source[typing.Any, V], fn: Reducer[A, V], initial: typing.Any = MISSING) -> Seq[int, A]:
    """
    Every intermediate accumulator of a fold, keyed 0..n-1.

    Example:
        ops.scan([1, 2, 3, 4], func.operator("*"), 1)  # 1, 2, 6, 24
    """
    return _Scanned(normalize(source), fn, initial)


__all__ = ("scan", "tap", "validate")
