"""
Mapping operations
==================

Операции преобразования ключей и значений. Keys are preserved unless the
operation says otherwise.
"""

from __future__ import annotations

import typing
from collections.abc import Callable

from .._helpers import is_nested
from .._types import Mapper
from ..func import index
from ..normalize import NestedSources, Source, normalize
from ..protocol import Seq, Stage

# ============================================================================
# Stages
# ============================================================================


class _Mapped[K, V](Stage[K, V]):
    """Applies fn(key, value) -> (key, value) to every pair."""

    __slots__ = ("_fn",)

    def __init__(self, source: Seq[typing.Any, typing.Any], fn: Callable[[typing.Any, typing.Any], tuple[K, V]]) -> None:
        super().__init__(source)
        self._fn = fn

    def _pull(self) -> tuple[K, V] | None:
        pair = self._upstream.next()
        if pair is None:
            return None
        return self._fn(*pair)


class _Renumbered[V](Stage[int, V]):
    """Replaces keys with 0, 1, 2, ..."""

    __slots__ = ("_position",)

    def __init__(self, source: Seq[typing.Any, V]) -> None:
        super().__init__(source)
        self._position = 0

    def _restart(self) -> None:
        self._position = 0

    def _pull(self) -> tuple[int, V] | None:
        pair = self._upstream.next()
        if pair is None:
            return None
        position = self._position
        self._position += 1
        return position, pair[1]


# ============================================================================
# Operations
# ============================================================================


def map[K, V, R](source: Source[K, V], fn: Mapper[V, R]) -> Seq[K, R]:
    """Map every value through fn."""
    return _Mapped(normalize(source), lambda key, value: (key, fn(value)))


def map_with_keys[K, V, R](source: Source[K, V], fn: Callable[[V, K], R]) -> Seq[K, R]:
    """Map every value through fn(value, key)."""
    return _Mapped(normalize(source), lambda key, value: (key, fn(value, key)))


def map_keys[K, V, J](source: Source[K, V], fn: Mapper[K, J]) -> Seq[J, V]:
    """Map every key through fn."""
    return _Mapped(normalize(source), lambda key, value: (fn(key), value))


def map_recursive[K, V](source: Source[K, V], fn: Mapper[typing.Any, typing.Any]) -> Seq[K, typing.Any]:
    """
    Map leaf values through fn, descending into nested iterables.

    Nested values become lazy sequences themselves.
    """
    seq = normalize(source)
    nested = NestedSources()

    def apply(key: K, value: V) -> tuple[K, typing.Any]:
        if is_nested(value):
            return key, map_recursive(nested.normalize(value, seq), fn)
        return key, fn(value)

    return _Mapped(seq, apply)


def reindex[K, V, J](source: Source[K, V], fn: Mapper[V, J]) -> Seq[J, V]:
    """Re-key every element by fn(value)."""
    return _Mapped(normalize(source), lambda key, value: (fn(value), value))


def pluck[K](source: Source[K, typing.Any], field: typing.Any, default: typing.Any = None) -> Seq[K, typing.Any]:
    """Map every value to value[field] (default when missing)."""
    return map(source, index(field, default))


def flip[K, V](source: Source[K, V]) -> Seq[V, K]:
    """Swap keys and values."""
    return _Mapped(normalize(source), lambda key, value: (value, key))


def keys[K](source: Source[K, typing.Any]) -> Seq[int, K]:
    """The keys, as values keyed 0..n-1."""
    return _Renumbered(flip(source))


def values[V](source: Source[typing.Any, V]) -> Seq[int, V]:
    """The values, re-keyed 0..n-1."""
    return _Renumbered(normalize(source))


def to_key_pairs[K, V](source: Source[K, V]) -> Seq[int, tuple[K, V]]:
    """Every element as a (key, value) tuple, keyed 0..n-1."""
    return _Renumbered(_Mapped(normalize(source), lambda key, value: (key, (key, value))))


def from_key_pairs[K, V](source: Source[typing.Any, tuple[K, V]]) -> Seq[K, V]:
    """Inverse of to_key_pairs: each value is a (key, value) pair."""
    return _Mapped(normalize(source), lambda _, pair: (pair[0], pair[1]))


__all__ = (
    "flip",
    "from_key_pairs",
    "keys",
    "map",
    "map_keys",
    "map_recursive",
    "map_with_keys",
    "pluck",
    "reindex",
    "to_key_pairs",
    "values",
)
