"""
Filtering operations
====================

Операции отбора элементов. Keys of the surviving elements are preserved.
"""

from __future__ import annotations

import typing
from collections.abc import Callable, Hashable

from .._helpers import MISSING, require_non_negative
from .._types import Predicate
from ..normalize import Source, normalize
from ..protocol import Seq, Stage

# ============================================================================
# Stages
# ============================================================================


class _Filtered[K, V](Stage[K, V]):
    """Keeps pairs for which keep(key, value) is true."""

    __slots__ = ("_keep",)

    def __init__(self, source: Seq[K, V], keep: Callable[[K, V], bool]) -> None:
        super().__init__(source)
        self._keep = keep

    def _pull(self) -> tuple[K, V] | None:
        while (pair := self._upstream.next()) is not None:
            if self._keep(*pair):
                return pair
        return None


class _Sliced[K, V](Stage[K, V]):
    """Skips `offset` elements, then emits at most `length` (all when None)."""

    __slots__ = ("_offset", "_length", "_skipped", "_emitted")

    def __init__(self, source: Seq[K, V], offset: int, length: int | None) -> None:
        super().__init__(source)
        self._offset = offset
        self._length = length
        self._skipped = False
        self._emitted = 0

    def _restart(self) -> None:
        self._skipped = False
        self._emitted = 0

    def _pull(self) -> tuple[K, V] | None:
        # Never touch the upstream once the window is full.
        if self._length is not None and self._emitted >= self._length:
            return None
        if not self._skipped:
            self._skipped = True
            for _ in range(self._offset):
                if self._upstream.next() is None:
                    return None
        pair = self._upstream.next()
        if pair is not None:
            self._emitted += 1
        return pair


class _TakenWhile[K, V](Stage[K, V]):
    __slots__ = ("_predicate", "_done")

    def __init__(self, source: Seq[K, V], predicate: Predicate[V]) -> None:
        super().__init__(source)
        self._predicate = predicate
        self._done = False

    def _restart(self) -> None:
        self._done = False

    def _pull(self) -> tuple[K, V] | None:
        if self._done:
            return None
        pair = self._upstream.next()
        if pair is None or not self._predicate(pair[1]):
            self._done = True
            return None
        return pair


class _DroppedWhile[K, V](Stage[K, V]):
    __slots__ = ("_predicate", "_dropping")

    def __init__(self, source: Seq[K, V], predicate: Predicate[V]) -> None:
        super().__init__(source)
        self._predicate = predicate
        self._dropping = True

    def _restart(self) -> None:
        self._dropping = True

    def _pull(self) -> tuple[K, V] | None:
        while (pair := self._upstream.next()) is not None:
            if self._dropping and self._predicate(pair[1]):
                continue
            self._dropping = False
            return pair
        return None


class _Debounced[K, V](Stage[K, V]):
    """Drops values equal to the previously emitted one."""

    __slots__ = ("_previous",)

    def __init__(self, source: Seq[K, V]) -> None:
        super().__init__(source)
        self._previous: typing.Any = MISSING

    def _restart(self) -> None:
        self._previous = MISSING

    def _pull(self) -> tuple[K, V] | None:
        while (pair := self._upstream.next()) is not None:
            if self._previous is MISSING or pair[1] != self._previous:
                self._previous = pair[1]
                return pair
        return None


class _Distinct[K, V](Stage[K, V]):
    """Drops values seen before. Unhashable values are compared by equality."""

    __slots__ = ("_seen", "_seen_unhashable")

    def __init__(self, source: Seq[K, V]) -> None:
        super().__init__(source)
        self._seen: set[typing.Any] = set()
        self._seen_unhashable: list[typing.Any] = []

    def _restart(self) -> None:
        self._seen = set()
        self._seen_unhashable = []

    def _pull(self) -> tuple[K, V] | None:
        while (pair := self._upstream.next()) is not None:
            value = pair[1]
            if isinstance(value, Hashable):
                try:
                    if value in self._seen:
                        continue
                    self._seen.add(value)
                    return pair
                except TypeError:
                    pass  # e.g. a tuple holding a list
            if value not in self._seen_unhashable:
                self._seen_unhashable.append(value)
                return pair
        return None


# ============================================================================
# Operations
# ============================================================================


def filter[K, V](source: Source[K, V], fn: Predicate[V]) -> Seq[K, V]:
    """Keep values for which fn(value) is true."""
    return _Filtered(normalize(source), lambda key, value: bool(fn(value)))


def filter_with_keys[K, V](source: Source[K, V], fn: Callable[[V, K], bool]) -> Seq[K, V]:
    """Keep elements for which fn(value, key) is true."""
    return _Filtered(normalize(source), lambda key, value: bool(fn(value, key)))


def filter_keys[K, V](source: Source[K, V], fn: Predicate[K]) -> Seq[K, V]:
    """Keep elements whose key satisfies fn."""
    return _Filtered(normalize(source), lambda key, value: bool(fn(key)))


def remove_none[K, V](source: Source[K, V | None]) -> Seq[K, V]:
    return _Filtered(normalize(source), lambda key, value: value is not None)


def remove_empty[K, V](source: Source[K, V]) -> Seq[K, V]:
    """Drop falsy values (None, 0, "", empty containers)."""
    return _Filtered(normalize(source), lambda key, value: bool(value))


def where[K](source: Source[K, typing.Any], field: typing.Any, value: typing.Any) -> Seq[K, typing.Any]:
    """Keep mappings/sequences whose item `field` equals value."""

    def matches(key: K, item: typing.Any) -> bool:
        try:
            return item[field] == value
        except (KeyError, IndexError):
            return False

    return _Filtered(normalize(source), matches)


def slice[K, V](source: Source[K, V], offset: int, length: int | None = None) -> Seq[K, V]:
    """Skip `offset` elements, then keep at most `length` (the rest when None)."""
    require_non_negative("offset", offset)
    if length is not None:
        require_non_negative("length", length)
    return _Sliced(normalize(source), offset, length)


def take[K, V](source: Source[K, V], n: int) -> Seq[K, V]:
    """First n elements. Never pulls element n+1 from the source."""
    return slice(source, 0, n)


def drop[K, V](source: Source[K, V], n: int) -> Seq[K, V]:
    """Everything after the first n elements."""
    return slice(source, n)


def take_while[K, V](source: Source[K, V], fn: Predicate[V]) -> Seq[K, V]:
    return _TakenWhile(normalize(source), fn)


def drop_while[K, V](source: Source[K, V], fn: Predicate[V]) -> Seq[K, V]:
    return _DroppedWhile(normalize(source), fn)


def debounce[K, V](source: Source[K, V]) -> Seq[K, V]:
    """Collapse runs of equal consecutive values to their first element."""
    return _Debounced(normalize(source))


def distinct[K, V](source: Source[K, V]) -> Seq[K, V]:
    """Keep only the first occurrence of each value."""
    return _Distinct(normalize(source))


__all__ = (
    "debounce",
    "distinct",
    "drop",
    "drop_while",
    "filter",
    "filter_keys",
    "filter_with_keys",
    "remove_empty",
    "remove_none",
    "slice",
    "take",
    "take_while",
    "where",
)
