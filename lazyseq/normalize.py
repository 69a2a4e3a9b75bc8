"""
Normalizer
==========

Single admission point for heterogeneous sources: adapts any Python iterable
to the Seq protocol without draining it.
"""

from __future__ import annotations

import logging
import reprlib
import typing
from collections.abc import Iterable, Iterator, Mapping

from ._errors import PreconditionViolationError
from .protocol import Seq

logger = logging.getLogger(__name__)

# Source = anything normalize() accepts
type Source[K, V] = Seq[K, V] | Mapping[K, V] | Iterable[V]

_END: typing.Final = object()


class IterableSeq[K, V](Seq[K, V]):
    """
    Seq over a Python iterable.

    Elements are keyed by 0-based position, or taken from (key, value) pairs
    when keyed=True. Re-iterable sources (lists, ranges, mapping views) are
    re-iterated on every reset. One-shot iterators (generators, iter(...))
    may only be reset while still on their first element and not yet closed;
    afterwards reset() raises instead of silently producing nothing.
    """

    __slots__ = ("_iterable", "_keyed", "_one_shot", "_closed", "_iterator", "_head", "_position", "_primed")

    def __init__(self, iterable: Iterable[typing.Any], *, keyed: bool = False) -> None:
        self._iterable = iterable
        self._keyed = keyed
        self._one_shot = isinstance(iterable, Iterator)
        self._closed = False
        self._iterator: Iterator[typing.Any] | None = None
        self._head: typing.Any = _END
        self._position = 0
        self._primed = False

    @property
    def one_shot(self) -> bool:
        """Whether the wrapped iterable can only be walked once."""
        return self._one_shot

    def reset(self) -> None:
        if self._one_shot:
            if self._closed:
                raise PreconditionViolationError(f"cannot rewind a closed one-shot {type(self._iterable).__name__}")
            if self._position > 0:
                raise PreconditionViolationError(
                    f"cannot rewind a one-shot {type(self._iterable).__name__} "
                    f"after {self._position} element(s) were consumed"
                )
            return
        self._release()
        self._iterator = None
        self._head = _END
        self._position = 0
        self._primed = False

    def advance(self) -> None:
        if not self._primed:
            self._prime()
        if self._head is _END:
            return
        self._position += 1
        self._head = self._next()

    def has_current(self) -> bool:
        if not self._primed:
            self._prime()
        return self._head is not _END

    def current_key(self) -> K:
        if not self.has_current():
            raise PreconditionViolationError("sequence has no current element")
        return self._head[0] if self._keyed else self._position

    def current_value(self) -> V:
        if not self.has_current():
            raise PreconditionViolationError("sequence has no current element")
        return self._head[1] if self._keyed else self._head

    def close(self) -> None:
        self._release()
        self._head = _END
        self._primed = True
        if self._one_shot:
            self._closed = True
            close = getattr(self._iterable, "close", None)
            if close is not None:
                close()

    def _prime(self) -> None:
        if self._iterator is None:
            self._iterator = iter(self._iterable)
        self._head = self._next()
        self._primed = True

    def _next(self) -> typing.Any:
        assert self._iterator is not None
        try:
            item = next(self._iterator)
        except StopIteration:
            logger.debug("%s exhausted after %d element(s)", type(self._iterable).__name__, self._position)
            self._release()
            return _END
        if self._keyed:
            key, value = item
            return key, value
        return item

    def _release(self) -> None:
        # Generators hold frames (and often open resources) until closed.
        close = getattr(self._iterator, "close", None)
        if close is not None:
            close()

    def __repr__(self) -> str:
        return f"IterableSeq({reprlib.repr(self._iterable)})"


def normalize[K, V](source: Source[K, V]) -> Seq[K, V]:
    """
    Adapt any sequence-like source to the Seq protocol.

    - Seq: returned as-is
    - Mapping: keyed by the mapping keys
    - any other iterable: keyed by position

    Raises TypeError for non-iterables.
    """
    match source:
        case Seq():
            return source
        case Mapping():
            return IterableSeq(source.items(), keyed=True)
        case Iterable():
            return IterableSeq(source)
        case _:
            raise TypeError(f"cannot normalize non-iterable {type(source).__name__!r} into a sequence")


def from_pairs[K, V](pairs: Iterable[tuple[K, V]]) -> Seq[K, V]:
    """Keyed sequence from (key, value) pairs. Keys may repeat."""
    return IterableSeq(pairs, keyed=True)


class NestedSources:
    """
    Normalizes the nested values met while walking parent sequences.

    A one-shot iterator stored inside a re-walkable parent is met again on
    every pass. Handing back the wrapper built on the first pass lets its
    rewind guard refuse the spent iterator; a fresh wrapper would read it as
    empty. Children of one-shot parents are never remembered.
    """

    __slots__ = ("_wrappers",)

    def __init__(self) -> None:
        self._wrappers: dict[int, Seq[typing.Any, typing.Any]] = {}

    def normalize(self, value: Source[typing.Any, typing.Any], parent: Seq[typing.Any, typing.Any]) -> Seq[typing.Any, typing.Any]:
        if isinstance(value, Seq) or not isinstance(value, Iterator):
            return normalize(value)
        if isinstance(parent, IterableSeq) and parent.one_shot:
            return normalize(value)
        # the wrapper keeps the iterator alive, so its id stays unique
        wrapper = self._wrappers.get(id(value))
        if wrapper is None:
            wrapper = self._wrappers[id(value)] = normalize(value)
        return wrapper


__all__ = ("IterableSeq", "NestedSources", "Source", "from_pairs", "normalize")
