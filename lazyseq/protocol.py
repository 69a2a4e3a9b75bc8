"""
Sequence protocol
=================

Seq is the pull-based cursor every component of the library consumes and
produces. Stage is the base for derived (lazy) sequences: each operation is
an explicit state machine that computes one (key, value) pair per pull.
"""

from __future__ import annotations

import typing
from abc import ABC, abstractmethod
from collections.abc import Iterator

from ._errors import PreconditionViolationError

# ============================================================================
# Protocol
# ============================================================================


class Seq[K, V](ABC):
    """
    Pull-based cursor over ordered (key, value) pairs.

    A sequence only makes progress when its consumer calls the protocol:

        seq.reset()
        while seq.has_current():
            use(seq.current_key(), seq.current_value())
            seq.advance()

    Keys are not required to be unique or monotonic. The protocol is not
    reentrant: one consumer drives one instance.
    """

    __slots__ = ()

    @abstractmethod
    def reset(self) -> None:
        """Rewind so the next read reflects the first element."""

    @abstractmethod
    def advance(self) -> None:
        """Move to the next element. No-op once exhausted."""

    @abstractmethod
    def has_current(self) -> bool:
        """Whether the cursor is positioned on an element."""

    @abstractmethod
    def current_key(self) -> K:
        """Key of the current element."""

    @abstractmethod
    def current_value(self) -> V:
        """Value of the current element."""

    def close(self) -> None:
        """Release resources held by the underlying source."""

    def items(self) -> Iterator[tuple[K, V]]:
        """Reset, then yield every (key, value) pair."""
        self.reset()
        while self.has_current():
            yield self.current_key(), self.current_value()
            self.advance()

    def __iter__(self) -> Iterator[V]:
        for _, value in self.items():
            yield value

    def __enter__(self) -> typing.Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


# ============================================================================
# Upstream reader
# ============================================================================


class Upstream[K, V]:
    """
    Reads pairs from one upstream cursor.

    The upstream advance() is deferred until the next pair is requested, so a
    stage never forces element i+1 while its consumer is still on element i.
    """

    __slots__ = ("seq", "_pending")

    def __init__(self, seq: Seq[K, V]) -> None:
        self.seq = seq
        self._pending = False

    def reset(self) -> None:
        self.seq.reset()
        self._pending = False

    def resume(self) -> None:
        """Continue after the current element on the next read, without resetting."""
        self._pending = True

    def next(self) -> tuple[K, V] | None:
        """Next pair, or None once the upstream is exhausted."""
        if self._pending:
            self._pending = False
            self.seq.advance()
        if not self.seq.has_current():
            return None
        pair = (self.seq.current_key(), self.seq.current_value())
        self._pending = True
        return pair


# ============================================================================
# Derived stage
# ============================================================================


class Stage[K, V](Seq[K, V]):
    """
    Base for lazy operations over one or more upstream sequences.

    Subclasses implement _pull() (next output pair or None) and, when they
    keep per-pass state, _restart().
    """

    __slots__ = ("_upstreams", "_head", "_primed")

    def __init__(self, *sources: Seq[typing.Any, typing.Any]) -> None:
        self._upstreams = tuple(Upstream(source) for source in sources)
        self._head: tuple[K, V] | None = None
        self._primed = False

    @property
    def _upstream(self) -> Upstream[typing.Any, typing.Any]:
        return self._upstreams[0]

    def reset(self) -> None:
        for upstream in self._upstreams:
            upstream.reset()
        self._restart()
        self._head = None
        self._primed = False

    def advance(self) -> None:
        if not self._primed:
            self._prime()
        if self._head is not None:
            self._head = self._pull()

    def has_current(self) -> bool:
        if not self._primed:
            self._prime()
        return self._head is not None

    def current_key(self) -> K:
        return self._current()[0]

    def current_value(self) -> V:
        return self._current()[1]

    def close(self) -> None:
        for upstream in self._upstreams:
            upstream.seq.close()

    def _current(self) -> tuple[K, V]:
        if not self.has_current():
            raise PreconditionViolationError(f"{type(self).__name__} has no current element")
        assert self._head is not None
        return self._head

    def _prime(self) -> None:
        self._head = self._pull()
        self._primed = True

    def _restart(self) -> None:
        """Clear per-pass state. Called on every reset()."""

    @abstractmethod
    def _pull(self) -> tuple[K, V] | None:
        """Compute the next output pair, or None when the stage is exhausted."""

    def __repr__(self) -> str:
        sources = ", ".join(repr(upstream.seq) for upstream in self._upstreams)
        return f"{type(self).__name__.lstrip('_')}({sources})"


__all__ = ("Seq", "Stage", "Upstream")
