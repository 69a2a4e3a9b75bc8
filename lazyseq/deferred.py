"""
Deferred sequences
==================

Replay by regeneration: a factory is called to produce a fresh one-shot
sequence on every pass.
"""

from __future__ import annotations

import logging
import reprlib
import typing
from collections.abc import Callable

from .normalize import Source, normalize
from .protocol import Seq

logger = logging.getLogger(__name__)


class DeferredSeq[K, V](Seq[K, V]):
    """
    Sequence materialized lazily by calling factory(*args, **kwargs).

    Nothing runs at construction. The first protocol call invokes the factory;
    reset() drops the current materialization so the next call invokes it
    again with the same bound arguments.

    NOTE: the factory's side effects (opening a file, running a query) happen
          once per pass, not once overall. Wrap in CachingReplaySeq to replay
          recorded values instead.

    If the factory raises, the error propagates and nothing is kept, so a
    later call retries the factory.
    """

    __slots__ = ("_factory", "_args", "_kwargs", "_materialized")

    def __init__(
        self,
        factory: Callable[..., Source[K, V]],
        /,
        *args: typing.Any,
        **kwargs: typing.Any,
    ) -> None:
        self._factory = factory
        self._args = args
        self._kwargs = kwargs
        self._materialized: Seq[K, V] | None = None

    @property
    def materialized(self) -> bool:
        """Whether a materialization is currently held."""
        return self._materialized is not None

    def reset(self) -> None:
        self._discard()

    def advance(self) -> None:
        self._inner().advance()

    def has_current(self) -> bool:
        return self._inner().has_current()

    def current_key(self) -> K:
        return self._inner().current_key()

    def current_value(self) -> V:
        return self._inner().current_value()

    def close(self) -> None:
        self._discard()

    def _inner(self) -> Seq[K, V]:
        if self._materialized is None:
            seq = normalize(self._factory(*self._args, **self._kwargs))
            seq.reset()
            logger.debug("materialized %s from %r", type(seq).__name__, self._factory)
            self._materialized = seq
        return self._materialized

    def _discard(self) -> None:
        if self._materialized is not None:
            seq, self._materialized = self._materialized, None
            seq.close()

    def __repr__(self) -> str:
        return f"DeferredSeq({self._factory!r}, args={reprlib.repr(self._args)}, materialized={self.materialized})"


__all__ = ("DeferredSeq",)
