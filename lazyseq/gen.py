"""
Generators
==========

Source constructors: numeric ranges, repetition, constants, deferred
factories and scoped-resource sequences.
"""

from __future__ import annotations

import builtins
import itertools
import logging
import typing
from collections.abc import Callable

from ._errors import PreconditionViolationError
from ._helpers import require_non_negative, require_positive
from .deferred import DeferredSeq
from .normalize import IterableSeq, Source, from_pairs, normalize
from .ops.mapping import flip, map
from .protocol import Seq

logger = logging.getLogger(__name__)

# ============================================================================
# Constructors
# ============================================================================


def range(start: int, end: int, step: int = 1) -> Seq[int, int]:
    """
    Integers from start to end inclusive, counting down when start > end.

    Example:
        gen.range(3, 7)     # 3, 4, 5, 6, 7
        gen.range(5, 1, 2)  # 5, 3, 1
    """
    require_positive("step", step)
    if start <= end:
        return IterableSeq(builtins.range(start, end + 1, step))
    return IterableSeq(builtins.range(start, end - 1, -step))


def repeat[V](value: V, times: int | None = None) -> Seq[int, V]:
    """`value` repeated `times` times, endlessly when None."""
    if times is None:
        return DeferredSeq(itertools.repeat, value)
    return DeferredSeq(itertools.repeat, value, require_non_negative("times", times))


def repeat_for_keys[K, V](keys: Source[typing.Any, K], value: V) -> Seq[K, V]:
    """The same value under each of the given keys."""
    return map(flip(keys), lambda _: value)


def empty() -> Seq[typing.Any, typing.Any]:
    return IterableSeq(())


def just[V](value: V) -> Seq[int, V]:
    """Single-element sequence."""
    return IterableSeq((value,))


def defer[K, V](factory: Callable[..., Source[K, V]], /, *args: typing.Any, **kwargs: typing.Any) -> DeferredSeq[K, V]:
    """Sequence regenerated by calling factory(*args, **kwargs) on every pass."""
    return DeferredSeq(factory, *args, **kwargs)


# ============================================================================
# Scoped resources
# ============================================================================


class ResourceSeq[R, K, V](Seq[K, V]):
    """
    Sequence backed by a resource: acquire → use → release.

    The resource is acquired on the first protocol call of a pass and
    released as soon as the pass ends: on exhaustion, close(), reset() or
    when leaving a with-block. Every pass acquires a fresh resource.

    Unlike a try/finally around a generator, release does not depend on the
    consumer finishing the iteration.
    """

    __slots__ = ("_acquire", "_use", "_release", "_resource", "_inner", "_exhausted")

    def __init__(
        self,
        acquire: Callable[[], R],
        *,
        use: Callable[[R], Source[K, V]],
        release: Callable[[R], typing.Any],
    ) -> None:
        self._acquire = acquire
        self._use = use
        self._release = release
        self._resource: R | None = None
        self._inner: Seq[K, V] | None = None
        self._exhausted = False

    @property
    def held(self) -> bool:
        """Whether the resource is currently acquired."""
        return self._inner is not None

    def reset(self) -> None:
        self._finish()
        self._exhausted = False

    def advance(self) -> None:
        if self._exhausted:
            return
        inner = self._open()
        inner.advance()
        if not inner.has_current():
            self._finish()

    def has_current(self) -> bool:
        if self._exhausted:
            return False
        if not self._open().has_current():
            self._finish()
            return False
        return True

    def current_key(self) -> K:
        return self._current().current_key()

    def current_value(self) -> V:
        return self._current().current_value()

    def close(self) -> None:
        self._finish()

    def _current(self) -> Seq[K, V]:
        if not self.has_current():
            raise PreconditionViolationError("sequence has no current element")
        assert self._inner is not None
        return self._inner

    def _open(self) -> Seq[K, V]:
        if self._inner is None:
            resource = self._acquire()
            logger.debug("acquired %r", resource)
            try:
                inner = normalize(self._use(resource))
                inner.reset()
            except Exception:
                self._release(resource)
                raise
            self._resource, self._inner = resource, inner
        return self._inner

    def _finish(self) -> None:
        self._exhausted = True
        if self._inner is None:
            return
        inner, resource = self._inner, self._resource
        self._inner, self._resource = None, None
        try:
            inner.close()
        finally:
            self._release(typing.cast(R, resource))
            logger.debug("released %r", resource)

    def __repr__(self) -> str:
        return f"ResourceSeq({self._acquire!r}, held={self.held})"


def with_resource[R, K, V](
    acquire: Callable[[], R],
    *,
    use: Callable[[R], Source[K, V]],
    release: Callable[[R], typing.Any],
) -> ResourceSeq[R, K, V]:
    """
    Lazily acquire a resource, stream `use(resource)`, release it when done.

    Example:
        lines = gen.with_resource(
            lambda: open(path),
            use=lambda fh: fh,
            release=lambda fh: fh.close(),
        )
    """
    return ResourceSeq(acquire, use=use, release=release)


__all__ = (
    "ResourceSeq",
    "defer",
    "empty",
    "from_pairs",
    "just",
    "range",
    "repeat",
    "repeat_for_keys",
    "with_resource",
)
