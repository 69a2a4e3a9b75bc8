"""
Caching replay
==============

CachingReplaySeq makes a single-pass sequence multi-pass by recording every
(key, value) pair of the first traversal and replaying the recording
afterwards. O(n) memory for replay capability.
"""

from __future__ import annotations

import enum
import functools
import logging
import typing

from ._errors import InvalidArgumentError, PreconditionViolationError
from ._types import Comparator, Selector
from .normalize import Source, normalize
from .protocol import Seq, Upstream

logger = logging.getLogger(__name__)


class Phase(enum.Enum):
    FIRST_PASS = "first_pass"
    REPLAY = "replay"


class _ReplayCache[K, V]:
    """
    Append-only recording of a source, shared by every cursor replaying it.

    Failure policy: the first exception raised while pulling from the source
    poisons the cache. Any later use raises PreconditionViolationError chained
    to that exception, so a partial recording is never replayed.
    """

    __slots__ = ("entries", "complete", "failure", "_upstream", "_started")

    def __init__(self, source: Seq[K, V]) -> None:
        self.entries: list[tuple[K, V]] = []
        self.complete = False
        self.failure: BaseException | None = None
        self._upstream: Upstream[K, V] | None = Upstream(source)
        self._started = False

    def check(self) -> None:
        if self.failure is not None:
            raise PreconditionViolationError(
                f"replay cache is unusable: its source failed after {len(self.entries)} cached element(s)"
            ) from self.failure

    def fill(self, index: int) -> bool:
        """Record pairs until *index* is cached. False when the source ends first."""
        self.check()
        while len(self.entries) <= index and not self.complete:
            self._pull()
        return index < len(self.entries)

    def drain(self) -> None:
        self.check()
        while not self.complete:
            self._pull()

    def abandon(self) -> None:
        """Close the source before it was fully recorded."""
        if self.complete or self.failure is not None:
            return
        upstream, self._upstream = self._upstream, None
        assert upstream is not None
        upstream.seq.close()
        self.failure = PreconditionViolationError("replay source was closed before it was fully cached")
        logger.debug("replay cache abandoned after %d element(s)", len(self.entries))

    def _pull(self) -> None:
        upstream = self._upstream
        assert upstream is not None
        try:
            if not self._started:
                upstream.reset()
                self._started = True
            pair = upstream.next()
        except Exception as exc:
            self.failure = exc
            logger.debug("replay source failed after %d element(s): %r", len(self.entries), exc)
            raise
        if pair is None:
            self.complete = True
            self._upstream = None
            upstream.seq.close()
            logger.debug("replay cache complete with %d element(s)", len(self.entries))
        else:
            self.entries.append(pair)


class CachingReplaySeq[K, V](Seq[K, V]):
    """
    Rewindable wrapper around a single-pass sequence.

    FIRST_PASS: pairs are pulled from the source and appended to the cache,
    once per position. The first reset() after anything was observed drains
    the rest of the source into the cache, releases the source and switches
    to REPLAY, so partial caches are never replayed. REPLAY: pairs come from
    the cache only.

    Built from another CachingReplaySeq, the new instance shares that cache
    (each instance keeps its own cursor) instead of re-caching it.
    """

    __slots__ = ("_cache", "_position")

    def __init__(self, source: Source[K, V]) -> None:
        if isinstance(source, CachingReplaySeq):
            self._cache: _ReplayCache[K, V] = source._cache
        else:
            self._cache = _ReplayCache(normalize(source))
        self._position = 0

    @property
    def phase(self) -> Phase:
        return Phase.REPLAY if self._cache.complete else Phase.FIRST_PASS

    @property
    def position(self) -> int:
        return self._position

    def reset(self) -> None:
        cache = self._cache
        if not cache.complete and (self._position > 0 or cache.entries):
            cache.drain()
        else:
            cache.check()
        self._position = 0

    def advance(self) -> None:
        if self._cache.fill(self._position):
            self._position += 1

    def has_current(self) -> bool:
        return self._cache.fill(self._position)

    def current_key(self) -> K:
        return self._entry()[0]

    def current_value(self) -> V:
        return self._entry()[1]

    def close(self) -> None:
        self._cache.abandon()

    def seek(self, position: int) -> None:
        """Drain if needed, then move the cursor to a 0-based offset."""
        if position < 0:
            raise InvalidArgumentError(f"seek position must be >= 0, got {position}")
        self._cache.drain()
        length = len(self._cache.entries)
        if position > length:
            raise InvalidArgumentError(f"cannot seek to {position}: the sequence has {length} element(s)")
        self._position = position

    def count(self) -> int:
        self._cache.drain()
        return len(self._cache.entries)

    def sort(
        self,
        comparator: Comparator[V] | None = None,
        *,
        key: Selector[V, typing.Any] | None = None,
    ) -> None:
        """
        Drain, then reorder the cache by value. Keys travel with their values.

        Uses the 3-way comparator, or the key selector, or natural ordering.
        The cursor goes back to the start.
        """
        if comparator is not None and key is not None:
            raise InvalidArgumentError("sort(): provide either 'comparator' or 'key', not both")
        self._cache.drain()
        if comparator is not None:
            by_value = functools.cmp_to_key(comparator)
            self._cache.entries.sort(key=lambda entry: by_value(entry[1]))
        elif key is not None:
            self._cache.entries.sort(key=lambda entry: key(entry[1]))
        else:
            self._cache.entries.sort(key=lambda entry: entry[1])
        self._position = 0

    def _entry(self) -> tuple[K, V]:
        if not self._cache.fill(self._position):
            raise PreconditionViolationError("sequence has no current element")
        return self._cache.entries[self._position]

    def __repr__(self) -> str:
        return (
            f"CachingReplaySeq(phase={self.phase.name}, cached={len(self._cache.entries)}, "
            f"position={self._position})"
        )


__all__ = ("CachingReplaySeq", "Phase")
