"""
Restructuring operations
========================

Операции изменения структуры: группировка, склейка, разворачивание.
"""

from __future__ import annotations

import typing
from collections.abc import Callable

from .._helpers import is_nested, require_non_negative, require_positive
from .._types import Mapper
from ..normalize import NestedSources, Source, normalize
from ..protocol import Seq, Stage, Upstream
from ..replay import CachingReplaySeq
from .terminal import last

# ============================================================================
# Grouping
# ============================================================================


class _Chunked[V](Stage[int, list[V]]):
    __slots__ = ("_size", "_position")

    def __init__(self, source: Seq[typing.Any, V], size: int) -> None:
        super().__init__(source)
        self._size = size
        self._position = 0

    def _restart(self) -> None:
        self._position = 0

    def _pull(self) -> tuple[int, list[V]] | None:
        chunk: list[V] = []
        while len(chunk) < self._size and (pair := self._upstream.next()) is not None:
            chunk.append(pair[1])
        if not chunk:
            return None
        position = self._position
        self._position += 1
        return position, chunk


class _Partitioned[V](Stage[int, list[V]]):
    """Deals values into `count` partitions; needs the whole source before the first emit."""

    __slots__ = ("_count", "_partitions", "_position")

    def __init__(self, source: Seq[typing.Any, V], count: int) -> None:
        super().__init__(source)
        self._count = count
        self._partitions: list[list[V]] | None = None
        self._position = 0

    def _restart(self) -> None:
        self._partitions = None
        self._position = 0

    def _pull(self) -> tuple[int, list[V]] | None:
        if self._partitions is None:
            partitions: list[list[V]] = [[] for _ in range(self._count)]
            dealt = 0
            while (pair := self._upstream.next()) is not None:
                partitions[dealt % self._count].append(pair[1])
                dealt += 1
            self._partitions = [partition for partition in partitions if partition]
        if self._position >= len(self._partitions):
            return None
        position = self._position
        self._position += 1
        return position, self._partitions[position]


# ============================================================================
# Repetition & concatenation
# ============================================================================


class _Replayed[K, V](Stage[K, V]):
    """Plays the (cached) source `times` times, forever when None."""

    __slots__ = ("_times", "_round", "_emitted")

    def __init__(self, source: CachingReplaySeq[K, V], times: int | None) -> None:
        super().__init__(source)
        self._times = times
        self._round = 0
        self._emitted = 0

    def _restart(self) -> None:
        self._round = 0
        self._emitted = 0

    def _pull(self) -> tuple[K, V] | None:
        if self._times is not None and self._round >= self._times:
            return None
        pair = self._upstream.next()
        if pair is None:
            self._round += 1
            # An empty source would otherwise loop forever.
            if self._emitted == 0 or (self._times is not None and self._round >= self._times):
                return None
            self._upstream.reset()
            pair = self._upstream.next()
        if pair is not None:
            self._emitted += 1
        return pair


class _Concatenated[K, V](Stage[K, V]):
    __slots__ = ("_index",)

    def __init__(self, *sources: Seq[K, V]) -> None:
        super().__init__(*sources)
        self._index = 0

    def _restart(self) -> None:
        self._index = 0

    def _pull(self) -> tuple[K, V] | None:
        while self._index < len(self._upstreams):
            pair = self._upstreams[self._index].next()
            if pair is not None:
                return pair
            self._index += 1
        return None


class _LatestOfEach[V](Stage[int, V | None]):
    """Emits the last value of each source, in order."""

    __slots__ = ("_index",)

    def __init__(self, *sources: Seq[typing.Any, V]) -> None:
        super().__init__(*sources)
        self._index = 0

    def _restart(self) -> None:
        self._index = 0

    def _pull(self) -> tuple[int, V | None] | None:
        if self._index >= len(self._upstreams):
            return None
        position = self._index
        self._index += 1
        return position, last(self._upstreams[position].seq)


# ============================================================================
# Flattening (explicit stack of child cursors)
# ============================================================================


class _Flattened(Stage[typing.Any, typing.Any]):
    """
    Descends into nested iterables up to `levels` deep (unbounded when None).

    Children are kept on an explicit stack of cursors; leaf keys come from the
    innermost sequence, so keys may repeat. Only cursors created here are
    closed when a pass is abandoned; nested Seq values belong to the caller.
    A nested one-shot iterator met again on a later pass raises
    PreconditionViolationError.
    """

    __slots__ = ("_levels", "_expand", "_nested", "_stack")

    def __init__(
        self,
        source: Seq[typing.Any, typing.Any],
        levels: int | None,
        expand: Callable[[typing.Any], typing.Any] | None = None,
    ) -> None:
        super().__init__(source)
        self._levels = levels
        self._expand = expand
        self._nested = NestedSources()
        self._stack: list[tuple[Upstream[typing.Any, typing.Any], int, bool]] = [(self._upstream, 0, False)]

    def _restart(self) -> None:
        for child, _, owned in self._stack:
            if owned:
                child.seq.close()
        self._stack = [(self._upstream, 0, False)]

    def close(self) -> None:
        self._restart()
        super().close()

    def _pull(self) -> tuple[typing.Any, typing.Any] | None:
        while self._stack:
            upstream, depth, _ = self._stack[-1]
            pair = upstream.next()
            if pair is None:
                self._stack.pop()
                continue
            value = pair[1]
            if depth == 0 and self._expand is not None:
                value = self._expand(value)
                child = Upstream(normalize(value))
            elif self._levels is not None and depth >= self._levels:
                return pair
            elif not is_nested(value):
                return pair
            else:
                child = Upstream(self._nested.normalize(value, upstream.seq))
            child.reset()
            self._stack.append((child, depth + 1, not isinstance(value, Seq)))
        return None


# ============================================================================
# Parallel walks
# ============================================================================


class _Zipped(Stage[int, tuple[typing.Any, ...]]):
    """Tuples of the i-th values of every source; stops at the shortest."""

    __slots__ = ("_position",)

    def __init__(self, *sources: Seq[typing.Any, typing.Any]) -> None:
        super().__init__(*sources)
        self._position = 0

    def _restart(self) -> None:
        self._position = 0

    def _pull(self) -> tuple[int, tuple[typing.Any, ...]] | None:
        row: list[typing.Any] = []
        for upstream in self._upstreams:
            pair = upstream.next()
            if pair is None:
                return None
            row.append(pair[1])
        position = self._position
        self._position += 1
        return position, tuple(row)


class _Interleaved(Stage[int, typing.Any]):
    """Round-robin values while every source still has one."""

    __slots__ = ("_row", "_position")

    def __init__(self, *sources: Seq[typing.Any, typing.Any]) -> None:
        super().__init__(*sources)
        self._row: list[typing.Any] = []
        self._position = 0

    def _restart(self) -> None:
        self._row = []
        self._position = 0

    def _pull(self) -> tuple[int, typing.Any] | None:
        if not self._row:
            for upstream in self._upstreams:
                pair = upstream.next()
                if pair is None:
                    return None
                self._row.append(pair[1])
            self._row.reverse()
        position = self._position
        self._position += 1
        return position, self._row.pop()


class _Interposed(Stage[int, typing.Any]):
    __slots__ = ("_separator", "_pending", "_position")

    def __init__(self, source: Seq[typing.Any, typing.Any], separator: typing.Any) -> None:
        super().__init__(source)
        self._separator = separator
        self._pending: tuple[typing.Any, typing.Any] | None = None
        self._position = 0

    def _restart(self) -> None:
        self._pending = None
        self._position = 0

    def _pull(self) -> tuple[int, typing.Any] | None:
        position = self._position
        if self._pending is not None:
            value, self._pending = self._pending[1], None
        else:
            pair = self._upstream.next()
            if pair is None:
                return None
            if position > 0:
                self._pending = pair
                value = self._separator
            else:
                value = pair[1]
        self._position += 1
        return position, value


class _Replaced(Stage[typing.Any, typing.Any]):
    """Pairs up two sources; `combine(left_pair, right_pair)` builds the output pair."""

    __slots__ = ("_combine",)

    def __init__(
        self,
        source: Seq[typing.Any, typing.Any],
        other: Seq[typing.Any, typing.Any],
        combine: Callable[[tuple[typing.Any, typing.Any], tuple[typing.Any, typing.Any]], tuple[typing.Any, typing.Any]],
    ) -> None:
        super().__init__(source, other)
        self._combine = combine

    def _pull(self) -> tuple[typing.Any, typing.Any] | None:
        left = self._upstreams[0].next()
        if left is None:
            return None
        right = self._upstreams[1].next()
        if right is None:
            return None
        return self._combine(left, right)


# ============================================================================
# Continuation
# ============================================================================


class _Resumed[K, V](Stage[K, V]):
    """
    Continues a cursor from where its last consumer left it.

    reset() never rewinds the source: every pass picks up after the element
    the source is currently on.
    """

    __slots__ = ("_skip",)

    def __init__(self, source: Seq[K, V], skip: bool) -> None:
        super().__init__(source)
        self._skip = skip
        if skip:
            self._upstream.resume()

    def reset(self) -> None:
        if self._skip:
            self._upstream.resume()
        self._head = None
        self._primed = False

    def _pull(self) -> tuple[K, V] | None:
        return self._upstream.next()


# ============================================================================
# Operations
# ============================================================================


def chunk[V](source: Source[typing.Any, V], size: int) -> Seq[int, list[V]]:
    """
    Split into lists of `size` values; the last chunk may be shorter.

    Example:
        ops.chunk([1, 2, 3, 4, 5, 6, 7], 3)  # [1, 2, 3], [4, 5, 6], [7]
    """
    return _Chunked(normalize(source), require_positive("size", size))


def partition[V](source: Source[typing.Any, V], count: int) -> Seq[int, list[V]]:
    """
    Deal values into `count` lists, like dealing cards. Empty partitions are dropped.

    Example:
        ops.partition([1, 2, 3, 4, 5, 6, 7], 3)  # [1, 4, 7], [2, 5], [3, 6]
    """
    return _Partitioned(normalize(source), require_positive("count", count))


def replay[K, V](source: Source[K, V], times: int | None = None) -> Seq[K, V]:
    """Play the source `times` times (forever when None), caching the first pass."""
    if times is not None:
        require_non_negative("times", times)
    return _Replayed(CachingReplaySeq(source), times)


def concat[K, V](source: Source[K, V], *others: Source[K, V]) -> Seq[K, V]:
    return _Concatenated(normalize(source), *(normalize(other) for other in others))


def combine_latest[V](source: Source[typing.Any, V], *others: Source[typing.Any, V]) -> Seq[int, V | None]:
    """The last value of each source (None for empty ones)."""
    return _LatestOfEach(normalize(source), *(normalize(other) for other in others))


def flat_map[K, V](source: Source[K, V], fn: Mapper[V, Source[typing.Any, typing.Any]]) -> Seq[typing.Any, typing.Any]:
    """Map every value to an iterable and emit the elements of each in turn."""
    return _Flattened(normalize(source), 1, expand=fn)


def flatten(source: Source[typing.Any, typing.Any], levels: int = 1) -> Seq[typing.Any, typing.Any]:
    """
    Flatten nested iterables `levels` deep (0 leaves the source as-is).

    Strings and bytes are never descended into.
    """
    return _Flattened(normalize(source), require_non_negative("levels", levels))


def leaves(source: Source[typing.Any, typing.Any]) -> Seq[typing.Any, typing.Any]:
    """Every non-iterable value of a tree of nested iterables, depth-first."""
    return _Flattened(normalize(source), None)


def zip(source: Source[typing.Any, typing.Any], *others: Source[typing.Any, typing.Any]) -> Seq[int, tuple[typing.Any, ...]]:
    """
    Tuples of corresponding values; stops at the shortest source.

    Example:
        ops.zip([1, 2, 3], "ab")  # (1, "a"), (2, "b")
    """
    return _Zipped(normalize(source), *(normalize(other) for other in others))


def interleave(source: Source[typing.Any, typing.Any], *others: Source[typing.Any, typing.Any]) -> Seq[int, typing.Any]:
    """
    Corresponding values one after another, while every source has one.

    Example:
        ops.interleave([1, 4, 7], [2, 5, 8], [3, 6, 9])  # 1, 2, 3, ..., 9
    """
    return _Interleaved(normalize(source), *(normalize(other) for other in others))


def interpose(source: Source[typing.Any, typing.Any], separator: typing.Any) -> Seq[int, typing.Any]:
    """Put `separator` between consecutive values."""
    return _Interposed(normalize(source), separator)


def replace_keys[V](source: Source[typing.Any, V], keys: Source[typing.Any, typing.Any]) -> Seq[typing.Any, V]:
    """Re-key by the values of `keys`. Length is the shorter of the two."""
    return _Replaced(normalize(source), normalize(keys), lambda left, right: (right[1], left[1]))


def replace_values[K](source: Source[K, typing.Any], values: Source[typing.Any, typing.Any]) -> Seq[K, typing.Any]:
    """Keep the keys, take values from `values`. Length is the shorter of the two."""
    return _Replaced(normalize(source), normalize(values), lambda left, right: (left[0], right[1]))


def resume[K, V](source: Source[K, V]) -> Seq[K, V]:
    """
    Continue a partly consumed sequence without rewinding it.

    A Seq resumes after the element it is currently on, with its keys kept.
    A plain iterator has no current element and continues from its next item.

    Example:
        rows = lazyseq.normalize(lines)
        for row in rows:
            if row == "---":
                break
        body = ops.resume(rows)  # everything after the separator
    """
    seq = normalize(source)
    return _Resumed(seq, skip=seq is source)


__all__ = (
    "chunk",
    "combine_latest",
    "concat",
    "flat_map",
    "flatten",
    "interleave",
    "interpose",
    "leaves",
    "partition",
    "replace_keys",
    "replace_values",
    "replay",
    "resume",
    "zip",
)
