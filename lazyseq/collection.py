"""
Collection
==========

Fluent, consumption-guarded wrapper around any sequence.

    names = (
        Collection(people)
        .filter(func.compose([func.index("age"), func.operator(">=", 20)]))
        .map(func.index("name"))
        .debounce()
        .to_list()
    )

A Collection is single-use. Its first guarded call (reset, iteration, a
terminal operation or a derivation) marks it consumed; a second one raises
AlreadyConsumedError naming both operations, instead of silently re-running
an exhausted generator.

Derivations (map, filter, ...) return a new, fresh Collection around the new
lazy stage. The original hands its cursor to that stage and counts as
consumed from then on.
"""

from __future__ import annotations

import logging
import typing
from collections.abc import Callable, Iterable, Iterator

from . import gen, ops
from ._errors import AlreadyConsumedError, ValidationError
from ._helpers import MISSING
from ._types import Comparator, Mapper, Operation, Predicate, Reducer
from .normalize import Source, normalize
from .pipeline import pipe
from .protocol import Seq
from .replay import CachingReplaySeq

if typing.TYPE_CHECKING:
    from kungfu import Result

logger = logging.getLogger(__name__)


class Collection[K, V](Seq[K, V]):
    __slots__ = ("_inner", "_consumed_by")

    def __init__(self, source: Source[K, V] = ()) -> None:
        self._inner: Seq[K, V] = normalize(source)
        self._consumed_by: str | None = None

    # ========================================================================
    # Consumption guard
    # ========================================================================

    @property
    def consumed(self) -> bool:
        return self._consumed_by is not None

    def _consume(self, operation: str) -> None:
        if self._consumed_by is not None:
            raise AlreadyConsumedError(self, operation, self._consumed_by)
        self._consumed_by = operation
        logger.debug("%r consumed by %s()", self, operation)

    def _derive(self, operation: str, op: Callable[..., Seq[typing.Any, typing.Any]], *args: typing.Any) -> Collection[typing.Any, typing.Any]:
        self._consume(operation)
        return Collection(op(self._inner, *args))

    def _terminal(self, operation: str, op: Callable[..., typing.Any], *args: typing.Any) -> typing.Any:
        self._consume(operation)
        return op(self._inner, *args)

    # ========================================================================
    # Protocol
    # ========================================================================

    def reset(self) -> None:
        self._consume("reset")
        self._inner.reset()

    def advance(self) -> None:
        self._inner.advance()

    def has_current(self) -> bool:
        return self._inner.has_current()

    def current_key(self) -> K:
        return self._inner.current_key()

    def current_value(self) -> V:
        return self._inner.current_value()

    def close(self) -> None:
        self._inner.close()

    def items(self) -> Iterator[tuple[K, V]]:
        self._consume("items")
        return self._inner.items()

    def __iter__(self) -> Iterator[V]:
        self._consume("iter")
        return iter(self._inner)

    # ========================================================================
    # Constructors
    # ========================================================================

    @classmethod
    def range(cls, start: int, end: int, step: int = 1) -> Collection[int, int]:
        return cls(gen.range(start, end, step))

    @classmethod
    def repeat(cls, value: V, times: int | None = None) -> Collection[int, V]:
        return cls(gen.repeat(value, times))

    @classmethod
    def repeat_for_keys(cls, keys: Source[typing.Any, K], value: V) -> Collection[K, V]:
        return cls(gen.repeat_for_keys(keys, value))

    @classmethod
    def empty(cls) -> Collection[typing.Any, typing.Any]:
        return cls(gen.empty())

    @classmethod
    def just(cls, value: V) -> Collection[int, V]:
        return cls(gen.just(value))

    @classmethod
    def defer(cls, factory: Callable[..., Source[K, V]], /, *args: typing.Any, **kwargs: typing.Any) -> Collection[K, V]:
        """Collection over gen.defer(): the factory runs when iteration starts."""
        return cls(gen.defer(factory, *args, **kwargs))

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[K, V]]) -> Collection[K, V]:
        return cls(gen.from_pairs(pairs))

    # ========================================================================
    # Mapping
    # ========================================================================

    def map[R](self, fn: Mapper[V, R]) -> Collection[K, R]:
        return self._derive("map", ops.map, fn)

    def map_with_keys[R](self, fn: Callable[[V, K], R]) -> Collection[K, R]:
        return self._derive("map_with_keys", ops.map_with_keys, fn)

    def map_keys[J](self, fn: Mapper[K, J]) -> Collection[J, V]:
        return self._derive("map_keys", ops.map_keys, fn)

    def map_recursive(self, fn: Mapper[typing.Any, typing.Any]) -> Collection[K, typing.Any]:
        return self._derive("map_recursive", ops.map_recursive, fn)

    def reindex[J](self, fn: Mapper[V, J]) -> Collection[J, V]:
        return self._derive("reindex", ops.reindex, fn)

    def pluck(self, field: typing.Any, default: typing.Any = None) -> Collection[K, typing.Any]:
        return self._derive("pluck", ops.pluck, field, default)

    def keys(self) -> Collection[int, K]:
        return self._derive("keys", ops.keys)

    def values(self) -> Collection[int, V]:
        return self._derive("values", ops.values)

    def flip(self) -> Collection[V, K]:
        return self._derive("flip", ops.flip)

    def to_key_pairs(self) -> Collection[int, tuple[K, V]]:
        return self._derive("to_key_pairs", ops.to_key_pairs)

    def from_key_pairs(self) -> Collection[typing.Any, typing.Any]:
        return self._derive("from_key_pairs", ops.from_key_pairs)

    # ========================================================================
    # Filtering
    # ========================================================================

    def filter(self, fn: Predicate[V]) -> Collection[K, V]:
        return self._derive("filter", ops.filter, fn)

    def filter_with_keys(self, fn: Callable[[V, K], bool]) -> Collection[K, V]:
        return self._derive("filter_with_keys", ops.filter_with_keys, fn)

    def filter_keys(self, fn: Predicate[K]) -> Collection[K, V]:
        return self._derive("filter_keys", ops.filter_keys, fn)

    def remove_none(self) -> Collection[K, V]:
        return self._derive("remove_none", ops.remove_none)

    def remove_empty(self) -> Collection[K, V]:
        return self._derive("remove_empty", ops.remove_empty)

    def where(self, field: typing.Any, value: typing.Any) -> Collection[K, V]:
        return self._derive("where", ops.where, field, value)

    def take(self, n: int) -> Collection[K, V]:
        return self._derive("take", ops.take, n)

    def drop(self, n: int) -> Collection[K, V]:
        return self._derive("drop", ops.drop, n)

    def slice(self, offset: int, length: int | None = None) -> Collection[K, V]:
        return self._derive("slice", ops.slice, offset, length)

    def take_while(self, fn: Predicate[V]) -> Collection[K, V]:
        return self._derive("take_while", ops.take_while, fn)

    def drop_while(self, fn: Predicate[V]) -> Collection[K, V]:
        return self._derive("drop_while", ops.drop_while, fn)

    def debounce(self) -> Collection[K, V]:
        return self._derive("debounce", ops.debounce)

    def distinct(self) -> Collection[K, V]:
        return self._derive("distinct", ops.distinct)

    # ========================================================================
    # Restructuring
    # ========================================================================

    def chunk(self, size: int) -> Collection[int, list[V]]:
        return self._derive("chunk", ops.chunk, size)

    def partition(self, count: int) -> Collection[int, list[V]]:
        return self._derive("partition", ops.partition, count)

    def replay(self, times: int | None = None) -> Collection[K, V]:
        return self._derive("replay", ops.replay, times)

    def concat(self, *others: Source[K, V]) -> Collection[K, V]:
        return self._derive("concat", ops.concat, *others)

    def combine_latest(self, *others: Source[typing.Any, V]) -> Collection[int, V | None]:
        return self._derive("combine_latest", ops.combine_latest, *others)

    def flat_map(self, fn: Mapper[V, Source[typing.Any, typing.Any]]) -> Collection[typing.Any, typing.Any]:
        return self._derive("flat_map", ops.flat_map, fn)

    def flatten(self, levels: int = 1) -> Collection[typing.Any, typing.Any]:
        return self._derive("flatten", ops.flatten, levels)

    def leaves(self) -> Collection[typing.Any, typing.Any]:
        return self._derive("leaves", ops.leaves)

    def zip(self, *others: Source[typing.Any, typing.Any]) -> Collection[int, tuple[typing.Any, ...]]:
        return self._derive("zip", ops.zip, *others)

    def interleave(self, *others: Source[typing.Any, typing.Any]) -> Collection[int, typing.Any]:
        return self._derive("interleave", ops.interleave, *others)

    def interpose(self, separator: typing.Any) -> Collection[int, typing.Any]:
        return self._derive("interpose", ops.interpose, separator)

    def replace_keys(self, keys: Source[typing.Any, typing.Any]) -> Collection[typing.Any, V]:
        return self._derive("replace_keys", ops.replace_keys, keys)

    def replace_values(self, values: Source[typing.Any, typing.Any]) -> Collection[K, typing.Any]:
        return self._derive("replace_values", ops.replace_values, values)

    def resume(self) -> Collection[K, V]:
        """Continue after the element the cursor calls left this collection on."""
        return self._derive("resume", ops.resume)

    # ========================================================================
    # Effects
    # ========================================================================

    def tap(self, fn: Callable[[V, K], typing.Any]) -> Collection[K, V]:
        return self._derive("tap", ops.tap, fn)

    def validate(self, fn: Predicate[V]) -> Collection[K, V]:
        return self._derive("validate", ops.validate, fn)

    def scan[A](self, fn: Reducer[A, V], initial: typing.Any = MISSING) -> Collection[int, A]:
        return self._derive("scan", ops.scan, fn, initial)

    # ========================================================================
    # Terminal
    # ========================================================================

    def pipe(self, operations: Iterable[Operation]) -> typing.Any:
        """
        Run operations over this collection's sequence.

        A lazy result comes back wrapped in a fresh Collection; concrete
        results are returned as they are.
        """
        result = self._terminal("pipe", pipe, operations)
        return Collection(result) if isinstance(result, Seq) else result

    def reduce[A](self, fn: Reducer[A, V], initial: typing.Any = MISSING) -> A | None:
        return self._terminal("reduce", ops.reduce, fn, initial)

    def reduce_recursive[A](self, fn: Reducer[A, typing.Any], initial: typing.Any = MISSING) -> A | None:
        return self._terminal("reduce_recursive", ops.reduce_recursive, fn, initial)

    def first(self, default: V | None = None) -> V | None:
        return self._terminal("first", ops.first, default)

    def last(self, default: V | None = None) -> V | None:
        return self._terminal("last", ops.last, default)

    def search(self, fn: Predicate[V], default: V | None = None) -> V | None:
        return self._terminal("search", ops.search, fn, default)

    def any(self, fn: Predicate[V] | None = None) -> bool:
        return self._terminal("any", ops.any, fn)

    def all(self, fn: Predicate[V] | None = None) -> bool:
        return self._terminal("all", ops.all, fn)

    def count(self) -> int:
        return self._terminal("count", ops.count)

    def apply(self, fn: Callable[..., typing.Any], *args: typing.Any) -> None:
        self._terminal("apply", ops.apply, fn, *args)

    def apply_recursive(self, fn: Callable[..., typing.Any], *args: typing.Any) -> None:
        self._terminal("apply_recursive", ops.apply_recursive, fn, *args)

    def implode(self, separator: str = "") -> str:
        return self._terminal("implode", ops.implode, separator)

    def to_list(self) -> list[V]:
        return self._terminal("to_list", ops.to_list)

    def to_list_recursive(self, preserve_keys: bool = False) -> list[typing.Any] | dict[typing.Any, typing.Any]:
        return self._terminal("to_list_recursive", ops.to_list_recursive, preserve_keys)

    def to_dict(self) -> dict[K, V]:
        return self._terminal("to_dict", ops.to_dict)

    def to_string(self) -> str:
        return self._terminal("to_string", ops.to_string)

    def rewindable(self) -> CachingReplaySeq[K, V]:
        """Hand the sequence over to a CachingReplaySeq for multi-pass use."""
        return self._terminal("rewindable", ops.rewindable)

    def validate_all(self, fn: Predicate[V]) -> Result[list[V], list[ValidationError]]:
        return self._terminal("validate_all", ops.validate_all, fn)

    def to_result[E](self, *, on_error: Callable[[Exception], E]) -> Result[list[V], E]:
        self._consume("to_result")
        return ops.to_result(self._inner, on_error=on_error)

    def sorted(self, comparator: Comparator[V] | None = None, *, key: Callable[[V], typing.Any] | None = None) -> Collection[K, V]:
        """
        Fresh Collection over the values in sorted order, keys kept.

        Drains the source into a replay cache first.
        """
        self._consume("sorted")
        replay = CachingReplaySeq(self._inner)
        replay.sort(comparator, key=key)
        return Collection(replay)

    # ========================================================================
    # Display
    # ========================================================================

    def __str__(self) -> str:
        return self._terminal("__str__", ops.to_string)

    def __repr__(self) -> str:
        state = f"consumed by {self._consumed_by}()" if self._consumed_by is not None else "fresh"
        return f"<Collection {state} over {self._inner!r}>"


__all__ = ("Collection",)
