"""
Terminal operations
===================

Операции, которые вычитывают последовательность до конкретного значения.
Every function here drives the source; nothing lazy is returned except
rewindable() and collection(), which only wrap it.
"""

from __future__ import annotations

import typing
from collections.abc import Callable

from kungfu import Error, Ok, Result

from .._errors import ValidationError
from .._helpers import MISSING, is_nested
from .._types import Predicate, Reducer
from ..normalize import Source, normalize
from ..replay import CachingReplaySeq

if typing.TYPE_CHECKING:
    from ..collection import Collection

# ============================================================================
# Reductions
# ============================================================================


def reduce[A, V](source: Source[typing.Any, V], fn: Reducer[A, V], initial: typing.Any = MISSING) -> A | None:
    """
    Fold values with fn(accumulator, value).

    Without an initial value the first value seeds the accumulator; an empty
    source then reduces to None. None itself is a valid initial value.

    Example:
        ops.reduce([1, 2, 3], func.operator("+"), 0)  # 6
    """
    accumulator = initial
    for value in normalize(source):
        accumulator = value if accumulator is MISSING else fn(accumulator, value)
    return None if accumulator is MISSING else accumulator


def reduce_recursive[A](source: Source[typing.Any, typing.Any], fn: Reducer[A, typing.Any], initial: typing.Any = MISSING) -> A | None:
    """
    Fold nested iterables: each nested iterable is reduced first (starting
    from `initial` again) and its result folded in as a single value.

    Seeding follows reduce(); without an initial value, empty nested
    iterables contribute nothing.
    """
    accumulator = _reduce_nested(source, fn, initial)
    return None if accumulator is MISSING else accumulator


def _reduce_nested(source: Source[typing.Any, typing.Any], fn: Reducer[typing.Any, typing.Any], initial: typing.Any) -> typing.Any:
    accumulator = initial
    for value in normalize(source):
        if is_nested(value):
            value = _reduce_nested(value, fn, initial)
            if value is MISSING:
                continue
        accumulator = value if accumulator is MISSING else fn(accumulator, value)
    return accumulator


# ============================================================================
# Element access
# ============================================================================


def first[V](source: Source[typing.Any, V], default: V | None = None) -> V | None:
    """The first value, or default. Pulls nothing past the first element."""
    seq = normalize(source)
    seq.reset()
    return seq.current_value() if seq.has_current() else default


def last[V](source: Source[typing.Any, V], default: V | None = None) -> V | None:
    """The last value, or default for an empty source."""
    result = default
    for result in normalize(source):
        pass
    return result


def search[V](source: Source[typing.Any, V], fn: Predicate[V], default: V | None = None) -> V | None:
    """The first value satisfying fn, or default."""
    for value in normalize(source):
        if fn(value):
            return value
    return default


def any[V](source: Source[typing.Any, V], fn: Predicate[V] | None = None) -> bool:
    """Whether some value satisfies fn (truthiness when fn is None). Stops at the first match."""
    test = fn if fn is not None else bool
    for value in normalize(source):
        if test(value):
            return True
    return False


def all[V](source: Source[typing.Any, V], fn: Predicate[V] | None = None) -> bool:
    """Whether every value satisfies fn (truthiness when fn is None). Stops at the first miss."""
    test = fn if fn is not None else bool
    for value in normalize(source):
        if not test(value):
            return False
    return True


def count(source: Source[typing.Any, typing.Any]) -> int:
    seq = normalize(source)
    if isinstance(seq, CachingReplaySeq):
        return seq.count()
    total = 0
    for _ in seq:
        total += 1
    return total


# ============================================================================
# Side effects
# ============================================================================


def apply[K, V](source: Source[K, V], fn: Callable[..., typing.Any], *args: typing.Any) -> None:
    """Call fn(value, key, *args) for every element."""
    for key, value in normalize(source).items():
        fn(value, key, *args)


def apply_recursive(source: Source[typing.Any, typing.Any], fn: Callable[..., typing.Any], *args: typing.Any) -> None:
    """Like apply(), descending into nested iterables; fn only sees leaves."""
    for key, value in normalize(source).items():
        if is_nested(value):
            apply_recursive(value, fn, *args)
        else:
            fn(value, key, *args)


# ============================================================================
# Conversion
# ============================================================================


def implode(source: Source[typing.Any, typing.Any], separator: str = "") -> str:
    """
    Join str(value) of every value.

    Example:
        ops.implode([1, 2, 3], ", ")  # "1, 2, 3"
    """
    return separator.join(str(value) for value in normalize(source))


def to_string(source: Source[typing.Any, typing.Any]) -> str:
    return implode(source)


def to_list[V](source: Source[typing.Any, V]) -> list[V]:
    """The values, keys dropped."""
    return list(normalize(source))


def to_dict[K, V](source: Source[K, V]) -> dict[K, V]:
    """
    The elements as a dict. Repeated keys keep the last value, so flattened
    or concatenated sequences may lose elements here.
    """
    return dict(normalize(source).items())


def to_list_recursive(
    source: Source[typing.Any, typing.Any],
    preserve_keys: bool = False,
) -> list[typing.Any] | dict[typing.Any, typing.Any]:
    """
    Nested iterables converted to nested lists (dicts with preserve_keys=True).

    Strings and bytes stay as they are.
    """
    pairs = (
        (key, to_list_recursive(value, preserve_keys) if is_nested(value) else value)
        for key, value in normalize(source).items()
    )
    if preserve_keys:
        return dict(pairs)
    return [value for _, value in pairs]


def rewindable[K, V](source: Source[K, V]) -> CachingReplaySeq[K, V]:
    """Multi-pass view of a single-pass source (see CachingReplaySeq)."""
    return CachingReplaySeq(source)


def collection[K, V](source: Source[K, V]) -> Collection[K, V]:
    """Consumption-guarded fluent wrapper around the source."""
    from ..collection import Collection

    return Collection(source)


# ============================================================================
# Result-returning terminals (kungfu)
# ============================================================================


def validate_all[V](source: Source[typing.Any, V], fn: Predicate[V]) -> Result[list[V], list[ValidationError]]:
    """
    Check every value, collecting ALL failures instead of stopping at the first.

    Example:
        match ops.validate_all(rows, is_valid):
            case Ok(values): ...
            case Error(failures): ...  # list[ValidationError]
    """
    values: list[V] = []
    failures: list[ValidationError] = []
    for key, value in normalize(source).items():
        if fn(value):
            values.append(value)
        else:
            failures.append(ValidationError(key, value))
    if failures:
        return Error(failures)
    return Ok(values)


def to_result[V, E](source: Source[typing.Any, V], *, on_error: Callable[[Exception], E]) -> Result[list[V], E]:
    """
    Drain into a list, turning a failure raised while draining into Error.

    NOTE: Catches all Exception subclasses. Filter in on_error, or drain with
          to_list() and handle exceptions yourself, for narrower handling.
    """
    try:
        return Ok(to_list(source))
    except Exception as exc:
        return Error(on_error(exc))


__all__ = (
    "all",
    "any",
    "apply",
    "apply_recursive",
    "collection",
    "count",
    "first",
    "implode",
    "last",
    "reduce",
    "reduce_recursive",
    "rewindable",
    "search",
    "to_dict",
    "to_list",
    "to_list_recursive",
    "to_result",
    "validate_all",
    "to_string",
)
