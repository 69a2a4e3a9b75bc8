"""
Callable shapes
===============

Алиасы для функций, которые принимают операции над последовательностями,
plus the Hole placeholder that pipeline stages fill in.
"""

from __future__ import annotations

import typing
from collections.abc import Callable

# ============================================================================
# Type aliases
# ============================================================================

# Predicate = function that tests a value
type Predicate[T] = Callable[[T], bool]

# KeyedPredicate = predicate that also receives the element key
type KeyedPredicate[V, K] = Callable[[V, K], bool]

# Mapper = unary transformation of a value
type Mapper[T, R] = Callable[[T], R]

# Reducer = (accumulator, value) -> accumulator
type Reducer[A, T] = Callable[[A, T], A]

# Selector = function that extracts a key for comparison/sorting
type Selector[T, K] = Callable[[T], K]

# Comparator = 3-way comparison: negative, zero or positive
type Comparator[T] = Callable[[T, T], int]

# Operation = unary pipeline step (sequence -> sequence, or sequence -> value)
type Operation = Callable[[typing.Any], typing.Any]

# Pair = one (key, value) element of a sequence
type Pair[K, V] = tuple[K, V]


# ============================================================================
# Placeholder marker
# ============================================================================


@typing.final
class Hole:
    """
    Marks the argument slot a pipeline fills in.

    Builders check for the type, not for a particular instance, so any
    Hole() works; HOLE is just the conventional one.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "HOLE"


HOLE: typing.Final = Hole()


__all__ = (
    # Type aliases
    "Predicate",
    "KeyedPredicate",
    "Mapper",
    "Reducer",
    "Selector",
    "Comparator",
    "Operation",
    "Pair",
    # Placeholder
    "Hole",
    "HOLE",
)
