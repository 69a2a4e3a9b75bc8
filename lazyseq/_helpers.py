"""
Shared internals
================

Nesting test, the omitted-argument marker and eager argument checks used by
the ops modules. Nothing here is re-exported from the package root.
"""

from __future__ import annotations

import typing
from collections.abc import Iterable

from ._errors import InvalidArgumentError
from .protocol import Seq

# MISSING = optional argument left out where None is a legitimate value
MISSING: typing.Final = object()


def is_nested(value: typing.Any) -> bool:
    """
    Whether a value is descended into by recursive operations.

    Strings and bytes are atoms: iterating them only yields more strings.
    """
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return isinstance(value, (Seq, Iterable))


# Argument checks (eager, at composition time)
def require_non_negative(name: str, value: int) -> int:
    if value < 0:
        raise InvalidArgumentError(f"{name} must be >= 0, got {value}")
    return value


def require_positive(name: str, value: int) -> int:
    if value < 1:
        raise InvalidArgumentError(f"{name} must be >= 1, got {value}")
    return value


__all__ = (
    "MISSING",
    "is_nested",
    "require_non_negative",
    "require_positive",
)
