from __future__ import annotations

import typing


class AlreadyConsumedError(Exception):
    """A single-use Collection was asked to run a second guarded operation."""

    collection: typing.Any
    operation: str
    consumed_by: str

    def __init__(self, collection: typing.Any, operation: str, consumed_by: str) -> None:
        self.collection = collection
        self.operation = operation
        self.consumed_by = consumed_by
        super().__init__(
            f"{collection!r} was already consumed by {consumed_by}(); "
            f"cannot run {operation}(). Derive a new collection from the original source instead."
        )


class InvalidArgumentError(ValueError):
    """Malformed parameter passed to a constructor or operation."""


class PreconditionViolationError(Exception):
    """Protocol call made in a state that does not allow it."""


class ValidationError(Exception):
    """A value rejected by validate()."""

    key: typing.Any
    value: typing.Any

    def __init__(self, key: typing.Any, value: typing.Any) -> None:
        self.key = key
        self.value = value
        super().__init__(f"The value for key {key!r} in the sequence was invalid: {value!r}")


__all__ = (
    "AlreadyConsumedError",
    "InvalidArgumentError",
    "PreconditionViolationError",
    "ValidationError",
)
