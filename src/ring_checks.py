"""Argument checks shared by nodes, configuration and rings."""

from typing import Any, Sized, TypeVar

from ring_errors import EmptyRingError, InvalidArgumentError

T = TypeVar("T")


def not_none(value: T, message: str) -> T:
    if value is None:
        raise InvalidArgumentError(message)
    return value


def not_blank(value: Any, message: str) -> str:
    """Return `value` if it is a string with at least one non-whitespace character."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(message)
    return value


def is_positive(value: Any, message: str) -> int:
    """Return `value` if it is an integer greater than or equal to zero."""
    # bool is an int subclass, but True replicas makes no sense
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgumentError(message)
    return value


def not_empty(value: Sized, message: str) -> Sized:
    if not value:
        raise EmptyRingError(message)
    return value
