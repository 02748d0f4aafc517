"""Shared argument checks for the pure catalog modules."""

from __future__ import annotations

from core.catalog.errors import InvalidInputError


def require_int(value: object, name: str, *, minimum: int | None = None) -> int:
    """Return ``value`` if it is a plain int at or above ``minimum``.

    Booleans, floats (including NaN) and strings are rejected so that a
    caller's parsing bug surfaces here instead of as a wrong page.

    Raises:
        InvalidInputError: On a non-int or an out-of-range value.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{name} must be an integer, got {value!r}")
    if minimum is not None and value < minimum:
        raise InvalidInputError(f"{name} must be >= {minimum}, got {value}")
    return value
