"""
core/catalog/errors.py — Validation errors raised by the catalog engine.

Every error is a local, deterministic input failure. Nothing here is
transient, so callers should map these to a "not found" or empty-state
response instead of retrying.
"""

from __future__ import annotations


class CatalogError(ValueError):
    """Base class for all catalog engine validation failures."""


class InvalidWeekCodeError(CatalogError):
    """A week code is not four digits, or its week is outside 1–53.

    Args:
        code: The offending value, kept for logging.
        reason: Short human-readable explanation.
    """

    def __init__(self, code: object, reason: str) -> None:
        self.code = code
        self.reason = reason
        super().__init__(f"Invalid week code {code!r}: {reason}")


class UnsupportedFilterTypeError(CatalogError):
    """The requested filter type is not one the resolver knows."""

    def __init__(self, filter_type: object) -> None:
        self.filter_type = filter_type
        super().__init__(f"Unsupported filter type {filter_type!r}")


class InvalidSlugError(CatalogError):
    """The filter slug is empty or whitespace-only."""

    def __init__(self, slug: object) -> None:
        self.slug = slug
        super().__init__(f"Invalid filter slug {slug!r}: must be a non-empty string")


class InvalidInputError(CatalogError):
    """A numeric or enumerated argument violates its contract."""
