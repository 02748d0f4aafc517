"""
core/catalog/attributes.py — Normalization of schemaless CMS attribute values.

The CMS stores the same logical attribute in three shapes depending on when
and how a product was imported:

    "House"                                  -> PlainValue
    ["House", "Disco"]                       -> ListValue
    [{"main": "House", "sub": "Deep House"}] -> StructuredValue

``normalize_attribute`` is the single place that inspects raw shapes. Every
other module works on the tagged union it returns.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

# Keys tried, in order, when a structured item has no "main".
_FALLBACK_KEYS: tuple[str, ...] = ("main", "name", "title")


# ---------------------------------------------------------------------------
# Tagged union
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StructuredItem:
    """One ``{main, sub}`` entry of a structured attribute."""

    main: str
    sub: str | None = None


@dataclass(frozen=True)
class PlainValue:
    """A single string attribute."""

    value: str


@dataclass(frozen=True)
class ListValue:
    """A list of plain strings. Missing attributes normalize to an empty list."""

    values: tuple[str, ...]


@dataclass(frozen=True)
class StructuredValue:
    """A list of ``{main, sub}`` objects."""

    items: tuple[StructuredItem, ...]


AttributeValue = PlainValue | ListValue | StructuredValue


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def _structured_item(raw: Mapping[str, Any]) -> StructuredItem | None:
    """Project a mapping to a StructuredItem, or None for unresolved references."""
    for key in _FALLBACK_KEYS:
        value = raw.get(key)
        if value:
            sub = raw.get("sub")
            return StructuredItem(main=str(value), sub=str(sub) if sub else None)
    return None


def normalize_attribute(raw: object) -> AttributeValue:
    """Convert a raw CMS attribute into the tagged union.

    Rules:
        - ``None`` or missing → empty ``ListValue``.
        - ``str`` → ``PlainValue``.
        - A single mapping → ``StructuredValue`` with one item.
        - A list containing any mapping → ``StructuredValue``; bare strings in
          the same list become items with no ``sub``.
        - Any other list → ``ListValue`` of its non-empty items as strings.
        - Other scalars (numbers) → ``PlainValue`` of ``str(raw)``.

    Mappings without ``main`` fall back to ``name`` then ``title``; mappings
    with none of them (e.g. unresolved ``{"_type": "reference"}``) are dropped.
    """
    if raw is None:
        return ListValue(values=())
    if isinstance(raw, str):
        return PlainValue(value=raw)
    if isinstance(raw, Mapping):
        item = _structured_item(raw)
        return StructuredValue(items=(item,) if item else ())
    if isinstance(raw, (list, tuple)):
        if any(isinstance(entry, Mapping) for entry in raw):
            items: list[StructuredItem] = []
            for entry in raw:
                if isinstance(entry, Mapping):
                    item = _structured_item(entry)
                    if item is not None:
                        items.append(item)
                elif entry is not None and entry != "":
                    items.append(StructuredItem(main=str(entry)))
            return StructuredValue(items=tuple(items))
        return ListValue(values=tuple(str(e) for e in raw if e is not None and e != ""))
    return PlainValue(value=str(raw))


def attribute_strings(value: AttributeValue) -> tuple[str, ...]:
    """Project a normalized attribute to its comparable strings (``main`` fields)."""
    if isinstance(value, PlainValue):
        return (value.value,) if value.value else ()
    if isinstance(value, ListValue):
        return value.values
    return tuple(item.main for item in value.items)


def attribute_text(raw: object) -> str:
    """Comma-joined display text for a raw attribute, e.g. ``"House, Disco"``."""
    return ", ".join(attribute_strings(normalize_attribute(raw)))
