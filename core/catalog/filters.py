"""
core/catalog/filters.py — Filter resolution for catalog browse pages.

Pure module — no I/O, no network.

Given a filter type and a routed slug, ``resolve_filter`` produces:

    - a display name for page titles, and
    - the exhaustive set of literal strings ("match tokens") that count as
      equal to the slug when scanning raw CMS attribute values.

The CMS never normalized its data, so the same genre may be stored as
``"jazz-funk"``, ``"Jazz-Funk"`` or ``"JAZZ-FUNK"``. Rather than normalizing
every record, the resolver enumerates the casings once per request and
membership testing stays a plain set lookup.

Vinyl sizes are the one piece of hard-coded catalog knowledge: the CMS
stores them with a trailing inch mark (``7"``, ``12"``), which no casing or
slug transform can reproduce. ``VINYL_SIZE_LITERALS`` is an explicit table;
add new quoting quirks there rather than growing pattern matching.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Any

from core.catalog.attributes import attribute_strings, normalize_attribute
from core.catalog.errors import InvalidSlugError, UnsupportedFilterTypeError
from core.catalog.slugs import humanize_slug, slugify, title_case
from core.catalog.weeks import WeekWindow, format_week_display


class FilterType(str, Enum):
    """Browse dimensions a shop page can filter on."""

    ARTIST = "artist"
    LABEL = "label"
    GENRE = "genre"
    FORMAT = "format"
    WEEK = "week"


# ---------------------------------------------------------------------------
# Catalog knowledge
# ---------------------------------------------------------------------------

# Vinyl size → the exact string the CMS stores.
VINYL_SIZE_LITERALS: dict[str, str] = {
    "7": '7"',
    "12": '12"',
}

# Routed slugs that name a vinyl size.
VINYL_SIZE_SLUGS: dict[str, str] = {
    "7": "7",
    "7-inch": "7",
    "12": "12",
    "12-inch": "12",
}

_SIZE_IN_NAME = re.compile(r"(?<![0-9])(7|12)(?![0-9])")

# Static browse lists for the dimensions that have a fixed vocabulary.
# fmt: off
FILTER_VALUES: dict[FilterType, tuple[str, ...]] = {
    FilterType.GENRE: (
        "disco", "house", "jazz", "soul", "ambient", "brazil", "africa",
        "asia", "latin", "reggae", "world", "gospel", "electronic", "techno",
        "experimental", "library", "downtempo", "edits", "hip-hop", "rock",
    ),
    FilterType.FORMAT: (
        "7", "12", "lp", "compilation", "cassette", "cd", "publication",
        "merchandise", "bundle",
    ),
    FilterType.ARTIST: (),
    FilterType.LABEL: (),
    FilterType.WEEK: (),
}
# fmt: on

# Attribute path of each filter type in the CMS query language.
QUERY_PATHS: dict[FilterType, str] = {
    FilterType.ARTIST: "artist[]",
    FilterType.LABEL: "label[].main",
    FilterType.GENRE: "genre[].main",
    FilterType.FORMAT: "format[].main",
    FilterType.WEEK: "week[]",
}

# Free-text dimensions stored in whatever casing the editor typed.
CASELESS_TYPES: frozenset[FilterType] = frozenset({FilterType.ARTIST, FilterType.LABEL})


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FilterRequest:
    """A browse request as supplied by routing.

    Attributes:
        filter_type: One of the FilterType values (enum or its string).
        slug:        URL-safe, lower-kebab-case identifier.
    """

    filter_type: FilterType | str
    slug: str


@dataclass(frozen=True)
class SubmenuEntry:
    """A curated menu item that widens a genre or format page.

    A "Jazz" menu entry with related genres ``Jazz-Funk`` and ``Soul-Jazz``
    makes ``/shop/genre/jazz`` match all three.
    """

    slug: str
    label: str
    related_genres: tuple[str, ...] = ()
    related_formats: tuple[str, ...] = ()
    is_format: bool = False

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> SubmenuEntry:
        """Build from a CMS document; ``slug`` may be ``{"current": "..."}``."""
        slug = raw.get("slug", "")
        if isinstance(slug, Mapping):
            slug = slug.get("current", "")
        return cls(
            slug=str(slug).strip().lower(),
            label=str(raw.get("label", "")),
            related_genres=tuple(raw.get("relatedGenres") or raw.get("related_genres") or ()),
            related_formats=tuple(raw.get("relatedFormats") or raw.get("related_formats") or ()),
            is_format=bool(raw.get("isFormat", raw.get("is_format", False))),
        )


FALLBACK_SUBMENU: tuple[SubmenuEntry, ...] = (
    SubmenuEntry(slug="jazz", label="Jazz", related_genres=("Jazz", "Jazz-Funk", "Soul-Jazz")),
    SubmenuEntry(
        slug="electronic", label="Electronic", related_genres=("Electronic", "House", "Techno")
    ),
    SubmenuEntry(
        slug="vinyl", label="Vinyl", related_formats=("LP", '12"', '7"'), is_format=True
    ),
    SubmenuEntry(slug="cd", label="CD", related_formats=("CD", "2xCD"), is_format=True),
)
"""Menu used when the CMS submenu is unavailable."""


@dataclass(frozen=True)
class FilterResolution:
    """A resolved filter: display name plus its equivalence class of literals."""

    filter_type: FilterType
    slug: str
    display_name: str
    match_tokens: frozenset[str] = field(default_factory=frozenset)

    @cached_property
    def folded_tokens(self) -> frozenset[str]:
        """``match_tokens`` case-folded, for caseless dimensions."""
        return frozenset(token.casefold() for token in self.match_tokens)

    def matches(self, raw: object) -> bool:
        """Shorthand for ``matches(self, raw)``."""
        return matches(self, raw)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def _casings(text: str) -> set[str]:
    """The four casings every token is emitted in."""
    return {text, text.lower(), text.upper(), title_case(text)}


def _coerce_type(filter_type: object) -> FilterType:
    try:
        return FilterType(filter_type)
    except ValueError:
        raise UnsupportedFilterTypeError(filter_type) from None


def _vinyl_sizes(slug: str, display_name: str) -> list[str]:
    """Vinyl sizes a format slug refers to, in table order."""
    sizes: set[str] = set()
    if slug.lower() in VINYL_SIZE_SLUGS:
        sizes.add(VINYL_SIZE_SLUGS[slug.lower()])
    sizes.update(m.group(1) for m in _SIZE_IN_NAME.finditer(display_name))
    return [size for size in VINYL_SIZE_LITERALS if size in sizes]


def display_name_for(filter_type: FilterType | str, slug: str) -> str:
    """Human-readable title for a filter page.

    Raises:
        UnsupportedFilterTypeError: Unknown ``filter_type``.
        InvalidSlugError: Empty slug.
        InvalidWeekCodeError: ``week`` filter with a malformed code.
    """
    ftype = _coerce_type(filter_type)
    if not isinstance(slug, str) or not slug.strip():
        raise InvalidSlugError(slug)
    slug = slug.strip()
    if ftype is FilterType.WEEK:
        return format_week_display(slug)
    if ftype is FilterType.FORMAT and slug.lower() in VINYL_SIZE_SLUGS:
        return VINYL_SIZE_LITERALS[VINYL_SIZE_SLUGS[slug.lower()]]
    return humanize_slug(slug, ampersand_and=ftype is FilterType.LABEL)


def _find_submenu(slug: str, submenu: Iterable[SubmenuEntry] | None) -> SubmenuEntry | None:
    if not submenu:
        return None
    key = slug.lower()
    return next((entry for entry in submenu if entry.slug == key), None)


def resolve_filter(
    request: FilterRequest,
    *,
    submenu: Sequence[SubmenuEntry] | None = None,
) -> FilterResolution:
    """Resolve a filter request into a display name and match tokens.

    Token rules:
        - artist, label, genre: ``{slug, display name, slug with spaces}``
          in as-is, lower, UPPER and Title-Case.
        - format: the same, plus each vinyl size literal the slug or display
          name refers to, with and without a backslash before the inch mark.
        - genre / format with a matching ``submenu`` entry: the entry's label
          and related genres / formats, in all four casings.
        - week: the validated code itself.

    Unknown but well-formed slugs resolve normally; their tokens simply
    match nothing.

    Args:
        request: Filter type and routed slug.
        submenu: Optional curated menu used to widen genre/format pages.

    Returns:
        FilterResolution for the request.

    Raises:
        UnsupportedFilterTypeError: Unknown filter type.
        InvalidSlugError: Empty or blank slug.
        InvalidWeekCodeError: ``week`` filter with a malformed code.

    Example:
        >>> res = resolve_filter(FilterRequest("format", "12"))
        >>> '12"' in res.match_tokens
        True
    """
    ftype = _coerce_type(request.filter_type)
    display_name = display_name_for(ftype, request.slug)
    slug = request.slug.strip()

    if ftype is FilterType.WEEK:
        return FilterResolution(
            filter_type=ftype, slug=slug, display_name=display_name, match_tokens=frozenset({slug})
        )

    tokens: set[str] = set()
    for base in (slug, display_name, slug.replace("-", " ")):
        tokens |= _casings(base)

    if ftype is FilterType.FORMAT:
        for size in _vinyl_sizes(slug, display_name):
            literal = VINYL_SIZE_LITERALS[size]
            tokens.add(literal)
            tokens.add(literal.replace('"', '\\"'))

    entry = _find_submenu(slug, submenu)
    if entry is not None and ftype in (FilterType.GENRE, FilterType.FORMAT):
        related = entry.related_genres if ftype is FilterType.GENRE else entry.related_formats
        for name in (entry.label, *related):
            if name:
                tokens |= _casings(name)

    tokens.discard("")
    return FilterResolution(
        filter_type=ftype, slug=slug, display_name=display_name, match_tokens=frozenset(tokens)
    )


# ---------------------------------------------------------------------------
# Membership
# ---------------------------------------------------------------------------


def _value_variants(value: str) -> set[str]:
    """Forms of a stored value worth testing: as-is, trimmed, unquoted, unescaped."""
    trimmed = value.strip()
    variants = {value, trimmed, trimmed.replace('\\"', '"')}
    if len(trimmed) >= 2 and trimmed.startswith('"') and trimmed.endswith('"'):
        inner = trimmed[1:-1]
        variants |= {inner, inner.replace('\\"', '"')}
    return variants


def matches(resolution: FilterResolution, raw: object) -> bool:
    """Test whether a raw CMS attribute value belongs to a resolution.

    ``raw`` may be a string, a list of strings, or a list of ``{main, sub}``
    objects; structured values are compared on ``main``. Stored values are
    also tried with one pair of surrounding double quotes removed and with
    ``\\"`` unescaped, so ``'"12"'`` and ``'12\\"'`` match a ``12"`` filter.

    Artist and label values are compared caselessly, and also match when
    they slugify to the resolved slug.
    """
    values = attribute_strings(normalize_attribute(raw))
    if resolution.filter_type in CASELESS_TYPES:
        folded = resolution.folded_tokens
        slug = resolution.slug.lower()
        return any(
            slugify(value) == slug
            or not {v.casefold() for v in _value_variants(value)}.isdisjoint(folded)
            for value in values
        )
    tokens = resolution.match_tokens
    for value in values:
        if not _value_variants(value).isdisjoint(tokens):
            return True
    return False


# ---------------------------------------------------------------------------
# Query compilation helpers
# ---------------------------------------------------------------------------


def _quote(token: str) -> str:
    escaped = token.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def to_query_fragment(resolution: FilterResolution, path: str | None = None) -> str:
    """Compile a resolution into a GROQ-style OR of membership tests.

    Example:
        ``"House" in genre[].main || "house" in genre[].main || ...``

    Args:
        resolution: The resolved filter.
        path: Attribute path; defaults to ``QUERY_PATHS`` for the filter type.
    """
    target = path or QUERY_PATHS[resolution.filter_type]
    return " || ".join(f"{_quote(tok)} in {target}" for tok in sorted(resolution.match_tokens))


def window_query_fragment(window: WeekWindow, path: str = "week") -> str:
    """Compile a week window into an ``IN`` predicate, e.g. ``week in ["0125", "5224"]``."""
    return f"{path} in [{', '.join(_quote(code) for code in window)}]"
