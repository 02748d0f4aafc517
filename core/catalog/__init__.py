"""
core/catalog/ — Pure catalog engine for the record shop.

Exports:
    Weeks:      encode_week, decode_week, compare_weeks, recent_weeks,
                current_and_older, target_weeks, WeekParts, WeekWindow
    Filters:    resolve_filter, matches, FilterRequest, FilterResolution,
                FilterType, SubmenuEntry
    Attributes: normalize_attribute, PlainValue, ListValue, StructuredValue
    Slugs:      humanize_slug, slugify
    Pages:      slice_page, describe_pages, PageSlice, PaginationDescriptor
    Listing:    run_listing, run_new_arrivals, group_by_week, weeks_index
    Errors:     CatalogError and its subclasses
"""

from core.catalog.attributes import (
    ListValue,
    PlainValue,
    StructuredItem,
    StructuredValue,
    normalize_attribute,
)
from core.catalog.config import DEFAULT_CONFIG, ListingConfig
from core.catalog.errors import (
    CatalogError,
    InvalidInputError,
    InvalidSlugError,
    InvalidWeekCodeError,
    UnsupportedFilterTypeError,
)
from core.catalog.filters import (
    FALLBACK_SUBMENU,
    FilterRequest,
    FilterResolution,
    FilterType,
    SubmenuEntry,
    matches,
    resolve_filter,
)
from core.catalog.listing import (
    ListingPage,
    ListingQuery,
    WeekGroup,
    group_by_week,
    run_listing,
    run_new_arrivals,
    weeks_index,
)
from core.catalog.pagination import (
    ELLIPSIS,
    PageSlice,
    PaginationDescriptor,
    describe_pages,
    slice_page,
)
from core.catalog.slugs import humanize_slug, slugify
from core.catalog.weeks import (
    WeekParts,
    WeekWindow,
    compare_weeks,
    current_and_older,
    decode_week,
    encode_week,
    recent_weeks,
    target_weeks,
)

__all__ = [
    # Weeks
    "WeekParts",
    "WeekWindow",
    "encode_week",
    "decode_week",
    "compare_weeks",
    "recent_weeks",
    "current_and_older",
    "target_weeks",
    # Attributes
    "PlainValue",
    "ListValue",
    "StructuredItem",
    "StructuredValue",
    "normalize_attribute",
    # Slugs
    "humanize_slug",
    "slugify",
    # Filters
    "FilterType",
    "FilterRequest",
    "FilterResolution",
    "SubmenuEntry",
    "FALLBACK_SUBMENU",
    "resolve_filter",
    "matches",
    # Pagination
    "ELLIPSIS",
    "PageSlice",
    "PaginationDescriptor",
    "slice_page",
    "describe_pages",
    # Listing
    "ListingConfig",
    "DEFAULT_CONFIG",
    "ListingQuery",
    "ListingPage",
    "WeekGroup",
    "run_listing",
    "run_new_arrivals",
    "group_by_week",
    "weeks_index",
    # Errors
    "CatalogError",
    "InvalidWeekCodeError",
    "UnsupportedFilterTypeError",
    "InvalidSlugError",
    "InvalidInputError",
]
