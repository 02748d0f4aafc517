"""
core/catalog/listing.py — In-memory execution of shop listing queries.

Pure module — the caller loads the raw product records; this module only
filters, sorts and pages them. Records are plain mappings exactly as the CMS
returns them (``artist``, ``label``, ``genre``, ``format``, ``week`` in any
of the shapes handled by ``core.catalog.attributes``).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from core.catalog._validation import require_int
from core.catalog.attributes import attribute_strings, attribute_text, normalize_attribute
from core.catalog.config import VALID_ORDERS, VALID_SORTS
from core.catalog.errors import InvalidInputError
from core.catalog.filters import (
    FilterRequest,
    FilterResolution,
    FilterType,
    SubmenuEntry,
    resolve_filter,
)
from core.catalog.pagination import PageSlice, PaginationDescriptor, describe_pages, slice_page
from core.catalog.weeks import WeekWindow, format_week_display, recent_weeks, target_weeks

Record = Mapping[str, Any]

# Record field holding each filterable attribute.
FILTER_FIELDS: dict[FilterType, str] = {
    FilterType.ARTIST: "artist",
    FilterType.LABEL: "label",
    FilterType.GENRE: "genre",
    FilterType.FORMAT: "format",
    FilterType.WEEK: "week",
}

# Candidate record fields per sort key, first non-empty wins. Both the CMS
# spelling and the commerce-backend spelling are accepted.
SORT_FIELDS: dict[str, tuple[str, ...]] = {
    "created_at": ("_createdAt", "created_at", "createdAt"),
    "title": ("title",),
    "price": ("price", "swellPrice"),
    "order_position": ("order_position", "orderRank", "menuOrder"),
}

IMAGE_FIELDS: tuple[str, ...] = ("mainImage", "imageUrl", "thumbnail", "images")
PLACEHOLDER_IMAGE = "/placeholder.jpg"


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ListingQuery:
    """A shop page request.

    Attributes:
        filter:        Filter to apply, or None for the whole catalog.
        page:          1-based page; clamped into range.
        page_size:     Products per page.
        sort:          One of ``VALID_SORTS``.
        order:         ``"asc"`` or ``"desc"``.
        require_image: Drop products without a usable image.
    """

    filter: FilterRequest | None = None
    page: int = 1
    page_size: int = 48
    sort: str = "created_at"
    order: str = "desc"
    require_image: bool = False


@dataclass(frozen=True)
class ListingPage:
    """One page of results plus everything needed to render the page chrome."""

    items: tuple[Record, ...]
    total: int
    page: PageSlice
    pagination: PaginationDescriptor
    resolution: FilterResolution | None = None
    weeks: tuple[str, ...] = ()


@dataclass(frozen=True)
class WeekGroup:
    """Products that arrived in one week, for week-sectioned pages."""

    week: str
    display_name: str
    product_count: int
    items: tuple[Record, ...] = ()


# ---------------------------------------------------------------------------
# Record helpers
# ---------------------------------------------------------------------------


def has_image(record: Record) -> bool:
    """True if the record carries any image other than the placeholder."""
    for key in IMAGE_FIELDS:
        value = record.get(key)
        if value and value != PLACEHOLDER_IMAGE:
            return True
    return False


def _sort_value(record: Record, sort: str) -> Any:
    for key in SORT_FIELDS[sort]:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def _comparable(value: Any) -> float | str:
    """A float for numeric values, else a case-folded string."""
    if isinstance(value, bool):
        return str(value).casefold()
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return value.casefold()
    return attribute_text(value).casefold()


def _check_sort(sort: str, order: str) -> None:
    if sort not in VALID_SORTS:
        raise InvalidInputError(f"Unknown sort {sort!r}, valid options: {sorted(VALID_SORTS)}")
    if order not in VALID_ORDERS:
        raise InvalidInputError(f"Unknown order {order!r}, valid options: {sorted(VALID_ORDERS)}")


def sort_records(records: Iterable[Record], sort: str, order: str = "asc") -> list[Record]:
    """Sort records by a sort key.

    Numeric values come first, then text values, then records missing the
    field, whatever the order. Only the order within each group follows
    ``order``.

    Raises:
        InvalidInputError: Unknown sort key or order.
    """
    _check_sort(sort, order)
    numbers: list[tuple[float, Record]] = []
    texts: list[tuple[str, Record]] = []
    missing: list[Record] = []
    for record in records:
        value = _sort_value(record, sort)
        if value is None:
            missing.append(record)
            continue
        key = _comparable(value)
        if isinstance(key, float):
            numbers.append((key, record))
        else:
            texts.append((key, record))
    reverse = order == "desc"
    numbers.sort(key=lambda pair: pair[0], reverse=reverse)
    texts.sort(key=lambda pair: pair[0], reverse=reverse)
    return [record for _, record in numbers] + [record for _, record in texts] + missing


def _week_rank(record: Record, window: WeekWindow) -> int | None:
    """Index of the newest window week the record belongs to, or None."""
    ranks = [
        window.codes.index(value)
        for value in attribute_strings(normalize_attribute(record.get("week")))
        if value in window
    ]
    return min(ranks) if ranks else None


def _arrival_window(
    records: Sequence[Record],
    weeks: int,
    from_date: date | datetime | None,
    stocked_only: bool,
) -> WeekWindow:
    """The week window a New Arrivals page covers.

    By default the ``weeks`` most recent calendar weeks. With
    ``stocked_only`` the ``weeks`` most recent weeks that hold at least one
    product, looking back up to a year, so a shop without a recent drop
    still shows its latest stock.
    """
    if not stocked_only:
        return recent_weeks(weeks, from_date)
    require_int(weeks, "weeks", minimum=1)
    available = {
        code
        for record in records
        for code in attribute_strings(normalize_attribute(record.get("week")))
    }
    return WeekWindow(codes=tuple(target_weeks(weeks, available, from_date)))


def _paginate(
    items: Sequence[Record],
    page: int,
    page_size: int,
    max_visible: int,
    resolution: FilterResolution | None = None,
    weeks: tuple[str, ...] = (),
) -> ListingPage:
    page_slice = slice_page(len(items), page_size, page)
    pagination = describe_pages(page_slice.clamped_page, page_slice.total_pages, max_visible)
    return ListingPage(
        items=tuple(items[page_slice.offset : page_slice.offset + page_slice.limit]),
        total=len(items),
        page=page_slice,
        pagination=pagination,
        resolution=resolution,
        weeks=weeks,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def run_listing(
    records: Iterable[Record],
    query: ListingQuery,
    *,
    submenu: Sequence[SubmenuEntry] | None = None,
    max_visible: int = 5,
) -> ListingPage:
    """Filter, sort and page a catalog.

    Args:
        records: Raw product records.
        query: Filter, sort and page request.
        submenu: Curated menu used to widen genre/format filters.
        max_visible: Page-link count before ellipsis compression.

    Returns:
        ListingPage for the clamped page. An unknown-but-valid slug yields an
        empty page, not an error.

    Raises:
        CatalogError: Any validation failure from the resolver, the sort
            arguments or the page arithmetic.
    """
    _check_sort(query.sort, query.order)
    resolution = resolve_filter(query.filter, submenu=submenu) if query.filter else None
    field = FILTER_FIELDS[resolution.filter_type] if resolution else None

    selected = [
        record
        for record in records
        if (not query.require_image or has_image(record))
        and (resolution is None or resolution.matches(record.get(field)))  # type: ignore[arg-type]
    ]
    ordered = sort_records(selected, query.sort, query.order)
    return _paginate(ordered, query.page, query.page_size, max_visible, resolution)


def run_new_arrivals(
    records: Iterable[Record],
    *,
    weeks: int = 5,
    from_date: date | datetime | None = None,
    page: int = 1,
    page_size: int = 48,
    sort: str = "order_position",
    order: str = "asc",
    require_image: bool = False,
    max_visible: int = 5,
    stocked_only: bool = False,
) -> ListingPage:
    """List products from the ``weeks`` most recent arrival weeks.

    Newest week first; within a week, by ``sort``/``order``. With
    ``stocked_only`` the window skips weeks that hold no products.
    """
    records = list(records)
    window = _arrival_window(records, weeks, from_date, stocked_only)
    ranked: list[tuple[int, Record]] = []
    for record in sort_records(records, sort, order):
        if require_image and not has_image(record):
            continue
        rank = _week_rank(record, window)
        if rank is not None:
            ranked.append((rank, record))
    ranked.sort(key=lambda pair: pair[0])
    ordered = [record for _, record in ranked]
    return _paginate(ordered, page, page_size, max_visible, weeks=window.codes)


def group_by_week(
    records: Iterable[Record],
    *,
    weeks: int = 5,
    per_week: int = 8,
    from_date: date | datetime | None = None,
    sort: str = "order_position",
    order: str = "asc",
    include_empty: bool = False,
    stocked_only: bool = False,
) -> list[WeekGroup]:
    """Bucket recent products by arrival week, newest week first.

    Each record lands in the newest window week it carries. ``items`` holds
    at most ``per_week`` products; ``product_count`` is the full bucket size
    so the caller can render a "View all N" link. With ``stocked_only`` the
    sections are the ``weeks`` most recent weeks that have products.
    """
    require_int(per_week, "per_week", minimum=0)
    records = list(records)
    window = _arrival_window(records, weeks, from_date, stocked_only)
    buckets: dict[str, list[Record]] = {code: [] for code in window}
    for record in sort_records(records, sort, order):
        rank = _week_rank(record, window)
        if rank is not None:
            buckets[window.codes[rank]].append(record)

    return [
        WeekGroup(
            week=code,
            display_name=format_week_display(code),
            product_count=len(buckets[code]),
            items=tuple(buckets[code][:per_week]),
        )
        for code in window
        if include_empty or buckets[code]
    ]


def weeks_index(
    records: Iterable[Record],
    *,
    count: int = 20,
    from_date: date | datetime | None = None,
    include_empty: bool = False,
) -> list[WeekGroup]:
    """Week codes of the last ``count`` weeks with their product counts.

    Backs the browsable weeks page; groups carry no items.
    """
    return group_by_week(
        records, weeks=count, per_week=0, from_date=from_date, include_empty=include_empty
    )
