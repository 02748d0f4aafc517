"""
core/catalog/pagination.py — Page slicing and compact page-link descriptors.

Pure module, reusable by any listing.

``slice_page`` turns ``(total_items, page_size, requested_page)`` into the
offset/limit a query executor needs, clamping out-of-range pages instead of
failing so a stale ``?page=99`` link still renders the last page.

``describe_pages`` produces what the UI renders between the prev/next
arrows::

    describe_pages(1, 10)  -> 1 2 3 … 10
    describe_pages(5, 10)  -> 1 … 4 5 6 … 10
    describe_pages(9, 10)  -> 1 … 8 9 10

The first and last page are always present, the current page sits in a
contiguous band of ``max_visible - 2`` pages, and an ellipsis only ever
stands for two or more hidden pages. A single hidden page is shown as its
number.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from core.catalog._validation import require_int

ELLIPSIS = "…"

PageEntry = int | str


@dataclass(frozen=True)
class PageSlice:
    """Offset/limit for one page of a listing.

    Attributes:
        offset:       Zero-based index of the first item on the page.
        limit:        Page size.
        clamped_page: The requested page forced into ``[1, max(1, total_pages)]``.
        total_pages:  ``ceil(total_items / page_size)``; 0 for an empty listing.
    """

    offset: int
    limit: int
    clamped_page: int
    total_pages: int


@dataclass(frozen=True)
class PaginationDescriptor:
    """UI-ready page links: page numbers interleaved with ``ELLIPSIS`` markers."""

    current_page: int
    total_pages: int
    entries: tuple[PageEntry, ...]

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def previous_page(self) -> int | None:
        return self.current_page - 1 if self.has_previous else None

    @property
    def next_page(self) -> int | None:
        return self.current_page + 1 if self.has_next else None


def count_pages(total_items: int, page_size: int) -> int:
    """Number of pages needed for ``total_items``; 0 when there are none."""
    require_int(total_items, "total_items", minimum=0)
    require_int(page_size, "page_size", minimum=1)
    return math.ceil(total_items / page_size)


def slice_page(total_items: int, page_size: int, requested_page: int) -> PageSlice:
    """Compute offset and limit for a requested page.

    Args:
        total_items: Size of the full result set, >= 0.
        page_size: Items per page, >= 1.
        requested_page: 1-based page from the URL; clamped into range.

    Returns:
        PageSlice for the clamped page.

    Raises:
        InvalidInputError: Negative ``total_items``, non-positive
            ``page_size``, or any non-int argument.

    Example:
        >>> slice_page(100, 20, 99)
        PageSlice(offset=80, limit=20, clamped_page=5, total_pages=5)
    """
    total_pages = count_pages(total_items, page_size)
    require_int(requested_page, "requested_page")
    clamped = min(max(requested_page, 1), max(1, total_pages))
    return PageSlice(
        offset=(clamped - 1) * page_size,
        limit=page_size,
        clamped_page=clamped,
        total_pages=total_pages,
    )


def describe_pages(
    current_page: int, total_pages: int, max_visible: int = 5
) -> PaginationDescriptor:
    """Build the page-link descriptor for a listing.

    Args:
        current_page: 1-based current page; clamped into ``[1, total_pages]``.
        total_pages: Total number of pages, >= 0.
        max_visible: Page count at which compression starts, >= 3. Above it,
            the band around the current page holds ``max_visible - 2`` pages
            (the other two slots are the first and last page).

    Returns:
        PaginationDescriptor; ``entries`` is empty when ``total_pages`` is 0.

    Raises:
        InvalidInputError: Negative ``total_pages``, ``max_visible`` below 3,
            or any non-int argument.
    """
    require_int(current_page, "current_page")
    require_int(total_pages, "total_pages", minimum=0)
    require_int(max_visible, "max_visible", minimum=3)

    if total_pages == 0:
        return PaginationDescriptor(current_page=1, total_pages=0, entries=())

    current = min(max(current_page, 1), total_pages)
    if total_pages <= max_visible:
        return PaginationDescriptor(
            current_page=current,
            total_pages=total_pages,
            entries=tuple(range(1, total_pages + 1)),
        )

    band = max_visible - 2
    start = current - (band - 1) // 2
    start = max(1, min(start, total_pages - band + 1))
    pages = sorted({1, total_pages, *range(start, start + band)})

    entries: list[PageEntry] = []
    previous: int | None = None
    for page in pages:
        if previous is not None:
            hidden = page - previous - 1
            if hidden == 1:
                entries.append(previous + 1)
            elif hidden > 1:
                entries.append(ELLIPSIS)
        entries.append(page)
        previous = page

    return PaginationDescriptor(
        current_page=current, total_pages=total_pages, entries=tuple(entries)
    )
