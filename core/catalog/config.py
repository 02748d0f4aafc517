"""
Configuration dataclasses for catalog listings.

Immutable config objects keep page sizes and window lengths out of function
signatures, so the API layer and tests can share named presets.
"""

from dataclasses import dataclass

# Sort keys understood by core.catalog.listing.
VALID_SORTS: frozenset[str] = frozenset({"created_at", "title", "price", "order_position"})
VALID_ORDERS: frozenset[str] = frozenset({"asc", "desc"})


@dataclass(frozen=True)
class ListingConfig:
    """
    Configuration for shop listing pages.

    Attributes:
        page_size: Products per page. Defaults to 48, a multiple of the
            2/3/4-column grid widths.
        max_visible_pages: Page-link count before the pagination bar starts
            eliding pages with an ellipsis. Must be at least 3.
        new_arrival_weeks: Weeks covered by the "New Arrivals" page.
        week_index_size: Weeks listed on the browsable weeks index.
        per_week_preview: Products shown per week section before the
            "View all" link.
        default_sort: Sort key for filter pages.
        default_order: Sort direction for filter pages.

    Example:
        >>> config = ListingConfig(page_size=24, new_arrival_weeks=3)
    """

    page_size: int = 48
    max_visible_pages: int = 5
    new_arrival_weeks: int = 5
    week_index_size: int = 20
    per_week_preview: int = 8
    default_sort: str = "created_at"
    default_order: str = "desc"

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")
        if self.max_visible_pages < 3:
            raise ValueError(f"max_visible_pages must be at least 3, got {self.max_visible_pages}")
        if self.new_arrival_weeks <= 0:
            raise ValueError(f"new_arrival_weeks must be positive, got {self.new_arrival_weeks}")
        if self.week_index_size <= 0:
            raise ValueError(f"week_index_size must be positive, got {self.week_index_size}")
        if self.per_week_preview <= 0:
            raise ValueError(f"per_week_preview must be positive, got {self.per_week_preview}")
        if self.default_sort not in VALID_SORTS:
            raise ValueError(
                f"Unknown default_sort {self.default_sort!r}, valid options: {sorted(VALID_SORTS)}"
            )
        if self.default_order not in VALID_ORDERS:
            raise ValueError(
                f"Unknown default_order {self.default_order!r}, "
                f"valid options: {sorted(VALID_ORDERS)}"
            )


DEFAULT_CONFIG = ListingConfig()
"""Default configuration: 48 per page, 5-link pagination, 5 new-arrival weeks."""
