"""
Pydantic schemas for the ``/shop`` endpoints.

Defines response serialization models. Product records are passed through
as the raw mappings the catalog export contains.
"""

from typing import Any

from pydantic import BaseModel, Field


class FilterMeta(BaseModel):
    """The filter a listing was built for."""

    type: str = Field(..., description="Filter dimension: artist, label, genre, format or week.")
    value: str = Field(..., description="The routed slug.")
    display_name: str = Field(..., description="Human-readable page title.")
    match_tokens: list[str] = Field(
        default_factory=list,
        description="Literal attribute values treated as equal to the slug (sorted).",
    )


class PaginationMeta(BaseModel):
    """Page links and slice for the current listing."""

    current_page: int = Field(..., description="Clamped 1-based page actually served.")
    total_pages: int = Field(..., description="Total number of pages (0 when empty).")
    entries: list[int | str] = Field(
        ..., description="Page numbers to render, with '…' where pages are elided."
    )
    offset: int = Field(..., description="Zero-based index of the first product on this page.")
    limit: int = Field(..., description="Page size.")
    previous_page: int | None = Field(default=None, description="Target of the 'previous' link.")
    next_page: int | None = Field(default=None, description="Target of the 'next' link.")


class ListingResponse(BaseModel):
    """Response body for filter and new-arrival listings."""

    products: list[dict[str, Any]] = Field(..., description="Products on this page.")
    total: int = Field(..., description="Products matching the request across all pages.")
    filter: FilterMeta | None = Field(default=None, description="Applied filter, if any.")
    pagination: PaginationMeta
    weeks: list[str] = Field(
        default_factory=list, description="Week codes covered (new arrivals only), newest first."
    )
    current_week: str | None = Field(
        default=None, description="This week's code (new arrivals only)."
    )


class WeekSummary(BaseModel):
    """One arrival week with its product count."""

    value: str = Field(..., description="WWYY week code.")
    display_name: str = Field(..., description="e.g. 'Week 46, 2025'.")
    product_count: int = Field(..., description="Products that arrived that week.")


class WeekSection(WeekSummary):
    """An arrival week with a preview of its products."""

    products: list[dict[str, Any]] = Field(default_factory=list)


class WeeksResponse(BaseModel):
    """Response body for ``GET /shop/weeks``."""

    weeks: list[WeekSummary]


class WeekSectionsResponse(BaseModel):
    """Response body for ``GET /shop/new/sections``."""

    sections: list[WeekSection]


class FilterValue(BaseModel):
    """One browsable value of a filter dimension."""

    slug: str
    display_name: str


class FilterValuesResponse(BaseModel):
    """Response body for ``GET /shop/filters/{filter_type}``."""

    type: str
    values: list[FilterValue]
