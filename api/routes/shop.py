"""
Shop listing routes.

``GET /shop/new``                 — New Arrivals across the recent week window.
``GET /shop/new/sections``        — New Arrivals grouped into stocked week sections.
``GET /shop/weeks``               — Browsable arrival weeks with product counts.
``GET /shop/filters/{type}``      — Values a filter dimension can take.
``GET /shop/{type}/{slug}``       — Filtered, sorted, paginated listing.

Any ``CatalogError`` from the engine is a page-not-found (404); a catalog
that cannot be loaded is a 503.
"""

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_catalog_store, get_metrics, get_settings, get_today
from api.schemas.shop import (
    FilterMeta,
    FilterValue,
    FilterValuesResponse,
    ListingResponse,
    PaginationMeta,
    WeekSection,
    WeekSectionsResponse,
    WeeksResponse,
    WeekSummary,
)
from api.settings import ServiceSettings
from core.catalog.attributes import attribute_strings, normalize_attribute
from core.catalog.errors import CatalogError
from core.catalog.filters import FILTER_VALUES, FilterRequest, FilterType, display_name_for
from core.catalog.listing import (
    FILTER_FIELDS,
    ListingPage,
    ListingQuery,
    group_by_week,
    run_listing,
    run_new_arrivals,
    weeks_index,
)
from core.catalog.slugs import slugify
from infrastructure.metrics import CatalogMetrics, LatencyTimer
from ingestion.catalog_store import CatalogLoadError, CatalogSnapshot, CatalogStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shop", tags=["shop"])

Store = Annotated[CatalogStore, Depends(get_catalog_store)]
Settings = Annotated[ServiceSettings, Depends(get_settings)]
Metrics = Annotated[CatalogMetrics, Depends(get_metrics)]
Today = Annotated[date, Depends(get_today)]

# Metric label for requests whose filter type is not a FilterType.
_UNKNOWN_TYPE = "unknown"

# Week pages list the menu order the shop staff arranged, not recency.
_WEEK_DEFAULT_SORT = ("order_position", "asc")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load(store: CatalogStore) -> CatalogSnapshot:
    try:
        return store.snapshot()
    except CatalogLoadError as exc:
        logger.error("Catalog unavailable: %s", exc)
        raise HTTPException(status_code=503, detail="Catalog is temporarily unavailable.") from exc


def _not_found(exc: CatalogError, what: str) -> HTTPException:
    logger.warning("Rejected %s: %s", what, exc)
    return HTTPException(status_code=404, detail=str(exc))


def _metric_type(filter_type: str) -> str:
    try:
        return FilterType(filter_type).value
    except ValueError:
        return _UNKNOWN_TYPE


def _to_response(listing: ListingPage, current_week: str | None = None) -> ListingResponse:
    resolution = listing.resolution
    filter_meta = None
    if resolution is not None:
        filter_meta = FilterMeta(
            type=resolution.filter_type.value,
            value=resolution.slug,
            display_name=resolution.display_name,
            match_tokens=sorted(resolution.match_tokens),
        )
    pagination = listing.pagination
    return ListingResponse(
        products=[dict(item) for item in listing.items],
        total=listing.total,
        filter=filter_meta,
        pagination=PaginationMeta(
            current_page=pagination.current_page,
            total_pages=pagination.total_pages,
            entries=list(pagination.entries),
            offset=listing.page.offset,
            limit=listing.page.limit,
            previous_page=pagination.previous_page,
            next_page=pagination.next_page,
        ),
        weeks=list(listing.weeks),
        current_week=current_week,
    )


# ---------------------------------------------------------------------------
# New arrivals and weeks
# ---------------------------------------------------------------------------


@router.get("/new", response_model=ListingResponse)
def new_arrivals(
    store: Store,
    settings: Settings,
    metrics: Metrics,
    today: Today,
    page: int = 1,
    weeks: Annotated[int | None, Query(ge=1, le=52)] = None,
    require_image: bool = False,
    stocked: bool = False,
) -> ListingResponse:
    """
    List products that arrived in the most recent weeks, newest week first.

    ``weeks`` defaults to ``CATALOG_NEW_ARRIVAL_WEEKS``. With ``stocked`` the
    window counts only weeks that hold products, looking back up to a year.
    Out-of-range pages are clamped rather than rejected.
    """
    snapshot = _load(store)
    config = settings.listing
    error: CatalogError | None = None
    with LatencyTimer() as timer:
        try:
            listing = run_new_arrivals(
                snapshot.products,
                weeks=weeks or config.new_arrival_weeks,
                from_date=today,
                page=page,
                page_size=config.page_size,
                require_image=require_image,
                max_visible=config.max_visible_pages,
                stocked_only=stocked,
            )
        except CatalogError as exc:
            error = exc
    if error is not None:
        metrics.record_listing(filter_type="new", status="invalid", latency_seconds=timer.elapsed)
        raise _not_found(error, "new arrivals request") from error

    metrics.record_listing(
        filter_type="new",
        status="ok" if listing.total else "empty",
        latency_seconds=timer.elapsed,
    )
    current = listing.weeks[0] if listing.weeks else None
    return _to_response(listing, current_week=current)


@router.get("/new/sections", response_model=WeekSectionsResponse)
def new_arrival_sections(
    store: Store,
    settings: Settings,
    today: Today,
    weeks: Annotated[int | None, Query(ge=1, le=52)] = None,
    per_week: Annotated[int | None, Query(ge=0, le=100)] = None,
    stocked: bool = True,
) -> WeekSectionsResponse:
    """
    New Arrivals as one section per week, each with a product preview.

    Sections cover the most recent weeks that hold products, so a shop
    without a recent drop still shows its latest stock. Pass
    ``stocked=false`` for a fixed calendar window.
    """
    snapshot = _load(store)
    config = settings.listing
    try:
        groups = group_by_week(
            snapshot.products,
            weeks=weeks or config.new_arrival_weeks,
            per_week=config.per_week_preview if per_week is None else per_week,
            from_date=today,
            stocked_only=stocked,
        )
    except CatalogError as exc:
        raise _not_found(exc, "week sections request") from exc

    return WeekSectionsResponse(
        sections=[
            WeekSection(
                value=group.week,
                display_name=group.display_name,
                product_count=group.product_count,
                products=[dict(item) for item in group.items],
            )
            for group in groups
        ]
    )


@router.get("/weeks", response_model=WeeksResponse)
def browse_weeks(
    store: Store,
    settings: Settings,
    today: Today,
    count: Annotated[int | None, Query(ge=1, le=104)] = None,
    include_empty: bool = False,
) -> WeeksResponse:
    """Arrival weeks, newest first, with how many products each holds."""
    snapshot = _load(store)
    try:
        groups = weeks_index(
            snapshot.products,
            count=count or settings.listing.week_index_size,
            from_date=today,
            include_empty=include_empty,
        )
    except CatalogError as exc:
        raise _not_found(exc, "weeks index request") from exc

    return WeeksResponse(
        weeks=[
            WeekSummary(
                value=group.week,
                display_name=group.display_name,
                product_count=group.product_count,
            )
            for group in groups
        ]
    )


# ---------------------------------------------------------------------------
# Filter dimensions
# ---------------------------------------------------------------------------


@router.get("/filters/{filter_type}", response_model=FilterValuesResponse)
def filter_values(filter_type: str, store: Store) -> FilterValuesResponse:
    """
    Values a filter dimension can take.

    Genre and format have a fixed browse list. Artist and label values come
    from the loaded catalog, one entry per distinct slug.
    """
    try:
        dimension = FilterType(filter_type)
    except ValueError as exc:
        logger.warning("Rejected filter listing for unknown type %r", filter_type)
        raise HTTPException(status_code=404, detail=f"Unknown filter type {filter_type!r}") from exc

    if dimension is FilterType.WEEK:
        raise HTTPException(status_code=404, detail="Weeks are listed at /shop/weeks")

    slugs = FILTER_VALUES[dimension]
    if not slugs:
        field = FILTER_FIELDS[dimension]
        found = {
            slugify(value)
            for record in _load(store).products
            for value in attribute_strings(normalize_attribute(record.get(field)))
        }
        slugs = tuple(sorted(s for s in found if s))

    return FilterValuesResponse(
        type=dimension.value,
        values=[FilterValue(slug=s, display_name=display_name_for(dimension, s)) for s in slugs],
    )


@router.get("/{filter_type}/{slug}", response_model=ListingResponse)
def filtered_listing(
    filter_type: str,
    slug: str,
    store: Store,
    settings: Settings,
    metrics: Metrics,
    page: int = 1,
    sort: str | None = None,
    order: str | None = None,
    require_image: bool = False,
) -> ListingResponse:
    """
    List the products matching one filter.

    Unknown filter types, malformed week codes, blank slugs and bad sort
    options are 404s. A valid slug that matches nothing is an empty 200.
    """
    snapshot = _load(store)
    config = settings.listing
    if filter_type == FilterType.WEEK.value:
        default_sort, default_order = _WEEK_DEFAULT_SORT
    else:
        default_sort, default_order = config.default_sort, config.default_order

    query = ListingQuery(
        filter=FilterRequest(filter_type=filter_type, slug=slug),
        page=page,
        page_size=config.page_size,
        sort=sort or default_sort,
        order=order or default_order,
        require_image=require_image,
    )
    metric_type = _metric_type(filter_type)
    error: CatalogError | None = None
    with LatencyTimer() as timer:
        try:
            listing = run_listing(
                snapshot.products,
                query,
                submenu=snapshot.submenu,
                max_visible=config.max_visible_pages,
            )
        except CatalogError as exc:
            error = exc
    if error is not None:
        metrics.record_listing(
            filter_type=metric_type, status="invalid", latency_seconds=timer.elapsed
        )
        raise _not_found(error, f"/shop/{filter_type}/{slug}") from error

    metrics.record_listing(
        filter_type=metric_type,
        status="ok" if listing.total else "empty",
        latency_seconds=timer.elapsed,
    )
    logger.debug(
        "Listing %s/%s: %d products, page %d/%d",
        filter_type,
        slug,
        listing.total,
        listing.page.clamped_page,
        listing.page.total_pages,
    )
    return _to_response(listing)
