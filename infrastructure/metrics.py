"""Prometheus metrics for the catalog service.

Every collector lives on a ``CatalogMetrics`` instance with its own
``CollectorRegistry``. Nothing is registered at import time, so each app (and
each test) owns an isolated set of counters.

Metrics:
    catalog_listing_requests_total   Counter by filter type and status (ok/empty/invalid)
    catalog_listing_latency_seconds  Histogram of listing latency by filter type
    catalog_cache_hits_total         Catalog snapshot cache hits
    catalog_cache_misses_total       Catalog snapshot cache misses (reloads)
    catalog_products                 Gauge: products in the current snapshot

Usage::

    from infrastructure.metrics import CatalogMetrics, LatencyTimer

    metrics = CatalogMetrics()
    with LatencyTimer() as t:
        page = run_listing(records, query)
    metrics.record_listing(filter_type="genre", status="ok", latency_seconds=t.elapsed)
"""

from __future__ import annotations

import logging
import time

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

LISTING_STATUSES: frozenset[str] = frozenset({"ok", "empty", "invalid"})


class CatalogMetrics:
    """Catalog service collectors bound to one registry.

    Args:
        registry: Registry to register into. A fresh one is created when
            omitted.
        namespace: Metric name prefix (default: ``catalog``).
    """

    def __init__(
        self,
        registry: CollectorRegistry | None = None,
        namespace: str = "catalog",
    ) -> None:
        """Create and register all collectors."""
        self.registry = registry if registry is not None else CollectorRegistry()

        self.listing_requests_total = Counter(
            f"{namespace}_listing_requests_total",
            "Shop listing requests by filter type and status",
            ["filter_type", "status"],
            registry=self.registry,
        )
        self.listing_latency_seconds = Histogram(
            f"{namespace}_listing_latency_seconds",
            "Shop listing latency in seconds",
            ["filter_type"],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0],
            registry=self.registry,
        )
        self.cache_hits_total = Counter(
            f"{namespace}_cache_hits_total",
            "Catalog snapshot cache hits",
            registry=self.registry,
        )
        self.cache_misses_total = Counter(
            f"{namespace}_cache_misses_total",
            "Catalog snapshot cache misses (reloads from source)",
            registry=self.registry,
        )
        self.products = Gauge(
            f"{namespace}_products",
            "Products in the current catalog snapshot",
            registry=self.registry,
        )
        logger.info("CatalogMetrics registry initialized (namespace=%s)", namespace)

    def record_listing(self, *, filter_type: str, status: str, latency_seconds: float) -> None:
        """Record a completed listing request.

        Args:
            filter_type: Filter dimension, or ``"new"`` / ``"weeks"`` / ``"all"``.
            status: One of ``LISTING_STATUSES``.
            latency_seconds: Wall-clock time spent building the listing.
        """
        if status not in LISTING_STATUSES:
            raise ValueError(f"Unknown listing status {status!r}")
        self.listing_requests_total.labels(filter_type=filter_type, status=status).inc()
        self.listing_latency_seconds.labels(filter_type=filter_type).observe(latency_seconds)

    def record_cache_hit(self) -> None:
        """Increment catalog cache hit counter."""
        self.cache_hits_total.inc()

    def record_cache_miss(self) -> None:
        """Increment catalog cache miss counter."""
        self.cache_misses_total.inc()

    def set_product_count(self, count: int) -> None:
        """Publish the size of the current snapshot."""
        self.products.set(count)

    def render(self) -> tuple[bytes, str]:
        """Generate Prometheus text exposition format.

        Returns:
            Tuple of (body_bytes, content_type_string).
        """
        return generate_latest(self.registry), CONTENT_TYPE_LATEST


class LatencyTimer:
    """Context manager for measuring latency.

    Usage::

        with LatencyTimer() as t:
            result = run_listing(records, query)
        metrics.record_listing(filter_type="genre", status="ok", latency_seconds=t.elapsed)
    """

    def __init__(self) -> None:
        """Initialize timer."""
        self._start: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> LatencyTimer:
        """Start timing."""
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: object) -> None:
        """Stop timing and record elapsed."""
        self.elapsed = time.perf_counter() - self._start
