"""
FastAPI dependency providers.

Each provider builds its object once and reuses it across requests. Tests
swap any of them through ``app.dependency_overrides``.
"""

from datetime import date

from api.settings import ServiceSettings
from infrastructure.cache import TTLCache
from infrastructure.metrics import CatalogMetrics
from ingestion.catalog_store import CatalogSnapshot, CatalogStore

_settings: ServiceSettings | None = None


def get_settings() -> ServiceSettings:
    """Return the process settings, read from the environment on first call."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = ServiceSettings.from_env()
    return _settings


_metrics: CatalogMetrics | None = None


def get_metrics() -> CatalogMetrics:
    """Return the service's metrics collectors (one registry per process)."""
    global _metrics  # noqa: PLW0603
    if _metrics is None:
        _metrics = CatalogMetrics()
    return _metrics


_catalog_store: CatalogStore | None = None


def get_catalog_store() -> CatalogStore:
    """Return the catalog store singleton.

    The snapshot cache TTL comes from ``CATALOG_CACHE_TTL_SECONDS``. The file
    is not read until the first request needs it.
    """
    global _catalog_store  # noqa: PLW0603
    if _catalog_store is None:
        settings = get_settings()
        cache: TTLCache[CatalogSnapshot] = TTLCache(
            ttl_seconds=settings.cache_ttl_seconds, max_size=1
        )
        _catalog_store = CatalogStore(settings.catalog_path, cache, metrics=get_metrics())
    return _catalog_store


def get_today() -> date:
    """Reference day for week windows. Overridden in tests to pin the calendar."""
    return date.today()
