"""
Catalog loading for the shop API.

Reads raw product records and the curated submenu from a JSON or YAML
export, then hands them to the pure ``core.catalog`` engine unchanged. The
records keep whatever attribute shapes the CMS produced; normalization
happens at match time.

Accepted documents::

    [ {product}, ... ]                                # products only
    {"products": [...], "submenu": [...]}             # products + menu

When the document carries no submenu, ``FALLBACK_SUBMENU`` is used.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from core.catalog.filters import FALLBACK_SUBMENU, SubmenuEntry
from infrastructure.cache import TTLCache
from infrastructure.metrics import CatalogMetrics

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES: frozenset[str] = frozenset({".json", ".yaml", ".yml"})

_SNAPSHOT_KEY = "catalog"


class CatalogLoadError(Exception):
    """Raised when the catalog source cannot be read or has the wrong shape.

    Args:
        source: Path or label of the source that failed.
        reason: Human-readable explanation.
    """

    def __init__(self, source: str, reason: str) -> None:
        """Initialize with source and reason."""
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot load catalog from {source}: {reason}")


@dataclass(frozen=True)
class CatalogSnapshot:
    """Immutable view of the catalog at load time."""

    products: tuple[Mapping[str, Any], ...]
    submenu: tuple[SubmenuEntry, ...]
    source: str


def parse_catalog(document: object, source: str = "<memory>") -> CatalogSnapshot:
    """Validate a decoded catalog document and build a snapshot.

    Args:
        document: Decoded JSON/YAML (list of products or mapping).
        source: Label used in errors and logs.

    Raises:
        CatalogLoadError: If the document is neither a list nor a mapping,
            or products/submenu entries are not mappings.
    """
    if isinstance(document, list):
        products_raw: Any = document
        submenu_raw: Any = None
    elif isinstance(document, Mapping):
        products_raw = document.get("products", [])
        submenu_raw = document.get("submenu")
    else:
        raise CatalogLoadError(source, "expected a list of products or a mapping")

    if not isinstance(products_raw, list):
        raise CatalogLoadError(source, "'products' must be a list")
    bad = [i for i, product in enumerate(products_raw) if not isinstance(product, Mapping)]
    if bad:
        raise CatalogLoadError(source, f"products at positions {bad[:5]} are not mappings")

    if submenu_raw is None:
        submenu = FALLBACK_SUBMENU
    elif isinstance(submenu_raw, list) and all(isinstance(e, Mapping) for e in submenu_raw):
        submenu = tuple(SubmenuEntry.from_mapping(entry) for entry in submenu_raw)
    else:
        raise CatalogLoadError(source, "'submenu' must be a list of mappings")

    return CatalogSnapshot(products=tuple(products_raw), submenu=submenu, source=source)


def load_catalog_file(path: str | Path) -> CatalogSnapshot:
    """Read and parse a catalog export from disk.

    Args:
        path: ``.json``, ``.yaml`` or ``.yml`` file.

    Raises:
        CatalogLoadError: Unsupported suffix, unreadable file, or invalid
            document.
    """
    path = Path(path)
    source = str(path)
    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise CatalogLoadError(source, f"unsupported file type {path.suffix!r}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogLoadError(source, str(exc)) from exc

    try:
        if path.suffix.lower() == ".json":
            document = json.loads(text)
        else:
            document = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise CatalogLoadError(source, f"parse error: {exc}") from exc

    snapshot = parse_catalog(document, source)
    logger.info(
        "Loaded catalog from %s (%d products, %d submenu entries)",
        source,
        len(snapshot.products),
        len(snapshot.submenu),
    )
    return snapshot


class CatalogStore:
    """Serves catalog snapshots from a file through a caller-owned cache.

    Args:
        path: Catalog export to read.
        cache: Cache holding the current snapshot; its TTL decides how often
            the file is re-read.
        metrics: Optional collectors for cache hits/misses and catalog size.
    """

    def __init__(
        self,
        path: str | Path,
        cache: TTLCache[CatalogSnapshot],
        metrics: CatalogMetrics | None = None,
    ) -> None:
        """Bind the store to its source and cache. Nothing is read yet."""
        self.path = Path(path)
        self._cache = cache
        self._metrics = metrics

    def snapshot(self) -> CatalogSnapshot:
        """Return the cached snapshot, reloading from disk once it has expired.

        Raises:
            CatalogLoadError: If a reload is needed and fails.
        """
        reloaded = False

        def load() -> CatalogSnapshot:
            nonlocal reloaded
            reloaded = True
            return load_catalog_file(self.path)

        snapshot = self._cache.get_or_load(_SNAPSHOT_KEY, load)
        if self._metrics is not None:
            if reloaded:
                self._metrics.record_cache_miss()
                self._metrics.set_product_count(len(snapshot.products))
            else:
                self._metrics.record_cache_hit()
        return snapshot

    def invalidate(self) -> bool:
        """Drop the cached snapshot so the next request re-reads the file."""
        dropped = self._cache.invalidate(_SNAPSHOT_KEY)
        logger.info("CatalogStore: snapshot invalidated (was_cached=%s)", dropped)
        return dropped

    def cache_stats(self) -> dict[str, Any]:
        """Drop expired entries, then return the snapshot cache statistics."""
        self._cache.evict_expired()
        return self._cache.stats()
