"""
Shared fixtures for the test suite.

Centralizes the sample catalog, the fake clock and the API client so
individual test files don't need to repeat override boilerplate.

The sample catalog is pinned to ``TODAY`` (Wednesday 15 January 2025, week
``0325``). Its five-week New Arrivals window is
``0325, 0225, 0125, 5224, 5124``.
"""

import json
from datetime import date
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from api.deps import get_catalog_store, get_metrics, get_settings, get_today
from api.main import app
from api.settings import ServiceSettings
from core.catalog.config import ListingConfig
from infrastructure.cache import TTLCache
from infrastructure.metrics import CatalogMetrics
from ingestion.catalog_store import CatalogStore

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TODAY = date(2025, 1, 15)
"""Reference day for every week-window test (week code ``0325``)."""

SUBMENU_DOCUMENT: list[dict[str, Any]] = [
    {
        "slug": {"current": "jazz"},
        "label": "Jazz",
        "relatedGenres": ["Jazz", "Jazz-Funk", "Soul-Jazz"],
    },
    {
        "slug": {"current": "vinyl"},
        "label": "Vinyl",
        "relatedFormats": ["LP", '12"', '7"'],
        "isFormat": True,
    },
]
"""Submenu as the CMS exports it (``slug.current``, camelCase keys)."""


# ---------------------------------------------------------------------------
# Fake clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced clock for TTL tests — no sleeping."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# Sample catalog
# ---------------------------------------------------------------------------


def make_records() -> list[dict[str, Any]]:
    """Five products covering every attribute shape the CMS produces.

    ``p1``-``p4`` fall inside the New Arrivals window; ``p5`` (week 4024)
    does not. ``p4`` only has the placeholder image and ``p2`` has none.
    """
    return [
        {
            "_id": "p1",
            "title": "Mirror Dance",
            "artist": "Fela Kuti",
            "label": [{"main": "Strut & Records"}],
            "genre": [{"main": "Afro-Beat"}],
            "format": [{"main": "LP"}],
            "week": ["0325"],
            "_createdAt": "2025-01-14T10:00:00Z",
            "price": 32.0,
            "order_position": 2,
            "mainImage": "/img/p1.jpg",
        },
        {
            "_id": "p2",
            "title": "Sunset Edits",
            "artist": ["Various Artists"],
            "label": "Rhythm Section",
            "genre": ["house", "Disco"],
            "format": '12"',
            "week": "0325",
            "_createdAt": "2025-01-13T09:00:00Z",
            "price": 14.5,
            "order_position": 1,
        },
        {
            "_id": "p3",
            "title": "Blue Hours",
            "artist": "Jazz Quartet",
            "label": [{"main": "Blue Note"}],
            "genre": [{"main": "Jazz-Funk", "sub": "Fusion"}],
            "format": [{"main": "LP"}],
            "week": ["0225"],
            "_createdAt": "2025-01-08T12:00:00Z",
            "price": 28.0,
            "order_position": 1,
            "imageUrl": "/img/p3.jpg",
        },
        {
            "_id": "p4",
            "title": "Soul Jazz Sampler",
            "artist": "Various",
            "label": "Soul Jazz Records",
            "genre": "SOUL-JAZZ",
            "format": '"7"',
            "week": "5224",
            "_createdAt": "2024-12-22T08:00:00Z",
            "price": 9.0,
            "order_position": 3,
            "mainImage": "/placeholder.jpg",
        },
        {
            "_id": "p5",
            "title": "Old Stock",
            "artist": "Someone",
            "label": "Other",
            "genre": "Rock",
            "format": "CD",
            "week": "4024",
            "_createdAt": "2024-10-01T08:00:00Z",
            "price": 12.0,
        },
    ]


@pytest.fixture()
def records() -> list[dict[str, Any]]:
    """Fresh copy of the sample catalog."""
    return make_records()


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def catalog_file(tmp_path: Path) -> Path:
    """Sample catalog with submenu written as a JSON export."""
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps({"products": make_records(), "submenu": SUBMENU_DOCUMENT}),
        encoding="utf-8",
    )
    return path


# ---------------------------------------------------------------------------
# FastAPI test client fixture
# ---------------------------------------------------------------------------


@pytest.fixture()
def api_client(catalog_file: Path, fake_clock: FakeClock):
    """FastAPI ``TestClient`` over the sample catalog.

    Settings use a page size of 2 so pagination shows up with five products.
    ``TODAY`` is pinned as the reference day. The metrics and store are
    accessible as ``client.metrics`` and ``client.store``.
    """
    metrics = CatalogMetrics()
    store = CatalogStore(
        catalog_file, TTLCache(ttl_seconds=60.0, max_size=1, clock=fake_clock), metrics=metrics
    )
    settings = ServiceSettings(
        catalog_path=str(catalog_file), listing=ListingConfig(page_size=2)
    )

    app.dependency_overrides[get_catalog_store] = lambda: store
    app.dependency_overrides[get_metrics] = lambda: metrics
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_today] = lambda: TODAY

    with TestClient(app) as c:
        c.metrics = metrics  # type: ignore[attr-defined]
        c.store = store  # type: ignore[attr-defined]
        yield c

    app.dependency_overrides.clear()
