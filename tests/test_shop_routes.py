"""
Tests for the ``/shop`` routes, ``/health``, ``/metrics`` and cache control.

All requests go through the ``api_client`` fixture: sample catalog, page
size 2, today pinned to 15 January 2025 (week ``0325``).
"""

import json
from pathlib import Path

from api.deps import get_catalog_store
from api.main import app
from infrastructure.cache import TTLCache
from ingestion.catalog_store import CatalogStore


def _ids(body: dict) -> list[str]:
    return [product["_id"] for product in body["products"]]


def _requests(client, filter_type: str, status: str) -> float | None:
    return client.metrics.registry.get_sample_value(
        "catalog_listing_requests_total", {"filter_type": filter_type, "status": status}
    )


class TestFilteredListing:
    """GET /shop/{filter_type}/{slug}"""

    def test_genre_uses_catalog_submenu(self, api_client) -> None:
        resp = api_client.get("/shop/genre/jazz")
        assert resp.status_code == 200
        body = resp.json()
        assert _ids(body) == ["p3", "p4"]
        assert body["total"] == 2
        assert body["filter"]["type"] == "genre"
        assert body["filter"]["display_name"] == "Jazz"
        assert "Soul-Jazz" in body["filter"]["match_tokens"]

    def test_vinyl_size_display_name(self, api_client) -> None:
        body = api_client.get("/shop/format/12").json()
        assert body["filter"]["display_name"] == '12"'
        assert _ids(body) == ["p2"]

    def test_sort_and_order(self, api_client) -> None:
        body = api_client.get("/shop/format/lp", params={"sort": "price", "order": "asc"}).json()
        assert _ids(body) == ["p3", "p1"]

    def test_week_defaults_to_menu_order(self, api_client) -> None:
        body = api_client.get("/shop/week/0325").json()
        assert _ids(body) == ["p2", "p1"]
        assert body["filter"]["display_name"] == "Week 3, 2025"

    def test_pagination_meta(self, api_client) -> None:
        body = api_client.get("/shop/format/vinyl").json()
        assert body["total"] == 3
        assert body["pagination"] == {
            "current_page": 1,
            "total_pages": 2,
            "entries": [1, 2],
            "offset": 0,
            "limit": 2,
            "previous_page": None,
            "next_page": 2,
        }

    def test_out_of_range_page_is_clamped(self, api_client) -> None:
        body = api_client.get("/shop/format/vinyl", params={"page": 99}).json()
        assert body["pagination"]["current_page"] == 2
        assert body["pagination"]["offset"] == 2

    def test_unknown_slug_is_empty(self, api_client) -> None:
        resp = api_client.get("/shop/label/no-such-label")
        assert resp.status_code == 200
        body = resp.json()
        assert body["products"] == []
        assert body["pagination"]["entries"] == []
        assert _requests(api_client, "label", "empty") == 1.0

    def test_unknown_filter_type_is_404(self, api_client) -> None:
        resp = api_client.get("/shop/color/red")
        assert resp.status_code == 404
        assert "color" in resp.json()["detail"]
        assert _requests(api_client, "unknown", "invalid") == 1.0

    def test_malformed_week_is_404(self, api_client) -> None:
        resp = api_client.get("/shop/week/wk12")
        assert resp.status_code == 404
        assert _requests(api_client, "week", "invalid") == 1.0

    def test_bad_sort_is_404(self, api_client) -> None:
        assert api_client.get("/shop/genre/house", params={"sort": "hype"}).status_code == 404

    def test_success_is_counted(self, api_client) -> None:
        api_client.get("/shop/genre/jazz")
        assert _requests(api_client, "genre", "ok") == 1.0


class TestNewArrivals:
    """GET /shop/new and /shop/new/sections"""

    def test_newest_week_first(self, api_client) -> None:
        body = api_client.get("/shop/new").json()
        assert body["total"] == 4
        assert _ids(body) == ["p2", "p1"]
        assert body["current_week"] == "0325"
        assert body["weeks"] == ["0325", "0225", "0125", "5224", "5124"]
        assert body["filter"] is None

    def test_second_page(self, api_client) -> None:
        body = api_client.get("/shop/new", params={"page": 2}).json()
        assert _ids(body) == ["p3", "p4"]
        assert body["pagination"]["previous_page"] == 1
        assert body["pagination"]["next_page"] is None

    def test_week_count(self, api_client) -> None:
        body = api_client.get("/shop/new", params={"weeks": 1}).json()
        assert body["total"] == 2
        assert body["weeks"] == ["0325"]

    def test_week_count_must_be_positive(self, api_client) -> None:
        assert api_client.get("/shop/new", params={"weeks": 0}).status_code == 422

    def test_sections(self, api_client) -> None:
        body = api_client.get("/shop/new/sections").json()
        sections = body["sections"]
        assert [s["value"] for s in sections] == ["0325", "0225", "5224", "4024"]
        assert sections[0]["display_name"] == "Week 3, 2025"
        assert sections[0]["product_count"] == 2
        assert [p["_id"] for p in sections[0]["products"]] == ["p2", "p1"]

    def test_section_preview_size(self, api_client) -> None:
        body = api_client.get("/shop/new/sections", params={"per_week": 1}).json()
        assert body["sections"][0]["product_count"] == 2
        assert len(body["sections"][0]["products"]) == 1

    def test_sections_on_calendar_window(self, api_client) -> None:
        body = api_client.get("/shop/new/sections", params={"stocked": False}).json()
        assert [s["value"] for s in body["sections"]] == ["0325", "0225", "5224"]

    def test_stocked_new_arrivals(self, api_client) -> None:
        body = api_client.get("/shop/new", params={"stocked": True}).json()
        assert body["weeks"] == ["0325", "0225", "5224", "4024"]
        assert body["total"] == 5
        assert body["current_week"] == "0325"


class TestWeeksIndex:
    """GET /shop/weeks"""

    def test_counts_per_week(self, api_client) -> None:
        weeks = api_client.get("/shop/weeks").json()["weeks"]
        assert [(w["value"], w["product_count"]) for w in weeks] == [
            ("0325", 2),
            ("0225", 1),
            ("5224", 1),
            ("4024", 1),
        ]

    def test_include_empty(self, api_client) -> None:
        weeks = api_client.get("/shop/weeks", params={"count": 3, "include_empty": True}).json()
        assert [w["value"] for w in weeks["weeks"]] == ["0325", "0225", "0125"]


class TestFilterValues:
    """GET /shop/filters/{filter_type}"""

    def test_static_genres(self, api_client) -> None:
        values = api_client.get("/shop/filters/genre").json()["values"]
        assert {"slug": "hip-hop", "display_name": "Hip-Hop"} in values

    def test_static_formats(self, api_client) -> None:
        values = api_client.get("/shop/filters/format").json()["values"]
        assert {"slug": "12", "display_name": '12"'} in values

    def test_labels_from_catalog(self, api_client) -> None:
        values = api_client.get("/shop/filters/label").json()["values"]
        assert {"slug": "strut--records", "display_name": "Strut & Records"} in values
        assert [v["slug"] for v in values] == sorted(v["slug"] for v in values)

    def test_every_listed_name_has_products(self, api_client, tmp_path: Path, fake_clock) -> None:
        path = tmp_path / "names.json"
        path.write_text(
            json.dumps(
                [
                    {"_id": "n1", "artist": "McCoy Tyner", "label": "Rhythm and Sound"},
                    {"_id": "n2", "artist": ["DJ Shadow"], "label": [{"main": "MO WAX"}]},
                ]
            ),
            encoding="utf-8",
        )
        store = CatalogStore(path, TTLCache(ttl_seconds=60.0, clock=fake_clock))
        app.dependency_overrides[get_catalog_store] = lambda: store

        for dimension in ("artist", "label"):
            values = api_client.get(f"/shop/filters/{dimension}").json()["values"]
            assert len(values) == 2
            for value in values:
                body = api_client.get(f"/shop/{dimension}/{value['slug']}").json()
                assert body["total"] == 1, value

    def test_weeks_are_not_listed_here(self, api_client) -> None:
        assert api_client.get("/shop/filters/week").status_code == 404

    def test_unknown_type(self, api_client) -> None:
        assert api_client.get("/shop/filters/color").status_code == 404


class TestServiceEndpoints:
    """/health, /metrics, /cache/invalidate and loader failures."""

    def test_health(self, api_client) -> None:
        resp = api_client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_metrics_exposition(self, api_client) -> None:
        api_client.get("/shop/genre/jazz")
        resp = api_client.get("/metrics")
        assert resp.status_code == 200
        assert "catalog_listing_requests_total" in resp.text
        assert "catalog_products 5.0" in resp.text

    def test_cache_invalidate(self, api_client) -> None:
        assert api_client.post("/cache/invalidate").json() == {"invalidated": False}
        api_client.get("/shop/new")
        assert api_client.post("/cache/invalidate").json() == {"invalidated": True}

    def test_cache_stats(self, api_client) -> None:
        api_client.get("/shop/new")
        api_client.get("/shop/new")
        stats = api_client.get("/cache/stats").json()
        assert stats["entries"] == 1
        assert stats["hits"] == 1
        assert stats["misses"] == 1

    def test_unloadable_catalog_is_503(self, api_client, tmp_path: Path) -> None:
        broken = CatalogStore(tmp_path / "missing.json", TTLCache(ttl_seconds=60.0))
        app.dependency_overrides[get_catalog_store] = lambda: broken

        resp = api_client.get("/shop/genre/jazz")

        assert resp.status_code == 503
