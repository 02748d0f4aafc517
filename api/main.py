from typing import Annotated, Any

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from api.deps import get_catalog_store, get_metrics
from api.routes.shop import router as shop_router
from infrastructure.metrics import CatalogMetrics
from ingestion.catalog_store import CatalogStore

app = FastAPI(title="Record Shop Catalog")

# CORS: allow the storefront dev servers to call the API
# Browsers treat localhost and 127.0.0.1 as different origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(shop_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Return a simple liveness check."""
    return {"status": "ok"}


@app.get("/metrics")
def metrics(collectors: Annotated[CatalogMetrics, Depends(get_metrics)]) -> Response:
    """Prometheus metrics endpoint.

    Returns metrics in Prometheus text exposition format.
    """
    body, content_type = collectors.render()
    return Response(content=body, media_type=content_type)


@app.post("/cache/invalidate")
def cache_invalidate(
    store: Annotated[CatalogStore, Depends(get_catalog_store)],
) -> dict[str, bool]:
    """Drop the cached catalog snapshot.

    Call this after publishing a new catalog export so the next request
    re-reads the file instead of waiting for the TTL.

    Returns:
        Dict with ``invalidated``: whether a snapshot was cached.
    """
    return {"invalidated": store.invalidate()}


@app.get("/cache/stats")
def cache_stats(store: Annotated[CatalogStore, Depends(get_catalog_store)]) -> dict[str, Any]:
    """Return catalog snapshot cache statistics."""
    return store.cache_stats()
