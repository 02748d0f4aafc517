"""
Service settings for the shop API.

Read once from the environment (``.env`` supported via python-dotenv) and
frozen. The pure listing parameters live in ``core.catalog.config``; this
module only adds what the service shell needs on top.

Environment variables:
    CATALOG_PATH                 Catalog export (.json/.yaml). Default: data/catalog.json
    CATALOG_CACHE_TTL_SECONDS    Snapshot cache TTL. Default: 300
    CATALOG_PAGE_SIZE            Products per page. Default: 48
    CATALOG_NEW_ARRIVAL_WEEKS    Weeks on the New Arrivals page. Default: 5
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from core.catalog.config import DEFAULT_CONFIG, ListingConfig

_DEFAULT_CATALOG_PATH = "data/catalog.json"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class ServiceSettings:
    """
    Settings for the catalog HTTP service.

    Attributes:
        catalog_path: Catalog export read by ``CatalogStore``.
        cache_ttl_seconds: How long a loaded snapshot is served before the
            file is re-read.
        listing: Page size, pagination width and week windows.
    """

    catalog_path: str = _DEFAULT_CATALOG_PATH
    cache_ttl_seconds: float = 300.0
    listing: ListingConfig = field(default_factory=lambda: DEFAULT_CONFIG)

    def __post_init__(self) -> None:
        """Validate settings."""
        if not self.catalog_path:
            raise ValueError("catalog_path must not be empty")
        if self.cache_ttl_seconds <= 0:
            raise ValueError(f"cache_ttl_seconds must be positive, got {self.cache_ttl_seconds}")

    @classmethod
    def from_env(cls) -> "ServiceSettings":
        """Build settings from environment variables, loading ``.env`` first.

        Raises:
            ValueError: If a variable is set but malformed or out of range.
        """
        load_dotenv()
        listing = ListingConfig(
            page_size=_env_int("CATALOG_PAGE_SIZE", DEFAULT_CONFIG.page_size),
            new_arrival_weeks=_env_int(
                "CATALOG_NEW_ARRIVAL_WEEKS", DEFAULT_CONFIG.new_arrival_weeks
            ),
        )
        return cls(
            catalog_path=os.environ.get("CATALOG_PATH", _DEFAULT_CATALOG_PATH).strip()
            or _DEFAULT_CATALOG_PATH,
            cache_ttl_seconds=_env_float("CATALOG_CACHE_TTL_SECONDS", 300.0),
            listing=listing,
        )
