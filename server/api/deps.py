from __future__ import annotations

from functools import lru_cache

from backend.catalog import CatalogService, build_catalog_service
from server.api.settings import Settings

_SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return _SETTINGS


@lru_cache(maxsize=1)
def get_catalog_service() -> CatalogService:
    """Adapters + transportes + breaker se construyen una sola vez por proceso."""
    return build_catalog_service()
