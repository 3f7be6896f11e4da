from functools import lru_cache

from fastapi import Request

from booking_quotes.domain.pricing.catalog_loader import ServiceCatalog, load_service_catalog
from booking_quotes.settings import Settings, settings


@lru_cache
def _load_default_catalog(path: str) -> ServiceCatalog:
    return load_service_catalog(path)


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "app_settings", None) or settings


def get_service_catalog(request: Request) -> ServiceCatalog:
    catalog = getattr(request.app.state, "service_catalog", None)
    if catalog is None:
        catalog = _load_default_catalog(get_app_settings(request).service_catalog_path)
        request.app.state.service_catalog = catalog
    return catalog
