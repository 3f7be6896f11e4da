import logging

from fastapi import APIRouter, Depends

from booking_quotes.dependencies import get_app_settings, get_service_catalog
from booking_quotes.domain.pricing.catalog_loader import ServiceCatalog
from booking_quotes.domain.pricing.engine import compute_quote
from booking_quotes.domain.pricing.frequency import list_allowed_frequency_keys
from booking_quotes.domain.pricing.money import format_minor
from booking_quotes.domain.pricing.models import (
    QuoteBreakdown,
    QuoteOptions,
    QuoteRequest,
    ServiceCatalogResponse,
    ServiceSummary,
)
from booking_quotes.domain.pricing.validation import build_quote_request
from booking_quotes.settings import Settings

router = APIRouter()
logger = logging.getLogger(__name__)


def _log_quote(breakdown: QuoteBreakdown, service_id: str | None = None) -> None:
    logger.info(
        "quote_computed",
        extra={
            "extra": {
                "service_id": service_id,
                "model": breakdown.model,
                "frequency_key": breakdown.frequency_key,
                "currency": breakdown.currency,
                "total_minor": breakdown.total_minor,
                "total": format_minor(breakdown.total_minor, breakdown.currency),
            }
        },
    )


@router.post("/v1/quote", response_model=QuoteBreakdown)
async def create_quote(request: QuoteRequest) -> QuoteBreakdown:
    breakdown = compute_quote(request)
    _log_quote(breakdown)
    return breakdown


@router.post("/v1/services/{service_id}/quote", response_model=QuoteBreakdown)
async def create_service_quote(
    service_id: str,
    options: QuoteOptions,
    catalog: ServiceCatalog = Depends(get_service_catalog),
    app_settings: Settings = Depends(get_app_settings),
) -> QuoteBreakdown:
    service = catalog.get(service_id)
    request = build_quote_request(service, options, app_settings.default_tenant())
    breakdown = compute_quote(request)
    _log_quote(breakdown, service_id=service_id)
    return breakdown


@router.get("/v1/services", response_model=ServiceCatalogResponse)
async def list_services(catalog: ServiceCatalog = Depends(get_service_catalog)) -> ServiceCatalogResponse:
    return ServiceCatalogResponse(
        catalog_id=catalog.catalog_id,
        catalog_version=catalog.catalog_version,
        config_hash=catalog.config_hash,
        services=[
            ServiceSummary(
                service_id=service_id,
                name=catalog.services[service_id].name,
                model=catalog.services[service_id].model,
                frequency_keys=list_allowed_frequency_keys(catalog.services[service_id]),
                addon_keys=[addon.key for addon in catalog.services[service_id].addons],
            )
            for service_id in catalog.service_ids()
        ],
    )
