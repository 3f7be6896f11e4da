from typing import Any, List, Mapping

from pydantic import TypeAdapter, ValidationError

from booking_quotes.domain.pricing.errors import ConfigurationError
from booking_quotes.domain.pricing.models import QuoteOptions, QuoteRequest, ServiceConfig, TenantContext

_SERVICE_ADAPTER: TypeAdapter = TypeAdapter(ServiceConfig)


def flatten_validation_errors(exc: ValidationError, prefix: str | None = None) -> List[dict]:
    errors = []
    for error in exc.errors():
        parts = [str(part) for part in error.get("loc", ())]
        if prefix:
            parts.insert(0, prefix)
        errors.append({"field": ".".join(parts) or "body", "message": error.get("msg", "Invalid value")})
    return errors


def parse_service_config(data: Mapping[str, Any], *, service_id: str | None = None):
    try:
        return _SERVICE_ADAPTER.validate_python(data)
    except ValidationError as exc:
        label = f"Service '{service_id}'" if service_id else "Service"
        raise ConfigurationError(
            detail=f"{label} configuration is invalid",
            errors=flatten_validation_errors(exc, prefix=service_id),
        ) from exc


def build_quote_request(service, options: QuoteOptions, default_tenant: TenantContext) -> QuoteRequest:
    """Combine a stored service with the customer's options into one frozen request."""
    return QuoteRequest(
        tenant=options.tenant or default_tenant,
        service=service,
        frequency_key=options.frequency_key,
        inputs=options.inputs,
        selected_addons=options.selected_addons,
        apply_tax_deduction=options.apply_tax_deduction,
        coupon=options.coupon,
        answers=options.answers,
    )
