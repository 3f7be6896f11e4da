import sys
from pathlib import Path
from typing import Any, Dict

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
from fastapi.testclient import TestClient

from booking_quotes.domain.pricing.catalog_loader import load_service_catalog
from booking_quotes.domain.pricing.models import QuoteRequest
from booking_quotes.main import create_app
from booking_quotes.settings import Settings

CATALOG_PATH = ROOT / "pricing" / "catalog_v1.json"
FREQUENCIES = {"one_time": 1.0, "weekly": 1.0, "biweekly": 1.15, "monthly": 1.4}


def make_service(model: str = "universal_multiplier", **overrides: Any) -> Dict[str, Any]:
    defaults: Dict[str, Dict[str, Any]] = {
        "fixed_tier": {
            "tiers": [
                {"min": 1, "max": 50, "price": 3000},
                {"min": 51, "max": 60, "price": 4000},
            ]
        },
        "tiered_multiplier": {
            "tiers": [
                {"min": 1, "max": 50, "rate_per_sqm": 40},
                {"min": 51, "max": 100, "rate_per_sqm": 35},
            ]
        },
        "universal_multiplier": {"rate_per_sqm": 50},
        "windows": {
            "window_types": [
                {"key": "standard", "name": "Standard", "price_per_unit": 60},
                {"key": "large", "name": "Large", "price_per_unit": 95},
            ]
        },
        "hourly_area": {
            "hourly_rate": 400,
            "area_to_hours": [
                {"min": 1, "max": 40, "hours": 2},
                {"min": 41, "max": 80, "hours": 3.5},
            ],
        },
        "per_room": {
            "room_types": [
                {"key": "bedroom", "name": "Bedroom", "price_per_room": 250},
                {"key": "bathroom", "name": "Bathroom", "price_per_room": 300},
            ]
        },
    }
    service: Dict[str, Any] = {
        "model": model,
        "name": "Home cleaning",
        "frequency_multipliers": dict(FREQUENCIES),
        **defaults[model],
    }
    service.update(overrides)
    return service


def make_request(service: Dict[str, Any] | None = None, **overrides: Any) -> QuoteRequest:
    payload: Dict[str, Any] = {
        "tenant": {"currency": "SEK", "vat_rate_percent": 0, "tax_deduction_enabled": False},
        "service": service if service is not None else make_service(),
        "frequency_key": "one_time",
        "inputs": {"area": 20},
    }
    payload.update(overrides)
    return QuoteRequest.model_validate(payload)


def assert_reconciles(breakdown) -> None:
    assert breakdown.total_minor == (
        breakdown.subtotal_ex_vat_minor
        + breakdown.vat_minor
        + breakdown.tax_deduction_minor
        + breakdown.discount_minor
    )
    assert breakdown.total_minor == sum(line.amount_minor for line in breakdown.lines)
    assert breakdown.total_minor >= 0
    assert all(isinstance(line.amount_minor, int) for line in breakdown.lines)


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(app_env="dev", log_level="DEBUG", service_catalog_path=str(CATALOG_PATH))


@pytest.fixture()
def catalog():
    return load_service_catalog(str(CATALOG_PATH))


@pytest.fixture()
def client(test_settings, catalog):
    app = create_app(test_settings)
    app.state.service_catalog = catalog
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def client_no_raise(test_settings, catalog):
    """Test client that returns HTTP responses instead of raising server exceptions."""
    app = create_app(test_settings)
    app.state.service_catalog = catalog
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
