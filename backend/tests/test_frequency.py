from decimal import Decimal

import pytest

from booking_quotes.domain.pricing.errors import ConfigurationError, UnknownFrequency
from booking_quotes.domain.pricing.frequency import (
    list_allowed_frequency_keys,
    resolve_frequency_key,
    resolve_frequency_multiplier,
)
from booking_quotes.domain.pricing.validation import parse_service_config
from tests.conftest import make_service


def _service(**overrides):
    return parse_service_config(make_service(**overrides))


def test_builtin_frequencies_resolve_from_multiplier_map():
    service = _service()
    assert resolve_frequency_multiplier(service, "one_time") == Decimal("1.0")
    assert resolve_frequency_multiplier(service, "biweekly") == Decimal("1.15")
    assert resolve_frequency_multiplier(service, "monthly") == Decimal("1.4")


def test_missing_frequency_defaults_to_one_time():
    service = _service(frequency_multipliers={"one_time": 1.0, "weekly": 0.9, "biweekly": 1.0, "monthly": 1.2})
    assert resolve_frequency_multiplier(service, None) == Decimal("1.0")
    assert resolve_frequency_multiplier(service, "") == Decimal("1.0")


def test_custom_frequency_option_is_used():
    service = _service(frequency_options=[{"key": "every_three_weeks", "label": "Every 3 weeks", "multiplier": 1.25}])
    assert resolve_frequency_multiplier(service, "every_three_weeks") == Decimal("1.25")


def test_builtin_key_wins_over_custom_option():
    service = _service(frequency_options=[{"key": "monthly", "label": "Monthly (custom)", "multiplier": 2}])
    assert resolve_frequency_multiplier(service, "monthly") == Decimal("1.4")


def test_unknown_frequency_lists_allowed_keys():
    service = _service(frequency_options=[{"key": "quarterly", "label": "Quarterly", "multiplier": 1.6}])
    with pytest.raises(UnknownFrequency) as exc_info:
        resolve_frequency_multiplier(service, "daily")
    error = exc_info.value
    assert error.requested_key == "daily"
    assert error.allowed_keys == ["one_time", "weekly", "biweekly", "monthly", "quarterly"]
    assert error.errors[0]["field"] == "frequency_key"
    assert error.errors[0]["allowed"] == error.allowed_keys


def test_extra_multiplier_keys_are_allowed():
    service = _service(frequency_multipliers={"one_time": 1, "weekly": 1, "biweekly": 1.15, "monthly": 1.4, "daily": 1.6})
    assert "daily" in list_allowed_frequency_keys(service)
    assert resolve_frequency_multiplier(service, "daily") == Decimal("1.6")


def test_extra_multiplier_keys_below_one_are_rejected():
    with pytest.raises(ConfigurationError) as exc_info:
        _service(frequency_multipliers={"one_time": 1, "weekly": 1, "biweekly": 1.15, "monthly": 1.4, "daily": 0.8})
    assert any(error["field"].endswith("frequency_multipliers") for error in exc_info.value.errors)


def test_builtin_multipliers_may_be_below_one():
    service = _service(frequency_multipliers={"one_time": 1.0, "weekly": 0.85, "biweekly": 0.9, "monthly": 1.0})
    assert resolve_frequency_multiplier(service, "weekly") == Decimal("0.85")


def test_empty_key_resolves_to_one_time():
    service = _service()
    assert resolve_frequency_key(service, "") == "one_time"
    assert resolve_frequency_key(service, None) == "one_time"
    assert resolve_frequency_key(service, "monthly") == "monthly"
