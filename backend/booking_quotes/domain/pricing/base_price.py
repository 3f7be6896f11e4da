import logging
from decimal import Decimal
from typing import Callable, Dict, Mapping, Optional, Sequence, TypeVar

from booking_quotes.domain.pricing.errors import ConfigurationError
from booking_quotes.domain.pricing.models import (
    FixedTierService,
    HourlyAreaService,
    PerRoomService,
    QuoteInputs,
    TieredMultiplierService,
    UniversalMultiplierService,
    WindowsService,
)
from booking_quotes.domain.pricing.money import ZERO, to_decimal

logger = logging.getLogger(__name__)

TierT = TypeVar("TierT")


def _find_tier(tiers: Sequence[TierT], area: Decimal) -> Optional[TierT]:
    for tier in tiers:
        if to_decimal(tier.min) <= area <= to_decimal(tier.max):
            return tier
    return None


def _area(inputs: QuoteInputs) -> Decimal:
    return max(to_decimal(inputs.area), ZERO)


def _apply_minimum(raw: Decimal, minimum_major: float) -> Decimal:
    minimum = to_decimal(minimum_major)
    if ZERO < raw < minimum:
        return minimum
    return raw


def _sum_counts(counts: Mapping[str, int], prices: Mapping[str, float]) -> Decimal:
    total = ZERO
    for key, price in prices.items():
        total += Decimal(max(counts.get(key, 0), 0)) * to_decimal(price)
    return total


def _log_tier_gap(service_name: str, area: Decimal) -> None:
    logger.debug("pricing_tier_gap", extra={"extra": {"service": service_name, "area": str(area)}})


def _fixed_tier_base(service: FixedTierService, inputs: QuoteInputs) -> Decimal:
    area = _area(inputs)
    if area <= 0:
        return ZERO
    tier = _find_tier(service.tiers, area)
    if tier is None:
        _log_tier_gap(service.name, area)
        return ZERO
    return to_decimal(tier.price)


def _tiered_multiplier_base(service: TieredMultiplierService, inputs: QuoteInputs) -> Decimal:
    area = _area(inputs)
    if area <= 0:
        return ZERO
    tier = _find_tier(service.tiers, area)
    if tier is None:
        _log_tier_gap(service.name, area)
        return ZERO
    return _apply_minimum(area * to_decimal(tier.rate_per_sqm), service.minimum_charge_major)


def _universal_multiplier_base(service: UniversalMultiplierService, inputs: QuoteInputs) -> Decimal:
    raw = _area(inputs) * to_decimal(service.rate_per_sqm)
    return _apply_minimum(raw, service.minimum_charge_major)


def _windows_base(service: WindowsService, inputs: QuoteInputs) -> Decimal:
    prices = {window.key: window.price_per_unit for window in service.window_types}
    raw = _sum_counts(inputs.window_counts, prices)
    return _apply_minimum(raw, service.minimum_charge_major)


def _hourly_area_base(service: HourlyAreaService, inputs: QuoteInputs) -> Decimal:
    area = _area(inputs)
    if area <= 0:
        return ZERO
    tier = _find_tier(service.area_to_hours, area)
    if tier is None:
        _log_tier_gap(service.name, area)
        return ZERO
    raw = to_decimal(tier.hours) * to_decimal(service.hourly_rate)
    return _apply_minimum(raw, service.minimum_charge_major)


def _per_room_base(service: PerRoomService, inputs: QuoteInputs) -> Decimal:
    prices = {room.key: room.price_per_room for room in service.room_types}
    raw = _sum_counts(inputs.rooms, prices)
    return _apply_minimum(raw, service.minimum_charge_major)


BASE_CALCULATORS: Dict[str, Callable[..., Decimal]] = {
    "fixed_tier": _fixed_tier_base,
    "tiered_multiplier": _tiered_multiplier_base,
    "universal_multiplier": _universal_multiplier_base,
    "windows": _windows_base,
    "hourly_area": _hourly_area_base,
    "per_room": _per_room_base,
}


def compute_base(service, inputs: QuoteInputs) -> Decimal:
    """Return the pre-frequency base amount in major units for the service's pricing model."""
    calculator = BASE_CALCULATORS.get(service.model)
    if calculator is None:
        raise ConfigurationError(detail=f"Unsupported pricing model '{service.model}'")
    return calculator(service, inputs)
