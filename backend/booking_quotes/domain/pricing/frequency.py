from decimal import Decimal
from typing import List, Optional

from booking_quotes.domain.pricing.errors import UnknownFrequency
from booking_quotes.domain.pricing.models import BUILTIN_FREQUENCY_KEYS, DEFAULT_FREQUENCY_KEY
from booking_quotes.domain.pricing.money import to_decimal


def list_allowed_frequency_keys(service) -> List[str]:
    keys = list(BUILTIN_FREQUENCY_KEYS)
    keys.extend(key for key in service.frequency_multipliers if key not in keys)
    keys.extend(option.key for option in service.frequency_options if option.key not in keys)
    return keys


def resolve_frequency_key(service, frequency_key: Optional[str]) -> str:
    key = frequency_key or DEFAULT_FREQUENCY_KEY
    if key in service.frequency_multipliers or any(option.key == key for option in service.frequency_options):
        return key
    raise UnknownFrequency(
        detail=f"Unknown frequency '{key}'",
        requested_key=key,
        allowed_keys=list_allowed_frequency_keys(service),
    )


def resolve_frequency_multiplier(service, frequency_key: Optional[str]) -> Decimal:
    """Map a requested frequency to its multiplier.

    Keys configured in ``frequency_multipliers`` win over custom
    ``frequency_options``. A key found in neither raises ``UnknownFrequency``
    instead of falling back to 1.0 so a typo never silently misprices a quote.
    """
    key = resolve_frequency_key(service, frequency_key)
    if key in service.frequency_multipliers:
        return to_decimal(service.frequency_multipliers[key])
    return next(to_decimal(option.multiplier) for option in service.frequency_options if option.key == key)
