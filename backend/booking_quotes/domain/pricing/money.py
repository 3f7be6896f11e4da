from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

MINOR_UNITS_PER_MAJOR = Decimal("100")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Decimal | float | int | str | None) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return ZERO


def round_minor(amount_minor: Decimal) -> int:
    """Round a fractional minor-unit amount half away from zero."""
    return int(amount_minor.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_minor(amount_major: Decimal | float | int) -> int:
    return round_minor(to_decimal(amount_major) * MINOR_UNITS_PER_MAJOR)


def percent_of_minor(amount_minor: int, percent: Decimal | float | int) -> int:
    return round_minor(Decimal(amount_minor) * to_decimal(percent) / HUNDRED)


def clamp_percent(percent: Decimal | float | int) -> Decimal:
    return min(max(to_decimal(percent), ZERO), HUNDRED)


def format_minor(amount_minor: int, currency: str) -> str:
    sign = "-" if amount_minor < 0 else ""
    major, minor = divmod(abs(amount_minor), int(MINOR_UNITS_PER_MAJOR))
    return f"{sign}{major}.{minor:02d} {currency}"
