import logging
from typing import List, Sequence

from booking_quotes.domain.pricing.models import Addon, Fee, QuoteLine, SelectedAddon
from booking_quotes.domain.pricing.money import to_decimal, to_minor

logger = logging.getLogger(__name__)


def build_addon_lines(addons: Sequence[Addon], selections: Sequence[SelectedAddon]) -> List[QuoteLine]:
    by_key = {addon.key: addon for addon in addons}
    lines: List[QuoteLine] = []
    for selection in selections:
        addon = by_key.get(selection.key)
        if addon is None:
            logger.debug("addon_not_configured", extra={"extra": {"addon_key": selection.key}})
            continue
        amount = to_decimal(addon.amount_major)
        label = addon.display_name
        if addon.kind == "per_unit":
            amount *= selection.quantity
            label = f"{addon.display_name} x {selection.quantity}"
        lines.append(
            QuoteLine(
                key=f"addon:{addon.key}",
                label=label,
                tax_deduction_eligible=addon.tax_deduction_eligible,
                amount_minor=to_minor(amount),
            )
        )
    return lines


def build_fee_lines(fees: Sequence[Fee]) -> List[QuoteLine]:
    return [
        QuoteLine(
            key=f"fee:{fee.key}",
            label=fee.display_name,
            tax_deduction_eligible=fee.tax_deduction_eligible,
            amount_minor=to_minor(fee.amount_major),
        )
        for fee in fees
    ]
