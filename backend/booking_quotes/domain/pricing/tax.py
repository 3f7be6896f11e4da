from typing import Optional, Sequence

from booking_quotes.domain.pricing.models import QuoteLine, TenantContext
from booking_quotes.domain.pricing.money import percent_of_minor, to_minor


def resolve_vat_rate_percent(tenant: TenantContext, service) -> float:
    if service.vat_rate_percent is not None:
        return service.vat_rate_percent
    return tenant.vat_rate_percent


def compute_vat_minor(subtotal_ex_vat_minor: int, vat_rate_percent: float) -> int:
    if subtotal_ex_vat_minor <= 0:
        return 0
    return percent_of_minor(subtotal_ex_vat_minor, vat_rate_percent)


def tax_deduction_applies(tenant: TenantContext, service, apply_tax_deduction: bool) -> bool:
    return bool(tenant.tax_deduction_enabled and service.tax_deduction_eligible and apply_tax_deduction)


def compute_tax_deduction_minor(
    priced_lines: Sequence[QuoteLine],
    *,
    rate_percent: float,
    pre_deduction_total_minor: int,
    cap_major: Optional[float] = None,
) -> int:
    """Return the (non-positive) deduction for the eligible ex-VAT lines.

    Only lines flagged ``tax_deduction_eligible`` count. The deduction is
    ``rate_percent`` of their sum, limited by the optional cap and by the
    pre-deduction total so the quote can never go negative.
    """
    eligible_minor = sum(line.amount_minor for line in priced_lines if line.tax_deduction_eligible)
    if eligible_minor <= 0:
        return 0
    deduction = percent_of_minor(eligible_minor, rate_percent)
    if cap_major is not None:
        deduction = min(deduction, to_minor(cap_major))
    deduction = min(deduction, max(pre_deduction_total_minor, 0))
    return -deduction
