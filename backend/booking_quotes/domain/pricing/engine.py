import logging
from decimal import Decimal
from typing import List

from booking_quotes.domain.pricing.base_price import compute_base
from booking_quotes.domain.pricing.discount import compute_discount_minor, discount_label
from booking_quotes.domain.pricing.dynamic import compile_dynamic_modifiers, expand_answers
from booking_quotes.domain.pricing.errors import InvariantViolation
from booking_quotes.domain.pricing.frequency import resolve_frequency_key, resolve_frequency_multiplier
from booking_quotes.domain.pricing.line_items import build_addon_lines, build_fee_lines
from booking_quotes.domain.pricing.models import QuoteBreakdown, QuoteLine, QuoteRequest
from booking_quotes.domain.pricing.modifiers import evaluate_modifiers
from booking_quotes.domain.pricing.money import MINOR_UNITS_PER_MAJOR, to_minor
from booking_quotes.domain.pricing.tax import (
    compute_tax_deduction_minor,
    compute_vat_minor,
    resolve_vat_rate_percent,
    tax_deduction_applies,
)

logger = logging.getLogger(__name__)

VAT_LINE_KEY = "vat"
TAX_DEDUCTION_LINE_KEY = "tax_deduction"
DISCOUNT_LINE_KEY = "discount"


def _major(amount_minor: int) -> Decimal:
    return Decimal(amount_minor) / MINOR_UNITS_PER_MAJOR


def _violation(message: str, **context) -> InvariantViolation:
    logger.error("quote_invariant_violation", extra={"extra": {"reason": message, **context}})
    return InvariantViolation(message)


def assemble_breakdown(
    *,
    currency: str,
    model: str,
    frequency_key: str,
    priced_lines: List[QuoteLine],
    vat_line: QuoteLine,
    tax_deduction_line: QuoteLine | None,
    discount_line: QuoteLine | None,
    pre_discount_total_minor: int,
) -> QuoteBreakdown:
    """Order the lines and check that the totals reconcile to the minor unit.

    ``pre_discount_total_minor`` is the running total the coupon was priced
    against; the lines before the discount must add up to it exactly.
    """
    lines = [*priced_lines, vat_line]
    if tax_deduction_line is not None:
        lines.append(tax_deduction_line)
    if discount_line is not None:
        lines.append(discount_line)

    for line in lines:
        if not isinstance(line.amount_minor, int):
            raise _violation("line amount is not an integer", line_key=line.key)

    subtotal = sum(line.amount_minor for line in priced_lines)
    vat = vat_line.amount_minor
    deduction = tax_deduction_line.amount_minor if tax_deduction_line else 0
    discount = discount_line.amount_minor if discount_line else 0
    total = sum(line.amount_minor for line in lines)

    if subtotal < 0:
        raise _violation("subtotal is negative", subtotal_minor=subtotal)
    if deduction > 0 or discount > 0:
        raise _violation("deduction and discount must not be positive", deduction_minor=deduction, discount_minor=discount)
    if subtotal + vat + deduction != pre_discount_total_minor:
        raise _violation(
            "lines do not add up to the pre-discount total",
            pre_discount_total_minor=pre_discount_total_minor,
            lines_minor=subtotal + vat + deduction,
        )
    if total < 0:
        raise _violation("total is negative", total_minor=total)

    return QuoteBreakdown(
        currency=currency,
        model=model,
        frequency_key=frequency_key,
        lines=lines,
        subtotal_ex_vat_minor=subtotal,
        vat_minor=vat,
        tax_deduction_minor=deduction,
        discount_minor=discount,
        total_minor=total,
    )


def compute_quote(request: QuoteRequest) -> QuoteBreakdown:
    tenant = request.tenant
    service = request.service

    frequency_key = resolve_frequency_key(service, request.frequency_key)
    multiplier = resolve_frequency_multiplier(service, frequency_key)
    base_after_frequency = compute_base(service, request.inputs) * multiplier
    base_line = QuoteLine(
        key="base",
        label=service.name,
        tax_deduction_eligible=service.tax_deduction_eligible,
        amount_minor=to_minor(base_after_frequency),
    )

    priced_lines = [base_line]
    priced_lines.extend(build_addon_lines(service.addons, request.selected_addons))
    priced_lines.extend(build_fee_lines(service.fees))
    pre_modifier_minor = sum(line.amount_minor for line in priced_lines)

    priced_lines.extend(
        evaluate_modifiers(
            [*service.modifiers, *compile_dynamic_modifiers(service)],
            expand_answers(service, request.answers),
            base_after_frequency=_major(base_line.amount_minor),
            subtotal_before_modifiers=_major(pre_modifier_minor),
            subtotal_minor=pre_modifier_minor,
        )
    )
    subtotal_minor = sum(line.amount_minor for line in priced_lines)

    vat_rate = resolve_vat_rate_percent(tenant, service)
    vat_line = QuoteLine(
        key=VAT_LINE_KEY,
        label=f"VAT {vat_rate:g}%",
        amount_minor=compute_vat_minor(subtotal_minor, vat_rate),
    )

    tax_deduction_line = None
    deduction_minor = 0
    if tax_deduction_applies(tenant, service, request.apply_tax_deduction):
        deduction_minor = compute_tax_deduction_minor(
            priced_lines,
            rate_percent=tenant.tax_deduction_rate_percent,
            pre_deduction_total_minor=subtotal_minor + vat_line.amount_minor,
            cap_major=tenant.tax_deduction_cap_major,
        )
        if deduction_minor:
            tax_deduction_line = QuoteLine(
                key=TAX_DEDUCTION_LINE_KEY,
                label=f"Tax deduction {tenant.tax_deduction_rate_percent:g}%",
                amount_minor=deduction_minor,
            )

    discount_line = None
    pre_discount_minor = subtotal_minor + vat_line.amount_minor + deduction_minor
    discount_minor = compute_discount_minor(request.coupon, pre_discount_minor)
    if discount_minor:
        discount_line = QuoteLine(
            key=DISCOUNT_LINE_KEY,
            label=discount_label(request.coupon),
            amount_minor=discount_minor,
        )

    return assemble_breakdown(
        currency=tenant.currency,
        model=service.model,
        frequency_key=frequency_key,
        priced_lines=priced_lines,
        vat_line=vat_line,
        tax_deduction_line=tax_deduction_line,
        discount_line=discount_line,
        pre_discount_total_minor=pre_discount_minor,
    )
