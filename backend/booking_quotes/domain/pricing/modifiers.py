from decimal import Decimal
from typing import Any, List, Mapping, Sequence

from booking_quotes.domain.pricing.models import ModifierEffect, ModifierRule, QuoteLine
from booking_quotes.domain.pricing.money import HUNDRED, clamp_percent, to_decimal, to_minor


def rule_fires(rule: ModifierRule, answers: Mapping[str, Any]) -> bool:
    answer = answers.get(rule.condition.answer_key)
    # 1 == True in Python; only a real boolean answer may match
    return isinstance(answer, bool) and answer == rule.condition.expected_value


def effect_delta(effect: ModifierEffect, *, base_after_frequency: Decimal, subtotal_before_modifiers: Decimal) -> Decimal:
    if effect.mode == "percent":
        target = base_after_frequency if effect.applies_to == "base_after_frequency" else subtotal_before_modifiers
        delta = target * clamp_percent(effect.magnitude) / HUNDRED
    else:
        delta = to_decimal(effect.magnitude)
    return -delta if effect.direction == "decrease" else delta


def evaluate_modifiers(
    rules: Sequence[ModifierRule],
    answers: Mapping[str, Any],
    *,
    base_after_frequency: Decimal,
    subtotal_before_modifiers: Decimal,
    subtotal_minor: int,
) -> List[QuoteLine]:
    """Build one line per fired rule, in declaration order.

    Every rule sees the same pre-modifier amounts; rules do not compound. A
    decrease is capped at whatever is left of the ex-VAT subtotal so the
    running amount never goes negative.
    """
    lines: List[QuoteLine] = []
    running_minor = subtotal_minor
    for rule in rules:
        if not rule_fires(rule, answers):
            continue
        amount_minor = to_minor(
            effect_delta(
                rule.effect,
                base_after_frequency=base_after_frequency,
                subtotal_before_modifiers=subtotal_before_modifiers,
            )
        )
        if amount_minor < 0:
            amount_minor = max(amount_minor, -max(running_minor, 0))
        if amount_minor == 0:
            continue
        running_minor += amount_minor
        lines.append(
            QuoteLine(
                key=f"modifier:{rule.key}",
                label=rule.effect.label or rule.label,
                tax_deduction_eligible=rule.effect.tax_deduction_eligible,
                amount_minor=amount_minor,
            )
        )
    return lines
