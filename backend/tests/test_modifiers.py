from decimal import Decimal

from booking_quotes.domain.pricing.models import ModifierRule
from booking_quotes.domain.pricing.modifiers import evaluate_modifiers, rule_fires


def _rule(key: str, answer_key: str, expected: bool = True, **effect) -> ModifierRule:
    return ModifierRule.model_validate(
        {
            "key": key,
            "label": key.title(),
            "condition": {"kind": "boolean", "expected_value": expected, "answer_key": answer_key},
            "effect": {"mode": "percent", "magnitude": 10, **effect},
        }
    )


def _evaluate(rules, answers, base=Decimal("1000"), subtotal=Decimal("1500")):
    return evaluate_modifiers(
        rules,
        answers,
        base_after_frequency=base,
        subtotal_before_modifiers=subtotal,
        subtotal_minor=int(subtotal * 100),
    )


def test_rule_fires_only_on_exact_boolean_match():
    rule = _rule("pets", "has_pets")
    assert rule_fires(rule, {"has_pets": True})
    assert not rule_fires(rule, {"has_pets": False})
    assert not rule_fires(rule, {"has_pets": 1})
    assert not rule_fires(rule, {"has_pets": "true"})
    assert not rule_fires(rule, {})


def test_rule_can_expect_false():
    rule = _rule("no_elevator", "has_elevator", expected=False)
    assert rule_fires(rule, {"has_elevator": False})
    assert not rule_fires(rule, {})


def test_percent_on_base_after_frequency():
    lines = _evaluate([_rule("pets", "has_pets", applies_to="base_after_frequency")], {"has_pets": True})
    assert lines[0].key == "modifier:pets"
    assert lines[0].amount_minor == 10000


def test_percent_on_subtotal_before_modifiers():
    lines = _evaluate([_rule("pets", "has_pets", applies_to="subtotal_before_modifiers")], {"has_pets": True})
    assert lines[0].amount_minor == 15000


def test_percent_magnitude_is_clamped_to_one_hundred():
    lines = _evaluate([_rule("huge", "flag", magnitude=250, applies_to="base_after_frequency")], {"flag": True})
    assert lines[0].amount_minor == 100000


def test_fixed_decrease_is_negative():
    rule = _rule("returning", "returning_customer", mode="fixed", magnitude=150, direction="decrease")
    lines = _evaluate([rule], {"returning_customer": True})
    assert lines[0].amount_minor == -15000


def test_modifiers_do_not_cascade():
    rules = [
        _rule("first", "a", magnitude=10),
        _rule("second", "b", magnitude=10),
    ]
    lines = _evaluate(rules, {"a": True, "b": True})
    assert [line.amount_minor for line in lines] == [15000, 15000]


def test_zero_delta_lines_are_omitted():
    rules = [_rule("nothing", "flag", magnitude=0), _rule("something", "flag", magnitude=1)]
    lines = _evaluate(rules, {"flag": True})
    assert [line.key for line in lines] == ["modifier:something"]


def test_decrease_cannot_push_subtotal_below_zero():
    rules = [
        _rule("big_discount", "a", mode="fixed", magnitude=1000, direction="decrease"),
        _rule("another", "b", mode="fixed", magnitude=1000, direction="decrease"),
    ]
    lines = _evaluate(rules, {"a": True, "b": True})
    assert [line.amount_minor for line in lines] == [-100000, -50000]


def test_effect_label_overrides_rule_label():
    rule = _rule("pets", "has_pets", label="Pet surcharge")
    lines = _evaluate([rule], {"has_pets": True})
    assert lines[0].label == "Pet surcharge"
    lines = _evaluate([_rule("pets", "has_pets")], {"has_pets": True})
    assert lines[0].label == "Pets"


def test_eligibility_comes_from_effect():
    rule = _rule("deep", "deep_clean", tax_deduction_eligible=True)
    lines = _evaluate([rule], {"deep_clean": True})
    assert lines[0].tax_deduction_eligible is True
