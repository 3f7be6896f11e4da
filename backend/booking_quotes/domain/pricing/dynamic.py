"""Compile form-builder questions into boolean modifier rules.

Radio and multi-checkbox answers are expanded into one boolean flag per
option (``{question}__is__{value}`` / ``{question}__has__{value}``), so the
modifier evaluator only ever has to compare booleans.
"""
from typing import Any, Dict, List, Mapping

from booking_quotes.domain.pricing.models import (
    BooleanCondition,
    CheckboxMultiQuestion,
    CheckboxQuestion,
    ModifierEffect,
    ModifierRule,
    RadioQuestion,
)


def radio_answer_key(question_key: str, value: str) -> str:
    return f"{question_key}__is__{value}"


def multi_answer_key(question_key: str, value: str) -> str:
    return f"{question_key}__has__{value}"


def expand_answers(service, answers: Mapping[str, Any]) -> Dict[str, Any]:
    expanded: Dict[str, Any] = dict(answers or {})
    for question in service.dynamic_questions:
        answer = expanded.get(question.key)
        if isinstance(question, RadioQuestion):
            for option in question.options:
                expanded[radio_answer_key(question.key, option.value)] = answer == option.value
        elif isinstance(question, CheckboxMultiQuestion):
            chosen = answer if isinstance(answer, (list, tuple, set)) else []
            for option in question.options:
                expanded[multi_answer_key(question.key, option.value)] = option.value in chosen
    return expanded


def _compiled_rule(key: str, label: str, answer_key: str, impact: ModifierEffect) -> ModifierRule:
    return ModifierRule(
        key=key,
        label=label,
        condition=BooleanCondition(expected_value=True, answer_key=answer_key),
        effect=impact.model_copy(update={"tax_deduction_eligible": False}),
    )


def compile_dynamic_modifiers(service) -> List[ModifierRule]:
    rules: List[ModifierRule] = []
    for question in service.dynamic_questions:
        if isinstance(question, CheckboxQuestion):
            if question.impact is not None:
                rules.append(_compiled_rule(f"dyn_{question.key}", question.label, question.key, question.impact))
            continue
        if isinstance(question, (RadioQuestion, CheckboxMultiQuestion)):
            key_for = radio_answer_key if isinstance(question, RadioQuestion) else multi_answer_key
            for option in question.options:
                if option.impact is None:
                    continue
                rules.append(
                    _compiled_rule(
                        f"dyn_{question.key}_{option.value}",
                        f"{question.label}: {option.label or option.value}",
                        key_for(question.key, option.value),
                        option.impact,
                    )
                )
    return rules
