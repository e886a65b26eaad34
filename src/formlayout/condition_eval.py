"""
Condition Evaluator.

Evaluates a Condition tree against a flat form state (item name -> entry).
Evaluation never raises: malformed nodes and unknown operators are False.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from formlayout.conditions import Condition, ConditionOperator


ConditionLike = Union[Condition, Mapping[str, Any]]


def is_empty(value: Any) -> bool:
    """None and "" are empty; everything else (0, False, []) is not."""
    return value is None or (isinstance(value, str) and value == "")


def strict_equal(left: Any, right: Any) -> bool:
    """
    Equality without cross-type coercion.

    A bool never equals a number, a string never equals a number,
    but 1 == 1.0.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    numeric = (int, float)
    if isinstance(left, numeric) and isinstance(right, numeric):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


def _children(condition: ConditionLike, key: str):
    if isinstance(condition, Condition):
        return condition.and_ if key == "and" else condition.or_
    return condition.get(key)


def _leaf(condition: ConditionLike):
    if isinstance(condition, Condition):
        return condition.field, condition.operator, condition.value
    return condition.get("field"), condition.get("operator"), condition.get("value")


def check_condition(condition: Optional[ConditionLike], form_state: Mapping[str, Any]) -> bool:
    """
    Evaluate one condition node.

    Args:
        condition: Condition or its dict form
        form_state: Flat map of item name -> entry

    Returns:
        True when the condition holds, False otherwise (including
        malformed conditions and unknown operators)
    """
    if not isinstance(condition, (Condition, Mapping)):
        return False

    and_children = _children(condition, "and")
    if and_children is not None:
        return all(check_condition(child, form_state) for child in and_children)

    or_children = _children(condition, "or")
    if or_children is not None:
        return any(check_condition(child, form_state) for child in or_children)

    field, operator, value = _leaf(condition)
    if not field or not operator:
        return False

    try:
        op = ConditionOperator(operator)
    except ValueError:
        return False

    field_value = form_state.get(field)
    if op is ConditionOperator.EQUAL:
        return strict_equal(field_value, value)
    if op is ConditionOperator.NOT_EQUAL:
        return not strict_equal(field_value, value)
    if op is ConditionOperator.NOT_EMPTY:
        return not is_empty(field_value)
    return is_empty(field_value)


def evaluate_condition(
    condition: Optional[ConditionLike] = None,
    form_state: Optional[Mapping[str, Any]] = None,
) -> bool:
    """Like check_condition, but True when there is nothing to gate on."""
    if condition is None or form_state is None:
        return True
    return check_condition(condition, form_state)
