"""
Condition Trees for Form Layouts

Visibility and enablement rules attached to items are represented as
small recursive trees, never as strings of code.

A condition is either:
    - a leaf comparing one field of the form state against a value
    - an "and" node, true when every child is true
    - an "or" node, true when at least one child is true

ARCHITECTURAL RULE:
    This module is structure only.
    Evaluation lives in condition_eval.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class ConditionOperator(Enum):
    """
    Leaf operators supported in form conditions.

    EMPTY / NOT_EMPTY ignore the condition value.
    """

    EQUAL = "EQUAL"
    NOT_EQUAL = "NOT_EQUAL"
    EMPTY = "EMPTY"
    NOT_EMPTY = "NOT_EMPTY"


@dataclass(frozen=True)
class Condition:
    """
    A single node of a condition tree.

    Example:
        Show the "garage_size" item only when "has_garage" is "yes"
        and "garage_type" has been answered:

        Condition(and_=(
            Condition(field="has_garage", operator="EQUAL", value="yes"),
            Condition(field="garage_type", operator="NOT_EMPTY"),
        ))

    Properties:
        field: Name of the item whose entry is compared (leaf only)
        operator: Operator name (leaf only), normally a ConditionOperator value
        value: Value compared by EQUAL / NOT_EQUAL
        and_: Children combined with logical AND
        or_: Children combined with logical OR

    IMPORTANT:
        operator is kept as the raw string from the layout.
        An unknown operator is not a load error; it evaluates to False.
    """

    field: Optional[str] = None
    operator: Optional[str] = None
    value: Optional[Union[str, int, float, bool]] = None
    and_: Optional[Tuple["Condition", ...]] = None
    or_: Optional[Tuple["Condition", ...]] = None

    @property
    def is_leaf(self) -> bool:
        return self.and_ is None and self.or_ is None

    def fields(self) -> set:
        """All field names referenced anywhere in this tree."""
        found = set()
        if self.field:
            found.add(self.field)
        for child in (self.and_ or ()) + (self.or_ or ()):
            found |= child.fields()
        return found


@dataclass(frozen=True)
class ItemConditions:
    """
    Conditions attached to an item.

    show decides visibility (and, for scoring, whether the item counts).
    enable decides whether the item can be edited; it is carried through
    untouched for the caller's UI.
    """

    show: Optional[Condition] = None
    enable: Optional[Condition] = None
