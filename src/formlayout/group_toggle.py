"""
Group-Toggle Reducer.

Multi-select toggling for group items: selecting a value adds it to the
item's list, selecting it again removes it. Structured rows (dicts,
lists, dataclasses) are compared by deep structural equality.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Dict, List, Mapping, Union

from formlayout.condition_eval import strict_equal
from formlayout.model import Item

Group = Mapping[str, List[Any]]


def same_value(left: Any, right: Any) -> bool:
    """Deep equality that never equates a bool with a number."""
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return left.keys() == right.keys() and all(same_value(left[k], right[k]) for k in left)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(same_value(a, b) for a, b in zip(left, right))
    if dataclasses.is_dataclass(left) and dataclasses.is_dataclass(right):
        return type(left) is type(right) and all(
            same_value(getattr(left, f.name), getattr(right, f.name)) for f in dataclasses.fields(left)
        )
    return strict_equal(left, right)


def _item_name(item: Union[Item, Mapping[str, Any], str]) -> str:
    if isinstance(item, Item):
        return item.name
    if isinstance(item, Mapping):
        return item["name"]
    return item


def get_change_group(
    item: Union[Item, Mapping[str, Any], str],
    group: Group,
    set_group: Callable[[Dict[str, List[Any]]], None],
) -> Callable[[Any], None]:
    """
    Build the change handler for one group item.

    Args:
        item: The group item (or its name)
        group: Current selections, item name -> selected values
        set_group: Receives the new selections; the old map is never mutated

    Returns:
        A function taking the toggled value
    """
    name = _item_name(item)

    def change(value: Any) -> None:
        selected = group.get(name)
        if not selected:
            updated = [value]
        elif any(same_value(existing, value) for existing in selected):
            updated = [existing for existing in selected if not same_value(existing, value)]
        else:
            updated = list(selected) + [value]
        set_group({**group, name: updated})

    return change
