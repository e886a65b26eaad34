"""
Form-State Projector.

Converts between the flat form state a UI works with (item name -> entry)
and the tree shape of a layout:

    stage      schema -> default form state
    prepare    form state + schema -> sparse result tree
    unprepare  tree -> form state
"""

from __future__ import annotations

import copy
import re
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional

from formlayout.errors import DepthLimitError
from formlayout.model import DEFAULT_MAX_DEPTH, Config, Item, ItemType, Section


_LIST_SUBTYPE = re.compile("list", re.IGNORECASE)


def is_list_group(item: Item) -> bool:
    """A group whose sub_type mentions "list" holds rows, not a checkbox set."""
    return item.type == ItemType.GROUP and bool(_LIST_SUBTYPE.search(item.sub_type or ""))


def _is_blank(value: Any) -> bool:
    return isinstance(value, str) and value == ""


def stage(schema: Optional[Config] = None) -> Dict[str, Any]:
    """
    Build the initial form state of a layout.

    Every item gets its default, or "" when it has none ([] for list
    groups). Checkbox-set groups contribute their sub-items instead of
    themselves. File items never get a value.
    """
    if schema is None:
        return {}

    defaults: Dict[str, Any] = {}
    for section in schema.iter_sections():
        for item in section.items:
            if item.type == ItemType.FILE:
                continue

            if item.type == ItemType.GROUP and not is_list_group(item):
                for sub_item in item.sub_items or []:
                    if sub_item.type != ItemType.FILE:
                        defaults[sub_item.name] = copy.deepcopy(sub_item.default) if sub_item.default is not None else ""
                continue

            if item.default is not None:
                defaults[item.name] = copy.deepcopy(item.default)
            else:
                defaults[item.name] = [] if is_list_group(item) else ""
    return defaults


def _prepare_item(item: Item, form_state: Mapping[str, Any], depth: int) -> Item:
    if depth > DEFAULT_MAX_DEPTH:
        raise DepthLimitError(DEFAULT_MAX_DEPTH)
    entry = None
    # A "" value means the field was cleared; leaving entry out keeps it distinct.
    if item.name in form_state and not _is_blank(form_state[item.name]):
        entry = copy.deepcopy(form_state[item.name])
    sub_items = None
    if item.sub_items is not None:
        sub_items = [_prepare_item(sub_item, form_state, depth + 1) for sub_item in item.sub_items]
    return Item(
        name=item.name,
        entry=entry,
        comment=item.comment,
        media=copy.deepcopy(item.media),
        sub_items=sub_items,
    )


def _prepare_sections(sections: List[Section], form_state: Mapping[str, Any], depth: int) -> List[Section]:
    if depth > DEFAULT_MAX_DEPTH:
        raise DepthLimitError(DEFAULT_MAX_DEPTH)
    return [
        replace(
            section,
            items=[_prepare_item(item, form_state, depth) for item in section.items],
            sub_sections=_prepare_sections(section.sub_sections, form_state, depth + 1),
        )
        for section in sections
    ]


def prepare(form_state: Mapping[str, Any], schema: Config) -> Config:
    """
    Project a flat form state onto the layout shape.

    Items keep only name, entry, comment, media and their sub-items,
    which is exactly what compose needs as a result tree.
    """
    return replace(schema, sections=_prepare_sections(schema.sections, form_state, 1))


def unprepare(config: Config) -> Dict[str, Any]:
    """Flatten every non-empty entry of a tree (items and sub-items) into a form state."""
    form_state: Dict[str, Any] = {}
    for item in config.iter_items():
        if item.entry is not None and not _is_blank(item.entry):
            form_state[item.name] = item.entry
    return form_state
