"""
Decompose Projector.

Trims a composed config down to what needs storing: config and section
fields are kept, items keep only allow-listed keys. When "value" is
allowed, a human-readable value is derived from the entry, which is
handy for reports.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Optional, Sequence

from formlayout.condition_eval import strict_equal
from formlayout.errors import DepthLimitError
from formlayout.model import DEFAULT_MAX_DEPTH, Config, Item, ItemType, Section
from formlayout.serialization import config_to_dict, item_to_dict, section_to_dict

DEFAULT_ALLOW = ("name", "entry")


@dataclass(frozen=True)
class DecomposeOptions:
    """
    Properties:
        allow: Item keys (wire names, e.g. "subType") kept in the output
    """

    allow: Sequence[str] = DEFAULT_ALLOW


def display_value(item: Item) -> Optional[Any]:
    """Human-readable value of an item's entry, or None when none can be derived."""
    entry = item.entry
    if entry is None:
        return None

    if item.type in (ItemType.SELECT, ItemType.RADIO):
        for option in item.options or []:
            if strict_equal(option.value, entry):
                return option.label
        return None

    if item.type == ItemType.GROUP and isinstance(entry, list) and all(isinstance(e, str) for e in entry):
        if item.options is None:
            return None
        return ", ".join(option.label for option in item.options if option.value in entry)

    return copy.deepcopy(entry)


def _decompose_item(item: Item, allow: Iterable[str]) -> Dict[str, Any]:
    allow = set(allow)
    decomposed = {key: value for key, value in item_to_dict(item).items() if key in allow}
    if "value" in allow and item.entry is not None:
        value = display_value(item)
        if value is not None:
            decomposed["value"] = value
    return decomposed


def _decompose_section(section: Section, allow: Sequence[str], depth: int) -> Dict[str, Any]:
    if depth > DEFAULT_MAX_DEPTH:
        raise DepthLimitError(DEFAULT_MAX_DEPTH)
    decomposed = section_to_dict(replace(section, items=[], sub_sections=[]))
    decomposed["items"] = [_decompose_item(item, allow) for item in section.items]
    if section.sub_sections:
        decomposed["subSections"] = [_decompose_section(sub, allow, depth + 1) for sub in section.sub_sections]
    return decomposed


def decompose(
    config: Config,
    options: Optional[DecomposeOptions] = None,
    *,
    allow: Optional[Sequence[str]] = None,
) -> Dict[str, Any]:
    """
    Project a config onto its storable shape.

    Args:
        config: Composed config
        options: DecomposeOptions; the allow keyword overrides it

    Returns:
        The config in dict form with trimmed items
    """
    if allow is None:
        allow = (options or DecomposeOptions()).allow

    decomposed = config_to_dict(replace(config, sections=[]))
    decomposed["sections"] = [_decompose_section(section, allow, 1) for section in config.sections]
    return decomposed
