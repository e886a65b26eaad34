"""Label translation through a caller-supplied lookup."""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, List

from formlayout.errors import DepthLimitError
from formlayout.model import DEFAULT_MAX_DEPTH, Config, Item, Section


def _translate_items(items: List[Item], t: Callable[[str], str], depth: int) -> List[Item]:
    if depth > DEFAULT_MAX_DEPTH:
        raise DepthLimitError(DEFAULT_MAX_DEPTH)
    return [
        replace(
            item,
            label=t(item.name),
            sub_items=_translate_items(item.sub_items, t, depth + 1) if item.sub_items is not None else None,
        )
        for item in items
    ]


def _translate_sections(sections: List[Section], t: Callable[[str], str], depth: int) -> List[Section]:
    if depth > DEFAULT_MAX_DEPTH:
        raise DepthLimitError(DEFAULT_MAX_DEPTH)
    return [
        replace(
            section,
            label=t(section.name),
            items=_translate_items(section.items, t, depth),
            sub_sections=_translate_sections(section.sub_sections, t, depth + 1),
        )
        for section in sections
    ]


def translate(config: Config, t: Callable[[str], str]) -> Config:
    """Return a new config whose labels at every level are t(name)."""
    return replace(config, label=t(config.name), sections=_translate_sections(config.sections, t, 1))
