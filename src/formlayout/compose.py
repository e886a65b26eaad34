"""
Merge Engine.

Merges a sparse result tree (what a client submits) onto the canonical
schema. The client only has to send names and entries; every static
field comes from the schema.

Rules:
    - Sections and items are matched by name
    - Output order always follows the schema
    - Result items without a schema counterpart are dropped
    - The schema and the result tree are never mutated

Validation runs in the same top-down pass as the merge. A failure raises
before anything is returned, and since nothing outside the new tree is
touched there is nothing to roll back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from formlayout.errors import DepthLimitError, MissingFieldError, MissingSectionError
from formlayout.model import DEFAULT_MAX_DEPTH, Config, Item, Section
from formlayout.serialization import as_section_dicts, item_from_dict, item_to_dict
from formlayout.validation import validate_item

logger = logging.getLogger(__name__)

ResultSection = Union[Section, Mapping[str, Any]]


@dataclass(frozen=True)
class ComposeOptions:
    """
    Properties:
        strict: A missing result section or item is an error
        validate: Run item validation rules while merging
        max_depth: Deepest section/item nesting accepted
    """

    strict: bool = True
    validate: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH


def _find(candidates: Sequence[Mapping[str, Any]], name: str) -> Optional[Mapping[str, Any]]:
    for candidate in candidates:
        if candidate.get("name") == name:
            return candidate
    return None


def build_scope(result_items: Sequence[Mapping[str, Any]], parent_scope: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Flatten the entries of a result section's items and sub-items on top
    of the scope inherited from ancestor sections.

    This must run before any item is validated: show conditions may
    reference siblings that come later in the section.
    """
    scope = dict(parent_scope)
    for item in result_items:
        if item.get("name") and item.get("entry") is not None:
            scope[item["name"]] = item["entry"]
        for sub_item in item.get("subItems") or []:
            if sub_item.get("name") and sub_item.get("entry") is not None:
                scope[sub_item["name"]] = sub_item["entry"]
    return scope


def _merge_item(item: Item, result_item: Optional[Mapping[str, Any]]) -> Item:
    data = item_to_dict(item)
    if result_item is not None:
        # None values are skipped, so an absent result entry keeps the schema's entry.
        data.update({key: value for key, value in result_item.items() if value is not None})
    return item_from_dict(data)


def _compose_items(
    items: Sequence[Item],
    result_items: Sequence[Mapping[str, Any]],
    scope: Mapping[str, Any],
    options: ComposeOptions,
    depth: int,
) -> List[Item]:
    if depth > options.max_depth:
        raise DepthLimitError(options.max_depth)

    composed = []
    for item in items:
        result_item = _find(result_items, item.name)
        if result_item is None and options.strict:
            raise MissingFieldError(item.name)

        if options.validate and result_item is not None:
            validate_item(item, result_item.get("entry"), scope)

        merged = _merge_item(item, result_item)
        result_sub_items = result_item.get("subItems") if result_item is not None else None
        if item.sub_items and result_sub_items:
            merged = replace(
                merged,
                sub_items=_compose_items(item.sub_items, result_sub_items, scope, options, depth + 1),
            )
        composed.append(merged)
    return composed


def _compose_sections(
    sections: Sequence[Section],
    result_sections: Sequence[Mapping[str, Any]],
    parent_scope: Mapping[str, Any],
    options: ComposeOptions,
    depth: int,
) -> List[Section]:
    if depth > options.max_depth:
        raise DepthLimitError(options.max_depth)

    composed = []
    for section in sections:
        result_section = _find(result_sections, section.name)
        if result_section is None:
            if options.strict:
                raise MissingSectionError(section.name)
            logger.debug("No result for section %s, keeping schema values", section.name)
            result_section = {}

        result_items = result_section.get("items") or []
        scope = build_scope(result_items, parent_scope)
        items = _compose_items(section.items, result_items, scope, options, depth)
        sub_sections = _compose_sections(
            section.sub_sections,
            as_section_dicts(result_section.get("subSections")),
            scope,
            options,
            depth + 1,
        )
        logger.debug("Composed section %s with %s items", section.name, len(items))
        composed.append(replace(section, items=items, sub_sections=sub_sections))
    return composed


def compose(
    schema: Config,
    result_sections: Optional[Sequence[ResultSection]],
    options: Optional[ComposeOptions] = None,
    *,
    strict: Optional[bool] = None,
    validate: Optional[bool] = None,
) -> Config:
    """
    Merge submitted result sections onto a schema.

    Args:
        schema: The canonical layout
        result_sections: Sparse sections as dicts or Section objects
        options: ComposeOptions; strict/validate keywords override it

    Returns:
        A new Config with entries filled in

    Raises:
        MissingSectionError: strict mode, a schema section has no result
        MissingFieldError: strict mode, a schema item has no result
        ValidationFailedError: validate mode, an entry breaks a rule
        DepthLimitError: nesting deeper than options.max_depth
    """
    options = options or ComposeOptions()
    if strict is not None:
        options = replace(options, strict=strict)
    if validate is not None:
        options = replace(options, validate=validate)

    sections = _compose_sections(schema.sections, as_section_dicts(result_sections), {}, options, 1)
    return Config(
        name=schema.name,
        label=schema.label,
        weight=schema.weight,
        comment=schema.comment,
        sections=sections,
    )
