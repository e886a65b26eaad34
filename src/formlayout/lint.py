"""
Layout lint: early diagnostics and inventory of form layouts.

This module provides lightweight analysis of Config objects:
    - Section, item, option and condition inventory
    - Duplicate section names, item names and option values
    - Conditions referencing fields that do not exist
    - Items missing a type

IMPORTANT: This does NOT modify the layout and never raises.
It only produces read-only reports.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List, Set

from formlayout.model import Config

logger = logging.getLogger(__name__)

VALID_MESSAGE = "Hurrah! Your form layout config is valid."


def _duplicates(values: Iterable) -> List:
    """Values seen more than once, in order of first repetition."""
    counts = Counter()
    repeated = []
    for value in values:
        counts[value] += 1
        if counts[value] == 2:
            repeated.append(value)
    return repeated


@dataclass
class ConfigReport:
    """Analysis report for a layout."""

    config_name: str
    total_sections: int = 0
    total_items: int = 0
    total_options: int = 0
    total_conditions: int = 0
    max_section_depth: int = 0

    duplicate_sections: List[str] = field(default_factory=list)
    duplicate_items: List[str] = field(default_factory=list)
    duplicate_options: List[str] = field(default_factory=list)

    undefined_condition_fields: Set[str] = field(default_factory=set)
    untyped_items: List[str] = field(default_factory=list)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)

    @property
    def is_valid(self) -> bool:
        return not (self.duplicate_sections or self.duplicate_items or self.duplicate_options)


def _section_depth(sections, depth: int = 1) -> int:
    if not sections:
        return depth - 1
    return max(_section_depth(s.sub_sections, depth + 1) for s in sections)


def analyze_config(config: Config) -> ConfigReport:
    """
    Inventory a layout and collect its problems.

    Uniqueness is checked on the flattened tree: sections across all
    nesting levels, items across all sections and sub-items, option
    values across all items.
    """
    report = ConfigReport(config_name=config.name)

    sections = list(config.iter_sections())
    items = list(config.iter_items())
    options = [option for item in items for option in item.options or []]

    report.total_sections = len(sections)
    report.total_items = len(items)
    report.total_options = len(options)
    report.max_section_depth = _section_depth(config.sections)

    report.duplicate_sections = _duplicates(s.name for s in sections)
    report.duplicate_items = _duplicates(i.name for i in items)
    report.duplicate_options = _duplicates(o.value for o in options)

    item_names = {i.name for i in items}
    referenced: Set[str] = set()
    for item in items:
        if item.type is None:
            report.untyped_items.append(item.name)
        if item.conditions is None:
            continue
        for condition in (item.conditions.show, item.conditions.enable):
            if condition is not None:
                report.total_conditions += 1
                referenced |= condition.fields()
    report.undefined_condition_fields = referenced - item_names

    if report.duplicate_sections:
        report.add_warning(f"Duplicate section names: {', '.join(report.duplicate_sections)}")
    if report.duplicate_items:
        report.add_warning(f"Duplicate item names: {', '.join(report.duplicate_items)}")
    if report.duplicate_options:
        report.add_warning(f"Duplicate option values: {', '.join(map(str, report.duplicate_options))}")
    if report.undefined_condition_fields:
        report.add_warning(
            f"Conditions reference unknown fields: {', '.join(sorted(report.undefined_condition_fields))}"
        )
    if report.untyped_items:
        report.add_warning(f"Items without a type: {', '.join(report.untyped_items)}")

    if report.warnings:
        logger.info("Layout %s has %s lint warning(s)", config.name, len(report.warnings))
    return report


def validate(config: Config) -> str:
    """
    Human-readable verdict on a layout.

    Only the uniqueness checks decide the verdict, in priority order:
    sections, items, options. The first failing category is reported.
    """
    report = analyze_config(config)
    if report.duplicate_sections:
        return f"Duplicate section names: {','.join(report.duplicate_sections)}"
    if report.duplicate_items:
        return f"Duplicate item names: {','.join(report.duplicate_items)}"
    if report.duplicate_options:
        return f"The following names are used more than once: {','.join(map(str, report.duplicate_options))}"
    return VALID_MESSAGE
