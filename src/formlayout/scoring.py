"""
Scoring Engine.

Computes total, weight and ratio for every section (recursively through
sub-sections) and for the config root.

Per item:
    select/radio   option weight (dataSource "options") or item weight
    group          summed sub-item weights, falling back to item weight
    number/scale   item weight x rate of the matching tier
    anything else  item weight when answered

An item whose show condition is false is left out of the total AND of
the weight, so hiding a question does not lower the ratio.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from formlayout.condition_eval import check_condition
from formlayout.errors import DepthLimitError
from formlayout.form_state import unprepare
from formlayout.model import DEFAULT_MAX_DEPTH, Config, DataSource, Item, ItemType, Option, Section, Tier

logger = logging.getLogger(__name__)

DEFAULT_FACTOR = 100


def is_answered(entry: Any) -> bool:
    """None, False, 0 and "" are unanswered. Lists count as answered even when empty."""
    if isinstance(entry, (list, tuple, dict)):
        return True
    return bool(entry)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def _loose_equal(left: Any, right: Any) -> bool:
    if left == right:
        return True
    if isinstance(left, str) and _is_number(right):
        return _to_number(left) == right
    if _is_number(left) and isinstance(right, str):
        return left == _to_number(right)
    return False


def select_weight(
    entry: Any,
    options: Optional[Sequence[Option]],
    item_weight: float,
    data_source: Optional[DataSource],
) -> float:
    if not is_answered(entry):
        return 0

    if data_source == DataSource.OPTIONS:
        for option in options or []:
            if _loose_equal(option.value, entry):
                return item_weight if option.weight is None else option.weight
    return item_weight


def group_weight(entry: Any, sub_items: Optional[Sequence[Item]], item_weight: float) -> float:
    if not isinstance(entry, list):
        return 0

    sub_items = sub_items or []
    if all(isinstance(value, str) for value in entry):
        selected = [sub_item for sub_item in sub_items if sub_item.name in entry]
    else:
        # Structured rows map positionally onto the sub-items.
        selected = sub_items[:len(entry)]

    weight = sum(sub_item.weight or 0 for sub_item in selected)
    if weight == 0 and entry:
        return item_weight
    return weight


def scale_weight(entry: float, tiers: Sequence[Tier], item_weight: float) -> float:
    tier = next(
        (t for t in tiers if entry <= _to_number(t.max_value)),
        tiers[-1] if tiers else None,
    )
    rate = 1 if tier is None or tier.rate is None else tier.rate
    return item_weight * rate


def item_score(item: Item) -> float:
    """Contribution of one visible item to its section total."""
    entry = item.entry if item.entry is not None else item.default
    item_weight = item.weight or 0

    if item.type in (ItemType.SELECT, ItemType.RADIO):
        return select_weight(entry, item.options, item_weight, item.data_source)
    if item.type == ItemType.GROUP:
        return group_weight(entry, item.sub_items, item_weight)
    if item.type == ItemType.NUMBER and item.sub_type == "scale" and _is_number(entry) and item.tiers is not None:
        return scale_weight(entry, item.tiers, item_weight)
    return item_weight if is_answered(entry) else 0


def is_visible(item: Item, form_state: Mapping[str, Any]) -> bool:
    conditions = item.conditions
    if conditions is None or conditions.show is None:
        return True
    return check_condition(conditions.show, form_state)


def section_ratio(total: float, weight: float, factor: float, digits: int) -> float:
    """total/weight*factor to `digits` decimals, ties rounded away from zero."""
    if not weight:
        return 0
    exact = Decimal(total / weight * factor)
    return float(exact.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP))


def _evaluate_section(
    section: Section,
    form_state: Mapping[str, Any],
    factor: float,
    depth: int,
) -> Tuple[Section, float, float]:
    if depth > DEFAULT_MAX_DEPTH:
        raise DepthLimitError(DEFAULT_MAX_DEPTH)

    total = 0
    weight = 0
    for item in section.items:
        if not is_visible(item, form_state):
            continue
        total += item_score(item)
        weight += item.weight or 0

    sub_sections: List[Section] = []
    for sub_section in section.sub_sections:
        evaluated, sub_total, sub_weight = _evaluate_section(sub_section, form_state, factor, depth + 1)
        sub_sections.append(evaluated)
        total += sub_total
        weight += sub_weight

    logger.debug("Section %s scored %s of %s", section.name, total, weight)
    evaluated = replace(
        section,
        items=[replace(item) for item in section.items],
        sub_sections=sub_sections,
        total=total,
        weight=weight,
        ratio=section_ratio(total, weight, factor, 1),
    )
    return evaluated, total, weight


def evaluate(config: Config, factor: float = DEFAULT_FACTOR) -> Config:
    """
    Score a composed config.

    Args:
        config: Config with entries (usually the output of compose)
        factor: Scale of the ratio; 100 gives a percentage

    Returns:
        A new Config with total/weight/ratio on every section and on the root.
        Section ratios are rounded to 1 decimal, the root ratio to 2.
        A zero weight always gives a ratio of 0.
    """
    form_state = unprepare(config)

    sections = []
    total = 0
    weight = 0
    for section in config.sections:
        evaluated, section_total, section_weight = _evaluate_section(section, form_state, factor, 1)
        sections.append(evaluated)
        total += section_total
        weight += section_weight

    return replace(
        config,
        sections=sections,
        total=total,
        weight=weight,
        ratio=section_ratio(total, weight, factor, 2),
    )
