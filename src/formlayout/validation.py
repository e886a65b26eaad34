"""
Validation Engine.

Checks one submitted entry against its item's validation rules. Called by
compose when validation is enabled; stops at the first failing rule.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from formlayout.condition_eval import check_condition, is_empty
from formlayout.errors import ValidationFailedError
from formlayout.model import Item, ItemType


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def matches_accept(filename: str, accept: str) -> bool:
    """
    Check a filename against an HTML-style accept list.

    Each comma-separated pattern is either an extension (".pdf", compared
    case-insensitively) or a wildcard ("image/*"), which matches when the
    filename starts with the part before the slash.
    """
    # Without a dot the whole name is treated as the extension.
    extension = filename.rsplit(".", 1)[-1].lower()
    if not extension:
        return False

    for pattern in (p.strip() for p in accept.split(",")):
        if pattern.startswith("."):
            if extension == pattern[1:].lower():
                return True
        elif "/*" in pattern:
            kind = pattern.split("/", 1)[0]
            if filename.startswith(kind):
                return True
    return False


def validate_item(item: Item, entry: Any, scope: Mapping[str, Any]) -> None:
    """
    Validate an entry for an item.

    Skipped entirely when the item has a show condition that is false
    against the scope form state.

    Args:
        item: Schema item carrying the rules
        entry: Submitted value (None when absent)
        scope: Flat form state visible at the item's depth

    Raises:
        ValidationFailedError: naming the field and the first violated rule
    """
    conditions = item.conditions
    if conditions is not None and conditions.show is not None:
        if not check_condition(conditions.show, scope):
            return

    rules = item.validation
    if rules is None:
        return
    name = item.name

    if rules.required and is_empty(entry):
        raise ValidationFailedError(name, "required", f'Field "{name}" is required.')

    if rules.min is not None and _is_number(entry) and entry < rules.min:
        raise ValidationFailedError(
            name, "min", f'Field "{name}" must be at least {_format_number(rules.min)}.'
        )

    if rules.max is not None and _is_number(entry) and entry > rules.max:
        raise ValidationFailedError(
            name, "max", f'Field "{name}" cannot be greater than {_format_number(rules.max)}.'
        )

    if isinstance(entry, str):
        if rules.min_length is not None and len(entry) < rules.min_length:
            raise ValidationFailedError(
                name, "min_length", f'Field "{name}" must be at least {rules.min_length} characters.'
            )
        if rules.max_length is not None and len(entry) > rules.max_length:
            raise ValidationFailedError(
                name, "max_length", f'Field "{name}" cannot be longer than {rules.max_length} characters.'
            )
        if rules.pattern is not None and re.search(rules.pattern, entry) is None:
            raise ValidationFailedError(
                name, "pattern", f'Field "{name}" does not match the pattern {rules.pattern}.'
            )

    if rules.allowed_values is not None and isinstance(entry, str) and entry not in rules.allowed_values:
        raise ValidationFailedError(
            name,
            "allowed_values",
            f'Field "{name}" must be one of {", ".join(str(v) for v in rules.allowed_values)}.',
        )

    # Non-string file entries (upload objects) are not checked.
    if rules.accept and item.type == ItemType.FILE and isinstance(entry, str):
        if not matches_accept(entry, rules.accept):
            raise ValidationFailedError(name, "accept", f'Field "{name}" must be of type {rules.accept}.')
