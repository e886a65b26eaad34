"""
Serialization helpers for form layout objects (Config, Section, Item, Condition, ...).

Provides JSON/YAML round-trip via an intermediate dict representation.
The dict form uses the layout's camelCase wire names (subSections,
subItems, subType, dataSource, maxValue, ...) and omits every field that
is None, so partial trees stay partial.
"""
from __future__ import annotations

import copy
import json
from typing import Any, Dict, List, Mapping, Optional

import yaml

from formlayout.conditions import Condition, ItemConditions
from formlayout.errors import DepthLimitError, SchemaError
from formlayout.model import (
    DEFAULT_MAX_DEPTH,
    Config,
    DataSource,
    Item,
    ItemType,
    Media,
    MediaType,
    Option,
    Section,
    Tier,
    Validation,
)


# dataclass attribute -> wire key, for plain scalar/value fields of Item
ITEM_SCALAR_KEYS = {
    "label": "label",
    "sub_type": "subType",
    "weight": "weight",
    "entry": "entry",
    "default": "default",
    "comment": "comment",
    "value": "value",
    "description": "description",
    "placeholder": "placeholder",
    "tab_index": "tabIndex",
    "style": "style",
    "disabled": "disabled",
    "hidden": "hidden",
    "url": "url",
    "template": "template",
    "dev_note": "devNote",
}

VALIDATION_KEYS = {
    "required": "required",
    "min": "min",
    "max": "max",
    "min_length": "minLength",
    "max_length": "maxLength",
    "pattern": "pattern",
    "allowed_values": "allowedValues",
    "accept": "accept",
}


def _compact(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


def _check_depth(depth: int) -> None:
    if depth > DEFAULT_MAX_DEPTH:
        raise DepthLimitError(DEFAULT_MAX_DEPTH)


def condition_to_dict(c: Condition | None, depth: int = 1) -> Dict[str, Any] | None:
    if c is None:
        return None
    _check_depth(depth)
    return _compact({
        "field": c.field,
        "operator": c.operator,
        "value": c.value,
        "and": [condition_to_dict(x, depth + 1) for x in c.and_] if c.and_ is not None else None,
        "or": [condition_to_dict(x, depth + 1) for x in c.or_] if c.or_ is not None else None,
    })


def condition_from_dict(d: Mapping[str, Any] | None, depth: int = 1) -> Condition | None:
    if d is None:
        return None
    _check_depth(depth)
    and_ = d.get("and")
    or_ = d.get("or")
    return Condition(
        field=d.get("field"),
        operator=d.get("operator"),
        value=d.get("value"),
        and_=tuple(condition_from_dict(x, depth + 1) for x in and_) if and_ is not None else None,
        or_=tuple(condition_from_dict(x, depth + 1) for x in or_) if or_ is not None else None,
    )


def conditions_to_dict(c: ItemConditions | None) -> Dict[str, Any] | None:
    if c is None:
        return None
    return _compact({"show": condition_to_dict(c.show), "enable": condition_to_dict(c.enable)})


def conditions_from_dict(d: Mapping[str, Any] | None) -> ItemConditions | None:
    if d is None:
        return None
    return ItemConditions(show=condition_from_dict(d.get("show")), enable=condition_from_dict(d.get("enable")))


def option_to_dict(o: Option) -> Dict[str, Any]:
    return _compact({
        "id": o.id,
        "value": o.value,
        "label": o.label,
        "weight": o.weight,
        "upvote": o.upvote,
        "downvote": o.downvote,
        "novote": o.novote,
    })


def option_from_dict(d: Mapping[str, Any]) -> Option:
    return Option(
        value=d.get("value"),
        label=d.get("label", ""),
        weight=d.get("weight"),
        id=d.get("id"),
        upvote=d.get("upvote"),
        downvote=d.get("downvote"),
        novote=d.get("novote"),
    )


def tier_to_dict(t: Tier) -> Dict[str, Any]:
    return {"maxValue": t.max_value, "rate": t.rate}


def tier_from_dict(d: Mapping[str, Any]) -> Tier:
    return Tier(max_value=d.get("maxValue"), rate=d.get("rate", 1))


def media_to_dict(m: Media) -> Dict[str, Any]:
    return {"type": m.type.value, "url": m.url}


def media_from_dict(d: Mapping[str, Any]) -> Media:
    try:
        media_type = MediaType(d.get("type"))
    except ValueError:
        raise SchemaError(f"Unsupported media type: {d.get('type')!r}")
    return Media(type=media_type, url=d.get("url", ""))


def validation_to_dict(v: Validation | None) -> Dict[str, Any] | None:
    if v is None:
        return None
    return _compact({key: copy.deepcopy(getattr(v, attr)) for attr, key in VALIDATION_KEYS.items()})


def validation_from_dict(d: Mapping[str, Any] | None) -> Validation | None:
    if d is None:
        return None
    return Validation(**{attr: copy.deepcopy(d.get(key)) for attr, key in VALIDATION_KEYS.items()})


def item_to_dict(i: Item, depth: int = 1) -> Dict[str, Any]:
    _check_depth(depth)
    d: Dict[str, Any] = {"name": i.name}
    for attr, key in ITEM_SCALAR_KEYS.items():
        d[key] = copy.deepcopy(getattr(i, attr))
    d["type"] = i.type.value if i.type is not None else None
    d["dataSource"] = i.data_source.value if i.data_source is not None else None
    d["validation"] = validation_to_dict(i.validation)
    d["conditions"] = conditions_to_dict(i.conditions)
    d["options"] = [option_to_dict(o) for o in i.options] if i.options is not None else None
    d["tiers"] = [tier_to_dict(t) for t in i.tiers] if i.tiers is not None else None
    d["media"] = [media_to_dict(m) for m in i.media] if i.media is not None else None
    d["subItems"] = [item_to_dict(s, depth + 1) for s in i.sub_items] if i.sub_items is not None else None
    return _compact(d)


def item_from_dict(d: Mapping[str, Any], depth: int = 1) -> Item:
    _check_depth(depth)
    if not d.get("name"):
        raise SchemaError(f"Item without a name: {dict(d)!r}")
    item_type = None
    if d.get("type") is not None:
        try:
            item_type = ItemType(d["type"])
        except ValueError:
            raise SchemaError(f'Unsupported type {d["type"]!r} for item "{d["name"]}"')
    data_source = None
    if d.get("dataSource") is not None:
        try:
            data_source = DataSource(d["dataSource"])
        except ValueError:
            raise SchemaError(f'Unsupported dataSource {d["dataSource"]!r} for item "{d["name"]}"')
    kwargs = {attr: copy.deepcopy(d.get(key)) for attr, key in ITEM_SCALAR_KEYS.items()}
    options = d.get("options")
    tiers = d.get("tiers")
    media = d.get("media")
    sub_items = d.get("subItems")
    return Item(
        name=d["name"],
        type=item_type,
        data_source=data_source,
        validation=validation_from_dict(d.get("validation")),
        conditions=conditions_from_dict(d.get("conditions")),
        options=[option_from_dict(o) for o in options] if options is not None else None,
        tiers=[tier_from_dict(t) for t in tiers] if tiers is not None else None,
        media=[media_from_dict(m) for m in media] if media is not None else None,
        sub_items=[item_from_dict(s, depth + 1) for s in sub_items] if sub_items is not None else None,
        **kwargs,
    )


def section_to_dict(s: Section, depth: int = 1) -> Dict[str, Any]:
    _check_depth(depth)
    d = _compact({
        "name": s.name,
        "label": s.label,
        "weight": s.weight,
        "comment": s.comment,
        "total": s.total,
        "ratio": s.ratio,
    })
    d["items"] = [item_to_dict(i) for i in s.items]
    if s.sub_sections:
        d["subSections"] = [section_to_dict(sub, depth + 1) for sub in s.sub_sections]
    return d


def section_from_dict(d: Mapping[str, Any], depth: int = 1) -> Section:
    _check_depth(depth)
    if not d.get("name"):
        raise SchemaError("Section without a name")
    return Section(
        name=d["name"],
        label=d.get("label"),
        weight=d.get("weight"),
        comment=d.get("comment"),
        items=[item_from_dict(i) for i in d.get("items") or []],
        sub_sections=[section_from_dict(sub, depth + 1) for sub in d.get("subSections") or []],
        total=d.get("total"),
        ratio=d.get("ratio"),
    )


def config_to_dict(c: Config) -> Dict[str, Any]:
    d = _compact({
        "name": c.name,
        "label": c.label,
        "weight": c.weight,
        "comment": c.comment,
        "total": c.total,
        "ratio": c.ratio,
    })
    d["sections"] = [section_to_dict(s) for s in c.sections]
    return d


def config_from_dict(d: Mapping[str, Any]) -> Config:
    if not isinstance(d, Mapping) or not d.get("name"):
        raise SchemaError("Config without a name")
    return Config(
        name=d["name"],
        label=d.get("label"),
        weight=d.get("weight"),
        comment=d.get("comment"),
        sections=[section_from_dict(s) for s in d.get("sections") or []],
        total=d.get("total"),
        ratio=d.get("ratio"),
    )


def as_section_dicts(sections: List[Section | Mapping[str, Any]] | None) -> List[Dict[str, Any]]:
    """Normalize result sections given as dataclasses or dicts to dicts."""
    return [section_to_dict(s) if isinstance(s, Section) else dict(s) for s in sections or []]


def config_to_json(c: Config) -> str:
    return json.dumps(config_to_dict(c), sort_keys=True)


def config_from_json(s: str) -> Config:
    try:
        d = json.loads(s)
    except json.JSONDecodeError as e:
        raise SchemaError(f"Invalid JSON layout: {e}")
    return config_from_dict(d)


def config_to_yaml(c: Config) -> str:
    return yaml.safe_dump(config_to_dict(c), sort_keys=False)


def config_from_yaml(s: str) -> Config:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise SchemaError(f"Invalid YAML layout: {e}")
    return config_from_dict(d)


def stringify(config: Config | Mapping[str, Any], depth: int = 1) -> str:
    """
    Encode a config as compact JSON.

    depth=2 JSON-encodes the JSON string once more, for transports that
    expect an escaped payload.
    """
    data = config_to_dict(config) if isinstance(config, Config) else config
    encoded = json.dumps(data, separators=(",", ":"))
    if depth == 2:
        return json.dumps(encoded)
    return encoded


def load_config(source: str, fmt: Optional[str] = None) -> Config:
    """Load a layout from JSON or YAML text; YAML is the fallback format."""
    if fmt == "json" or (fmt is None and source.lstrip().startswith("{")):
        return config_from_json(source)
    return config_from_yaml(source)
