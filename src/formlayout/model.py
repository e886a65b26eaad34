"""
Core Form Layout Model Objects

Defines the data structures of a form layout schema tree:
    - Config (root of one form)
    - Section (recursive grouping of items)
    - Item (one field, possibly with sub-items)
    - Option, Tier, Validation, Media (item metadata)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about rendering, storage or transport
        - Are never mutated by the transformations in this package
        - Are fully serializable (see serialization)
        - Represent structure and submitted data, not behavior

Optional fields default to None. None means "absent": the dict form
omits the key, which keeps partial result trees partial.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Union

from .conditions import ItemConditions


# Submitted value for one item. Lists of dicts appear for structured group rows.
Entry = Union[str, int, float, bool, List[str], List[Dict[str, Any]]]

# Deepest section/item nesting the recursive transformations accept.
DEFAULT_MAX_DEPTH = 32


class ItemType(Enum):
    """Field types understood by the layout."""

    TEXT = "text"
    NUMBER = "number"
    PASSWORD = "password"
    SELECT = "select"
    DATE = "date"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    EMAIL = "email"
    TEL = "tel"
    URL = "url"
    HIDDEN = "hidden"
    FILE = "file"
    BUTTON = "button"
    COLOR = "color"
    DATETIME_LOCAL = "datetime-local"
    IMAGE = "image"
    MONTH = "month"
    RANGE = "range"
    RESET = "reset"
    SEARCH = "search"
    SUBMIT = "submit"
    TIME = "time"
    WEEK = "week"
    TEXTAREA = "textarea"
    GROUP = "group"


class DataSource(Enum):
    """Where a select/radio item gets its choices from."""

    OPTIONS = "options"
    URL = "url"
    ARBITRARY = "arbitrary"


class MediaType(Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"


@dataclass
class Option:
    """
    A selectable choice for select/radio items.

    Properties:
        value: Stored value (unique across the whole config)
        label: Human-readable label
        weight: Score contributed when selected (dataSource "options")
    """

    value: str
    label: str
    weight: Optional[float] = None
    id: Optional[str] = None
    upvote: Optional[bool] = None
    downvote: Optional[bool] = None
    novote: Optional[bool] = None


@dataclass
class Tier:
    """
    A scoring band for numeric "scale" items.

    max_value is compared numerically; layouts usually author it as a string.
    """

    max_value: Union[str, int, float]
    rate: float


@dataclass
class Media:
    type: MediaType
    url: str


@dataclass
class Validation:
    """
    Rules checked against an entry when compose runs with validation.

    Checked in a fixed order; the first failing rule wins.
    """

    required: Optional[bool] = None
    min: Optional[float] = None
    max: Optional[float] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    allowed_values: Optional[List[str]] = None
    accept: Optional[str] = None


@dataclass
class Item:
    """
    A single form field.

    Properties:
        name:
            Identifier, unique across the entire config

        label:
            Human-readable label

        type:
            ItemType; group items carry sub_items (checkbox sets, rows)

        entry:
            Submitted value, None when not submitted

        default:
            Value used when entry is absent (staging and scoring)

        weight:
            Score of the item when answered

        conditions:
            show/enable conditions evaluated against the form state

    label and type are optional only because partial result items and
    prepared items carry nothing but name/entry. Authored schema items
    always have both.
    """

    name: str
    label: Optional[str] = None
    type: Optional[ItemType] = None
    sub_type: Optional[str] = None
    weight: Optional[float] = None
    entry: Optional[Entry] = None
    default: Optional[Entry] = None
    comment: Optional[str] = None
    media: Optional[List[Media]] = None
    validation: Optional[Validation] = None
    conditions: Optional[ItemConditions] = None
    options: Optional[List[Option]] = None
    tiers: Optional[List[Tier]] = None
    sub_items: Optional[List["Item"]] = None
    data_source: Optional[DataSource] = None
    # Display-only fields, carried through untouched
    value: Optional[Any] = None
    description: Optional[str] = None
    placeholder: Optional[str] = None
    tab_index: Optional[int] = None
    style: Optional[str] = None
    disabled: Optional[bool] = None
    hidden: Optional[bool] = None
    url: Optional[str] = None
    template: Optional[str] = None
    dev_note: Optional[str] = None

    def is_type(self, item_type: ItemType) -> bool:
        return self.type == item_type


@dataclass
class Section:
    """
    A named group of items, optionally containing nested sub-sections.

    total, weight and ratio are filled in by scoring.evaluate.
    """

    name: str
    label: Optional[str] = None
    weight: Optional[float] = None
    comment: Optional[str] = None
    items: List[Item] = field(default_factory=list)
    sub_sections: List["Section"] = field(default_factory=list)
    total: Optional[float] = None
    ratio: Optional[float] = None

    def get_item(self, name: str) -> Optional[Item]:
        """
        Retrieve an item of this section (not of sub-sections) by name.

        Args:
            name: Item name

        Returns:
            Item object or None if not found
        """
        for item in self.items:
            if item.name == name:
                return item
        return None


@dataclass
class Config:
    """
    Root container of one form layout.

    A Config is authored once as the schema. Every transformation in
    this package derives a new Config from it; none mutates it.

    INVARIANTS:
        - Section names are unique across the whole config
        - Item names are unique across the whole config
        - Option values are unique across the whole config
        - The section/item tree is acyclic
    See lint.analyze_config for the checks.
    """

    name: str
    label: Optional[str] = None
    weight: Optional[float] = None
    comment: Optional[str] = None
    sections: List[Section] = field(default_factory=list)
    total: Optional[float] = None
    ratio: Optional[float] = None

    def iter_sections(self) -> Iterator[Section]:
        """Yield every section, depth first, sub-sections after their parent."""
        stack = list(reversed(self.sections))
        while stack:
            section = stack.pop()
            yield section
            stack.extend(reversed(section.sub_sections))

    def iter_items(self) -> Iterator[Item]:
        """Yield every item and sub-item of every section."""
        for section in self.iter_sections():
            stack = list(reversed(section.items))
            while stack:
                item = stack.pop()
                yield item
                stack.extend(reversed(item.sub_items or []))

    def get_section(self, name: str) -> Optional[Section]:
        for section in self.iter_sections():
            if section.name == name:
                return section
        return None

    def get_item(self, name: str) -> Optional[Item]:
        for item in self.iter_items():
            if item.name == name:
                return item
        return None
