"""
Form Layout Package

A form layout is a tree: Config -> Section (-> sub-sections) -> Item
(-> sub-items). This package holds the layout model and pure
transformations over it:

    compose     merge a sparse submission onto the layout
    evaluate    weighted scoring, bottom-up
    decompose   trim a composed layout for storage
    stage / prepare / unprepare
                move between flat form state and the tree
    validate    lint a layout for duplicate names

ARCHITECTURAL GUARANTEE:
------------------------
Nothing here renders, stores or transmits a form, and no function
mutates its arguments. Every transformation returns a new tree.
"""

__version__ = "0.1.0"

from formlayout.compose import ComposeOptions, compose
from formlayout.condition_eval import check_condition, evaluate_condition
from formlayout.conditions import Condition, ConditionOperator, ItemConditions
from formlayout.decompose import DecomposeOptions, decompose
from formlayout.errors import (
    DepthLimitError,
    FormLayoutError,
    MissingFieldError,
    MissingSectionError,
    SchemaError,
    ValidationFailedError,
)
from formlayout.form_state import prepare, stage, unprepare
from formlayout.group_toggle import get_change_group
from formlayout.lint import ConfigReport, analyze_config, validate
from formlayout.model import (
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
from formlayout.scoring import evaluate
from formlayout.serialization import (
    config_from_dict,
    config_from_json,
    config_from_yaml,
    config_to_dict,
    config_to_json,
    config_to_yaml,
    stringify,
)
from formlayout.translate import translate

__all__ = [
    "ComposeOptions",
    "Condition",
    "ConditionOperator",
    "Config",
    "ConfigReport",
    "DataSource",
    "DecomposeOptions",
    "DepthLimitError",
    "FormLayoutError",
    "Item",
    "ItemConditions",
    "ItemType",
    "Media",
    "MediaType",
    "MissingFieldError",
    "MissingSectionError",
    "Option",
    "SchemaError",
    "Section",
    "Tier",
    "Validation",
    "ValidationFailedError",
    "analyze_config",
    "check_condition",
    "compose",
    "config_from_dict",
    "config_from_json",
    "config_from_yaml",
    "config_to_dict",
    "config_to_json",
    "config_to_yaml",
    "decompose",
    "evaluate",
    "evaluate_condition",
    "get_change_group",
    "prepare",
    "stage",
    "stringify",
    "translate",
    "unprepare",
    "validate",
]
