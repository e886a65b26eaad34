"""
Example layout used by the demo and the tests.

Builds a small rental-property inspection form: a text field, a weighted
select, a tiered scale, a checkbox-set group, a file upload and a
conditionally shown follow-up, plus a nested sub-section.
"""
from formlayout.conditions import Condition, ItemConditions
from formlayout.model import (
    Config,
    DataSource,
    Item,
    ItemType,
    Option,
    Section,
    Tier,
    Validation,
)


def build_example_inspection_config() -> Config:
    exterior = Section(
        name="exterior",
        label="Exterior",
        items=[
            Item(
                name="roof_condition",
                label="Roof condition",
                type=ItemType.SELECT,
                weight=20,
                data_source=DataSource.OPTIONS,
                options=[
                    Option(value="roof_good", label="Good", weight=20),
                    Option(value="roof_fair", label="Fair", weight=10),
                    Option(value="roof_poor", label="Poor", weight=0),
                ],
                validation=Validation(required=True),
            ),
            Item(
                name="has_garage",
                label="Garage",
                type=ItemType.RADIO,
                weight=5,
                options=[
                    Option(value="garage_yes", label="Yes"),
                    Option(value="garage_no", label="No"),
                ],
            ),
            Item(
                name="garage_spaces",
                label="Garage spaces",
                type=ItemType.NUMBER,
                weight=5,
                validation=Validation(min=1, max=4),
                conditions=ItemConditions(
                    show=Condition(field="has_garage", operator="EQUAL", value="garage_yes"),
                ),
            ),
        ],
        sub_sections=[
            Section(
                name="garden",
                label="Garden",
                items=[
                    Item(
                        name="garden_features",
                        label="Garden features",
                        type=ItemType.GROUP,
                        weight=10,
                        sub_items=[
                            Item(name="lawn", label="Lawn", type=ItemType.CHECKBOX, weight=4),
                            Item(name="patio", label="Patio", type=ItemType.CHECKBOX, weight=6),
                        ],
                    ),
                ],
            ),
        ],
    )

    interior = Section(
        name="interior",
        label="Interior",
        items=[
            Item(
                name="floor_area",
                label="Floor area (m2)",
                type=ItemType.NUMBER,
                sub_type="scale",
                weight=20,
                tiers=[
                    Tier(max_value="40", rate=0.25),
                    Tier(max_value="80", rate=0.5),
                    Tier(max_value="120", rate=1.0),
                ],
                validation=Validation(required=True, min=1),
            ),
            Item(
                name="notes",
                label="Inspector notes",
                type=ItemType.TEXTAREA,
                weight=10,
                default="",
            ),
            Item(
                name="floor_plan",
                label="Floor plan",
                type=ItemType.FILE,
                validation=Validation(accept=".pdf,image/*"),
            ),
        ],
    )

    return Config(
        name="property_inspection",
        label="Property inspection",
        sections=[exterior, interior],
    )


def build_example_results() -> list:
    """A complete submission for the example layout, in wire (dict) form."""
    return [
        {
            "name": "exterior",
            "items": [
                {"name": "roof_condition", "entry": "roof_fair"},
                {"name": "has_garage", "entry": "garage_yes"},
                {"name": "garage_spaces", "entry": 2},
            ],
            "subSections": [
                {
                    "name": "garden",
                    "items": [{"name": "garden_features", "entry": ["lawn", "patio"]}],
                },
            ],
        },
        {
            "name": "interior",
            "items": [
                {"name": "floor_area", "entry": 95},
                {"name": "notes", "entry": "Freshly painted"},
                {"name": "floor_plan", "entry": "plan.PDF"},
            ],
        },
    ]
