"""
Tests for the Merge Engine (compose).

These tests verify:
    - Name matching of sections and items onto the schema
    - Strict vs lenient handling of missing sections/items
    - Schema order and dropping of unknown result items
    - Scope form state for show conditions (siblings and ancestors)
    - Inputs are never mutated
"""

import copy

import pytest
from formlayout.compose import ComposeOptions, build_scope, compose
from formlayout.conditions import Condition, ItemConditions
from formlayout.errors import (
    DepthLimitError,
    MissingFieldError,
    MissingSectionError,
    ValidationFailedError,
)
from formlayout.model import Config, DataSource, Item, ItemType, Option, Section, Tier, Validation
from formlayout.serialization import config_to_dict


def build_mock_config() -> Config:
    return Config(
        name="testForm",
        label="Test Form",
        weight=100,
        sections=[
            Section(
                name="section1",
                label="Section 1",
                weight=50,
                items=[
                    Item(name="field1", label="Field 1", type=ItemType.TEXT, weight=10,
                         validation=Validation(required=True)),
                    Item(name="field2", label="Field 2", type=ItemType.SELECT, weight=20,
                         data_source=DataSource.OPTIONS,
                         options=[Option(value="option1", label="Option 1", weight=5),
                                  Option(value="option2", label="Option 2", weight=15)]),
                    Item(name="field3", label="Field 3", type=ItemType.NUMBER, sub_type="scale", weight=20,
                         tiers=[Tier(max_value="10", rate=0.5), Tier(max_value="20", rate=1.0)]),
                ],
            ),
        ],
    )


FULL_RESULT = [
    {
        "name": "section1",
        "items": [
            {"name": "field1", "entry": "test value", "type": "text"},
            {"name": "field2", "entry": "option1", "type": "select"},
            {"name": "field3", "entry": 15, "type": "number"},
        ],
    }
]


class TestCompose:
    """Basic merging."""

    def test_compose_entries(self):
        """Entries should be merged onto the schema items."""
        result = compose(build_mock_config(), FULL_RESULT)
        items = result.sections[0].items
        assert items[0].entry == "test value"
        assert items[1].entry == "option1"
        assert items[2].entry == 15

    def test_schema_fields_survive(self):
        """Static fields come from the schema."""
        result = compose(build_mock_config(), FULL_RESULT)
        field2 = result.sections[0].items[1]
        assert field2.label == "Field 2"
        assert field2.weight == 20
        assert field2.data_source == DataSource.OPTIONS
        assert [o.value for o in field2.options] == ["option1", "option2"]
        assert result.name == "testForm"
        assert result.weight == 100
        assert result.sections[0].weight == 50

    def test_result_fields_overlay_schema(self):
        """Fields present on a result item override the schema's."""
        results = copy.deepcopy(FULL_RESULT)
        results[0]["items"][0]["comment"] = "checked by phone"
        result = compose(build_mock_config(), results)
        assert result.sections[0].items[0].comment == "checked by phone"
        assert result.sections[0].items[0].label == "Field 1"

    def test_schema_order_wins(self):
        """Output order should follow the schema, not the result."""
        results = [{"name": "section1", "items": list(reversed(FULL_RESULT[0]["items"]))}]
        result = compose(build_mock_config(), results)
        assert [i.name for i in result.sections[0].items] == ["field1", "field2", "field3"]

    def test_unknown_result_items_dropped(self):
        """Result items without a schema item are not copied."""
        results = copy.deepcopy(FULL_RESULT)
        results[0]["items"].append({"name": "intruder", "entry": "x"})
        result = compose(build_mock_config(), results)
        assert [i.name for i in result.sections[0].items] == ["field1", "field2", "field3"]

    def test_accepts_section_objects(self):
        """Result sections may be given as Section dataclasses."""
        results = [Section(name="section1", items=[
            Item(name="field1", entry="a"), Item(name="field2", entry="option2"), Item(name="field3", entry=3),
        ])]
        result = compose(build_mock_config(), results)
        assert result.sections[0].items[1].entry == "option2"
        assert result.sections[0].items[1].label == "Field 2"

    def test_inputs_not_mutated(self):
        """Neither the schema nor the results should change."""
        schema = build_mock_config()
        before = config_to_dict(schema)
        results = copy.deepcopy(FULL_RESULT)
        result = compose(schema, results)
        result.sections[0].items[0].options = []
        assert config_to_dict(schema) == before
        assert results == FULL_RESULT


class TestStrictness:
    """Strict and lenient modes."""

    def test_missing_section_strict(self):
        """Strict mode should name the missing section."""
        with pytest.raises(MissingSectionError, match='Section "section1" not found'):
            compose(build_mock_config(), [{"name": "nonexistent", "items": []}], strict=True)

    def test_missing_field_strict(self):
        """Strict mode should name the missing field."""
        results = [{"name": "section1", "items": [{"name": "field1", "entry": "test"}]}]
        with pytest.raises(MissingFieldError, match='Result missing for field "field2"') as exc:
            compose(build_mock_config(), results)
        assert exc.value.field == "field2"

    def test_lenient_keeps_schema_entry(self):
        """Lenient mode should keep the schema's own entry."""
        schema = build_mock_config()
        schema.sections[0].items[1].entry = "option2"
        results = [{"name": "section1", "items": [{"name": "field1", "entry": "test"}]}]
        result = compose(schema, results, ComposeOptions(strict=False))
        assert result.sections[0].items[1].entry == "option2"
        assert result.sections[0].items[2].entry is None

    def test_lenient_missing_section(self):
        """Lenient mode should keep a section without results."""
        result = compose(build_mock_config(), [], strict=False)
        assert [i.name for i in result.sections[0].items] == ["field1", "field2", "field3"]

    def test_none_entry_keeps_schema_entry(self):
        """A null result entry falls back to the schema entry."""
        schema = build_mock_config()
        schema.sections[0].items[0].entry = "preset"
        results = copy.deepcopy(FULL_RESULT)
        results[0]["items"][0]["entry"] = None
        result = compose(schema, results)
        assert result.sections[0].items[0].entry == "preset"


class TestValidateMode:
    """Validation while composing."""

    def test_validation_error(self):
        """An empty required field should fail."""
        results = [{"name": "section1", "items": [
            {"name": "field1", "entry": ""},
            {"name": "field2", "entry": "option1"},
            {"name": "field3", "entry": 5},
        ]}]
        with pytest.raises(ValidationFailedError, match='Field "field1" is required.'):
            compose(build_mock_config(), results, validate=True)

    def test_validation_off_by_default(self):
        """Without validate the same input composes."""
        results = [{"name": "section1", "items": [
            {"name": "field1", "entry": ""},
            {"name": "field2", "entry": "option1"},
            {"name": "field3", "entry": 5},
        ]}]
        result = compose(build_mock_config(), results)
        assert result.sections[0].items[0].entry == ""

    def test_condition_sees_later_sibling(self):
        """Scope is built before validation, so later siblings count."""
        schema = Config(name="c", sections=[Section(name="s", items=[
            Item(name="detail", type=ItemType.TEXT, validation=Validation(required=True),
                 conditions=ItemConditions(show=Condition(field="toggle", operator="EQUAL", value="showMe"))),
            Item(name="toggle", type=ItemType.TEXT),
        ])])
        hidden = [{"name": "s", "items": [{"name": "detail", "entry": ""}, {"name": "toggle", "entry": "hideMe"}]}]
        compose(schema, hidden, validate=True)

        shown = [{"name": "s", "items": [{"name": "detail", "entry": ""}, {"name": "toggle", "entry": "showMe"}]}]
        with pytest.raises(ValidationFailedError, match='Field "detail" is required.'):
            compose(schema, shown, validate=True)

    def test_sub_section_sees_ancestor_fields(self):
        """Sub-sections inherit the parent section's scope."""
        schema = Config(name="c", sections=[Section(
            name="parent",
            items=[Item(name="owner", type=ItemType.TEXT)],
            sub_sections=[Section(name="child", items=[
                Item(name="owner_phone", type=ItemType.TEL, validation=Validation(required=True),
                     conditions=ItemConditions(show=Condition(field="owner", operator="NOT_EMPTY"))),
            ])],
        )])
        results = [{"name": "parent", "items": [{"name": "owner", "entry": "Ana"}],
                    "subSections": [{"name": "child", "items": [{"name": "owner_phone", "entry": ""}]}]}]
        with pytest.raises(ValidationFailedError):
            compose(schema, results, validate=True)

        results[0]["items"][0]["entry"] = ""
        compose(schema, results, validate=True)


class TestNesting:
    """Sub-sections and sub-items."""

    def build_nested(self) -> Config:
        return Config(name="c", sections=[Section(
            name="parent",
            items=[Item(name="features", label="Features", type=ItemType.GROUP, sub_items=[
                Item(name="lawn", label="Lawn", type=ItemType.CHECKBOX, weight=4),
                Item(name="patio", label="Patio", type=ItemType.CHECKBOX, weight=6),
            ])],
            sub_sections=[Section(name="child", label="Child", items=[Item(name="depth", type=ItemType.NUMBER)])],
        )])

    def test_sub_sections_merged(self):
        """Sub-section items should be merged by name."""
        results = [{"name": "parent", "items": [{"name": "features", "entry": ["lawn"]}],
                    "subSections": [{"name": "child", "items": [{"name": "depth", "entry": 3}]}]}]
        result = compose(self.build_nested(), results)
        child = result.sections[0].sub_sections[0]
        assert child.label == "Child"
        assert child.items[0].entry == 3

    def test_sub_items_merged(self):
        """Sub-items should be merged when both sides have them."""
        results = [{"name": "parent",
                    "items": [{"name": "features", "subItems": [{"name": "lawn", "entry": True},
                                                               {"name": "patio", "entry": False}]}],
                    "subSections": [{"name": "child", "items": [{"name": "depth", "entry": 1}]}]}]
        result = compose(self.build_nested(), results)
        lawn, patio = result.sections[0].items[0].sub_items
        assert lawn.entry is True and lawn.weight == 4
        assert patio.entry is False and patio.label == "Patio"

    def test_sub_items_strict(self):
        """A missing sub-item is a missing field in strict mode."""
        results = [{"name": "parent",
                    "items": [{"name": "features", "subItems": [{"name": "lawn", "entry": True}]}],
                    "subSections": [{"name": "child", "items": [{"name": "depth", "entry": 1}]}]}]
        with pytest.raises(MissingFieldError, match="patio"):
            compose(self.build_nested(), results)

    def test_missing_sub_section_strict(self):
        """A missing sub-section is a missing section in strict mode."""
        results = [{"name": "parent", "items": [{"name": "features", "entry": []}]}]
        with pytest.raises(MissingSectionError, match="child"):
            compose(self.build_nested(), results)

    def test_depth_limit(self):
        """Nesting beyond max_depth should be refused."""
        section = Section(name="s0", items=[])
        for i in range(1, 5):
            section = Section(name=f"s{i}", sub_sections=[section])
        with pytest.raises(DepthLimitError):
            compose(Config(name="deep", sections=[section]), [], ComposeOptions(strict=False, max_depth=3))


class TestBuildScope:
    """Scope form state."""

    def test_scope_layers_over_parent(self):
        """Child entries override, parent entries remain."""
        scope = build_scope(
            [{"name": "a", "entry": 1}, {"name": "g", "subItems": [{"name": "g1", "entry": "x"}]}, {"name": "n"}],
            {"a": 0, "p": "parent"},
        )
        assert scope == {"a": 1, "p": "parent", "g1": "x"}

    def test_parent_not_mutated(self):
        parent = {"p": 1}
        build_scope([{"name": "a", "entry": 2}], parent)
        assert parent == {"p": 1}
