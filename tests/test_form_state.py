"""
Tests for the Form-State Projector (stage, prepare, unprepare).
"""

from formlayout.model import Config, Item, ItemType, Media, MediaType, Section
from formlayout.form_state import is_list_group, prepare, stage, unprepare
from formlayout.serialization import config_to_dict


def build_config() -> Config:
    return Config(
        name="testForm",
        label="Test Form",
        sections=[
            Section(name="section1", items=[
                Item(name="field1", label="Field 1", type=ItemType.TEXT),
                Item(name="field2", label="Field 2", type=ItemType.SELECT),
                Item(name="field3", label="Field 3", type=ItemType.NUMBER),
            ]),
        ],
    )


def build_config_with_sub_sections() -> Config:
    return Config(
        name="testFormWithSubsections",
        label="Test Form With Subsections",
        sections=[Section(
            name="mainSection",
            label="Main Section",
            items=[Item(name="mainField", type=ItemType.TEXT)],
            sub_sections=[Section(name="subSection1", label="Sub Section 1", items=[
                Item(name="subField1", type=ItemType.NUMBER),
                Item(name="subField2", type=ItemType.TEXT),
            ])],
        )],
    )


class TestStage:
    """Default form state."""

    def test_defaults(self):
        config = build_config()
        config.sections[0].items[0].default = "default text"
        config.sections[0].items[1].default = "option1"
        config.sections[0].items[2].default = 5
        assert stage(config) == {"field1": "default text", "field2": "option1", "field3": 5}

    def test_empty_defaults(self):
        assert stage(build_config()) == {"field1": "", "field2": "", "field3": ""}

    def test_no_schema(self):
        assert stage() == {}
        assert stage(None) == {}

    def test_list_group(self):
        config = Config(name="t", sections=[Section(name="s", items=[
            Item(name="groupField", type=ItemType.GROUP, sub_type="list", default=["item1"]),
            Item(name="rows", type=ItemType.GROUP, sub_type="dynamicList"),
        ])])
        assert stage(config) == {"groupField": ["item1"], "rows": []}

    def test_checkbox_group_expands(self):
        """Non-list groups contribute their sub-items, not themselves."""
        config = Config(name="t", sections=[Section(name="s", items=[
            Item(name="features", type=ItemType.GROUP, sub_items=[
                Item(name="lawn", type=ItemType.CHECKBOX, default=True),
                Item(name="patio", type=ItemType.CHECKBOX),
                Item(name="photo", type=ItemType.FILE),
            ]),
        ])])
        assert stage(config) == {"lawn": True, "patio": ""}

    def test_file_items_skipped(self):
        config = Config(name="t", sections=[Section(name="s", items=[
            Item(name="upload", type=ItemType.FILE, default="x.pdf"),
        ])])
        assert stage(config) == {}

    def test_sub_sections(self):
        assert stage(build_config_with_sub_sections()) == {"mainField": "", "subField1": "", "subField2": ""}

    def test_defaults_are_copies(self):
        config = Config(name="t", sections=[Section(name="s", items=[
            Item(name="g", type=ItemType.GROUP, sub_type="list", default=["a"]),
        ])])
        staged = stage(config)
        staged["g"].append("b")
        assert config.sections[0].items[0].default == ["a"]

    def test_is_list_group(self):
        assert is_list_group(Item(name="g", type=ItemType.GROUP, sub_type="LIST"))
        assert not is_list_group(Item(name="g", type=ItemType.GROUP))
        assert not is_list_group(Item(name="t", type=ItemType.TEXT, sub_type="list"))


class TestPrepare:
    """Form state -> result tree."""

    def test_prepare(self):
        result = prepare({"field1": "test value", "field2": "option1", "field3": 15}, build_config())
        items = [config_to_dict(result)["sections"][0]["items"][i] for i in range(3)]
        assert items[0] == {"name": "field1", "entry": "test value"}
        assert items[1] == {"name": "field2", "entry": "option1"}
        assert items[2] == {"name": "field3", "entry": 15}

    def test_blank_values_omitted(self):
        """A cleared field carries no entry at all."""
        result = prepare({"field1": "test value", "field2": "", "field3": 15}, build_config())
        assert config_to_dict(result)["sections"][0]["items"][1] == {"name": "field2"}

    def test_comment_and_media_kept(self):
        config = build_config()
        config.sections[0].items[0].comment = "Test comment"
        config.sections[0].items[0].media = [Media(type=MediaType.IMAGE, url="test.jpg")]
        result = prepare({"field1": "test"}, config)
        assert config_to_dict(result)["sections"][0]["items"][0] == {
            "name": "field1",
            "entry": "test",
            "comment": "Test comment",
            "media": [{"type": "image", "url": "test.jpg"}],
        }

    def test_sub_sections(self):
        result = prepare({"mainField": "main value", "subField1": 42}, build_config_with_sub_sections())
        sub = result.sections[0].sub_sections[0]
        assert sub.items[0].entry == 42
        assert sub.items[1].entry is None
        assert sub.label == "Sub Section 1"


class TestUnprepare:
    """Tree -> form state."""

    def test_unprepare(self):
        config = build_config()
        for item, entry in zip(config.sections[0].items, ["test value", "option1", 15]):
            item.entry = entry
        assert unprepare(config) == {"field1": "test value", "field2": "option1", "field3": 15}

    def test_blank_entries_skipped(self):
        config = build_config()
        config.sections[0].items[0].entry = "test value"
        config.sections[0].items[1].entry = ""
        assert unprepare(config) == {"field1": "test value"}

    def test_sub_items(self):
        config = Config(name="t", sections=[Section(name="s", items=[
            Item(name="parentItem", type=ItemType.GROUP, entry="parent value", sub_items=[
                Item(name="subItem1", type=ItemType.TEXT, entry="sub value 1"),
                Item(name="subItem2", type=ItemType.TEXT, entry=""),
            ]),
        ])])
        assert unprepare(config) == {"parentItem": "parent value", "subItem1": "sub value 1"}

    def test_round_trip_with_sub_sections(self):
        """unprepare(prepare(state)) gives the state back."""
        state = {"mainField": "main value", "subField1": 42, "subField2": "sub value"}
        prepared = prepare(state, build_config_with_sub_sections())
        assert config_to_dict(prepared)["sections"][0]["items"][0] == {"name": "mainField", "entry": "main value"}
        assert unprepare(prepared) == state

    def test_round_trip_with_sub_items(self):
        """Checkbox-group sub-item values survive prepare."""
        config = Config(name="t", sections=[Section(name="s", items=[
            Item(name="g", type=ItemType.GROUP, sub_items=[
                Item(name="g1", type=ItemType.CHECKBOX),
                Item(name="g2", type=ItemType.CHECKBOX),
            ]),
        ])])
        state = {"g1": "yes"}
        prepared = prepare(state, config)
        assert config_to_dict(prepared)["sections"][0]["items"][0] == {
            "name": "g",
            "subItems": [{"name": "g1", "entry": "yes"}, {"name": "g2"}],
        }
        assert unprepare(prepared) == state

    def test_falsy_entries_kept(self):
        """0 and False are real answers."""
        config = build_config()
        config.sections[0].items[0].entry = 0
        config.sections[0].items[1].entry = False
        assert unprepare(config) == {"field1": 0, "field2": False}
