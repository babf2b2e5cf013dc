"""Form builder unit tests"""

import pytest

from smartform.builder import FormBuilder, form, row_defaults
from smartform.enums import FieldKind, ValidatorKind
from smartform.errors import DefinitionError
from smartform.fields import ArrayField, CustomField, SelectField, TextareaField, TextField
from smartform.validators import integer, number, one_of, string

COUNTRIES = [
    {"value": "us", "label": "United States"},
    {"value": "uk", "label": "United Kingdom"},
]


def test_text_field_with_defaults():
    f = form().text("name")

    assert len(f.fields) == 1
    field = f.fields[0]
    assert isinstance(field, TextField)
    assert field.kind == FieldKind.TEXT
    assert field.name == "name"
    assert field.label is None
    assert field.span is None
    assert field.validator.kind == ValidatorKind.STRING


def test_text_field_with_config():
    f = form().text("email", validator=string(min_length=3), label="Email", span=6)

    field = f.fields[0]
    assert field.label == "Email"
    assert field.span == 6
    assert field.validator.constraints["min_length"] == 3


def test_textarea_field():
    f = form().textarea("bio", rows=5, label="Biography")

    field = f.fields[0]
    assert isinstance(field, TextareaField)
    assert field.rows == 5
    assert form().textarea("notes").fields[0].rows == 3


def test_select_field_derives_validator_from_options():
    f = form().select("country", options=COUNTRIES, placeholder="Select country")

    field = f.fields[0]
    assert isinstance(field, SelectField)
    assert len(field.options) == 2
    assert field.options[0].label == "United States"
    assert field.placeholder == "Select country"
    assert field.validator.constraints["values"] == ("us", "uk")


def test_select_field_rejects_options_outside_validator():
    with pytest.raises(DefinitionError, match="not accepted"):
        form().select("country", options=COUNTRIES, validator=one_of(["us"]))


def test_select_requires_options():
    with pytest.raises(DefinitionError, match="requires options"):
        form().select("country")

    with pytest.raises(DefinitionError):
        form().select("country", options=[])


def test_select_rejects_malformed_options():
    with pytest.raises(DefinitionError):
        form().select("country", options=[{"value": "us"}])


def test_array_field_with_item_fields():
    f = form().array(
        "hobbies",
        fields=lambda row: row.text("name", validator=string(min_length=1)).text(
            "years", validator=number()
        ),
        sortable=True,
    )

    field = f.fields[0]
    assert isinstance(field, ArrayField)
    assert field.sortable is True
    assert [sub.name for sub in field.item_fields] == ["name", "years"]


def test_array_requires_fields():
    with pytest.raises(DefinitionError, match="requires item fields"):
        form().array("hobbies")


def test_array_fields_must_return_builder():
    with pytest.raises(DefinitionError, match="FormBuilder"):
        form().array("hobbies", fields=lambda row: None)


def test_array_item_fields_are_a_snapshot():
    captured = []

    def rows(row):
        built = row.text("name")
        captured.append(built)
        return built

    f = form().array("items", fields=rows)
    captured[0].text("extra")

    assert len(f.fields[0].item_fields) == 1


def test_chaining_is_immutable():
    f1 = form().text("a")
    f2 = f1.text("b")

    assert len(f1.fields) == 1
    assert len(f2.fields) == 2
    assert f2.fields[0] is f1.fields[0]


def test_chaining_multiple_fields():
    f = (
        form()
        .text("firstName")
        .text("lastName")
        .textarea("bio")
        .select("country", options=[{"value": "us", "label": "US"}])
    )

    assert len(f) == 4


def test_duplicate_names_rejected():
    with pytest.raises(DefinitionError, match="Duplicate"):
        form().text("name").textarea("name")


def test_duplicate_item_names_rejected():
    with pytest.raises(DefinitionError):
        form().array("rows", fields=lambda row: row.text("a").text("a"))


def test_same_name_allowed_in_different_lists():
    f = form().text("name").array("rows", fields=lambda row: row.text("name"))

    assert len(f.fields) == 2


@pytest.mark.parametrize("span", [0, 13])
def test_span_out_of_range(span):
    with pytest.raises(DefinitionError, match="span"):
        form().text("name", span=span)


@pytest.mark.parametrize("name", ["", "a.b", "0", "  "])
def test_invalid_names(name):
    with pytest.raises(DefinitionError):
        form().text(name)


def test_unknown_config_rejected():
    with pytest.raises(DefinitionError):
        form().text("name", schema=string())


def test_non_positive_rows_rejected():
    with pytest.raises(DefinitionError, match="rows"):
        form().textarea("bio", rows=0)


def test_field_map_excludes_custom_fields():
    f = form().text("firstName").custom(lambda values: "hello").text("lastName")

    assert list(f.field_map) == ["firstName", "lastName"]
    assert f.field_map["firstName"].name == "firstName"
    assert f.field_map is f.field_map


def test_field_map_is_read_only():
    f = form().text("name")

    with pytest.raises(TypeError):
        f.field_map["other"] = f.fields[0]


def test_to_schema_validates_fields():
    schema = form().text("name", validator=string(min_length=1)).text("age", validator=number(ge=0)).to_schema()

    assert schema.safe_parse({"name": "John", "age": 25}).success is True
    assert schema.safe_parse({"name": "", "age": 25}).success is False
    assert schema.safe_parse({"name": "John", "age": -1}).success is False


def test_to_schema_builds_array_rows():
    schema = form().array(
        "hobbies", fields=lambda row: row.text("name", validator=string(min_length=1))
    ).to_schema()

    assert schema.safe_parse({"hobbies": [{"name": "Reading"}]}).success is True
    assert schema.safe_parse({"hobbies": []}).success is True
    assert schema.safe_parse({"hobbies": [{"name": ""}]}).success is False


def test_to_schema_ignores_custom_fields():
    schema = form().text("name").custom(lambda values: None).to_schema()

    assert schema.constraints["keys"] == ("name",)


def test_to_schema_is_deterministic():
    f = form().text("name").select("country", options=COUNTRIES)

    assert f.to_schema().descriptor == f.to_schema().descriptor


def test_defaults():
    f = (
        form()
        .text("name")
        .text("age", validator=integer(), default=18)
        .array("hobbies", fields=lambda row: row.text("name"))
        .array("tags", fields=lambda row: row.text("tag"), default=[{"tag": "a"}])
        .custom(lambda values: None)
    )

    assert f.defaults() == {
        "name": "",
        "age": 18,
        "hobbies": [],
        "tags": [{"tag": "a"}],
    }


def test_defaults_are_fresh_copies():
    f = form().array("tags", fields=lambda row: row.text("tag"), default=[{"tag": "a"}])

    first = f.defaults()
    first["tags"][0]["tag"] = "changed"

    assert f.defaults()["tags"] == [{"tag": "a"}]


def test_row_defaults():
    f = form().array(
        "hobbies", fields=lambda row: row.text("name").text("score", validator=number(), default=0)
    )

    assert row_defaults(f.fields[0]) == {"name": "", "score": 0}


def test_shape_lists_value_annotations():
    f = form().text("name").text("age", validator=integer()).array(
        "rows", fields=lambda row: row.text("x")
    )

    assert list(f.shape) == ["name", "age", "rows"]
    assert f.shape["name"] is str


def test_find_field_resolves_nested_paths():
    f = form().text("name").array("hobbies", fields=lambda row: row.text("title"))

    assert f.find_field("name").name == "name"
    assert isinstance(f.find_field("hobbies"), ArrayField)
    assert f.find_field("hobbies.0.title").name == "title"
    assert f.find_field("hobbies.0.missing") is None
    assert f.find_field("name.title") is None


def test_custom_field():
    def render(values):
        return f"Hello {values.get('name')}"

    f = form().custom(render, span=12)

    field = f.fields[0]
    assert isinstance(field, CustomField)
    assert field.span == 12
    assert field.render({"name": "Ada"}) == "Hello Ada"


def test_builder_accepts_existing_fields():
    f = FormBuilder(form().text("a").fields)

    assert [field.name for field in f.fields] == ["a"]
