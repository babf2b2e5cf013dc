"""Form declaration loader unit tests"""

from pathlib import Path

import pytest

from smartform.enums import InputType, ValidatorKind
from smartform.errors import DeclarationError, DefinitionError
from smartform.fields import ArrayField, SelectField, TextareaField, TextField
from smartform.form import Form
from smartform.loader import build_form, load_form, load_forms

PROFILE = """
[form]
name = "profile"
title = "Your profile"

[[form.fields]]
kind = "text"
name = "name"
span = 6
validator = { kind = "string", min_length = 1, message = "Name is required" }

[[form.fields]]
kind = "text"
name = "age"
validator = { kind = "integer", ge = 0, le = 120 }

[[form.fields]]
kind = "textarea"
name = "bio"
rows = 4

[[form.fields]]
kind = "select"
name = "country"
options = ["us", "uk"]

[[form.fields]]
kind = "array"
name = "hobbies"
sortable = true

[[form.fields.fields]]
kind = "text"
name = "name"
validator = { kind = "string", min_length = 1 }

[form.values]
name = "Ada"
country = "uk"
"""


def write(tmp_path: Path, content: str, name: str = "profile.toml") -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


def test_load_form(tmp_path):
    declaration = load_form(write(tmp_path, PROFILE))

    assert declaration.name == "profile"
    assert declaration.title == "Your profile"
    assert declaration.initial_values == {"name": "Ada", "country": "uk"}

    name, age, bio, country, hobbies = declaration.builder.fields
    assert isinstance(name, TextField)
    assert name.span == 6
    assert name.validator.constraints["message"] == "Name is required"
    assert age.validator.kind == ValidatorKind.INTEGER
    assert age.validator.constraints["le"] == 120
    assert isinstance(bio, TextareaField)
    assert bio.rows == 4
    assert isinstance(country, SelectField)
    assert [(o.value, o.label) for o in country.options] == [("us", "us"), ("uk", "uk")]
    assert isinstance(hobbies, ArrayField)
    assert hobbies.sortable is True
    assert [f.name for f in hobbies.item_fields] == ["name"]


def test_loaded_form_validates(tmp_path):
    declaration = load_form(write(tmp_path, PROFILE))
    form = Form(
        declaration.builder,
        initial_values={**declaration.initial_values, "age": 200, "hobbies": [{"name": ""}]},
    )

    result = form.validate()

    assert result.success is False
    assert sorted(e.path for e in result.errors) == ["age", "hobbies.0.name"]


def test_name_defaults_to_file_stem(tmp_path):
    path = write(tmp_path, '[[fields]]\nkind = "text"\nname = "email"\n', name="signup.toml")

    declaration = load_form(path)

    assert declaration.name == "signup"
    assert declaration.initial_values == {}


def test_kind_defaults_to_text():
    declaration = build_form({"fields": [{"name": "city"}]})

    assert isinstance(declaration.builder.fields[0], TextField)
    assert declaration.name == "form"


def test_email_validator_descriptor():
    declaration = build_form(
        {"fields": [{"name": "email", "validator": {"kind": "string", "format": "email"}}]}
    )

    validator = declaration.builder.fields[0].validator
    assert validator.constraints["format"] == "email"
    assert validator.is_valid("a@b.co") is True
    assert validator.is_valid("nope") is False


def test_declaration_errors_are_definition_errors():
    assert issubclass(DeclarationError, DefinitionError)


def test_missing_file(tmp_path):
    with pytest.raises(DeclarationError, match="not found"):
        load_form(tmp_path / "missing.toml")


def test_invalid_toml(tmp_path):
    with pytest.raises(DeclarationError, match="Invalid TOML syntax"):
        load_form(write(tmp_path, "[form\nname = "))


@pytest.mark.parametrize(
    "declaration, message",
    [
        ({}, "non-empty 'fields'"),
        ({"fields": []}, "non-empty 'fields'"),
        ({"fields": [{"kind": "text"}]}, "missing 'name'"),
        ({"fields": [{"kind": "slider", "name": "x"}]}, "unknown field kind 'slider'"),
        ({"fields": [{"kind": "custom", "name": "x"}]}, "custom fields cannot be declared"),
        ({"fields": [{"kind": "array", "name": "x"}]}, "has no 'fields'"),
        ({"fields": [{"name": "x", "validator": {"kind": "uuid"}}]}, "fields.0.validator"),
        ({"fields": [{"name": "x", "validator": {"min_length": 1}}]}, "missing 'kind'"),
        ({"fields": [{"name": "x", "validator": {"kind": "string", "size": 1}}]}, "Invalid constraints"),
        ({"fields": [{"name": "x"}, {"name": "x"}]}, "Duplicate field name"),
        ({"fields": [{"name": "x", "span": 13}]}, "fields.0"),
        ({"fields": [{"name": "x"}], "values": [1]}, "'values' must be a table"),
    ],
)
def test_invalid_declarations(declaration, message):
    with pytest.raises(DeclarationError, match=message):
        build_form(declaration)


def test_nested_field_errors_report_location():
    declaration = {
        "fields": [
            {"name": "ok"},
            {"kind": "array", "name": "rows", "fields": [{"kind": "select", "name": "c"}]},
        ]
    }

    with pytest.raises(DeclarationError, match=r"fields\.1\.fields\.0"):
        build_form(declaration)


def test_load_forms_rejects_duplicate_names(tmp_path):
    first = write(tmp_path, PROFILE, name="a.toml")
    second = write(tmp_path, PROFILE, name="b.toml")

    with pytest.raises(DeclarationError, match="Duplicate form name 'profile'"):
        load_forms([first, second])


def test_load_forms(tmp_path):
    profile = write(tmp_path, PROFILE)
    signup = write(tmp_path, '[[fields]]\nname = "email"\n', name="signup.toml")

    forms = load_forms([profile, signup])

    assert sorted(forms) == ["profile", "signup"]


def test_text_input_type_and_placeholder():
    declaration = build_form(
        {
            "fields": [
                {"name": "secret", "input_type": "password", "placeholder": "Secret"},
                {"kind": "textarea", "name": "bio", "placeholder": "About you"},
            ]
        }
    )

    secret, bio = declaration.builder.fields
    assert secret.input_type == InputType.PASSWORD
    assert secret.placeholder == "Secret"
    assert bio.placeholder == "About you"


def test_unknown_input_type_is_rejected():
    with pytest.raises(DeclarationError, match="input_type"):
        build_form({"fields": [{"name": "x", "input_type": "color"}]})
