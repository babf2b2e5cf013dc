"""Validator unit tests"""

from typing import Annotated, Literal

import pytest
from pydantic import Field

from smartform.enums import ValidatorKind
from smartform.validators import (
    Validator,
    array_of,
    boolean,
    email,
    from_descriptor,
    integer,
    number,
    object_of,
    one_of,
    string,
)


def test_default_string_accepts_any_string():
    validator = string()

    assert validator.safe_parse("").success is True
    assert validator.safe_parse("anything").data == "anything"
    assert validator.safe_parse(5).success is False


def test_string_min_length_reports_issue():
    result = string(min_length=1).safe_parse("")

    assert result.success is False
    assert len(result.issues) == 1
    assert result.issues[0].path == ()
    assert "at least 1 character" in result.issues[0].message


def test_string_pattern():
    validator = string(pattern=r"^\d{4}$")

    assert validator.safe_parse("2024").success is True
    result = validator.safe_parse("20x4")
    assert result.success is False
    assert "pattern" in result.issues[0].message
    assert validator.constraints["pattern"] == r"^\d{4}$"


def test_string_pattern_supports_lookarounds():
    validator = string(pattern=r"^(?=.*\d)(?=.*[a-z]).{6,}$")

    assert validator.is_valid("abc123") is True
    assert validator.is_valid("abcdef") is False
    assert validator.is_valid("a1") is False


def test_number_descriptor_exposes_bounds():
    validator = number(ge=0, le=100)

    assert validator.kind == ValidatorKind.NUMBER
    assert validator.descriptor.is_numeric is True
    assert validator.constraints["ge"] == 0
    assert validator.constraints["le"] == 100
    assert validator.constraints["coerce"] is False


def test_number_rejects_numeric_strings_without_coercion():
    assert number().safe_parse("42").success is False
    assert number().safe_parse(42.5).data == 42.5


def test_number_coerces_numeric_strings_when_declared():
    result = number(coerce=True).safe_parse("42")

    assert result.success is True
    assert result.data == 42


def test_number_bounds_are_enforced():
    validator = number(ge=0, le=10)

    assert validator.is_valid(10) is True
    assert validator.is_valid(-1) is False
    assert validator.is_valid(11) is False


def test_integer_descriptor():
    validator = integer(gt=0, multiple_of=5)

    assert validator.kind == ValidatorKind.INTEGER
    assert validator.constraints == {"gt": 0, "multiple_of": 5, "coerce": False}
    assert validator.is_valid(10) is True
    assert validator.is_valid(7) is False


def test_boolean_strict_by_default():
    assert boolean().is_valid(True) is True
    assert boolean().is_valid("yes") is False
    assert boolean(coerce=True).safe_parse("yes").data is True


def test_one_of():
    validator = one_of(["us", "uk"])

    assert validator.kind == ValidatorKind.ENUM
    assert validator.constraints["values"] == ("us", "uk")
    assert validator.is_valid("us") is True
    assert validator.is_valid("fr") is False


def test_one_of_requires_values():
    with pytest.raises(ValueError):
        one_of([])


def test_message_override_replaces_engine_message():
    result = string(min_length=1, message="Name is required").safe_parse("")

    assert result.success is False
    assert [issue.message for issue in result.issues] == ["Name is required"]


def test_refine_adds_predicate():
    validator = string().refine(lambda v: v.startswith("a"), "Must start with a")

    assert validator.is_valid("apple") is True
    result = validator.safe_parse("pear")
    assert result.issues[0].message == "Must start with a"
    assert validator.kind == ValidatorKind.STRING


def test_email():
    validator = email()

    assert validator.is_valid("ada@example.com") is True
    assert validator.safe_parse("nope").issues[0].message == "Invalid email address"
    assert validator.constraints["format"] == "email"


def test_object_of_reports_nested_paths():
    rows = array_of(object_of({"name": string(min_length=1)}))
    schema = object_of({"items": rows})

    result = schema.safe_parse({"items": [{"name": "ok"}, {"name": ""}]})

    assert result.success is False
    assert [issue.path for issue in result.issues] == [("items", 1, "name")]


def test_object_of_reports_missing_keys():
    result = object_of({"name": string()}).safe_parse({})

    assert result.success is False
    assert result.issues[0].path == ("name",)


def test_object_of_drops_unknown_keys():
    result = object_of({"name": string()}).safe_parse({"name": "a", "extra": 1})

    assert result.data == {"name": "a"}


def test_of_recovers_constraints_from_annotation():
    validator = Validator.of(Annotated[int, Field(ge=1, le=10)])

    assert validator.kind == ValidatorKind.INTEGER
    assert validator.constraints["ge"] == 1
    assert validator.constraints["le"] == 10
    assert validator.constraints["coerce"] is True
    assert validator.is_valid(5) is True
    assert validator.is_valid(11) is False


def test_of_literal_is_enum():
    validator = Validator.of(Literal["a", "b"])

    assert validator.kind == ValidatorKind.ENUM
    assert validator.constraints["values"] == ("a", "b")


def test_of_plain_string():
    validator = Validator.of(str)

    assert validator.kind == ValidatorKind.STRING
    assert dict(validator.constraints) == {}


def test_from_descriptor_round_trips_scalar_kinds():
    original = integer(ge=1, le=5)
    rebuilt = from_descriptor(original.kind.value, original.constraints)

    assert rebuilt.descriptor == original.descriptor
    assert rebuilt.is_valid(3) is True
    assert rebuilt.is_valid(6) is False


def test_from_descriptor_email_and_message():
    validator = from_descriptor("string", {"format": "email", "message": "Bad email"})

    assert validator.constraints["format"] == "email"
    assert validator.safe_parse("x").issues[0].message == "Bad email"


def test_from_descriptor_rejects_unknown_kind():
    with pytest.raises(ValueError):
        from_descriptor("bogus")


def test_from_descriptor_rejects_unknown_constraint():
    with pytest.raises(ValueError, match="Invalid constraints"):
        from_descriptor("string", {"minimum": 1})


def test_descriptor_constraints_are_read_only():
    validator = number(ge=0)

    with pytest.raises(TypeError):
        validator.constraints["ge"] = 5
