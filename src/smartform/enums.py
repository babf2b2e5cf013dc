"""Enumeration type definitions"""

from enum import Enum


class FieldKind(str, Enum):
    """Field definition variants"""

    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    ARRAY = "array"
    CUSTOM = "custom"


class ValidatorKind(str, Enum):
    """Structural kinds a validator descriptor can report"""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ENUM = "enum"
    ARRAY = "array"
    OBJECT = "object"
    ANY = "any"


class InputType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    EMAIL = "email"
    PASSWORD = "password"
