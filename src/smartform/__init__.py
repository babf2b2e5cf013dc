"""Declare a form once; derive validation, path-addressed state and a rendering description."""

from .builder import FormBuilder, form
from .errors import (
    ConfigException,
    DeclarationError,
    DefinitionError,
    PathError,
    SmartFormException,
)
from .fields import (
    ArrayField,
    CustomField,
    SelectField,
    SelectOption,
    TextareaField,
    TextField,
)
from .form import Form
from .store import FormStore, FormStoreState
from .validation import FieldError, ValidationResult, validate
from .validators import Validator

__all__ = [
    "ArrayField",
    "ConfigException",
    "CustomField",
    "DeclarationError",
    "DefinitionError",
    "FieldError",
    "Form",
    "FormBuilder",
    "FormStore",
    "FormStoreState",
    "PathError",
    "SelectField",
    "SelectOption",
    "SmartFormException",
    "TextField",
    "TextareaField",
    "ValidationResult",
    "Validator",
    "form",
    "validate",
]
