from __future__ import annotations

from typing import Annotated, Any, Callable, Literal, Mapping, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .consts import DEFAULT_TEXTAREA_ROWS, PATH_SEPARATOR, SPAN_MAX, SPAN_MIN
from .enums import InputType, ValidatorKind
from .errors import DefinitionError
from .validators import Validator, string

RenderFn = Callable[[Mapping[str, Any]], Any]

M = TypeVar("M", bound=BaseModel)


class SelectOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: Any
    label: str


class _FieldBase(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    span: int | None = Field(default=None, ge=SPAN_MIN, le=SPAN_MAX)


class _NamedField(_FieldBase):
    name: str = Field(min_length=1)
    label: str | None = None
    default: Any = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field name cannot be blank")
        if PATH_SEPARATOR in v:
            raise ValueError(f"Field name cannot contain '{PATH_SEPARATOR}': {v}")
        if v.isdigit():
            raise ValueError(f"Field name cannot be numeric: {v}")
        return v


class TextField(_NamedField):
    kind: Literal["text"] = "text"
    validator: Validator = Field(default_factory=string)
    input_type: InputType | None = None
    placeholder: str | None = None


class TextareaField(_NamedField):
    kind: Literal["textarea"] = "textarea"
    validator: Validator = Field(default_factory=string)
    rows: int = Field(default=DEFAULT_TEXTAREA_ROWS, ge=1)
    placeholder: str | None = None


class SelectField(_NamedField):
    kind: Literal["select"] = "select"
    validator: Validator
    options: tuple[SelectOption, ...] = Field(min_length=1)
    placeholder: str | None = None

    @model_validator(mode="after")
    def validate_options(self) -> "SelectField":
        if self.validator.kind != ValidatorKind.ENUM:
            return self

        allowed = self.validator.constraints.get("values", ())
        unknown = [o.value for o in self.options if o.value not in allowed]
        if unknown:
            raise ValueError(f"Options not accepted by the validator: {unknown}")
        return self


class ArrayField(_NamedField):
    kind: Literal["array"] = "array"
    sortable: bool = False
    item_fields: tuple["FieldDefinition", ...] = ()
    default: tuple[Any, ...] | list[Any] | None = None

    @field_validator("item_fields")
    @classmethod
    def validate_unique_names(cls, v: tuple) -> tuple:
        ensure_unique_names(v)
        return v


class CustomField(_FieldBase):
    kind: Literal["custom"] = "custom"
    render: RenderFn


FieldDefinition = Annotated[
    Union[TextField, TextareaField, SelectField, ArrayField, CustomField],
    Field(discriminator="kind"),
]

NamedField = TextField | TextareaField | SelectField | ArrayField

ArrayField.model_rebuild()


def ensure_unique_names(fields) -> None:
    seen: set[str] = set()
    for field in fields:
        if isinstance(field, CustomField):
            continue
        if field.name in seen:
            raise ValueError(f"Duplicate field name: {field.name}")
        seen.add(field.name)


def format_definition_error(e: ValidationError) -> str:
    lines = [f"Invalid {e.title} definition:"]
    for error in e.errors():
        loc = " -> ".join(str(item) for item in error.get("loc", []))
        msg = error.get("msg", "")
        lines.append(f"  - {loc}: {msg}" if loc else f"  - {msg}")
    return "\n".join(lines)


def build_field(cls: Type[M], **config: Any) -> M:
    """Construct a field definition, turning pydantic errors into DefinitionError."""
    try:
        return cls(**config)
    except ValidationError as e:
        raise DefinitionError(format_definition_error(e)) from e
