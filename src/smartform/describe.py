from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from .config import RenderConfig
from .consts import DEFAULT_SCALAR_VALUE
from .enums import InputType, ValidatorKind
from .fields import (
    ArrayField,
    CustomField,
    SelectField,
    SelectOption,
    TextareaField,
    TextField,
)
from .paths import join_path
from .utils import humanize_label
from .validators import ValidatorDescriptor

if TYPE_CHECKING:
    from .form import Form


class FieldProps(BaseModel):
    name: str
    label: str
    value: Any = None
    error: Optional[str] = None
    touched: bool = False
    span: Optional[int] = None


class TextFieldProps(FieldProps):
    kind: Literal["text"] = "text"
    input_type: InputType = InputType.TEXT
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    placeholder: Optional[str] = None


class TextareaFieldProps(FieldProps):
    kind: Literal["textarea"] = "textarea"
    rows: int
    placeholder: Optional[str] = None


class SelectFieldProps(FieldProps):
    kind: Literal["select"] = "select"
    options: list[SelectOption] = []
    placeholder: Optional[str] = None


class ArrayFieldProps(FieldProps):
    kind: Literal["array"] = "array"
    value: list[Any] = []
    sortable: bool = False
    rows: list[list[AnyFieldProps]] = []


class CustomFieldProps(BaseModel):
    kind: Literal["custom"] = "custom"
    span: Optional[int] = None
    content: Any = None


AnyFieldProps = Annotated[
    Union[TextFieldProps, TextareaFieldProps, SelectFieldProps, ArrayFieldProps, CustomFieldProps],
    Field(discriminator="kind"),
]

ArrayFieldProps.model_rebuild()


class FormDescription(BaseModel):
    fields: list[AnyFieldProps]
    is_submitting: bool = False
    submit_label: str
    errors: dict[str, str] = {}


def input_type_for(descriptor: ValidatorDescriptor) -> InputType:
    if descriptor.constraints.get("format") == "email":
        return InputType.EMAIL
    if descriptor.is_numeric:
        return InputType.NUMBER
    return InputType.TEXT


def numeric_hints(descriptor: ValidatorDescriptor) -> dict[str, Optional[float]]:
    """min/max/step UI hints read from a validator descriptor."""
    if not descriptor.is_numeric:
        return {"min": None, "max": None, "step": None}

    constraints = descriptor.constraints
    low = constraints.get("ge", constraints.get("gt"))
    high = constraints.get("le", constraints.get("lt"))
    step = constraints.get("multiple_of")
    if step is None and descriptor.kind == ValidatorKind.INTEGER:
        step = 1
    return {"min": low, "max": high, "step": step}


class _Describer:
    def __init__(self, form: "Form", config: RenderConfig) -> None:
        self.state = form.store.get_snapshot()
        self.config = config

    def label(self, field, path: str) -> str:
        if field.label:
            return field.label
        return humanize_label(path) if self.config.humanize_labels else field.name

    def common(self, field, path: str, value: Any) -> dict[str, Any]:
        return {
            "name": path,
            "label": self.label(field, path),
            "value": value,
            "error": self.state.errors.get(path),
            "touched": self.state.touched.get(path, False),
            "span": field.span,
        }

    def describe(self, field, path: str, value: Any):
        if isinstance(field, CustomField):
            return CustomFieldProps(span=field.span, content=field.render(self.state.values))

        if value is None:
            value = [] if isinstance(field, ArrayField) else DEFAULT_SCALAR_VALUE

        if isinstance(field, TextField):
            descriptor = field.validator.descriptor
            return TextFieldProps(
                **self.common(field, path, value),
                input_type=field.input_type or input_type_for(descriptor),
                placeholder=field.placeholder,
                **numeric_hints(descriptor),
            )
        if isinstance(field, TextareaField):
            return TextareaFieldProps(
                **self.common(field, path, value),
                rows=field.rows,
                placeholder=field.placeholder,
            )
        if isinstance(field, SelectField):
            return SelectFieldProps(
                **self.common(field, path, value),
                options=list(field.options),
                placeholder=field.placeholder,
            )
        if isinstance(field, ArrayField):
            items = list(value) if isinstance(value, (list, tuple)) else []
            return ArrayFieldProps(
                **self.common(field, path, items),
                sortable=field.sortable,
                rows=[self.row(field, path, index, item) for index, item in enumerate(items)],
            )
        raise TypeError(f"Unknown field definition: {field!r}")

    def row(self, field: ArrayField, path: str, index: int, item: Any) -> list:
        item = item if isinstance(item, dict) else {}
        return [
            self.describe(
                sub,
                join_path(path, index, getattr(sub, "name", "")),
                None if isinstance(sub, CustomField) else item.get(sub.name),
            )
            for sub in field.item_fields
        ]


def describe_form(form: "Form", settings: RenderConfig | None = None) -> FormDescription:
    """Build the rendering-agnostic description of ``form``'s current state."""
    config = settings or RenderConfig()
    describer = _Describer(form, config)
    values = describer.state.values
    fields = [
        describer.describe(
            field,
            getattr(field, "name", ""),
            None if isinstance(field, CustomField) else values.get(field.name),
        )
        for field in form.builder.fields
    ]
    return FormDescription(
        fields=fields,
        is_submitting=describer.state.is_submitting,
        submit_label=config.submit_label,
        errors=dict(describer.state.errors),
    )
