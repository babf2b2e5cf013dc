"""Immutable fluent form builder.

Every chaining call returns a new :class:`FormBuilder` holding the previous
field tuple plus one appended definition; a builder is never mutated in
place::

    profile = (
        form()
        .text("name", validator=string(min_length=1))
        .select("country", options=[{"value": "us", "label": "US"}])
        .array("hobbies", fields=lambda row: row.text("name"))
    )

The inferred data shape of a builder is available at runtime as
:attr:`FormBuilder.shape`.
"""

from __future__ import annotations

import copy
import logging
from functools import cached_property
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from pydantic import ValidationError

from .consts import DEFAULT_SCALAR_VALUE, PATH_SEPARATOR
from .errors import DefinitionError
from .fields import (
    ArrayField,
    CustomField,
    NamedField,
    RenderFn,
    SelectField,
    SelectOption,
    TextareaField,
    TextField,
    build_field,
    format_definition_error,
)
from .validators import Validator, array_of, object_of, one_of

logger = logging.getLogger(__name__)

RowFactory = Callable[["FormBuilder"], "FormBuilder"]


class FormBuilder:
    """Accumulates field definitions and derives schema, defaults and shape."""

    def __init__(self, fields: Iterable[Any] = ()) -> None:
        self._fields = tuple(fields)

    def __repr__(self) -> str:
        names = [getattr(f, "name", f.kind) for f in self._fields]
        return f"FormBuilder({names})"

    def __len__(self) -> int:
        return len(self._fields)

    @property
    def fields(self) -> tuple:
        return self._fields

    @cached_property
    def field_map(self) -> Mapping[str, NamedField]:
        return MappingProxyType(
            {f.name: f for f in self._fields if not isinstance(f, CustomField)}
        )

    def _append(self, field) -> "FormBuilder":
        if not isinstance(field, CustomField) and field.name in self.field_map:
            raise DefinitionError(f"Duplicate field name: {field.name}")
        return FormBuilder(self._fields + (field,))

    def text(self, name: str, **config: Any) -> "FormBuilder":
        return self._append(build_field(TextField, name=name, **config))

    def textarea(self, name: str, **config: Any) -> "FormBuilder":
        return self._append(build_field(TextareaField, name=name, **config))

    def select(
        self,
        name: str,
        *,
        options: Iterable[Any] | None = None,
        validator: Validator | None = None,
        **config: Any,
    ) -> "FormBuilder":
        """Append a select field.

        Args:
            name: Field name
            options: Non-empty sequence of ``{value, label}`` mappings or
                :class:`SelectOption` objects
            validator: Rule constraining the value set; derived from the
                option values when omitted

        Raises:
            DefinitionError: If options are missing or not accepted by the
                validator
        """
        if not options:
            raise DefinitionError(f"Select field '{name}' requires options")

        try:
            parsed = tuple(
                o if isinstance(o, SelectOption) else SelectOption.model_validate(o)
                for o in options
            )
        except ValidationError as e:
            raise DefinitionError(format_definition_error(e)) from e

        if validator is None:
            validator = one_of(o.value for o in parsed)

        return self._append(
            build_field(SelectField, name=name, options=parsed, validator=validator, **config)
        )

    def array(
        self, name: str, *, fields: RowFactory | None = None, **config: Any
    ) -> "FormBuilder":
        """Append a repeated group of rows.

        Args:
            name: Field name
            fields: Callable receiving an empty builder and returning the
                builder describing one row

        Raises:
            DefinitionError: If ``fields`` is missing or does not return a
                FormBuilder
        """
        if fields is None:
            raise DefinitionError(f"Array field '{name}' requires item fields")

        row = fields(FormBuilder())
        if not isinstance(row, FormBuilder):
            raise DefinitionError(
                f"Item fields of array '{name}' must be built with a FormBuilder, "
                f"got {type(row).__name__}"
            )
        return self._append(
            build_field(ArrayField, name=name, item_fields=row.fields, **config)
        )

    def custom(self, render: RenderFn, **config: Any) -> "FormBuilder":
        return self._append(build_field(CustomField, render=render, **config))

    def to_schema(self) -> Validator:
        """Derive the composite validator for all non-custom fields."""
        return _object_schema(self._fields)

    def defaults(self) -> dict[str, Any]:
        """Initial values for every non-custom field.

        Arrays default to their declared rows or an empty list, other fields
        to their declared default or an empty string.
        """
        return _defaults_for(self._fields)

    @property
    def shape(self) -> Mapping[str, Any]:
        """Field name -> value annotation for every non-custom field."""
        return MappingProxyType(
            {name: _field_schema(f).annotation for name, f in self.field_map.items()}
        )

    def find_field(self, path: str) -> NamedField | None:
        """Resolve a store path to the field definition it addresses.

        Numeric segments (array indices) are skipped, so ``hobbies.0.name``
        resolves to the ``name`` item field of the ``hobbies`` array.
        """
        fields = self.field_map
        found = None
        for segment in path.split(PATH_SEPARATOR):
            if segment.isdigit():
                continue
            if fields is None or segment not in fields:
                return None
            found = fields[segment]
            fields = (
                {f.name: f for f in found.item_fields if not isinstance(f, CustomField)}
                if isinstance(found, ArrayField)
                else None
            )
        return found


def form() -> FormBuilder:
    return FormBuilder()


def _field_schema(field: NamedField) -> Validator:
    if isinstance(field, ArrayField):
        return array_of(_object_schema(field.item_fields, name=f"{field.name}_row"))
    return field.validator


def _object_schema(fields: Iterable[Any], name: str = "FormData") -> Validator:
    shape = {
        f.name: _field_schema(f) for f in fields if not isinstance(f, CustomField)
    }
    return object_of(shape, name=name)


def _defaults_for(fields: Iterable[Any]) -> dict[str, Any]:
    initial: dict[str, Any] = {}
    for field in fields:
        if isinstance(field, CustomField):
            continue
        if isinstance(field, ArrayField):
            initial[field.name] = copy.deepcopy(list(field.default or []))
        elif field.default is None:
            initial[field.name] = DEFAULT_SCALAR_VALUE
        else:
            initial[field.name] = copy.deepcopy(field.default)
    return initial


def row_defaults(field: ArrayField) -> dict[str, Any]:
    """A freshly defaulted row for ``field``."""
    return _defaults_for(field.item_fields)
