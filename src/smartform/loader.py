"""Load form declarations from TOML files.

A declaration file holds one ``[form]`` table::

    [form]
    name = "profile"

    [[form.fields]]
    kind = "text"
    name = "name"
    validator = { kind = "string", min_length = 1, message = "Name is required" }
    placeholder = "Your full name"

    [[form.fields]]
    kind = "array"
    name = "hobbies"
    sortable = true

    [[form.fields.fields]]
    kind = "text"
    name = "name"

    [form.values]
    name = "Ada"

Validators are written as their descriptor (``kind`` plus constraints).
Custom fields carry Python callables and cannot be declared in files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping

import tomlkit
from tomlkit.exceptions import TOMLKitError

from .builder import FormBuilder
from .enums import FieldKind
from .errors import DeclarationError, DefinitionError
from .validators import Validator, from_descriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormDeclaration:
    name: str
    builder: FormBuilder
    title: str = ""
    initial_values: Mapping[str, Any] = field(default_factory=dict)


def _validator(raw: Any, location: str) -> Validator:
    if not isinstance(raw, Mapping):
        raise DeclarationError(f"{location}: validator must be a table with a 'kind' key")

    options = dict(raw)
    kind = options.pop("kind", None)
    if kind is None:
        raise DeclarationError(f"{location}: validator is missing 'kind'")
    try:
        return from_descriptor(kind, options)
    except ValueError as e:
        raise DeclarationError(f"{location}: {e}") from e


def _options(raw: Any) -> list[Any] | None:
    if raw is None:
        return None
    return [{"value": o, "label": str(o)} if not isinstance(o, Mapping) else dict(o) for o in raw]


def _add_field(builder: FormBuilder, entry: Any, location: str) -> FormBuilder:
    if not isinstance(entry, Mapping):
        raise DeclarationError(f"{location}: field entry must be a table")

    config = dict(entry)
    kind = config.pop("kind", FieldKind.TEXT.value)
    name = config.pop("name", None)
    if not name:
        raise DeclarationError(f"{location}: field is missing 'name'")
    if "validator" in config:
        config["validator"] = _validator(config.pop("validator"), f"{location}.validator")

    try:
        match kind:
            case FieldKind.TEXT:
                return builder.text(name, **config)
            case FieldKind.TEXTAREA:
                return builder.textarea(name, **config)
            case FieldKind.SELECT:
                return builder.select(name, options=_options(config.pop("options", None)), **config)
            case FieldKind.ARRAY:
                items = config.pop("fields", None)
                if not items:
                    raise DeclarationError(f"{location}: array field '{name}' has no 'fields'")
                return builder.array(
                    name,
                    fields=lambda row: _build_fields(row, items, f"{location}.fields"),
                    **config,
                )
            case FieldKind.CUSTOM:
                raise DeclarationError(f"{location}: custom fields cannot be declared in files")
            case _:
                raise DeclarationError(f"{location}: unknown field kind '{kind}'")
    except DeclarationError:
        raise
    except DefinitionError as e:
        raise DeclarationError(f"{location}: {e}") from e


def _build_fields(builder: FormBuilder, entries: Iterable[Any], location: str) -> FormBuilder:
    for index, entry in enumerate(entries):
        builder = _add_field(builder, entry, f"{location}.{index}")
    return builder


def build_form(declaration: Mapping[str, Any], default_name: str = "form") -> FormDeclaration:
    """Build a FormDeclaration from a plain mapping.

    Accepts either the content of the ``[form]`` table or a document
    containing it.
    """
    table = declaration.get("form", declaration)
    if not isinstance(table, Mapping):
        raise DeclarationError("'form' must be a table")

    entries = table.get("fields")
    if not isinstance(entries, list) or not entries:
        raise DeclarationError("Form declaration requires a non-empty 'fields' list")

    values = table.get("values", {})
    if not isinstance(values, Mapping):
        raise DeclarationError("'values' must be a table")

    return FormDeclaration(
        name=str(table.get("name") or default_name),
        title=str(table.get("title", "")),
        builder=_build_fields(FormBuilder(), entries, "fields"),
        initial_values=dict(values),
    )


def load_form(path: Path | str) -> FormDeclaration:
    """Load a declaration file.

    The form name defaults to the file stem.

    Raises:
        DeclarationError: If the file is missing, not valid TOML, or
            describes an invalid form
    """
    p = Path(path)
    if not p.is_file():
        raise DeclarationError(f"Form declaration not found: {path}")

    try:
        document = tomlkit.parse(p.read_text(encoding="utf-8")).unwrap()
    except TOMLKitError as e:
        raise DeclarationError(f"Invalid TOML syntax in {path}: {e}") from e

    declaration = build_form(document, default_name=p.stem)
    logger.debug(f"Loaded form '{declaration.name}' from {path}")
    return declaration


def load_forms(paths: Iterable[Path | str]) -> dict[str, FormDeclaration]:
    forms: dict[str, FormDeclaration] = {}
    for path in paths:
        declaration = load_form(path)
        if declaration.name in forms:
            raise DeclarationError(f"Duplicate form name '{declaration.name}' in {path}")
        forms[declaration.name] = declaration
    return forms
