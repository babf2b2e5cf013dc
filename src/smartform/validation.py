"""Normalize validator output into path-qualified field errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from .paths import join_path
from .validators import Validator


@dataclass(frozen=True, slots=True)
class FieldError:
    path: str
    message: str


@dataclass(frozen=True, slots=True)
class ValidationResult:
    success: bool
    data: Any = None
    errors: tuple[FieldError, ...] = ()


def validate(schema: Validator, data: Any) -> ValidationResult:
    """Run ``schema`` against ``data``.

    On success the result carries the schema's coerced output. On failure
    every issue becomes one FieldError whose path uses the store's dotted
    convention (``items.0.name``), in the order the engine reported them.
    """
    result = schema.safe_parse(data)
    if result.success:
        return ValidationResult(success=True, data=result.data)

    return ValidationResult(
        success=False,
        errors=tuple(
            FieldError(path=join_path(*issue.path), message=issue.message)
            for issue in result.issues
        ),
    )


def format_errors(errors: Iterable[FieldError], title: str = "Validation failed:") -> str:
    lines = [title]
    for error in errors:
        lines.append(f"  - {error.path}: {error.message}" if error.path else f"  - {error.message}")
    return "\n".join(lines)
