"""Introspectable validation rules built on pydantic.

A :class:`Validator` pairs a pydantic-validatable annotation with a public
:class:`ValidatorDescriptor` (kind + named constraints). The descriptor is
what presentation layers read to answer questions such as "is this field
numeric?" or "what are its bounds?" without re-implementing validation.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Callable, Iterable, Literal, Mapping, Sequence, get_args, get_origin

import annotated_types
from pydantic import AfterValidator, Strict, TypeAdapter, ValidationError, WrapValidator
from pydantic.fields import FieldInfo
from pydantic_core import PydanticCustomError
from typing_extensions import Annotated, TypedDict, is_typeddict

from .enums import ValidatorKind

logger = logging.getLogger(__name__)

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

CONSTRAINT_NAMES = (
    "min_length",
    "max_length",
    "pattern",
    "ge",
    "gt",
    "le",
    "lt",
    "multiple_of",
)

NUMERIC_KINDS = frozenset({ValidatorKind.NUMBER, ValidatorKind.INTEGER})

Segment = str | int


@dataclass(frozen=True, slots=True)
class Issue:
    path: tuple[Segment, ...]
    message: str


@dataclass(frozen=True, slots=True)
class ParseResult:
    success: bool
    data: Any = None
    issues: tuple[Issue, ...] = ()


@dataclass(frozen=True, slots=True)
class ValidatorDescriptor:
    kind: ValidatorKind
    constraints: Mapping[str, Any]

    @property
    def is_numeric(self) -> bool:
        return self.kind in NUMERIC_KINDS


class Validator:
    """A validation rule that can parse values and describe itself.

    Args:
        annotation: Any type pydantic can validate (may carry ``Annotated``
            metadata)
        kind: Structural kind reported by :attr:`descriptor`
        constraints: Named constraints reported by :attr:`descriptor`
    """

    def __init__(
        self,
        annotation: Any,
        kind: ValidatorKind = ValidatorKind.ANY,
        constraints: Mapping[str, Any] | None = None,
    ) -> None:
        self._annotation = annotation
        self._descriptor = ValidatorDescriptor(
            kind=ValidatorKind(kind),
            constraints=MappingProxyType(dict(constraints or {})),
        )
        self._adapter: TypeAdapter | None = None

    def __repr__(self) -> str:
        constraints = ", ".join(f"{k}={v!r}" for k, v in self.constraints.items())
        return f"Validator({self.kind.value}{', ' if constraints else ''}{constraints})"

    @property
    def annotation(self) -> Any:
        return self._annotation

    @property
    def descriptor(self) -> ValidatorDescriptor:
        return self._descriptor

    @property
    def kind(self) -> ValidatorKind:
        return self._descriptor.kind

    @property
    def constraints(self) -> Mapping[str, Any]:
        return self._descriptor.constraints

    @property
    def adapter(self) -> TypeAdapter:
        if self._adapter is None:
            self._adapter = TypeAdapter(self._annotation)
        return self._adapter

    def safe_parse(self, value: Any) -> ParseResult:
        """Validate ``value`` without raising.

        Returns:
            ParseResult with the coerced data on success, or every issue the
            engine reported (in engine order) on failure
        """
        try:
            data = self.adapter.validate_python(value)
        except ValidationError as e:
            issues = tuple(
                Issue(path=tuple(error["loc"]), message=error["msg"]) for error in e.errors()
            )
            return ParseResult(success=False, issues=issues)
        return ParseResult(success=True, data=data)

    def is_valid(self, value: Any) -> bool:
        return self.safe_parse(value).success

    def refine(self, predicate: Callable[[Any], bool], message: str) -> "Validator":
        """Return a new validator that also requires ``predicate(value)``."""

        def check(value: Any) -> Any:
            if not predicate(value):
                raise PydanticCustomError("refine", message)
            return value

        return Validator(
            Annotated[self._annotation, AfterValidator(check)],
            kind=self.kind,
            constraints=self.constraints,
        )

    def with_message(self, message: str) -> "Validator":
        """Return a new validator reporting ``message`` for any failure."""

        def wrap(value: Any, handler: Callable[[Any], Any]) -> Any:
            try:
                return handler(value)
            except ValidationError:
                raise PydanticCustomError("custom", message) from None

        return Validator(
            Annotated[self._annotation, WrapValidator(wrap)],
            kind=self.kind,
            constraints={**self.constraints, "message": message},
        )

    @classmethod
    def of(cls, annotation: Any) -> "Validator":
        """Build a validator from an arbitrary annotation.

        Kind and constraints are recovered from pydantic's field metadata
        (annotated-types ``Ge``, ``Le``, ``MinLen``, ...).
        """
        info = FieldInfo.from_annotation(annotation)
        constraints: dict[str, Any] = {}
        strict = False
        for item in info.metadata:
            if isinstance(item, Strict):
                strict = item.strict
                continue
            for name in CONSTRAINT_NAMES:
                value = getattr(item, name, None)
                if value is not None:
                    constraints[name] = value

        kind, extra = _kind_of(info.annotation)
        constraints.update(extra)
        if kind in NUMERIC_KINDS or kind == ValidatorKind.BOOLEAN:
            constraints["coerce"] = not strict
        return cls(annotation, kind=kind, constraints=constraints)


def _kind_of(annotation: Any) -> tuple[ValidatorKind, dict[str, Any]]:
    origin = get_origin(annotation)
    if origin is Literal:
        return ValidatorKind.ENUM, {"values": get_args(annotation)}
    if origin in (list, tuple, set, frozenset) or annotation in (list, tuple):
        return ValidatorKind.ARRAY, {}
    if origin is dict or annotation is dict or is_typeddict(annotation):
        return ValidatorKind.OBJECT, {}
    if not isinstance(annotation, type):
        return ValidatorKind.ANY, {}
    if issubclass(annotation, enum.Enum):
        return ValidatorKind.ENUM, {"values": tuple(m.value for m in annotation)}
    if issubclass(annotation, bool):
        return ValidatorKind.BOOLEAN, {}
    if issubclass(annotation, int):
        return ValidatorKind.INTEGER, {}
    if issubclass(annotation, (float, Decimal)):
        return ValidatorKind.NUMBER, {}
    if issubclass(annotation, str):
        return ValidatorKind.STRING, {}
    if hasattr(annotation, "model_fields"):
        return ValidatorKind.OBJECT, {}
    return ValidatorKind.ANY, {}


def _bounds(
    ge: float | None,
    gt: float | None,
    le: float | None,
    lt: float | None,
    multiple_of: float | None,
) -> tuple[list[Any], dict[str, Any]]:
    metadata: list[Any] = []
    constraints: dict[str, Any] = {}
    for name, factory, value in (
        ("ge", annotated_types.Ge, ge),
        ("gt", annotated_types.Gt, gt),
        ("le", annotated_types.Le, le),
        ("lt", annotated_types.Lt, lt),
        ("multiple_of", annotated_types.MultipleOf, multiple_of),
    ):
        if value is not None:
            metadata.append(factory(value))
            constraints[name] = value
    return metadata, constraints


def _finish(validator: Validator, message: str | None) -> Validator:
    return validator.with_message(message) if message else validator


def string(
    *,
    min_length: int | None = None,
    max_length: int | None = None,
    pattern: str | None = None,
    message: str | None = None,
) -> Validator:
    """Any string, optionally length- or pattern-constrained."""
    metadata: list[Any] = []
    constraints: dict[str, Any] = {}
    if min_length is not None:
        metadata.append(annotated_types.MinLen(min_length))
        constraints["min_length"] = min_length
    if max_length is not None:
        metadata.append(annotated_types.MaxLen(max_length))
        constraints["max_length"] = max_length
    if pattern is not None:
        re.compile(pattern)
        metadata.append(_pattern_check(pattern))
        constraints["pattern"] = pattern

    annotation = Annotated[(str, *metadata)] if metadata else str
    return _finish(Validator(annotation, ValidatorKind.STRING, constraints), message)


def _pattern_check(pattern: str) -> AfterValidator:
    # Python `re` semantics (lookarounds, backreferences); pydantic's own
    # `pattern` constraint compiles with the Rust regex engine
    compiled = re.compile(pattern)

    def check(value: str) -> str:
        if not compiled.search(value):
            raise PydanticCustomError(
                "string_pattern_mismatch",
                "String should match pattern '{pattern}'",
                {"pattern": pattern},
            )
        return value

    return AfterValidator(check)


def email(*, message: str | None = None) -> Validator:
    base = string(pattern=EMAIL_PATTERN, message=message or "Invalid email address")
    return Validator(
        base.annotation,
        ValidatorKind.STRING,
        {**base.constraints, "format": "email"},
    )


def number(
    *,
    ge: float | None = None,
    gt: float | None = None,
    le: float | None = None,
    lt: float | None = None,
    multiple_of: float | None = None,
    coerce: bool = False,
    message: str | None = None,
) -> Validator:
    """A float; numeric-looking strings are accepted only when ``coerce`` is set."""
    metadata, constraints = _bounds(ge, gt, le, lt, multiple_of)
    if not coerce:
        metadata.insert(0, Strict())
    constraints["coerce"] = coerce
    annotation = Annotated[(float, *metadata)] if metadata else float
    return _finish(Validator(annotation, ValidatorKind.NUMBER, constraints), message)


def integer(
    *,
    ge: int | None = None,
    gt: int | None = None,
    le: int | None = None,
    lt: int | None = None,
    multiple_of: int | None = None,
    coerce: bool = False,
    message: str | None = None,
) -> Validator:
    metadata, constraints = _bounds(ge, gt, le, lt, multiple_of)
    if not coerce:
        metadata.insert(0, Strict())
    constraints["coerce"] = coerce
    annotation = Annotated[(int, *metadata)] if metadata else int
    return _finish(Validator(annotation, ValidatorKind.INTEGER, constraints), message)


def boolean(*, coerce: bool = False, message: str | None = None) -> Validator:
    annotation = bool if coerce else Annotated[bool, Strict()]
    return _finish(
        Validator(annotation, ValidatorKind.BOOLEAN, {"coerce": coerce}), message
    )


def one_of(values: Iterable[Any], *, message: str | None = None) -> Validator:
    """Exactly one of ``values``."""
    allowed = tuple(values)
    if not allowed:
        raise ValueError("one_of() requires at least one value")
    return _finish(
        Validator(Literal[allowed], ValidatorKind.ENUM, {"values": allowed}), message
    )


def array_of(
    item: Validator,
    *,
    min_length: int | None = None,
    max_length: int | None = None,
    message: str | None = None,
) -> Validator:
    metadata: list[Any] = []
    constraints: dict[str, Any] = {}
    if min_length is not None:
        metadata.append(annotated_types.MinLen(min_length))
        constraints["min_length"] = min_length
    if max_length is not None:
        metadata.append(annotated_types.MaxLen(max_length))
        constraints["max_length"] = max_length

    annotation = list[item.annotation]
    if metadata:
        annotation = Annotated[(annotation, *metadata)]
    return _finish(Validator(annotation, ValidatorKind.ARRAY, constraints), message)


def object_of(shape: Mapping[str, Validator], *, name: str = "FormData") -> Validator:
    """A mapping with exactly the keys of ``shape``; unknown keys are dropped."""
    typed = TypedDict(name, {key: v.annotation for key, v in shape.items()})
    return Validator(typed, ValidatorKind.OBJECT, {"keys": tuple(shape)})


def any_value() -> Validator:
    return Validator(Any, ValidatorKind.ANY)


def from_descriptor(kind: str, constraints: Mapping[str, Any] | None = None) -> Validator:
    """Build a validator from a ``{kind, constraints}`` pair.

    This is the inverse of :attr:`Validator.descriptor` for the scalar kinds
    and is what declaration files use.
    """
    options = dict(constraints or {})
    message = options.pop("message", None)
    try:
        match ValidatorKind(kind):
            case ValidatorKind.STRING:
                if options.pop("format", None) == "email":
                    return email(message=message)
                return string(message=message, **options)
            case ValidatorKind.NUMBER:
                return number(message=message, **options)
            case ValidatorKind.INTEGER:
                return integer(message=message, **options)
            case ValidatorKind.BOOLEAN:
                return boolean(message=message, **options)
            case ValidatorKind.ENUM:
                return one_of(_as_sequence(options.pop("values", ())), message=message)
            case ValidatorKind.ANY:
                return any_value()
            case _:
                raise ValueError(f"Validator kind '{kind}' cannot be built from a descriptor")
    except TypeError as e:
        raise ValueError(f"Invalid constraints for validator kind '{kind}': {e}") from e


def _as_sequence(values: Any) -> Sequence[Any]:
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise ValueError("enum validator 'values' must be a list")
    return tuple(values)
