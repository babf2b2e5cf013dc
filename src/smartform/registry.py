"""Presentation contract for rendering a form description.

Renderers implement :class:`ComponentRegistry`; :func:`render_form` walks a
:class:`~smartform.describe.FormDescription` and calls the registry for each
field, handing it flattened props plus callbacks bound to the form.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from .config import RenderConfig
from .describe import (
    ArrayFieldProps,
    CustomFieldProps,
    SelectFieldProps,
    TextareaFieldProps,
    TextFieldProps,
    describe_form,
)

if TYPE_CHECKING:
    from .form import Form

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FieldHandlers:
    on_change: Callable[[Any], None]
    on_blur: Callable[[], None]


@dataclass(frozen=True, slots=True)
class ArrayHandlers:
    on_change: Callable[[Any], None]
    on_blur: Callable[[], None]
    on_add: Callable[[], None]
    on_remove: Callable[[int], None]
    on_move: Callable[[int, int], None]


class ComponentRegistry(ABC):
    @abstractmethod
    def text_field(self, props: TextFieldProps, handlers: FieldHandlers) -> Any: ...

    @abstractmethod
    def textarea_field(self, props: TextareaFieldProps, handlers: FieldHandlers) -> Any: ...

    @abstractmethod
    def select_field(self, props: SelectFieldProps, handlers: FieldHandlers) -> Any: ...

    @abstractmethod
    def array_field(
        self, props: ArrayFieldProps, handlers: ArrayHandlers, rows: list[list[Any]]
    ) -> Any: ...

    @abstractmethod
    def field_wrapper(self, span: int | None, child: Any) -> Any: ...

    @abstractmethod
    def submit_button(self, is_submitting: bool, label: str) -> Any: ...

    @abstractmethod
    def form_wrapper(
        self,
        children: list[Any],
        submit_button: Any,
        on_submit: Callable[[], Awaitable[Any]],
    ) -> Any: ...

    def custom_field(self, props: CustomFieldProps) -> Any:
        return props.content


def _handlers(form: "Form", path: str) -> FieldHandlers:
    return FieldHandlers(
        on_change=lambda value: form.change(path, value),
        on_blur=lambda: form.blur(path),
    )


def _array_handlers(form: "Form", path: str) -> ArrayHandlers:
    return ArrayHandlers(
        on_change=lambda value: form.store.set_value(path, value),
        on_blur=lambda: form.blur(path),
        on_add=lambda: form.add_row(path),
        on_remove=lambda index: form.remove_row(path, index),
        on_move=lambda src, dst: form.move_row(path, src, dst),
    )


def render_field(form: "Form", registry: ComponentRegistry, props) -> Any:
    if isinstance(props, CustomFieldProps):
        return registry.custom_field(props)
    if isinstance(props, TextFieldProps):
        return registry.text_field(props, _handlers(form, props.name))
    if isinstance(props, TextareaFieldProps):
        return registry.textarea_field(props, _handlers(form, props.name))
    if isinstance(props, SelectFieldProps):
        return registry.select_field(props, _handlers(form, props.name))
    if isinstance(props, ArrayFieldProps):
        rows = [
            [registry.field_wrapper(item.span, render_field(form, registry, item)) for item in row]
            for row in props.rows
        ]
        return registry.array_field(props, _array_handlers(form, props.name), rows)
    raise TypeError(f"Unknown field props: {props!r}")


def render_form(
    form: "Form", registry: ComponentRegistry, settings: RenderConfig | None = None
) -> Any:
    description = describe_form(form, settings=settings)
    children = [
        registry.field_wrapper(props.span, render_field(form, registry, props))
        for props in description.fields
    ]
    logger.debug(f"Rendered {len(children)} field(s) with {type(registry).__name__}")
    return registry.form_wrapper(
        children,
        registry.submit_button(description.is_submitting, description.submit_label),
        form.submit,
    )
