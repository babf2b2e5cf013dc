from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Awaitable, Callable

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from ..consts import (
    TEMPLATE_ARRAY_FIELD,
    TEMPLATE_FIELD_WRAPPER,
    TEMPLATE_FORM,
    TEMPLATE_SELECT_FIELD,
    TEMPLATE_SUBMIT_BUTTON,
    TEMPLATE_TEXT_FIELD,
    TEMPLATE_TEXTAREA_FIELD,
)
from ..describe import (
    ArrayFieldProps,
    CustomFieldProps,
    SelectFieldProps,
    TextareaFieldProps,
    TextFieldProps,
)
from ..registry import ArrayHandlers, ComponentRegistry, FieldHandlers

logger = logging.getLogger(__name__)


class HtmlRegistry(ComponentRegistry):
    """Render forms to HTML with Jinja2 templates.

    HTML has no live callbacks, so handlers are ignored; array add, remove
    and move are rendered as submit buttons named ``_add``, ``_remove`` and
    ``_move``.
    """

    def __init__(self, template_dir: Path | str | None = None) -> None:
        if template_dir is None:
            template_dir = Path(__file__).resolve().parent.parent / "templates"
        self._jinja_env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def _render(self, template_name: str, **context: Any) -> Markup:
        template = self._jinja_env.get_template(template_name)
        return Markup(template.render(**context).strip())

    def text_field(self, props: TextFieldProps, handlers: FieldHandlers) -> Markup:
        return self._render(TEMPLATE_TEXT_FIELD, props=props)

    def textarea_field(self, props: TextareaFieldProps, handlers: FieldHandlers) -> Markup:
        return self._render(TEMPLATE_TEXTAREA_FIELD, props=props)

    def select_field(self, props: SelectFieldProps, handlers: FieldHandlers) -> Markup:
        return self._render(TEMPLATE_SELECT_FIELD, props=props)

    def array_field(
        self, props: ArrayFieldProps, handlers: ArrayHandlers, rows: list[list[Any]]
    ) -> Markup:
        return self._render(TEMPLATE_ARRAY_FIELD, props=props, rows=rows)

    def custom_field(self, props: CustomFieldProps) -> Markup:
        content = props.content
        if content is None:
            return Markup("")
        # plain strings are escaped, Markup passes through
        return Markup.escape(content)

    def field_wrapper(self, span: int | None, child: Any) -> Markup:
        return self._render(TEMPLATE_FIELD_WRAPPER, span=span, child=child)

    def submit_button(self, is_submitting: bool, label: str) -> Markup:
        return self._render(TEMPLATE_SUBMIT_BUTTON, is_submitting=is_submitting, label=label)

    def form_wrapper(
        self,
        children: list[Any],
        submit_button: Any,
        on_submit: Callable[[], Awaitable[Any]],
    ) -> str:
        return str(self._render(TEMPLATE_FORM, children=children, submit_button=submit_button))
