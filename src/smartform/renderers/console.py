from __future__ import annotations

from typing import Any, Awaitable, Callable

from ..describe import (
    ArrayFieldProps,
    CustomFieldProps,
    SelectFieldProps,
    TextareaFieldProps,
    TextFieldProps,
)
from ..registry import ArrayHandlers, ComponentRegistry, FieldHandlers

INDENT = "  "


def _status(props) -> list[str]:
    lines = []
    if props.error:
        lines.append(f"{INDENT}! {props.error}")
    return lines


def _indent(lines: list[str]) -> list[str]:
    return [INDENT + line for line in lines]


class ConsoleRegistry(ComponentRegistry):
    """Render forms as plain text lines for terminals and logs."""

    def text_field(self, props: TextFieldProps, handlers: FieldHandlers) -> list[str]:
        hints = []
        if props.min is not None:
            hints.append(f"min {props.min:g}")
        if props.max is not None:
            hints.append(f"max {props.max:g}")
        suffix = f" ({', '.join(hints)})" if hints else ""
        return [f"{props.label}: {props.value}{suffix}", *_status(props)]

    def textarea_field(self, props: TextareaFieldProps, handlers: FieldHandlers) -> list[str]:
        body = str(props.value).splitlines() or [""]
        return [f"{props.label}:", *_indent(body), *_status(props)]

    def select_field(self, props: SelectFieldProps, handlers: FieldHandlers) -> list[str]:
        lines = [f"{props.label}:"]
        for option in props.options:
            marker = "*" if option.value == props.value else " "
            lines.append(f"{INDENT}[{marker}] {option.label}")
        return lines + _status(props)

    def array_field(
        self, props: ArrayFieldProps, handlers: ArrayHandlers, rows: list[list[Any]]
    ) -> list[str]:
        lines = [f"{props.label} ({len(rows)}):"]
        for index, row in enumerate(rows):
            lines.append(f"{INDENT}#{index + 1}")
            for child in row:
                lines.extend(_indent(_indent(child)))
        return lines + _status(props)

    def custom_field(self, props: CustomFieldProps) -> list[str]:
        if props.content is None:
            return []
        return str(props.content).splitlines()

    def field_wrapper(self, span: int | None, child: Any) -> list[str]:
        return list(child)

    def submit_button(self, is_submitting: bool, label: str) -> list[str]:
        return [f"[ {label}{'...' if is_submitting else ''} ]"]

    def form_wrapper(
        self,
        children: list[Any],
        submit_button: Any,
        on_submit: Callable[[], Awaitable[Any]],
    ) -> str:
        lines: list[str] = []
        for child in children:
            lines.extend(child)
        lines.extend(submit_button)
        return "\n".join(lines)
