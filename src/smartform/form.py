"""Form controller: ties a builder, a store and validation together."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Mapping

from .builder import FormBuilder, row_defaults
from .config import RenderConfig
from .describe import FormDescription, describe_form
from .errors import DefinitionError
from .fields import ArrayField
from .registry import ComponentRegistry, render_form
from .store import FormStore
from .utils import maybe_await
from .validation import ValidationResult, validate

logger = logging.getLogger(__name__)

SubmitHandler = Callable[[Any], Awaitable[None] | None]


class Form:
    """One activation of a declared form.

    The store is seeded with the builder's defaults, shallow-merged with
    ``initial_values`` (caller values win per top-level key).

    Args:
        builder: The form declaration
        initial_values: Caller-supplied values overriding field defaults
        on_submit: Called with the validated data on successful submit; may
            return an awaitable
    """

    def __init__(
        self,
        builder: FormBuilder,
        initial_values: Mapping[str, Any] | None = None,
        on_submit: SubmitHandler | None = None,
    ) -> None:
        self.builder = builder
        self.on_submit = on_submit
        self.store = FormStore({**builder.defaults(), **(initial_values or {})})

    @property
    def values(self) -> Mapping[str, Any]:
        return self.store.values

    @property
    def errors(self) -> Mapping[str, str]:
        return self.store.errors

    def change(self, path: str, value: Any) -> None:
        """Store a new value and drop the error recorded for that path."""
        self.store.set_value(path, value)
        self.store.clear_error(path)

    def blur(self, path: str) -> None:
        self.store.set_touched(path)

    def validate(self) -> ValidationResult:
        return validate(self.builder.to_schema(), self.store.values)

    async def submit(self) -> ValidationResult:
        """Validate current values and hand them to the submit handler.

        On failure every error is written to the store and the handler is
        not called. On success the submitting flag is raised for the
        duration of the handler and always cleared afterwards; handler
        exceptions propagate.
        """
        result = self.validate()
        if not result.success:
            for error in result.errors:
                self.store.set_error(error.path, error.message)
            logger.info(f"Form validation failed with {len(result.errors)} error(s)")
            return result

        self.store.set_submitting(True)
        try:
            if self.on_submit is not None:
                await maybe_await(self.on_submit(result.data))
        finally:
            self.store.set_submitting(False)

        logger.info("Form submitted")
        return result

    def reset(self, values: Mapping[str, Any] | None = None) -> None:
        self.store.reset(values)

    def _array(self, path: str) -> tuple[ArrayField, list]:
        field = self.builder.find_field(path)
        if not isinstance(field, ArrayField):
            raise DefinitionError(f"'{path}' is not an array field")
        items = self.store.get_value(path)
        return field, list(items) if isinstance(items, (list, tuple)) else []

    def add_row(self, path: str) -> None:
        """Append a freshly defaulted row to the array at ``path``."""
        field, items = self._array(path)
        items.append(row_defaults(field))
        self.store.set_value(path, items)

    def remove_row(self, path: str, index: int) -> None:
        """Delete row ``index``; later rows shift down, keeping their errors."""
        _, items = self._array(path)
        if not 0 <= index < len(items):
            logger.warning(f"Ignoring remove of row {index} from '{path}' ({len(items)} rows)")
            return

        del items[index]
        self.store.set_value(path, items)
        self.store.remap_indices(
            path, lambda i: None if i == index else (i - 1 if i > index else i)
        )

    def move_row(self, path: str, src: int, dst: int) -> None:
        """Swap rows ``src`` and ``dst``; a no-op when either is out of range."""
        _, items = self._array(path)
        if not (0 <= src < len(items) and 0 <= dst < len(items)):
            return

        items[src], items[dst] = items[dst], items[src]
        self.store.set_value(path, items)
        self.store.remap_indices(
            path, lambda i: dst if i == src else (src if i == dst else i)
        )

    def describe(self, settings: RenderConfig | None = None) -> FormDescription:
        return describe_form(self, settings=settings)

    def render(
        self, registry: ComponentRegistry, settings: RenderConfig | None = None
    ) -> Any:
        return render_form(self, registry, settings=settings)
