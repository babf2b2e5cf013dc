from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping

from .paths import get_in, remap_keys, set_in, split_path

logger = logging.getLogger(__name__)

Listener = Callable[["FormStoreState"], None]


@dataclass(frozen=True, slots=True)
class FormStoreState:
    values: Mapping[str, Any]
    errors: Mapping[str, str]
    touched: Mapping[str, bool]
    is_submitting: bool


class FormStore:
    """Per-form mutable state addressed by dotted paths.

    Holds the value tree, the error map (path -> message), the touched map
    (path -> True) and the submitting flag. Value updates are copy-on-write,
    so a tree handed out by :attr:`values` is never modified afterwards.

    A store has exactly one owner; concurrent mutation is not supported.
    """

    def __init__(self, initial_values: Mapping[str, Any] | None = None) -> None:
        self._initial = dict(initial_values or {})
        self._values: dict[str, Any] = self._initial
        self._errors: dict[str, str] = {}
        self._touched: dict[str, bool] = {}
        self._is_submitting = False
        self._listeners: list[Listener] = []

    @property
    def initial_values(self) -> Mapping[str, Any]:
        return self._initial

    @property
    def values(self) -> Mapping[str, Any]:
        return self._values

    @property
    def errors(self) -> Mapping[str, str]:
        return MappingProxyType(self._errors)

    @property
    def touched(self) -> Mapping[str, bool]:
        return MappingProxyType(self._touched)

    @property
    def is_submitting(self) -> bool:
        return self._is_submitting

    def get_value(self, path: str, default: Any = None) -> Any:
        return get_in(self._values, path, default)

    def get_error(self, path: str) -> str | None:
        return self._errors.get(path)

    def is_touched(self, path: str) -> bool:
        return self._touched.get(path, False)

    def set_value(self, path: str, value: Any) -> None:
        self._values = set_in(self._values, path, value)
        logger.debug("Set value at %s", path)
        self._notify()

    def set_error(self, path: str, message: str) -> None:
        split_path(path)
        self._errors = {**self._errors, path: message}
        self._notify()

    def clear_error(self, path: str) -> None:
        if path not in self._errors:
            return
        self._errors = {k: v for k, v in self._errors.items() if k != path}
        self._notify()

    def set_touched(self, path: str) -> None:
        split_path(path)
        if self._touched.get(path):
            return
        self._touched = {**self._touched, path: True}
        self._notify()

    def set_submitting(self, is_submitting: bool) -> None:
        self._is_submitting = bool(is_submitting)
        self._notify()

    def reset(self, values: Mapping[str, Any] | None = None) -> None:
        """Replace values and clear errors, touched and submitting in one step."""
        self._values = self._initial if values is None else dict(values)
        self._errors = {}
        self._touched = {}
        self._is_submitting = False
        logger.debug("Store reset")
        self._notify()

    def remap_indices(self, array_path: str, remap: Callable[[int], int | None]) -> None:
        """Re-key per-element errors and touched flags under ``array_path``."""
        split_path(array_path)
        errors = remap_keys(self._errors, array_path, remap)
        touched = remap_keys(self._touched, array_path, remap)
        if errors == self._errors and touched == self._touched:
            return
        self._errors = errors
        self._touched = touched
        self._notify()

    def get_snapshot(self) -> FormStoreState:
        return FormStoreState(
            values=copy.deepcopy(self._values),
            errors=MappingProxyType(dict(self._errors)),
            touched=MappingProxyType(dict(self._touched)),
            is_submitting=self._is_submitting,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with a snapshot after every state change.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.get_snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
