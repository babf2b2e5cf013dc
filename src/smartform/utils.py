"""Utility functions for SmartForm"""

import inspect
import logging
import re
from pathlib import Path
from typing import Any

from .consts import PATH_SEPARATOR

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def canonicalify(p: Path | str) -> Path:
    return Path(p).expanduser().resolve()


def ensure_path(p: Path | str) -> Path:
    path = canonicalify(p)
    path.mkdir(parents=True, exist_ok=True)
    return path


def humanize_label(name: str) -> str:
    """Derive a display label from a field name or path.

    Only the last path segment is used. camelCase and snake_case boundaries
    become spaces and the first letter is upper-cased.

    Examples:
        >>> humanize_label("firstName")
        'First Name'
        >>> humanize_label("hobbies.0.years_active")
        'Years active'
    """
    last = name.split(PATH_SEPARATOR)[-1]
    words = _CAMEL_BOUNDARY.sub(" ", last).replace("_", " ").strip()
    if not words:
        return last
    return words[0].upper() + words[1:]


async def maybe_await(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value
