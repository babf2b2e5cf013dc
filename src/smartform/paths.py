"""Dotted path algebra over trees of dicts and lists.

A path is a dot-separated string. A segment made only of digits addresses a
sequence element by index, any other segment a dict key. Updates are
copy-on-write: every container from the root to the written leaf is a fresh
copy (tuples become lists), everything else is shared by reference.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

from .consts import PATH_SEPARATOR
from .errors import PathError

_MISSING = object()


def split_path(path: str) -> list[str]:
    if not isinstance(path, str) or not path:
        raise PathError(f"Invalid path: {path!r}")

    segments = path.split(PATH_SEPARATOR)
    if any(s == "" for s in segments):
        raise PathError(f"Invalid path (empty segment): {path!r}")
    return segments


def is_index(segment: str) -> bool:
    return segment.isdigit()


def join_path(*segments: str | int) -> str:
    return PATH_SEPARATOR.join(str(s) for s in segments)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _child(container: Any, segment: str) -> Any:
    if _is_sequence(container):
        if not is_index(segment):
            return _MISSING
        index = int(segment)
        return container[index] if index < len(container) else _MISSING
    if isinstance(container, Mapping):
        return container.get(segment, _MISSING)
    return _MISSING


def get_in(tree: Any, path: str, default: Any = None) -> Any:
    """Read the value at ``path``, or ``default`` when any segment is missing."""
    current = tree
    for segment in split_path(path):
        current = _child(current, segment)
        if current is _MISSING:
            return default
    return current


def has_path(tree: Any, path: str) -> bool:
    return get_in(tree, path, _MISSING) is not _MISSING


def _copy_container(value: Any, next_segment: str) -> Any:
    if _is_sequence(value):
        return list(value)
    if isinstance(value, Mapping):
        return dict(value)
    return [] if is_index(next_segment) else {}


def _assign(container: Any, segment: str, value: Any, path: str) -> None:
    if isinstance(container, list):
        if not is_index(segment):
            raise PathError(f"Cannot use key '{segment}' on a list in path {path!r}")
        index = int(segment)
        if index >= len(container):
            container.extend([None] * (index + 1 - len(container)))
        container[index] = value
    else:
        container[segment] = value


def set_in(tree: Any, path: str, value: Any) -> Any:
    """Return a new tree with ``value`` stored at ``path``.

    Missing intermediate containers are created as a list when the next
    segment is numeric and as a dict otherwise. ``tree`` itself is never
    modified.

    Raises:
        PathError: If the path is malformed or a non-numeric segment
            addresses an existing list
    """
    segments = split_path(path)
    root = _copy_container(tree, segments[0])
    current = root

    for segment, next_segment in zip(segments, segments[1:]):
        existing = _child(current, segment)
        child = _copy_container(None if existing is _MISSING else existing, next_segment)
        _assign(current, segment, child, path)
        current = child

    _assign(current, segments[-1], value, path)
    return root


def remap_keys(
    mapping: Mapping[str, Any],
    prefix: str,
    remap: Callable[[int], int | None],
) -> dict[str, Any]:
    """Rewrite keys of the form ``<prefix>.<index>[.<rest>]``.

    ``remap`` receives the old index and returns the new one, or ``None`` to
    drop the key. Other keys are kept as they are.
    """
    head = prefix + PATH_SEPARATOR
    result: dict[str, Any] = {}
    for key, value in mapping.items():
        if not key.startswith(head):
            result[key] = value
            continue

        index, sep, rest = key[len(head):].partition(PATH_SEPARATOR)
        if not is_index(index):
            result[key] = value
            continue

        new_index = remap(int(index))
        if new_index is None:
            continue
        result[head + str(new_index) + sep + rest] = value
    return result
