"""Helpers for dotted field names and nested data records."""

from typing import Any, Dict, Iterable, Mapping, Tuple

Path = Tuple[str, ...]

_MISSING = object()


def split_name(name: str) -> Path:
    "Split a dotted field name into path segments, dropping empty ones"
    return tuple(part for part in name.split(".") if part)


def join_path(prefix: Iterable[str], name: str) -> Path:
    return tuple(prefix) + split_name(name)


def get_path(data: Any, path: Path, default: Any = None) -> Any:
    """Return the value at ``path`` or ``default`` when any segment is missing."""
    current = data
    for key in path:
        if not isinstance(current, Mapping):
            return default
        current = current.get(key, _MISSING)
        if current is _MISSING:
            return default
    return current


def has_path(data: Any, path: Path) -> bool:
    return get_path(data, path, _MISSING) is not _MISSING


def set_path(data: Mapping[str, Any], path: Path, value: Any) -> Dict[str, Any]:
    """
    Return a copy of ``data`` with ``value`` stored at ``path``.

    Only the dicts along the path are copied; siblings are shared. A scalar
    sitting where a branch is needed is replaced by a new dict.
    """
    if not path:
        raise ValueError("Cannot set an empty path")
    result = dict(data) if isinstance(data, Mapping) else {}
    head, rest = path[0], path[1:]
    if rest:
        result[head] = set_path(result.get(head, {}), rest, value)
    else:
        result[head] = value
    return result


def has_errors(errors: Any) -> bool:
    """True when any leaf of a nested errors object is truthy."""
    if isinstance(errors, Mapping):
        return any(has_errors(value) for value in errors.values())
    if isinstance(errors, (list, tuple)):
        return any(has_errors(value) for value in errors)
    return bool(errors)


__all__ = ["Path", "split_name", "join_path", "get_path", "has_path", "set_path", "has_errors"]
