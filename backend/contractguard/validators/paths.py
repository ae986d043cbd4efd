"""Field paths - rendering violation locations and reading values by dotted path."""

import re
from typing import Any, Union

PathSegment = Union[str, int]

ROOT = "<root>"

_MISSING = object()
_SEGMENT_RE = re.compile(r"([^.\[\]]+)|\[(\d+)\]")


def format_path(path: tuple) -> str:
    """Render a path tuple: ``("data", "Categories", 1, "name")`` -> ``data.Categories[1].name``."""
    if not path:
        return ROOT
    parts: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif parts:
            parts.append(f".{segment}")
        else:
            parts.append(str(segment))
    return "".join(parts)


def parse_path(expression: str) -> tuple:
    """Split ``data.items[0].name`` (or ``data.items.0.name``) into path segments."""
    if not expression or not expression.strip():
        raise ValueError("Path expression must not be empty")

    segments: list[PathSegment] = []
    for match in _SEGMENT_RE.finditer(expression.strip()):
        key, index = match.groups()
        if index is not None:
            segments.append(int(index))
        elif key.isdigit():
            segments.append(int(key))
        else:
            segments.append(key)
    return tuple(segments)


def get_path(value: Any, expression: str, default: Any = _MISSING) -> Any:
    """Read the value at a dotted path inside a decoded JSON body.

    Args:
        value: Decoded JSON (dicts, lists, scalars)
        expression: Dotted path such as ``data.authUser.token``
        default: Returned when the path does not resolve; if omitted, KeyError is raised

    Returns:
        The value found at the path (may be None if the body holds null there)
    """
    current = value
    walked: list[PathSegment] = []
    for segment in parse_path(expression):
        walked.append(segment)
        if isinstance(segment, int) and isinstance(current, list) and 0 <= segment < len(current):
            current = current[segment]
        elif isinstance(current, dict) and str(segment) in current:
            current = current[str(segment)]
        else:
            if default is _MISSING:
                raise KeyError(f"Path '{format_path(tuple(walked))}' not found")
            return default
    return current
