"""
URL path and query-string building.

Absent values are skipped explicitly: an optional filter that is None must
never reach the wire as "None", "null" or an empty `key=`.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping
from urllib.parse import quote

PLACEHOLDER = "{id}"


def build_path(template: str, value: object | None = None) -> str:
    """Substitute the `{id}` placeholder in a path template.

    The value is URL-quoted, so it is inserted exactly once and cannot
    reintroduce placeholder syntax.

    Raises:
        ValueError: If a value is given for a template without placeholder,
            or a placeholder is left without a value.
    """
    if value is None:
        if PLACEHOLDER in template:
            raise ValueError(f"Path template {template!r} requires an id")
        return template

    if PLACEHOLDER not in template:
        raise ValueError(f"Path template {template!r} has no {PLACEHOLDER} placeholder")

    segment = str(value)
    if not segment:
        raise ValueError("Path segment must not be empty")

    return template.replace(PLACEHOLDER, quote(segment, safe=""), 1)


def _format_value(value: Any) -> str | None:
    """Render one query value, or None when it should be omitted."""
    if value is None:
        return None
    if isinstance(value, Enum):
        return _format_value(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        parts = [p for p in (_format_value(v) for v in value) if p is not None]
        return ",".join(parts) if parts else None
    text = str(value)
    return text if text else None


def build_query(params: Mapping[str, Any] | None) -> dict[str, str]:
    """Build a query mapping, omitting every absent or empty value."""
    query: dict[str, str] = {}
    if not params:
        return query

    for key, value in params.items():
        formatted = _format_value(value)
        if formatted is not None:
            query[key] = formatted

    return query
