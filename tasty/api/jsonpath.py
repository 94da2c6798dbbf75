"""Path-addressed reads from decoded JSON documents.

Paths are dot separated (``data.user.email``); a purely numeric segment
indexes into an array (``data.items.0.symbol``). Every typed accessor is
lenient: a missing path or ``null`` yields the zero value of the target
type, and scalars are coerced the way a JSON query engine would
(``"12.5"`` reads as ``12.5``, ``3`` reads as ``"3"``).
"""

from __future__ import annotations

import json
from datetime import date, datetime, timezone
from typing import Any, List

from ..errors import DecodeError

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_MISSING = object()
_TRUE_STRINGS = frozenset({"1", "t", "true"})


def parse_document(body: bytes | str) -> Any:
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"response body is not valid JSON: {exc}") from exc


def lookup(node: Any, path: str) -> Any:
    """Return the raw value at ``path`` or ``None`` when any segment is absent."""
    value = _walk(node, path)
    return None if value is _MISSING else value


def _walk(node: Any, path: str) -> Any:
    current = node
    if not path:
        return current
    for segment in path.split("."):
        if isinstance(current, dict):
            current = current.get(segment, _MISSING)
        elif isinstance(current, list) and segment.isdigit():
            index = int(segment)
            current = current[index] if index < len(current) else _MISSING
        else:
            return _MISSING
        if current is _MISSING:
            return _MISSING
    return current


def get_str(node: Any, path: str) -> str:
    value = lookup(node, path)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value)


def get_float(node: Any, path: str) -> float:
    value = lookup(node, path)
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0


def get_int(node: Any, path: str) -> int:
    value = lookup(node, path)
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            try:
                return int(float(value))
            except ValueError:
                return 0
    return 0


def get_bool(node: Any, path: str) -> bool:
    value = lookup(node, path)
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def parse_time(value: Any) -> datetime:
    """Parse an RFC3339/ISO-8601 timestamp or date into an aware UTC datetime; unparseable -> ZERO_TIME."""
    if not isinstance(value, str) or not value:
        return ZERO_TIME
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        try:
            parsed = datetime.combine(date.fromisoformat(text), datetime.min.time())
        except ValueError:
            return ZERO_TIME
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def get_time(node: Any, path: str) -> datetime:
    return parse_time(lookup(node, path))


def get_array(node: Any, path: str) -> List[Any]:
    value = lookup(node, path)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError(f"expected an array at {path!r}, got {type(value).__name__}")
    return value
