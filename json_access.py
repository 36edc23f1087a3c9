#!/usr/bin/env python3
"""
Total accessors over decoded JSON values.

Upstream payloads are plain ``json.loads`` output (dict / list / str / int /
float / bool / None) whose shape is not guaranteed. Every helper here returns
``None`` for "absent or unusable" instead of raising, so adapters can chain
them into first-match-wins rule lists without try/except around each field.
"""

import re
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional
from urllib.parse import urlparse

from constants import Fallbacks

Accessor = Callable[[Any], Any]


def as_dict(value: Any) -> Optional[dict]:
    return value if isinstance(value, dict) else None


def as_list(value: Any) -> Optional[list]:
    return value if isinstance(value, list) else None


# Unpaired UTF-16 halves survive json.loads but cannot be encoded as UTF-8
LONE_SURROGATE_RX = re.compile(r"[\ud800-\udfff]")


def as_text(value: Any) -> Optional[str]:
    """Non-empty stripped string; numbers are stringified, bools are not text."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        s = LONE_SURROGATE_RX.sub("", value).strip()
        return s or None
    return None


def as_id(value: Any) -> Optional[str]:
    """Identifier usable in URLs and GUIDs: non-empty string or integral number."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return as_text(value)


def as_url(value: Any) -> Optional[str]:
    """The value if it is an absolute http(s) URL, else None."""
    s = as_text(value)
    if not s:
        return None
    try:
        parts = urlparse(s)
    except ValueError:
        return None
    if parts.scheme in ("http", "https") and parts.netloc:
        return s
    return None


def as_timestamp(value: Any) -> Optional[datetime]:
    """
    Epoch seconds (or milliseconds, for very large values) as an aware UTC datetime.

    Accepts ints, floats and numeric strings. Out-of-range values yield None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    if value != value:  # NaN
        return None
    if abs(value) >= Fallbacks.EPOCH_MILLIS_THRESHOLD:
        value = value / 1000
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def dig(obj: Any, *path: Any) -> Any:
    """Follow dict keys / list indexes; None as soon as a step does not apply."""
    cur = obj
    for key in path:
        if isinstance(key, int) and isinstance(cur, list):
            if -len(cur) <= key < len(cur):
                cur = cur[key]
            else:
                return None
        elif isinstance(cur, dict):
            cur = cur.get(key)
        else:
            return None
        if cur is None:
            return None
    return cur


def field(*path: Any, coerce: Accessor = as_text) -> Accessor:
    """Build an accessor that digs ``path`` and coerces the result."""
    def get(obj: Any) -> Any:
        return coerce(dig(obj, *path))
    get.__name__ = "field_" + "_".join(str(p) for p in path)
    return get


def first_of(obj: Any, rules: Iterable[Accessor], default: Any = None) -> Any:
    """Evaluate accessors in order and return the first non-None result."""
    for rule in rules:
        value = rule(obj)
        if value is not None:
            return value
    return default
