"""Shared service-layer helper functions."""

from __future__ import annotations

import json
from typing import Any


def to_jsonable(value: Any) -> Any:
    """Return *value* if it serializes to JSON, else its ``repr``.

    Examples:
        >>> to_jsonable({"a": [1, 2]})
        {'a': [1, 2]}
        >>> to_jsonable({1, 2})
        '{1, 2}'
    """
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)
    return value
