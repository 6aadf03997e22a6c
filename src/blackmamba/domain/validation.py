"""Argument guards shared by the runtime entry points."""

from __future__ import annotations

from typing import Any

from blackmamba.domain.errors import ValidationError


def require_non_empty_string(prop: str, value: Any) -> str:
    """Return *value* if it is a non-empty ``str``, else raise ValidationError.

    Examples:
        >>> require_non_empty_string("cmd", "greet")
        'greet'
    """
    if not isinstance(value, str):
        raise ValidationError(
            prop,
            value,
            f"{prop} must be a non-empty string. "
            f"Received {value!r} of type {type(value).__name__}",
        )
    if not value:
        raise ValidationError(prop, value, f"{prop} must be a non-empty string.")
    return value
