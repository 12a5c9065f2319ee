from __future__ import annotations

from copy import deepcopy
from typing import Any, Callable

__all__ = [
    "_constant_factory",
    "_redact_for_log",
    "_type_name",
]

_SECRET_MARKERS = ("secret", "password", "token", "key", "passwd", "api_key")


def _redact_for_log(name: str, value: Any) -> str:
    """
    Redact likely secrets in logs.
    """
    lowered = name.lower()
    if any(s in lowered for s in _SECRET_MARKERS):
        return "***"
    try:
        return repr(value)
    except Exception:
        return "<unreprable>"


def _constant_factory(value: Any) -> Callable[[], Any]:
    """Return a zero-argument factory producing an independent copy of `value` per call."""
    try:
        deepcopy(value)
    except Exception as e:
        raise ValueError("Default value is not deepcopy-able") from e

    def factory() -> Any:
        return deepcopy(value)

    return factory


def _type_name(value_type: Any) -> str:
    if isinstance(value_type, tuple):
        return " | ".join(_type_name(t) for t in value_type)
    return getattr(value_type, "__name__", repr(value_type))
