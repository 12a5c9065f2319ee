from __future__ import annotations

from .base import all_of, integer_between, matching, non_empty_string, nullable, of_type, one_of
from .protocol import ValidatorProtocol

__all__ = [
    "ValidatorProtocol",
    "all_of",
    "integer_between",
    "matching",
    "non_empty_string",
    "nullable",
    "of_type",
    "one_of",
]
