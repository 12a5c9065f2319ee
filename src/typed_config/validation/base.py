"""Ready-made validators built from ``ValueChecker`` requirements."""

from __future__ import annotations

import re
from typing import Any, Optional, Union

from typed_config.checker import ValueChecker

from .protocol import ValidatorProtocol

__all__ = [
    "all_of",
    "nullable",
    "of_type",
    "non_empty_string",
    "matching",
    "integer_between",
    "one_of",
]


def all_of(*validators: ValidatorProtocol) -> ValidatorProtocol:
    """Apply every validator, in order, to the same binding."""
    for v in validators:
        if not callable(v):
            raise TypeError("Validator must be callable")

    def validate(checker: ValueChecker[Any]) -> None:
        for v in validators:
            v(checker)

    return validate


def nullable(validator: ValidatorProtocol) -> ValidatorProtocol:
    """Allow ``None`` in front of an existing validator."""
    if not callable(validator):
        raise TypeError("Validator must be callable")

    def validate(checker: ValueChecker[Any]) -> None:
        validator(checker.allow_null())

    return validate


def of_type(*types: type) -> ValidatorProtocol:
    def validate(checker: ValueChecker[Any]) -> None:
        checker.require_type(*types)

    return validate


def non_empty_string() -> ValidatorProtocol:
    def validate(checker: ValueChecker[Any]) -> None:
        checker.require_non_empty_string()

    return validate


def matching(
    pattern: Union[str, "re.Pattern[str]"], message: Optional[str] = None
) -> ValidatorProtocol:
    def validate(checker: ValueChecker[Any]) -> None:
        checker.require_match(pattern, message)

    return validate


def integer_between(lo: int, hi: int) -> ValidatorProtocol:
    def validate(checker: ValueChecker[Any]) -> None:
        checker.require_integer_between(lo, hi)

    return validate


def one_of(*values: Any) -> ValidatorProtocol:
    def validate(checker: ValueChecker[Any]) -> None:
        checker.require_in(values)

    return validate
