from __future__ import annotations

from typing import Dict


class ConfigError(Exception):
    """Base config exception."""


class ConfigAuthoringError(ConfigError):
    """Raised when a rule or checker is used in a contradictory or invalid way."""


class ConfigBuilderError(ConfigAuthoringError):
    """Raised when the builder receives declarations that are illegal or invalid."""


class ConfigDuplicateError(ConfigBuilderError):
    """Raised when the same key is declared more than once in a single build."""


class ConfigValidationError(ConfigError):
    """Raised when a value fails one or more declared constraints."""

    def __init__(
        self, errors: Dict[str, str], key: str | None = None, value: object | None = None
    ) -> None:
        self.errors = errors
        self.key = key
        self.value = value
        msg = f"Validation errors: {errors}"
        if key is not None:
            msg += f" (key: {key}, value: {value!r})"
        super().__init__(msg)

    @property
    def reason(self) -> str:
        if self.key is not None and self.key in self.errors:
            return self.errors[self.key]
        return "; ".join(self.errors.values())


class ConfigTypeError(ConfigError, TypeError):
    """Raised when a value's runtime type disagrees with the declared item type."""

    def __init__(self, key: str, expected: object, actual: type) -> None:
        self.key = key
        self.expected = expected
        self.actual = actual
        super().__init__(f"Type mismatch for {key!r}: expected {expected}, got {actual}.")


class ConfigNotFoundError(ConfigError):
    """Raised when a requested configuration key is not registered."""


class ConfigValueUnsetError(ConfigError):
    """Raised when reading an item that has neither a value nor a default."""


class ConfigLockedError(ConfigError):
    """Raised when attempting mutation while config is locked."""
