"""
typed_config: typed configuration declarations with chainable value checks.

- Declare items once through a fluent builder: key, type, validator, default.
- Validators express constraints through a shared, chainable ValueChecker.
- Defaults are validated at build time so authoring mistakes surface early.
- The built Config is a frozen registry; every accepted value has passed its validator.
"""

from __future__ import annotations

from typed_config.builder import ConfigBuilder, ItemBuilder
from typed_config.checker import ValueChecker
from typed_config.config import Config
from typed_config.exceptions import (
    ConfigAuthoringError,
    ConfigBuilderError,
    ConfigDuplicateError,
    ConfigError,
    ConfigLockedError,
    ConfigNotFoundError,
    ConfigTypeError,
    ConfigValidationError,
    ConfigValueUnsetError,
)
from typed_config.items import ConfigItem
from typed_config.validation import ValidatorProtocol

__all__ = [
    "Config",
    "ConfigBuilder",
    "ConfigItem",
    "ItemBuilder",
    "ValueChecker",
    "ValidatorProtocol",
    "ConfigError",
    "ConfigAuthoringError",
    "ConfigBuilderError",
    "ConfigDuplicateError",
    "ConfigValidationError",
    "ConfigTypeError",
    "ConfigNotFoundError",
    "ConfigValueUnsetError",
    "ConfigLockedError",
]
