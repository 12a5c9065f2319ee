"""
Fluent, single-pass declaration of configuration items.

    config = (
        ConfigBuilder()
        .add_item("port").of_type(int).with_validator(integer_between(1, 65535)).with_default(8080)
        .add_item("host").of_type(str).with_validator(non_empty_string()).with_default("localhost")
        .build()
    )

``add_item`` returns an ``ItemBuilder`` scoped to that key. Each property may be
set once. An item is finished (checked for completeness and validated against
its own default) when the chain moves on to the next item or when ``build()``
runs.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, TypeVar

from .config import Config
from .exceptions import (
    ConfigBuilderError,
    ConfigDuplicateError,
    ConfigTypeError,
    ConfigValidationError,
)
from .items import ConfigItem, TypeSpec
from .utils import _constant_factory, _redact_for_log

logger = logging.getLogger("typed_config.builder")
logger.addHandler(logging.NullHandler())

T = TypeVar("T")

__all__ = ["ConfigBuilder", "ItemBuilder"]


def _check_key(key: Any) -> str:
    if not isinstance(key, str):
        raise ConfigBuilderError(f"Item key must be a str, got {type(key).__name__}")
    if not key:
        raise ConfigBuilderError("Item key cannot be empty")
    return key


def _check_type_spec(key: str, value_type: Any) -> TypeSpec:
    types = value_type if isinstance(value_type, tuple) else (value_type,)
    if not types or not all(isinstance(t, type) for t in types):
        raise ConfigBuilderError(f"Invalid type for {key!r}: {value_type!r}")
    return value_type


class ItemBuilder(Generic[T]):
    """Collects the properties of one item. Obtained from ``ConfigBuilder.add_item``."""

    def __init__(self, parent: "ConfigBuilder", key: str) -> None:
        self._parent = parent
        self._key = key
        self._value_type: Optional[TypeSpec] = None
        self._validator: Optional[Callable[..., None]] = None
        self._default_factory: Optional[Callable[[], Any]] = None
        self._mapper: Optional[Tuple[TypeSpec, Callable[[Any], Any]]] = None
        self._finished = False

    @property
    def key(self) -> str:
        return self._key

    @property
    def finished(self) -> bool:
        return self._finished

    def _ensure_open(self, prop: str) -> None:
        if self._finished:
            raise ConfigBuilderError(
                f"Cannot set {prop} of {self._key!r}: item is already finished"
            )

    def _already_set(self, prop: str) -> ConfigBuilderError:
        logger.debug("Duplicate %s declaration for %r", prop, self._key)
        return ConfigBuilderError(f"The {prop} has already been specified for {self._key!r}")

    # property setters
    def of_type(self, value_type: TypeSpec) -> "ItemBuilder[T]":
        self._ensure_open("type")
        if self._value_type is not None:
            raise self._already_set("type")
        self._value_type = _check_type_spec(self._key, value_type)
        return self

    def with_validator(self, validator: Callable[..., None]) -> "ItemBuilder[T]":
        self._ensure_open("validator")
        if self._validator is not None:
            raise self._already_set("validator")
        if not callable(validator):
            raise ConfigBuilderError(f"Validator for {self._key!r} must be callable")
        self._validator = validator
        return self

    def with_default(self, value: Any) -> "ItemBuilder[T]":
        """Constant default; every read returns an independent copy."""
        self._ensure_open("default")
        if self._default_factory is not None:
            raise self._already_set("default")
        try:
            self._default_factory = _constant_factory(value)
        except ValueError as exc:
            raise ConfigBuilderError(f"Default for {self._key!r}: {exc}") from exc
        return self

    def with_default_factory(self, factory: Callable[[], Any]) -> "ItemBuilder[T]":
        """Default produced by calling ``factory()`` on every read."""
        self._ensure_open("default")
        if self._default_factory is not None:
            raise self._already_set("default")
        if not callable(factory):
            raise ConfigBuilderError(f"Default factory for {self._key!r} must be callable")
        self._default_factory = factory
        return self

    def map_from(self, source_type: TypeSpec, mapper: Callable[[Any], Any]) -> "ItemBuilder[T]":
        """Convert raw input of ``source_type`` with ``mapper`` before casting."""
        self._ensure_open("mapping")
        if self._mapper is not None:
            raise self._already_set("mapping")
        if not callable(mapper):
            raise ConfigBuilderError(f"Mapper for {self._key!r} must be callable")
        self._mapper = (_check_type_spec(self._key, source_type), mapper)
        return self

    def _copy_into(self, other: "ItemBuilder[Any]") -> None:
        # replay the setters so the copy owns its own slots
        if self._value_type is not None:
            other.of_type(self._value_type)
        if self._validator is not None:
            other.with_validator(self._validator)
        if self._default_factory is not None:
            # constant defaults are copied per call, so the factory can be shared
            other.with_default_factory(self._default_factory)
        if self._mapper is not None:
            other.map_from(*self._mapper)

    # lifecycle
    def _new_item(self) -> ConfigItem[T]:
        assert self._value_type is not None and self._validator is not None
        return ConfigItem(
            self._key, self._value_type, self._validator, self._default_factory, self._mapper
        )

    def finish(self) -> None:
        """Check completeness and validate the default. Idempotent."""
        if self._finished:
            return
        if self._value_type is None:
            raise ConfigBuilderError(f"No type specified for {self._key!r}")
        if self._validator is None:
            raise ConfigBuilderError(f"No validator specified for {self._key!r}")
        item = self._new_item()
        if item.has_default:
            try:
                default = item.create_default()
            except ConfigTypeError as exc:
                raise ConfigBuilderError(
                    f"Default for {self._key!r} has the wrong type: {exc}"
                ) from exc
            except Exception as exc:
                raise ConfigBuilderError(
                    f"Default factory for {self._key!r} failed: {exc}"
                ) from exc
            try:
                item.validate(default)
            except ConfigValidationError as exc:
                raise ConfigBuilderError(
                    f"Default for {self._key!r} is invalid: {exc.reason}"
                ) from exc
            logger.debug(
                "Validated default for %r: %s", self._key, _redact_for_log(self._key, default)
            )
        self._finished = True
        logger.debug("Item finished: %r", item)

    def create_item(self) -> ConfigItem[T]:
        """Finish, then return a new item that no other registry shares."""
        self.finish()
        return self._new_item()

    def add_item(self, key: str) -> "ItemBuilder[Any]":
        self.finish()
        return self._parent.add_item(key)

    def add_copy(self, new_key: str, original_key: str) -> "ItemBuilder[Any]":
        self.finish()
        return self._parent.add_copy(new_key, original_key)

    def add_copy_of_previous(self, new_key: str) -> "ItemBuilder[Any]":
        self.finish()
        return self._parent.add_copy_of_previous(new_key)

    def build(self) -> Config:
        self.finish()
        return self._parent.build()

    def __repr__(self) -> str:
        return f"<ItemBuilder key={self._key!r} finished={self.finished}>"


class ConfigBuilder:
    """Assembles item builders into an immutable ``Config``."""

    def __init__(self) -> None:
        self._items: List[ItemBuilder[Any]] = []

    def add_item(self, key: str) -> ItemBuilder[Any]:
        item: ItemBuilder[Any] = ItemBuilder(self, _check_key(key))
        self._items.append(item)
        logger.debug("Item added: %r (items=%d)", key, len(self._items))
        return item

    def add_copy(self, new_key: str, original_key: str) -> ItemBuilder[Any]:
        """Declare ``new_key`` with every property already set on ``original_key``."""
        for original in self._items:
            if original.key == original_key:
                copy = self.add_item(new_key)
                original._copy_into(copy)
                logger.debug("Item %r copied from %r", new_key, original_key)
                return copy
        raise ConfigBuilderError(
            f"No previous configuration item has been declared with key {original_key!r}"
        )

    def add_copy_of_previous(self, new_key: str) -> ItemBuilder[Any]:
        if not self._items:
            raise ConfigBuilderError("No previous configuration item has been declared")
        previous = self._items[-1]
        copy = self.add_item(new_key)
        previous._copy_into(copy)
        logger.debug("Item %r copied from %r", new_key, previous.key)
        return copy

    def build(self) -> Config:
        """Finish every item and freeze fresh copies of them into a new ``Config``."""
        items: Dict[str, ConfigItem[Any]] = {}
        for builder in self._items:
            if builder.key in items:
                logger.debug("Build rejected: duplicate key %r", builder.key)
                raise ConfigDuplicateError(f"Configuration item {builder.key!r} is declared twice")
            items[builder.key] = builder.create_item()
        logger.info("Config built with %d items", len(items))
        return Config(items)

    def __len__(self) -> int:
        return len(self._items)
