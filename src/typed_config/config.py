from __future__ import annotations

import logging
import threading
from functools import wraps
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple, Type, TypeVar, cast

from .exceptions import (
    ConfigLockedError,
    ConfigNotFoundError,
    ConfigTypeError,
    ConfigValidationError,
    ConfigValueUnsetError,
)
from .items import ConfigItem, TypeSpec
from .utils import _type_name

logger = logging.getLogger("typed_config.config")
logger.addHandler(logging.NullHandler())

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])


def is_unlocked(func: F) -> F:
    """
    Decorator to check that the config has not been locked before a write.
    The check and the write run under the same instance lock, so a concurrent
    lock() either precedes the check or waits for the write to finish.
    Raises ConfigLockedError if locked.
    """

    @wraps(func)
    def wrapper(self: "Config", *args: Any, **kwargs: Any) -> Any:
        with self._write_lock():
            if self.is_locked():
                logger.debug("Attempted %s while locked.", func.__name__)
                raise ConfigLockedError("Config is locked")
            return func(self, *args, **kwargs)

    return cast(F, wrapper)


class Config:
    """
    Frozen registry of configuration items, queried by key.

    The key set and every item's type, validator and default factory are fixed
    once the builder hands the instance out. Only current values change, and
    only through set_value()/set_values(), which validate before committing.
    Direct attribute assignment is forbidden.
    """

    def __init__(self, items: Mapping[str, ConfigItem[Any]]) -> None:
        self.__items: Mapping[str, ConfigItem[Any]] = MappingProxyType(dict(items))
        self.__locked = False
        self.__lock = threading.RLock()

    # forbid public attribute mutation
    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(self, "_Config__lock") and not name.startswith("_Config__"):
            raise AttributeError("Direct attribute assignment forbidden. Use set_value().")
        super().__setattr__(name, value)

    def _write_lock(self) -> threading.RLock:
        return self.__lock

    def _item(self, key: str) -> ConfigItem[Any]:
        try:
            return self.__items[key]
        except (KeyError, TypeError):
            raise ConfigNotFoundError(f"No config item with key: {key!r}") from None

    # lookups
    def has_entry(self, key: str) -> bool:
        """Return True if ``key`` was registered."""
        try:
            return key in self.__items
        except TypeError:
            return False

    def get_value(self, key: str, as_type: Optional[Type[T]] = None) -> Any:
        """
        Return the current value for ``key``; until one is set, a fresh default.

        ``as_type`` is the caller's expected type. A mismatch raises
        ConfigTypeError rather than handing back a value of the wrong type.
        """
        value = self._item(key).get_value()
        return self._expect(key, value, as_type)

    def get_default(self, key: str, as_type: Optional[Type[T]] = None) -> Any:
        """Invoke the default factory of ``key`` and return its result."""
        value = self._item(key).create_default()
        return self._expect(key, value, as_type)

    @staticmethod
    def _expect(key: str, value: Any, as_type: Optional[Type[T]]) -> Any:
        if as_type is not None and value is not None and not isinstance(value, as_type):
            raise ConfigTypeError(key, _type_name(as_type), type(value))
        return value

    def get_type(self, key: str) -> TypeSpec:
        return self._item(key).value_type

    def is_set(self, key: str) -> bool:
        return self._item(key).is_set

    def keys(self) -> Tuple[str, ...]:
        return tuple(self.__items.keys())

    def snapshot(self) -> MappingProxyType[str, Any]:
        """
        Return a read-only mapping of every readable value. Items with neither
        a value nor a default are left out.
        """
        out: Dict[str, Any] = {}
        for key, item in self.__items.items():
            try:
                out[key] = item.get_value()
            except ConfigValueUnsetError:
                continue
        return MappingProxyType(out)

    def validate(self, key: str, value: Any) -> Any:
        """Run the item's validator against ``value`` without committing it."""
        item = self._item(key)
        return item.validate(item.convert(value))

    # writes
    @is_unlocked
    def set_value(self, key: str, value: Any) -> Any:
        """
        Validate and commit ``value`` for ``key``. On failure the previous
        value is kept and the error propagates to the caller.
        """
        return self._item(key).set_value(value)

    @is_unlocked
    def set_values(self, values: Mapping[str, Any]) -> None:
        """
        Validate every entry, then commit all of them. If any entry fails,
        nothing is committed and one ConfigValidationError lists every failure.
        """
        errors: Dict[str, str] = {}
        resolved: Dict[str, Any] = {}
        # runs under the write lock taken by is_unlocked
        for key, raw in values.items():
            item = self._item(key)
            try:
                resolved[key] = item.validate(item.convert(raw))
            except ConfigValidationError as exc:
                errors[key] = exc.reason
        if errors:
            logger.debug("set_values rejected: %s", errors)
            raise ConfigValidationError(errors)
        for key, value in resolved.items():
            self.__items[key]._commit(value)
        logger.info("Config updated keys=%s", list(resolved.keys()))

    @is_unlocked
    def reset(self, key: str) -> None:
        """Drop the committed value of ``key`` so reads fall back to its default."""
        self._item(key).reset()

    # locking
    def lock(self) -> None:
        """
        Lock the configuration, rejecting every further write.
        """
        with self.__lock:
            self.__locked = True
        logger.info("Config locked.")

    def is_locked(self) -> bool:
        with self.__lock:
            return self.__locked

    def __contains__(self, key: object) -> bool:
        return self.has_entry(cast(str, key))

    def __getitem__(self, key: str) -> Any:
        return self.get_value(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.__items)

    def __repr__(self) -> str:
        return f"<Config items={len(self.__items)} locked={self.__locked}>"
