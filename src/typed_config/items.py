from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Generic, Optional, Tuple, Type, TypeVar, Union

from .checker import ValueChecker
from .exceptions import ConfigTypeError, ConfigValidationError, ConfigValueUnsetError
from .utils import _redact_for_log, _type_name
from .validation.protocol import ValidatorProtocol

logger = logging.getLogger("typed_config.items")
logger.addHandler(logging.NullHandler())

T = TypeVar("T")

TypeSpec = Union[Type[Any], Tuple[Type[Any], ...]]

_UNSET = object()


class ConfigItem(Generic[T]):
    """
    One declared configuration key: its type, validator, default factory and
    current value. Instances are produced by the builder and owned by a single
    ``Config``.
    """

    def __init__(
        self,
        key: str,
        value_type: TypeSpec,
        validator: ValidatorProtocol,
        default_factory: Optional[Callable[[], Any]] = None,
        mapper: Optional[Tuple[TypeSpec, Callable[[Any], Any]]] = None,
    ) -> None:
        self._key = key
        self._value_type = value_type
        self._validator = validator
        self._default_factory = default_factory
        self._mapper = mapper
        self._value: Any = _UNSET
        self._lock = threading.RLock()

    @property
    def key(self) -> str:
        return self._key

    @property
    def value_type(self) -> TypeSpec:
        return self._value_type

    @property
    def validator(self) -> ValidatorProtocol:
        return self._validator

    @property
    def has_default(self) -> bool:
        return self._default_factory is not None

    @property
    def is_set(self) -> bool:
        return self._value is not _UNSET

    def cast(self, value: Any) -> T:
        """
        Checked downcast to the declared type. ``None`` passes through; whether
        it is acceptable is decided by the validator's null policy.
        """
        if value is not None and not isinstance(value, self._value_type):
            raise ConfigTypeError(self._key, _type_name(self._value_type), type(value))
        return value

    def convert(self, value: Any) -> Any:
        """Apply the declared input mapper to raw external input, if one matches."""
        if self._mapper is None or value is None:
            return value
        source_type, mapper = self._mapper
        if isinstance(value, self._value_type) or not isinstance(value, source_type):
            return value
        try:
            return mapper(value)
        except (ValueError, TypeError) as exc:
            raise ConfigValidationError(
                {self._key: f"could not convert {type(value).__name__} value: {exc}"},
                self._key,
                value,
            ) from exc

    def validate(self, value: Any) -> T:
        """Cast ``value`` and run the validator against it. Does not commit."""
        typed = self.cast(value)
        checker: ValueChecker[T] = ValueChecker(self._key)
        self._validator(checker.bind(typed))
        return typed

    def set_value(self, value: Any) -> T:
        """
        Validate, then commit ``value``. On failure the current value is unchanged
        and the error propagates; the rejection is only traced at DEBUG level.
        """
        with self._lock:
            try:
                typed = self.validate(self.convert(value))
            except ConfigValidationError as exc:
                logger.debug("Rejected value for %r: %s", self._key, exc.reason)
                raise
            self._commit(typed)
        return typed

    def _commit(self, typed: T) -> None:
        # caller has already validated `typed`
        with self._lock:
            self._value = typed
        logger.debug(
            "Committed value for %r: %s", self._key, _redact_for_log(self._key, typed)
        )

    def get_value(self) -> T:
        """Return the committed value, or a fresh default while nothing is committed."""
        value = self._value
        if value is _UNSET:
            if self._default_factory is None:
                raise ConfigValueUnsetError(f"No value set and no default for {self._key!r}")
            return self.create_default()
        return self.cast(value)

    def create_default(self) -> T:
        if self._default_factory is None:
            raise ConfigValueUnsetError(f"No default declared for {self._key!r}")
        return self.cast(self._default_factory())

    def reset(self) -> None:
        with self._lock:
            self._value = _UNSET
        logger.debug("Reset value for %r", self._key)

    def __repr__(self) -> str:
        return (
            f"<ConfigItem key={self._key!r} type={_type_name(self._value_type)} "
            f"set={self.is_set} default={self.has_default}>"
        )
