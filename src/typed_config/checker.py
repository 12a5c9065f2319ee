"""
Chainable value checks shared by rule declarations and value acceptance.

A ``ValueChecker`` holds one candidate value at a time. Validators receive a
checker that is already bound and call ``require_*`` / ``check`` methods on it;
every call either returns the checker or raises ``ConfigValidationError``.

``None`` is handled by the checker itself: unless ``allow_null()`` was called
for the current binding, a ``None`` candidate fails with "value cannot be null"
before any predicate runs. Predicates therefore never see ``None``.

Example, an even integer::

    def even(checker: ValueChecker[int]) -> None:
        checker.require_integer().check(
            lambda n: n % 2 == 0 or checker.fail("value must be even, currently: %s", n)
        )
"""

from __future__ import annotations

import re
from typing import (
    Any,
    Callable,
    Generic,
    Iterable,
    NoReturn,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from .exceptions import ConfigAuthoringError, ConfigValidationError
from .utils import _type_name

T = TypeVar("T")
E = TypeVar("E")

__all__ = ["ValueChecker"]


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _materialize(values: Iterable[E], what: str) -> Tuple[E, ...]:
    if values is None:
        raise TypeError(f"{what} cannot be None")
    if isinstance(values, (str, bytes)):
        raise ConfigAuthoringError(f"{what} must be a collection, not {type(values).__name__}")
    items = tuple(values)
    if not items:
        raise ConfigAuthoringError(f"{what} cannot be empty")
    if any(item is None for item in items):
        raise ConfigAuthoringError(f"{what} cannot contain None")
    return items


def _check_bounds(lo: Any, hi: Any) -> None:
    if lo > hi:
        raise ConfigAuthoringError(f"lower bound {lo} is greater than upper bound {hi}")


class ValueChecker(Generic[T]):
    """Holds one candidate value and applies chained requirements to it."""

    def __init__(self, name: str = "value") -> None:
        self._name = name
        self._value: Optional[T] = None
        self._null_allowed = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> Optional[T]:
        return self._value

    @property
    def null_allowed(self) -> bool:
        return self._null_allowed

    def bind(self, value: Optional[T]) -> "ValueChecker[T]":
        """Rebind to a new candidate and reset the null policy to forbidden."""
        self._value = value
        self._null_allowed = False
        return self

    def allow_null(self) -> "ValueChecker[T]":
        """Permit ``None`` for the remainder of this binding."""
        if self._null_allowed:
            raise ConfigAuthoringError("null values are already allowed")
        self._null_allowed = True
        return self

    # primitives
    def check(self, function: Callable[[T], Any]) -> "ValueChecker[T]":
        """
        Run a custom check on the bound value.

        ``function`` receives the non-null value and signals failure through
        ``fail`` (or any nested ``require_*``). Its return value is ignored.
        """
        if not callable(function):
            raise TypeError("check function must be callable")
        value = self._value
        if value is None:
            if not self._null_allowed:
                self.fail("value cannot be null")
            return self
        function(value)
        return self

    def check_against(
        self, elements: Iterable[E], function: Callable[[T, E], Any]
    ) -> "ValueChecker[T]":
        """
        Run ``function(value, element)`` for every element, in iteration order.

        ``elements`` is consumed immediately; an empty collection or one holding
        ``None`` is a declaration mistake and raises ``ConfigAuthoringError``.
        """
        if not callable(function):
            raise TypeError("check function must be callable")
        items = _materialize(elements, "list of values")

        def _each(value: T) -> None:
            for element in items:
                function(value, element)

        return self.check(_each)

    def fail(self, message: str, *args: Any) -> NoReturn:
        """Raise ``ConfigValidationError`` for the bound value. Never returns."""
        if message is None:
            raise TypeError("failure message cannot be None")
        if args:
            message = message % args
        raise ConfigValidationError({self._name: message}, self._name, self._value)

    # types
    def require_type(self, *types: type) -> "ValueChecker[T]":
        """Require the value to be an instance of any of ``types``."""
        allowed = _materialize(types, "list of types")
        for t in allowed:
            if not isinstance(t, type):
                raise ConfigAuthoringError(f"{t!r} is not a type")

        def _type(value: T) -> None:
            if not isinstance(value, allowed):
                self.fail(
                    "value must be of type %s, currently: %s",
                    _type_name(allowed),
                    type(value).__name__,
                )

        return self.check(_type)

    def require_string(self) -> "ValueChecker[T]":
        return self.require_type(str)

    def require_non_empty_string(self) -> "ValueChecker[T]":
        def _non_empty(value: Any) -> None:
            if not value:
                self.fail("value must be a non-empty string")

        return self.require_string().check(_non_empty)

    def require_match(
        self, pattern: Union[str, "re.Pattern[str]"], message: Optional[str] = None
    ) -> "ValueChecker[T]":
        """Require a string that matches ``pattern`` in full."""
        if pattern is None:
            raise TypeError("pattern cannot be None")
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

        def _match(value: Any) -> None:
            if compiled.fullmatch(value) is None:
                if message is not None:
                    self.fail(message)
                self.fail("value must match %s, currently: %r", compiled.pattern, value)

        return self.require_string().check(_match)

    def require_length_between(self, lo: int, hi: int) -> "ValueChecker[T]":
        _check_bounds(lo, hi)

        def _length(value: Any) -> None:
            try:
                size = len(value)
            except TypeError:
                self.fail("value must have a length, currently: %s", type(value).__name__)
            if not lo <= size <= hi:
                self.fail("value length must be between %s and %s, currently: %s", lo, hi, size)

        return self.check(_length)

    # integers
    def require_integer(self) -> "ValueChecker[T]":
        def _integer(value: Any) -> None:
            if not _is_integer(value):
                self.fail("value must be an integer, currently: %r", value)

        return self.check(_integer)

    def require_integer_between(self, lo: int, hi: int) -> "ValueChecker[T]":
        """Require an integer within ``[lo, hi]`` (inclusive on both ends)."""
        _check_bounds(lo, hi)

        def _between(value: Any) -> None:
            if value < lo or value > hi:
                self.fail(
                    "value must be an integer between or equal %s and %s, currently: %s",
                    lo,
                    hi,
                    value,
                )

        return self.require_integer().check(_between)

    def require_integer_min(self, lo: int) -> "ValueChecker[T]":
        def _min(value: Any) -> None:
            if value < lo:
                self.fail(
                    "value must be an integer greater than or equal to %s, currently: %s",
                    lo,
                    value,
                )

        return self.require_integer().check(_min)

    def require_integer_max(self, hi: int) -> "ValueChecker[T]":
        def _max(value: Any) -> None:
            if value > hi:
                self.fail(
                    "value must be an integer less than or equal to %s, currently: %s", hi, value
                )

        return self.require_integer().check(_max)

    def require_positive_integer(self) -> "ValueChecker[T]":
        def _positive(value: Any) -> None:
            if value <= 0:
                self.fail("value must be an integer greater than zero, currently: %s", value)

        return self.require_integer().check(_positive)

    def require_non_negative_integer(self) -> "ValueChecker[T]":
        def _non_negative(value: Any) -> None:
            if value < 0:
                self.fail(
                    "value must be an integer greater than or equal to zero, currently: %s", value
                )

        return self.require_integer().check(_non_negative)

    def require_negative_integer(self) -> "ValueChecker[T]":
        def _negative(value: Any) -> None:
            if value >= 0:
                self.fail("value must be a negative integer, currently: %s", value)

        return self.require_integer().check(_negative)

    # numbers
    def require_number(self) -> "ValueChecker[T]":
        def _number(value: Any) -> None:
            if not _is_number(value):
                self.fail("value must be a number, currently: %r", value)

        return self.check(_number)

    def require_number_between(
        self, lo: Union[int, float], hi: Union[int, float]
    ) -> "ValueChecker[T]":
        _check_bounds(lo, hi)

        def _between(value: Any) -> None:
            if not lo <= value <= hi:
                self.fail("value must be between %s and %s, currently: %s", lo, hi, value)

        return self.require_number().check(_between)

    # membership
    def require_in(self, values: Iterable[Any]) -> "ValueChecker[T]":
        """Require the value to equal one of ``values``."""
        allowed = _materialize(values, "list of values")

        def _in(value: Any) -> None:
            if value not in allowed:
                self.fail("value must be one of %r, currently: %r", allowed, value)

        return self.check(_in)

    def require_not_in(self, values: Iterable[Any]) -> "ValueChecker[T]":
        """Require the value to differ from every one of ``values``."""
        forbidden = _materialize(values, "list of values")

        def _not_in(value: Any) -> None:
            if value in forbidden:
                self.fail("value cannot be one of %r, currently: %r", forbidden, value)

        return self.check(_not_in)

    # generic
    def require_that(
        self, predicate: Callable[[T], bool], message: Optional[str] = None
    ) -> "ValueChecker[T]":
        """Require ``predicate(value)`` to be truthy."""
        if not callable(predicate):
            raise TypeError("predicate must be callable")

        def _that(value: T) -> None:
            if not predicate(value):
                if message is not None:
                    self.fail(message)
                self.fail(
                    "value does not satisfy %s, currently: %r", _predicate_name(predicate), value
                )

        return self.check(_that)

    def require_comparable(self) -> "ValueChecker[T]":
        def _comparable(value: Any) -> None:
            try:
                value < value
            except TypeError:
                self.fail("value must be comparable, currently: %s", type(value).__name__)

        return self.check(_comparable)

    def __repr__(self) -> str:
        return (
            f"<ValueChecker name={self._name!r} value={self._value!r} "
            f"null_allowed={self._null_allowed}>"
        )


def _predicate_name(predicate: Callable[..., Any]) -> str:
    name = getattr(predicate, "__name__", None)
    if not name or name == "<lambda>":
        return "the requirement"
    return name
