from typing import Any

from typing_extensions import Protocol, runtime_checkable

from typed_config.checker import ValueChecker


@runtime_checkable
class ValidatorProtocol(Protocol):
    def __call__(self, checker: ValueChecker[Any]) -> None:  # fail via checker.fail()
        ...
