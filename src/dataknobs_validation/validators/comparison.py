"""Validators comparing a field with another value reached through a path.

The comparison target is named by a path option, e.g.
``{"lessThan": "../max_age"}``. The path is resolved through the
``PathAccessor`` of the node being validated, so siblings, parents and
ancestors can all be targets.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict

from ..constants import (
    COMPARISON_KEY_OPTION,
    DEFAULT_ERROR_MESSAGES,
    LABEL_OPTION,
    ValidationKeys,
)
from ..exceptions import ComparisonError, PathResolutionError, ValidatorConfigurationError
from .base import Validator
from .utils import (
    is_equal,
    is_greater_than,
    is_greater_than_or_equal,
    is_less_than,
    is_less_than_or_equal,
)

if TYPE_CHECKING:
    from ..path import PathAccessor


class ComparisonValidator(Validator):
    """Base class of the comparison family.

    Subclasses set ``key`` (the option holding the target path by default)
    and implement ``compare``.
    """

    key: str = ""

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["DEFAULT"]):
        super().__init__(message)

    def compare(self, value: Any, other: Any) -> bool:
        raise NotImplementedError(f"{type(self).__name__} must implement compare")

    def has_errors(
        self,
        value: Any,
        options: Dict[str, Any] | None = None,
        accessor: PathAccessor | None = None,
    ) -> str | None:
        if value is None:
            return None

        options = options or {}
        comparison_key = options.get(COMPARISON_KEY_OPTION) or self.key
        path = options.get(comparison_key)
        if not path:
            raise ValidatorConfigurationError(
                f"Missing comparison target option '{comparison_key}'",
                context={"validator": self.key, "options": dict(options)},
            )
        if accessor is None:
            raise ValidatorConfigurationError(
                f"Validator '{self.key}' needs a path accessor to resolve '{path}'",
                context={"validator": self.key, "path": path},
            )

        try:
            other = accessor.resolve(path)
        except PathResolutionError as e:
            return str(e)

        label = options.get(LABEL_OPTION) or path
        try:
            if self.compare(value, other):
                return None
        except ComparisonError as e:
            return self.get_message(str(e), label)
        return self.get_message(self.message_for(options), label)


class EqualsValidator(ComparisonValidator):
    key = ValidationKeys.EQUALS

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["EQUALS"]):
        super().__init__(message)

    def compare(self, value: Any, other: Any) -> bool:
        return is_equal(value, other)


class DiffValidator(ComparisonValidator):
    key = ValidationKeys.DIFF

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["DIFF"]):
        super().__init__(message)

    def compare(self, value: Any, other: Any) -> bool:
        return not is_equal(value, other)


class LessThanValidator(ComparisonValidator):
    key = ValidationKeys.LESS_THAN

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["LESS_THAN"]):
        super().__init__(message)

    def compare(self, value: Any, other: Any) -> bool:
        return is_less_than(value, other)


class LessThanOrEqualValidator(ComparisonValidator):
    key = ValidationKeys.LESS_THAN_OR_EQUAL

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["LESS_THAN_OR_EQUAL"]):
        super().__init__(message)

    def compare(self, value: Any, other: Any) -> bool:
        return is_less_than_or_equal(value, other)


class GreaterThanValidator(ComparisonValidator):
    key = ValidationKeys.GREATER_THAN

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["GREATER_THAN"]):
        super().__init__(message)

    def compare(self, value: Any, other: Any) -> bool:
        return is_greater_than(value, other)


class GreaterThanOrEqualValidator(ComparisonValidator):
    key = ValidationKeys.GREATER_THAN_OR_EQUAL

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["GREATER_THAN_OR_EQUAL"]):
        super().__init__(message)

    def compare(self, value: Any, other: Any) -> bool:
        return is_greater_than_or_equal(value, other)


COMPARISON_VALIDATORS: Dict[str, Callable[[], ComparisonValidator]] = {
    ValidationKeys.EQUALS: EqualsValidator,
    ValidationKeys.DIFF: DiffValidator,
    ValidationKeys.LESS_THAN: LessThanValidator,
    ValidationKeys.LESS_THAN_OR_EQUAL: LessThanOrEqualValidator,
    ValidationKeys.GREATER_THAN: GreaterThanValidator,
    ValidationKeys.GREATER_THAN_OR_EQUAL: GreaterThanOrEqualValidator,
}
