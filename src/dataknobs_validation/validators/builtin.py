"""Built-in field validators.

Every validator here except ``RequiredValidator`` lets ``None`` through:
a missing value is reported by ``required`` alone.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Pattern

from ..constants import DEFAULT_ERROR_MESSAGES, DEFAULT_PATTERNS, ValidationKeys
from ..exceptions import ValidatorConfigurationError
from .base import Validator, check_types, type_name, value_type_name


_SIZED_TYPES = ("str", "list", "tuple", "set", "frozenset", "dict")

_REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}


def _require_option(options: Dict[str, Any] | None, key: str) -> Any:
    if not options or options.get(key) is None:
        raise ValidatorConfigurationError(
            f"Missing required option '{key}'",
            context={"validator": key, "options": dict(options or {})},
        )
    return options[key]


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def parse_pattern(pattern: str | Pattern[str]) -> Pattern[str]:
    """Compile a pattern given as a regex string, ``/body/flags`` or compiled regex.

    Example:
        ```python
        parse_pattern("/^abc$/i").flags & re.IGNORECASE
        # 2
        ```
    """
    if isinstance(pattern, re.Pattern):
        return pattern
    match = re.fullmatch(r"/(.+)/([a-z]*)", pattern, re.DOTALL)
    if not match:
        return re.compile(pattern)
    flags = 0
    for flag in match.group(2):
        flags |= _REGEX_FLAGS.get(flag, 0)
    return re.compile(match.group(1), flags)


def _coerce_bound(value: Any, bound: Any, key: str) -> Any:
    """Bring a min/max bound into the value's domain."""
    if not isinstance(value, date):
        return bound
    if isinstance(bound, str):
        try:
            bound = datetime.fromisoformat(bound)
        except ValueError as e:
            raise ValidatorConfigurationError(
                f"Invalid {key} param defined: {bound!r}",
                context={"validator": key, "bound": bound},
            ) from e
    if isinstance(bound, (int, float)) and not isinstance(bound, bool):
        bound = datetime.fromtimestamp(bound)
    if isinstance(value, datetime) and not isinstance(bound, datetime) and isinstance(bound, date):
        return datetime.combine(bound, time(), tzinfo=value.tzinfo)
    if not isinstance(value, datetime) and isinstance(bound, datetime):
        return bound.date()
    return bound


class RequiredValidator(Validator):
    """Fails for None and for empty strings or collections."""

    key = ValidationKeys.REQUIRED

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["REQUIRED"]):
        super().__init__(message)

    def has_errors(self, value, options=None, accessor=None):
        if value is None:
            return self.get_message(self.message_for(options))
        if isinstance(value, (str, bytes, bytearray, list, tuple, set, frozenset, dict)) and not value:
            return self.get_message(self.message_for(options))
        return None


class MinValidator(Validator):
    key = ValidationKeys.MIN

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["MIN"]):
        super().__init__(message, "number", "date")

    def has_errors(self, value, options=None, accessor=None):
        bound = _coerce_bound(value, _require_option(options, ValidationKeys.MIN), ValidationKeys.MIN)
        if value < bound:
            return self.get_message(self.message_for(options), bound)
        return None


class MaxValidator(Validator):
    key = ValidationKeys.MAX

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["MAX"]):
        super().__init__(message, "number", "date")

    def has_errors(self, value, options=None, accessor=None):
        bound = _coerce_bound(value, _require_option(options, ValidationKeys.MAX), ValidationKeys.MAX)
        if value > bound:
            return self.get_message(self.message_for(options), bound)
        return None


class StepValidator(Validator):
    """Fails when the value is not a whole multiple of ``step``."""

    key = ValidationKeys.STEP

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["STEP"]):
        super().__init__(message, "number")

    def has_errors(self, value, options=None, accessor=None):
        step = _require_option(options, ValidationKeys.STEP)
        try:
            # decimal arithmetic so that 0.3 is a step of 0.1
            remainder = Decimal(str(value)) % Decimal(str(step))
        except (InvalidOperation, ArithmeticError) as e:
            raise ValidatorConfigurationError(
                f"Invalid step param defined: {step!r}",
                context={"validator": ValidationKeys.STEP, "step": step},
            ) from e
        if remainder != 0:
            return self.get_message(self.message_for(options), step)
        return None


class MinLengthValidator(Validator):
    key = ValidationKeys.MIN_LENGTH

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["MIN_LENGTH"]):
        super().__init__(message, *_SIZED_TYPES)

    def has_errors(self, value, options=None, accessor=None):
        min_length = _require_option(options, ValidationKeys.MIN_LENGTH)
        if len(value) < min_length:
            return self.get_message(self.message_for(options), min_length)
        return None


class MaxLengthValidator(Validator):
    key = ValidationKeys.MAX_LENGTH

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["MAX_LENGTH"]):
        super().__init__(message, *_SIZED_TYPES)

    def has_errors(self, value, options=None, accessor=None):
        max_length = _require_option(options, ValidationKeys.MAX_LENGTH)
        if len(value) > max_length:
            return self.get_message(self.message_for(options), max_length)
        return None


class PatternValidator(Validator):
    """Fails when the string does not contain a match of ``pattern``.

    Subclasses provide a default pattern; an explicit ``pattern`` option
    always takes precedence.
    """

    key = ValidationKeys.PATTERN
    default_pattern: Pattern[str] | None = None

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["PATTERN"]):
        super().__init__(message, "str")

    def get_pattern(self, options: Dict[str, Any] | None) -> Pattern[str]:
        if options and options.get(ValidationKeys.PATTERN):
            return parse_pattern(options[ValidationKeys.PATTERN])
        if self.default_pattern is not None:
            return self.default_pattern
        return parse_pattern(_require_option(options, ValidationKeys.PATTERN))

    def has_errors(self, value, options=None, accessor=None):
        if not value:
            return None
        if self.get_pattern(options).search(value) is None:
            return self.get_message(self.message_for(options))
        return None


class EmailValidator(PatternValidator):
    key = ValidationKeys.EMAIL
    default_pattern = DEFAULT_PATTERNS["EMAIL"]

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["EMAIL"]):
        super().__init__(message)


class URLValidator(PatternValidator):
    key = ValidationKeys.URL
    default_pattern = DEFAULT_PATTERNS["URL"]

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["URL"]):
        super().__init__(message)


class PasswordValidator(PatternValidator):
    key = ValidationKeys.PASSWORD
    default_pattern = DEFAULT_PATTERNS["PASSWORD"]["CHAR8_ONE_OF_EACH"]

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["PASSWORD"]):
        super().__init__(message)


class DateValidator(Validator):
    """Accepts dates, ISO (or ``format``) date strings and timestamps."""

    key = ValidationKeys.DATE

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["DATE"]):
        super().__init__(message, "str", "date", "number")

    def has_errors(self, value, options=None, accessor=None):
        if isinstance(value, date):
            return None
        fmt = (options or {}).get("format")
        try:
            if isinstance(value, str):
                if fmt:
                    datetime.strptime(value, fmt)
                else:
                    datetime.fromisoformat(value)
            else:
                datetime.fromtimestamp(float(value))
        except (ValueError, OverflowError, OSError):
            return self.get_message(self.message_for(options))
        return None


class TypeValidator(Validator):
    """Fails when the value matches none of the ``types`` option entries."""

    key = ValidationKeys.TYPE

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["TYPE"]):
        super().__init__(message)

    def has_errors(self, value, options=None, accessor=None):
        if value is None:
            return None
        types = _as_list(_require_option(options, "types"))
        if check_types(value, types):
            return None
        return self.get_message(
            self.message_for(options),
            [type_name(t) for t in types],
            value_type_name(value),
        )


class ListValidator(Validator):
    """Fails when an element of the collection is not one of ``clazz``."""

    key = ValidationKeys.LIST

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["LIST"]):
        super().__init__(message, "list", "tuple", "set", "frozenset")

    def has_errors(self, value, options=None, accessor=None):
        clazz = _as_list(_require_option(options, "clazz"))
        for element in value:
            if not check_types(element, clazz):
                return self.get_message(self.message_for(options), [type_name(c) for c in clazz])
        return None


class OptionValidator(Validator):
    """Fails when the value is not one of the ``enum`` option's values.

    ``enum`` may be a sequence, a mapping (its values are allowed) or an
    ``Enum`` class (members and member values are allowed).
    """

    key = ValidationKeys.ENUM

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGES["ENUM"]):
        super().__init__(message)

    @staticmethod
    def allowed_values(choices: Any) -> List[Any]:
        if isinstance(choices, type) and issubclass(choices, enum.Enum):
            return [member.value for member in choices]
        if isinstance(choices, Mapping):
            return list(choices.values())
        if isinstance(choices, Iterable) and not isinstance(choices, (str, bytes)):
            return list(choices)
        raise ValidatorConfigurationError(
            f"Invalid enum param defined: {choices!r}",
            context={"validator": ValidationKeys.ENUM},
        )

    def has_errors(self, value, options=None, accessor=None):
        if value is None:
            return None
        allowed = self.allowed_values(_require_option(options, ValidationKeys.ENUM))
        candidate = value.value if isinstance(value, enum.Enum) else value
        if candidate in allowed:
            return None
        return self.get_message(self.message_for(options), allowed)


BUILTIN_VALIDATORS = {
    ValidationKeys.REQUIRED: RequiredValidator,
    ValidationKeys.MIN: MinValidator,
    ValidationKeys.MAX: MaxValidator,
    ValidationKeys.STEP: StepValidator,
    ValidationKeys.MIN_LENGTH: MinLengthValidator,
    ValidationKeys.MAX_LENGTH: MaxLengthValidator,
    ValidationKeys.PATTERN: PatternValidator,
    ValidationKeys.EMAIL: EmailValidator,
    ValidationKeys.URL: URLValidator,
    ValidationKeys.PASSWORD: PasswordValidator,
    ValidationKeys.DATE: DateValidator,
    ValidationKeys.TYPE: TypeValidator,
    ValidationKeys.LIST: ListValidator,
    ValidationKeys.ENUM: OptionValidator,
}
