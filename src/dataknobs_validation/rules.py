"""Shorthand constructors for the rules of the built-in validators.

Every helper takes an optional ``message`` overriding the validator's default
template.

Example:
    ```python
    from dataknobs_validation import rules

    rules.required()
    rules.max_length(40, message="At most {0} characters")
    rules.lt("../max_price", label="maximum price")
    ```
"""

from typing import Any, Dict, Pattern

from .constants import COMPARISON_KEY_OPTION, LABEL_OPTION, MESSAGE_OPTION, ValidationKeys
from .schema import Rule


def rule(key: str, message: str | None = None, **options: Any) -> Rule:
    """Rule for any registered validator key, custom ones included."""
    opts: Dict[str, Any] = dict(options)
    if message:
        opts[MESSAGE_OPTION] = message
    return Rule(key, opts)


def required(message: str | None = None) -> Rule:
    return rule(ValidationKeys.REQUIRED, message)


def min_value(value: Any, message: str | None = None) -> Rule:
    """Lower bound for numbers or dates (dates may be ISO strings)."""
    return rule(ValidationKeys.MIN, message, **{ValidationKeys.MIN: value})


def max_value(value: Any, message: str | None = None) -> Rule:
    """Upper bound for numbers or dates (dates may be ISO strings)."""
    return rule(ValidationKeys.MAX, message, **{ValidationKeys.MAX: value})


def step(value: Any, message: str | None = None) -> Rule:
    return rule(ValidationKeys.STEP, message, **{ValidationKeys.STEP: value})


def min_length(value: int, message: str | None = None) -> Rule:
    return rule(ValidationKeys.MIN_LENGTH, message, **{ValidationKeys.MIN_LENGTH: value})


def max_length(value: int, message: str | None = None) -> Rule:
    return rule(ValidationKeys.MAX_LENGTH, message, **{ValidationKeys.MAX_LENGTH: value})


def pattern(value: "str | Pattern[str]", message: str | None = None) -> Rule:
    """Regex the value must contain a match of; ``/body/flags`` strings are accepted."""
    return rule(ValidationKeys.PATTERN, message, **{ValidationKeys.PATTERN: value})


def _pattern_rule(key: str, value: Any, message: str | None) -> Rule:
    if value is None:
        return rule(key, message)
    return rule(key, message, **{ValidationKeys.PATTERN: value})


def email(pattern: Any = None, message: str | None = None) -> Rule:
    return _pattern_rule(ValidationKeys.EMAIL, pattern, message)


def url(pattern: Any = None, message: str | None = None) -> Rule:
    return _pattern_rule(ValidationKeys.URL, pattern, message)


def password(pattern: Any = None, message: str | None = None) -> Rule:
    return _pattern_rule(ValidationKeys.PASSWORD, pattern, message)


def date(format: str | None = None, message: str | None = None) -> Rule:
    """Value must be a date, a timestamp or a date string (ISO, or ``format`` for strptime)."""
    if format is None:
        return rule(ValidationKeys.DATE, message)
    return rule(ValidationKeys.DATE, message, format=format)


def type_of(*types: Any, message: str | None = None) -> Rule:
    """Value must match one of the given type names or classes."""
    return rule(ValidationKeys.TYPE, message, types=types)


def list_of(*clazz: Any, message: str | None = None) -> Rule:
    """Every element must match one of the given type names or classes."""
    return rule(ValidationKeys.LIST, message, clazz=clazz)


def option(choices: Any, message: str | None = None) -> Rule:
    """Value must be one of ``choices`` (sequence, mapping values or Enum class)."""
    return rule(ValidationKeys.ENUM, message, **{ValidationKeys.ENUM: choices})


def _comparison(key: str, path: str, label: str | None, message: str | None) -> Rule:
    opts: Dict[str, Any] = {key: path, COMPARISON_KEY_OPTION: key}
    if label:
        opts[LABEL_OPTION] = label
    return rule(key, message, **opts)


def eq(path: str, label: str | None = None, message: str | None = None) -> Rule:
    """Value must equal the value at ``path``."""
    return _comparison(ValidationKeys.EQUALS, path, label, message)


def diff(path: str, label: str | None = None, message: str | None = None) -> Rule:
    """Value must differ from the value at ``path``."""
    return _comparison(ValidationKeys.DIFF, path, label, message)


def lt(path: str, label: str | None = None, message: str | None = None) -> Rule:
    return _comparison(ValidationKeys.LESS_THAN, path, label, message)


def lte(path: str, label: str | None = None, message: str | None = None) -> Rule:
    return _comparison(ValidationKeys.LESS_THAN_OR_EQUAL, path, label, message)


def gt(path: str, label: str | None = None, message: str | None = None) -> Rule:
    return _comparison(ValidationKeys.GREATER_THAN, path, label, message)


def gte(path: str, label: str | None = None, message: str | None = None) -> Rule:
    return _comparison(ValidationKeys.GREATER_THAN_OR_EQUAL, path, label, message)
