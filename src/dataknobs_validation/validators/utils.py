"""Equality and ordering predicates used by the comparison validators.

Ordering is only defined between finite numbers (``int``, ``float`` and
``Decimal`` form one domain) and between dates of the same kind. Any other
pair raises ``ComparisonError`` carrying exactly one failure class:

- ``null``: either operand is None
- ``nan``: either operand is NaN
- ``invalid_date``: two dates that cannot be ordered (naive vs aware
  datetimes, or a ``date`` against a ``datetime``)
- ``type_mismatch``: the operands belong to different domains, or only one
  of them is orderable
- ``unsupported``: neither operand is orderable (booleans and infinities
  are never orderable)
"""

import math
import re
from collections.abc import Mapping, Set
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from ..constants import COMPARISON_ERROR_MESSAGES
from ..exceptions import ComparisonError
from ..strings import sf

NULL = "null"
NAN = "nan"
INVALID_DATE = "invalid_date"
TYPE_MISMATCH = "type_mismatch"
UNSUPPORTED = "unsupported"

_NUMBERS = (int, float, Decimal)


def is_number(value: Any) -> bool:
    return isinstance(value, _NUMBERS) and not isinstance(value, bool)


def is_nan(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    return False


def _is_infinite(value: Any) -> bool:
    if isinstance(value, float):
        return math.isinf(value)
    if isinstance(value, Decimal):
        return value.is_infinite()
    return False


def _describe(value: Any) -> str:
    if _is_infinite(value):
        return str(value)
    return type(value).__name__


def _domain(value: Any) -> str | None:
    """Ordering domain of a value, or None when it cannot be ordered."""
    if isinstance(value, bool) or _is_infinite(value):
        return None
    if is_number(value):
        return "number"
    if isinstance(value, date):
        return "date"
    return None


def _is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.tzinfo.utcoffset(value) is not None


def _dates_comparable(a: date, b: date) -> bool:
    if isinstance(a, datetime) != isinstance(b, datetime):
        return False
    if isinstance(a, datetime):
        return _is_aware(a) == _is_aware(b)
    return True


def ensure_ordering_comparable(a: Any, b: Any) -> None:
    """Check that two values can be ordered against each other.

    Finite numbers order against numbers and dates against dates. One
    orderable operand against a value of another type, booleans included,
    is a ``type_mismatch``; an infinity is a number whose value cannot be
    ordered, so it is ``unsupported`` against any operand.

    Args:
        a: Left operand
        b: Right operand

    Raises:
        ComparisonError: With the failure class in ``kind``
    """
    if a is None or b is None:
        raise ComparisonError(COMPARISON_ERROR_MESSAGES["NULL_OR_UNDEFINED_COMPARISON"], NULL)

    if is_nan(a) or is_nan(b):
        raise ComparisonError(COMPARISON_ERROR_MESSAGES["NAN_COMPARISON"], NAN)

    left, right = _domain(a), _domain(b)
    if left is None and right is None:
        raise ComparisonError(
            sf(COMPARISON_ERROR_MESSAGES["UNSUPPORTED_TYPES_COMPARISON"], _describe(a), _describe(b)),
            UNSUPPORTED,
        )
    if left is None or right is None:
        unorderable = a if left is None else b
        if _is_infinite(unorderable):
            raise ComparisonError(
                sf(COMPARISON_ERROR_MESSAGES["UNSUPPORTED_TYPES_COMPARISON"], _describe(a), _describe(b)),
                UNSUPPORTED,
            )
        raise ComparisonError(
            sf(COMPARISON_ERROR_MESSAGES["TYPE_MISMATCH_COMPARISON"], _describe(a), _describe(b)),
            TYPE_MISMATCH,
        )
    if left != right:
        raise ComparisonError(
            sf(COMPARISON_ERROR_MESSAGES["TYPE_MISMATCH_COMPARISON"], _describe(a), _describe(b)),
            TYPE_MISMATCH,
        )
    if left == "date" and not _dates_comparable(a, b):
        raise ComparisonError(COMPARISON_ERROR_MESSAGES["INVALID_DATE_COMPARISON"], INVALID_DATE)


def is_equal(a: Any, b: Any) -> bool:
    """Deep equality between two values.

    Numbers compare by value across ``int``, ``float`` and ``Decimal``, NaN
    equals NaN, booleans only equal booleans, containers compare element by
    element and plain objects compare by their attributes.
    """
    if a is b:
        return True
    if a is None or b is None:
        return False

    if is_number(a) and is_number(b):
        if is_nan(a) or is_nan(b):
            return is_nan(a) and is_nan(b)
        return a == b
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b

    if isinstance(a, date) or isinstance(b, date):
        return type(a) is type(b) and a == b

    if isinstance(a, re.Pattern) or isinstance(b, re.Pattern):
        return (
            isinstance(a, re.Pattern)
            and isinstance(b, re.Pattern)
            and a.pattern == b.pattern
            and a.flags == b.flags
        )

    if isinstance(a, (str, bytes)) or isinstance(b, (str, bytes)):
        return type(a) is type(b) and a == b

    if isinstance(a, Mapping) or isinstance(b, Mapping):
        if not (isinstance(a, Mapping) and isinstance(b, Mapping)):
            return False
        if set(a.keys()) != set(b.keys()):
            return False
        return all(is_equal(a[key], b[key]) for key in a)

    if isinstance(a, Set) or isinstance(b, Set):
        return isinstance(a, Set) and isinstance(b, Set) and a == b

    if isinstance(a, (list, tuple)) or isinstance(b, (list, tuple)):
        if type(a) is not type(b) or len(a) != len(b):
            return False
        return all(is_equal(x, y) for x, y in zip(a, b))

    if type(a) is not type(b):
        return False
    if hasattr(a, "__dict__") and hasattr(b, "__dict__"):
        return is_equal(vars(a), vars(b))
    return a == b


def is_less_than(a: Any, b: Any) -> bool:
    """Strict ordering ``a < b`` after the comparability check.

    Raises:
        ComparisonError: If the values cannot be ordered
    """
    ensure_ordering_comparable(a, b)
    return a < b


def is_greater_than(a: Any, b: Any) -> bool:
    """Strict ordering ``a > b`` after the comparability check.

    Raises:
        ComparisonError: If the values cannot be ordered
    """
    ensure_ordering_comparable(a, b)
    return a > b


def is_less_than_or_equal(a: Any, b: Any) -> bool:
    ensure_ordering_comparable(a, b)
    return a < b or is_equal(a, b)


def is_greater_than_or_equal(a: Any, b: Any) -> bool:
    ensure_ordering_comparable(a, b)
    return a > b or is_equal(a, b)
