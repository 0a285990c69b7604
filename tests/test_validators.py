"""Tests for the validator contract, the type guard and the built-in validators."""

import asyncio
import enum
import re
from datetime import date, datetime
from decimal import Decimal

import pytest

from dataknobs_validation.exceptions import ValidatorConfigurationError
from dataknobs_validation.validators import (
    AsyncValidator,
    DateValidator,
    EmailValidator,
    ListValidator,
    MaxLengthValidator,
    MaxValidator,
    MinLengthValidator,
    MinValidator,
    OptionValidator,
    PasswordValidator,
    PatternValidator,
    RequiredValidator,
    StepValidator,
    TypeValidator,
    URLValidator,
    Validator,
    check_types,
)
from dataknobs_validation.validators.builtin import parse_pattern


class Color(enum.Enum):
    RED = "red"
    GREEN = "green"


class Animal:
    pass


class Dog(Animal):
    pass


class PositiveValidator(Validator):
    def __init__(self, message="Must be positive"):
        super().__init__(message, "number")

    def has_errors(self, value, options=None, accessor=None):
        return self.get_message(self.message_for(options)) if value <= 0 else None


class SlowPositiveValidator(AsyncValidator):
    def __init__(self, message="Must be positive"):
        super().__init__(message, "number")

    async def has_errors(self, value, options=None, accessor=None):
        await asyncio.sleep(0)
        return self.message if value <= 0 else None


class TestTypeGuard:
    """Test the type guard applied at construction."""

    def test_none_short_circuits(self):
        """Test that None never reaches the rule body."""
        assert PositiveValidator().has_errors(None) is None

    def test_type_mismatch_message(self):
        """Test the message for a value of the wrong type."""
        assert PositiveValidator().has_errors("abc") == "Invalid type. Expected number, received str"

    def test_body_runs_for_accepted_type(self):
        """Test that accepted values reach the rule body."""
        validator = PositiveValidator()
        assert validator.has_errors(-1) == "Must be positive"
        assert validator.has_errors(3) is None

    def test_string_value_names_its_type(self):
        """Test that a string value is reported by its type name, not its content."""
        assert MinValidator().has_errors("abc", {"min": 1}) == "Invalid type. Expected number, date, received str"
        assert TypeValidator().has_errors("number", {"types": ["int"]}) == "Invalid type. Expected int, received str"

    def test_bool_is_not_a_number(self):
        """Test that booleans do not pass a number guard."""
        assert PositiveValidator().has_errors(True) == "Invalid type. Expected number, received bool"

    def test_guard_applied_per_instance(self):
        """Test that constructing several validators keeps one guard each."""
        first, second = PositiveValidator(), PositiveValidator()

        assert first.has_errors("x") == second.has_errors("x")
        assert first.has_errors(1) is None

    def test_repeated_calls_give_same_result(self):
        """Test that a validator keeps no state between calls."""
        validator = PositiveValidator()

        assert [validator.has_errors(v) for v in ("x", -1, None)] == [
            validator.has_errors(v) for v in ("x", -1, None)
        ]

    @pytest.mark.asyncio
    async def test_async_mismatch_is_awaitable(self):
        """Test that an async validator returns an awaitable for a type mismatch."""
        result = SlowPositiveValidator().has_errors("abc")

        assert asyncio.iscoroutine(result)
        assert await result == "Invalid type. Expected number, received str"

    @pytest.mark.asyncio
    async def test_async_none_is_awaitable(self):
        """Test that an async validator returns an awaitable for None."""
        assert await SlowPositiveValidator().has_errors(None) is None
        assert await SlowPositiveValidator().has_errors(-2) == "Must be positive"

    def test_check_types_names_and_classes(self):
        """Test type matching by name, alias, MRO and class."""
        assert check_types(Dog(), ["Animal"])
        assert check_types(Dog(), [Animal])
        assert check_types(Decimal("1.5"), ["number"])
        assert check_types(datetime.now(), ["date"])
        assert not check_types(1, ["str"])
        assert not check_types(False, ["int"])
        assert check_types(False, ["bool"])


class TestRequiredValidator:
    """Test the required validator."""

    @pytest.mark.parametrize("value", [None, "", [], {}, set(), b""])
    def test_missing_or_empty(self, value):
        """Test that None and empty values fail."""
        assert RequiredValidator().has_errors(value) == "This field is required"

    @pytest.mark.parametrize("value", [0, False, "x", [0], 0.0])
    def test_present(self, value):
        """Test that falsy scalars still count as present."""
        assert RequiredValidator().has_errors(value) is None

    def test_custom_message(self):
        """Test the message option."""
        assert RequiredValidator().has_errors(None, {"message": "Name please"}) == "Name please"


class TestBoundsValidators:
    """Test min, max and step."""

    def test_min_and_max_numbers(self):
        """Test numeric bounds."""
        assert MinValidator().has_errors(4, {"min": 5}) == "The minimum value is 5"
        assert MinValidator().has_errors(5, {"min": 5}) is None
        assert MaxValidator().has_errors(11, {"max": 10}) == "The maximum value is 10"
        assert MaxValidator().has_errors(Decimal("9.5"), {"max": 10}) is None

    def test_min_with_date_string(self):
        """Test that a date bound may be an ISO string."""
        assert MinValidator().has_errors(date(2020, 1, 1), {"min": "2021-01-01"}) is not None
        assert MinValidator().has_errors(datetime(2022, 1, 1), {"min": "2021-01-01"}) is None

    def test_invalid_date_bound(self):
        """Test that an unparseable date bound is a configuration error."""
        with pytest.raises(ValidatorConfigurationError):
            MaxValidator().has_errors(date(2020, 1, 1), {"max": "not a date"})

    def test_missing_bound(self):
        """Test that a missing bound option is a configuration error."""
        with pytest.raises(ValidatorConfigurationError) as exc_info:
            MinValidator().has_errors(1, {})

        assert "min" in str(exc_info.value)

    def test_step(self):
        """Test step with integers and decimals."""
        assert StepValidator().has_errors(10, {"step": 5}) is None
        assert StepValidator().has_errors(7, {"step": 5}) == "Invalid value. Not a step of 5"
        assert StepValidator().has_errors(0.3, {"step": 0.1}) is None

    def test_none_passes(self):
        """Test that None passes every bound validator."""
        assert MinValidator().has_errors(None, {"min": 1}) is None
        assert MaxValidator().has_errors(None, {"max": 1}) is None
        assert StepValidator().has_errors(None, {"step": 1}) is None


class TestLengthValidators:
    """Test minlength and maxlength."""

    def test_strings_and_collections(self):
        """Test lengths of strings and collections."""
        assert MinLengthValidator().has_errors("ab", {"minlength": 3}) == "The minimum length is 3"
        assert MinLengthValidator().has_errors([1, 2, 3], {"minlength": 3}) is None
        assert MaxLengthValidator().has_errors("abcd", {"maxlength": 3}) == "The maximum length is 3"
        assert MaxLengthValidator().has_errors({"a": 1}, {"maxlength": 3}) is None

    def test_wrong_type(self):
        """Test that numbers are rejected by the guard."""
        message = MinLengthValidator().has_errors(5, {"minlength": 1})
        assert message.startswith("Invalid type. Expected str, list")
        assert message.endswith("received int")


class TestPatternValidators:
    """Test pattern, email, url and password."""

    def test_pattern_string(self):
        """Test a plain regex pattern."""
        validator = PatternValidator()
        assert validator.has_errors("abc", {"pattern": r"^\d+$"}) == "The value does not match the pattern"
        assert validator.has_errors("123", {"pattern": r"^\d+$"}) is None

    def test_pattern_with_flags(self):
        """Test the /body/flags form."""
        assert parse_pattern("/^abc$/i").flags & re.IGNORECASE
        assert PatternValidator().has_errors("ABC", {"pattern": "/^abc$/i"}) is None

    def test_compiled_pattern(self):
        """Test a compiled pattern option."""
        assert PatternValidator().has_errors("x1", {"pattern": re.compile(r"\d")}) is None

    def test_email(self):
        """Test the default email pattern."""
        assert EmailValidator().has_errors("john@example.com") is None
        assert EmailValidator().has_errors("not-an-email") == "The value is not a valid email"

    def test_url(self):
        """Test the default URL pattern."""
        assert URLValidator().has_errors("https://www.example.com/path?q=1") is None
        assert URLValidator().has_errors("just text") == "The value is not a valid URL"

    def test_password(self):
        """Test the default password pattern."""
        assert PasswordValidator().has_errors("Passw0rd!") is None
        assert PasswordValidator().has_errors("password") is not None

    def test_pattern_override(self):
        """Test that an explicit pattern replaces the default one."""
        assert PasswordValidator().has_errors("1234", {"pattern": r"^\d{4}$"}) is None


class TestDateValidator:
    """Test the date validator."""

    def test_dates_and_strings(self):
        """Test accepted date representations."""
        validator = DateValidator()
        assert validator.has_errors(date(2020, 1, 1)) is None
        assert validator.has_errors("2020-01-01") is None
        assert validator.has_errors(1_600_000_000) is None
        assert validator.has_errors("yesterday") == "Invalid value. not a valid Date"

    def test_format_option(self):
        """Test the strptime format option."""
        assert DateValidator().has_errors("01/02/2020", {"format": "%d/%m/%Y"}) is None
        assert DateValidator().has_errors("2020-02-01", {"format": "%d/%m/%Y"}) is not None


class TestTypeValidator:
    """Test the type validator."""

    def test_matching_type(self):
        """Test a value of one of the listed types."""
        assert TypeValidator().has_errors(1, {"types": ["str", "int"]}) is None
        assert TypeValidator().has_errors(Dog(), {"types": Animal}) is None

    def test_mismatch(self):
        """Test the mismatch message."""
        assert TypeValidator().has_errors(1.5, {"types": ["str", "int"]}) == (
            "Invalid type. Expected str, int, received float"
        )


class TestListValidator:
    """Test the list validator."""

    def test_elements_of_listed_class(self):
        """Test collections whose elements all match."""
        assert ListValidator().has_errors([Dog(), Dog()], {"clazz": ["Dog"]}) is None
        assert ListValidator().has_errors({1, 2}, {"clazz": ("int",)}) is None
        assert ListValidator().has_errors([], {"clazz": ["Dog"]}) is None

    def test_foreign_element(self):
        """Test that one foreign element fails the list."""
        assert ListValidator().has_errors([Dog(), "cat"], {"clazz": [Dog, "Animal"]}) == (
            "Invalid list of Dog, Animal"
        )


class TestOptionValidator:
    """Test the enum validator."""

    def test_sequence(self):
        """Test allowed values from a list."""
        assert OptionValidator().has_errors("a", {"enum": ["a", "b"]}) is None
        assert OptionValidator().has_errors("c", {"enum": ["a", "b"]}) == "Invalid value. Expected one of: a, b"

    def test_enum_class(self):
        """Test allowed values from an Enum class."""
        assert OptionValidator().has_errors("red", {"enum": Color}) is None
        assert OptionValidator().has_errors(Color.GREEN, {"enum": Color}) is None
        assert OptionValidator().has_errors("blue", {"enum": Color}) == (
            "Invalid value. Expected one of: red, green"
        )

    def test_mapping(self):
        """Test allowed values from a mapping."""
        assert OptionValidator().has_errors(2, {"enum": {"one": 1, "two": 2}}) is None
