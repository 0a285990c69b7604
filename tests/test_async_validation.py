"""Tests for asynchronous validators and sync/async result unification."""

import asyncio
import inspect
from dataclasses import dataclass, field
from typing import List, Optional

import pytest

from dataknobs_validation import (
    AsyncValidator,
    ModelSchema,
    ValidatableModel,
    ValidationSettings,
    ValidatorDefinition,
    register_schema,
    register_validator,
    rules,
    set_settings,
    validate,
    validate_async,
)

REQUIRED = "This field is required"


class AvailableNameValidator(AsyncValidator):
    """Fails when the name is in the ``taken`` option, after a simulated lookup."""

    def __init__(self, message="Name {0} is taken"):
        super().__init__(message, "str")

    async def has_errors(self, value, options=None, accessor=None):
        await asyncio.sleep(0.01)
        if value in (options or {}).get("taken", ()):
            return self.get_message(self.message_for(options), value)
        return None


class TimeoutValidator(AsyncValidator):
    async def has_errors(self, value, options=None, accessor=None):
        await asyncio.sleep(0)
        raise asyncio.TimeoutError()


class RecordingValidator(AsyncValidator):
    started: List[str] = []

    async def has_errors(self, value, options=None, accessor=None):
        RecordingValidator.started.append(value)
        await asyncio.sleep(0.01)
        return None


@dataclass
class User(ValidatableModel):
    name: Optional[str] = None
    nickname: Optional[str] = None


@dataclass
class Group:
    title: Optional[str] = None
    users: List[User] = field(default_factory=list)
    owner: Optional[User] = None


def available(*taken):
    return rules.rule("available", taken=taken)


@pytest.fixture(autouse=True)
def async_setup():
    register_validator(
        ValidatorDefinition(AvailableNameValidator, "available"),
        ValidatorDefinition(TimeoutValidator, "timeout"),
        ValidatorDefinition(RecordingValidator, "recording"),
    )
    register_schema(
        ModelSchema(User)
        .field("name", rules.required(), available("root", "admin"))
        .field("nickname", rules.max_length(5))
    )
    register_schema(
        ModelSchema(Group)
        .field("title", rules.required())
        .list_field("users", User)
        .model("owner", User)
    )
    RecordingValidator.started = []


class TestSyncResults:
    """Test that synchronous validation never returns an awaitable."""

    def test_async_rules_skipped_when_not_allowed(self):
        """Test that async validators do not run without async allowed."""
        result = validate(User(name="root"))

        assert result is None

    def test_sync_failures_reported_without_async(self):
        """Test that sync rules still run next to skipped async rules."""
        assert validate(User(name="root", nickname="toolong")) == {
            "nickname": {"maxlength": "The maximum length is 5"}
        }

    def test_no_pending_checks_returns_report_directly(self):
        """Test that async allowed without async rules returns a plain result."""
        register_schema(ModelSchema(User).field("name", rules.required()))

        result = validate(User(), True)

        assert not inspect.isawaitable(result)
        assert result == {"name": {"required": REQUIRED}}


class TestAsyncResults:
    """Test validation with pending asynchronous checks."""

    @pytest.mark.asyncio
    async def test_returns_awaitable(self):
        """Test that pending checks make validate return an awaitable."""
        result = validate(User(name="root"), True)

        assert inspect.isawaitable(result)
        assert await result == {"name": {"available": "Name root is taken"}}

    @pytest.mark.asyncio
    async def test_raising_property_keeps_pending_checks(self):
        """Test that a field whose getter raises does not drop checks already started."""

        class Account:
            name = "root"

            @property
            def nickname(self):
                raise ValueError("nickname not loaded")

        register_schema(ModelSchema(Account).field("name", available("root")).field("nickname", rules.required()))

        result = validate(Account(), True)

        assert inspect.isawaitable(result)
        assert await result == {
            "name": {"available": "Name root is taken"},
            "nickname": {"model": "nickname not loaded"},
        }

    @pytest.mark.asyncio
    async def test_passing_async_check(self):
        """Test that a passing async check resolves to None."""
        assert await validate(User(name="ann"), True) is None

    @pytest.mark.asyncio
    async def test_sync_and_async_failures_merge(self):
        """Test that sync and async failures end up in one report."""
        errors = await validate(User(name="admin", nickname="toolong"), True)

        assert errors == {
            "name": {"available": "Name admin is taken"},
            "nickname": {"maxlength": "The maximum length is 5"},
        }

    @pytest.mark.asyncio
    async def test_async_type_mismatch(self):
        """Test the type guard of an async validator."""
        errors = await validate(User(name=42), True)

        assert errors == {"name": {"available": "Invalid type. Expected str, received int"}}

    @pytest.mark.asyncio
    async def test_raised_exception_becomes_default_message(self):
        """Test that an exception without text reports the validator's default message."""
        register_schema(ModelSchema(User).field("name", rules.rule("timeout")))

        errors = await validate(User(name="ann"), True)

        assert errors == {"name": {"timeout": "There is an Error"}}

    @pytest.mark.asyncio
    async def test_nested_and_listed_models(self):
        """Test async checks inside nested models and list elements."""
        group = Group(
            title=None,
            users=[User(name="ann"), User(name="root")],
            owner=User(name="admin"),
        )

        errors = await validate(group, True)

        assert errors == {
            "title": {"required": REQUIRED},
            "users": {"list": [None, {"name": {"available": "Name root is taken"}}]},
            "owner.name": {"available": "Name admin is taken"},
        }

    @pytest.mark.asyncio
    async def test_checks_run_concurrently(self):
        """Test that every pending check starts before any finishes."""
        register_schema(
            ModelSchema(User)
            .field("name", rules.rule("recording"))
            .field("nickname", rules.rule("recording"))
        )

        pending = validate(User(name="a", nickname="b"), True)

        assert RecordingValidator.started == []
        await pending
        assert sorted(RecordingValidator.started) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_exclusion_applies_to_async_rules(self):
        """Test that excluded fields are not checked asynchronously."""
        assert await validate_async(User(name="root"), "name") is None


class TestValidateAsync:
    """Test the always-awaitable entry point."""

    @pytest.mark.asyncio
    async def test_validate_async_with_pending_checks(self):
        """Test awaiting a result with async checks."""
        assert await validate_async(User(name="root")) == {"name": {"available": "Name root is taken"}}

    @pytest.mark.asyncio
    async def test_validate_async_without_pending_checks(self):
        """Test awaiting a result that needed no async checks."""
        assert await validate_async(User(name=None)) == {"name": {"required": REQUIRED}}

    @pytest.mark.asyncio
    async def test_model_default_from_settings(self):
        """Test that has_errors follows the async_allowed setting."""
        set_settings(ValidationSettings(async_allowed=True))

        result = User(name="root").has_errors()

        assert inspect.isawaitable(result)
        assert await result == {"name": {"available": "Name root is taken"}}

    def test_model_explicit_sync(self):
        """Test overriding the setting on a single call."""
        set_settings(ValidationSettings(async_allowed=True))

        assert User(name="root").has_errors(async_allowed=False) is None
