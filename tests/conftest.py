"""Pytest configuration for dataknobs_validation tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dataknobs_validation.schema import get_schema_registry  # noqa: E402
from dataknobs_validation.settings import ValidationSettings, set_settings  # noqa: E402
from dataknobs_validation.validators.registry import Validation  # noqa: E402


@pytest.fixture(autouse=True)
def clean_state():
    """Give every test the default validators, no schemas and default settings."""
    Validation.reset()
    get_schema_registry().clear()
    set_settings(ValidationSettings())
    yield
    Validation.reset()
    get_schema_registry().clear()
    set_settings(None)
