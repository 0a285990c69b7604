"""Test that the package imports and exposes its public API."""


def test_import():
    """Test the package imports with a version."""
    import dataknobs_validation

    assert dataknobs_validation.__version__ == "0.1.0"


def test_public_api():
    """Test that every name in __all__ is exported."""
    import dataknobs_validation

    for name in dataknobs_validation.__all__:
        assert hasattr(dataknobs_validation, name), name
