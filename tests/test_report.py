"""Tests for the error report."""

import pytest

from dataknobs_validation import ErrorReport


class TestErrorReport:
    """Test the report mapping."""

    def test_mapping_access(self):
        """Test reading fields and messages."""
        report = ErrorReport({"name": {"required": "This field is required"}})

        assert report["name"]["required"] == "This field is required"
        assert list(report) == ["name"]
        assert len(report) == 1
        assert report.fields() == ["name"]

    def test_empty_entries_are_dropped(self):
        """Test that fields without messages are not kept."""
        report = ErrorReport({"a": {}, "b": {"required": None}, "c": {"list": [None, None]}, "d": {"min": "m"}})

        assert report.fields() == ["d"]
        assert not ErrorReport({})
        assert not ErrorReport()

    def test_entries_are_read_only(self):
        """Test that the report cannot be changed."""
        report = ErrorReport({"name": {"required": "x"}})

        with pytest.raises(TypeError):
            report["name"]["required"] = "y"
        with pytest.raises(TypeError):
            report["other"] = {}

    def test_list_slots(self):
        """Test positional slots with nested reports and messages."""
        report = ErrorReport(
            {"items": {"list": [None, {"name": {"required": "This field is required"}}, "Value must be an instance of Item"]}}
        )

        slots = report["items"]["list"]
        assert slots[0] is None
        assert isinstance(slots[1], ErrorReport)
        assert slots[2] == "Value must be an instance of Item"

    def test_equality(self):
        """Test comparing with reports and dictionaries."""
        data = {"items": {"list": [None, {"name": {"required": "r"}}]}, "a": {"min": "m"}}

        assert ErrorReport(data) == data
        assert ErrorReport(data) == ErrorReport(data)
        assert ErrorReport(data) != {"a": {"min": "m"}}
        assert ErrorReport(data) != "text"

    def test_round_trip(self):
        """Test converting to plain dictionaries and back."""
        data = {"items": {"list": [None, {"name": {"required": "r"}}]}}
        report = ErrorReport(data)

        assert report.to_dict() == data
        assert ErrorReport.from_dict(report.to_dict()) == report

    def test_messages(self):
        """Test flattening the messages of one field."""
        report = ErrorReport(
            {
                "name": {"required": "r", "minlength": "m"},
                "items": {"list": [{"name": {"required": "nested"}}, "slot"]},
            }
        )

        assert report.messages("name") == ["r", "m"]
        assert report.messages("items") == ["nested", "slot"]
        assert report.messages("missing") == []

    def test_str(self):
        """Test the line per message rendering."""
        report = ErrorReport(
            {
                "name": {"required": "This field is required"},
                "address.city": {"required": "This field is required"},
                "items": {"list": [None, {"name": {"required": "This field is required"}}]},
            }
        )

        assert str(report) == (
            "name - This field is required\n"
            "address.city - This field is required\n"
            "items.1.name - This field is required"
        )

    def test_repr(self):
        """Test the repr shows the plain data."""
        assert repr(ErrorReport({"a": {"min": "m"}})) == "ErrorReport({'a': {'min': 'm'}})"

    def test_unhashable(self):
        """Test that reports cannot be hashed."""
        with pytest.raises(TypeError):
            hash(ErrorReport())
