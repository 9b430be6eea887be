"""
Unit tests for field validators.
"""

import math
from datetime import date, datetime, timedelta, timezone

import pytest

from cuisine.models import EquipmentType, TaskPriority
from cuisine.utils.validators import FieldValidator


class TestStringValidators:
    """Test cases for string coercion."""

    def test_sanitized_and_trimmed(self):
        """Test strings are sanitized, then trimmed."""
        assert FieldValidator.to_sanitized_string("  <b>Frigo</b> 1 ") == "Frigo 1"

    @pytest.mark.parametrize("value", [None, 12, True, "", "   ", "<br/>", ["x"]])
    def test_rejects(self, value):
        """Test non-strings and blank results reject."""
        assert FieldValidator.to_sanitized_string(value) is None

    def test_optional_same_contract(self):
        """Test optional strings follow the same contract."""
        assert FieldValidator.to_optional_sanitized_string(" JD ") == "JD"
        assert FieldValidator.to_optional_sanitized_string(None) is None
        assert FieldValidator.to_optional_sanitized_string(3) is None

    def test_string_list(self):
        """Test list entries that reject are dropped along with duplicates."""
        value = ["gluten", " lait ", "", 42, None, "gluten", "<i>œuf</i>"]
        assert FieldValidator.to_sanitized_string_list(value) == ["gluten", "lait", "œuf"]

    @pytest.mark.parametrize("value", [None, "gluten", {"a": 1}, 3])
    def test_string_list_non_list_is_empty(self, value):
        """Test non-lists read as an empty list."""
        assert FieldValidator.to_sanitized_string_list(value) == []


class TestNumberValidators:
    """Test cases for numeric coercion."""

    @pytest.mark.parametrize("value,expected", [
        (3, 3),
        (-2.5, -2.5),
        (0, 0),
        ("4.5", 4.5),
        (" -18 ", -18.0),
        ("1e3", 1000.0),
    ])
    def test_accepts(self, value, expected):
        """Test numbers and numeric strings are accepted."""
        assert FieldValidator.to_number(value) == expected

    @pytest.mark.parametrize("value", [
        True, False, None, "", "  ", "abc", "1_000", "NaN", "Infinity",
        float("nan"), float("inf"), -math.inf, [1], {"v": 1},
        10 ** 400, -(10 ** 400), "1" + "0" * 400,
    ])
    def test_rejects(self, value):
        """Test booleans, non-finite values and non-numbers reject."""
        assert FieldValidator.to_number(value) is None

    @pytest.mark.parametrize("value,expected", [
        (2, 2),
        (2.4, 2),
        (2.5, 3),
        (-2.5, -2),
        (-2.6, -3),
        ("7.5", 8),
    ])
    def test_to_int_rounds_half_up(self, value, expected):
        """Test to_int rounds halves towards positive infinity."""
        assert FieldValidator.to_int(value) == expected

    def test_to_int_rejects_non_numbers(self):
        """Test to_int rejects what to_number rejects."""
        assert FieldValidator.to_int("two") is None
        assert FieldValidator.to_int(True) is None

    def test_largest_float_range_int_accepted(self):
        """Test integers just inside float range are kept exact."""
        big = 10 ** 300
        assert FieldValidator.to_number(big) == big
        assert FieldValidator.to_int(big) == big

    def test_to_int_rejects_huge_int(self):
        """Test integers beyond float range reject instead of becoming Infinity."""
        assert FieldValidator.to_int(10 ** 400) is None


class TestBooleanValidator:
    """Test cases for literal boolean coercion."""

    def test_literal_booleans(self):
        """Test literal booleans pass through."""
        assert FieldValidator.to_boolean(True) is True
        assert FieldValidator.to_boolean(False) is False

    @pytest.mark.parametrize("value", [1, 0, "true", "false", None, []])
    def test_no_truthiness(self, value):
        """Test truthy and falsy values are not booleans."""
        assert FieldValidator.to_boolean(value) is None


class TestDateValidator:
    """Test cases for date coercion."""

    def test_iso_string_with_z(self):
        """Test a Z suffix parses as UTC."""
        result = FieldValidator.to_date("2024-03-17T08:00:00.000Z")
        assert result == datetime(2024, 3, 17, 8, 0, tzinfo=timezone.utc)
        assert result.tzinfo is not None

    def test_iso_string_with_offset_normalized_to_utc(self):
        """Test offsets are normalized to UTC."""
        result = FieldValidator.to_date("2024-03-17T10:00:00+02:00")
        assert result == datetime(2024, 3, 17, 8, 0, tzinfo=timezone.utc)
        assert result.utcoffset() == timedelta(0)

    def test_naive_string_read_as_utc(self):
        """Test strings without offset are read as UTC."""
        result = FieldValidator.to_date("2024-03-17")
        assert result == datetime(2024, 3, 17, tzinfo=timezone.utc)

    def test_epoch_milliseconds(self):
        """Test plain numbers are epoch milliseconds."""
        assert FieldValidator.to_date(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert FieldValidator.to_date(1710662400000) == datetime(2024, 3, 17, 8, 0, tzinfo=timezone.utc)

    def test_datetime_and_date_objects(self):
        """Test date and datetime objects become aware UTC datetimes."""
        aware = datetime(2024, 3, 17, 8, 0, tzinfo=timezone.utc)
        assert FieldValidator.to_date(aware) == aware
        assert FieldValidator.to_date(datetime(2024, 3, 17, 8, 0)) == aware
        assert FieldValidator.to_date(date(2024, 3, 17)) == datetime(2024, 3, 17, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [
        None, "", "yesterday", "2024-13-45", True, float("nan"), 8.7e15, [2024], {},
        10 ** 400, -(10 ** 400),
    ])
    def test_rejects(self, value):
        """Test unparseable and out-of-range dates reject."""
        assert FieldValidator.to_date(value) is None


class TestEnumValidator:
    """Test cases for closed-set discriminators."""

    def test_exact_tag(self):
        """Test exact tag values map to members."""
        assert FieldValidator.to_enum("cold_room", EquipmentType) is EquipmentType.COLD_ROOM
        assert FieldValidator.to_enum(TaskPriority.LOW, TaskPriority) is TaskPriority.LOW

    @pytest.mark.parametrize("value", ["Fridge", "COLD_ROOM", "walk_in", "", None, 1])
    def test_unknown_tag(self, value):
        """Test near-miss and non-string tags reject."""
        assert FieldValidator.to_enum(value, EquipmentType) is None
