"""
Unit tests for validation layer.
"""

import pytest

from registry_sync.validation.validators import ValidationResult
from registry_sync.validation.occurrence_validator import (
    ExistingOccurrenceValidator,
    RegularLessonValidator,
    StudyWeekValidator,
)


class TestValidationResult:
    """Test cases for ValidationResult."""

    def test_valid_result(self):
        result = ValidationResult(is_valid=True)

        assert result.is_valid
        assert not result.has_errors
        assert not result.has_warnings
        assert result.get_summary() == "Validation passed"

    def test_add_error(self):
        result = ValidationResult(is_valid=True)
        result.add_error("First error").add_error("Second error")

        assert not result.is_valid
        assert len(result.errors) == 2

    def test_add_warning(self):
        result = ValidationResult(is_valid=True)
        result.add_warning("Warning message")

        assert result.is_valid  # Warnings don't affect validity
        assert result.has_warnings

    def test_get_summary_with_errors(self):
        result = ValidationResult(is_valid=True)
        result.add_error("Error 1")
        result.add_warning("Warning 1")

        summary = result.get_summary()

        assert "Errors (1)" in summary
        assert "Warnings (1)" in summary
        assert "Error 1" in summary


class TestRegularLessonValidator:
    """Test cases for RegularLessonValidator."""

    @pytest.fixture
    def validator(self):
        return RegularLessonValidator()

    @pytest.fixture
    def valid_lesson(self):
        return {
            "id": "algebra-lab",
            "day_of_week": 0,
            "time_slot": 2,
            "kind": "lab",
            "parity": "odd",
            "course": "Algebra",
            "group": "IA2201",
        }

    def test_valid_lesson(self, validator, valid_lesson):
        result = validator.validate(valid_lesson)

        assert result.is_valid, result.get_summary()

    def test_optional_fields_may_be_missing(self, validator):
        result = validator.validate({"id": "x", "day_of_week": 4, "time_slot": 0})

        assert result.is_valid

    def test_missing_required_field(self, validator, valid_lesson):
        del valid_lesson["time_slot"]

        result = validator.validate(valid_lesson)

        assert not result.is_valid
        assert "Missing required field: time_slot" in result.errors

    @pytest.mark.parametrize("field, value", [
        ("day_of_week", 7),
        ("day_of_week", "monday"),
        ("time_slot", 7),
        ("time_slot", -1),
        ("time_slot", True),
        ("kind", "workshop"),
        ("parity", "weekly"),
        ("id", ""),
        ("group", ""),
    ])
    def test_invalid_field(self, validator, valid_lesson, field, value):
        valid_lesson[field] = value

        result = validator.validate(valid_lesson)

        assert not result.is_valid

    def test_sunday_is_warning(self, validator, valid_lesson):
        valid_lesson["day_of_week"] = 6

        result = validator.validate(valid_lesson)

        assert result.is_valid
        assert result.has_warnings


class TestStudyWeekValidator:
    """Test cases for StudyWeekValidator."""

    @pytest.fixture
    def validator(self):
        return StudyWeekValidator()

    @pytest.mark.parametrize("flag", [True, False, "true", "False", "1", "0"])
    def test_valid_week(self, validator, flag):
        result = validator.validate({"monday_date": "2024-09-02", "is_odd_week": flag})

        assert result.is_valid

    def test_date_must_be_monday(self, validator):
        result = validator.validate({"monday_date": "2024-09-03", "is_odd_week": True})

        assert not result.is_valid
        assert "not a Monday" in result.errors[0]

    def test_invalid_date(self, validator):
        result = validator.validate({"monday_date": "2024-02-30", "is_odd_week": True})

        assert not result.is_valid

    def test_invalid_flag(self, validator):
        result = validator.validate({"monday_date": "2024-09-02", "is_odd_week": "maybe"})

        assert not result.is_valid


class TestExistingOccurrenceValidator:
    """Test cases for ExistingOccurrenceValidator."""

    @pytest.fixture
    def validator(self):
        return ExistingOccurrenceValidator()

    @pytest.fixture
    def valid_record(self):
        return {
            "date_time": "2024-09-02T08:00",
            "kind": "laborator",
            "view_ref": "lesson/view/1",
            "edit_ref": "lesson/edit/1",
        }

    def test_valid_record(self, validator, valid_record):
        assert validator.validate(valid_record).is_valid

    def test_empty_kind_allowed(self, validator, valid_record):
        valid_record["kind"] = ""

        assert validator.validate(valid_record).is_valid

    def test_unknown_kind_is_warning(self, validator, valid_record):
        valid_record["kind"] = "practica"

        result = validator.validate(valid_record)

        assert result.is_valid
        assert result.has_warnings

    @pytest.mark.parametrize("kind", ["lab\twork", "curs\nseminar", "curs laborator"])
    def test_kind_with_internal_whitespace_rejected(self, validator, valid_record, kind):
        valid_record["kind"] = kind

        result = validator.validate(valid_record)

        assert not result.is_valid
        assert any("Invalid kind" in error for error in result.errors)

    def test_kind_value_accepted_without_warning(self, validator, valid_record):
        valid_record["kind"] = "lab"

        result = validator.validate(valid_record)

        assert result.is_valid
        assert not result.has_warnings

    def test_bad_date_time(self, validator, valid_record):
        valid_record["date_time"] = "02.09.2024 08.00"

        assert not validator.validate(valid_record).is_valid

    def test_empty_edit_ref(self, validator, valid_record):
        valid_record["edit_ref"] = ""

        result = validator.validate(valid_record)

        assert not result.is_valid
        assert any("edit_ref" in error for error in result.errors)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
