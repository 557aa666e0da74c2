"""
Validators for schedule and registry input records.

Records arrive as plain dictionaries: lessons and registry exports from
JSON, study weeks from CSV rows.
"""

from datetime import datetime
from typing import Any, Dict

from .validators import Validator, ValidationResult
from ..models.occurrence import LessonKind


VALID_PARITIES = ["odd", "even", "every"]
BOOL_STRINGS = {"true", "false", "1", "0", "yes", "no"}
REGISTRY_NAMES = {kind.registry_name for kind in LessonKind if kind.registry_name}
KIND_VALUES = {kind.value for kind in LessonKind if kind is not LessonKind.CUSTOM}


class RegularLessonValidator(Validator):
    """
    Validator for recurring lesson records.

    Examples:
        >>> validator = RegularLessonValidator()
        >>> result = validator.validate({
        ...     "id": "algebra-lab",
        ...     "day_of_week": 0,
        ...     "time_slot": 2,
        ...     "kind": "lab",
        ...     "parity": "odd"
        ... })
        >>> result.is_valid
        True
    """

    MAX_TIME_SLOT = 6

    def __init__(self, max_time_slot: int = MAX_TIME_SLOT):
        self.max_time_slot = max_time_slot

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult(is_valid=True)

        for error in self.validate_required_fields(
            data, ["id", "day_of_week", "time_slot"]
        ):
            result.add_error(error)

        if not result.is_valid:
            return result

        error = self.validate_string_length(data["id"], "id", min_length=1, max_length=200)
        if error:
            result.add_error(error)

        error = self.validate_int_range(data["day_of_week"], "day_of_week", 0, 6)
        if error:
            result.add_error(error)
        elif data["day_of_week"] > 5:
            result.add_warning(f"Lesson {data['id']} is scheduled on a Sunday")

        error = self.validate_int_range(
            data["time_slot"], "time_slot", 0, self.max_time_slot
        )
        if error:
            result.add_error(error)

        kind = data.get("kind")
        if kind is not None:
            try:
                LessonKind.parse(kind)
            except (ValueError, AttributeError):
                result.add_error(f"Invalid kind: {kind}")

        parity = data.get("parity")
        if parity is not None and parity not in VALID_PARITIES:
            result.add_error(
                f"Invalid parity: {parity} "
                f"(must be one of: {', '.join(VALID_PARITIES)})"
            )

        for name in ("course", "group", "sub_group"):
            value = data.get(name)
            if value is not None:
                error = self.validate_string_length(value, name, min_length=1)
                if error:
                    result.add_error(error)

        return result


class StudyWeekValidator(Validator):
    """Validator for study week rows (monday_date, is_odd_week)."""

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult(is_valid=True)

        for error in self.validate_required_fields(data, ["monday_date", "is_odd_week"]):
            result.add_error(error)

        if not result.is_valid:
            return result

        error = self.validate_date_format(data["monday_date"], "monday_date")
        if error:
            result.add_error(error)
        elif datetime.strptime(data["monday_date"], "%Y-%m-%d").weekday() != 0:
            result.add_error(f"monday_date {data['monday_date']} is not a Monday")

        if str(data["is_odd_week"]).strip().lower() not in BOOL_STRINGS:
            result.add_error(f"Invalid is_odd_week: {data['is_odd_week']}")

        return result


class ExistingOccurrenceValidator(Validator):
    """
    Validator for registry lesson records exported as JSON.

    An unknown kind name is accepted with a warning; it is kept as CUSTOM.
    """

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult(is_valid=True)

        for error in self.validate_required_fields(
            data, ["date_time", "view_ref", "edit_ref"]
        ):
            result.add_error(error)

        if not result.is_valid:
            return result

        error = self.validate_datetime_format(data["date_time"], "date_time")
        if error:
            result.add_error(error)

        for name in ("view_ref", "edit_ref"):
            error = self.validate_string_length(data[name], name, min_length=1)
            if error:
                result.add_error(error)

        kind = data.get("kind") or ""
        if not isinstance(kind, str):
            result.add_error(f"kind must be a string, got {type(kind).__name__}")
        elif len(kind.split()) > 1:
            result.add_error(f"Invalid kind: {kind!r}")
        elif kind.strip() and kind.strip() not in REGISTRY_NAMES | KIND_VALUES:
            result.add_warning(f"Unknown registry kind: {kind}")

        return result
