"""
Schedule input loaders.

- load_regular_lessons(): JSON file {"lessons": [...]}
- load_study_weeks(): CSV file with monday_date,is_odd_week columns

Both validate every record first and return a failed Result listing the
offending records instead of raising.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from .expansion import Parity, RegularLesson, StudyWeek
from ..models.occurrence import LessonKind
from ..models.result import Result
from ..utils.file_utils import load_csv, load_json
from ..validation.occurrence_validator import (
    RegularLessonValidator,
    StudyWeekValidator,
)


logger = logging.getLogger(__name__)


def _parse_bool(value: Any) -> bool:
    return str(value).strip().lower() in ("true", "1", "yes")


def _lesson_from_record(record: Dict[str, Any]) -> RegularLesson:
    return RegularLesson(
        lesson_id=record["id"],
        day_of_week=record["day_of_week"],
        time_slot=record["time_slot"],
        kind=LessonKind.parse(record.get("kind") or ""),
        parity=Parity(record.get("parity") or Parity.EVERY_WEEK.value),
        course=record.get("course"),
        group=record.get("group"),
        sub_group=record.get("sub_group"),
    )


def load_regular_lessons(filepath: Path) -> Result[List[RegularLesson]]:
    """
    Load recurring lessons from JSON.

    Args:
        filepath: JSON file with a top-level "lessons" list

    Returns:
        Result containing the lessons, or a failure describing every
        invalid record

    Examples:
        >>> result = load_regular_lessons(Path("schedule/lessons.json"))
        >>> lessons = result.unwrap_or([])
    """
    data = load_json(filepath)
    if data is None:
        return Result.failure(f"Could not read lessons file: {filepath}")

    records = data.get("lessons") if isinstance(data, dict) else None
    if not isinstance(records, list):
        return Result.failure(f"{filepath}: expected an object with a 'lessons' list")

    validator = RegularLessonValidator()
    lessons = []
    problems = []

    for index, record in enumerate(records):
        if not isinstance(record, dict):
            problems.append(f"lessons[{index}]: expected an object")
            continue

        validation = validator.validate(record)
        for warning in validation.warnings:
            logger.warning(f"lessons[{index}]: {warning}")
        if not validation.is_valid:
            problems.append(f"lessons[{index}]: {'; '.join(validation.errors)}")
            continue

        lessons.append(_lesson_from_record(record))

    if problems:
        return Result.failure(
            f"{len(problems)} invalid lesson record(s) in {filepath}:\n  "
            + "\n  ".join(problems)
        )

    logger.info(f"Loaded {len(lessons)} regular lessons from {filepath}")
    return Result.success(lessons)


def load_study_weeks(filepath: Path) -> Result[List[StudyWeek]]:
    """
    Load study weeks from CSV.

    Args:
        filepath: CSV file with monday_date (YYYY-MM-DD) and is_odd_week

    Returns:
        Result containing the weeks ordered by date
    """
    df = load_csv(filepath, dtype={"monday_date": str, "is_odd_week": str})
    if df is None:
        return Result.failure(f"Could not read study weeks file: {filepath}")

    missing = {"monday_date", "is_odd_week"} - set(df.columns)
    if missing:
        return Result.failure(
            f"{filepath}: missing column(s) {', '.join(sorted(missing))}"
        )

    validator = StudyWeekValidator()
    weeks = []
    problems = []

    records = df.where(df.notna(), None).to_dict(orient="records")
    for index, record in enumerate(records):
        validation = validator.validate(record)
        if not validation.is_valid:
            problems.append(f"row {index + 1}: {'; '.join(validation.errors)}")
            continue

        weeks.append(StudyWeek(
            monday_date=datetime.strptime(record["monday_date"], "%Y-%m-%d").date(),
            is_odd_week=_parse_bool(record["is_odd_week"]),
        ))

    if problems:
        return Result.failure(
            f"{len(problems)} invalid study week row(s) in {filepath}:\n  "
            + "\n  ".join(problems)
        )

    weeks.sort(key=lambda w: w.monday_date)
    logger.info(f"Loaded {len(weeks)} study weeks from {filepath}")
    return Result.success(weeks)
