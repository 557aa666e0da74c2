"""
Loading the registry's current lesson records.

A snapshot is either a saved lessons page (.html/.htm) or a JSON export:

    {"lessons": [{"date_time": "2024-09-02T08:00", "kind": "laborator",
                  "view_ref": "...", "edit_ref": "..."}]}
"""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, List, Optional, TypeVar

from .html_parser import RegistryPageError, RegistryPageParser, resolve_link
from ..models.occurrence import ExistingOccurrence, LessonKind
from ..models.result import Result
from ..utils.file_utils import load_json
from ..validation.occurrence_validator import ExistingOccurrenceValidator


logger = logging.getLogger(__name__)


HTML_SUFFIXES = (".html", ".htm")

T = TypeVar('T')


def _load_html(filepath: Path, base_url: Optional[str]) -> Result[List[ExistingOccurrence]]:
    try:
        html = filepath.read_text(encoding="utf-8")
    except OSError as e:
        return Result.failure(f"Could not read registry page {filepath}: {e}", e)

    try:
        lessons = RegistryPageParser(html, base_url=base_url).parse_lessons()
    except RegistryPageError as e:
        return Result.failure(f"{filepath}: {e}", e)

    return Result.success(lessons)


def _load_export(filepath: Path, base_url: Optional[str]) -> Result[List[ExistingOccurrence]]:
    data = load_json(filepath)
    if data is None:
        return Result.failure(f"Could not read registry export: {filepath}")

    records = data.get("lessons") if isinstance(data, dict) else None
    if not isinstance(records, list):
        return Result.failure(f"{filepath}: expected an object with a 'lessons' list")

    validator = ExistingOccurrenceValidator()
    lessons = []
    problems = []

    for index, record in enumerate(records):
        if not isinstance(record, dict):
            problems.append(f"lessons[{index}]: expected an object")
            continue

        validation = validator.validate(record)
        if not validation.is_valid:
            problems.append(f"lessons[{index}]: {'; '.join(validation.errors)}")
            continue

        try:
            kind = LessonKind.from_name(record.get("kind"))
        except ValueError as e:
            problems.append(f"lessons[{index}]: {e}")
            continue

        lessons.append(ExistingOccurrence(
            date_time=datetime.fromisoformat(record["date_time"]),
            kind=kind,
            view_ref=resolve_link(record["view_ref"], base_url),
            edit_ref=resolve_link(record["edit_ref"], base_url),
        ))

    if problems:
        return Result.failure(
            f"{len(problems)} invalid registry record(s) in {filepath}:\n  "
            + "\n  ".join(problems)
        )

    return Result.success(lessons)


def load_existing_occurrences(
    filepath: Path,
    base_url: Optional[str] = None
) -> Result[List[ExistingOccurrence]]:
    """
    Load the lesson records currently in the registry.

    Args:
        filepath: Saved lessons page (.html/.htm) or JSON export (.json)
        base_url: Base URL for resolving relative view/edit links

    Returns:
        Result containing the existing occurrences

    Examples:
        >>> result = load_existing_occurrences(Path("registry/lessons.html"))
        >>> if result.is_success:
        ...     print(f"{len(result.value)} records in registry")
    """
    filepath = Path(filepath)
    if not filepath.exists():
        return Result.failure(f"Registry snapshot not found: {filepath}")

    suffix = filepath.suffix.lower()
    if suffix in HTML_SUFFIXES:
        result = _load_html(filepath, base_url)
    elif suffix == ".json":
        result = _load_export(filepath, base_url)
    else:
        return Result.failure(
            f"Unsupported registry snapshot type: {suffix or '(none)'}"
        )

    if result.is_success:
        logger.info(f"Loaded {len(result.value)} registry records from {filepath}")
    return result


def filter_window(
    items: Iterable[T],
    start: Optional[date] = None,
    end: Optional[date] = None
) -> List[T]:
    """
    Keep occurrences whose date lies in the inclusive [start, end] window.

    Works for both scheduled and existing occurrences.
    """
    return [
        item for item in items
        if (start is None or item.date >= start)
        and (end is None or item.date <= end)
    ]
