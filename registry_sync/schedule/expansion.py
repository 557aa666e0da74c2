"""
Schedule expansion.

Turns recurring lesson rules into the dated ScheduledOccurrence list that the
reconciliation consumes:

1. select_lessons() keeps the lessons shown on one registry course/group page
2. a ScheduledDateProvider lists the dates a weekday/parity pair falls on
3. LessonTimeConfig maps the time slot to a start time
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Sequence

from .time_config import LessonTimeConfig
from ..models.occurrence import LessonKind, ScheduledOccurrence


logger = logging.getLogger(__name__)


class Parity(Enum):
    """Which study weeks a lesson takes place in."""

    ODD_WEEK = "odd"
    EVEN_WEEK = "even"
    EVERY_WEEK = "every"

    def matches(self, is_odd_week: bool) -> bool:
        if self is Parity.EVERY_WEEK:
            return True
        return (self is Parity.ODD_WEEK) == is_odd_week


@dataclass(frozen=True)
class RegularLesson:
    """
    A lesson that repeats weekly.

    Attributes:
        lesson_id: Identifier carried into every occurrence
        day_of_week: 0 = Monday ... 6 = Sunday
        time_slot: Index into LessonTimeConfig.slot_starts
        kind: Lesson kind
        parity: Weeks the lesson takes place in
        course: Course name, used to select the registry page
        group: Group name
        sub_group: Sub-group name; None means the whole group
    """

    lesson_id: str
    day_of_week: int
    time_slot: int
    kind: LessonKind = LessonKind.UNSPECIFIED
    parity: Parity = Parity.EVERY_WEEK
    course: Optional[str] = None
    group: Optional[str] = None
    sub_group: Optional[str] = None

    def __post_init__(self):
        if not 0 <= self.day_of_week <= 6:
            raise ValueError(f"day_of_week must be 0..6, got {self.day_of_week}")
        if self.time_slot < 0:
            raise ValueError(f"time_slot must not be negative, got {self.time_slot}")


@dataclass(frozen=True)
class StudyWeek:
    """A teaching week, identified by its Monday."""

    monday_date: date
    is_odd_week: bool

    def __post_init__(self):
        if self.monday_date.weekday() != 0:
            raise ValueError(f"{self.monday_date} is not a Monday")

    def day(self, day_of_week: int) -> date:
        return self.monday_date + timedelta(days=day_of_week % 7)


class ScheduledDateProvider(ABC):
    """Source of the calendar dates a weekly lesson falls on."""

    @abstractmethod
    def dates(self, day_of_week: int, parity: Parity) -> Iterator[date]:
        """
        List the dates of a weekday in the weeks matching a parity.

        Args:
            day_of_week: 0 = Monday ... 6 = Sunday
            parity: Which weeks to include

        Returns:
            Dates in ascending order
        """
        pass


class StudyWeekDateProvider(ScheduledDateProvider):
    """
    Dates taken from an explicit list of study weeks.

    Examples:
        >>> provider = StudyWeekDateProvider([
        ...     StudyWeek(date(2024, 9, 2), is_odd_week=True),
        ...     StudyWeek(date(2024, 9, 9), is_odd_week=False),
        ... ])
        >>> list(provider.dates(2, Parity.ODD_WEEK))
        [datetime.date(2024, 9, 4)]
    """

    def __init__(self, weeks: Iterable[StudyWeek]):
        self._weeks = sorted(weeks, key=lambda w: w.monday_date)

    @property
    def weeks(self) -> List[StudyWeek]:
        return list(self._weeks)

    def dates(self, day_of_week: int, parity: Parity) -> Iterator[date]:
        for week in self._weeks:
            if parity.matches(week.is_odd_week):
                yield week.day(day_of_week)


def select_lessons(
    lessons: Iterable[RegularLesson],
    course: Optional[str] = None,
    group: Optional[str] = None,
    sub_group: Optional[str] = None
) -> List[RegularLesson]:
    """
    Keep the lessons that belong to one registry page.

    A filter left as None accepts anything. Lessons without a sub-group are
    attended by the whole group, so they are kept for every sub-group.

    Args:
        lessons: All regular lessons
        course: Course name to keep
        group: Group name to keep
        sub_group: Sub-group to keep

    Returns:
        Matching lessons in input order
    """
    selected = []
    for lesson in lessons:
        if course is not None and lesson.course != course:
            continue
        if group is not None and lesson.group != group:
            continue
        if (
            sub_group is not None
            and lesson.sub_group is not None
            and lesson.sub_group != sub_group
        ):
            continue
        selected.append(lesson)
    return selected


def expand_scheduled_occurrences(
    lessons: Sequence[RegularLesson],
    date_provider: ScheduledDateProvider,
    time_config: Optional[LessonTimeConfig] = None,
    start: Optional[date] = None,
    end: Optional[date] = None
) -> List[ScheduledOccurrence]:
    """
    Produce one ScheduledOccurrence per lesson per date.

    Args:
        lessons: Regular lessons to expand
        date_provider: Dates for each weekday/parity pair
        time_config: Slot start times (default slots if None)
        start: First date to include (inclusive)
        end: Last date to include (inclusive)

    Returns:
        Occurrences ordered by date_time; lessons starting at the same time
        keep their input order

    Raises:
        IndexError: If a lesson refers to an unknown time slot
    """
    time_config = time_config or LessonTimeConfig()
    occurrences: List[ScheduledOccurrence] = []

    for lesson in lessons:
        start_time = time_config.slot_start(lesson.time_slot)
        for day in date_provider.dates(lesson.day_of_week, lesson.parity):
            if start is not None and day < start:
                continue
            if end is not None and day > end:
                continue
            occurrences.append(ScheduledOccurrence(
                lesson_id=lesson.lesson_id,
                date_time=datetime.combine(day, start_time),
                kind=lesson.kind,
            ))

    occurrences.sort(key=lambda o: o.date_time)
    logger.debug(
        f"Expanded {len(lessons)} lessons into {len(occurrences)} occurrences"
    )
    return occurrences
