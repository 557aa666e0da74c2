"""
Lesson time slots.

A day is divided into numbered slots; slot 0 is the first lesson of the day.
"""

from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Optional, Sequence, Tuple


DEFAULT_SLOT_STARTS: Tuple[time, ...] = (
    time(8, 0),
    time(9, 45),
    time(11, 30),
    time(13, 15),
    time(15, 0),
    time(16, 45),
    time(18, 30),
)

DEFAULT_LESSON_DURATION = timedelta(minutes=90)


@dataclass(frozen=True)
class TimeInterval:
    """Start and end of one lesson slot."""

    start: time
    end: time


@dataclass(frozen=True)
class LessonTimeConfig:
    """
    Start times of the lesson slots and the length of a lesson.

    Examples:
        >>> config = LessonTimeConfig()
        >>> config.slot_start(1)
        datetime.time(9, 45)
        >>> config.slot_interval(0).end
        datetime.time(9, 30)
    """

    slot_starts: Sequence[time] = field(default=DEFAULT_SLOT_STARTS)
    lesson_duration: timedelta = DEFAULT_LESSON_DURATION

    def __post_init__(self):
        if self.lesson_duration <= timedelta(0):
            raise ValueError("Lesson duration must be positive")
        if list(self.slot_starts) != sorted(self.slot_starts):
            raise ValueError("Slot start times must be in ascending order")

    @classmethod
    def with_duration_minutes(cls, minutes: int) -> 'LessonTimeConfig':
        return cls(lesson_duration=timedelta(minutes=minutes))

    @property
    def slot_count(self) -> int:
        return len(self.slot_starts)

    def slot_start(self, slot: int) -> time:
        """
        Get the start time of a slot.

        Raises:
            IndexError: If the slot does not exist
        """
        if not 0 <= slot < len(self.slot_starts):
            raise IndexError(
                f"Time slot {slot} out of range (0..{len(self.slot_starts) - 1})"
            )
        return self.slot_starts[slot]

    def slot_interval(self, slot: int) -> TimeInterval:
        start = self.slot_start(slot)
        end = (datetime.combine(datetime.min, start) + self.lesson_duration).time()
        return TimeInterval(start=start, end=end)

    def find_slot_by_start(self, start: time) -> Optional[int]:
        """Find the slot that starts at the given time, or None."""
        for index, slot_start in enumerate(self.slot_starts):
            if slot_start == start:
                return index
        return None
