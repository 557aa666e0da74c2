"""
Abstract interfaces for registry access.

The applier talks to the registry only through RegistryGateway, so the
transport (HTTP session, browser, dry run) can be swapped and mocked.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from ..models.occurrence import ScheduledOccurrence
from ..models.result import Result


@dataclass(frozen=True)
class LessonFormFields:
    """
    Values entered into the registry's add/edit lesson form.

    Attributes:
        lesson_id: Planned lesson the record belongs to
        date_time: Start of the lesson
        kind_name: Registry kind name, or None to leave the field empty
    """

    lesson_id: str
    date_time: datetime
    kind_name: Optional[str]

    @classmethod
    def from_scheduled(cls, scheduled: ScheduledOccurrence) -> 'LessonFormFields':
        return cls(
            lesson_id=scheduled.lesson_id,
            date_time=scheduled.date_time,
            kind_name=scheduled.kind.registry_name,
        )


class RegistryGateway(ABC):
    """
    Abstract interface for registry write operations.

    Implementations return Result<None> for every call; transport
    failures are reported as failures, not raised.
    """

    @abstractmethod
    def add_lesson(self, fields: LessonFormFields) -> Result[None]:
        """
        Add a lesson record.

        Args:
            fields: Form values of the new record

        Returns:
            Result with None value on success, error information on failure
        """
        pass

    @abstractmethod
    def edit_lesson(self, edit_ref: str, fields: LessonFormFields) -> Result[None]:
        """
        Rewrite an existing lesson record.

        Args:
            edit_ref: Edit link of the record
            fields: New form values

        Returns:
            Result with None value on success, error information on failure
        """
        pass

    @abstractmethod
    def delete_lesson(self, edit_ref: str) -> Result[None]:
        """
        Delete an existing lesson record.

        Args:
            edit_ref: Edit link of the record

        Returns:
            Result with None value on success, error information on failure
        """
        pass


class DryRunRegistryGateway(RegistryGateway):
    """
    Gateway that records calls instead of sending them.

    Examples:
        >>> gateway = DryRunRegistryGateway()
        >>> gateway.delete_lesson("lesson/edit/12").is_success
        True
        >>> gateway.calls
        [('delete', 'lesson/edit/12', None)]
    """

    def __init__(self):
        self.calls: List[Tuple[str, Optional[str], Optional[LessonFormFields]]] = []

    def add_lesson(self, fields: LessonFormFields) -> Result[None]:
        self.calls.append(("add", None, fields))
        return Result.success(None, "dry run")

    def edit_lesson(self, edit_ref: str, fields: LessonFormFields) -> Result[None]:
        self.calls.append(("edit", edit_ref, fields))
        return Result.success(None, "dry run")

    def delete_lesson(self, edit_ref: str) -> Result[None]:
        self.calls.append(("delete", edit_ref, None))
        return Result.success(None, "dry run")
