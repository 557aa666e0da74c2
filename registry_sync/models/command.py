"""
Registry synchronization commands.

A SyncCommand is one action needed to bring the registry in line with the
computed schedule. Each command type carries only the payloads it needs:

- CREATE: the scheduled occurrence to add
- UPDATE: the scheduled occurrence and the existing record to rewrite
- DELETE: the existing record to remove
"""

from enum import Enum
from typing import Any, Dict, Optional

from .occurrence import ExistingOccurrence, ScheduledOccurrence


class CommandType(Enum):
    """Kinds of synchronization commands."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    @property
    def has_scheduled(self) -> bool:
        return self in (CommandType.CREATE, CommandType.UPDATE)

    @property
    def has_existing(self) -> bool:
        return self in (CommandType.UPDATE, CommandType.DELETE)


class CommandPayloadError(Exception):
    """Raised when a command payload is read on a command type that lacks it."""
    pass


class SyncCommand:
    """
    Tagged union of CREATE / UPDATE / DELETE.

    Use the factory classmethods to build commands. Reading `scheduled` on
    a DELETE or `existing` on a CREATE raises CommandPayloadError.

    Examples:
        >>> command = SyncCommand.create(scheduled)
        >>> command.type
        <CommandType.CREATE: 'create'>
        >>> command.existing
        Traceback (most recent call last):
        ...
        CommandPayloadError: CREATE command has no existing occurrence
    """

    __slots__ = ("_type", "_scheduled", "_existing")

    def __init__(
        self,
        command_type: CommandType,
        scheduled: Optional[ScheduledOccurrence] = None,
        existing: Optional[ExistingOccurrence] = None
    ):
        if command_type.has_scheduled != (scheduled is not None):
            raise CommandPayloadError(
                f"{command_type.name} command requires "
                f"{'a' if command_type.has_scheduled else 'no'} scheduled occurrence"
            )
        if command_type.has_existing != (existing is not None):
            raise CommandPayloadError(
                f"{command_type.name} command requires "
                f"{'an' if command_type.has_existing else 'no'} existing occurrence"
            )

        self._type = command_type
        self._scheduled = scheduled
        self._existing = existing

    @classmethod
    def create(cls, scheduled: ScheduledOccurrence) -> 'SyncCommand':
        return cls(CommandType.CREATE, scheduled=scheduled)

    @classmethod
    def update(
        cls,
        scheduled: ScheduledOccurrence,
        existing: ExistingOccurrence
    ) -> 'SyncCommand':
        return cls(CommandType.UPDATE, scheduled=scheduled, existing=existing)

    @classmethod
    def delete(cls, existing: ExistingOccurrence) -> 'SyncCommand':
        return cls(CommandType.DELETE, existing=existing)

    @property
    def type(self) -> CommandType:
        return self._type

    @property
    def has_scheduled(self) -> bool:
        return self._type.has_scheduled

    @property
    def has_existing(self) -> bool:
        return self._type.has_existing

    @property
    def scheduled(self) -> ScheduledOccurrence:
        """
        Scheduled occurrence of a CREATE or UPDATE.

        Raises:
            CommandPayloadError: If read on a DELETE
        """
        if not self.has_scheduled:
            raise CommandPayloadError(
                f"{self._type.name} command has no scheduled occurrence"
            )
        return self._scheduled

    @property
    def existing(self) -> ExistingOccurrence:
        """
        Existing registry record of an UPDATE or DELETE.

        Raises:
            CommandPayloadError: If read on a CREATE
        """
        if not self.has_existing:
            raise CommandPayloadError(
                f"{self._type.name} command has no existing occurrence"
            )
        return self._existing

    def to_dict(self) -> Dict[str, Any]:
        """
        Flatten the command for reports.

        Returns:
            Dictionary with the command type and the payloads it carries
        """
        row: Dict[str, Any] = {"type": self._type.value}
        if self.has_scheduled:
            row["scheduled"] = self._scheduled.to_dict()
        if self.has_existing:
            row["existing"] = self._existing.to_dict()
        return row

    def __eq__(self, other) -> bool:
        if not isinstance(other, SyncCommand):
            return NotImplemented
        return (
            self._type == other._type
            and self._scheduled == other._scheduled
            and self._existing == other._existing
        )

    def __hash__(self) -> int:
        return hash((self._type, self._scheduled, self._existing))

    def __repr__(self) -> str:
        parts = [self._type.name]
        if self.has_scheduled:
            parts.append(f"scheduled={self._scheduled!r}")
        if self.has_existing:
            parts.append(f"existing={self._existing!r}")
        return f"SyncCommand({', '.join(parts)})"
