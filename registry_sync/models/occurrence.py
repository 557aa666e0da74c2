"""
Lesson occurrence models.

This module provides the two sides of a registry reconciliation run:
- ScheduledOccurrence: a dated instance of a lesson from the computed schedule
- ExistingOccurrence: a lesson record already present in the online registry
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)


class LessonKind(Enum):
    """
    Lesson kind tag.

    UNSPECIFIED is the wildcard: the side carrying it does not assert a kind.
    CUSTOM marks a registry name that is not one of the known kinds.
    """

    LAB = "lab"
    SEMINAR = "seminar"
    CURS = "curs"
    UNSPECIFIED = "unspecified"
    CUSTOM = "custom"

    @property
    def registry_name(self) -> Optional[str]:
        """
        Name the registry uses for this kind in its lesson forms.

        Returns:
            Registry name, or None for kinds the registry has no option for
        """
        return _REGISTRY_NAMES.get(self)

    @property
    def is_specified(self) -> bool:
        """Check if the kind asserts something (not the wildcard)."""
        return self is not LessonKind.UNSPECIFIED

    @classmethod
    def from_registry_name(cls, text: Optional[str]) -> 'LessonKind':
        """
        Parse a lesson kind as displayed by the registry.

        Args:
            text: Kind text scraped from the registry (may be empty)

        Returns:
            Matching LessonKind; UNSPECIFIED for empty text, CUSTOM for
            unknown names

        Examples:
            >>> LessonKind.from_registry_name("laborator")
            <LessonKind.LAB: 'lab'>
            >>> LessonKind.from_registry_name("  ")
            <LessonKind.UNSPECIFIED: 'unspecified'>
        """
        name = (text or "").strip()
        if not name:
            return cls.UNSPECIFIED

        if len(name.split()) > 1:
            raise ValueError(f"Lesson kind not parsed fully: {name!r}")

        for kind, registry_name in _REGISTRY_NAMES.items():
            if registry_name == name:
                return kind

        logger.warning(f"Custom lesson kind found in registry: {name}")
        return cls.CUSTOM

    @classmethod
    def from_name(cls, text: Optional[str]) -> 'LessonKind':
        """
        Parse a kind given either as its enum value or as its registry name.

        Unknown names become CUSTOM, as in from_registry_name().

        Examples:
            >>> LessonKind.from_name("lab")
            <LessonKind.LAB: 'lab'>
            >>> LessonKind.from_name("laborator")
            <LessonKind.LAB: 'lab'>

        Raises:
            ValueError: If the text contains internal whitespace
        """
        name = (text or "").strip()
        for kind in cls:
            if kind is not cls.CUSTOM and kind.value == name.lower():
                return kind
        return cls.from_registry_name(name)

    @classmethod
    def parse(cls, value: str) -> 'LessonKind':
        """
        Parse a kind from either its enum value or its registry name.

        Args:
            value: "lab", "curs", "laborator", "" and so on

        Returns:
            LessonKind

        Raises:
            ValueError: If the value is neither an enum value nor a registry name
        """
        kind = cls.from_name((value or "").lower())
        if kind is cls.CUSTOM:
            raise ValueError(f"Unknown lesson kind: {value}")
        return kind


_REGISTRY_NAMES = {
    LessonKind.LAB: "laborator",
    LessonKind.CURS: "curs",
    LessonKind.SEMINAR: "seminar",
}


@dataclass(frozen=True)
class ScheduledOccurrence:
    """
    A dated instance of a planned lesson (the "left" side).

    Attributes:
        lesson_id: Opaque identifier of the planned lesson
        date_time: Start of the occurrence
        kind: Lesson kind (may be UNSPECIFIED)
    """

    lesson_id: str
    date_time: datetime
    kind: LessonKind = LessonKind.UNSPECIFIED

    @property
    def date(self) -> date:
        """Calendar date of the occurrence."""
        return self.date_time.date()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lesson_id": self.lesson_id,
            "date_time": self.date_time.isoformat(),
            "kind": self.kind.value,
        }


@dataclass(frozen=True)
class ExistingOccurrence:
    """
    A lesson record already present in the registry (the "right" side).

    Attributes:
        date_time: Start of the recorded lesson
        kind: Lesson kind (may be UNSPECIFIED)
        view_ref: Registry link for viewing the record
        edit_ref: Registry link for editing or deleting the record
    """

    date_time: datetime
    kind: LessonKind
    view_ref: str
    edit_ref: str

    @property
    def date(self) -> date:
        """Calendar date of the occurrence."""
        return self.date_time.date()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date_time": self.date_time.isoformat(),
            "kind": self.kind.value,
            "view_ref": self.view_ref,
            "edit_ref": self.edit_ref,
        }
