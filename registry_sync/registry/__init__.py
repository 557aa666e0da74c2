"""
Registry snapshot loading and command application.

Usage:
    >>> from registry_sync.registry import load_existing_occurrences, CommandApplier
    >>> existing = load_existing_occurrences(Path("lessons.html")).unwrap()
"""

from .applier import ApplyReport, CommandApplier, ExtraLessonAction, RegistryRequestError
from .html_parser import RegistryPageError, RegistryPageParser
from .interfaces import DryRunRegistryGateway, LessonFormFields, RegistryGateway
from .snapshot import filter_window, load_existing_occurrences

__all__ = [
    "ApplyReport",
    "CommandApplier",
    "ExtraLessonAction",
    "RegistryRequestError",
    "RegistryPageError",
    "RegistryPageParser",
    "DryRunRegistryGateway",
    "LessonFormFields",
    "RegistryGateway",
    "filter_window",
    "load_existing_occurrences",
]
