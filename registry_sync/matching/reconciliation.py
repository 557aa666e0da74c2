"""
Registry reconciliation.

Compares the scheduled occurrences of a calendar window with the lesson
records already present in the registry and produces the commands that
bring the registry in line with the schedule.

Per calendar day:
1. Pair occurrences greedily on one PairingEngine, strongest evidence first:
   exact (same time, same kind), same time with both kinds known,
   same kind, then whatever is left.
2. Diff each matched pair. A scheduled kind of UNSPECIFIED never causes a
   write; otherwise any difference in time or kind yields an UPDATE.
3. Unmatched scheduled occurrences yield CREATE, unmatched records DELETE.

Commands are emitted day by day (ascending date): updates in the order the
matches were found, then creates, then deletes.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Callable, Dict, Iterable, List, Sequence

from .pairing import PairingEngine
from ..models.command import SyncCommand
from ..models.occurrence import ExistingOccurrence, LessonKind, ScheduledOccurrence


logger = logging.getLogger(__name__)


class MatchPass(Enum):
    """Greedy passes, in the order they run."""

    EXACT = "exact"
    SAME_TIME = "same_time"
    SAME_KIND = "same_kind"
    FALLBACK = "fallback"


MatchPredicate = Callable[[ScheduledOccurrence, ExistingOccurrence], bool]


def _is_exact(scheduled: ScheduledOccurrence, existing: ExistingOccurrence) -> bool:
    return (
        scheduled.date_time == existing.date_time
        and scheduled.kind == existing.kind
    )


def _is_same_time(scheduled: ScheduledOccurrence, existing: ExistingOccurrence) -> bool:
    # A time match only counts as evidence when both sides assert a kind.
    return (
        scheduled.date_time == existing.date_time
        and scheduled.kind.is_specified
        and existing.kind.is_specified
    )


def _is_same_kind(scheduled: ScheduledOccurrence, existing: ExistingOccurrence) -> bool:
    return scheduled.kind == existing.kind


def _any_pair(scheduled: ScheduledOccurrence, existing: ExistingOccurrence) -> bool:
    return True


MATCH_PASSES: Sequence = (
    (MatchPass.EXACT, _is_exact),
    (MatchPass.SAME_TIME, _is_same_time),
    (MatchPass.SAME_KIND, _is_same_kind),
    (MatchPass.FALLBACK, _any_pair),
)


@dataclass(frozen=True)
class Match:
    """A scheduled occurrence paired with an existing record."""

    left_index: int
    right_index: int
    scheduled: ScheduledOccurrence
    existing: ExistingOccurrence
    match_pass: MatchPass


@dataclass
class DayGroup:
    """Occurrences of both sides that fall on one calendar date."""

    day: date
    scheduled: List[ScheduledOccurrence] = field(default_factory=list)
    existing: List[ExistingOccurrence] = field(default_factory=list)


@dataclass
class DayReconciliation:
    """
    Outcome of reconciling one day.

    Attributes:
        matches: Matched pairs in discovery order
        unmatched_scheduled: Left indices never consumed (ascending)
        unmatched_existing: Right indices never consumed (ascending)
        commands: Updates, then creates, then deletes
    """

    matches: List[Match] = field(default_factory=list)
    unmatched_scheduled: List[int] = field(default_factory=list)
    unmatched_existing: List[int] = field(default_factory=list)
    commands: List[SyncCommand] = field(default_factory=list)


def needs_update(scheduled: ScheduledOccurrence, existing: ExistingOccurrence) -> bool:
    """
    Decide whether a matched pair must be written back to the registry.

    Args:
        scheduled: Scheduled side of the match
        existing: Registry side of the match

    Returns:
        False when the scheduled kind is UNSPECIFIED or all fields agree
    """
    if scheduled.kind is LessonKind.UNSPECIFIED:
        return False

    return (
        scheduled.date_time != existing.date_time
        or scheduled.kind != existing.kind
    )


def group_by_day(
    scheduled: Iterable[ScheduledOccurrence],
    existing: Iterable[ExistingOccurrence]
) -> List[DayGroup]:
    """
    Partition both sides by calendar date.

    Within a group each side is stably sorted by date_time.

    Returns:
        One DayGroup per date present on either side, ascending by date
    """
    groups: Dict[date, DayGroup] = {}

    for item in scheduled:
        groups.setdefault(item.date, DayGroup(item.date)).scheduled.append(item)

    for item in existing:
        groups.setdefault(item.date, DayGroup(item.date)).existing.append(item)

    ordered = []
    for day in sorted(groups):
        group = groups[day]
        group.scheduled.sort(key=lambda x: x.date_time)
        group.existing.sort(key=lambda x: x.date_time)
        ordered.append(group)
    return ordered


def _run_pass(
    engine: PairingEngine,
    match_pass: MatchPass,
    predicate: MatchPredicate,
    matches: List[Match]
):
    for mapping in engine.enumerate():
        if not predicate(mapping.left, mapping.right):
            continue

        engine.consume(mapping.left_index, mapping.right_index)
        matches.append(Match(
            left_index=mapping.left_index,
            right_index=mapping.right_index,
            scheduled=mapping.left,
            existing=mapping.right,
            match_pass=match_pass,
        ))


def _has_two_lessons_at_same_time(scheduled: Sequence[ScheduledOccurrence]) -> bool:
    seen = set()
    for item in scheduled:
        if item.date_time in seen:
            return True
        seen.add(item.date_time)
    return False


def reconcile_day(
    scheduled: Sequence[ScheduledOccurrence],
    existing: Sequence[ExistingOccurrence]
) -> DayReconciliation:
    """
    Reconcile the occurrences of a single day.

    Args:
        scheduled: Scheduled occurrences of the day (left side)
        existing: Registry records of the day (right side)

    Returns:
        DayReconciliation with matches, leftovers and commands
    """
    outcome = DayReconciliation()
    if not scheduled and not existing:
        return outcome

    if _has_two_lessons_at_same_time(scheduled):
        logger.warning(
            f"Two scheduled lessons at the same time on {scheduled[0].date}"
        )

    engine = PairingEngine(scheduled, existing)
    for match_pass, predicate in MATCH_PASSES:
        _run_pass(engine, match_pass, predicate, outcome.matches)

    outcome.unmatched_scheduled = list(engine.available_left_indices())
    outcome.unmatched_existing = list(engine.available_right_indices())

    for match in outcome.matches:
        if needs_update(match.scheduled, match.existing):
            outcome.commands.append(SyncCommand.update(match.scheduled, match.existing))

    for index in outcome.unmatched_scheduled:
        outcome.commands.append(SyncCommand.create(scheduled[index]))

    for index in outcome.unmatched_existing:
        outcome.commands.append(SyncCommand.delete(existing[index]))

    logger.debug(
        f"Reconciled {len(scheduled)} scheduled / {len(existing)} existing: "
        f"{len(outcome.matches)} matched, {len(outcome.commands)} commands"
    )
    return outcome


def reconcile(
    scheduled: Iterable[ScheduledOccurrence],
    existing: Iterable[ExistingOccurrence]
) -> List[SyncCommand]:
    """
    Compute the commands that turn the registry state into the schedule.

    Args:
        scheduled: Scheduled occurrences of the window being synchronized
        existing: Registry records of the same window

    Returns:
        Commands grouped by day (ascending date)

    Examples:
        >>> commands = reconcile(scheduled, existing)
        >>> for command in commands:
        ...     print(command.type.name)
    """
    commands: List[SyncCommand] = []
    for group in group_by_day(scheduled, existing):
        commands.extend(reconcile_day(group.scheduled, group.existing).commands)
    return commands
