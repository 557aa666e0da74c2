"""
Command application.

Sends reconciliation commands to a RegistryGateway:
- CREATE -> add_lesson(fields)
- UPDATE -> edit_lesson(existing.edit_ref, fields)
- DELETE -> delete_lesson(existing.edit_ref), unless extra lessons are left alone

Failed requests are retried with capped exponential backoff. A circuit
breaker stops the run from sending further requests once the registry
keeps failing.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from .interfaces import LessonFormFields, RegistryGateway
from ..models.command import CommandType, SyncCommand
from ..models.result import Result
from ..resilience.circuit_breaker import CircuitBreaker, CircuitBreakerOpenError


logger = logging.getLogger(__name__)


MAX_BACKOFF_SECONDS = 10


class ExtraLessonAction(Enum):
    """What to do with registry records that match no scheduled lesson."""

    LEAVE_ALONE = "leave_alone"
    DELETE = "delete"


class RegistryRequestError(Exception):
    """A gateway call reported failure."""
    pass


@dataclass
class ApplyReport:
    """
    Counts of what happened to each command.

    Attributes:
        created: CREATE commands applied
        updated: UPDATE commands applied
        deleted: DELETE commands applied
        skipped: DELETE commands left alone by policy
        failed: Commands that failed after all attempts
        errors: One message per failed command
    """

    created: int = 0
    updated: int = 0
    deleted: int = 0
    skipped: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.created + self.updated + self.deleted + self.skipped + self.failed

    @property
    def is_success(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "created": self.created,
            "updated": self.updated,
            "deleted": self.deleted,
            "skipped": self.skipped,
            "failed": self.failed,
            "errors": list(self.errors),
        }


_APPLIED_COUNTERS = {
    CommandType.CREATE: "created",
    CommandType.UPDATE: "updated",
    CommandType.DELETE: "deleted",
}


class CommandApplier:
    """
    Applies SyncCommands through a registry gateway.

    Examples:
        >>> applier = CommandApplier(DryRunRegistryGateway())
        >>> report = applier.apply(reconcile(scheduled, existing))
        >>> print(f"{report.created} created, {report.failed} failed")
    """

    def __init__(
        self,
        gateway: RegistryGateway,
        extra_lesson_action: ExtraLessonAction = ExtraLessonAction.LEAVE_ALONE,
        max_retries: int = 3,
        circuit_breaker: Optional[CircuitBreaker] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize applier.

        Args:
            gateway: Registry transport
            extra_lesson_action: Policy for DELETE commands
            max_retries: Attempts per command (at least 1)
            circuit_breaker: Breaker shared by all requests (a new one with
                threshold 3 if None)
            sleep: Called with the backoff delay in seconds
        """
        if max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {max_retries}")

        self.gateway = gateway
        self.extra_lesson_action = extra_lesson_action
        self.max_retries = max_retries
        self.circuit_breaker = circuit_breaker or CircuitBreaker(
            failure_threshold=3,
            expected_exception=RegistryRequestError
        )
        self._sleep = sleep

    def should_skip(self, command: SyncCommand) -> bool:
        """Check if the extra-lesson policy leaves this command out."""
        return (
            command.type is CommandType.DELETE
            and self.extra_lesson_action is ExtraLessonAction.LEAVE_ALONE
        )

    def _send(self, command: SyncCommand) -> Result[None]:
        try:
            if command.type is CommandType.CREATE:
                return self.gateway.add_lesson(
                    LessonFormFields.from_scheduled(command.scheduled)
                )
            if command.type is CommandType.UPDATE:
                return self.gateway.edit_lesson(
                    command.existing.edit_ref,
                    LessonFormFields.from_scheduled(command.scheduled)
                )
            return self.gateway.delete_lesson(command.existing.edit_ref)

        except Exception as e:
            logger.error(f"Gateway raised on {command.type.name}: {e}", exc_info=True)
            return Result.failure(f"Gateway error: {e}", e)

    def _send_or_raise(self, command: SyncCommand):
        result = self._send(command)
        if result.is_failure:
            raise RegistryRequestError(result.message or "request failed") from result.error

    def apply_command(self, command: SyncCommand) -> Result[None]:
        """
        Apply one command with retries.

        Args:
            command: Command to send

        Returns:
            Result with None on success (including a skipped DELETE), or
            failure with the last error
        """
        if self.should_skip(command):
            logger.warning(
                f"Leaving extra lesson alone: {command.existing.date_time} "
                f"({command.existing.edit_ref})"
            )
            return Result.success(None, "skipped")

        last_error: Optional[Exception] = None
        for attempt in range(self.max_retries):
            try:
                self.circuit_breaker.call(self._send_or_raise, command)
                logger.debug(f"Applied {command!r}")
                return Result.success(None)

            except CircuitBreakerOpenError as e:
                return Result.failure(f"{command.type.name} not sent: {e}", e)

            except RegistryRequestError as e:
                last_error = e
                if attempt < self.max_retries - 1:
                    delay = min(2 ** attempt, MAX_BACKOFF_SECONDS)
                    logger.warning(
                        f"{command.type.name} attempt {attempt + 1}/{self.max_retries} "
                        f"failed: {e}. Retrying in {delay}s"
                    )
                    self._sleep(delay)

        return Result.failure(
            f"{command.type.name} failed after {self.max_retries} attempts: {last_error}",
            last_error
        )

    def apply(self, commands: Iterable[SyncCommand]) -> ApplyReport:
        """
        Apply commands in order.

        Once the circuit breaker opens, every remaining command fails
        without a request being sent.

        Args:
            commands: Commands as produced by reconcile()

        Returns:
            ApplyReport with per-outcome counts
        """
        report = ApplyReport()

        for command in commands:
            if self.should_skip(command):
                self.apply_command(command)
                report.skipped += 1
                continue

            result = self.apply_command(command)
            if result.is_success:
                counter = _APPLIED_COUNTERS[command.type]
                setattr(report, counter, getattr(report, counter) + 1)
            else:
                report.failed += 1
                report.errors.append(result.message)
                logger.error(result.message)

        logger.info(
            f"Applied commands: {report.created} created, {report.updated} updated, "
            f"{report.deleted} deleted, {report.skipped} skipped, {report.failed} failed"
        )
        return report
