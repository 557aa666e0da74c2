"""
Result<T> pattern for I/O boundaries.

Loaders, registry gateways and the command applier report outcomes as
Result values instead of raising, so a single failed record or request does
not abort a whole synchronization run.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar


T = TypeVar('T')
U = TypeVar('U')


class ResultStatus(Enum):
    """Status of a Result."""
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class Result(Generic[T]):
    """
    Outcome of an operation that may succeed or fail.

    Attributes:
        status: SUCCESS or FAILURE
        value: The produced value (None on failure)
        error: The exception behind a failure, if any
        message: Human-readable description

    Examples:
        >>> result = load_existing_occurrences(Path("lessons.html"))
        >>> if result.is_success:
        ...     existing = result.value
        ... else:
        ...     logger.error(result.message)
    """

    status: ResultStatus
    value: Optional[T] = None
    error: Optional[Exception] = None
    message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        """Check if the result represents success."""
        return self.status == ResultStatus.SUCCESS

    @property
    def is_failure(self) -> bool:
        """Check if the result represents failure."""
        return self.status == ResultStatus.FAILURE

    @classmethod
    def success(cls, value: T, message: Optional[str] = None) -> 'Result[T]':
        """
        Create a successful result.

        Args:
            value: The produced value
            message: Optional description

        Returns:
            Result with SUCCESS status
        """
        return cls(status=ResultStatus.SUCCESS, value=value, message=message)

    @classmethod
    def failure(
        cls,
        message: str,
        error: Optional[Exception] = None
    ) -> 'Result[T]':
        """
        Create a failure result.

        Args:
            message: What went wrong
            error: Optional exception that caused the failure

        Returns:
            Result with FAILURE status
        """
        return cls(status=ResultStatus.FAILURE, message=message, error=error)

    def unwrap(self) -> T:
        """
        Return the value of a successful result.

        Raises:
            ValueError: If the result is a failure
        """
        if self.is_failure:
            raise ValueError(f"Cannot unwrap failure result: {self.message}")
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Return the value on success, otherwise the default."""
        return self.value if self.is_success else default

    def map(self, func: Callable[[T], U]) -> 'Result[U]':
        """
        Apply a function to the success value.

        Args:
            func: Function applied to the value (T -> U)

        Returns:
            New Result with the mapped value; failures pass through, and an
            exception raised by func becomes a failure

        Examples:
            >>> Result.success([1, 2, 3]).map(len).value
            3
        """
        if self.is_failure:
            return Result.failure(self.message, self.error)

        try:
            return Result.success(func(self.value), self.message)
        except Exception as e:
            return Result.failure(str(e), e)
