"""
Circuit Breaker pattern implementation.

Guards registry write requests: after a run of consecutive failures the
applier stops sending requests instead of hammering an unavailable
registry.

States:
- CLOSED: Normal operation, calls pass through
- OPEN: Too many failures, calls are blocked
- HALF_OPEN: Testing if the registry recovered
"""

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Any, Optional, Type


logger = logging.getLogger(__name__)


class CircuitState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"          # Normal operation
    OPEN = "open"              # Blocking calls due to failures
    HALF_OPEN = "half_open"    # Testing recovery


class CircuitBreakerOpenError(Exception):
    """Raised when circuit breaker is in OPEN state."""
    pass


class CircuitBreaker:
    """
    Circuit breaker for registry requests.

    Counts consecutive failures, opens after the threshold, blocks calls
    while open, lets one trial call through after the timeout and closes
    again on success.

    Examples:
        >>> breaker = CircuitBreaker(
        ...     failure_threshold=3,
        ...     timeout=timedelta(seconds=60),
        ...     expected_exception=RegistryRequestError
        ... )
        >>> try:
        ...     breaker.call(send_request, command)
        ... except CircuitBreakerOpenError:
        ...     logger.error("Registry unavailable, stopping")
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        timeout: timedelta = timedelta(seconds=60),
        expected_exception: Type[Exception] = Exception,
        clock: Callable[[], datetime] = datetime.now
    ):
        """
        Initialize circuit breaker.

        Args:
            failure_threshold: Number of failures before opening circuit
            timeout: Time to wait before trying again (HALF_OPEN)
            expected_exception: Exception type to count as failure
            clock: Source of the current time
        """
        if failure_threshold < 1:
            raise ValueError(f"failure_threshold must be at least 1, got {failure_threshold}")

        self.failure_threshold = failure_threshold
        self.timeout = timeout
        self.expected_exception = expected_exception
        self._clock = clock

        # State
        self.failure_count = 0
        self.last_failure_time: Optional[datetime] = None
        self.state = CircuitState.CLOSED

        logger.debug(
            f"Circuit breaker initialized: "
            f"threshold={failure_threshold}, timeout={timeout}"
        )

    def call(self, func: Callable, *args, **kwargs) -> Any:
        """
        Execute function with circuit breaker protection.

        Args:
            func: Function to execute
            *args: Positional arguments for func
            **kwargs: Keyword arguments for func

        Returns:
            Function result

        Raises:
            CircuitBreakerOpenError: If circuit is OPEN
            Exception: Any exception raised by func
        """
        self.check()

        try:
            result = func(*args, **kwargs)
        except self.expected_exception:
            self._on_failure()
            raise

        self._on_success()
        return result

    def check(self):
        """
        Fail fast if the circuit is open.

        Moves an OPEN circuit to HALF_OPEN once the timeout has passed.

        Raises:
            CircuitBreakerOpenError: If circuit is OPEN
        """
        if self.state != CircuitState.OPEN:
            return

        if self._should_attempt_reset():
            logger.info("Circuit breaker: Entering HALF_OPEN state")
            self.state = CircuitState.HALF_OPEN
        else:
            raise CircuitBreakerOpenError(
                f"Circuit breaker is OPEN (failures: {self.failure_count})"
            )

    def _should_attempt_reset(self) -> bool:
        """Check if enough time has passed to attempt reset."""
        if self.last_failure_time is None:
            return True

        return self._clock() - self.last_failure_time > self.timeout

    def _on_success(self):
        if self.state == CircuitState.HALF_OPEN:
            logger.info("Circuit breaker: Back to CLOSED state")
            self.state = CircuitState.CLOSED

        self.failure_count = 0

    def _on_failure(self):
        self.failure_count += 1
        self.last_failure_time = self._clock()

        logger.warning(
            f"Circuit breaker: Failure #{self.failure_count} "
            f"(threshold={self.failure_threshold})"
        )

        # A failed trial call reopens immediately.
        if (
            self.state == CircuitState.HALF_OPEN
            or self.failure_count >= self.failure_threshold
        ):
            logger.error(
                f"Circuit breaker: OPEN after {self.failure_count} failures"
            )
            self.state = CircuitState.OPEN

    def reset(self):
        """Manually reset circuit breaker to CLOSED state."""
        logger.info("Circuit breaker: Manual reset to CLOSED")
        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.last_failure_time = None

    @property
    def is_open(self) -> bool:
        return self.state == CircuitState.OPEN

    @property
    def is_closed(self) -> bool:
        return self.state == CircuitState.CLOSED

    @property
    def is_half_open(self) -> bool:
        return self.state == CircuitState.HALF_OPEN

    def get_state_info(self) -> dict:
        """
        Get current circuit breaker state for reports.

        Returns:
            Dictionary with state, failure count, and last failure time
        """
        return {
            "state": self.state.value,
            "failure_count": self.failure_count,
            "last_failure_time": (
                self.last_failure_time.isoformat()
                if self.last_failure_time
                else None
            ),
            "failure_threshold": self.failure_threshold,
        }
