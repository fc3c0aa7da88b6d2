"""
Circuit breaker for outbound calls (LLM backends, AWS catalog).
A tripped breaker fails fast so the caller goes straight to its fallback.
"""
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional, TypeVar
import asyncio
import logging
import time

logger = logging.getLogger(__name__)

T = TypeVar("T")

FAILURE_THRESHOLD = 3
OPEN_STATE_DURATION = 60.0  # seconds before a probe call is let through


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerOpenError(Exception):
    """Raised when a call is rejected because the breaker is open."""
    pass


class CircuitBreaker:
    """
    Per-service breaker.

    CLOSED -> OPEN after `failure_threshold` consecutive failures.
    OPEN -> HALF_OPEN once `open_duration` has elapsed; one probe is allowed.
    HALF_OPEN -> CLOSED on probe success, back to OPEN on probe failure.
    A cancelled probe counts as a failure.
    """

    def __init__(
        self,
        service_name: str,
        failure_threshold: int = FAILURE_THRESHOLD,
        open_duration: float = OPEN_STATE_DURATION,
        clock: Callable[[], float] = time.monotonic
    ):
        self.service_name = service_name
        self.failure_threshold = failure_threshold
        self.open_duration = open_duration
        self._clock = clock

        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.opened_at: Optional[float] = None
        self._probe_in_flight = False

    def _transition(self, new_state: CircuitState, reason: str) -> None:
        logger.warning(
            "Circuit breaker %s: %s -> %s (%s)",
            self.service_name,
            self.state.name,
            new_state.name,
            reason,
        )
        self.state = new_state

    def allow_request(self) -> bool:
        """True when a call may proceed right now."""
        if self.state == CircuitState.OPEN:
            if self.opened_at is not None and self._clock() - self.opened_at >= self.open_duration:
                self._transition(CircuitState.HALF_OPEN, "testing recovery")
                self._probe_in_flight = True
                return True
            return False
        if self.state == CircuitState.HALF_OPEN:
            if self._probe_in_flight:
                return False
            self._probe_in_flight = True
            return True
        return True

    def record_success(self) -> None:
        if self.state == CircuitState.HALF_OPEN:
            self._transition(CircuitState.CLOSED, "service recovered")
            self.opened_at = None
        self.failure_count = 0
        self._probe_in_flight = False

    def record_failure(self) -> None:
        self.failure_count += 1
        self._probe_in_flight = False
        if self.state == CircuitState.HALF_OPEN:
            self._transition(CircuitState.OPEN, "service still failing")
            self.opened_at = self._clock()
        elif self.state == CircuitState.CLOSED and self.failure_count >= self.failure_threshold:
            self._transition(CircuitState.OPEN, f"{self.failure_count} consecutive failures")
            self.opened_at = self._clock()

    async def call(self, func: Callable[[], Awaitable[T]]) -> T:
        """
        Await `func()` through the breaker.

        Raises:
            CircuitBreakerOpenError: If the breaker rejects the call
        """
        if not self.allow_request():
            raise CircuitBreakerOpenError(f"Circuit breaker open for {self.service_name}")
        try:
            result = await func()
        except (Exception, asyncio.CancelledError):
            # A cancelled call still has to release the half-open probe slot
            self.record_failure()
            raise
        self.record_success()
        return result


_circuit_breakers: Dict[str, CircuitBreaker] = {}


def get_circuit_breaker(service_name: str) -> CircuitBreaker:
    """Get or create the process-wide breaker for a service."""
    if service_name not in _circuit_breakers:
        _circuit_breakers[service_name] = CircuitBreaker(service_name)
    return _circuit_breakers[service_name]


def reset_circuit_breakers() -> None:
    """Forget every breaker (used between tests)."""
    _circuit_breakers.clear()
