"""
Circuit breaker for the map service clients.

A breaker opens after a run of consecutive failures and rejects calls until
its cool-down has elapsed, then lets a single trial call through. It never
retries a call; callers decide what a rejected call means for them.
"""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)


class BreakerState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half-open"


class CircuitOpen(Exception):
    """Raised when a call is rejected because the circuit is open."""

    def __init__(self, service: str, resets_in: float) -> None:
        super().__init__(
            f"Circuit breaker open for {service} (resets in {resets_in:.0f}s)"
        )
        self.service = service
        self.resets_in = resets_in


class CircuitBreaker:
    """
    Consecutive-failure breaker for one external service.

    Parameters
    ----------
    service : str
        Name used in log lines and :class:`CircuitOpen` messages.
    failure_threshold : int
        Consecutive failures that open the circuit.
    recovery_timeout : float
        Seconds the circuit stays open before a trial call is allowed.
    clock : callable
        Monotonic time source, replaceable in tests.
    """

    def __init__(
        self,
        service: str,
        *,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.service = service
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._clock = clock
        self.reset()

    def reset(self) -> None:
        self._failures = 0
        self._opened_at: float | None = None
        self._state = BreakerState.CLOSED
        self._trial_in_flight = False

    @property
    def state(self) -> BreakerState:
        if (
            self._state is BreakerState.OPEN
            and self._opened_at is not None
            and self._clock() - self._opened_at >= self.recovery_timeout
        ):
            self._state = BreakerState.HALF_OPEN
        return self._state

    def _open(self) -> None:
        self._state = BreakerState.OPEN
        self._opened_at = self._clock()
        self._trial_in_flight = False

    def release_trial(self) -> None:
        """Free the half-open slot after a call ended without an outcome."""
        self._trial_in_flight = False

    def record_success(self) -> None:
        if self._state is not BreakerState.CLOSED:
            logger.info("Circuit breaker CLOSED for %s", self.service)
        self.reset()

    def record_failure(self) -> None:
        self._failures += 1
        if self.state is BreakerState.HALF_OPEN:
            self._open()
            logger.warning(
                "Circuit breaker re-OPEN for %s (trial call failed)",
                self.service,
            )
        elif (
            self._state is BreakerState.CLOSED
            and self._failures >= self.failure_threshold
        ):
            self._open()
            logger.warning(
                "Circuit breaker OPEN for %s after %d failures",
                self.service,
                self._failures,
            )

    def check(self) -> None:
        """Raise :class:`CircuitOpen` while the circuit is open.

        In half-open state the first caller makes the trial call; everyone else
        is rejected until that call records its outcome.
        """
        state = self.state
        if state is BreakerState.OPEN:
            elapsed = self._clock() - (self._opened_at or 0.0)
            raise CircuitOpen(self.service, max(0.0, self.recovery_timeout - elapsed))
        if state is BreakerState.HALF_OPEN:
            if self._trial_in_flight:
                raise CircuitOpen(self.service, 0.0)
            self._trial_in_flight = True


osrm_breaker = CircuitBreaker("OSRM")
nominatim_breaker = CircuitBreaker("Nominatim")


def with_circuit_breaker(breaker: CircuitBreaker):
    """Decorator that wraps an async function with circuit breaker protection."""

    def decorator(fn):
        @functools.wraps(fn)
        async def wrapper(*args, **kwargs):
            breaker.check()
            try:
                result = await fn(*args, **kwargs)
            except Exception:
                breaker.record_failure()
                raise
            except BaseException:
                # Cancelled mid-call: no outcome to record.
                breaker.release_trial()
                raise
            breaker.record_success()
            return result

        return wrapper

    return decorator
