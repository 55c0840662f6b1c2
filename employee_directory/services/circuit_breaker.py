"""Circuit breaker guarding calls to upstream rate services."""
from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from typing import Callable, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """
    Decide whether to attempt a primary call or short-circuit to its fallback.

    The breaker opens after ``failure_threshold`` consecutive failures. While
    open, every call returns the fallback without touching the primary. Once
    ``reset_timeout`` seconds have passed a single trial call is let through
    (half-open); success closes the circuit, failure re-opens it.

    Args:
        name: Label used in log messages
        failure_threshold: Consecutive failures before opening
        reset_timeout: Seconds to stay open before the trial call
        clock: Monotonic time source (injectable for tests)
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        reset_timeout: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be at least 1")
        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self._clock = clock
        self._lock = threading.Lock()
        self._state = CircuitState.CLOSED
        self._failures = 0
        self._opened_at: float | None = None
        self._trial_in_flight = False

    @property
    def state(self) -> CircuitState:
        with self._lock:
            return self._current_state()

    @property
    def failure_count(self) -> int:
        with self._lock:
            return self._failures

    def _current_state(self) -> CircuitState:
        if (
            self._state is CircuitState.OPEN
            and self._opened_at is not None
            and self._clock() - self._opened_at >= self.reset_timeout
        ):
            self._state = CircuitState.HALF_OPEN
        return self._state

    def _allow_request(self) -> bool:
        with self._lock:
            state = self._current_state()
            if state is CircuitState.CLOSED:
                return True
            if state is CircuitState.HALF_OPEN and not self._trial_in_flight:
                self._trial_in_flight = True
                return True
            return False

    def _record_success(self) -> None:
        with self._lock:
            if self._state is not CircuitState.CLOSED:
                logger.info("Circuit %s closed after successful trial call", self.name)
            self._state = CircuitState.CLOSED
            self._failures = 0
            self._opened_at = None
            self._trial_in_flight = False

    def _record_failure(self) -> None:
        with self._lock:
            self._failures += 1
            self._trial_in_flight = False
            if self._state is CircuitState.HALF_OPEN or self._failures >= self.failure_threshold:
                if self._state is not CircuitState.OPEN:
                    logger.warning(
                        "Circuit %s opened after %d consecutive failures",
                        self.name,
                        self._failures,
                    )
                self._state = CircuitState.OPEN
                self._opened_at = self._clock()

    def call(self, primary: Callable[[], T], fallback: Callable[[], T]) -> T:
        """Run ``primary`` unless the circuit is open; on any failure return ``fallback()``."""

        if not self._allow_request():
            logger.debug("Circuit %s open; serving fallback", self.name)
            return fallback()

        try:
            result = primary()
        except Exception:
            logger.warning("Call through circuit %s failed; serving fallback", self.name, exc_info=True)
            self._record_failure()
            return fallback()
        except BaseException:
            # Interrupts propagate, but the trial slot must still be released.
            self._record_failure()
            raise

        self._record_success()
        return result

    def reset(self) -> None:
        with self._lock:
            self._state = CircuitState.CLOSED
            self._failures = 0
            self._opened_at = None
            self._trial_in_flight = False
