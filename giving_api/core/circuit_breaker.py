import asyncio
from enum import Enum
from typing import Callable, Any, Optional, Union
from datetime import datetime, timedelta
import structlog

logger = structlog.get_logger(__name__)


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerError(Exception):
    """Raised instead of calling the protected function while the circuit is open"""
    pass


class CircuitBreaker:
    """
    Fail fast on a dependency that keeps failing.

    CLOSED counts consecutive failures of `expected_exception`; reaching
    `failure_threshold` opens the circuit. While OPEN every call raises
    CircuitBreakerError. Once `recovery_timeout` has passed the circuit is
    HALF_OPEN and the next call is a trial: success closes it, failure opens
    it again for another `recovery_timeout`. Exceptions outside
    `expected_exception` pass through without affecting the state.
    """

    def __init__(self,
                 name: str,
                 failure_threshold: int = 5,
                 recovery_timeout: timedelta = timedelta(seconds=30),
                 expected_exception: Union[type, tuple] = Exception):
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.expected_exception = expected_exception

        self.failure_count = 0
        self.opened_at: Optional[datetime] = None

    @property
    def state(self) -> CircuitState:
        if self.opened_at is None:
            return CircuitState.CLOSED
        if datetime.now() - self.opened_at >= self.recovery_timeout:
            return CircuitState.HALF_OPEN
        return CircuitState.OPEN

    def _open(self):
        if self.state == CircuitState.CLOSED:
            logger.warning("Circuit breaker opened",
                           breaker=self.name,
                           failure_count=self.failure_count,
                           threshold=self.failure_threshold)
        self.opened_at = datetime.now()

    def _record_success(self):
        if self.opened_at is not None:
            logger.info("Circuit breaker closed after trial call", breaker=self.name)
        self.failure_count = 0
        self.opened_at = None

    def _record_failure(self, trial: bool):
        self.failure_count += 1
        if trial or self.failure_count >= self.failure_threshold:
            self._open()

    async def call(self, func: Callable, *args, **kwargs) -> Any:
        """Execute func (sync or async) with circuit breaker protection"""
        state = self.state
        if state == CircuitState.OPEN:
            raise CircuitBreakerError(f"Circuit breaker '{self.name}' is OPEN")

        try:
            if asyncio.iscoroutinefunction(func):
                result = await func(*args, **kwargs)
            else:
                result = func(*args, **kwargs)
        except self.expected_exception:
            self._record_failure(trial=state == CircuitState.HALF_OPEN)
            raise

        self._record_success()
        return result

    def get_state(self) -> dict:
        return {
            "name": self.name,
            "state": self.state.value,
            "failure_count": self.failure_count,
            "failure_threshold": self.failure_threshold,
            "opened_at": self.opened_at.isoformat() if self.opened_at else None,
            "recovery_timeout_seconds": self.recovery_timeout.total_seconds()
        }
