"""Attempt classification and retry decisions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from multicurl.ports.outcome import ErrorKind
from multicurl.ports.settings import RetryCondition, RetryPolicy

__all__ = ["RetryState", "Verdict", "classify_status", "DEFAULT_BACKOFF_SEC"]

# Delay schedule enabled by --backoff
DEFAULT_BACKOFF_SEC = (0.2, 0.5, 1.0)

_CONDITION_BY_KIND = {
    ErrorKind.SERVER_ERROR: RetryCondition.SERVER_ERROR,
    ErrorKind.TIMEOUT: RetryCondition.TIMEOUT,
    ErrorKind.TRANSPORT_ERROR: RetryCondition.TRANSPORT_ERROR,
}


class Verdict(Enum):
    """Next step after an attempt."""

    SUCCESS = "success"
    RETRY = "retry"
    GIVE_UP = "give_up"


def classify_status(status: int) -> ErrorKind | None:
    """Map an HTTP status to a failure kind, None for 1xx-3xx."""
    if status >= 500:
        return ErrorKind.SERVER_ERROR
    if status >= 400:
        return ErrorKind.CLIENT_ERROR
    return None


@dataclass(slots=True)
class RetryState:
    """Attempt counter for one request.

    States: attempting(n) -> SUCCESS | RETRY (n + 1) | GIVE_UP.
    ``attempt`` never exceeds ``policy.max_attempts``.
    """

    policy: RetryPolicy
    attempt: int = 0

    def begin(self) -> int:
        """Start the next attempt and return its 1-based number.

        Raises:
            RuntimeError: If all attempts are already used.
        """
        if self.attempt >= self.policy.max_attempts:
            raise RuntimeError(f"No attempts left ({self.attempt}/{self.policy.max_attempts})")
        self.attempt += 1
        return self.attempt

    def is_retryable(self, kind: ErrorKind) -> bool:
        condition = _CONDITION_BY_KIND.get(kind)
        return condition is not None and condition in self.policy.retry_on

    def decide(self, kind: ErrorKind | None) -> Verdict:
        """Decide what follows the current attempt.

        Args:
            kind: Failure of the current attempt, None if it succeeded.
        """
        if kind is None:
            return Verdict.SUCCESS
        if self.is_retryable(kind) and self.attempt < self.policy.max_attempts:
            return Verdict.RETRY
        return Verdict.GIVE_UP

    def delay_sec(self) -> float:
        """Pause before the next attempt (0 when no backoff is configured)."""
        delays = self.policy.backoff_sec
        if not delays or self.attempt < 1:
            return 0.0
        return delays[min(self.attempt - 1, len(delays) - 1)]
