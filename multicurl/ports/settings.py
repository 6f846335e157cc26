"""Execution settings port definition (DTO)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

__all__ = ["DEFAULT_PREVIEW_BYTES", "ExecutionConfig", "RetryCondition", "RetryPolicy"]

DEFAULT_PREVIEW_BYTES = 500


class RetryCondition(str, Enum):
    """Failure conditions that may earn another attempt."""

    SERVER_ERROR = "server_error"
    TIMEOUT = "timeout"
    TRANSPORT_ERROR = "transport_error"


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """How often and on what a request is retried.

    Attributes:
        max_attempts: Total attempts allowed, first one included.
        retry_on: Conditions that trigger a retry.
        backoff_sec: Delays between attempts; empty means retry immediately.
            The last delay is reused once the tuple runs out.
    """

    max_attempts: int = 1
    retry_on: frozenset[RetryCondition] = field(default_factory=lambda: frozenset(RetryCondition))
    backoff_sec: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1 (got: {self.max_attempts})")


@dataclass(slots=True, frozen=True)
class ExecutionConfig:
    """Read-only configuration shared by every request task.

    Attributes:
        timeout_sec: Per-attempt timeout, body transfer included.
        concurrency_limit: Maximum number of requests in flight.
        retry_policy: Retry behaviour.
        output_target: File, template or directory for response bodies;
            None prints a preview instead.
        show_latency: Include elapsed time in the report.
        preview_bytes: Bytes of each body kept for terminal display.
    """

    timeout_sec: float
    concurrency_limit: int
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    output_target: str | None = None
    show_latency: bool = False
    preview_bytes: int = DEFAULT_PREVIEW_BYTES

    def __post_init__(self) -> None:
        if self.timeout_sec <= 0:
            raise ValueError(f"timeout_sec must be positive (got: {self.timeout_sec})")
        if self.concurrency_limit < 1:
            raise ValueError(f"concurrency_limit must be >= 1 (got: {self.concurrency_limit})")
