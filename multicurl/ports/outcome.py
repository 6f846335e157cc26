"""Outcome port definition (DTO)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = ["ErrorKind", "RequestOutcome"]


class ErrorKind(str, Enum):
    """Why a request did not succeed."""

    INVALID_INPUT = "invalid_input"
    TRANSPORT_ERROR = "transport_error"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    CLIENT_ERROR = "client_error"
    IO_ERROR = "io_error"


@dataclass(slots=True, frozen=True)
class RequestOutcome:
    """Immutable result of executing one request spec.

    Attributes:
        index: Input position of the originating spec.
        url: Target URL.
        final_status: Status of the last response received; None if none arrived.
        attempts_made: Exchanges started (0 when rejected before dispatch).
        elapsed_sec: Wall-clock time across all attempts.
        bytes_transferred: Response body size of the final attempt.
        error: Failure classification; None means success.
        detail: Human readable error detail.
        headers: Response headers of the final attempt.
        preview: Leading bytes kept for display (preview mode only).
        saved_to: Path the body was written to (file mode only).
    """

    index: int
    url: str
    final_status: int | None = None
    attempts_made: int = 0
    elapsed_sec: float = 0.0
    bytes_transferred: int = 0
    error: ErrorKind | None = None
    detail: str | None = None
    headers: tuple[tuple[str, str], ...] = ()
    preview: bytes | None = None
    saved_to: str | None = None

    @property
    def is_success(self) -> bool:
        return self.error is None
