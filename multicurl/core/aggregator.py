"""Summary of a batch and the exit code derived from it."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from multicurl.ports.outcome import RequestOutcome

__all__ = ["EXIT_FAILURE", "EXIT_SUCCESS", "Summary", "exit_code_for", "is_ok", "summarize"]

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


@dataclass(slots=True, frozen=True)
class Summary:
    """Aggregated view of all outcomes.

    Attributes:
        rows: Outcomes ordered by input position.
        succeeded: Outcomes counted as successful.
        failed: All other outcomes.
        total_bytes: Sum of transferred body bytes.
        exit_code: Process exit code for the batch.
    """

    rows: tuple[RequestOutcome, ...]
    succeeded: int
    failed: int
    total_bytes: int
    exit_code: int


def is_ok(outcome: RequestOutcome) -> bool:
    """Return True for a success carrying a 2xx or 3xx status."""
    return (
        outcome.is_success
        and outcome.final_status is not None
        and 200 <= outcome.final_status <= 399
    )


def exit_code_for(outcomes: Iterable[RequestOutcome]) -> int:
    """Return 0 iff every outcome is ok, 1 otherwise."""
    return EXIT_SUCCESS if all(is_ok(o) for o in outcomes) else EXIT_FAILURE


def summarize(outcomes: Iterable[RequestOutcome]) -> Summary:
    """Build the summary; the result does not depend on arrival order."""
    rows = tuple(sorted(outcomes, key=lambda o: o.index))
    succeeded = sum(1 for o in rows if is_ok(o))
    return Summary(
        rows=rows,
        succeeded=succeeded,
        failed=len(rows) - succeeded,
        total_bytes=sum(o.bytes_transferred for o in rows),
        exit_code=exit_code_for(rows),
    )
