"""Bounded-concurrency fan-out of request specs."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from multicurl.ports.outcome import ErrorKind, RequestOutcome
from multicurl.ports.request import RequestSpec

__all__ = ["dispatch_all"]

logger = logging.getLogger(__name__)


async def dispatch_all(
    specs: Sequence[RequestSpec],
    concurrency_limit: int,
    execute_fn: Callable[[RequestSpec], Awaitable[RequestOutcome]],
) -> list[RequestOutcome]:
    """Execute every spec with at most ``concurrency_limit`` in flight.

    Each spec runs in its own asyncio.Task gated by a semaphore, so specs
    beyond the cap wait and are admitted in submission order as earlier ones
    finish.

    Args:
        specs: Requests to run.
        concurrency_limit: Maximum number of simultaneous executions (>= 1).
        execute_fn: Async function producing the outcome of one spec.

    Returns:
        One outcome per spec, in completion order.

    Notes:
        - A failing execution never aborts the batch: unexpected exceptions
          are logged and turned into a TRANSPORT_ERROR outcome for that spec.
        - There is no cancellation API. Interrupting the process abandons the
          in-flight requests.
    """
    if concurrency_limit < 1:
        raise ValueError(f"concurrency_limit must be >= 1 (got: {concurrency_limit})")

    semaphore = asyncio.Semaphore(concurrency_limit)
    outcomes: list[RequestOutcome] = []
    loop = asyncio.get_running_loop()

    async def _run_once(spec: RequestSpec) -> None:
        """Run one spec and record its outcome."""
        async with semaphore:
            try:
                outcome = await execute_fn(spec)
            except Exception as e:  # noqa: BLE001
                logger.error(f"Unexpected error while requesting {spec.url}: {e}", exc_info=True)
                outcome = RequestOutcome(
                    index=spec.index,
                    url=spec.url,
                    error=ErrorKind.TRANSPORT_ERROR,
                    detail=f"unexpected error: {e}",
                )
        outcomes.append(outcome)

    tasks = [loop.create_task(_run_once(spec)) for spec in specs]
    if tasks:
        await asyncio.gather(*tasks)

    logger.debug(f"Dispatched {len(specs)} request(s), collected {len(outcomes)} outcome(s)")
    return outcomes
