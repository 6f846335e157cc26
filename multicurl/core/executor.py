"""Execution of a single request with timeout and retry."""

import asyncio
import logging
from dataclasses import dataclass

from multicurl.core.preflight import InvalidInputError, check_spec
from multicurl.core.retry import RetryState, Verdict, classify_status
from multicurl.ports.outcome import ErrorKind, RequestOutcome
from multicurl.ports.request import RequestSpec
from multicurl.ports.settings import ExecutionConfig
from multicurl.ports.sink import ResponseSink, SinkReceipt, SinkWriteError
from multicurl.ports.transport import TransportError, TransportPort, TransportTimeout

__all__ = ["execute_request"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _AttemptResult:
    """What one exchange produced."""

    status: int | None = None
    headers: tuple[tuple[str, str], ...] = ()
    error: ErrorKind | None = None
    detail: str | None = None
    receipt: SinkReceipt | None = None


async def execute_request(
    spec: RequestSpec,
    *,
    config: ExecutionConfig,
    transport: TransportPort,
    sink: ResponseSink,
) -> RequestOutcome:
    """Run one request to completion and describe how it went.

    Steps:
    1. Reject specs with a bad URL or JSON body without sending anything.
    2. Exchange with the transport, bounded by the per-attempt timeout.
    3. Classify the attempt and retry while the policy allows it.
    4. Build the outcome from the last attempt.

    Args:
        spec: Request to execute.
        config: Shared execution settings.
        transport: HTTP exchange capability.
        sink: Destination for the response body.

    Returns:
        Exactly one outcome; per-request failures are captured, not raised.
    """
    loop = asyncio.get_running_loop()
    started = loop.time()

    try:
        check_spec(spec)
    except InvalidInputError as e:
        logger.warning(f"Not sending request to {spec.url}: {e}")
        return RequestOutcome(
            index=spec.index,
            url=spec.url,
            error=ErrorKind.INVALID_INPUT,
            detail=str(e),
        )

    state = RetryState(config.retry_policy)
    while True:
        attempt = state.begin()
        logger.debug(f"{spec.method.value} {spec.url} (attempt {attempt})")
        result = await _attempt_once(spec, config, transport, sink, state)

        if state.decide(result.error) is not Verdict.RETRY:
            break

        delay = state.delay_sec()
        logger.info(
            f"Retrying {spec.url} after {result.detail} "
            f"(attempt {attempt}/{config.retry_policy.max_attempts}, delay {delay:.1f}s)"
        )
        if delay:
            await asyncio.sleep(delay)

    receipt = result.receipt or SinkReceipt(bytes_written=0)
    outcome = RequestOutcome(
        index=spec.index,
        url=spec.url,
        final_status=result.status,
        attempts_made=state.attempt,
        elapsed_sec=loop.time() - started,
        bytes_transferred=receipt.bytes_written,
        error=result.error,
        detail=result.detail,
        headers=result.headers,
        preview=receipt.preview,
        saved_to=receipt.saved_to,
    )
    if not outcome.is_success:
        logger.warning(f"Request to {spec.url} failed: {outcome.detail}")
    return outcome


async def _attempt_once(
    spec: RequestSpec,
    config: ExecutionConfig,
    transport: TransportPort,
    sink: ResponseSink,
    state: RetryState,
) -> _AttemptResult:
    """Perform one exchange; never raises for transport or sink failures.

    The status and headers stay recorded when the body transfer fails later on.
    """
    result = _AttemptResult()

    async def _exchange() -> None:
        async with transport.exchange(spec, config.timeout_sec) as resp:
            result.status = resp.status
            result.headers = resp.headers
            kind = classify_status(resp.status)
            if kind is not None:
                result.error = kind
                result.detail = f"HTTP {resp.status}"
                # A 5xx that will be retried is dropped without reaching the sink
                if state.decide(kind) is Verdict.RETRY:
                    return
            result.receipt = await sink.consume(spec, resp.chunks)

    try:
        await asyncio.wait_for(_exchange(), timeout=config.timeout_sec)
    except (asyncio.TimeoutError, TransportTimeout):
        result.error = ErrorKind.TIMEOUT
        result.detail = f"timed out after {config.timeout_sec:g}s"
    except TransportError as e:
        result.error = ErrorKind.TRANSPORT_ERROR
        result.detail = str(e) or type(e).__name__
    except SinkWriteError as e:
        result.error = ErrorKind.IO_ERROR
        result.detail = str(e)
    return result
