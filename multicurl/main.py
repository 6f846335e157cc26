"""Application entrypoint."""

import logging
from collections.abc import Sequence
from functools import partial

from multicurl.adapters.driven.http.client import HttpClient
from multicurl.adapters.driven.sink.file import FileSink
from multicurl.adapters.driven.sink.preview import PreviewBufferSink
from multicurl.core.aggregator import Summary, summarize
from multicurl.core.dispatcher import dispatch_all
from multicurl.core.executor import execute_request
from multicurl.ports.request import RequestSpec
from multicurl.ports.settings import ExecutionConfig
from multicurl.ports.sink import ResponseSink
from multicurl.ports.transport import TransportPort

__all__ = ["main", "run_pipeline", "select_sink"]

logger = logging.getLogger(__name__)


def select_sink(config: ExecutionConfig, total: int) -> ResponseSink:
    """Pick the body destination for the whole run.

    Args:
        config: Execution settings.
        total: Number of requests in the run.

    Returns:
        FileSink when an output target is set, PreviewBufferSink otherwise.
    """
    if config.output_target:
        return FileSink(config.output_target, total=total)
    return PreviewBufferSink(limit=config.preview_bytes)


async def run_pipeline(
    specs: Sequence[RequestSpec],
    config: ExecutionConfig,
    transport: TransportPort,
    sink: ResponseSink,
) -> Summary:
    """Dispatch every spec through the executor and aggregate the outcomes."""
    outcomes = await dispatch_all(
        specs,
        config.concurrency_limit,
        partial(execute_request, config=config, transport=transport, sink=sink),
    )
    return summarize(outcomes)


async def main(specs: Sequence[RequestSpec], config: ExecutionConfig) -> Summary:
    """Run one invocation against the network.

    Startup sequence:
    1. Select the response sink from the output target.
    2. Open the HTTP session.
    3. Dispatch all requests with the configured concurrency.
    4. Close the session and return the summary.
    """
    logger.info(
        f"Requesting {len(specs)} URL(s), concurrency={config.concurrency_limit}, "
        f"timeout={config.timeout_sec:g}s, attempts={config.retry_policy.max_attempts}"
    )
    sink = select_sink(config, total=len(specs))

    async with HttpClient() as http:
        summary = await run_pipeline(specs, config, transport=http, sink=sink)

    logger.info(f"Done: {summary.succeeded} succeeded, {summary.failed} failed")
    return summary


if __name__ == "__main__":
    from multicurl.adapters.driving.cli import cli

    cli()
