"""Command-line interface."""

import asyncio
import logging

import click
from pydantic import ValidationError
from rich.console import Console

from multicurl.adapters.driven.config.settings import load_settings
from multicurl.adapters.driven.console.report import render_report
from multicurl.adapters.driven.logging.logging_config import configure_logs
from multicurl.adapters.driving.request_builder import build_specs, select_body, validate_inputs
from multicurl.main import main
from multicurl.ports.request import HttpMethod

__all__ = ["cli"]

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130


@click.command()
@click.argument("urls", nargs=-1, required=True)
@click.option(
    "-m",
    "--method",
    type=click.Choice([m.value.lower() for m in HttpMethod], case_sensitive=False),
    default="get",
    show_default=True,
    help="HTTP method",
)
@click.option("-H", "--header", "headers", multiple=True, help="Header in 'Name: Value' format")
@click.option("-b", "--body", help="Raw request body")
@click.option("-j", "--json", "json_text", help="JSON request body")
@click.option("-f", "--form", help="Form body in 'a=1&b=2' format")
@click.option("-o", "--output", help="File, '{index}'/'{host}' template or directory for bodies")
@click.option("-l", "--latency", is_flag=True, help="Show elapsed time per request")
@click.option("-t", "--timeout", type=float, help="Per-attempt timeout in seconds")
@click.option("-c", "--concurrency", type=int, help="Requests in flight at once")
@click.option("-r", "--retries", type=int, help="Attempts per URL, first one included")
@click.option("--backoff", is_flag=True, help="Wait 0.2s, 0.5s, 1s between retries")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging on stderr")
def cli(
    urls: tuple[str, ...],
    method: str,
    headers: tuple[str, ...],
    body: str | None,
    json_text: str | None,
    form: str | None,
    output: str | None,
    latency: bool,
    timeout: float | None,
    concurrency: int | None,
    retries: int | None,
    backoff: bool,
    verbose: bool,
) -> None:
    """Send a request to every URL concurrently and report the responses.

    Exits 0 when every request got a 2xx/3xx response, 1 otherwise.

    Examples:
        multicurl https://example.com https://example.org
        multicurl https://api.example.com/users -m post -j '{"name": "test"}'
        multicurl https://example.com/a https://example.com/b -o 'out/{index}.html'
    """
    configure_logs(verbose)
    http_method = HttpMethod(method.upper())

    report = validate_inputs(http_method, headers, body=body, json_text=json_text, form=form)
    if report.has_warnings:
        logger.warning("; ".join(report.warnings))
    if report.has_errors:
        raise click.UsageError("; ".join(report.errors))

    try:
        settings = load_settings(
            timeout_sec=timeout,
            concurrency_limit=concurrency,
            max_attempts=retries,
            backoff=backoff,
            output_target=output,
            show_latency=latency,
        )
    except ValidationError as e:
        raise click.UsageError(f"Invalid configuration: {e}") from e

    specs = build_specs(
        urls,
        http_method,
        headers,
        select_body(http_method, body=body, json_text=json_text, form=form),
    )

    try:
        summary = asyncio.run(main(specs, settings.to_execution_config()))
    except KeyboardInterrupt:
        logger.warning("Interrupted; in-flight requests were abandoned")
        raise SystemExit(EXIT_INTERRUPTED)

    render_report(Console(), summary, settings.show_latency)
    raise SystemExit(summary.exit_code)
