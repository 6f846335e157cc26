"""Terminal rendering of outcomes and the batch summary."""

import codecs

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from multicurl.core.aggregator import Summary, is_ok
from multicurl.ports.outcome import RequestOutcome

__all__ = ["describe_body", "render_outcome", "render_report", "render_summary"]


def describe_body(preview: bytes | None, total: int) -> str:
    """Return displayable body text.

    Bodies that are not valid UTF-8 are reported by size only.
    """
    if not preview:
        return ""
    truncated = total > len(preview)
    try:
        # A truncated preview may end inside a multi-byte character
        text = codecs.getincrementaldecoder("utf-8")().decode(preview, final=not truncated)
    except UnicodeDecodeError:
        return f"<{total} bytes of binary data>"
    if truncated:
        text += f"\n... ({total - len(preview)} more bytes)"
    return text


def _status_text(outcome: RequestOutcome) -> str:
    if outcome.final_status is not None and outcome.error is None:
        return str(outcome.final_status)
    if outcome.final_status is not None:
        return f"{outcome.final_status} ({outcome.error.value})"
    return outcome.error.value if outcome.error else "-"


def render_outcome(console: Console, outcome: RequestOutcome, show_latency: bool) -> None:
    """Print status, headers and body (or saved path) of one response."""
    color = "green" if is_ok(outcome) else "red"
    console.print(f"[cyan]{escape(outcome.url)}[/cyan]")

    if outcome.final_status is None:
        console.print(f"  [{color}]Error:[/{color}] {escape(outcome.detail or '')}")
    else:
        console.print(f"  [{color}]Status: {outcome.final_status}[/{color}]")
        console.print(f"  Content-Length: {outcome.bytes_transferred}")
        for name, value in outcome.headers:
            console.print(f"  [dim]{escape(name)}:[/dim] {escape(value)}")
        if outcome.saved_to:
            console.print(f"  [green]Saved to {escape(outcome.saved_to)}[/green]")
        else:
            body = describe_body(outcome.preview, outcome.bytes_transferred)
            if body:
                console.print("  Body:")
                console.print(body, markup=False, highlight=False)

    if show_latency:
        console.print(f"  Latency: {outcome.elapsed_sec * 1000:.0f} ms")
    console.print()


def render_summary(console: Console, summary: Summary, show_latency: bool) -> None:
    """Print one row per request, in command-line order."""
    table = Table(box=None)
    table.add_column("#", style="dim")
    table.add_column("URL", style="cyan")
    table.add_column("Status", style="white")
    table.add_column("Attempts", style="white")
    table.add_column("Bytes", style="white")
    if show_latency:
        table.add_column("Elapsed", style="white")

    for outcome in summary.rows:
        status = _status_text(outcome)
        status_str = f"[green]{status}[/green]" if is_ok(outcome) else f"[red]{escape(status)}[/red]"
        row = [
            str(outcome.index + 1),
            escape(outcome.url),
            status_str,
            str(outcome.attempts_made),
            str(outcome.bytes_transferred),
        ]
        if show_latency:
            row.append(f"{outcome.elapsed_sec * 1000:.0f} ms")
        table.add_row(*row)

    console.print(table)
    console.print(
        f"\n{summary.succeeded} succeeded, {summary.failed} failed, "
        f"{summary.total_bytes} bytes received"
    )


def render_report(console: Console, summary: Summary, show_latency: bool) -> None:
    """Print every response followed by the summary table."""
    for outcome in summary.rows:
        render_outcome(console, outcome, show_latency)
    render_summary(console, summary, show_latency)
