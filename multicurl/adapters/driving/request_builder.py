"""Turns raw command-line values into request specs."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from urllib.parse import parse_qsl

from multicurl.ports.request import Body, FormBody, HttpMethod, JsonBody, RawBody, RequestSpec

__all__ = [
    "ValidationReport",
    "build_specs",
    "parse_form",
    "parse_header",
    "select_body",
    "validate_inputs",
]

logger = logging.getLogger(__name__)


@dataclass
class ValidationReport:
    """Problems found in the command line before anything is sent.

    Errors abort the run; warnings are only reported.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


def parse_header(raw: str) -> tuple[str, str]:
    """Split ``"Name: Value"`` at the first colon, trimming both sides.

    Empty names and values are allowed.

    Raises:
        ValueError: If there is no colon.
    """
    name, sep, value = raw.partition(":")
    if not sep:
        raise ValueError(f"invalid KEY:VALUE: no `:` found in `{raw}`")
    return name.strip(), value.strip()


def parse_form(raw: str) -> tuple[tuple[str, str], ...]:
    """Parse ``a=1&b=2`` into ordered pairs; blank values are kept."""
    return tuple(parse_qsl(raw, keep_blank_values=True))


def validate_inputs(
    method: HttpMethod,
    headers: Sequence[str] = (),
    body: str | None = None,
    json_text: str | None = None,
    form: str | None = None,
) -> ValidationReport:
    """Check flag combinations.

    URL and JSON validity are left to the executor, so one bad URL does not
    stop the others.
    """
    report = ValidationReport()

    for raw in headers:
        try:
            parse_header(raw)
        except ValueError as e:
            report.errors.append(str(e))

    given = [source for source in (body, json_text, form) if source is not None]
    if len(given) > 1:
        report.errors.append("Can't have more than one of body, json, and form")

    if given and not method.allows_body:
        report.warnings.append(f"Body not allowed for {method.value}; it will not be sent")

    return report


def select_body(
    method: HttpMethod,
    body: str | None = None,
    json_text: str | None = None,
    form: str | None = None,
) -> Body:
    """Return the body to send, or None for GET/DELETE and when none was given."""
    if not method.allows_body:
        return None
    if json_text is not None:
        return JsonBody(json_text)
    if form is not None:
        return FormBody(parse_form(form))
    if body is not None:
        return RawBody(body.encode("utf-8"))
    return None


def build_specs(
    urls: Sequence[str],
    method: HttpMethod,
    headers: Sequence[str] = (),
    body: Body = None,
) -> list[RequestSpec]:
    """Create one spec per URL, all sharing method, headers and body."""
    parsed_headers = tuple(parse_header(raw) for raw in headers)
    specs = [
        RequestSpec(index=i, url=url, method=method, headers=parsed_headers, body=body)
        for i, url in enumerate(urls)
    ]
    logger.debug(f"Built {len(specs)} request spec(s) for {method.value}")
    return specs
