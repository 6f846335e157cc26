"""Request port definition (DTO)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = ["Body", "FormBody", "HttpMethod", "JsonBody", "RawBody", "RequestSpec"]


class HttpMethod(str, Enum):
    """HTTP methods accepted on the command line."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @property
    def allows_body(self) -> bool:
        return self in (HttpMethod.POST, HttpMethod.PUT)


@dataclass(slots=True, frozen=True)
class RawBody:
    """Body sent verbatim. An empty ``data`` still sends a zero-length body."""

    data: bytes


@dataclass(slots=True, frozen=True)
class JsonBody:
    """JSON document as typed by the user, validated before dispatch."""

    text: str


@dataclass(slots=True, frozen=True)
class FormBody:
    """Ordered form fields, sent urlencoded."""

    fields: tuple[tuple[str, str], ...]


Body = RawBody | JsonBody | FormBody | None


@dataclass(slots=True, frozen=True)
class RequestSpec:
    """One fully resolved HTTP request.

    Decouples the execution pipeline from how the request was described
    (command line, tests, ...).

    Attributes:
        index: Position of the URL on the command line (0-based).
        url: Target URL, not yet validated.
        method: HTTP method.
        headers: Ordered (name, value) pairs; duplicates are kept.
        body: Request body, or None to send no body at all.
    """

    index: int
    url: str
    method: HttpMethod = HttpMethod.GET
    headers: tuple[tuple[str, str], ...] = ()
    body: Body = None
