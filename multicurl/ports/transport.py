"""Transport port definition (interface, DTO and errors)."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Protocol

from multicurl.ports.request import RequestSpec

__all__ = ["TransportError", "TransportPort", "TransportResponse", "TransportTimeout"]


class TransportError(Exception):
    """The exchange failed below HTTP (DNS, refused connection, TLS, broken stream)."""


class TransportTimeout(TransportError):
    """The exchange did not complete within the allowed time."""


@dataclass(slots=True)
class TransportResponse:
    """Response head plus the body as a chunk stream.

    Attributes:
        status: HTTP status code.
        headers: Response headers in wire order.
        chunks: Body chunks; may raise TransportError while iterating.
    """

    status: int
    headers: tuple[tuple[str, str], ...]
    chunks: AsyncIterator[bytes]


class TransportPort(Protocol):
    """Interface for performing a single HTTP exchange.

    The response is only valid inside the context; leaving it releases the
    underlying connection.
    """

    def exchange(
        self, spec: RequestSpec, timeout_sec: float
    ) -> AbstractAsyncContextManager[TransportResponse]:
        """Send ``spec`` and expose the response.

        Args:
            spec: Request to send.
            timeout_sec: Time allowed for the whole exchange.

        Raises:
            TransportTimeout: If the exchange timed out.
            TransportError: On any other transport-level failure.
        """
        ...
