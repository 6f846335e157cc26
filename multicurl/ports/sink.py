"""Response sink port definition (interface and DTO)."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol

from multicurl.ports.request import RequestSpec

__all__ = ["ResponseSink", "SinkReceipt", "SinkWriteError"]


class SinkWriteError(Exception):
    """Writing a response body to its destination failed."""


@dataclass(slots=True, frozen=True)
class SinkReceipt:
    """What a sink did with one response body.

    Attributes:
        bytes_written: Total body size, whatever part of it was kept.
        preview: Leading bytes kept for display, if any.
        saved_to: Destination path, if the body went to a file.
    """

    bytes_written: int
    preview: bytes | None = None
    saved_to: str | None = None


class ResponseSink(Protocol):
    """Destination for response bodies.

    One implementation is selected per run so the executor never has to
    know where bytes end up.
    """

    async def consume(self, spec: RequestSpec, chunks: AsyncIterator[bytes]) -> SinkReceipt:
        """Drain ``chunks`` into the destination.

        Args:
            spec: Request the body belongs to.
            chunks: Body stream.

        Returns:
            Receipt describing the delivered body.

        Raises:
            SinkWriteError: If the destination could not be written.
            TransportError: Propagated from ``chunks`` when the stream breaks.
        """
        ...
