"""Sink keeping a bounded preview of each body for terminal display."""

from collections.abc import AsyncIterator

from multicurl.ports.request import RequestSpec
from multicurl.ports.settings import DEFAULT_PREVIEW_BYTES
from multicurl.ports.sink import ResponseSink, SinkReceipt

__all__ = ["PreviewBufferSink"]


class PreviewBufferSink(ResponseSink):
    """Keeps the first ``limit`` bytes of a body and counts the rest.

    Memory per request is bounded by ``limit`` plus one chunk.
    """

    def __init__(self, *, limit: int = DEFAULT_PREVIEW_BYTES) -> None:
        if limit < 0:
            raise ValueError(f"Preview limit must be >= 0 (got: {limit})")
        self.limit = limit

    async def consume(self, spec: RequestSpec, chunks: AsyncIterator[bytes]) -> SinkReceipt:
        preview = bytearray()
        total = 0
        async for chunk in chunks:
            total += len(chunk)
            room = self.limit - len(preview)
            if room > 0:
                preview += chunk[:room]
        return SinkReceipt(bytes_written=total, preview=bytes(preview))
