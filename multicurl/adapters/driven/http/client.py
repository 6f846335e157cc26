"""HTTP transport adapter built on aiohttp."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from types import TracebackType

import aiohttp
from aiohttp import ClientResponse, ClientTimeout

from multicurl.adapters.driven.http.errors import translated_errors
from multicurl.ports.request import FormBody, JsonBody, RawBody, RequestSpec
from multicurl.ports.transport import TransportResponse

__all__ = ["HttpClient", "CHUNK_SIZE"]

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
JSON_CONTENT_TYPE = "application/json"


class HttpClient:
    """aiohttp-backed implementation of the transport port.

    Features:
    - One shared session for every request of the run.
    - Redirects are followed.
    - Body streamed in bounded chunks, never loaded whole.
    - aiohttp errors surfaced as transport port errors.
    """

    def __init__(self) -> None:
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "HttpClient":
        """Enter async context manager (start session).

        Returns:
            Self for use in async with statement.
        """
        self.session = aiohttp.ClientSession()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Exit async context manager (close session)."""
        if self.session:
            await self.session.close()

    @asynccontextmanager
    async def exchange(
        self, spec: RequestSpec, timeout_sec: float
    ) -> AsyncIterator[TransportResponse]:
        """Send one request and expose status, headers and body stream.

        Args:
            spec: Request to send.
            timeout_sec: Total time allowed for the exchange.

        Yields:
            Response with a lazily read body.

        Raises:
            RuntimeError: If session not initialized.
            TransportTimeout: On timeout.
            TransportError: On network or protocol errors.
        """
        if self.session is None:
            raise RuntimeError("Session not initialized; use 'async with' context manager")

        headers = list(spec.headers)
        data = _request_data(spec, headers)

        with translated_errors(spec.url):
            resp = await self.session.request(
                spec.method.value,
                spec.url,
                headers=headers,
                data=data,
                timeout=ClientTimeout(total=timeout_sec),
                allow_redirects=True,
            )
        logger.debug(f"{spec.method.value} {spec.url} -> {resp.status}")

        try:
            yield TransportResponse(
                status=resp.status,
                headers=tuple(resp.headers.items()),
                chunks=_iter_body(resp, spec.url),
            )
        finally:
            resp.release()


def _request_data(spec: RequestSpec, headers: list[tuple[str, str]]) -> object:
    """Return the aiohttp ``data`` argument for the spec body.

    Adds a JSON content type to ``headers`` unless the user set one.
    """
    body = spec.body
    if body is None:
        return None
    if isinstance(body, RawBody):
        return body.data
    if isinstance(body, JsonBody):
        if not any(name.lower() == "content-type" for name, _ in headers):
            headers.append(("Content-Type", JSON_CONTENT_TYPE))
        return body.text.encode("utf-8")
    if isinstance(body, FormBody):
        return aiohttp.FormData(list(body.fields))
    raise TypeError(f"Unsupported body type: {type(body).__name__}")


async def _iter_body(resp: ClientResponse, url: str) -> AsyncIterator[bytes]:
    """Yield the response body in chunks of at most CHUNK_SIZE bytes."""
    with translated_errors(url):
        async for chunk in resp.content.iter_chunked(CHUNK_SIZE):
            if chunk:
                yield chunk
