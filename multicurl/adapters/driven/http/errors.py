"""Translation of aiohttp failures into transport port errors."""

import asyncio
from collections.abc import Iterator
from contextlib import contextmanager

import aiohttp

from multicurl.ports.transport import TransportError, TransportTimeout

__all__ = ["translated_errors"]


@contextmanager
def translated_errors(url: str) -> Iterator[None]:
    """Re-raise aiohttp exceptions as TransportTimeout / TransportError.

    Connection, payload, malformed-response and URL errors all derive from
    ``aiohttp.ClientError``.

    Args:
        url: Request URL, used in error messages.

    Raises:
        TransportTimeout: On aiohttp or asyncio timeouts.
        TransportError: On any other aiohttp client error.
    """
    try:
        yield
    except (aiohttp.ServerTimeoutError, asyncio.TimeoutError) as e:
        raise TransportTimeout(f"Timeout talking to {url}") from e
    except aiohttp.ClientError as e:
        raise TransportError(f"{type(e).__name__}: {e}") from e
