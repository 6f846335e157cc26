"""Sink streaming each body into its own file."""

import logging
import os
import re
from collections.abc import AsyncIterator
from pathlib import Path
from urllib.parse import urlsplit

from multicurl.ports.request import RequestSpec
from multicurl.ports.sink import ResponseSink, SinkReceipt, SinkWriteError

__all__ = ["FileSink", "resolve_output_path"]

logger = logging.getLogger(__name__)

INDEX_PLACEHOLDER = "{index}"
HOST_PLACEHOLDER = "{host}"
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _safe(part: str) -> str:
    return _UNSAFE_CHARS.sub("_", part).strip("_")


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Cannot remove partial file {path}: {e}")


def _url_name(url: str) -> tuple[str, str]:
    """Return filesystem-safe (host, path slug) for ``url``."""
    parts = urlsplit(url)
    host = _safe(parts.hostname or "") or "response"
    return host, _safe(parts.path)


def resolve_output_path(target: str, spec: RequestSpec, total: int) -> Path:
    """Compute where the body of ``spec`` goes so that no two specs share a file.

    Rules, first match wins:
    - ``target`` is a directory (existing, or ending with a separator):
      ``<dir>/<n>-<host>[_<path>]``.
    - Single request without placeholders: ``target`` as given.
    - Otherwise ``{index}`` and ``{host}`` are substituted; if ``{index}`` is
      absent, ``-<n>`` is appended to the file stem.

    ``n`` is the 1-based position of the URL on the command line.

    Args:
        target: Value of --output.
        spec: Request whose body is being saved.
        total: Number of requests in the run.

    Returns:
        Destination path.
    """
    n = spec.index + 1
    host, slug = _url_name(spec.url)

    if target.endswith(("/", os.sep)) or Path(target).is_dir():
        name = f"{n}-{host}_{slug}" if slug else f"{n}-{host}"
        return Path(target) / name

    has_index = INDEX_PLACEHOLDER in target
    if total <= 1 and not has_index and HOST_PLACEHOLDER not in target:
        return Path(target)

    path = Path(target.replace(INDEX_PLACEHOLDER, str(n)).replace(HOST_PLACEHOLDER, host))
    if not has_index and total > 1:
        path = path.with_name(f"{path.stem}-{n}{path.suffix}")
    return path


class FileSink(ResponseSink):
    """Writes bodies chunk by chunk; memory use does not grow with body size.

    Each call truncates its file, so a retried request never leaves bytes of
    an earlier attempt behind.
    """

    def __init__(self, target: str, *, total: int) -> None:
        """Initialize file sink.

        Args:
            target: Output file, template or directory.
            total: Number of requests sharing the target.
        """
        self.target = target
        self.total = total

    async def consume(self, spec: RequestSpec, chunks: AsyncIterator[bytes]) -> SinkReceipt:
        path = resolve_output_path(self.target, spec, self.total)
        written = 0
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("wb") as f:
                async for chunk in chunks:
                    f.write(chunk)
                    written += len(chunk)
        except OSError as e:
            _discard(path)
            raise SinkWriteError(f"Cannot write response of {spec.url} to {path}: {e}") from e
        except BaseException:
            # Broken stream or attempt timeout: no partial body stays on disk
            _discard(path)
            raise

        logger.info(f"Saved {written} bytes from {spec.url} to {path}")
        return SinkReceipt(bytes_written=written, saved_to=str(path))
