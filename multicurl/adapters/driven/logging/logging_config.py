"""Console logging setup for multicurl."""

import logging
import sys

__all__ = ["configure_logs"]


def configure_logs(verbose: bool = False) -> None:
    """Configure console logging.

    Sets up:
    - A single stderr handler; stdout is left to response output.
    - Root logger at WARNING level.
    - Framework loggers (aiohttp, asyncio) at WARNING level.
    - Application loggers (multicurl) at DEBUG level when verbose.
    - Format with timestamp, level, module, and line number.

    Args:
        verbose: Emit debug and info messages from multicurl.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"
    date_format = "%d/%m/%y %H:%M:%S"

    formatter = logging.Formatter(log_format, date_format)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    # Root logger
    root = logging.getLogger()
    root.setLevel(logging.WARNING)
    root.addHandler(handler)

    # Suppress verbose framework loggers
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    # Application loggers
    logging.getLogger("multicurl").setLevel(logging.DEBUG if verbose else logging.WARNING)
