"""Configuration loading from environment variables and CLI overrides."""

import logging
import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from multicurl.core.retry import DEFAULT_BACKOFF_SEC
from multicurl.ports.settings import (
    DEFAULT_PREVIEW_BYTES,
    ExecutionConfig,
    RetryCondition,
    RetryPolicy,
)

__all__ = ["Settings", "load_settings"]

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 10.0
DEFAULT_CONCURRENCY = 8
# One attempt plus three retries
DEFAULT_MAX_ATTEMPTS = 4

_ENV_VARS = {
    "timeout_sec": "MULTICURL_TIMEOUT",
    "concurrency_limit": "MULTICURL_CONCURRENCY",
    "max_attempts": "MULTICURL_RETRIES",
    "preview_bytes": "MULTICURL_PREVIEW_BYTES",
}


class Settings(BaseModel):
    """Runtime configuration for one invocation.

    Attributes:
        timeout_sec: Per-attempt timeout in seconds (must be positive).
        concurrency_limit: Requests allowed in flight at once.
        max_attempts: Attempts per request, first one included.
        backoff: Wait between retries instead of retrying immediately.
        output_target: File, template or directory for bodies.
        show_latency: Report elapsed time per request.
        preview_bytes: Body bytes shown on the terminal.
    """

    timeout_sec: float = Field(default=DEFAULT_TIMEOUT_SEC, gt=0, description="Per-attempt timeout.")
    concurrency_limit: int = Field(default=DEFAULT_CONCURRENCY, ge=1, description="Max in flight.")
    max_attempts: int = Field(default=DEFAULT_MAX_ATTEMPTS, ge=1, description="Attempts per URL.")
    backoff: bool = Field(default=False, description="Delay retries (0.2s, 0.5s, 1s).")
    output_target: str | None = Field(
        default=None,
        description="Where to save bodies; None prints a preview instead.",
    )
    show_latency: bool = Field(default=False, description="Show elapsed time per request.")
    preview_bytes: int = Field(default=DEFAULT_PREVIEW_BYTES, ge=0, description="Preview size.")

    def to_execution_config(self) -> ExecutionConfig:
        """Freeze settings into the config shared by all request tasks."""
        return ExecutionConfig(
            timeout_sec=self.timeout_sec,
            concurrency_limit=self.concurrency_limit,
            retry_policy=RetryPolicy(
                max_attempts=self.max_attempts,
                retry_on=frozenset(RetryCondition),
                backoff_sec=DEFAULT_BACKOFF_SEC if self.backoff else (),
            ),
            output_target=self.output_target,
            show_latency=self.show_latency,
            preview_bytes=self.preview_bytes,
        )


def load_settings(**overrides: Any) -> Settings:
    """Load and validate settings.

    Defaults come from the environment (a ``.env`` file is honoured);
    overrides that are not None win over both.

    Optional environment variables:
    - MULTICURL_TIMEOUT: Per-attempt timeout in seconds.
    - MULTICURL_CONCURRENCY: Requests in flight at once.
    - MULTICURL_RETRIES: Attempts per request.
    - MULTICURL_PREVIEW_BYTES: Body bytes shown on the terminal.

    Returns:
        Validated Settings object.

    Raises:
        pydantic.ValidationError: If a value is out of range or malformed.
    """
    values: dict[str, Any] = {}
    for field_name, env_name in _ENV_VARS.items():
        raw = os.getenv(env_name)
        if raw:
            values[field_name] = raw
    values.update({k: v for k, v in overrides.items() if v is not None})

    settings = Settings(**values)

    logger.debug(
        f"multicurl configured: timeout={settings.timeout_sec}s, "
        f"concurrency={settings.concurrency_limit}, "
        f"attempts={settings.max_attempts}, "
        f"backoff={settings.backoff}, "
        f"output={settings.output_target or '<stdout>'}"
    )
    return settings
