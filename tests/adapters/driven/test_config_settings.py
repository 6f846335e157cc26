"""Tests for configuration loading and validation."""

import pytest
from pydantic import ValidationError

from multicurl.adapters.driven.config.settings import (
    DEFAULT_CONCURRENCY,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_TIMEOUT_SEC,
    Settings,
    load_settings,
)
from multicurl.core.retry import DEFAULT_BACKOFF_SEC
from multicurl.ports.settings import RetryCondition

__all__ = []


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove MULTICURL_* variables set outside the test."""
    for name in (
        "MULTICURL_TIMEOUT",
        "MULTICURL_CONCURRENCY",
        "MULTICURL_RETRIES",
        "MULTICURL_PREVIEW_BYTES",
    ):
        monkeypatch.delenv(name, raising=False)


def test_load_settings_defaults() -> None:
    """Without env or overrides the documented defaults should apply."""
    settings = load_settings()

    assert settings.timeout_sec == DEFAULT_TIMEOUT_SEC
    assert settings.concurrency_limit == DEFAULT_CONCURRENCY
    assert settings.max_attempts == DEFAULT_MAX_ATTEMPTS
    assert settings.output_target is None
    assert settings.preview_bytes == 500


def test_load_settings_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment variables should provide defaults."""
    monkeypatch.setenv("MULTICURL_TIMEOUT", "2.5")
    monkeypatch.setenv("MULTICURL_CONCURRENCY", "3")
    monkeypatch.setenv("MULTICURL_RETRIES", "1")
    monkeypatch.setenv("MULTICURL_PREVIEW_BYTES", "64")

    settings = load_settings()

    assert settings.timeout_sec == 2.5
    assert settings.concurrency_limit == 3
    assert settings.max_attempts == 1
    assert settings.preview_bytes == 64


def test_load_settings_overrides_win_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Explicit values should override the environment; None should not."""
    monkeypatch.setenv("MULTICURL_CONCURRENCY", "3")
    monkeypatch.setenv("MULTICURL_TIMEOUT", "7")

    settings = load_settings(concurrency_limit=5, timeout_sec=None)

    assert settings.concurrency_limit == 5
    assert settings.timeout_sec == 7


@pytest.mark.parametrize(
    "overrides",
    [{"timeout_sec": 0}, {"concurrency_limit": 0}, {"max_attempts": 0}, {"preview_bytes": -1}],
)
def test_load_settings_rejects_out_of_range(overrides: dict[str, int]) -> None:
    """Out of range values should fail validation."""
    with pytest.raises(ValidationError):
        load_settings(**overrides)


def test_load_settings_rejects_malformed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """A non-numeric env value should fail validation."""
    monkeypatch.setenv("MULTICURL_CONCURRENCY", "many")

    with pytest.raises(ValidationError):
        load_settings()


def test_to_execution_config_immediate_retry() -> None:
    """Without backoff the policy should retry immediately on every condition."""
    config = Settings(max_attempts=3, output_target="out.json", show_latency=True).to_execution_config()

    assert config.retry_policy.max_attempts == 3
    assert config.retry_policy.retry_on == frozenset(RetryCondition)
    assert config.retry_policy.backoff_sec == ()
    assert config.output_target == "out.json"
    assert config.show_latency is True


def test_to_execution_config_with_backoff() -> None:
    """Backoff should install the default delay schedule."""
    config = Settings(backoff=True).to_execution_config()

    assert config.retry_policy.backoff_sec == DEFAULT_BACKOFF_SEC
