"""Tests for bounded-concurrency dispatch."""

import asyncio

import pytest

from multicurl.core.dispatcher import dispatch_all
from multicurl.ports.outcome import ErrorKind, RequestOutcome
from multicurl.ports.request import RequestSpec

__all__ = []


def make_specs(n: int) -> list[RequestSpec]:
    """Create ``n`` GET specs with distinct URLs."""
    return [RequestSpec(index=i, url=f"http://test/{i}") for i in range(n)]


class InstrumentedExecutor:
    """Executor stub recording concurrency high-water mark and start order."""

    def __init__(self, delay_sec: float = 0.01) -> None:
        """Initialize executor that sleeps ``delay_sec`` per request."""
        self.delay_sec = delay_sec
        self.active = 0
        self.high_water = 0
        self.started: list[int] = []

    async def __call__(self, spec: RequestSpec) -> RequestOutcome:
        """Record start order and the number of concurrent executions."""
        self.active += 1
        self.high_water = max(self.high_water, self.active)
        self.started.append(spec.index)
        try:
            await asyncio.sleep(self.delay_sec)
        finally:
            self.active -= 1
        return RequestOutcome(index=spec.index, url=spec.url, final_status=200, attempts_made=1)


@pytest.mark.asyncio
@pytest.mark.parametrize(("n", "k"), [(1, 1), (3, 2), (7, 2), (10, 3), (4, 10)])
async def test_dispatch_returns_one_outcome_per_spec(n: int, k: int) -> None:
    """Every spec should yield exactly one outcome."""
    executor = InstrumentedExecutor()

    outcomes = await dispatch_all(make_specs(n), k, executor)

    assert len(outcomes) == n
    assert sorted(o.index for o in outcomes) == list(range(n))


@pytest.mark.asyncio
@pytest.mark.parametrize(("n", "k"), [(5, 1), (7, 2), (10, 3)])
async def test_dispatch_never_exceeds_concurrency_limit(n: int, k: int) -> None:
    """No more than K executions should be active at once."""
    executor = InstrumentedExecutor()

    await dispatch_all(make_specs(n), k, executor)

    assert executor.high_water == k


@pytest.mark.asyncio
async def test_dispatch_admits_in_submission_order() -> None:
    """Queued specs should start in FIFO order."""
    executor = InstrumentedExecutor(delay_sec=0)

    await dispatch_all(make_specs(6), 1, executor)

    assert executor.started == list(range(6))


@pytest.mark.asyncio
async def test_dispatch_collects_in_completion_order() -> None:
    """Outcomes should be listed as they complete, not as submitted."""

    async def execute(spec: RequestSpec) -> RequestOutcome:
        """Finish the first spec last."""
        await asyncio.sleep(0.05 if spec.index == 0 else 0)
        return RequestOutcome(index=spec.index, url=spec.url, final_status=200, attempts_made=1)

    outcomes = await dispatch_all(make_specs(2), 2, execute)

    assert [o.index for o in outcomes] == [1, 0]


@pytest.mark.asyncio
async def test_dispatch_isolates_unexpected_failures() -> None:
    """An exception in one execution should not stop the others."""

    async def execute(spec: RequestSpec) -> RequestOutcome:
        """Fail on the second spec only."""
        if spec.index == 1:
            raise RuntimeError("boom")
        return RequestOutcome(index=spec.index, url=spec.url, final_status=200, attempts_made=1)

    outcomes = await dispatch_all(make_specs(3), 2, execute)

    by_index = {o.index: o for o in outcomes}
    assert len(outcomes) == 3
    assert by_index[1].error is ErrorKind.TRANSPORT_ERROR
    assert "boom" in (by_index[1].detail or "")
    assert by_index[0].is_success and by_index[2].is_success


@pytest.mark.asyncio
async def test_dispatch_empty_input() -> None:
    """No specs should give no outcomes."""
    executor = InstrumentedExecutor()

    assert await dispatch_all([], 3, executor) == []


@pytest.mark.asyncio
async def test_dispatch_rejects_non_positive_limit() -> None:
    """A concurrency limit below one should be rejected."""
    with pytest.raises(ValueError, match="concurrency_limit"):
        await dispatch_all(make_specs(1), 0, InstrumentedExecutor())
