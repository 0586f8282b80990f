"""
Shared pytest fixtures for checkpoint-tracker tests.
"""

from datetime import datetime, timezone

import pytest
from loguru import logger

import checkpoint_tracker.tracker as tracker_module
from checkpoint_tracker import Checkpoint, Trace


class FakeClock:
    """Stand-in for time.perf_counter_ns that only moves when told to."""

    def __init__(self, start_ns: int = 1_000_000) -> None:
        self.now = start_ns

    def advance(self, ns: int) -> None:
        self.now += ns

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    fake = FakeClock()
    monkeypatch.setattr(tracker_module, "_clock", fake)
    return fake


@pytest.fixture
def log_records():
    """Collects loguru records emitted while the test runs."""
    records = []
    sink_id = logger.add(lambda message: records.append(message.record), level="TRACE", format="{message}")
    yield records
    logger.remove(sink_id)


def make_trace(*durations_ns, errors=None) -> Trace:
    """
    Build a trace directly from per-checkpoint durations.

    The first duration should be 0; since_start is the running sum.
    """
    errors = errors or {}
    trace = Trace()
    since = 0
    for i, duration in enumerate(durations_ns):
        since += duration
        trace.append(
            Checkpoint(
                name=f"step{i}",
                timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
                duration_ns=duration,
                since_start_ns=since,
                error=errors.get(i),
                mark_ns=since,
            )
        )
    return trace


@pytest.fixture
def trace_factory():
    return make_trace
