from datetime import datetime, timezone

import pytest

from checkpoint_tracker import Checkpoint, Trace, format_duration

@pytest.mark.parametrize(
    "ns, expected",
    [
        (0, "0s"),
        (1, "1ns"),
        (999, "999ns"),
        (1_000, "1µs"),
        (12_500, "12.5µs"),
        (1_230_000, "1.23ms"),
        (500_000_000, "500ms"),
        (1_000_000_000, "1s"),
        (1_500_000_000, "1.5s"),
        (90_500_000_000, "1m30.5s"),
        (3_600_000_000_000, "1h0m0s"),
        (3_723_000_000_000, "1h2m3s"),
        (-1_500_000, "-1.5ms"),
    ],
)
def test_format_duration(ns, expected):
    assert format_duration(ns) == expected


def test_checkpoint_is_immutable():
    c = Checkpoint(name="a", timestamp=datetime.now(timezone.utc))
    with pytest.raises(AttributeError):
        c.name = "b"


def test_checkpoint_formatting_helpers():
    c = Checkpoint(
        name="a",
        timestamp=datetime.now(timezone.utc),
        duration_ns=1_230_000,
        since_start_ns=2_000_000_000,
        error=ValueError("boom"),
    )
    assert c.duration == "1.23ms"
    assert c.since_start == "2s"
    assert c.error_message == "boom"


def test_checkpoint_without_error_has_empty_message():
    c = Checkpoint(name="a", timestamp=datetime.now(timezone.utc))
    assert c.error_message == ""


def test_empty_trace():
    trace = Trace()
    assert len(trace) == 0
    assert not trace
    assert trace.first is None
    assert trace.last is None
    assert trace.max_duration() == 0
    assert trace.min_duration() == 0


def test_trace_keeps_insertion_order(trace_factory):
    trace = trace_factory(0, 30, 10, 20)
    assert [c.name for c in trace] == ["step0", "step1", "step2", "step3"]
    assert trace.first.name == "step0"
    assert trace.last.name == "step3"
    assert trace[2].duration_ns == 10


def test_single_checkpoint_statistics_are_zero(trace_factory):
    trace = trace_factory(0)
    assert trace.max_duration() == 0
    assert trace.min_duration() == 0


def test_max_duration_bounds_every_checkpoint(trace_factory):
    trace = trace_factory(0, 30, 10, 20)
    assert trace.max_duration() == 30
    assert all(trace.max_duration() >= c.duration_ns for c in trace)


def test_min_duration_skips_first_checkpoint(trace_factory):
    trace = trace_factory(0, 30, 10, 20)
    assert trace.min_duration() == 10


def test_min_duration_with_two_checkpoints(trace_factory):
    assert trace_factory(0, 7).min_duration() == 7
