from __future__ import annotations


class TrackerError(RuntimeError):
    """Base class for errors raised by the tracker itself."""


class UninitializedTraceError(TrackerError):
    def __init__(self) -> None:
        super().__init__("trace is empty: create the tracker with Tracker.start(name) before checkpoint()")


class NoRendererConfiguredError(TrackerError):
    def __init__(self) -> None:
        super().__init__("no renderer configured: call set_renderer() before render()")
