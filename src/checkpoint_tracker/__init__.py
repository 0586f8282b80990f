"""
Checkpoint Tracker

Usage:
    import sys
    from checkpoint_tracker import RenderOptions, TableRenderer, start

    tracker = start("handle_request", loggable=True)  # one line per checkpoint
    tracker.checkpoint("load_user")
    tracker.checkpoint("save", err)

    tracker.set_options(RenderOptions().with_name().with_duration().with_track())
    tracker.set_renderer(TableRenderer(sys.stdout, divider=20))
    tracker.render()
"""

from .errors import NoRendererConfiguredError, TrackerError, UninitializedTraceError
from .options import RenderOptions
from .renderers import JSONRenderer, Renderer, TableRenderer
from .trace import Checkpoint, Trace, format_duration
from .tracker import DEFAULT_MESSAGE_FORMAT, Tracker

start = Tracker.start

__all__ = [
    "Checkpoint",
    "DEFAULT_MESSAGE_FORMAT",
    "JSONRenderer",
    "NoRendererConfiguredError",
    "RenderOptions",
    "Renderer",
    "TableRenderer",
    "Trace",
    "Tracker",
    "TrackerError",
    "UninitializedTraceError",
    "format_duration",
    "start",
]
