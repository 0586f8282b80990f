from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Optional

from loguru import logger as _loguru_logger

from .errors import NoRendererConfiguredError, UninitializedTraceError
from .options import RenderOptions
from .renderers import Renderer
from .trace import Checkpoint, Trace

DEFAULT_MESSAGE_FORMAT = "function:[{}]|sinceStart:[{}]|duration:[{}]|"

_clock = time.perf_counter_ns


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _check_name(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValueError("checkpoint name must be a non-empty string")
    return name.strip()


def _check_message_format(fmt: str) -> str:
    if not isinstance(fmt, str):
        raise ValueError("message_format must be a string")
    try:
        fmt.format("name", "0s", "0s")
    except (AttributeError, IndexError, KeyError, ValueError) as exc:
        raise ValueError(
            "message_format takes three positional fields: name, since start, duration"
        ) from exc
    return fmt


class Tracker:
    """
    Records checkpoints for one unit of work and renders them on demand.

        tracker = Tracker.start("handle_request")
        ...
        tracker.checkpoint("load_user")
        ...
        tracker.checkpoint("save", err)

        tracker.set_options(RenderOptions().with_name().with_duration())
        tracker.set_renderer(TableRenderer(sys.stdout, divider=20))
        tracker.render()

    Notes:
    - One tracker per call sequence; it does no locking.
    - Checkpoint lines go to Loguru when loggable is set, tagged with
      extra["event"] == "checkpoint_tracker".
    """

    def __init__(
        self,
        *,
        logger=None,
        loggable: bool = False,
        message_format: str = DEFAULT_MESSAGE_FORMAT,
        level: str = "DEBUG",
    ) -> None:
        self._logger = logger if logger is not None else _loguru_logger
        self._trace = Trace()

        self._loggable: bool = bool(loggable)
        self._message_format: str = _check_message_format(message_format)
        self._level: str = str(level)

        self._options = RenderOptions()
        self._renderer: Optional[Renderer] = None

    @classmethod
    def start(cls, name: str, **kwargs) -> "Tracker":
        """Create a tracker and record its first checkpoint (zero durations)."""
        tracker = cls(**kwargs)
        first = Checkpoint(name=_check_name(name), timestamp=_now(), mark_ns=_clock())
        tracker._trace.append(first)
        tracker._emit(first)
        return tracker

    def checkpoint(self, name: str, err: Optional[BaseException] = None) -> Checkpoint:
        """
        Append a checkpoint measured against the previous and the first one.

        err is stored as-is and only shows up in rendered output.
        """
        if not self._trace:
            raise UninitializedTraceError()
        name = _check_name(name)

        mark = _clock()
        checkpoint = Checkpoint(
            name=name,
            timestamp=_now(),
            duration_ns=mark - self._trace.last.mark_ns,
            since_start_ns=mark - self._trace.first.mark_ns,
            error=err,
            mark_ns=mark,
        )
        self._trace.append(checkpoint)
        self._emit(checkpoint)
        return checkpoint

    # -----------------------------
    # Accessors
    # -----------------------------
    @property
    def trace(self) -> Trace:
        return self._trace

    @property
    def logger(self):
        """Logger receiving checkpoint lines; add or remove its sinks here."""
        return self._logger

    @property
    def options(self) -> RenderOptions:
        return self._options

    @property
    def renderer(self) -> Optional[Renderer]:
        return self._renderer

    @property
    def message_format(self) -> str:
        return self._message_format

    # -----------------------------
    # Configuration
    # -----------------------------
    def configure(
        self,
        *,
        loggable: Optional[bool] = None,
        message_format: Optional[str] = None,
        level: Optional[str] = None,
        options: Optional[RenderOptions] = None,
    ) -> "Tracker":
        """
        Configure tracker-owned behavior.

        loggable:
            If True, emits one log line per checkpoint.
        message_format:
            str.format template with (name, since start, duration).
        level:
            Loguru level used for checkpoint lines.
        options:
            RenderOptions passed to the renderer.
        """
        if loggable is not None:
            self._loggable = bool(loggable)
        if message_format is not None:
            self._message_format = _check_message_format(message_format)
        if level is not None:
            self._level = str(level)
        if options is not None:
            self.set_options(options)
        return self

    def set_message_format(self, fmt: str) -> None:
        self._message_format = _check_message_format(fmt)

    def set_options(self, options: Optional[RenderOptions] = None) -> RenderOptions:
        if options is None:
            options = RenderOptions()
        elif not isinstance(options, RenderOptions):
            raise ValueError("options must be a RenderOptions instance")
        self._options = options
        return options

    def set_renderer(self, renderer: Renderer) -> "Tracker":
        self._renderer = renderer
        return self

    def add_event_sink(self, sink, **add_kwargs) -> int:
        """
        Optional convenience: add a Loguru sink that receives ONLY tracker events.

        Example:
            tracker.add_event_sink("checkpoints.log", rotation="10 MB")
        """
        def _only_tracker_events(record) -> bool:
            return record.get("extra", {}).get("event") == "checkpoint_tracker"

        return self._logger.add(sink, filter=_only_tracker_events, **add_kwargs)

    # -----------------------------
    # Output
    # -----------------------------
    def render(self) -> None:
        if self._renderer is None:
            raise NoRendererConfiguredError()
        self._renderer.render(self._trace, self._options)

    def _emit(self, checkpoint: Checkpoint) -> None:
        if not self._loggable:
            return
        self._logger.bind(
            event="checkpoint_tracker",
            kind="checkpoint",
            name=checkpoint.name,
            duration_ns=checkpoint.duration_ns,
            since_start_ns=checkpoint.since_start_ns,
        ).log(
            self._level,
            self._message_format,
            checkpoint.name,
            checkpoint.since_start,
            checkpoint.duration,
        )
