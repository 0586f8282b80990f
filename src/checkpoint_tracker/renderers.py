from __future__ import annotations

import io
import json
import sys
from abc import ABC, abstractmethod
from typing import IO, Any, Dict, List, Optional

from loguru import logger as _loguru_logger
from rich.box import ROUNDED
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .options import RenderOptions
from .trace import Checkpoint, Trace

HEADERS = {
    "name": "func.name",
    "since_start": "since.start",
    "duration": "duration",
    "errors": "errors",
    "track": "track",
}


class Renderer(ABC):
    """
    Output strategy for a finished (or in-progress) trace.

    The sink is chosen when the renderer is built; render() only gets the data.
    Sinks may be text or binary streams; write failures are logged, never raised.
    """

    def __init__(self, out: Optional[IO] = None, *, logger=None) -> None:
        self.out = out if out is not None else sys.stdout
        self._logger = logger if logger is not None else _loguru_logger

    @abstractmethod
    def render(self, trace: Trace, options: RenderOptions) -> None:
        raise NotImplementedError

    def _log(self):
        return self._logger.bind(event="checkpoint_tracker", kind="render")

    def _write(self, payload: str) -> None:
        try:
            if isinstance(self.out, (io.RawIOBase, io.BufferedIOBase)):
                self.out.write(payload.encode("utf-8"))
            else:
                self.out.write(payload)
        except (OSError, TypeError, ValueError) as exc:
            self._log().error("error writing trace: {}", exc)


class TableRenderer(Renderer):
    """
    Renders the columns enabled in RenderOptions as a table via rich.

    divider:
        How many track markers the slowest checkpoint gets. 0 disables the track.
    """

    def __init__(
        self,
        out: Optional[IO] = None,
        *,
        divider: int = 10,
        marker: str = "*",
        title: Optional[str] = None,
        width: Optional[int] = None,
        logger=None,
    ) -> None:
        if isinstance(divider, bool) or not isinstance(divider, int) or divider < 0:
            raise ValueError("divider must be a non-negative integer")
        if not isinstance(marker, str) or not marker:
            raise ValueError("marker must be a non-empty string")
        super().__init__(out, logger=logger)
        self.divider = divider
        self.marker = marker
        self.title = title
        self.width = width

    def headers(self, options: RenderOptions) -> List[str]:
        return [HEADERS[column] for column in options.columns()]

    def track(self, checkpoint: Checkpoint, max_duration_ns: int) -> str:
        # floor(duration / (max / divider)), kept in integers
        if self.divider == 0 or max_duration_ns <= 0:
            return ""
        return self.marker * (checkpoint.duration_ns * self.divider // max_duration_ns)

    def rows(self, trace: Trace, options: RenderOptions) -> List[List[str]]:
        max_duration = trace.max_duration()
        out: List[List[str]] = []
        for checkpoint in trace:
            cells = {
                "name": checkpoint.name,
                "since_start": checkpoint.since_start,
                "duration": checkpoint.duration,
                "errors": checkpoint.error_message,
                "track": self.track(checkpoint, max_duration),
            }
            out.append([cells[column] for column in options.columns()])
        return out

    def build_table(self, trace: Trace, options: RenderOptions) -> Table:
        table = Table(title=self.title, box=ROUNDED)
        for header in self.headers(options):
            table.add_column(header, no_wrap=True)
        for row in self.rows(trace, options):
            # Text() keeps names like "load[0]" from being parsed as markup
            table.add_row(*(Text(cell) for cell in row))
        return table

    def render(self, trace: Trace, options: RenderOptions) -> None:
        buffer = io.StringIO()
        console = Console(
            file=buffer,
            width=self.width,
            color_system=None,
            force_terminal=False,
            highlight=False,
        )
        console.print(self.build_table(trace, options))
        self._write(buffer.getvalue())


class JSONRenderer(Renderer):
    """
    Dumps every checkpoint with every field as a JSON array.

    RenderOptions are not applied here. Errors are written as their message,
    or null when the message cannot be produced. Failures are logged, never raised.
    """

    def __init__(self, out: Optional[IO] = None, *, indent: Any = "\t", logger=None) -> None:
        if not (indent is None or isinstance(indent, str) or (
            isinstance(indent, int) and not isinstance(indent, bool) and indent >= 0
        )):
            raise ValueError("indent must be None, a non-negative integer or a string")
        super().__init__(out, logger=logger)
        self.indent = indent

    def _encode_error(self, checkpoint: Checkpoint) -> Optional[str]:
        if checkpoint.error is None:
            return None
        try:
            return str(checkpoint.error)
        except Exception as exc:
            self._log().warning("could not encode error of checkpoint {!r}: {}", checkpoint.name, exc)
            return None

    def to_dict(self, checkpoint: Checkpoint) -> Dict[str, Any]:
        return {
            "name": checkpoint.name,
            "timestamp": checkpoint.timestamp.isoformat(),
            "duration_ns": checkpoint.duration_ns,
            "since_start_ns": checkpoint.since_start_ns,
            "error": self._encode_error(checkpoint),
        }

    def render(self, trace: Trace, options: RenderOptions) -> None:
        try:
            payload = json.dumps([self.to_dict(c) for c in trace], indent=self.indent)
        except (TypeError, ValueError) as exc:
            self._log().error("error marshaling trace: {}", exc)
            payload = ""
        self._write(payload)
