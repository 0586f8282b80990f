from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, List, Optional

_NS_PER_US = 1_000
_NS_PER_MS = 1_000_000
_NS_PER_S = 1_000_000_000
_NS_PER_MIN = 60 * _NS_PER_S
_NS_PER_HOUR = 60 * _NS_PER_MIN


def _with_fraction(whole: int, frac: int, digits: int) -> str:
    tail = f"{frac:0{digits}d}".rstrip("0")
    return f"{whole}.{tail}" if tail else str(whole)


def format_duration(ns: int) -> str:
    """
    Human-readable duration, e.g. "0s", "850ns", "12.5µs", "1.23ms", "2m3.5s".
    """
    ns = int(ns)
    if ns == 0:
        return "0s"
    if ns < 0:
        return "-" + format_duration(-ns)

    if ns < _NS_PER_US:
        return f"{ns}ns"
    if ns < _NS_PER_MS:
        return _with_fraction(*divmod(ns, _NS_PER_US), 3) + "µs"
    if ns < _NS_PER_S:
        return _with_fraction(*divmod(ns, _NS_PER_MS), 6) + "ms"

    hours, rest = divmod(ns, _NS_PER_HOUR)
    minutes, rest = divmod(rest, _NS_PER_MIN)
    out = ""
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    return out + _with_fraction(*divmod(rest, _NS_PER_S), 9) + "s"


@dataclass(frozen=True)
class Checkpoint:
    name: str
    timestamp: datetime
    duration_ns: int = 0
    since_start_ns: int = 0
    error: Optional[BaseException] = None
    # monotonic clock reading the durations are derived from
    mark_ns: int = field(default=0, repr=False, compare=False)

    @property
    def duration(self) -> str:
        return format_duration(self.duration_ns)

    @property
    def since_start(self) -> str:
        return format_duration(self.since_start_ns)

    @property
    def error_message(self) -> str:
        return "" if self.error is None else str(self.error)


class Trace:
    """
    Append-only, ordered sequence of checkpoints for one unit of work.

    Order is temporal order of the checkpoint() calls. Nothing is ever
    removed or replaced once appended.
    """

    def __init__(self) -> None:
        self._checkpoints: List[Checkpoint] = []

    def append(self, checkpoint: Checkpoint) -> None:
        self._checkpoints.append(checkpoint)

    def __len__(self) -> int:
        return len(self._checkpoints)

    def __iter__(self) -> Iterator[Checkpoint]:
        return iter(self._checkpoints)

    def __getitem__(self, index: int) -> Checkpoint:
        return self._checkpoints[index]

    def __bool__(self) -> bool:
        return bool(self._checkpoints)

    def __repr__(self) -> str:
        return f"Trace({len(self._checkpoints)} checkpoints)"

    @property
    def first(self) -> Optional[Checkpoint]:
        return self._checkpoints[0] if self._checkpoints else None

    @property
    def last(self) -> Optional[Checkpoint]:
        return self._checkpoints[-1] if self._checkpoints else None

    def max_duration(self) -> int:
        return max((c.duration_ns for c in self._checkpoints), default=0)

    def min_duration(self) -> int:
        # the first checkpoint is always zero, so it is left out
        return min((c.duration_ns for c in self._checkpoints[1:]), default=0)
