from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator

# fixed column order shared by every renderer that filters on options
COLUMNS = ("name", "since_start", "duration", "errors", "track")


@dataclass(frozen=True)
class RenderOptions:
    """
    Selects which fields a filtering renderer shows. Everything is off by default.

    Builders return a new value, so they chain:
        RenderOptions().with_name().with_duration()
    """

    name: bool = False
    since_start: bool = False
    duration: bool = False
    errors: bool = False
    track: bool = False

    def with_name(self) -> "RenderOptions":
        return replace(self, name=True)

    def with_since_start(self) -> "RenderOptions":
        return replace(self, since_start=True)

    def with_duration(self) -> "RenderOptions":
        return replace(self, duration=True)

    def with_errors(self) -> "RenderOptions":
        return replace(self, errors=True)

    def with_track(self) -> "RenderOptions":
        return replace(self, track=True)

    def columns(self) -> Iterator[str]:
        for column in COLUMNS:
            if getattr(self, column):
                yield column
