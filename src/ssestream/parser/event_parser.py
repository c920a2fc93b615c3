"""Pluggable chunk-to-event parsing.

A session holds exactly one ``EventParser`` per physical connection.  The
default implementation chains the frame splitter and the field parser; a
custom parser only has to turn byte chunks into ``ServerEvent`` records and
own whatever buffering it needs.
"""

from __future__ import annotations

import enum
from typing import Callable, Protocol

from .event import ServerEvent
from .fields import parse_frame
from .splitter import FrameSplitter


class ParseMode(enum.Enum):
    DEFAULT = "default"
    DATA_ONLY = "data-only"


class EventParser(Protocol):
    def parse(self, chunk: bytes) -> list[ServerEvent]: ...


ParserFactory = Callable[[ParseMode], EventParser]


class ServerEventParser:
    """Frame splitter + field parser over one byte stream."""

    def __init__(self, mode: ParseMode = ParseMode.DEFAULT) -> None:
        self.mode = mode
        self._splitter = FrameSplitter()

    def parse(self, chunk: bytes) -> list[ServerEvent]:
        data_only = self.mode is ParseMode.DATA_ONLY
        events: list[ServerEvent] = []
        for frame in self._splitter.feed(chunk):
            event = parse_frame(frame, data_only=data_only)
            if event is not None:
                events.append(event)
        return events

    @property
    def buffered(self) -> bytes:
        return self._splitter.buffered
