"""Field-level parsing of a single event frame.

A frame is the byte span between two event terminators.  In the default
mode every line is read as ``field: value``; in data-only mode the whole
frame is taken as the ``data`` payload.
"""

from __future__ import annotations

import re

from .event import ServerEvent

# Longest alternative first so "\r\n" is never read as two line breaks.
_LINE_BREAK = re.compile(rb"\r\n|\r|\n")

_SEPARATOR = ":"
_HORIZONTAL_WS = " \t"


def decode(raw: bytes) -> str:
    """Best-effort UTF-8 decode; undecodable bytes become U+FFFD."""
    return raw.decode("utf-8", errors="replace")


def split_lines(frame: bytes) -> list[bytes]:
    """Split a frame at single line endings, dropping empty lines."""
    return [line for line in _LINE_BREAK.split(frame) if line]


def parse_frame(frame: bytes, data_only: bool = False) -> ServerEvent | None:
    """Parse one frame into a ServerEvent, or None if it carries nothing."""
    if data_only:
        text = decode(frame)
        return ServerEvent(data=text) if text else None

    event_id: str | None = None
    event_type: str | None = None
    data: str | None = None
    time: str | None = None
    other: dict[str, str] = {}

    for raw_line in split_lines(frame):
        line = decode(raw_line)
        if line == _SEPARATOR:
            continue

        if _SEPARATOR not in line:
            # Bare directive: keep the whole line as a key.
            other[line] = ""
            continue

        key, _, value = line.partition(_SEPARATOR)
        key = key.strip(_HORIZONTAL_WS)
        value = value.strip(_HORIZONTAL_WS)

        if key == "id":
            event_id = value
        elif key == "event":
            event_type = value
        elif key == "data":
            data = value if data is None else f"{data}\n{value}"
        elif key == "time":
            time = value
        # Comments and unknown fields are ignored.

    event = ServerEvent(
        id=event_id,
        event=event_type,
        data=data,
        other=other or None,
        time=time,
    )
    if event.is_empty:
        return None
    return event
