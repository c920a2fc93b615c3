"""Incremental frame splitter.

Accumulates raw bytes from the network and cuts them into complete event
frames.  Whatever follows the last terminator stays buffered until a later
chunk completes it.
"""

from __future__ import annotations

import re

# Every accepted frame terminator, longest first so the alternation prefers
# "\r\n\r\n" over the "\r\n\r" or "\n\n" it contains.
TERMINATORS: tuple[bytes, ...] = (
    b"\r\n\r\n",
    b"\n\r\n",
    b"\r\r\n",
    b"\r\n\n",
    b"\r\n\r",
    b"\r\r",
    b"\n\n",
)

_TERMINATOR = re.compile(b"|".join(re.escape(t) for t in TERMINATORS))
_MAX_TERMINATOR = max(len(t) for t in TERMINATORS)


class FrameSplitter:
    """Splits an incrementally arriving byte stream into event frames."""

    def __init__(self) -> None:
        self._buffer = bytearray()
        # Set when the last frame ended on a "\r" at the very end of the
        # buffer; a following "\n" belongs to that terminator.
        self._pending_lf = False

    @property
    def buffered(self) -> bytes:
        """The unterminated tail received so far."""
        return bytes(self._buffer)

    def feed(self, chunk: bytes) -> list[bytes]:
        """Append a chunk and return every frame it completes, in order."""
        if self._pending_lf and chunk:
            if chunk[:1] == b"\n":
                chunk = chunk[1:]
            self._pending_lf = False

        # The retained tail holds no terminator, so only its last few bytes
        # can take part in a match spanning the join.
        scan_from = max(0, len(self._buffer) - _MAX_TERMINATOR + 1)
        self._buffer += chunk

        frames: list[bytes] = []
        consumed = 0
        last_terminator = b""
        for match in _TERMINATOR.finditer(self._buffer, scan_from):
            if match.start() > consumed:
                frames.append(bytes(self._buffer[consumed:match.start()]))
            consumed = match.end()
            last_terminator = match.group()

        if consumed:
            del self._buffer[:consumed]
            self._pending_lf = not self._buffer and last_terminator.endswith(b"\r")
        return frames

    def reset(self) -> None:
        self._buffer.clear()
        self._pending_lf = False
