"""Server-sent event record."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServerEvent:
    """A single parsed Server-Sent Event."""

    id: str | None = None
    event: str | None = None
    data: str | None = None
    other: dict[str, str] | None = None
    time: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.id or self.event or self.data or self.other or self.time)

    def to_bytes(self) -> bytes:
        """Serialize back to SSE wire format."""
        lines: list[str] = []
        if self.id is not None:
            lines.append(f"id: {self.id}")
        if self.event is not None:
            lines.append(f"event: {self.event}")
        if self.time is not None:
            lines.append(f"time: {self.time}")
        if self.data is not None:
            for data_line in self.data.split("\n"):
                lines.append(f"data: {data_line}")
        if self.other:
            lines.extend(self.other)
        lines.append("")  # blank line terminates event
        return ("\n".join(lines) + "\n").encode()

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "event": self.event,
            "data": self.data,
            "other": dict(self.other) if self.other else None,
            "time": self.time,
        }
