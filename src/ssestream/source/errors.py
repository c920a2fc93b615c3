"""Errors surfaced to the application through ``Error`` events.

None of these are raised out of the session; they travel as payloads.
"""

from __future__ import annotations

from typing import Any


class EventSourceError(Exception):
    """Base class for every error the session reports."""

    def to_dict(self) -> dict[str, Any]:
        """Flatten to a dict for structured logging."""
        return {"error": type(self).__name__, "message": str(self)}


class ConnectionFailedError(EventSourceError):
    """The transport failed (DNS, TLS, reset, timeout...)."""

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"Connection failed: {cause!r}")
        self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["cause"] = repr(self.cause)
        return d


class UndefinedConnectionError(EventSourceError):
    """The transport ended the connection without giving a reason."""

    def __init__(self) -> None:
        super().__init__("Connection ended without a specific cause")


class ProtocolError(EventSourceError):
    """The server answered with a non-2xx status; ``payload`` is its body."""

    def __init__(self, status_code: int, payload: bytes = b"") -> None:
        self.status_code = status_code
        self.payload = payload
        super().__init__(f"Unexpected response status {status_code}")

    @property
    def text(self) -> str:
        return self.payload.decode("utf-8", errors="replace")

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["status_code"] = self.status_code
        d["payload"] = self.text[:500]
        return d


class AlreadyConsumedError(EventSourceError):
    """The event stream already has (or had) a consumer."""

    def __init__(self) -> None:
        super().__init__("Event stream can only be consumed once")
