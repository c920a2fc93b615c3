"""Transport contract consumed by the session.

A transport turns one request into an ordered stream of notifications:
at most one ``ResponseReceived`` first, then zero or more ``BodyChunk`` in
network order, then exactly one ``Completed``, even when the connection
fails abruptly.  Closing the generator early tears the connection down.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import AsyncGenerator, Callable, Mapping, Protocol, Union

import httpx


class Disposition(enum.Enum):
    ALLOW = "allow"
    CANCEL = "cancel"


@dataclass(frozen=True)
class ResponseReceived:
    status_code: int
    headers: Mapping[str, str]
    # Tells the transport whether to keep reading the body.
    decide: Callable[[Disposition], None] = field(repr=False)


@dataclass(frozen=True)
class BodyChunk:
    data: bytes


@dataclass(frozen=True)
class Completed:
    error: BaseException | None = None


Notification = Union[ResponseReceived, BodyChunk, Completed]


class Transport(Protocol):
    def stream(self, request: httpx.Request) -> AsyncGenerator[Notification, None]: ...

    async def aclose(self) -> None: ...
