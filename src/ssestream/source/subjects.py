"""Items delivered by ``EventSource.events()``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ssestream.parser.event import ServerEvent

from .errors import EventSourceError


@dataclass(frozen=True)
class Open:
    """The response was accepted and events will flow."""


@dataclass(frozen=True)
class Message:
    event: ServerEvent


@dataclass(frozen=True)
class Error:
    error: EventSourceError


@dataclass(frozen=True)
class Closed:
    """The session is closed; nothing follows."""


Subject = Union[Open, Message, Error, Closed]
