"""Server-Sent Events client: incremental parser and session state machine."""

from .config import ClientConfig
from .parser.event import ServerEvent
from .parser.event_parser import EventParser, ParseMode, ServerEventParser
from .source.errors import (
    AlreadyConsumedError,
    ConnectionFailedError,
    EventSourceError,
    ProtocolError,
    UndefinedConnectionError,
)
from .source.eventsource import EventSource
from .source.request import RequestTemplate
from .source.state_machine import ReadyState
from .source.subjects import Closed, Error, Message, Open

__all__ = [
    "AlreadyConsumedError",
    "ClientConfig",
    "Closed",
    "ConnectionFailedError",
    "Error",
    "EventParser",
    "EventSource",
    "EventSourceError",
    "Message",
    "Open",
    "ParseMode",
    "ProtocolError",
    "ReadyState",
    "RequestTemplate",
    "ServerEvent",
    "ServerEventParser",
    "UndefinedConnectionError",
]
