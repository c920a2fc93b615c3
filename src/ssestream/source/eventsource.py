"""Event-stream session: drives one logical SSE connection.

Consumes transport notifications in order, runs them through the parser,
tracks the last event id and reconnects with backoff when the connection
drops.  Everything the application sees arrives through ``events()``.
"""

from __future__ import annotations

import asyncio
from contextlib import aclosing
from typing import Any, AsyncIterator

import structlog

from ssestream.config import ClientConfig
from ssestream.parser.event_parser import EventParser, ParseMode, ParserFactory, ServerEventParser
from ssestream.transport.base import (
    BodyChunk,
    Completed,
    Disposition,
    ResponseReceived,
    Transport,
)
from ssestream.transport.httpx_transport import HttpxTransport

from .backoff import ReconnectPolicy
from .errors import (
    AlreadyConsumedError,
    ConnectionFailedError,
    ProtocolError,
    UndefinedConnectionError,
)
from .request import RequestTemplate
from .state_machine import ReadyState, transition
from .subjects import Closed, Error, Message, Open, Subject

log = structlog.get_logger()

DEFAULT_TIMEOUT_INTERVAL = 300.0

# Marks the end of the delivered sequence.
_END = object()


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300 and status_code != 204


class EventSource:
    """A single Server-Sent Events session.

    Usage:
        async with EventSource("https://example.com/stream") as source:
            async for item in source.events():
                if isinstance(item, Message):
                    handle(item.event)
    """

    def __init__(
        self,
        request: RequestTemplate | str,
        *,
        mode: ParseMode = ParseMode.DEFAULT,
        timeout_interval: float = DEFAULT_TIMEOUT_INTERVAL,
        max_reconnect_attempts: int = 3,
        reconnect_initial_delay: float = 1.0,
        reconnect_backoff_factor: float = 2.0,
        transport: Transport | None = None,
        parser_factory: ParserFactory = ServerEventParser,
        last_event_id: str = "",
    ) -> None:
        if isinstance(request, str):
            request = RequestTemplate(url=request)
        self.request = request
        self.mode = mode
        self.timeout_interval = timeout_interval
        self.reconnect_policy = ReconnectPolicy(
            max_attempts=max_reconnect_attempts,
            initial_delay=reconnect_initial_delay,
            backoff_factor=reconnect_backoff_factor,
        )

        self.ready_state = ReadyState.NONE
        self.last_event_id = last_event_id
        self.retry_count = 0

        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpxTransport()
        self._parser_factory = parser_factory

        # Status of a non-2xx response whose body has not been read yet
        self._pending_status: int | None = None

        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None
        self._consumed = False
        self._closed_emitted = False
        self._finished = False

    @classmethod
    def from_config(
        cls,
        request: RequestTemplate | str,
        config: ClientConfig,
        **kwargs: Any,
    ) -> "EventSource":
        """Create a session with settings taken from a ClientConfig."""
        policy = config.reconnect_policy()
        return cls(
            request,
            mode=config.mode,
            timeout_interval=config.timeout_interval,
            max_reconnect_attempts=policy.max_attempts,
            reconnect_initial_delay=policy.initial_delay,
            reconnect_backoff_factor=policy.backoff_factor,
            **kwargs,
        )

    @property
    def url(self) -> str:
        return self.request.url

    async def __aenter__(self) -> "EventSource":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # -- application surface --------------------------------------------

    def connect(self) -> None:
        """Start the connection. Only a fresh session can connect."""
        if self.ready_state is not ReadyState.NONE:
            log.debug("connect_ignored", url=self.url, state=self.ready_state.name)
            return
        self._set_state(ReadyState.CONNECTING, "connect")
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def events(self) -> AsyncIterator[Subject]:
        """Yield Open / Message / Error / Closed until the session ends.

        Connects on first iteration if ``connect()`` was not called.  Only one
        consumer is ever served; any later call yields a single
        ``Error(AlreadyConsumedError())`` and stops.
        """
        if self._consumed:
            log.warning("events_already_consumed", url=self.url)
            yield Error(AlreadyConsumedError())
            return
        self._consumed = True

        if self.ready_state is ReadyState.NONE:
            self.connect()

        try:
            while True:
                item = await self._queue.get()
                if item is _END:
                    return
                yield item
        finally:
            if self.ready_state is not ReadyState.CLOSED:
                self.cancel()

    def cancel(self) -> None:
        """Close the session now. Pending undelivered events are dropped.

        The driver task tears down the connection, and an owned transport,
        as it unwinds; ``aclose()`` additionally waits for that.
        """
        if self.ready_state is ReadyState.CLOSED:
            return
        previous = self.ready_state
        self._set_state(ReadyState.CLOSED, "cancel")

        while not self._queue.empty():
            self._queue.get_nowait()
        if self._task is not None:
            self._task.cancel()

        if previous is ReadyState.OPEN:
            self._emit(Closed())
        self._finish()

    async def aclose(self) -> None:
        """Cancel and wait until the transport binding is released."""
        self.cancel()
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)
        if self._owns_transport:
            await self._transport.aclose()

    # -- driver ----------------------------------------------------------

    async def _run(self) -> None:
        try:
            while True:
                await self._run_connection()
                if self.ready_state is ReadyState.CLOSED:
                    return

                attempt = self.retry_count + 1
                if not self.reconnect_policy.allows(attempt):
                    log.info("reconnect_exhausted", url=self.url, attempts=self.retry_count)
                    self._close("reconnect_exhausted")
                    return

                self.retry_count = attempt
                delay = self.reconnect_policy.delay_for(attempt)
                if self.ready_state is ReadyState.OPEN:
                    self._set_state(ReadyState.CONNECTING, "reconnect")
                log.info(
                    "reconnect_scheduled",
                    url=self.url,
                    attempt=attempt,
                    delay=delay,
                    last_event_id=self.last_event_id,
                )
                await asyncio.sleep(delay)
        except Exception:
            log.exception("session_crashed", url=self.url)
            self._close("crash")
            raise
        finally:
            try:
                if self._owns_transport:
                    await self._transport.aclose()
            finally:
                self._finish()

    async def _run_connection(self) -> None:
        """Drive one physical connection until it completes or the session closes."""
        parser = self._parser_factory(self.mode)
        self._pending_status = None
        request = self.request.build(self.last_event_id, self.timeout_interval)

        log.debug(
            "connection_started",
            url=self.url,
            attempt=self.retry_count,
            last_event_id=self.last_event_id,
        )

        async with aclosing(self._transport.stream(request)) as notifications:
            async for notification in notifications:
                if self.ready_state is ReadyState.CLOSED:
                    if isinstance(notification, ResponseReceived):
                        notification.decide(Disposition.CANCEL)
                    log.debug("notification_discarded", url=self.url)
                    return

                if isinstance(notification, ResponseReceived):
                    self._handle_response(notification)
                elif isinstance(notification, BodyChunk):
                    self._handle_chunk(notification.data, parser)
                elif isinstance(notification, Completed):
                    self._handle_completion(notification.error)
                    return

                if self.ready_state is ReadyState.CLOSED:
                    return

        # Transport ended without a completion notification
        self._handle_completion(None)

    def _handle_response(self, response: ResponseReceived) -> None:
        status = response.status_code
        if _is_success(status):
            response.decide(Disposition.ALLOW)
            if self.ready_state is not ReadyState.OPEN:
                self._set_state(ReadyState.OPEN, f"status_{status}")
                log.info("connection_opened", url=self.url, status=status)
                self._emit(Open())
        elif status == 204:
            response.decide(Disposition.CANCEL)
            log.info("connection_no_content", url=self.url)
            self._close("status_204")
        else:
            # Let the body through; it is the error payload.
            response.decide(Disposition.ALLOW)
            self._pending_status = status
            log.warning("unexpected_status", url=self.url, status=status)

    def _handle_chunk(self, data: bytes, parser: EventParser) -> None:
        if self._pending_status is not None:
            self._fail_with_status(data)
            return

        for event in parser.parse(data):
            # Only a connection that delivers events counts as recovered
            self.retry_count = 0
            if event.id is not None:
                self.last_event_id = event.id
            self._emit(Message(event))

    def _handle_completion(self, error: BaseException | None) -> None:
        if self._pending_status is not None:
            self._fail_with_status(b"")
            return

        if error is not None:
            log.warning(
                "connection_failed",
                url=self.url,
                state=self.ready_state.name,
                error=repr(error),
            )
            self._emit(Error(ConnectionFailedError(error)))
        elif self.ready_state is ReadyState.CONNECTING:
            log.warning("connection_ended_undefined", url=self.url)
            self._emit(Error(UndefinedConnectionError()))
        else:
            # The server finished the stream; nothing to recover.
            log.info("stream_ended", url=self.url, last_event_id=self.last_event_id)
            self._close("stream_ended")

    def _fail_with_status(self, payload: bytes) -> None:
        error = ProtocolError(self._pending_status or 0, payload)
        self._pending_status = None
        log.error("protocol_error", url=self.url, **error.to_dict())
        self._emit(Error(error))
        self._close("protocol_error")

    # -- state helpers ---------------------------------------------------

    def _set_state(self, target: ReadyState, trigger: str) -> None:
        self.ready_state = transition(self.ready_state, target, self.url, trigger)

    def _close(self, trigger: str) -> None:
        if self.ready_state is ReadyState.CLOSED:
            return
        self._set_state(ReadyState.CLOSED, trigger)
        self._emit(Closed())

    def _emit(self, subject: Subject) -> None:
        if self._finished:
            return
        if isinstance(subject, Closed):
            if self._closed_emitted:
                return
            self._closed_emitted = True
        self._queue.put_nowait(subject)

    def _finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._queue.put_nowait(_END)
