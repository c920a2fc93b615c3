"""httpx-backed transport.

Streams the response body with ``AsyncClient.send(stream=True)`` and maps
httpx failures onto a terminating ``Completed(error)`` notification.
"""

from __future__ import annotations

from typing import AsyncGenerator

import httpx
import structlog

from .base import BodyChunk, Completed, Disposition, Notification, ResponseReceived

log = structlog.get_logger()


class HttpxTransport:
    """Transport over an ``httpx.AsyncClient``.

    A client passed in stays owned by the caller; otherwise one is created
    on the first request and closed by ``aclose()``.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._owns_client = client is None
        self._client = client

    @property
    def is_closed(self) -> bool:
        return self._client is None or self._client.is_closed

    async def stream(self, request: httpx.Request) -> AsyncGenerator[Notification, None]:
        if self._client is None:
            self._client = httpx.AsyncClient(follow_redirects=True)

        url = str(request.url)
        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as exc:
            log.warning("transport_request_failed", url=url, error=repr(exc))
            yield Completed(exc)
            return

        error: BaseException | None = None
        try:
            dispositions: list[Disposition] = []
            yield ResponseReceived(
                status_code=response.status_code,
                headers=response.headers,
                decide=dispositions.append,
            )
            if dispositions and dispositions[-1] is Disposition.CANCEL:
                log.debug("transport_response_cancelled", url=url, status=response.status_code)
            else:
                async for chunk in response.aiter_bytes():
                    yield BodyChunk(chunk)
        except httpx.HTTPError as exc:
            log.warning("transport_stream_failed", url=url, error=repr(exc))
            error = exc
        finally:
            await response.aclose()

        yield Completed(error)

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
