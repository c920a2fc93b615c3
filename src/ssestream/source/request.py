"""Request template rebuilt for every (re)connection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

import httpx

ACCEPT = "Accept"
CACHE_CONTROL = "Cache-Control"
LAST_EVENT_ID = "Last-Event-ID"

EVENT_STREAM = "text/event-stream"
NO_STORE = "no-store"


@dataclass(frozen=True)
class RequestTemplate:
    url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    content: bytes | None = None

    def build(self, last_event_id: str, timeout: float) -> httpx.Request:
        """Build the request for one connection attempt.

        The event-stream headers always override whatever the template
        carries under the same names.
        """
        headers = httpx.Headers(dict(self.headers))
        headers[ACCEPT] = EVENT_STREAM
        headers[CACHE_CONTROL] = NO_STORE
        headers[LAST_EVENT_ID] = last_event_id
        return httpx.Request(
            self.method,
            self.url,
            headers=headers,
            content=self.content,
            extensions={"timeout": httpx.Timeout(timeout).as_dict()},
        )
