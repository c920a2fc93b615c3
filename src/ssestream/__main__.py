"""Entry point: python -m ssestream URL"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from .config import ClientConfig
from .logging_config import setup_logging
from .parser.event_parser import ParseMode
from .source.eventsource import EventSource
from .source.request import RequestTemplate
from .source.subjects import Closed, Error, Message, Open, Subject


def _parse_headers(values: list[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for value in values:
        name, sep, content = value.partition(":")
        if not sep or not name.strip():
            raise argparse.ArgumentTypeError(f"Invalid header {value!r}, expected 'Name: value'")
        headers[name.strip()] = content.strip()
    return headers


def _render(item: Subject, raw: bool) -> str:
    if isinstance(item, Message):
        if raw:
            return item.event.to_bytes().decode("utf-8", errors="replace")
        return json.dumps({"type": "message", **item.event.to_dict()})
    if isinstance(item, Error):
        return json.dumps({"type": "error", **item.error.to_dict()})
    if isinstance(item, Open):
        return json.dumps({"type": "open"})
    return json.dumps({"type": "closed"})


async def _tail(source: EventSource, raw: bool) -> int:
    exit_code = 0
    async with source:
        async for item in source.events():
            if isinstance(item, Error):
                exit_code = 1
            print(_render(item, raw), flush=True)
            if isinstance(item, Closed):
                break
    return exit_code


def main() -> None:
    parser = argparse.ArgumentParser(description="Tail a text/event-stream endpoint")
    parser.add_argument("url", help="Event stream URL")
    parser.add_argument("-H", "--header", action="append", default=[], help="Extra request header 'Name: value'")
    parser.add_argument("--data-only", action="store_true", help="Treat each frame as an opaque data payload")
    parser.add_argument("--last-event-id", default="", help="Resume after this event id")
    parser.add_argument("--max-reconnect", type=int, default=None, help="Reconnect attempts (default: 3)")
    parser.add_argument("--timeout", type=float, default=None, help="Timeout in seconds (default: 300)")
    parser.add_argument("--raw", action="store_true", help="Print events in wire format instead of JSON")
    parser.add_argument("--log-level", default=None, help="Log level (default: INFO)")
    parser.add_argument("--json-logs", action="store_true", help="Write logs to stderr as JSON lines")
    args = parser.parse_args()

    config = ClientConfig()
    if args.data_only:
        config.mode = ParseMode.DATA_ONLY
    if args.max_reconnect is not None:
        config.max_reconnect_attempts = args.max_reconnect
    if args.timeout is not None:
        config.timeout_interval = args.timeout
    if args.log_level:
        config.log_level = args.log_level

    if args.json_logs:
        config.log_json = True

    try:
        setup_logging(config.log_level, config.log_json)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        headers = _parse_headers(args.header)
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))

    source = EventSource.from_config(
        RequestTemplate(url=args.url, headers=headers),
        config,
        last_event_id=args.last_event_id,
    )
    try:
        sys.exit(asyncio.run(_tail(source, args.raw)))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
