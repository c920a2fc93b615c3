"""Tests for the chunk-to-event parser."""

import pytest

from ssestream.parser.event import ServerEvent
from ssestream.parser.event_parser import ParseMode, ServerEventParser

STREAMS = [
    b"data: test 1\n\ndata: test 2\ndata: continued\n\n",
    b"id: 1\r\nevent: add\r\ndata: a\r\n\r\nid: 2\r\ndata: b\r\n\r\n",
    b"data: cr only\r\rdata: again\r\r",
    b"data: mixed\r\n\ndata: styles\n\r\ndata: here\r\r\n: comment\n\n",
    b"data: tail cr\r\n\rdata: next\r\n\r\n",
    b": keep-alive\n\nevent: ping\n\nbare directive\n\n",
    "data: café ☃\n\n".encode() + b"data: \xff broken\n\n",
]


def _feed_all(parser, chunks):
    events = []
    for chunk in chunks:
        events.extend(parser.parse(chunk))
    return events


class TestServerEventParser:
    def test_two_events(self):
        parser = ServerEventParser()
        events = parser.parse(b"data: test 1\n\ndata: test 2\ndata: continued\n\n")
        assert events == [ServerEvent(data="test 1"), ServerEvent(data="test 2\ncontinued")]

    def test_full_message_sequence(self):
        parser = ServerEventParser()
        text = (
            b"data: test 1\n\n"
            b"data: test 2\ndata: continued\n\n"
            b"event: add\ndata: test 3\n\n"
            b"event: remove\ndata: test 4\n\n"
            b"id: 5\nevent: ping\ndata: test 5\n\n"
        )
        events = parser.parse(text)
        assert len(events) == 5
        assert events[2] == ServerEvent(event="add", data="test 3")
        assert events[3] == ServerEvent(event="remove", data="test 4")
        assert events[4] == ServerEvent(id="5", event="ping", data="test 5")

    def test_field_split_across_chunks(self):
        parser = ServerEventParser()
        assert parser.parse(b"event: a") == []
        assert parser.parse(b"dd\ndata: te") == []
        assert parser.parse(b"st 1\n\n") == [ServerEvent(event="add", data="test 1")]

    def test_terminator_spanning_chunks(self):
        parser = ServerEventParser()
        assert parser.parse(b"event: add\n") == []
        events = parser.parse(b"\ndata: test 1\n\n")
        assert events == [ServerEvent(event="add"), ServerEvent(data="test 1")]

    def test_blank_input_produces_nothing(self):
        parser = ServerEventParser()
        assert parser.parse(b"\n\n\n\n") == []

    def test_unterminated_frame_is_buffered(self):
        parser = ServerEventParser()
        assert parser.parse(b"id: 5\nevent: ping\ndata: test 5") == []
        assert parser.buffered == b"id: 5\nevent: ping\ndata: test 5"

    def test_data_only_mode(self):
        parser = ServerEventParser(ParseMode.DATA_ONLY)
        events = parser.parse(b'data: {"a":1}\n\n{"b":2}\n\n')
        assert events == [ServerEvent(data='data: {"a":1}'), ServerEvent(data='{"b":2}')]


class TestChunkingInvariance:
    @pytest.mark.parametrize("stream", STREAMS)
    @pytest.mark.parametrize("mode", list(ParseMode))
    def test_byte_at_a_time(self, stream, mode):
        expected = ServerEventParser(mode).parse(stream)
        chunks = [stream[i:i + 1] for i in range(len(stream))]
        assert _feed_all(ServerEventParser(mode), chunks) == expected

    @pytest.mark.parametrize("stream", STREAMS)
    @pytest.mark.parametrize("mode", list(ParseMode))
    def test_every_two_way_split(self, stream, mode):
        expected = ServerEventParser(mode).parse(stream)
        for cut in range(len(stream) + 1):
            chunks = [stream[:cut], stream[cut:]]
            assert _feed_all(ServerEventParser(mode), chunks) == expected, cut

    def test_expected_counts(self):
        counts = [len(ServerEventParser().parse(s)) for s in STREAMS]
        assert counts == [2, 2, 2, 3, 2, 2, 2]
