"""Tests for the incremental frame splitter."""

import pytest

from ssestream.parser.splitter import TERMINATORS, FrameSplitter


class TestFeed:
    def test_single_frame(self):
        splitter = FrameSplitter()
        assert splitter.feed(b"data: a\n\n") == [b"data: a"]
        assert splitter.buffered == b""

    def test_multiple_frames_in_order(self):
        splitter = FrameSplitter()
        frames = splitter.feed(b"data: 1\n\ndata: 2\n\ndata: 3\n\n")
        assert frames == [b"data: 1", b"data: 2", b"data: 3"]

    def test_no_terminator_retains_everything(self):
        splitter = FrameSplitter()
        assert splitter.feed(b"data: par") == []
        assert splitter.feed(b"tial\n") == []
        assert splitter.buffered == b"data: partial\n"

    def test_remainder_kept_after_last_terminator(self):
        splitter = FrameSplitter()
        assert splitter.feed(b"data: a\n\ndata: b") == [b"data: a"]
        assert splitter.buffered == b"data: b"
        assert splitter.feed(b"\n\n") == [b"data: b"]

    def test_terminator_spanning_chunks(self):
        splitter = FrameSplitter()
        assert splitter.feed(b"event: add\n") == []
        assert splitter.feed(b"\ndata: test 1\n\n") == [b"event: add", b"data: test 1"]

    def test_empty_frames_dropped(self):
        splitter = FrameSplitter()
        assert splitter.feed(b"\n\n\n\ndata: a\n\n\n\n") == [b"data: a"]

    @pytest.mark.parametrize("terminator", TERMINATORS)
    def test_every_terminator(self, terminator):
        splitter = FrameSplitter()
        frames = splitter.feed(b"data: a" + terminator + b"data: b" + terminator)
        assert frames == [b"data: a", b"data: b"]

    def test_longest_terminator_wins(self):
        splitter = FrameSplitter()
        assert splitter.feed(b"data: a\r\n\r\ndata: b\r\n\r\n") == [b"data: a", b"data: b"]
        assert splitter.buffered == b""

    def test_single_crlf_is_not_a_terminator(self):
        splitter = FrameSplitter()
        assert splitter.feed(b"id: 1\r\ndata: a\r\n") == []

    def test_trailing_cr_then_lf_across_chunks(self):
        splitter = FrameSplitter()
        assert splitter.feed(b"data: a\r\n\r") == [b"data: a"]
        # The "\n" completes the previous "\r\n\r\n" and starts nothing new.
        assert splitter.feed(b"\ndata: b\r\n\r\n") == [b"data: b"]
        assert splitter.buffered == b""

    def test_lone_lf_chunk_after_cr_terminator(self):
        splitter = FrameSplitter()
        assert splitter.feed(b"data: a\r\r") == [b"data: a"]
        assert splitter.feed(b"\n") == []
        assert splitter.buffered == b""

    def test_binary_bytes_pass_through(self):
        splitter = FrameSplitter()
        assert splitter.feed(b"data: \xff\xfe\n\n") == [b"data: \xff\xfe"]

    def test_reset_clears_buffer(self):
        splitter = FrameSplitter()
        splitter.feed(b"data: stale")
        splitter.reset()
        assert splitter.buffered == b""
        assert splitter.feed(b"data: fresh\n\n") == [b"data: fresh"]
