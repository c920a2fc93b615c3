"""Byte-stream to event parsing."""
