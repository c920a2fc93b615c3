"""Event-stream session control."""
