"""HTTP transports feeding the session."""
