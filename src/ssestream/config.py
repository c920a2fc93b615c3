"""Client configuration via environment variables (SSESTREAM_ prefix) or defaults."""

from __future__ import annotations

from pydantic_settings import BaseSettings

from .parser.event_parser import ParseMode
from .source.backoff import ReconnectPolicy


class ClientConfig(BaseSettings):
    mode: ParseMode = ParseMode.DEFAULT
    timeout_interval: float = 300.0
    max_reconnect_attempts: int = 3
    reconnect_initial_delay: float = 1.0
    reconnect_backoff_factor: float = 2.0
    log_json: bool = False
    log_level: str = "INFO"

    model_config = {"env_prefix": "SSESTREAM_"}

    def reconnect_policy(self) -> ReconnectPolicy:
        """Build the reconnect policy described by this config."""
        return ReconnectPolicy(
            max_attempts=self.max_reconnect_attempts,
            initial_delay=self.reconnect_initial_delay,
            backoff_factor=self.reconnect_backoff_factor,
        )
