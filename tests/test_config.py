"""Tests for environment-driven configuration."""

from ssestream.config import ClientConfig
from ssestream.parser.event_parser import ParseMode


class TestClientConfig:
    def test_defaults(self, monkeypatch):
        for name in ("MODE", "TIMEOUT_INTERVAL", "MAX_RECONNECT_ATTEMPTS", "LOG_JSON"):
            monkeypatch.delenv(f"SSESTREAM_{name}", raising=False)
        config = ClientConfig()
        assert config.mode == ParseMode.DEFAULT
        assert config.timeout_interval == 300.0
        assert config.max_reconnect_attempts == 3
        assert config.log_json is False

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SSESTREAM_MODE", "data-only")
        monkeypatch.setenv("SSESTREAM_MAX_RECONNECT_ATTEMPTS", "0")
        monkeypatch.setenv("SSESTREAM_RECONNECT_INITIAL_DELAY", "0.5")
        config = ClientConfig()
        assert config.mode == ParseMode.DATA_ONLY
        assert config.max_reconnect_attempts == 0
        policy = config.reconnect_policy()
        assert policy.initial_delay == 0.5
        assert not policy.allows(1)
