"""Reconnect delay policy."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReconnectPolicy:
    """Exponential backoff bounded by a maximum number of attempts.

    ``max_attempts=0`` disables reconnection entirely.
    """

    max_attempts: int = 3
    initial_delay: float = 1.0
    backoff_factor: float = 2.0

    def allows(self, attempt: int) -> bool:
        """Whether the given 1-indexed attempt may be made."""
        return 1 <= attempt <= self.max_attempts

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait before the given 1-indexed attempt."""
        if attempt < 1:
            attempt = 1
        return max(0.0, self.initial_delay * self.backoff_factor ** (attempt - 1))
