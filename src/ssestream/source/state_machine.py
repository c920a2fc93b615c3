"""Connection ready-state machine.

NONE ──[connect()]──→ CONNECTING ──[2xx, not 204]──→ OPEN
                          │  ↑                          │
                          │  └────[reconnect]───────────┤
                          │                             │
        [204 / error body / retries exhausted / cancel] │
                          │                             │
                          v                             │
                        CLOSED ←────[end / cancel]──────┘

CLOSED is terminal; NONE may also be cancelled straight to CLOSED.
"""

from __future__ import annotations

import enum

import structlog

log = structlog.get_logger()


class ReadyState(enum.Enum):
    NONE = -1
    CONNECTING = 0
    OPEN = 1
    CLOSED = 2


# Valid transitions: (from_state, to_state)
VALID_TRANSITIONS: set[tuple[ReadyState, ReadyState]] = {
    (ReadyState.NONE, ReadyState.CONNECTING),
    (ReadyState.CONNECTING, ReadyState.OPEN),
    (ReadyState.OPEN, ReadyState.CONNECTING),  # reconnect after a dropped stream
    # Close from any live state
    (ReadyState.NONE, ReadyState.CLOSED),
    (ReadyState.CONNECTING, ReadyState.CLOSED),
    (ReadyState.OPEN, ReadyState.CLOSED),
}


class InvalidTransition(Exception):
    """Raised when an invalid ready-state transition is attempted."""

    def __init__(self, from_state: ReadyState, to_state: ReadyState) -> None:
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"Invalid transition: {from_state.name} → {to_state.name}")


def validate_transition(from_state: ReadyState, to_state: ReadyState) -> None:
    """Validate a state transition, raising InvalidTransition if not allowed."""
    if (from_state, to_state) not in VALID_TRANSITIONS:
        raise InvalidTransition(from_state, to_state)


def transition(
    current: ReadyState,
    target: ReadyState,
    url: str,
    trigger: str = "",
) -> ReadyState:
    """Execute a validated state transition, logging the change."""
    validate_transition(current, target)
    log.info(
        "state_transition",
        url=url,
        from_state=current.name,
        to_state=target.name,
        trigger=trigger,
    )
    return target
