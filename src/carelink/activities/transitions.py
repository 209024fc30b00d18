"""Activity status state machine.

scheduled -> completed | cancelled. Both end states are terminal.
"""

from __future__ import annotations

from carelink.errors import InvalidTransition

SCHEDULED = "scheduled"
COMPLETED = "completed"
CANCELLED = "cancelled"

VALID_TRANSITIONS: dict[str, list[str]] = {
    SCHEDULED: [COMPLETED, CANCELLED],
    COMPLETED: [],
    CANCELLED: [],
}


def validate_transition(current_status: str, target_status: str) -> None:
    """Validate a status change. Raises InvalidTransition if not allowed."""
    valid = VALID_TRANSITIONS.get(current_status, [])
    if target_status not in valid:
        raise InvalidTransition(
            f"Invalid transition: {current_status} -> {target_status}. "
            f"Valid transitions: {valid}"
        )
