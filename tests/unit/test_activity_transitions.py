"""Unit tests for the activity status state machine."""

from __future__ import annotations

import pytest

from carelink.activities.transitions import VALID_TRANSITIONS, validate_transition
from carelink.errors import InvalidTransition


class TestActivityStateMachine:
    def test_states(self):
        assert set(VALID_TRANSITIONS.keys()) == {"scheduled", "completed", "cancelled"}

    def test_scheduled_to_cancelled(self):
        validate_transition("scheduled", "cancelled")

    def test_scheduled_to_completed(self):
        validate_transition("scheduled", "completed")

    @pytest.mark.parametrize("terminal", ["completed", "cancelled"])
    def test_terminal_states_have_no_exits(self, terminal):
        assert VALID_TRANSITIONS[terminal] == []
        for target in ("scheduled", "completed", "cancelled"):
            with pytest.raises(InvalidTransition):
                validate_transition(terminal, target)

    def test_unknown_state_rejected(self):
        with pytest.raises(InvalidTransition, match="Invalid transition"):
            validate_transition("archived", "cancelled")

    def test_error_is_conflict(self):
        with pytest.raises(InvalidTransition) as exc_info:
            validate_transition("cancelled", "completed")
        assert exc_info.value.status_code == 409
