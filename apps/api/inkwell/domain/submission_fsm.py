"""Form submission lifecycle rules."""

from enum import Enum


class SubmissionState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class SubmissionStateError(RuntimeError):
    def __init__(self, current: SubmissionState, attempted: SubmissionState) -> None:
        self.current = current
        self.attempted = attempted
        super().__init__(f"Invalid submission transition {current.value} -> {attempted.value}")


class SubmissionInProgressError(SubmissionStateError):
    """A second submit was attempted while one request is outstanding."""


_ALLOWED_TRANSITIONS: dict[SubmissionState, set[SubmissionState]] = {
    SubmissionState.IDLE: {SubmissionState.PENDING},
    SubmissionState.PENDING: {SubmissionState.SUCCESS, SubmissionState.ERROR},
    SubmissionState.SUCCESS: {SubmissionState.PENDING},
    SubmissionState.ERROR: {SubmissionState.PENDING},
}


def allowed_next_states(state: SubmissionState) -> list[SubmissionState]:
    """Return deterministically ordered allowed successors for a state."""
    return sorted(_ALLOWED_TRANSITIONS.get(state, set()), key=lambda s: s.value)


def ensure_transition(old_state: SubmissionState, new_state: SubmissionState) -> None:
    if old_state is SubmissionState.PENDING and new_state is SubmissionState.PENDING:
        raise SubmissionInProgressError(old_state, new_state)

    if new_state not in _ALLOWED_TRANSITIONS.get(old_state, set()):
        raise SubmissionStateError(old_state, new_state)


def trigger_enabled(state: SubmissionState) -> bool:
    return state is not SubmissionState.PENDING
