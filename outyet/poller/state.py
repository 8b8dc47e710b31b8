"""Poll state: PENDING -> CONFIRMED. No other states and no way back."""

import enum


class PollState(str, enum.Enum):
    """Whether the awaited remote marker has been observed."""

    PENDING = "pending"
    CONFIRMED = "confirmed"


# Valid transitions: from_state -> set of allowed to_states
_TRANSITIONS: dict[PollState, set[PollState]] = {
    PollState.PENDING: {PollState.CONFIRMED},
    PollState.CONFIRMED: set(),
}


def can_transition(from_state: PollState, to_state: PollState) -> bool:
    return to_state in _TRANSITIONS.get(from_state, set())
