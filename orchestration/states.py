"""
Event states.

Explicit state enumeration for the per-event state machine.
"""

from enum import Enum, auto


class EventState(Enum):
    """
    All possible states of one event in one execution mode.

    Every non-terminal state is a gate: it either advances the event or
    routes it to SKIPPED with a reason.
    """

    # Trigger flag and vertex window
    EVENT_SELECTION = auto()

    # Optional random rejection of selected events
    EVENT_REJECTION = auto()

    # Jet path
    JET_INPUT = auto()
    CLUSTERING = auto()
    JET_ANALYSIS = auto()

    # Inclusive (jet-free) path
    TRACK_ANALYSIS = auto()

    # Terminal states
    COMPLETED = auto()
    SKIPPED = auto()
    FAILED = auto()

    def is_terminal(self) -> bool:
        """Check if this is a terminal state."""
        return self in (EventState.COMPLETED, EventState.SKIPPED, EventState.FAILED)

    def __str__(self) -> str:
        return self.name


# Valid state transitions
VALID_TRANSITIONS = {
    EventState.EVENT_SELECTION: {
        EventState.EVENT_REJECTION,
        EventState.JET_INPUT,
        EventState.TRACK_ANALYSIS,
        EventState.SKIPPED,
        EventState.FAILED,
    },
    EventState.EVENT_REJECTION: {
        EventState.JET_INPUT,
        EventState.TRACK_ANALYSIS,
        EventState.SKIPPED,
        EventState.FAILED,
    },
    EventState.JET_INPUT: {
        EventState.CLUSTERING,
        EventState.SKIPPED,
        EventState.FAILED,
    },
    EventState.CLUSTERING: {
        EventState.JET_ANALYSIS,
        EventState.FAILED,
    },
    EventState.JET_ANALYSIS: {
        EventState.COMPLETED,
        EventState.FAILED,
    },
    EventState.TRACK_ANALYSIS: {
        EventState.COMPLETED,
        EventState.FAILED,
    },
    EventState.COMPLETED: set(),  # Terminal
    EventState.SKIPPED: set(),    # Terminal
    EventState.FAILED: set(),     # Terminal
}


def is_valid_transition(from_state: EventState, to_state: EventState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Target state

    Returns:
        True if transition is valid
    """
    return to_state in VALID_TRANSITIONS.get(from_state, set())
