"""
Orchestration layer for per-event processing.

State machine-based orchestration with explicit state transitions.
"""

from .states import EventState
from .context import EventContext
from .state_machine import EventStateMachine

__all__ = [
    "EventState",
    "EventContext",
    "EventStateMachine",
]
