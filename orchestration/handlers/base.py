"""
Base state handler.

Abstract base class for all state handlers.
"""

from abc import ABC, abstractmethod
import logging

from orchestration.context import EventContext
from orchestration.states import EventState


class StateHandler(ABC):
    """
    Base class for state handlers.

    A handler runs one gate for one event and names the next state.
    Gate failures are returned as the SKIPPED state, never raised.
    """

    def __init__(self):
        """Initialize state handler."""
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def handle(self, context: EventContext) -> tuple[EventContext, EventState]:
        """
        Handle the current state and determine next state.

        Args:
            context: Current event context

        Returns:
            Tuple of (updated_context, next_state)
        """
        pass

    def _log_state_entry(self, context: EventContext):
        self.logger.debug(
            f"[{context.mode}] event {context.collision.index}: entering {context.current_state}"
        )

    def _log_state_exit(self, context: EventContext, next_state: EventState):
        self.logger.debug(
            f"[{context.mode}] event {context.collision.index}: {context.current_state} -> {next_state}"
        )
