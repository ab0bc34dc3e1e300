"""
State machine for per-event processing.

Drives one event through the state handlers of one execution mode.
"""

import logging
from typing import Dict

from domain.tracks import Collision
from .context import EventContext
from .states import EventState, is_valid_transition
from .handlers.base import StateHandler


class EventStateMachine:
    """
    State machine for one execution mode.

    Manages state transitions and delegates work to state handlers.
    A handler exception fails the event, never the run.
    """

    # Longest path: selection, rejection, input, clustering, jet analysis
    MAX_ITERATIONS = 10

    def __init__(self, mode: str, handlers: Dict[EventState, StateHandler],
                 initial_state: EventState = EventState.EVENT_SELECTION):
        """
        Initialize state machine.

        Args:
            mode: Execution mode name
            handlers: Dict mapping states to their handlers
            initial_state: First state of every event

        Raises:
            ValueError: If the initial state has no handler
        """
        self.mode = mode
        self.handlers = handlers
        self.initial_state = initial_state
        self.logger = logging.getLogger(self.__class__.__name__)

        if initial_state not in handlers:
            raise ValueError(f"No handler for initial state {initial_state}")

    def run(self, collision: Collision) -> EventContext:
        """
        Run one event until a terminal state is reached.

        Args:
            collision: Event to process

        Returns:
            Final event context
        """
        context = EventContext(collision=collision, mode=self.mode, current_state=self.initial_state)
        iteration = 0

        while not context.is_terminal and iteration < self.MAX_ITERATIONS:
            iteration += 1
            try:
                context = self._execute_state(context)
            except Exception as e:
                self.logger.error(
                    f"[{self.mode}] event {collision.index}: error in state {context.current_state}: {e}",
                    exc_info=True,
                )
                context = context.with_error(f"Error in {context.current_state}: {e}")

        if not context.is_terminal:
            self.logger.error(f"[{self.mode}] event {collision.index}: exceeded maximum iterations")
            context = context.with_error("State machine exceeded maximum iterations")

        return context

    def _execute_state(self, context: EventContext) -> EventContext:
        current_state = context.current_state

        handler = self.handlers.get(current_state)
        if handler is None:
            self.logger.error(f"[{self.mode}] no handler for state {current_state}")
            return context.with_error(f"No handler for state {current_state}")

        updated_context, next_state = handler.handle(context)

        if not is_valid_transition(current_state, next_state):
            self.logger.error(f"[{self.mode}] invalid transition: {current_state} -> {next_state}")
            return context.with_error(f"Invalid state transition: {current_state} -> {next_state}")

        return updated_context.with_state(next_state)
