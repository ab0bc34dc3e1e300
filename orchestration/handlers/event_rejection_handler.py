"""
EventRejectionHandler - Handles the EVENT_REJECTION state.

Drops a fixed percentage of the selected events at random.
"""

import numpy as np

from orchestration.context import EventContext
from orchestration.states import EventState
from services.analysis.base import ModeAnalyzer
from .base import StateHandler


class EventRejectionHandler(StateHandler):
    """
    Handler for EVENT_REJECTION state.

    Runs right after the event-quality gate. An event is rejected when a
    uniform integer draw in [0, 100) falls below the configured percentage;
    surviving events are handed to the analyzer as selected.
    """

    def __init__(self, analyzer: ModeAnalyzer, rng: np.random.Generator, percentage: int):
        """
        Initialize handler.

        Args:
            analyzer: Analyzer owning the rejection counter
            rng: Random source, seeded by the caller for reproducible runs
            percentage: Percentage of events to reject
        """
        super().__init__()
        self.analyzer = analyzer
        self.rng = rng
        self.percentage = percentage

    def should_reject(self) -> bool:
        return int(self.rng.integers(0, 100)) < self.percentage

    def handle(self, context: EventContext) -> tuple[EventContext, EventState]:
        self._log_state_entry(context)

        rejected = self.should_reject()
        self.analyzer.count_rejection(rejected)
        if rejected:
            self._log_state_exit(context, EventState.SKIPPED)
            return context.with_skip("rejected"), EventState.SKIPPED

        self.analyzer.on_event_selected(context.collision)

        next_state = EventState.JET_INPUT if self.analyzer.uses_jets else EventState.TRACK_ANALYSIS
        self._log_state_exit(context, next_state)
        return context, next_state
