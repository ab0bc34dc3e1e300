"""
JetInputHandler - Handles the JET_INPUT state.

Builds the clustering input; an event without any input is skipped.
"""

from orchestration.context import EventContext
from orchestration.states import EventState
from services.analysis.base import ModeAnalyzer
from .base import StateHandler


class JetInputHandler(StateHandler):
    """Handler for JET_INPUT state."""

    def __init__(self, analyzer: ModeAnalyzer):
        super().__init__()
        self.analyzer = analyzer

    def handle(self, context: EventContext) -> tuple[EventContext, EventState]:
        self._log_state_entry(context)

        particles = self.analyzer.build_jet_input(context.collision)
        if not particles:
            return context.with_skip("empty_event"), EventState.SKIPPED

        self.analyzer.on_jet_input_ready(context.collision, particles)

        self._log_state_exit(context, EventState.CLUSTERING)
        return context.with_particles(particles), EventState.CLUSTERING
