"""
TrackAnalysisHandler - Handles the TRACK_ANALYSIS state.

Inclusive processing for the modes that do not cluster jets.
"""

from orchestration.context import EventContext
from orchestration.states import EventState
from services.analysis.base import InclusiveAnalyzer
from .base import StateHandler


class TrackAnalysisHandler(StateHandler):
    """Handler for TRACK_ANALYSIS state."""

    def __init__(self, analyzer: InclusiveAnalyzer):
        super().__init__()
        self.analyzer = analyzer

    def handle(self, context: EventContext) -> tuple[EventContext, EventState]:
        self._log_state_entry(context)
        self.analyzer.analyze_tracks(context.collision)
        self._log_state_exit(context, EventState.COMPLETED)
        return context, EventState.COMPLETED
