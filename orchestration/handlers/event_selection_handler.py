"""
EventSelectionHandler - Handles the EVENT_SELECTION state.

Minimum-bias trigger flag and primary-vertex window.
"""

from orchestration.context import EventContext
from orchestration.states import EventState
from services.analysis.base import ModeAnalyzer
from .base import StateHandler


class EventSelectionHandler(StateHandler):
    """
    Handler for EVENT_SELECTION state.

    First state of every event. Events that fail the gate leave no fill
    in any registry.
    """

    def __init__(self, analyzer: ModeAnalyzer, z_vtx: float, rejection_enabled: bool = False):
        """
        Initialize handler.

        Args:
            analyzer: Mode analyzer, notified when the event is selected
            z_vtx: Maximum |z| of the primary vertex in cm
            rejection_enabled: Hand passing events to EVENT_REJECTION, which
                notifies the analyzer for the survivors
        """
        super().__init__()
        self.analyzer = analyzer
        self.z_vtx = z_vtx
        self.rejection_enabled = rejection_enabled

    def handle(self, context: EventContext) -> tuple[EventContext, EventState]:
        self._log_state_entry(context)
        collision = context.collision

        if not collision.sel8:
            return context.with_skip("sel8"), EventState.SKIPPED
        if abs(collision.pos_z) > self.z_vtx:
            return context.with_skip("vertex_z"), EventState.SKIPPED

        if self.rejection_enabled:
            self._log_state_exit(context, EventState.EVENT_REJECTION)
            return context, EventState.EVENT_REJECTION

        self.analyzer.on_event_selected(collision)

        next_state = EventState.JET_INPUT if self.analyzer.uses_jets else EventState.TRACK_ANALYSIS
        self._log_state_exit(context, next_state)
        return context, next_state
