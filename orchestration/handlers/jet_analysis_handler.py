"""
JetAnalysisHandler - Handles the JET_ANALYSIS state.

Applies the jet selection to every clustered jet and hands the selected
ones to the mode analyzer.
"""

from orchestration.context import EventContext
from orchestration.states import EventState
from services.analysis.base import ModeAnalyzer
from services.jets.selection import JetSelector
from .base import StateHandler


class JetAnalysisHandler(StateHandler):
    """Handler for JET_ANALYSIS state."""

    def __init__(self, analyzer: ModeAnalyzer, selector: JetSelector):
        """
        Initialize handler.

        Args:
            analyzer: Mode analyzer filling the per-jet histograms
            selector: Acceptance, subtraction and pt-threshold gate
        """
        super().__init__()
        self.analyzer = analyzer
        self.selector = selector

    def handle(self, context: EventContext) -> tuple[EventContext, EventState]:
        self._log_state_entry(context)
        collision = context.collision

        decisions = []
        for jet in context.jets:
            decision = self.selector.evaluate(jet, context.background)
            decisions.append(decision)
            if decision.in_acceptance:
                self.analyzer.on_jet_in_acceptance(collision, decision)
            if decision.selected:
                self.analyzer.analyze_selected_jet(collision, decision)

        self.analyzer.finish_jets(collision, decisions)

        context = context.with_decisions(decisions)
        self.logger.debug(
            f"[{context.mode}] event {collision.index}: {context.n_selected_jets} selected jets"
        )
        self._log_state_exit(context, EventState.COMPLETED)
        return context, EventState.COMPLETED
