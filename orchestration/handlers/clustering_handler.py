"""
ClusteringHandler - Handles the CLUSTERING state.

Runs the jet clustering and the background estimate on the prepared
pseudo-particles.
"""

from orchestration.context import EventContext
from orchestration.states import EventState
from services.analysis.base import ModeAnalyzer
from services.jets.background import BackgroundSubtractor
from services.jets.clustering import JetClusterer
from .base import StateHandler


class ClusteringHandler(StateHandler):
    """
    Handler for CLUSTERING state.

    Uses JetClusterer for the jets and BackgroundSubtractor for rho.
    """

    def __init__(self, analyzer: ModeAnalyzer, clusterer: JetClusterer,
                 subtractor: BackgroundSubtractor):
        """
        Initialize handler.

        Args:
            analyzer: Mode analyzer, notified with the clustered jets
            clusterer: Jet clustering service
            subtractor: Background estimation service
        """
        super().__init__()
        self.analyzer = analyzer
        self.clusterer = clusterer
        self.subtractor = subtractor

    def handle(self, context: EventContext) -> tuple[EventContext, EventState]:
        self._log_state_entry(context)

        particles = list(context.particles)
        jets = self.clusterer.cluster(particles)
        background = self.subtractor.estimate(particles, jets)
        self.logger.debug(
            f"[{context.mode}] event {context.collision.index}: {len(jets)} jets, "
            f"rho={background.rho:.3f}"
        )

        self.analyzer.on_jets_found(context.collision, jets)

        self._log_state_exit(context, EventState.JET_ANALYSIS)
        return context.with_jets(jets, background), EventState.JET_ANALYSIS
