"""
Base mode analyzer.

An analyzer holds the mode-specific part of the per-event processing:
how the clustering input is built and which histograms are filled at
each step. The state machine drives it; the analyzer never decides
control flow.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from domain.config import TrackCuts
from domain.jets import Jet, PseudoParticle
from domain.tracks import Collision
from services.histograms.registry import HistogramRegistry
from services.jets.selection import JetDecision
from services.selection.pid import PidSelector
from services.selection.track_selection import passed_track_selection_for_jet_reconstruction


class ModeAnalyzer(ABC):
    """
    Base class for execution-mode analyzers.

    Class attributes:
        mode: Mode name, also the registry / ROOT directory name
        uses_jets: Whether events go through clustering
        uses_unfolding: Whether the jet pt threshold uses the unfolded pt
        supports_rejection: Whether the random event rejection applies
        event_counter: Event counter histogram, None for no counter
        rejection_counter: Rejection counter histogram, None for no counter
    """

    mode: str = ""
    uses_jets: bool = True
    uses_unfolding: bool = True
    supports_rejection: bool = False
    event_counter: Optional[str] = None
    rejection_counter: Optional[str] = None

    def __init__(self, registry: HistogramRegistry, track_cuts: TrackCuts, pid: PidSelector):
        self.registry = registry
        self.track_cuts = track_cuts
        self.pid = pid
        self.logger = logging.getLogger(self.__class__.__name__)

    # ------------------------------------------------------------------
    # Counters
    # ------------------------------------------------------------------

    def count_event(self, step: int):
        """Fill the event counter at ``step + 0.5``."""
        if self.event_counter is not None:
            self.registry.fill(self.event_counter, step + 0.5)

    def count_rejection(self, rejected: bool):
        """Fill 0.5 for every selected event and 1.5 for those that survive the rejection."""
        if self.rejection_counter is None:
            return
        self.registry.fill(self.rejection_counter, 0.5)
        if not rejected:
            self.registry.fill(self.rejection_counter, 1.5)

    # ------------------------------------------------------------------
    # Hooks, called by the state handlers
    # ------------------------------------------------------------------

    def on_event_selected(self, collision: Collision):
        self.count_event(0)

    def build_jet_input(self, collision: Collision) -> list[PseudoParticle]:
        """
        Clustering input: tracks passing the jet-reconstruction filter.

        The back-reference index is the track position in ``collision.tracks``.
        """
        return [
            PseudoParticle.from_momentum(track.px, track.py, track.pz, index=i)
            for i, track in enumerate(collision.tracks)
            if passed_track_selection_for_jet_reconstruction(track)
        ]

    def on_jet_input_ready(self, collision: Collision, particles: Sequence[PseudoParticle]):
        self.count_event(1)

    def on_jets_found(self, collision: Collision, jets: Sequence[Jet]):
        pass

    def on_jet_in_acceptance(self, collision: Collision, decision: JetDecision):
        pass

    def analyze_selected_jet(self, collision: Collision, decision: JetDecision):
        pass

    def finish_jets(self, collision: Collision, decisions: Sequence[JetDecision]):
        """Called once per event after every jet has been evaluated."""
        if any(d.selected for d in decisions):
            self.count_event(2)


class InclusiveAnalyzer(ModeAnalyzer):
    """
    Base class for the jet-free modes.

    Selected events go straight to TRACK_ANALYSIS, which calls
    ``analyze_tracks``.
    """

    uses_jets = False
    uses_unfolding = False

    @abstractmethod
    def analyze_tracks(self, collision: Collision):
        """Fill the inclusive histograms of one selected event."""
        pass
