"""
Systematic-variation sweep on data.

Jet constituents are re-selected with every cut set and filled with the
variation index as the last coordinate.
"""

from typing import Sequence

from domain.config import SystematicVariation
from domain.species import Species
from domain.tracks import Collision
from services.analysis.base import ModeAnalyzer
from services.jets.selection import JetDecision
from services.selection.track_selection import passed_dca_selection, passed_track_selection


class SystematicsDataAnalyzer(ModeAnalyzer):
    """(pt, n-sigma, variation) for antiprotons and antideuterons in jets."""

    mode = "systematics_data"
    supports_rejection = True
    event_counter = "number_of_events_syst"
    rejection_counter = "number_of_rejected_events_syst"

    def __init__(self, registry, track_cuts, pid, variations: Sequence[SystematicVariation]):
        super().__init__(registry, track_cuts, pid)
        self.variations = tuple(variations)
        self.varied_cuts = [track_cuts.with_variation(v) for v in self.variations]

    def analyze_selected_jet(self, collision: Collision, decision: JetDecision):
        tracks = collision.tracks
        for index in decision.jet.constituents:
            track = tracks[index]
            if track.sign >= 0:
                continue
            passing = [
                i for i, cuts in enumerate(self.varied_cuts)
                if passed_track_selection(track, cuts) and passed_dca_selection(track, cuts)
            ]
            if not passing:
                continue

            for species, name in ((Species.PROTON, "antiproton"), (Species.DEUTERON, "antideuteron")):
                if not self.pid.passes_its(track, species):
                    continue
                fill_tof = self.pid.in_tpc_window(track, species) and track.has_tof
                for i in passing:
                    self.registry.fill(f"{name}_tpc_syst", track.pt, track.tpc_nsigma(species), i)
                    if fill_tof:
                        self.registry.fill(f"{name}_tof_syst", track.pt, track.tof_nsigma(species), i)
