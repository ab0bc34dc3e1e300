"""
Data analyzer.

Antinuclei and nuclei candidates in selected jets and in their UE cones.
"""

from domain.species import Species
from domain.tracks import Collision, TrackLike
from services.analysis.base import ModeAnalyzer
from services.jets.selection import JetDecision
from services.selection.track_selection import (
    is_high_purity_antiproton_candidate,
    passed_dca_selection,
    passed_track_selection,
)


class DataAnalyzer(ModeAnalyzer):
    """
    Fills (pt, n-sigma) distributions per species for the jet and UE regions.

    The high-purity antiproton DCA distribution is filled before the DCA
    cut is applied.
    """

    mode = "data"
    supports_rejection = True
    event_counter = "number_of_events_data"
    rejection_counter = "number_of_rejected_events"
    jet_counter = "number_of_jets_data"

    def analyze_selected_jet(self, collision: Collision, decision: JetDecision):
        self.registry.fill(self.jet_counter, 0.5)

        tracks = collision.tracks
        for index in decision.jet.constituents:
            self.fill_candidate(tracks[index], "jet")

        for track in tracks:
            if decision.cones.contains(track.eta, track.phi):
                self.fill_candidate(track, "ue")

    def fill_candidate(self, track: TrackLike, region: str):
        """
        Apply the physics selection to one track and fill its histograms.

        Args:
            track: Track to classify
            region: "jet" or "ue"
        """
        cuts = self.track_cuts
        if not passed_track_selection(track, cuts):
            return

        if is_high_purity_antiproton_candidate(track) and abs(track.dca_z) < cuts.max_dca_z:
            self.registry.fill(f"antiproton_dca_{region}", track.pt, track.dca_xy)

        if not passed_dca_selection(track, cuts):
            return

        flags = self.pid.its_flags(track)
        pt = track.pt

        if track.sign < 0:
            for species, name in ((Species.PROTON, "antiproton"), (Species.DEUTERON, "antideuteron")):
                if not flags.passes(species):
                    continue
                self.registry.fill(f"{name}_{region}_tpc", pt, track.tpc_nsigma(species))
                if self.pid.in_tpc_window(track, species) and track.has_tof:
                    self.registry.fill(f"{name}_{region}_tof", pt, track.tof_nsigma(species))
            if flags.helium:
                self.registry.fill(f"antihelium3_{region}_tpc", 2.0 * pt, track.tpc_nsigma(Species.HELIUM3))

        elif track.sign > 0:
            if flags.deuteron and self.pid.in_tpc_window(track, Species.DEUTERON) and track.has_tof:
                self.registry.fill(f"deuteron_{region}_tof", pt, track.tof_nsigma(Species.DEUTERON))
            if flags.helium:
                self.registry.fill(f"helium3_{region}_tpc", 2.0 * pt, track.tpc_nsigma(Species.HELIUM3))
