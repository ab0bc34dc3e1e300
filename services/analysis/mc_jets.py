"""
Monte-Carlo jet analyzers.

Antiproton spectra in generator-level jets, and the reconstructed-level
counterpart that also fills the detector response matrix used by the
jet-pt unfolding.
"""

from typing import Optional

from domain.jets import PseudoParticle
from domain.species import ANTIPROTON_PDG, Species
from domain.tracks import Collision, McParticle
from services.analysis.base import ModeAnalyzer
from services.calibration.tables import ReweightingTable
from services.jets.selection import JetDecision
from services.selection.track_selection import passed_dca_selection, passed_track_selection

MIN_GENERATED_PT = 0.1


class GeneratedJetsAnalyzer(ModeAnalyzer):
    """
    Jets clustered from primary truth particles.

    Pseudo-particle indices point into ``collision.mc_particles``.
    """

    mode = "jets_mc_gen"
    uses_unfolding = False
    event_counter = "number_of_events_mc_gen"

    def accepts(self, particle: McParticle) -> bool:
        """Primary particle inside the clustering acceptance."""
        cuts = self.track_cuts
        if not particle.is_physical_primary:
            return False
        if particle.eta < cuts.min_eta or particle.eta > cuts.max_eta:
            return False
        return particle.pt >= MIN_GENERATED_PT

    def build_jet_input(self, collision: Collision) -> list[PseudoParticle]:
        return [
            PseudoParticle.from_momentum(particle.px, particle.py, particle.pz, index=i)
            for i, particle in enumerate(collision.mc_particles)
            if self.accepts(particle)
        ]

    def analyze_selected_jet(self, collision: Collision, decision: JetDecision):
        particles = collision.mc_particles
        for index in decision.jet.constituents:
            particle = particles[index]
            if particle.pdg_code != ANTIPROTON_PDG:
                continue
            self.registry.fill("antiproton_jet_gen", particle.pt)
            self.registry.fill("antiproton_eta_pt_jet", particle.pt, particle.eta)

        for particle in particles:
            if particle.pdg_code != ANTIPROTON_PDG or not self.accepts(particle):
                continue
            if not decision.cones.contains(particle.eta, particle.phi):
                continue
            self.registry.fill("antiproton_ue_gen", particle.pt)
            self.registry.fill("antiproton_eta_pt_ue", particle.pt, particle.eta)


class ReconstructedJetsAnalyzer(ModeAnalyzer):
    """
    Jets clustered from reconstructed tracks with truth links.

    Args:
        registry, track_cuts, pid: See ModeAnalyzer
        weight_jet: Antiproton reweighting table for the jet region
        weight_ue: Antiproton reweighting table for the UE region
    """

    mode = "jets_mc_rec"
    event_counter = "number_of_events_mc_rec"

    def __init__(self, registry, track_cuts, pid,
                 weight_jet: Optional[ReweightingTable] = None,
                 weight_ue: Optional[ReweightingTable] = None):
        super().__init__(registry, track_cuts, pid)
        self.weights = {
            "jet": weight_jet or ReweightingTable(None),
            "ue": weight_ue or ReweightingTable(None),
        }

    def on_jet_in_acceptance(self, collision: Collision, decision: JetDecision):
        jet = decision.jet
        pt_gen = 0.0
        for index in jet.constituents:
            particle = collision.mc_particle_of(collision.tracks[index])
            if particle is not None:
                pt_gen += particle.pt
        self.registry.fill("detectorResponseMatrix", jet.pt, pt_gen - jet.pt)

    def analyze_selected_jet(self, collision: Collision, decision: JetDecision):
        tracks = collision.tracks
        for index in decision.jet.constituents:
            self.fill_antiproton(collision, tracks[index], "jet")

        for track in tracks:
            if decision.cones.contains(track.eta, track.phi):
                self.fill_antiproton(collision, track, "ue")

    def fill_antiproton(self, collision: Collision, track, region: str):
        """Truth-matched antiproton fills for one track in ``region``."""
        if not passed_track_selection(track, self.track_cuts):
            return
        if not passed_dca_selection(track, self.track_cuts):
            return
        if track.sign > 0:
            return
        particle = collision.mc_particle_of(track)
        if particle is None or particle.pdg_code != ANTIPROTON_PDG:
            return

        pt = track.pt
        weight = self.weights[region].weight(pt, track.eta)
        self.registry.fill(f"antiproton_{region}_all", pt, weight=weight)
        if not particle.is_physical_primary:
            return
        self.registry.fill(f"antiproton_{region}_prim", pt, weight=weight)

        if not self.pid.passes_its(track, Species.PROTON):
            return
        if not self.pid.in_tpc_window(track, Species.PROTON):
            return
        self.registry.fill(f"antiproton_{region}_rec_tpc", pt, weight=weight)
        if self.pid.in_tof_window(track, Species.PROTON):
            self.registry.fill(f"antiproton_{region}_rec_tof", pt, weight=weight)
