"""
Quality-control analyzer.

Jet multiplicities, areas, background subtraction and the geometry of
jet constituents and UE-cone tracks.
"""

import math
from typing import Sequence

from domain.jets import Jet
from domain.tracks import Collision
from services.analysis.base import ModeAnalyzer
from services.calculations.geometry import TWO_PI, get_delta_phi
from services.jets.selection import JetDecision
from services.jets.ue_cones import UETally
from services.selection.track_selection import passed_track_selection_for_jet_reconstruction


class QCAnalyzer(ModeAnalyzer):
    """Control distributions for the jet and UE reconstruction."""

    mode = "qc"

    def __init__(self, registry, track_cuts, pid, r_jet: float):
        super().__init__(registry, track_cuts, pid)
        self.r_jet = r_jet

    def on_jets_found(self, collision: Collision, jets: Sequence[Jet]):
        self.registry.fill("nJetsFound", len(jets))

    def on_jet_in_acceptance(self, collision: Collision, decision: JetDecision):
        self.registry.fill("sumPtJetCone", decision.jet.pt)
        self.registry.fill("jetPtDifference", decision.subtracted.pt - decision.jet.pt)

    def analyze_selected_jet(self, collision: Collision, decision: JetDecision):
        jet = decision.jet
        tracks = collision.tracks

        self.registry.fill("sumPtJet", jet.pt)
        self.registry.fill("jetEffectiveArea", jet.area / (math.pi * self.r_jet ** 2))
        self.registry.fill("NchJetCone", jet.n_constituents)

        jet_eta, jet_phi = jet.eta, jet.phi
        for index in jet.constituents:
            track = tracks[index]
            self.registry.fill("deltaEta_deltaPhi_jet", track.eta - jet_eta, get_delta_phi(track.phi, jet_phi))
            self.registry.fill("eta_phi_jet", track.eta, track.phi % TWO_PI)

        tally = UETally()
        for track in tracks:
            if not passed_track_selection_for_jet_reconstruction(track):
                continue
            distances = decision.cones.distances(track.eta, track.phi)
            if not any(dr <= decision.cones.radius for _, _, dr in distances):
                continue

            tally.add(track.pt)
            for d_eta, d_phi, _ in distances:
                self.registry.fill("deltaEta_deltaPhi_ue", d_eta, d_phi)
            self.registry.fill("eta_phi_ue", track.eta, track.phi % TWO_PI)

        self.registry.fill("NchUE", tally.per_cone_multiplicity)
        self.registry.fill("NchJet", jet.n_constituents - tally.per_cone_multiplicity)
        self.registry.fill("sumPtUE", tally.per_cone_sum_pt)

    def finish_jets(self, collision: Collision, decisions: Sequence[JetDecision]):
        self.registry.fill("nJetsInAcceptance", sum(1 for d in decisions if d.in_acceptance))
        self.registry.fill("nJetsSelectedHighPt", sum(1 for d in decisions if d.selected))
