"""
Inclusive Monte-Carlo efficiency analyzers.

Generated spectra of primary (anti)nuclei and the reconstructed,
truth-matched spectra after the physics and PID selections. No jets.
"""

from typing import Sequence

from domain.config import SystematicVariation
from domain.species import ANTIPROTON_PDG, Species
from domain.tracks import Collision, McParticle
from services.analysis.base import InclusiveAnalyzer
from services.selection.track_selection import passed_dca_selection, passed_track_selection

# Histogram name prefix per generated PDG code
GENERATED_NAMES = {
    ANTIPROTON_PDG: "antiproton",
    Species.DEUTERON.pdg_code: "deuteron",
    Species.DEUTERON.anti_pdg_code: "antideuteron",
    Species.HELIUM3.pdg_code: "helium3",
    Species.HELIUM3.anti_pdg_code: "antihelium3",
}


class EfficiencyAnalyzer(InclusiveAnalyzer):
    """
    Fills the inclusive generated and reconstructed spectra.

    Only the truth particles and tracks of the current collision are used.
    """

    mode = "efficiency"
    event_counter = "number_of_events_mc"

    def analyze_tracks(self, collision: Collision):
        self.fill_generated(collision.mc_particles)
        for track in collision.tracks:
            self.fill_reconstructed(collision, track)

    def fill_generated(self, particles: Sequence[McParticle]):
        cuts = self.track_cuts
        for particle in particles:
            if not particle.is_physical_primary:
                continue
            if particle.pdg_code == ANTIPROTON_PDG:
                self.registry.fill("antiproton_eta_pt_pythia", particle.pt, particle.eta)
            if particle.eta < cuts.min_eta or particle.eta > cuts.max_eta:
                continue
            name = GENERATED_NAMES.get(particle.pdg_code)
            if name is not None:
                self.registry.fill(f"{name}_incl_gen", particle.pt)

    def fill_reconstructed(self, collision: Collision, track):
        if not passed_track_selection(track, self.track_cuts):
            return
        if not passed_dca_selection(track, self.track_cuts):
            return
        particle = collision.mc_particle_of(track)
        if particle is None:
            return

        pdg = particle.pdg_code
        pt = track.pt
        if pdg == ANTIPROTON_PDG:
            self.registry.fill("antiproton_incl_all", pt)
        if not particle.is_physical_primary:
            return
        if pdg == ANTIPROTON_PDG:
            self.registry.fill("antiproton_incl_prim", pt)

        flags = self.pid.its_flags(track)
        for species in (Species.PROTON, Species.DEUTERON):
            name = GENERATED_NAMES.get(pdg) if abs(pdg) == species.pdg_code else None
            if name is None or not flags.passes(species):
                continue
            if not self.pid.in_tpc_window(track, species):
                continue
            self.registry.fill(f"{name}_incl_rec_tpc", pt)
            if self.pid.in_tof_window(track, species):
                self.registry.fill(f"{name}_incl_rec_tof", pt)

        if abs(pdg) == Species.HELIUM3.pdg_code and flags.helium:
            if self.pid.in_tpc_window(track, Species.HELIUM3):
                self.registry.fill(f"{GENERATED_NAMES[pdg]}_incl_rec_tpc", 2.0 * pt)


class SystematicsEfficiencyAnalyzer(InclusiveAnalyzer):
    """
    Inclusive efficiency for every systematic cut set.

    Reconstructed fills are (pt, variation index).
    """

    mode = "systematics_efficiency"
    event_counter = "number_of_events_mc_syst"

    def __init__(self, registry, track_cuts, pid, variations: Sequence[SystematicVariation]):
        super().__init__(registry, track_cuts, pid)
        self.variations = tuple(variations)
        self.varied_cuts = [track_cuts.with_variation(v) for v in self.variations]

    def analyze_tracks(self, collision: Collision):
        cuts = self.track_cuts
        for particle in collision.mc_particles:
            if not particle.is_physical_primary:
                continue
            if particle.eta < cuts.min_eta or particle.eta > cuts.max_eta:
                continue
            if particle.pdg_code == ANTIPROTON_PDG:
                self.registry.fill("antiproton_incl_gen_syst", particle.pt)
            elif particle.pdg_code == Species.DEUTERON.anti_pdg_code:
                self.registry.fill("antideuteron_incl_gen_syst", particle.pt)

        for track in collision.tracks:
            particle = collision.mc_particle_of(track)
            if particle is None or not particle.is_physical_primary:
                continue
            if particle.pdg_code == ANTIPROTON_PDG:
                species, name = Species.PROTON, "antiproton"
            elif particle.pdg_code == Species.DEUTERON.anti_pdg_code:
                species, name = Species.DEUTERON, "antideuteron"
            else:
                continue

            passes_its = self.pid.passes_its(track, species)
            in_tpc = self.pid.in_tpc_window(track, species)
            in_tof = self.pid.in_tof_window(track, species)
            for i, varied in enumerate(self.varied_cuts):
                if not passed_track_selection(track, varied) or not passed_dca_selection(track, varied):
                    continue
                if species is Species.PROTON:
                    self.registry.fill("antiproton_incl_prim_syst", track.pt, i)
                if not (passes_its and in_tpc):
                    continue
                self.registry.fill(f"{name}_incl_rec_tpc_syst", track.pt, i)
                if in_tof:
                    self.registry.fill(f"{name}_incl_rec_tof_syst", track.pt, i)
