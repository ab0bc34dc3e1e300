"""
Background estimation and subtraction.

Per-event diffuse background densities and area-based subtraction of a
jet's four-momentum.
"""

import logging
import math
from typing import Sequence

import fastjet

from domain.jets import BackgroundEstimate, Jet, PseudoParticle, SubtractedJet
from services.calculations.geometry import get_delta_phi


class BackgroundSubtractor:
    """
    Estimates rho / rho_m once per event and subtracts rho * A from jets.

    Two estimators are available:
      - "median": fastjet's jet-median estimator on kt jets with explicit
        ghosts, so empty patches of the acceptance count as zero-density
        jets; the ``n_hard_reject`` hardest jets are left out
      - "perp_cone": pt density in two cones perpendicular in azimuth to
        the leading jet
    """

    def __init__(
        self,
        method: str = "median",
        n_hard_reject: int = 2,
        eta_max: float = 0.9,
        cone_radius: float = 0.2,
        use_rho_m: bool = False,
        r_jet: float = 0.3,
        ghost_area_max_rap: float = 1.0,
    ):
        if method not in ("median", "perp_cone"):
            raise ValueError(f"Unknown background method: {method}")
        self.method = method
        self.n_hard_reject = n_hard_reject
        self.eta_max = eta_max
        self.cone_radius = cone_radius
        self.use_rho_m = use_rho_m
        self.r_jet = r_jet
        self.ghost_area_max_rap = ghost_area_max_rap
        self.logger = logging.getLogger(self.__class__.__name__)

        self.jet_definition = fastjet.JetDefinition(fastjet.kt_algorithm, r_jet)
        self.area_definition = fastjet.AreaDefinition(
            fastjet.active_area_explicit_ghosts, fastjet.GhostedAreaSpec(ghost_area_max_rap)
        )
        self.selector = fastjet.SelectorAbsRapMax(eta_max - r_jet) * (~fastjet.SelectorNHardest(n_hard_reject))

    def estimate(self, particles: Sequence[PseudoParticle], jets: Sequence[Jet]) -> BackgroundEstimate:
        """
        Background densities for one event.

        Must be called after clustering and before any jet is subtracted.
        Falls back to zero densities when there is nothing to estimate from.
        """
        if not particles or not jets:
            return BackgroundEstimate()
        if self.method == "perp_cone":
            return self._estimate_perp_cone(particles, jets)
        return self._estimate_median(particles)

    def _estimate_median(self, particles: Sequence[PseudoParticle]) -> BackgroundEstimate:
        estimator = fastjet.JetMedianBackgroundEstimator(
            self.selector, self.jet_definition, self.area_definition
        )
        estimator.set_particles([
            fastjet.PseudoJet(particle.px, particle.py, particle.pz, particle.e)
            for particle in particles
        ])
        rho = estimator.rho()
        rho_m = estimator.rho_m()
        return BackgroundEstimate(rho=max(rho, 0.0), rho_m=max(rho_m, 0.0))

    def _estimate_perp_cone(self, particles: Sequence[PseudoParticle], jets: Sequence[Jet]) -> BackgroundEstimate:
        accepted = [jet for jet in jets if abs(jet.eta) < self.eta_max]
        if not accepted:
            return BackgroundEstimate()

        leading = max(accepted, key=lambda j: j.pt)
        perp_phis = (leading.phi + math.pi / 2.0, leading.phi - math.pi / 2.0)

        pt_sum = 0.0
        mt_sum = 0.0
        for particle in particles:
            momentum = particle.momentum
            d_eta = leading.eta - float(momentum.eta)
            for perp_phi in perp_phis:
                d_phi = get_delta_phi(float(momentum.phi), perp_phi)
                if math.sqrt(d_eta * d_eta + d_phi * d_phi) <= self.cone_radius:
                    pt_sum += float(momentum.pt)
                    mt_sum += _mt_excess(momentum)

        # Average of the two cones
        cone_area = math.pi * self.cone_radius ** 2
        return BackgroundEstimate(rho=pt_sum / (2.0 * cone_area), rho_m=mt_sum / (2.0 * cone_area))

    def subtract(self, jet: Jet, background: BackgroundEstimate) -> SubtractedJet:
        """
        Area-based four-momentum subtraction.

        Returns a zero-pt working copy when the subtracted transverse
        momentum exceeds the jet's own.
        """
        ax, ay, az, ae = jet.area_4vector
        rho, rho_m = background.rho, background.rho_m

        sub_px = rho * ax
        sub_py = rho * ay
        sub_pz = rho * az
        sub_e = rho * ae
        if self.use_rho_m:
            sub_pz += rho_m * az
            sub_e += rho_m * ae

        if rho * math.hypot(ax, ay) >= jet.pt and rho > 0:
            return SubtractedJet(px=0.0, py=0.0, pz=0.0, e=0.0)

        return SubtractedJet(
            px=jet.px - sub_px,
            py=jet.py - sub_py,
            pz=jet.pz - sub_pz,
            e=jet.e - sub_e,
        )


def _mt_excess(momentum) -> float:
    pt = float(momentum.pt)
    mass2 = max(float(momentum.mass2), 0.0)
    return math.sqrt(mass2 + pt * pt) - pt
