"""
Jet selection.

Fiducial acceptance, background subtraction, optional pt unfolding and
the pt threshold, evaluated per jet.
"""

from dataclasses import dataclass
from typing import Optional

from domain.config import JetConfig
from domain.jets import BackgroundEstimate, Jet, SubtractedJet
from services.jets.background import BackgroundSubtractor
from services.jets.ue_cones import UEConePair


@dataclass(frozen=True)
class JetDecision:
    """Outcome of the selection for one jet."""

    jet: Jet
    in_acceptance: bool
    subtracted: Optional[SubtractedJet] = None
    corrected_pt: Optional[float] = None
    selected: bool = False
    cones: Optional[UEConePair] = None


class JetSelector:
    """
    Applies the acceptance and pt-threshold gates to clustered jets.

    Args:
        config: Jet configuration (R, threshold, edge margin)
        subtractor: Background subtractor
        max_eta: Track pseudorapidity acceptance
        unfolding: Object with ``corrected_pt(pt)``; None disables unfolding
    """

    def __init__(self, config: JetConfig, subtractor: BackgroundSubtractor,
                 max_eta: float = 0.8, unfolding=None):
        self.config = config
        self.subtractor = subtractor
        self.max_eta = max_eta
        self.unfolding = unfolding

    def in_acceptance(self, jet: Jet) -> bool:
        """Full jet cone inside the fiducial acceptance."""
        return abs(jet.eta) + self.config.r_jet <= self.max_eta - self.config.delta_eta_edge

    def evaluate(self, jet: Jet, background: BackgroundEstimate) -> JetDecision:
        if not self.in_acceptance(jet):
            return JetDecision(jet=jet, in_acceptance=False)

        subtracted = self.subtractor.subtract(jet, background)
        corrected_pt = subtracted.pt
        if self.unfolding is not None:
            corrected_pt = self.unfolding.corrected_pt(corrected_pt)

        if corrected_pt < self.config.min_jet_pt:
            return JetDecision(jet=jet, in_acceptance=True, subtracted=subtracted,
                               corrected_pt=corrected_pt)

        # Cones are built from the jet axis before subtraction
        return JetDecision(
            jet=jet,
            in_acceptance=True,
            subtracted=subtracted,
            corrected_pt=corrected_pt,
            selected=True,
            cones=UEConePair.for_jet(jet),
        )
