"""
Particle species handled by the analysis.

PDG codes, masses and the per-track PID outcome.
"""

from dataclasses import dataclass
from enum import Enum


class Species(Enum):
    """Nuclei species identified by the analysis (positive-charge PDG code as value)."""

    PROTON = 2212
    DEUTERON = 1000010020
    HELIUM3 = 1000020030

    @property
    def pdg_code(self) -> int:
        return self.value

    @property
    def anti_pdg_code(self) -> int:
        return -self.value

    @property
    def short_name(self) -> str:
        """Suffix used by the per-species track accessors (pr, de, he)."""
        return _SHORT_NAMES[self]

    def __str__(self) -> str:
        return self.name.lower()


_SHORT_NAMES = {
    Species.PROTON: "pr",
    Species.DEUTERON: "de",
    Species.HELIUM3: "he",
}

CHARGED_PION_MASS = 0.13957039
ANTIPROTON_PDG = Species.PROTON.anti_pdg_code


@dataclass(frozen=True)
class SpeciesPidFlags:
    """
    ITS PID outcome for one track.

    Each flag is computed independently; a track may pass several hypotheses.
    """

    proton: bool
    deuteron: bool
    helium: bool

    def passes(self, species: Species) -> bool:
        if species is Species.PROTON:
            return self.proton
        if species is Species.DEUTERON:
            return self.deuteron
        return self.helium
