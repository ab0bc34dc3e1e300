"""
Jet-related domain models.

Pseudo-particles fed to the clustering, clustered jets and the per-event
background estimate. All of them live for a single event.
"""

import math
from dataclasses import dataclass

import vector

from domain.species import CHARGED_PION_MASS


@dataclass(frozen=True)
class PseudoParticle:
    """
    Four-momentum handed to the clustering.

    ``index`` is the position of the originating record in the event's
    track (or truth-particle) list.
    """

    px: float
    py: float
    pz: float
    e: float
    index: int

    def __post_init__(self):
        """Validate pseudo-particle."""
        if self.index < 0:
            raise ValueError(f"index must be non-negative, got {self.index}")

    @classmethod
    def from_momentum(cls, px: float, py: float, pz: float, index: int,
                      mass: float = CHARGED_PION_MASS) -> 'PseudoParticle':
        """Build a pseudo-particle with the energy of the given mass hypothesis."""
        energy = math.sqrt(px * px + py * py + pz * pz + mass * mass)
        return cls(px=px, py=py, pz=pz, e=energy, index=index)

    @property
    def momentum(self):
        return vector.obj(px=self.px, py=self.py, pz=self.pz, E=self.e)


@dataclass(frozen=True)
class Jet:
    """
    Clustered jet.

    Attributes:
        px, py, pz, e: Jet four-momentum before background subtraction
        area: Scalar catchment area from the ghost-area technique
        area_4vector: Four-vector area (px, py, pz, E) used by the subtraction
        constituents: Back-reference indices of the constituent pseudo-particles
    """

    px: float
    py: float
    pz: float
    e: float
    area: float
    area_4vector: tuple[float, float, float, float]
    constituents: tuple[int, ...]

    def __post_init__(self):
        """Validate jet."""
        if self.area < 0:
            raise ValueError(f"area must be non-negative, got {self.area}")
        if len(set(self.constituents)) != len(self.constituents):
            raise ValueError("jet constituents must be unique")

    @classmethod
    def from_kinematics(cls, pt: float, eta: float, phi: float, area: float,
                        constituents: tuple[int, ...] = (), mass: float = 0.0) -> 'Jet':
        """
        Build a jet from (pt, eta, phi, m) with a massless area four-vector
        of transverse size ``area`` along the jet direction.
        """
        momentum = vector.obj(pt=pt, eta=eta, phi=phi, mass=mass)
        area_vector = vector.obj(pt=area, eta=eta, phi=phi, mass=0.0)
        return cls(
            px=float(momentum.px),
            py=float(momentum.py),
            pz=float(momentum.pz),
            e=float(momentum.E),
            area=area,
            area_4vector=(
                float(area_vector.px),
                float(area_vector.py),
                float(area_vector.pz),
                float(area_vector.E),
            ),
            constituents=tuple(constituents),
        )

    @property
    def momentum(self):
        return vector.obj(px=self.px, py=self.py, pz=self.pz, E=self.e)

    @property
    def pt(self) -> float:
        return float(self.momentum.pt)

    @property
    def eta(self) -> float:
        return float(self.momentum.eta)

    @property
    def phi(self) -> float:
        return float(self.momentum.phi)

    @property
    def mass(self) -> float:
        return float(self.momentum.mass)

    @property
    def n_constituents(self) -> int:
        return len(self.constituents)


@dataclass(frozen=True)
class BackgroundEstimate:
    """Per-event diffuse background densities (rho and rho_m)."""

    rho: float = 0.0
    rho_m: float = 0.0

    def __post_init__(self):
        """Validate densities."""
        if self.rho < 0 or self.rho_m < 0:
            raise ValueError(f"background densities must be non-negative, got {self.rho}, {self.rho_m}")


@dataclass(frozen=True)
class SubtractedJet:
    """
    Working copy of a jet's four-momentum after area-based subtraction.

    The constituents of the originating jet are not touched.
    """

    px: float
    py: float
    pz: float
    e: float

    @property
    def momentum(self):
        return vector.obj(px=self.px, py=self.py, pz=self.pz, E=self.e)

    @property
    def pt(self) -> float:
        return float(self.momentum.pt)
