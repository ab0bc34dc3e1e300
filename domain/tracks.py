"""
Track and truth-particle domain models.

Immutable per-event records provided by the event source. The analysis
only reads them.
"""

from dataclasses import dataclass, field
from typing import Optional, Protocol

import vector

from domain.species import Species


class TrackLike(Protocol):
    """Accessors consumed by the track filters and the PID logic."""

    pt: float
    eta: float
    phi: float
    px: float
    py: float
    pz: float
    sign: int
    has_its: bool
    has_tpc: bool
    has_tof: bool
    its_cluster_map: int
    its_ncls: int
    tpc_ncls_crossed_rows: float
    tpc_ncls_findable: float
    tpc_chi2_ncl: float
    its_chi2_ncl: float
    dca_xy: float
    dca_z: float
    is_pv_contributor: bool
    mc_particle_index: Optional[int]

    def tpc_nsigma(self, species: Species) -> float: ...

    def tof_nsigma(self, species: Species) -> float: ...


@dataclass(frozen=True)
class Track:
    """Reconstructed charged-particle track."""

    pt: float
    eta: float
    phi: float
    px: float
    py: float
    pz: float
    sign: int

    # Detector hits and quality
    has_its: bool = True
    has_tpc: bool = True
    has_tof: bool = False
    its_cluster_map: int = 0b1111111
    its_ncls: int = 7
    tpc_ncls_crossed_rows: float = 120
    tpc_ncls_findable: float = 130
    tpc_chi2_ncl: float = 1.0
    its_chi2_ncl: float = 1.0
    is_pv_contributor: bool = True

    # Distance of closest approach
    dca_xy: float = 0.0
    dca_z: float = 0.0

    # PID significances
    tpc_nsigma_pr: float = 0.0
    tpc_nsigma_de: float = 0.0
    tpc_nsigma_he: float = 0.0
    tof_nsigma_pr: float = 0.0
    tof_nsigma_de: float = 0.0
    tof_nsigma_he: float = 0.0
    its_nsigma_pr: float = 0.0
    its_nsigma_de: float = 0.0
    its_nsigma_he: float = 0.0

    # Index into the event's truth-particle list, None when unmatched
    mc_particle_index: Optional[int] = None

    def __post_init__(self):
        """Validate the track."""
        if self.pt < 0:
            raise ValueError(f"pt must be non-negative, got {self.pt}")
        if self.sign not in (-1, 0, 1):
            raise ValueError(f"sign must be -1, 0 or 1, got {self.sign}")
        if self.its_ncls < 0:
            raise ValueError(f"its_ncls must be non-negative, got {self.its_ncls}")

    @classmethod
    def from_momentum(cls, px: float, py: float, pz: float, sign: int, **kwargs) -> 'Track':
        """
        Create a Track from its momentum components.

        Args:
            px, py, pz: Momentum components in GeV/c
            sign: Electric-charge sign
            **kwargs: Any other Track field

        Returns:
            Track with pt, eta and phi derived from the momentum
        """
        momentum = vector.obj(px=px, py=py, pz=pz)
        return cls(
            pt=float(momentum.rho),
            eta=float(momentum.eta),
            phi=float(momentum.phi),
            px=px,
            py=py,
            pz=pz,
            sign=sign,
            **kwargs,
        )

    @property
    def p(self) -> float:
        return (self.px ** 2 + self.py ** 2 + self.pz ** 2) ** 0.5

    @property
    def has_mc_particle(self) -> bool:
        return self.mc_particle_index is not None

    def tpc_nsigma(self, species: Species) -> float:
        return getattr(self, f"tpc_nsigma_{species.short_name}")

    def tof_nsigma(self, species: Species) -> float:
        return getattr(self, f"tof_nsigma_{species.short_name}")

    def its_nsigma(self, species: Species) -> float:
        return getattr(self, f"its_nsigma_{species.short_name}")


@dataclass(frozen=True)
class McParticle:
    """Generator-level (truth) particle."""

    px: float
    py: float
    pz: float
    pdg_code: int
    is_physical_primary: bool = True

    @property
    def momentum(self):
        return vector.obj(px=self.px, py=self.py, pz=self.pz)

    @property
    def pt(self) -> float:
        return float(self.momentum.rho)

    @property
    def eta(self) -> float:
        return float(self.momentum.eta)

    @property
    def phi(self) -> float:
        return float(self.momentum.phi)

    @property
    def p(self) -> float:
        return float(self.momentum.mag)


@dataclass(frozen=True)
class Collision:
    """
    One collision with its tracks and, for simulated data, truth particles.

    ``tracks`` and ``mc_particles`` are the per-event arenas: every index
    stored elsewhere (pseudo-particle back-references, track truth links)
    resolves into one of them.
    """

    sel8: bool
    pos_z: float
    tracks: tuple[Track, ...] = field(default_factory=tuple)
    mc_particles: tuple[McParticle, ...] = field(default_factory=tuple)
    index: int = 0

    def __post_init__(self):
        """Validate truth links."""
        n_particles = len(self.mc_particles)
        for track in self.tracks:
            if track.mc_particle_index is not None and not 0 <= track.mc_particle_index < n_particles:
                raise ValueError(
                    f"track truth link {track.mc_particle_index} out of range "
                    f"for {n_particles} mc particles"
                )

    def mc_particle_of(self, track: Track) -> Optional[McParticle]:
        """Resolve a track's truth link, None when unmatched."""
        if track.mc_particle_index is None:
            return None
        return self.mc_particles[track.mc_particle_index]
