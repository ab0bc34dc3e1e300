"""
Underlying-event cones.

Two cones perpendicular in azimuth to a jet, with the jet's effective
radius, used as the UE control region.
"""

import math
from dataclasses import dataclass

from domain.jets import Jet
from services.calculations.geometry import (
    delta_r,
    get_delta_phi,
    get_perpendicular_axis,
    is_zero_axis,
)


@dataclass(frozen=True)
class UEConePair:
    """
    Pair of UE cone axes for one jet.

    A zero axis marks a cone that could not be built; nothing is ever
    inside it.
    """

    axis1: object
    axis2: object
    radius: float

    @classmethod
    def for_jet(cls, jet: Jet) -> 'UEConePair':
        """
        Build both cones from the jet momentum before background subtraction.

        The radius reproduces the jet area as a circle: sqrt(area / pi).
        """
        momentum = jet.momentum.to_Vector3D()
        return cls(
            axis1=get_perpendicular_axis(momentum, +1),
            axis2=get_perpendicular_axis(momentum, -1),
            radius=math.sqrt(jet.area / math.pi),
        )

    @property
    def axes(self) -> tuple:
        return (self.axis1, self.axis2)

    def distances(self, eta: float, phi: float) -> list[tuple[float, float, float]]:
        """(delta eta, delta phi, delta R) to each valid axis."""
        result = []
        for axis in self.axes:
            if is_zero_axis(axis):
                continue
            axis_eta, axis_phi = float(axis.eta), float(axis.phi)
            result.append((
                eta - axis_eta,
                get_delta_phi(phi, axis_phi),
                delta_r(eta, phi, axis_eta, axis_phi),
            ))
        return result

    def contains(self, eta: float, phi: float) -> bool:
        """Inside cone 1 OR cone 2."""
        return any(dr <= self.radius for _, _, dr in self.distances(eta, phi))


@dataclass
class UETally:
    """
    Pooled multiplicity and summed pt over both UE cones.

    The recorded per-cone values are the pooled ones halved, once.
    """

    count: int = 0
    sum_pt: float = 0.0

    def add(self, pt: float):
        self.count += 1
        self.sum_pt += pt

    @property
    def per_cone_multiplicity(self) -> float:
        return 0.5 * self.count

    @property
    def per_cone_sum_pt(self) -> float:
        return 0.5 * self.sum_pt
