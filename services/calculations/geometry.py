"""
Geometry for underlying-event cones.

Perpendicular-axis construction and angular distances in (eta, phi).
"""

import logging
import math

import vector

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi


def zero_axis():
    return vector.obj(x=0.0, y=0.0, z=0.0)


def is_zero_axis(axis) -> bool:
    return axis.x == 0.0 and axis.y == 0.0 and axis.z == 0.0


def get_perpendicular_axis(p, sign: int):
    """
    Axis perpendicular to ``p`` that keeps its longitudinal component.

    The returned u satisfies u . p = 0 and u_z = p_z, so the axis has the
    polar extent of the jet rotated in azimuth. ``sign`` (+1 or -1)
    selects one of the two roots of the underlying quadratic.

    Args:
        p: 3-vector with x, y, z components (the jet momentum)
        sign: Root selection, +1 or -1

    Returns:
        vector 3D object; the zero vector when no valid axis exists
    """
    if sign not in (1, -1):
        raise ValueError(f"sign must be +1 or -1, got {sign}")

    px, py, pz = float(p.x), float(p.y), float(p.z)
    pz2 = pz * pz

    if px == 0.0 and py == 0.0:
        return zero_axis()

    if px == 0.0:
        radicand = py * py - pz2 * pz2 / (py * py)
        if radicand < 0:
            logger.warning(f"No perpendicular axis for p=({px}, {py}, {pz}): negative radicand")
            return zero_axis()
        ux = sign * math.sqrt(radicand)
        uy = -pz2 / py
        return vector.obj(x=ux, y=uy, z=pz)

    if py == 0.0:
        radicand = px * px - pz2 * pz2 / (px * px)
        if radicand < 0:
            logger.warning(f"No perpendicular axis for p=({px}, {py}, {pz}): negative radicand")
            return zero_axis()
        ux = -pz2 / px
        uy = sign * math.sqrt(radicand)
        return vector.obj(x=ux, y=uy, z=pz)

    a = px * px + py * py
    b = 2.0 * px * pz2
    c = pz2 * pz2 - py ** 4 - px * px * py * py
    delta = b * b - 4.0 * a * c

    if delta < 0 or a == 0:
        logger.warning(f"Invalid perpendicular-axis input p=({px}, {py}, {pz}), discriminant {delta}")
        return zero_axis()

    ux = (-b + sign * math.sqrt(delta)) / (2.0 * a)
    uy = (-pz2 - px * ux) / py
    return vector.obj(x=ux, y=uy, z=pz)


def get_delta_phi(phi1: float, phi2: float) -> float:
    """Azimuthal distance folded into [0, pi]."""
    diff = abs(phi1 % TWO_PI - phi2 % TWO_PI)
    if diff > math.pi:
        diff = TWO_PI - diff
    return diff


def delta_r(eta1: float, phi1: float, eta2: float, phi2: float) -> float:
    d_eta = eta1 - eta2
    d_phi = get_delta_phi(phi1, phi2)
    return math.sqrt(d_eta * d_eta + d_phi * d_phi)
