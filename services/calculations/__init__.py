"""
Calculation services.

Pure geometry used by the underlying-event cones.
"""

from .geometry import get_perpendicular_axis, get_delta_phi, delta_r, is_zero_axis

__all__ = ["get_perpendicular_axis", "get_delta_phi", "delta_r", "is_zero_axis"]
