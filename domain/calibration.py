"""
Calibration payload model.

Two-dimensional histogram content decoded from the calibration store.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True, eq=False)
class Histogram2D:
    """
    Plain 2D histogram: bin contents plus edges.

    ``values`` has shape (len(x_edges) - 1, len(y_edges) - 1); flow bins
    are not stored.
    """

    name: str
    values: np.ndarray
    x_edges: np.ndarray
    y_edges: np.ndarray

    def __post_init__(self):
        """Validate shapes."""
        expected = (len(self.x_edges) - 1, len(self.y_edges) - 1)
        if self.values.shape != expected:
            raise ValueError(
                f"values shape {self.values.shape} does not match edges {expected}"
            )
        if np.any(np.diff(self.x_edges) <= 0) or np.any(np.diff(self.y_edges) <= 0):
            raise ValueError("histogram edges must be strictly increasing")

    @property
    def n_x_bins(self) -> int:
        return len(self.x_edges) - 1

    def find_x_bin(self, x: float) -> Optional[int]:
        """Zero-based x bin containing ``x``, None outside the axis range."""
        if not self.x_edges[0] <= x < self.x_edges[-1]:
            return None
        return int(np.searchsorted(self.x_edges, x, side="right") - 1)

    def find_bin(self, x: float, y: float) -> Optional[tuple[int, int]]:
        """Zero-based (x, y) bin, None outside either axis range."""
        ix = self.find_x_bin(x)
        if ix is None or not self.y_edges[0] <= y < self.y_edges[-1]:
            return None
        iy = int(np.searchsorted(self.y_edges, y, side="right") - 1)
        return ix, iy

    def projection_y(self, x_bin: int) -> np.ndarray:
        """Bin contents along y at a fixed x bin."""
        return self.values[x_bin, :]
