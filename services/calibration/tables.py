"""
Calibration lookups.

pt unfolding from a detector response matrix and (pt, eta) reweighting
tables. Both degrade to the identity when their histogram is missing.
"""

import logging
from typing import Optional

import numpy as np

from domain.calibration import Histogram2D


class PtUnfolding:
    """
    Stochastic jet-pt correction.

    The response matrix has the reconstructed pt on x and
    (generated - reconstructed) pt on y. The correction draws a delta pt
    from the y projection of the reconstructed-pt bin.
    """

    def __init__(self, response_matrix: Optional[Histogram2D], rng: np.random.Generator):
        """
        Initialize unfolding.

        Args:
            response_matrix: Response histogram, None when unavailable
            rng: Random source for the delta-pt draws
        """
        self.response_matrix = response_matrix
        self.rng = rng
        self.logger = logging.getLogger(self.__class__.__name__)
        self._reported_missing = False

    @property
    def available(self) -> bool:
        return self.response_matrix is not None

    def corrected_pt(self, pt_rec: float) -> float:
        """
        Reconstructed pt plus a random delta pt.

        Returns ``pt_rec`` unchanged when the matrix is missing, the pt
        is outside the x axis, or the projection is empty.
        """
        matrix = self.response_matrix
        if matrix is None:
            if not self._reported_missing:
                self.logger.error("Response matrix not available, jet pt is not unfolded")
                self._reported_missing = True
            return pt_rec

        x_bin = matrix.find_x_bin(pt_rec)
        if x_bin is None:
            self.logger.debug(f"pt {pt_rec:.2f} outside response matrix range")
            return pt_rec

        projection = np.clip(matrix.projection_y(x_bin), 0.0, None)
        total = projection.sum()
        if total <= 0:
            return pt_rec

        y_bin = self.rng.choice(len(projection), p=projection / total)
        low, high = matrix.y_edges[y_bin], matrix.y_edges[y_bin + 1]
        delta_pt = low + (high - low) * self.rng.random()
        return pt_rec + float(delta_pt)


class ReweightingTable:
    """
    Weight lookup in (pt, eta).

    Weight 1 when the table is missing or the point is outside it.
    """

    def __init__(self, histogram: Optional[Histogram2D]):
        self.histogram = histogram

    @property
    def available(self) -> bool:
        return self.histogram is not None

    def weight(self, pt: float, eta: float) -> float:
        if self.histogram is None:
            return 1.0
        bin_index = self.histogram.find_bin(pt, eta)
        if bin_index is None:
            return 1.0
        return float(self.histogram.values[bin_index])
