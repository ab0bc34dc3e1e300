"""
Calibration services.

Fetching, caching and looking up calibration histograms.
"""

from .cache import CalibrationCache
from .fetcher import CalibrationFetcher
from .tables import PtUnfolding, ReweightingTable

__all__ = ["CalibrationCache", "CalibrationFetcher", "PtUnfolding", "ReweightingTable"]
