"""
Selection services.

Track filters and particle identification.
"""

from .track_selection import (
    passed_track_selection_for_jet_reconstruction,
    passed_track_selection,
    passed_dca_selection,
    is_high_purity_antiproton,
    is_high_purity_antiproton_candidate,
)
from .pid import PidSelector, ItsResponse, StoredItsResponse

__all__ = [
    "passed_track_selection_for_jet_reconstruction",
    "passed_track_selection",
    "passed_dca_selection",
    "is_high_purity_antiproton",
    "is_high_purity_antiproton_candidate",
    "PidSelector",
    "ItsResponse",
    "StoredItsResponse",
]
