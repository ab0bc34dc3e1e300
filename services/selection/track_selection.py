"""
Track selection predicates.

Three independent families:
  - jet-reconstruction filter (fixed cuts, builds the clustering input)
  - physics selection (configurable, decides which tracks are examined for nuclei)
  - high-purity antiproton filter (DCA control sample)
"""

import math

from domain.config import TrackCuts
from domain.species import Species
from domain.tracks import TrackLike

# Jet-reconstruction cuts
JET_RECO_MIN_TPC_CROSSED_ROWS = 70
JET_RECO_MIN_CROSSED_ROWS_OVER_FINDABLE = 0.8
JET_RECO_MAX_CHI2_TPC = 4.0
JET_RECO_MAX_CHI2_ITS = 36.0
JET_RECO_MAX_ABS_ETA = 0.8
JET_RECO_MIN_PT = 0.1
JET_RECO_DCA_XY_PARAMS = (0.0105, 0.035, 1.1)
JET_RECO_MAX_DCA_Z = 2.0

HIGH_PURITY_PT_SWITCH = 0.5
HIGH_PURITY_MAX_NSIGMA = 2.0


def has_its_hit(track: TrackLike, layer: int) -> bool:
    """Check the ITS cluster map for a hit on ``layer`` (1-based)."""
    return bool(track.its_cluster_map & (1 << (layer - 1)))


def crossed_rows_over_findable(track: TrackLike) -> float:
    if track.tpc_ncls_findable <= 0:
        return math.inf
    return track.tpc_ncls_crossed_rows / track.tpc_ncls_findable


def max_dca_xy_jet_reconstruction(pt: float) -> float:
    a, b, c = JET_RECO_DCA_XY_PARAMS
    return a + b / pt ** c


def passed_track_selection_for_jet_reconstruction(track: TrackLike) -> bool:
    if not track.has_its:
        return False
    if not (has_its_hit(track, 1) or has_its_hit(track, 2) or has_its_hit(track, 3)):
        return False
    if not track.has_tpc:
        return False
    if track.tpc_ncls_crossed_rows < JET_RECO_MIN_TPC_CROSSED_ROWS:
        return False
    if crossed_rows_over_findable(track) < JET_RECO_MIN_CROSSED_ROWS_OVER_FINDABLE:
        return False
    if track.tpc_chi2_ncl > JET_RECO_MAX_CHI2_TPC:
        return False
    if track.its_chi2_ncl > JET_RECO_MAX_CHI2_ITS:
        return False
    if abs(track.eta) > JET_RECO_MAX_ABS_ETA:
        return False
    if track.pt < JET_RECO_MIN_PT:
        return False
    if abs(track.dca_xy) > max_dca_xy_jet_reconstruction(track.pt):
        return False
    if abs(track.dca_z) > JET_RECO_MAX_DCA_Z:
        return False
    return True


def passed_track_selection(track: TrackLike, cuts: TrackCuts) -> bool:
    """
    Physics track selection, without the DCA cuts.

    DCA is applied separately with ``passed_dca_selection`` because the
    DCA control distribution is filled between the two steps.
    """
    if cuts.require_pv_contributor and not track.is_pv_contributor:
        return False
    if not track.has_its:
        return False
    if track.its_ncls < cuts.min_its_nclusters:
        return False
    if not track.has_tpc:
        return False
    if track.tpc_ncls_crossed_rows < cuts.min_tpc_ncrossed_rows:
        return False
    if crossed_rows_over_findable(track) < cuts.min_tpc_ncrossed_rows_over_findable:
        return False
    if track.tpc_chi2_ncl > cuts.max_chi_square_tpc:
        return False
    if track.its_chi2_ncl > cuts.max_chi_square_its:
        return False
    if track.eta < cuts.min_eta or track.eta > cuts.max_eta:
        return False
    if track.pt < cuts.min_pt:
        return False
    return True


def passed_dca_selection(track: TrackLike, cuts: TrackCuts) -> bool:
    return abs(track.dca_xy) <= cuts.max_dca_xy and abs(track.dca_z) <= cuts.max_dca_z


def is_high_purity_antiproton(track: TrackLike) -> bool:
    """
    Clean (anti)proton sample from TPC, plus TOF above 0.5 GeV/c.

    Charge-agnostic; callers require a negative sign for antiprotons.
    """
    nsigma_tpc = track.tpc_nsigma(Species.PROTON)
    if track.pt < HIGH_PURITY_PT_SWITCH:
        return abs(nsigma_tpc) < HIGH_PURITY_MAX_NSIGMA
    return (
        abs(nsigma_tpc) < HIGH_PURITY_MAX_NSIGMA
        and track.has_tof
        and abs(track.tof_nsigma(Species.PROTON)) < HIGH_PURITY_MAX_NSIGMA
    )


def is_high_purity_antiproton_candidate(track: TrackLike) -> bool:
    return track.sign < 0 and is_high_purity_antiproton(track)
