"""
Particle identification.

ITS cluster-size PID flags per species and the TPC/TOF significance windows.
"""

from typing import Protocol

from domain.config import PidConfig
from domain.species import Species, SpeciesPidFlags
from domain.tracks import TrackLike


class ItsResponse(Protocol):
    """Source of ITS cluster-size significances."""

    def nsigma(self, track: TrackLike, species: Species) -> float: ...


class StoredItsResponse:
    """ITS significances carried by the track record itself."""

    def nsigma(self, track, species: Species) -> float:
        return track.its_nsigma(species)


class PidSelector:
    """
    Applies the configured PID windows to tracks.

    Args:
        config: PID windows and ITS pt ceilings
        its_response: Provider of ITS significances
    """

    def __init__(self, config: PidConfig, its_response: ItsResponse = None):
        self.config = config
        self.its_response = its_response or StoredItsResponse()

    def passes_its(self, track: TrackLike, species: Species) -> bool:
        """
        ITS cluster-size PID for one hypothesis.

        Always passes when ITS PID is disabled or when the track is above
        the species pt ceiling (2 * pt for helium-3).
        """
        cfg = self.config
        if not cfg.apply_its_pid:
            return True

        if species is Species.HELIUM3:
            pt, pt_max = 2.0 * track.pt, cfg.pt_max_its_pid_hel
        elif species is Species.DEUTERON:
            pt, pt_max = track.pt, cfg.pt_max_its_pid_deut
        else:
            pt, pt_max = track.pt, cfg.pt_max_its_pid_prot

        if pt > pt_max:
            return True

        nsigma = self.its_response.nsigma(track, species)
        return cfg.nsigma_its_min < nsigma < cfg.nsigma_its_max

    def its_flags(self, track: TrackLike) -> SpeciesPidFlags:
        return SpeciesPidFlags(
            proton=self.passes_its(track, Species.PROTON),
            deuteron=self.passes_its(track, Species.DEUTERON),
            helium=self.passes_its(track, Species.HELIUM3),
        )

    def in_tpc_window(self, track: TrackLike, species: Species) -> bool:
        nsigma = track.tpc_nsigma(species)
        return self.config.min_nsigma_tpc < nsigma < self.config.max_nsigma_tpc

    def in_tof_window(self, track: TrackLike, species: Species) -> bool:
        if not track.has_tof:
            return False
        nsigma = track.tof_nsigma(species)
        return self.config.min_nsigma_tof < nsigma < self.config.max_nsigma_tof
