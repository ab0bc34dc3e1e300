"""
Domain models for the antinuclei-in-jets analysis.

Pure data structures with validation, no business logic.
"""

from .species import Species, SpeciesPidFlags, CHARGED_PION_MASS, ANTIPROTON_PDG
from .tracks import Track, TrackLike, McParticle, Collision
from .jets import PseudoParticle, Jet, SubtractedJet, BackgroundEstimate
from .calibration import Histogram2D
from .statistics import ModeStatistics, RunStatistics
from .config import (
    AnalysisConfig,
    ModeConfig,
    JetConfig,
    EventSelectionConfig,
    TrackCuts,
    PidConfig,
    CalibrationConfig,
    SystematicVariation,
    InputConfig,
    OutputConfig,
    DEFAULT_SYSTEMATIC_VARIATIONS,
)

__all__ = [
    "Species",
    "SpeciesPidFlags",
    "CHARGED_PION_MASS",
    "ANTIPROTON_PDG",
    "Track",
    "TrackLike",
    "McParticle",
    "Collision",
    "PseudoParticle",
    "Jet",
    "SubtractedJet",
    "BackgroundEstimate",
    "Histogram2D",
    "ModeStatistics",
    "RunStatistics",
    "AnalysisConfig",
    "ModeConfig",
    "JetConfig",
    "EventSelectionConfig",
    "TrackCuts",
    "PidConfig",
    "CalibrationConfig",
    "SystematicVariation",
    "InputConfig",
    "OutputConfig",
    "DEFAULT_SYSTEMATIC_VARIATIONS",
]
