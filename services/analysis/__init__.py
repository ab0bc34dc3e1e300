"""
Analysis services.

One analyzer per execution mode. Analyzers fill histograms; the
per-event state machine decides when each hook runs.
"""

from .base import InclusiveAnalyzer, ModeAnalyzer
from .data import DataAnalyzer
from .qc import QCAnalyzer
from .efficiency import EfficiencyAnalyzer, SystematicsEfficiencyAnalyzer
from .mc_jets import GeneratedJetsAnalyzer, ReconstructedJetsAnalyzer
from .systematics import SystematicsDataAnalyzer

__all__ = [
    "ModeAnalyzer",
    "InclusiveAnalyzer",
    "DataAnalyzer",
    "QCAnalyzer",
    "EfficiencyAnalyzer",
    "SystematicsEfficiencyAnalyzer",
    "GeneratedJetsAnalyzer",
    "ReconstructedJetsAnalyzer",
    "SystematicsDataAnalyzer",
]
