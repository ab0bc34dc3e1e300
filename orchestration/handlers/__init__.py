"""
State handlers for per-event processing.

Each handler implements the logic for one event state.
"""

from .base import StateHandler
from .event_rejection_handler import EventRejectionHandler
from .event_selection_handler import EventSelectionHandler
from .jet_input_handler import JetInputHandler
from .clustering_handler import ClusteringHandler
from .jet_analysis_handler import JetAnalysisHandler
from .track_analysis_handler import TrackAnalysisHandler

__all__ = [
    "StateHandler",
    "EventRejectionHandler",
    "EventSelectionHandler",
    "JetInputHandler",
    "ClusteringHandler",
    "JetAnalysisHandler",
    "TrackAnalysisHandler",
]
