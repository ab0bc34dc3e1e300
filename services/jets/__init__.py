"""
Jet services.

Clustering, background subtraction, jet selection and UE cones.
"""

from .clustering import JetClusterer
from .background import BackgroundSubtractor
from .selection import JetSelector, JetDecision
from .ue_cones import UEConePair, UETally

__all__ = [
    "JetClusterer",
    "BackgroundSubtractor",
    "JetSelector",
    "JetDecision",
    "UEConePair",
    "UETally",
]
