"""
Histogram services.

Registry of named histograms and per-mode booking.
"""

from .registry import HistogramRegistry, write_registries
from . import definitions

__all__ = ["HistogramRegistry", "write_registries", "definitions"]
