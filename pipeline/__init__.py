"""
Pipeline execution layer.

High-level analysis executor that wires together all components.
"""

from .executor import AnalysisExecutor

__all__ = ["AnalysisExecutor"]
