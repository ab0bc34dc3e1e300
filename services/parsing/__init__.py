"""
Parsing services.

Reading collisions from ROOT files.
"""

from .event_reader import EventReader

__all__ = ["EventReader"]
