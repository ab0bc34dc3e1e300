"""
Utility modules for the analysis.
"""

from .paths import create_timestamped_run_dir, prepare_run_dir

__all__ = [
    "create_timestamped_run_dir",
    "prepare_run_dir",
]
