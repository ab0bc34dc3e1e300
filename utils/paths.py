"""
Path utilities for the analysis.

Timestamped run directories and their fixed sub-directory layout.
"""

import os
from datetime import datetime

RUN_SUBDIRS = ("histograms", "logs")


def create_timestamped_run_dir(base_output_dir: str, run_name: str = None) -> str:
    """
    Create a timestamped directory for the current run.

    Args:
        base_output_dir: Base output directory (e.g., "./output")
        run_name: Optional run name to include in directory

    Returns:
        Path to the timestamped run directory

    Example:
        create_timestamped_run_dir("./output", "antinuclei_in_jets")
        -> "./output/antinuclei_in_jets_20261018_141502"
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    dir_name = f"{run_name}_{timestamp}" if run_name else f"run_{timestamp}"

    run_dir = os.path.join(base_output_dir, dir_name)
    prepare_run_dir(run_dir)
    return run_dir


def prepare_run_dir(run_dir: str) -> dict[str, str]:
    """
    Create the run directory and its standard sub-directories.

    Layout under run_dir:
        histograms/  - ROOT output, one directory per mode
        logs/        - run statistics

    Returns:
        Dict mapping sub-directory name to its path
    """
    paths = {name: os.path.join(run_dir, name) for name in RUN_SUBDIRS}
    for path in paths.values():
        os.makedirs(path, exist_ok=True)
    return paths
