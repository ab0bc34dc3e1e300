"""
HistogramRegistry service - Named histograms filled by value tuples.

Single responsibility: book fixed-binning hist.Hist objects, fill them
by name and write them to a ROOT file.
"""

import logging
from typing import Iterable

import uproot
from hist import Hist, axis, storage


def regular(bins: int, start: float, stop: float, label: str = "") -> axis.Regular:
    return axis.Regular(bins, start, stop, label=label)


class HistogramRegistry:
    """
    Registry of named histograms for one execution mode.

    Histograms are booked once with ``add`` and filled with
    ``fill(name, *values, weight=1.0)``. Filling an unknown name is a
    programming error and raises KeyError.
    """

    def __init__(self, name: str):
        """
        Initialize registry.

        Args:
            name: Registry name, used as ROOT directory on output
        """
        self.name = name
        self.histograms: dict[str, Hist] = {}
        self.titles: dict[str, str] = {}
        self.n_fills = 0
        self.logger = logging.getLogger(self.__class__.__name__)

    def add(self, name: str, title: str, axes: Iterable[axis.Regular]) -> Hist:
        """Book a histogram; booking the same name twice raises ValueError."""
        if name in self.histograms:
            raise ValueError(f"Histogram {name} already booked in registry {self.name}")
        histogram = Hist(*axes, storage=storage.Weight(), name=name, label=title)
        self.histograms[name] = histogram
        self.titles[name] = title
        return histogram

    def fill(self, name: str, *values: float, weight: float = 1.0):
        histogram = self.histograms[name]
        if len(values) != histogram.ndim:
            raise ValueError(
                f"Histogram {name} has {histogram.ndim} axes, got {len(values)} values"
            )
        histogram.fill(*values, weight=weight)
        self.n_fills += 1

    def get(self, name: str) -> Hist:
        return self.histograms[name]

    def __contains__(self, name: str) -> bool:
        return name in self.histograms

    def __len__(self) -> int:
        return len(self.histograms)

    def names(self) -> list[str]:
        return list(self.histograms)

    def write(self, root_file) -> int:
        """
        Write all histograms into ``<registry name>/`` of an open uproot file.

        Returns:
            Number of histograms written
        """
        for name, histogram in self.histograms.items():
            root_file[f"{self.name}/{name}"] = histogram
        self.logger.info(f"Wrote {len(self.histograms)} histograms to {self.name}/")
        return len(self.histograms)


def write_registries(registries: Iterable[HistogramRegistry], output_path: str) -> int:
    """
    Write several registries to a new ROOT file.

    Returns:
        Total number of histograms written
    """
    total = 0
    with uproot.recreate(output_path) as root_file:
        for registry in registries:
            total += registry.write(root_file)
    return total
