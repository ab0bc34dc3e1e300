"""
CalibrationFetcher service - Retrieves calibration histograms from a CCDB-like store.

Single responsibility: download a stored object once and decode the named
2D histograms it contains.
"""

import io
import logging
import time
from typing import Iterable, Optional

import requests
import uproot

from domain.calibration import Histogram2D
from services.calibration.cache import CalibrationCache

DECODE_ERRORS = (OSError, ValueError, KeyError, uproot.deserialization.DeserializationError)


class CalibrationFetcher:
    """
    Service for fetching calibration objects over HTTP.

    Objects are requested as ``{base_url}/{path}/{timestamp_ms}``; the
    payload is a ROOT file whose stored list holds the histograms.
    A single attempt is made. Any failure is logged and the caller gets
    None, which disables the feature that needed the object.
    """

    def __init__(self, base_url: str, timeout: int = 30, cache: Optional[CalibrationCache] = None):
        """
        Initialize calibration fetcher.

        Args:
            base_url: Store base URL
            timeout: Timeout for HTTP requests in seconds
            cache: Optional on-disk cache of downloaded payloads
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.cache = cache
        self.logger = logging.getLogger(self.__class__.__name__)

    def fetch_histogram(self, path: str, name: str) -> Optional[Histogram2D]:
        """Fetch a single named 2D histogram, None on any failure."""
        return self.fetch_histograms(path, [name]).get(name)

    def fetch_histograms(self, path: str, names: Iterable[str]) -> dict[str, Optional[Histogram2D]]:
        """
        Fetch several named 2D histograms stored under one path.

        Args:
            path: Object path in the store
            names: Histogram names to look up

        Returns:
            Dict mapping each requested name to its histogram or None
        """
        names = list(names)
        result = {name: None for name in names}

        payload = self._get_payload(path)
        if payload is None:
            return result

        try:
            histograms = decode_histograms(payload)
        except DECODE_ERRORS as e:
            self.logger.error(f"Could not decode calibration object {path}: {e}")
            return result

        for name in names:
            if name in histograms:
                result[name] = histograms[name]
                self.logger.info(f"Loaded calibration histogram {name} from {path}")
            else:
                self.logger.error(f"Histogram {name} not found in {path}")
        return result

    def _get_payload(self, path: str) -> Optional[bytes]:
        if self.cache is not None:
            cached = self.cache.load(path)
            if cached is not None:
                return cached

        url = f"{self.base_url}/{path.strip('/')}/{int(time.time() * 1000)}"
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            self.logger.error(f"Failed to fetch calibration object {path}: {e}")
            return None

        payload = response.content
        if self.cache is not None:
            self.cache.save(path, payload)
        return payload


def decode_histograms(payload: bytes) -> dict[str, Histogram2D]:
    """
    Decode every 2D histogram in a ROOT payload.

    Histograms stored directly as keys and histograms inside stored
    lists are both returned, keyed by their own name.
    """
    histograms = {}
    with uproot.open(io.BytesIO(payload)) as root_file:
        for key in root_file.keys(cycle=False):
            obj = root_file[key]
            if obj.classname == "TList":
                for item in obj:
                    _collect(item, histograms)
            else:
                _collect(obj, histograms)
    return histograms


def _collect(obj, histograms: dict):
    if not getattr(obj, "classname", "").startswith("TH2"):
        return
    values, x_edges, y_edges = obj.to_numpy()
    name = obj.member("fName")
    histograms[name] = Histogram2D(name=name, values=values, x_edges=x_edges, y_edges=y_edges)
