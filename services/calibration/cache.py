"""
CalibrationCache service - Caches downloaded calibration payloads to disk.

Single responsibility: load/save raw payloads with atomic writes and a
lock file, so concurrent batch jobs share one download.
"""

import logging
import os
import time
from typing import Optional


class CalibrationCache:
    """
    On-disk cache of calibration payloads, one file per object path.

    Writes go through a temp file and an atomic rename under an
    exclusive lock file.
    """

    def __init__(self, cache_dir: str, max_wait_time: int = 60):
        """
        Initialize calibration cache.

        Args:
            cache_dir: Directory holding cached payloads
            max_wait_time: Maximum seconds to wait for a lock
        """
        self.cache_dir = cache_dir
        self.max_wait_time = max_wait_time
        self.wait_interval = 1
        self.logger = logging.getLogger(self.__class__.__name__)

    def path_for(self, object_path: str) -> str:
        """Cache file for a store path ("a/b/c" -> "<cache_dir>/a__b__c.root")."""
        file_name = object_path.strip("/").replace("/", "__") or "root"
        return os.path.join(self.cache_dir, f"{file_name}.root")

    def load(self, object_path: str) -> Optional[bytes]:
        """
        Load a cached payload.

        Returns:
            Payload bytes, or None if not cached or unreadable
        """
        cache_path = self.path_for(object_path)
        if not os.path.exists(cache_path):
            return None

        try:
            with open(cache_path, "rb") as f:
                payload = f.read()
        except OSError as e:
            self.logger.warning(f"Failed to read cached payload {cache_path}: {e}")
            return None

        self.logger.info(f"Loaded calibration payload from cache: {cache_path}")
        return payload

    def save(self, object_path: str, payload: bytes) -> bool:
        """
        Save a payload atomically.

        Returns:
            True if the payload is on disk afterwards, False otherwise
        """
        os.makedirs(self.cache_dir, exist_ok=True)
        cache_path = self.path_for(object_path)
        lock_path = f"{cache_path}.lock"

        if not self._acquire_lock(lock_path):
            # Another process holds the lock; its copy is as good as ours
            return os.path.exists(cache_path)

        temp_path = f"{cache_path}.tmp"
        try:
            with open(temp_path, "wb") as f:
                f.write(payload)
            os.replace(temp_path, cache_path)
            self.logger.info(f"Saved calibration payload to cache: {cache_path}")
            return True
        except OSError as e:
            self.logger.error(f"Failed to save cache to {cache_path}: {e}")
            if os.path.exists(temp_path):
                os.remove(temp_path)
            return False
        finally:
            self._release_lock(lock_path)

    def _acquire_lock(self, lock_path: str) -> bool:
        elapsed = 0
        while elapsed < self.max_wait_time:
            try:
                lock_fd = os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
                os.close(lock_fd)
                return True
            except FileExistsError:
                self.logger.debug(f"Lock file exists, waiting... (waited {elapsed}s)")
                time.sleep(self.wait_interval)
                elapsed += self.wait_interval
        return False

    def _release_lock(self, lock_path: str):
        try:
            os.unlink(lock_path)
        except FileNotFoundError:
            pass
