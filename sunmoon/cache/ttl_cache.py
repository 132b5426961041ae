"""
File-backed TTL cache for persistent storage.

This module provides a small key/value cache where every entry carries an
absolute expiration time. The whole store lives in one JSON file that is
read once at construction and rewritten in full on every write.
"""

import json
import logging
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional


class TTLCache:
    """Thread-safe JSON file cache with per-entry expiration."""

    def __init__(self, cache_path: str = "sunmoon-cache.json",
                 clock: Optional[Callable[[], float]] = None):
        """
        Initialize the cache and load the backing file.

        Args:
            cache_path: Path of the JSON backing file
            clock: Returns the current time in epoch seconds (defaults to time.time)
        """
        self.cache_path = Path(cache_path)
        self.logger = logging.getLogger(__name__)
        self._clock = clock or time.time
        self._lock = threading.RLock()
        self._storage: Dict[str, Dict[str, Any]] = {}
        self.load()

    def _now_millis(self) -> int:
        return int(self._clock() * 1000)

    def load(self) -> None:
        """
        Read the backing file, dropping entries that have already expired.

        A missing, unreadable or corrupt file leaves the cache empty. Dropped
        entries are not written back until the next set().
        """
        with self._lock:
            self._storage = {}
            try:
                with open(self.cache_path, "r", encoding="utf-8") as f:
                    storage = json.load(f)
            except FileNotFoundError:
                self.logger.debug(f"Cache: Creating new: {self.cache_path}")
                return
            except (OSError, ValueError) as e:
                self.logger.debug(f"Cache: Unreadable {self.cache_path} ({e}), creating new")
                return

            if not isinstance(storage, dict):
                self.logger.debug(f"Cache: Unexpected content in {self.cache_path}, creating new")
                return

            self.logger.debug(f"Cache: Using: {self.cache_path}")
            now = self._now_millis()
            for key, entry in storage.items():
                if not isinstance(entry, dict) or "item" not in entry:
                    self.logger.debug(f"Cache load: '{key}' is malformed, dropping")
                    continue
                try:
                    expiration = int(entry["expiration"])
                except (KeyError, TypeError, ValueError):
                    self.logger.debug(f"Cache load: '{key}' is malformed, dropping")
                    continue

                if expiration < now:
                    self.logger.info(f"Cache load: '{key}' has expired, deleting")
                    continue

                self.logger.debug(f"Cache load: '{key}' still good")
                self._storage[key] = {
                    "expiration": expiration,
                    "comment": entry.get("comment", ""),
                    "item": entry["item"],
                }

    def get(self, key: str) -> Optional[Any]:
        """
        Get an item from the cache.

        Args:
            key: Cache key

        Returns:
            Cached payload, or None if not found or expired
        """
        with self._lock:
            entry = self._storage.get(key)
            if entry is None:
                self.logger.debug(f"Cache: Key: '{key}' - cache miss")
                return None

            if entry["expiration"] > self._now_millis():
                self.logger.debug(f"Cache: Key: '{key}' - cache hit")
                return entry["item"]

            self.logger.debug(f"Cache: Key: '{key}' - cache expired")
            return None

    def set(self, key: str, item: Any, expiration_millis: int) -> None:
        """
        Insert or overwrite an entry and rewrite the backing file.

        Args:
            key: Cache key
            item: JSON-serializable payload
            expiration_millis: Absolute expiration time in epoch milliseconds
        """
        comment = datetime.fromtimestamp(expiration_millis / 1000).astimezone().isoformat()
        self.logger.debug(f"Cache set: Key: {key}, exp: {comment}")

        with self._lock:
            self._storage[key] = {
                "expiration": int(expiration_millis),
                "comment": comment,
                "item": item,
            }
            self._save()

    def _save(self) -> None:
        """Write the whole store to disk."""
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_path, "w", encoding="utf-8") as f:
                json.dump(self._storage, f, indent=4)
        except (OSError, TypeError, ValueError) as e:
            self.logger.error(f"Cache: Error saving {self.cache_path}: {e}")

    def keys(self) -> List[str]:
        """Get all keys currently held, expired or not."""
        with self._lock:
            return list(self._storage.keys())

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._storage)
