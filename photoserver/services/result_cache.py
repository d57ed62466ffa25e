"""
In-memory cache of rendered thumbnails with approximate LFU eviction.

Each over-capacity ``put`` evicts exactly one entry: the least used one
other than the entry just written. Victims are found with a linear scan,
which is fine for the small capacities this service runs with.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    data: bytes
    use_count: int = 1


class ResultCache:
    def __init__(self, max_entries: int = 32):
        self._max_entries = max(0, max_entries)
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def enabled(self) -> bool:
        return self._max_entries > 0

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def get(self, key: str) -> Optional[bytes]:
        if not self.enabled:
            return None
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or not entry.data:
                self._misses += 1
                return None
            entry.use_count += 1
            self._hits += 1
            return entry.data

    def put(self, key: str, data: bytes) -> None:
        if not self.enabled or not data:
            return
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._entries[key] = CacheEntry(data)
            else:
                entry.data = data
                entry.use_count += 1

            if len(self._entries) > self._max_entries:
                victim = self._least_used(exclude=key)
                if victim is not None:
                    del self._entries[victim]
                    self._evictions += 1
                    logger.debug("Evicted cache entry %s", victim)

    def _least_used(self, exclude: str) -> Optional[str]:
        # Strict comparison keeps the first entry seen on ties.
        victim = None
        lowest = None
        for key, entry in self._entries.items():
            if key == exclude:
                continue
            if lowest is None or entry.use_count < lowest:
                lowest = entry.use_count
                victim = key
        return victim

    def use_count(self, key: str) -> int:
        with self._lock:
            entry = self._entries.get(key)
            return entry.use_count if entry else 0

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> dict:
        with self._lock:
            return {
                "entries": len(self._entries),
                "max_entries": self._max_entries,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries
