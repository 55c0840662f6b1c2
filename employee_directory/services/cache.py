"""Named in-process cache regions shared by the rate provider and the evictor."""
from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, Hashable, TypedDict


logger = logging.getLogger(__name__)

CURRENCY_RATES_CACHE = "currency_rates"
COUNTRIES_CACHE = "countries"


class CacheEntry(TypedDict):
    """Cached value with the time it was stored."""
    data: Any
    stored_at: datetime


class CacheRegion:
    """Thread-safe key/value region. Entries live until the region is cleared."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: dict[Hashable, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            return entry["data"] if entry else None

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries[key] = {"data": value, "stored_at": datetime.utcnow()}
        logger.debug("Cached %r in region %s", key, self.name)

    def clear(self) -> int:
        """Drop every entry and return how many were removed."""
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class CacheManager:
    """Registry of cache regions addressed by name."""

    def __init__(self, names: tuple[str, ...] = (CURRENCY_RATES_CACHE, COUNTRIES_CACHE)) -> None:
        self._regions: dict[str, CacheRegion] = {}
        self._lock = threading.Lock()
        for name in names:
            self.region(name)

    def region(self, name: str) -> CacheRegion:
        """Return the region called ``name``, creating it on first use."""
        with self._lock:
            region = self._regions.get(name)
            if region is None:
                region = CacheRegion(name)
                self._regions[name] = region
            return region

    def get_cache(self, name: str) -> CacheRegion | None:
        with self._lock:
            return self._regions.get(name)

    def cache_names(self) -> list[str]:
        with self._lock:
            return list(self._regions)
