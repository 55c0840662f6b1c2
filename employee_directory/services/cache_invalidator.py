"""Periodic eviction of cached rate and country lookups."""
from __future__ import annotations

import logging

from employee_directory.services.cache import CacheManager


logger = logging.getLogger(__name__)


class CacheInvalidator:
    """Clear every cache region so the next lookup per base goes upstream."""

    def __init__(self, cache_manager: CacheManager) -> None:
        self._cache_manager = cache_manager

    def evict_all(self) -> None:
        """Entry point for the eviction timer. Never raises."""
        names = self._cache_manager.cache_names()
        logger.debug("Caches are: %s", names)
        cleared = 0
        for name in names:
            region = self._cache_manager.get_cache(name)
            if region is None:
                logger.warning("Cache region %s could not be resolved; skipping", name)
                continue
            try:
                removed = region.clear()
            except Exception:
                logger.exception("Clearing cache region %s failed; skipping", name)
                continue
            cleared += 1
            logger.debug("Cleared %d entr(ies) from cache region %s", removed, name)
        logger.info("Caches cleared (%d/%d regions)", cleared, len(names))
