"""Tests for periodic cache eviction."""
from __future__ import annotations

import logging
from unittest.mock import MagicMock

from employee_directory.services.cache import (
    COUNTRIES_CACHE,
    CURRENCY_RATES_CACHE,
    CacheManager,
)
from employee_directory.services.cache_invalidator import CacheInvalidator


def test_evict_all_clears_every_region():
    manager = CacheManager()
    manager.region(CURRENCY_RATES_CACHE).put("USD", {"INR": 86.9})
    manager.region(CURRENCY_RATES_CACHE).put("EUR", {"INR": 90.1})
    manager.region(COUNTRIES_CACHE).put(COUNTRIES_CACHE, {"INR": "Indian Rupee"})
    manager.region("extra").put("key", "value")

    CacheInvalidator(manager).evict_all()

    for name in manager.cache_names():
        assert len(manager.get_cache(name)) == 0


def test_unresolvable_region_is_skipped(caplog):
    manager = MagicMock()
    cleared = MagicMock()
    manager.cache_names.return_value = ["missing", CURRENCY_RATES_CACHE]
    manager.get_cache.side_effect = lambda name: None if name == "missing" else cleared

    with caplog.at_level(logging.WARNING):
        CacheInvalidator(manager).evict_all()

    cleared.clear.assert_called_once_with()
    assert "missing" in caplog.text


def test_failing_region_does_not_abort_sweep():
    manager = MagicMock()
    broken = MagicMock()
    broken.clear.side_effect = RuntimeError("cannot clear")
    healthy = MagicMock()
    manager.cache_names.return_value = ["broken", "healthy"]
    manager.get_cache.side_effect = {"broken": broken, "healthy": healthy}.get

    CacheInvalidator(manager).evict_all()

    healthy.clear.assert_called_once_with()


def test_evict_all_on_empty_manager_is_noop():
    CacheInvalidator(CacheManager(names=())).evict_all()
