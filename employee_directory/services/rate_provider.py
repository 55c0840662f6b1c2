"""Service for fetching exchange rates from the upstream rate API."""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable

import requests
from pydantic import TypeAdapter

from employee_directory.exceptions import ResourceNotFoundError
from employee_directory.models.alerts import RateSnapshot
from employee_directory.models.schemas import ExchangeRatePayload
from employee_directory.services.cache import (
    COUNTRIES_CACHE,
    CURRENCY_RATES_CACHE,
    CacheManager,
)
from employee_directory.services.circuit_breaker import CircuitBreaker, CircuitState


logger = logging.getLogger(__name__)

# Degraded-mode table. Always reported against HUF whatever base was asked for.
FALLBACK_BASE = "HUF"
FALLBACK_RATES: dict[str, float] = {
    "GBP": 0.0025654372,
    "IDR": 45.60031709,
    "INR": 0.2357907805,
    "HUF": 1.0,
}
FALLBACK_COUNTRIES: dict[str, str] = {
    "INR": "Indian Rupee",
    "HUF": "Hungarian Forint",
}

_COUNTRY_MAP = TypeAdapter(dict[str, str])


class RateProvider:
    """
    Rate lookups with caching and a circuit-breaker fallback.

    Successful upstream responses are cached per base currency in the
    ``currency_rates`` region (and the country map in ``countries``) until the
    cache invalidator clears them. Failures never propagate: callers receive
    the static fallback instead.
    """

    def __init__(
        self,
        rate_api_url: str,
        countries_api_url: str,
        cache_manager: CacheManager,
        *,
        timeout: float = 5.0,
        session: requests.Session | None = None,
        rates_breaker: CircuitBreaker | None = None,
        countries_breaker: CircuitBreaker | None = None,
    ) -> None:
        self._rate_api_url = rate_api_url
        self._countries_api_url = countries_api_url
        self._timeout = timeout
        self._session = session or requests.Session()
        self._rates_cache = cache_manager.region(CURRENCY_RATES_CACHE)
        self._countries_cache = cache_manager.region(COUNTRIES_CACHE)
        self._rates_breaker = rates_breaker or CircuitBreaker("currency-rates")
        self._countries_breaker = countries_breaker or CircuitBreaker("countries")

    @property
    def rates_circuit_state(self) -> CircuitState:
        return self._rates_breaker.state

    @property
    def countries_circuit_state(self) -> CircuitState:
        return self._countries_breaker.state

    # Upstream -------------------------------------------------
    def _get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        response = self._session.get(url, params=params, timeout=self._timeout)
        response.raise_for_status()
        return response.json()

    def _fetch_live_rates(self, base: str) -> RateSnapshot:
        logger.debug("Requesting rates for %s from %s", base, self._rate_api_url)
        payload = ExchangeRatePayload.model_validate(
            self._get_json(self._rate_api_url, params={"base": base})
        )
        rates = dict(payload.rates)
        rates.pop(base, None)
        rates.pop(payload.base, None)
        snapshot = RateSnapshot(base=payload.base, date=payload.date, rates=rates)
        self._rates_cache.put(base, snapshot)
        logger.info("Fetched %d rates for base %s (%s)", len(rates), base, payload.date.isoformat())
        return snapshot

    def _fetch_live_countries(self) -> dict[str, str]:
        countries = _COUNTRY_MAP.validate_python(self._get_json(self._countries_api_url))
        self._countries_cache.put(COUNTRIES_CACHE, countries)
        logger.info("Fetched %d currencies from countries endpoint", len(countries))
        return countries

    # Fallbacks ------------------------------------------------
    @staticmethod
    def default_rates() -> RateSnapshot:
        return RateSnapshot(base=FALLBACK_BASE, date=date.today(), rates=dict(FALLBACK_RATES))

    @staticmethod
    def default_countries() -> dict[str, str]:
        return dict(FALLBACK_COUNTRIES)

    # Public API -----------------------------------------------
    def fetch_rates(self, base: str, targets: Iterable[str] | None = None) -> RateSnapshot:
        """
        Return the latest rates for ``base``.

        Args:
            base: Three-letter base currency code
            targets: Optional currency codes to narrow a live result to

        Returns:
            RateSnapshot without the self-rate, or the HUF fallback snapshot
            (returned verbatim) when the upstream call cannot complete.
        """
        base = base.upper()
        wanted = {code.upper() for code in targets} if targets else None

        def _narrow(snapshot: RateSnapshot) -> RateSnapshot:
            if wanted is None:
                return RateSnapshot(base=snapshot.base, date=snapshot.date, rates=dict(snapshot.rates))
            return snapshot.narrowed(wanted)

        cached = self._rates_cache.get(base)
        if cached is not None:
            logger.debug("Rate cache hit for %s", base)
            return _narrow(cached)

        return self._rates_breaker.call(
            lambda: _narrow(self._fetch_live_rates(base)),
            self.default_rates,
        )

    def fetch_country_currency_map(self) -> dict[str, str]:
        """Return currency code -> country/currency name, falling back to a static pair."""
        cached = self._countries_cache.get(COUNTRIES_CACHE)
        if cached is not None:
            return dict(cached)
        return self._countries_breaker.call(
            lambda: dict(self._fetch_live_countries()),
            self.default_countries,
        )

    def get_highest_and_lowest_rates(self, base: str) -> dict[str, float]:
        """Return the highest and the lowest rate quoted against ``base``."""
        rates = self.fetch_rates(base).rates
        if not rates:
            return {}
        highest = max(rates.items(), key=lambda item: item[1])
        lowest = min(rates.items(), key=lambda item: item[1])
        return dict([highest, lowest])

    def get_country_for_currency(self, code: str) -> str:
        countries = self.fetch_country_currency_map()
        try:
            return countries[code.upper()]
        except KeyError:
            raise ResourceNotFoundError(f"Currency code {code.upper()} not found") from None

    def unknown_currencies(self, codes: Iterable[str]) -> list[str]:
        """Return the codes missing from the country map, sorted."""
        known = self.fetch_country_currency_map()
        return sorted(code for code in codes if code not in known)
