"""Pytest configuration for global fixtures and logging setup."""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Callable

import pytest
import requests
from fastapi.testclient import TestClient

_TMP_DIR = Path(tempfile.mkdtemp(prefix="employee-directory-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'directory.db'}"
os.environ["LOG_DIR"] = str(_TMP_DIR / "logs")
os.environ["SCHEDULER_LOCK_FILE"] = str(_TMP_DIR / ".scheduler.lock")

from employee_directory.logging_config import configure_logging

configure_logging()

from employee_directory.database import Base, SessionLocal, engine
from employee_directory.main import app
from employee_directory.models import database_models  # noqa: F401  # Register tables on Base.metadata.
from employee_directory.services.cache import CacheManager
from employee_directory.services.circuit_breaker import CircuitBreaker
from employee_directory.services.rate_provider import RateProvider

RATE_URL = "https://rates.test/latest"
COUNTRIES_URL = "https://rates.test/currencies.json"

COUNTRIES = {
    "USD": "United States Dollar",
    "EUR": "Euro",
    "GBP": "British Pound Sterling",
    "INR": "Indian Rupee",
    "HUF": "Hungarian Forint",
    "JPY": "Japanese Yen",
}


def usd_payload(params: dict[str, Any]) -> dict[str, Any]:
    """Upstream body for any base; includes the self-rate so stripping is observable."""
    base = params.get("base", "USD")
    return {
        "base": base,
        "date": "2025-03-03",
        "rates": {base: 1.0, "INR": 86.9, "GBP": 0.79, "JPY": 149.5, "EUR": 0.96},
    }


class FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Stand-in for requests.Session keyed by URL.

    A route may be a payload, a FakeResponse, an exception to raise, or a
    callable taking the query params.
    """

    def __init__(self, routes: dict[str, Any]) -> None:
        self.routes = routes
        self.calls: list[tuple[str, dict[str, Any], float | None]] = []

    def get(self, url: str, params: dict[str, Any] | None = None, timeout: float | None = None) -> FakeResponse:
        self.calls.append((url, dict(params or {}), timeout))
        route = self.routes[url]
        if isinstance(route, Exception):
            raise route
        if callable(route):
            route = route(params or {})
        return route if isinstance(route, FakeResponse) else FakeResponse(route)

    def calls_to(self, url: str) -> list[tuple[str, dict[str, Any], float | None]]:
        return [call for call in self.calls if call[0] == url]

    @property
    def rate_calls(self) -> list[tuple[str, dict[str, Any], float | None]]:
        return self.calls_to(RATE_URL)

    @property
    def country_calls(self) -> list[tuple[str, dict[str, Any], float | None]]:
        return self.calls_to(COUNTRIES_URL)


@pytest.fixture(autouse=True)
def clean_database():
    """Give each test an empty schema."""
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield


@pytest.fixture(scope="session")
def test_client() -> TestClient:
    """Provide a FastAPI test client."""

    return TestClient(app)


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_response() -> type[FakeResponse]:
    return FakeResponse


@pytest.fixture
def make_rate_provider() -> Callable[..., tuple[RateProvider, FakeSession]]:
    """Build a RateProvider over a FakeSession; defaults answer every base and the country map."""

    def _make(
        rates_route: Any = usd_payload,
        countries_route: Any = None,
        *,
        cache_manager: CacheManager | None = None,
        failure_threshold: int = 5,
        timeout: float = 2.5,
    ) -> tuple[RateProvider, FakeSession]:
        session = FakeSession(
            {
                RATE_URL: rates_route,
                COUNTRIES_URL: dict(COUNTRIES) if countries_route is None else countries_route,
            }
        )
        provider = RateProvider(
            RATE_URL,
            COUNTRIES_URL,
            cache_manager or CacheManager(),
            timeout=timeout,
            session=session,
            rates_breaker=CircuitBreaker("rates-test", failure_threshold=failure_threshold),
            countries_breaker=CircuitBreaker("countries-test", failure_threshold=failure_threshold),
        )
        return provider, session

    return _make


@pytest.fixture
def dependency_overrides():
    """Register FastAPI dependency overrides that are removed after the test."""

    yield app.dependency_overrides
    app.dependency_overrides.clear()
