"""Integration tests for the currency lookup endpoints."""
from __future__ import annotations

import pytest
import requests
from fastapi.testclient import TestClient

from employee_directory.container import get_rate_provider
from employee_directory.services.rate_provider import FALLBACK_BASE, FALLBACK_RATES


@pytest.fixture
def override_provider(make_rate_provider, dependency_overrides):
    def _override(**kwargs):
        provider, session = make_rate_provider(**kwargs)
        dependency_overrides[get_rate_provider] = lambda: provider
        return provider, session

    return _override


def test_rates_for_base(test_client: TestClient, override_provider):
    override_provider()

    response = test_client.get("/api/v1/currency/rates/usd")

    assert response.status_code == 200
    data = response.json()
    assert data["base"] == "USD"
    assert data["date"] == "2025-03-03"
    assert "USD" not in data["rates"]
    assert data["rates"]["INR"] == pytest.approx(86.9)


def test_rates_narrowed_to_targets(test_client: TestClient, override_provider):
    override_provider()

    response = test_client.get("/api/v1/currency/rates/USD", params={"targets": "inr, gbp"})

    assert response.json()["rates"] == {"INR": 86.9, "GBP": 0.79}


def test_invalid_base_rejected(test_client: TestClient, override_provider):
    override_provider()

    response = test_client.get("/api/v1/currency/rates/DOLLARS")

    assert response.status_code == 400


def test_upstream_outage_serves_fallback(test_client: TestClient, override_provider):
    override_provider(rates_route=requests.ConnectionError("down"))

    data = test_client.get("/api/v1/currency/rates/USD").json()

    assert data["base"] == FALLBACK_BASE
    assert data["rates"] == FALLBACK_RATES


def test_highest_and_lowest(test_client: TestClient, override_provider):
    override_provider()

    response = test_client.get("/api/v1/currency/rates/USD/extremes")

    assert response.json() == {"JPY": 149.5, "GBP": 0.79}


def test_countries(test_client: TestClient, override_provider):
    override_provider()

    countries = test_client.get("/api/v1/currency/countries").json()
    inr = test_client.get("/api/v1/currency/countries/inr")
    missing = test_client.get("/api/v1/currency/countries/XYZ")

    assert countries["INR"] == "Indian Rupee"
    assert inr.json() == {"code": "INR", "country": "Indian Rupee"}
    assert missing.status_code == 404
