"""Currency rate lookup endpoints."""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from employee_directory.container import get_rate_provider
from employee_directory.models.alerts import is_currency_code
from employee_directory.models.schemas import RateSnapshotResponse
from employee_directory.services.rate_provider import RateProvider

router = APIRouter(prefix="/api/v1/currency", tags=["currency"])

RateProviderDep = Annotated[RateProvider, Depends(get_rate_provider)]


def _code_or_400(value: str) -> str:
    code = value.strip().upper()
    if not is_currency_code(code):
        raise HTTPException(status_code=400, detail=f"'{value}' is not a three-letter currency code")
    return code


@router.get("/rates/{base}", response_model=RateSnapshotResponse)
def get_rates(base: str, provider: RateProviderDep, targets: str | None = None):
    """
    Latest rates for a base currency.

    Args:
        base: Base currency code
        targets: Optional comma-separated codes to narrow the result
    """
    wanted = [_code_or_400(code) for code in targets.split(",") if code.strip()] if targets else None
    snapshot = provider.fetch_rates(_code_or_400(base), wanted)
    return {"base": snapshot.base, "date": snapshot.date, "rates": snapshot.rates}


@router.get("/rates/{base}/extremes")
def get_highest_and_lowest(base: str, provider: RateProviderDep) -> dict[str, float]:
    """Highest and lowest rate quoted against ``base``."""
    return provider.get_highest_and_lowest_rates(_code_or_400(base))


@router.get("/countries")
def get_countries(provider: RateProviderDep) -> dict[str, str]:
    return provider.fetch_country_currency_map()


@router.get("/countries/{code}")
def get_country_for_currency(code: str, provider: RateProviderDep) -> dict[str, str]:
    currency = _code_or_400(code)
    return {"code": currency, "country": provider.get_country_for_currency(currency)}
