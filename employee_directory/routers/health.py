"""Router exposing basic system endpoints."""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from employee_directory.container import get_rate_provider
from employee_directory.database import get_db
from employee_directory.models.database_models import Employee, RateAlertRegistration
from employee_directory.services.rate_provider import RateProvider


logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/status")
async def get_status() -> dict[str, str]:
    """Return a minimal status payload."""
    return {"status": "online"}


@router.get("/alerts-status")
def get_alerts_status(
    db: Annotated[Session, Depends(get_db)],
    provider: Annotated[RateProvider, Depends(get_rate_provider)],
) -> dict:
    """
    Summarise the alert pipeline state.

    Returns:
        dict: {
            "employees": int,
            "registrations": int,
            "rates_circuit": circuit breaker state,
            "countries_circuit": circuit breaker state
        }
    """
    try:
        employees = db.scalar(select(func.count()).select_from(Employee)) or 0
        registrations = db.scalar(select(func.count()).select_from(RateAlertRegistration)) or 0
    except Exception:
        logger.exception("Alerts status check failed")
        raise HTTPException(status_code=500, detail="Failed to check alerts status")

    return {
        "employees": employees,
        "registrations": registrations,
        "rates_circuit": provider.rates_circuit_state.value,
        "countries_circuit": provider.countries_circuit_state.value,
    }
