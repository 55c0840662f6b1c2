"""Rate alert registration and dispatch API endpoints."""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from employee_directory.container import (
    get_cache_invalidator,
    get_dispatcher,
    get_rate_provider,
)
from employee_directory.database import get_db
from employee_directory.models.schemas import (
    DispatchSummaryResponse,
    RegistrationCreate,
    RegistrationResponse,
)
from employee_directory.services.alert_dispatcher import AlertDispatcher
from employee_directory.services.cache_invalidator import CacheInvalidator
from employee_directory.services.rate_provider import RateProvider
from employee_directory.services.registration_service import RegistrationService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/alerts", tags=["alerts"])


def get_registration_service(
    db: Annotated[Session, Depends(get_db)],
    rate_provider: Annotated[RateProvider, Depends(get_rate_provider)],
) -> RegistrationService:
    return RegistrationService(db, rate_provider)


RegistrationServiceDep = Annotated[RegistrationService, Depends(get_registration_service)]


@router.post("/registrations", response_model=RegistrationResponse, status_code=201)
def register_for_alerts(payload: RegistrationCreate, service: RegistrationServiceDep):
    """
    Register an employee for daily currency rate alerts.

    Every target code must exist in the currency/country map.

    Raises:
        ResourceNotFoundError: 404 if the employee does not exist
        InvalidCurrencyError: 422 for unknown target codes
    """
    return service.register(payload)


@router.get("/registrations", response_model=list[RegistrationResponse])
def list_registrations(service: RegistrationServiceDep, employee_id: int | None = None):
    return service.list_registrations(employee_id)


@router.delete("/registrations/{registration_id}")
def unregister(registration_id: int, service: RegistrationServiceDep) -> dict[str, str]:
    service.unregister(registration_id)
    return {"status": "success", "message": "Registration removed"}


@router.post("/dispatch", response_model=DispatchSummaryResponse)
def trigger_dispatch(dispatcher: Annotated[AlertDispatcher, Depends(get_dispatcher)]):
    """Run one dispatch cycle now and report what was sent."""
    summary = dispatcher.run_dispatch_cycle()
    logger.info("Manual dispatch requested -> %s", summary.as_dict())
    return summary.as_dict()


@router.post("/cache/evict")
def evict_caches(
    invalidator: Annotated[CacheInvalidator, Depends(get_cache_invalidator)],
) -> dict[str, str]:
    invalidator.evict_all()
    return {"status": "success", "message": "Caches cleared"}
