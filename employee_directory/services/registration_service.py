"""Rate alert registrations: storage access and validation."""
from __future__ import annotations

import logging
from typing import Callable

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from employee_directory.exceptions import InvalidCurrencyError, ResourceNotFoundError
from employee_directory.models.alerts import EmployeeContact, Registration
from employee_directory.models.database_models import Employee, RateAlertRegistration
from employee_directory.models.schemas import RegistrationCreate
from employee_directory.services.rate_provider import RateProvider


logger = logging.getLogger(__name__)

InvalidRowHandler = Callable[[int, str], None]


def to_registration(row: RateAlertRegistration) -> Registration:
    """Detach an ORM row into the value object used by the dispatcher."""
    return Registration(
        id=row.id,
        base=row.base,
        target=frozenset(row.target),
        employee=EmployeeContact(id=row.employee.id, email=row.employee.email, name=row.employee.name),
    )


class SqlRegistrationStore:
    """Read-only bulk listing of registrations for the dispatch cycle."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def list_all(self, on_invalid: InvalidRowHandler | None = None) -> list[Registration]:
        """
        Load every registration with its employee contact.

        A row that fails validation is skipped and reported through
        ``on_invalid(row_id, reason)``; the remaining rows are still returned.
        Errors reading the table itself propagate.
        """
        db = self._session_factory()
        registrations: list[Registration] = []
        try:
            rows = db.scalars(
                select(RateAlertRegistration)
                .options(joinedload(RateAlertRegistration.employee))
                .order_by(RateAlertRegistration.id)
            ).all()
            for row in rows:
                try:
                    registrations.append(to_registration(row))
                except (TypeError, ValueError) as err:
                    logger.warning("Skipping invalid registration id=%s: %s", row.id, err)
                    if on_invalid is not None:
                        on_invalid(row.id, str(err))
        finally:
            db.close()
        logger.debug("Loaded %d rate alert registrations", len(registrations))
        return registrations


class RegistrationService:
    """Register and unregister employees for daily rate alerts."""

    def __init__(self, db: Session, rate_provider: RateProvider) -> None:
        self.db = db
        self.rate_provider = rate_provider

    def register(self, payload: RegistrationCreate) -> RateAlertRegistration:
        employee = self.db.get(Employee, payload.employee_id)
        if employee is None:
            raise ResourceNotFoundError(f"Employee ID {payload.employee_id} not found")

        unknown = self.rate_provider.unknown_currencies(payload.target)
        if unknown:
            raise InvalidCurrencyError(f"Unknown target currency codes: {', '.join(unknown)}")
        if payload.base in payload.target:
            raise InvalidCurrencyError(f"Base currency {payload.base} cannot also be a target")

        row = RateAlertRegistration(
            base=payload.base,
            target=sorted(payload.target),
            employee_id=employee.id,
        )
        self.db.add(row)
        self.db.flush()
        self.db.refresh(row)
        logger.info(
            "Registered employee id=%s for %s -> %s",
            employee.id,
            row.base,
            ",".join(row.target),
        )
        return row

    def list_registrations(self, employee_id: int | None = None) -> list[RateAlertRegistration]:
        query = select(RateAlertRegistration).order_by(RateAlertRegistration.id)
        if employee_id is not None:
            query = query.where(RateAlertRegistration.employee_id == employee_id)
        return list(self.db.scalars(query))

    def unregister(self, registration_id: int) -> None:
        row = self.db.get(RateAlertRegistration, registration_id)
        if row is None:
            raise ResourceNotFoundError(f"Registration ID {registration_id} not found")
        self.db.delete(row)
        self.db.flush()
        logger.info("Removed registration id=%s", registration_id)
