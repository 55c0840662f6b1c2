"""Employee directory CRUD and search."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from employee_directory.exceptions import ResourceNotFoundError, UsernameExistsError
from employee_directory.models.database_models import Employee
from employee_directory.models.schemas import EmployeeCreate, EmployeeUpdate


logger = logging.getLogger(__name__)


def matches_username_or_email(
    employee: Employee,
    username: str | None = None,
    email: str | None = None,
) -> bool:
    """
    Case-insensitive substring match on username OR email.

    Blank criteria are ignored; with no criteria at all nothing matches.
    """
    criteria = [
        (needle.strip().lower(), (value or "").lower())
        for needle, value in ((username, employee.username), (email, employee.email))
        if needle and needle.strip()
    ]
    return any(needle in value for needle, value in criteria)


class EmployeeService:
    """Directory operations on a single database session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list_employees(self) -> list[Employee]:
        return list(self.db.scalars(select(Employee).order_by(Employee.id)))

    def get_employee(self, employee_id: int) -> Employee:
        employee = self.db.get(Employee, employee_id)
        if employee is None:
            raise ResourceNotFoundError(f"Employee ID {employee_id} not found")
        return employee

    def username_available(self, username: str) -> bool:
        existing = self.db.scalar(select(Employee).where(Employee.username == username))
        if existing is not None:
            logger.debug("Username %s exists", username)
            return False
        return True

    def create_employee(self, payload: EmployeeCreate) -> Employee:
        if not self.username_available(payload.username):
            raise UsernameExistsError(f"Username {payload.username} is not available")
        employee = Employee(**payload.model_dump())
        self.db.add(employee)
        self.db.flush()
        self.db.refresh(employee)
        logger.info("Created employee id=%s username=%s", employee.id, employee.username)
        return employee

    def update_employee(self, employee_id: int, payload: EmployeeUpdate) -> Employee:
        employee = self.get_employee(employee_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        new_username = changes.get("username")
        if new_username and new_username != employee.username and not self.username_available(new_username):
            raise UsernameExistsError(f"Username {new_username} is not available")
        for field_name, value in changes.items():
            setattr(employee, field_name, value)
        self.db.flush()
        self.db.refresh(employee)
        logger.info("Updated employee id=%s fields=%s", employee.id, sorted(changes))
        return employee

    def delete_employee(self, employee_id: int) -> None:
        employee = self.get_employee(employee_id)
        self.db.delete(employee)
        self.db.flush()
        logger.info("Deleted employee id=%s", employee_id)

    def find_by_email(self, email: str) -> list[Employee]:
        employees = list(
            self.db.scalars(select(Employee).where(Employee.email == email).order_by(Employee.id))
        )
        if not employees:
            raise ResourceNotFoundError(f"Email {email} not found")
        return employees

    def search(self, username: str | None = None, email: str | None = None) -> list[Employee]:
        return [
            employee
            for employee in self.list_employees()
            if matches_username_or_email(employee, username=username, email=email)
        ]
