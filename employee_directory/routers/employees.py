"""API endpoints for employee directory management."""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from employee_directory.database import get_db
from employee_directory.models.schemas import (
    EmployeeCreate,
    EmployeeResponse,
    EmployeeUpdate,
)
from employee_directory.services.employee_service import EmployeeService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["employees"])


def get_employee_service(db: Annotated[Session, Depends(get_db)]) -> EmployeeService:
    return EmployeeService(db)


EmployeeServiceDep = Annotated[EmployeeService, Depends(get_employee_service)]


@router.get("/employees", response_model=list[EmployeeResponse])
async def list_employees(service: EmployeeServiceDep):
    """Retrieve all the employees."""
    return service.list_employees()


@router.post("/employees", response_model=EmployeeResponse)
async def create_employee(payload: EmployeeCreate, service: EmployeeServiceDep):
    """
    Create an employee.

    Raises:
        UsernameExistsError: 403 when the username is already taken
    """
    return service.create_employee(payload)


@router.get("/employees/{employee_id}", response_model=EmployeeResponse)
async def get_employee(employee_id: int, service: EmployeeServiceDep):
    return service.get_employee(employee_id)


@router.delete("/employees/{employee_id}")
async def delete_employee(employee_id: int, service: EmployeeServiceDep) -> dict[str, str]:
    service.delete_employee(employee_id)
    return {"status": "success", "message": f"Employee {employee_id} deleted"}


@router.put("/employees/{employee_id}", response_model=EmployeeResponse)
async def update_employee(employee_id: int, payload: EmployeeUpdate, service: EmployeeServiceDep):
    """Update the supplied fields of an employee; omitted fields are left as they are."""
    return service.update_employee(employee_id, payload)


@router.get("/employeesByEmail/{email}", response_model=list[EmployeeResponse])
async def get_employees_by_email(email: str, service: EmployeeServiceDep):
    return service.find_by_email(email)


@router.get("/employeesByUsernameOrEmail", response_model=list[EmployeeResponse])
async def search_employees(
    service: EmployeeServiceDep,
    username: str | None = None,
    email: str | None = None,
):
    """
    Search employees by username or email.

    Args:
        username: Case-insensitive substring of the username
        email: Case-insensitive substring of the email

    Returns:
        Employees matching either criterion
    """
    results = service.search(username=username, email=email)
    logger.debug("Search username=%r email=%r -> %d result(s)", username, email, len(results))
    return results
