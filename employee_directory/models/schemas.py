"""Pydantic models describing API payloads."""
from datetime import date, datetime
from pydantic import BaseModel, EmailStr, Field, PositiveFloat, field_validator


def _normalise_code(value: str) -> str:
    code = value.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValueError(f"'{value}' is not a three-letter currency code")
    return code


# Upstream payloads
class ExchangeRatePayload(BaseModel):
    """Body returned by the latest-rates endpoint."""

    base: str
    date: date
    rates: dict[str, PositiveFloat]


# Employee Schemas
class EmployeeBase(BaseModel):
    """Base schema for employees."""

    name: str = Field(min_length=1, max_length=100)
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    age: int | None = Field(None, ge=18, le=100)


class EmployeeCreate(EmployeeBase):
    """Schema for creating a new employee."""


class EmployeeUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    name: str | None = Field(None, min_length=1, max_length=100)
    username: str | None = Field(None, min_length=3, max_length=50)
    email: EmailStr | None = None
    age: int | None = Field(None, ge=18, le=100)


class EmployeeResponse(EmployeeBase):
    """Schema for employee API response."""

    id: int
    email: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# Rate alert registration schemas
class RegistrationCreate(BaseModel):
    """Schema for registering an employee for daily rate alerts."""

    employee_id: int
    base: str
    target: set[str] = Field(min_length=1)

    @field_validator("base")
    @classmethod
    def normalise_base(cls, value: str) -> str:
        return _normalise_code(value)

    @field_validator("target")
    @classmethod
    def normalise_target(cls, value: set[str]) -> set[str]:
        return {_normalise_code(code) for code in value}


class RegistrationResponse(BaseModel):
    """Schema for a stored rate alert registration."""

    id: int
    employee_id: int
    base: str
    target: list[str]
    created_at: datetime

    class Config:
        from_attributes = True


# Currency schemas
class RateSnapshotResponse(BaseModel):
    """Schema for the latest rates of a base currency."""

    base: str
    date: date
    rates: dict[str, float]


class DispatchSummaryResponse(BaseModel):
    """Schema for a manually triggered dispatch cycle."""

    groups: int
    fetches: int
    sent: int
    failed: int
    skipped: bool
    failures: list[str] = []
