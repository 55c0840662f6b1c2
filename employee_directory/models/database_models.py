"""SQLAlchemy ORM models for employees and their rate alert registrations."""
from datetime import datetime
from sqlalchemy import Integer, DateTime, String, ForeignKey, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from employee_directory.database import Base


class Employee(Base):
    """Directory entry for a single employee."""

    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(254), nullable=False, index=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    registrations: Mapped[list["RateAlertRegistration"]] = relationship(
        back_populates="employee",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class RateAlertRegistration(Base):
    """An employee's interest in daily rates for a base currency."""

    __tablename__ = "rate_alert_registrations"
    __table_args__ = (
        Index("ix_rate_alert_registrations_base", "base"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    base: Mapped[str] = mapped_column(String(3), nullable=False)
    target: Mapped[list[str]] = mapped_column(JSON, nullable=False)  # Sorted currency codes
    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    employee: Mapped[Employee] = relationship(back_populates="registrations")
