"""Plain value objects flowing through the rate alert dispatch pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable


def is_currency_code(code: object) -> bool:
    """Return True for three-letter uppercase codes such as ``"USD"``."""

    return isinstance(code, str) and len(code) == 3 and code.isalpha() and code.isupper()


@dataclass(frozen=True)
class EmployeeContact:
    """Detached view of an employee; the pipeline only reads ``email``."""

    id: int | None
    email: str
    name: str | None = None


@dataclass(frozen=True)
class Registration:
    """A single employee's alert registration for one base currency."""

    base: str
    target: frozenset[str]
    employee: EmployeeContact
    id: int | None = None

    def __post_init__(self) -> None:
        # Accept any iterable of codes but always store a frozenset.
        if not isinstance(self.target, frozenset):
            object.__setattr__(self, "target", frozenset(self.target))
        if not is_currency_code(self.base):
            raise ValueError(f"Invalid base currency code: {self.base!r}")
        if not self.target:
            raise ValueError("Registration target must contain at least one currency")
        invalid = sorted(str(code) for code in self.target if not is_currency_code(code))
        if invalid:
            raise ValueError(f"Invalid target currency codes: {', '.join(invalid)}")


@dataclass(frozen=True)
class RateSnapshot:
    """Point-in-time rates for ``base``; produced per fetch and never persisted."""

    base: str
    date: date
    rates: dict[str, float] = field(default_factory=dict)

    def narrowed(self, targets: Iterable[str]) -> "RateSnapshot":
        wanted = set(targets)
        return RateSnapshot(
            base=self.base,
            date=self.date,
            rates={code: rate for code, rate in self.rates.items() if code in wanted},
        )


@dataclass
class RecipientGroup:
    """Registrations sharing both base and exact target set."""

    base: str
    targets: frozenset[str]
    registrations: list[Registration] = field(default_factory=list)

    @property
    def recipients(self) -> list[str]:
        # No deduplication: a duplicated registration means a duplicated email.
        return [registration.employee.email for registration in self.registrations]


@dataclass(frozen=True)
class NotificationContent:
    base: str
    rates: dict[str, float]
    recipients: list[str]
    rate_date: date | None = None

    def as_template_variables(self) -> dict[str, object]:
        return {
            "base": self.base,
            "targets": dict(sorted(self.rates.items())),
            "rate_date": self.rate_date.isoformat() if self.rate_date else None,
        }


@dataclass
class DispatchSummary:
    """Outcome counters for one dispatch cycle."""

    groups: int = 0
    fetches: int = 0
    sent: int = 0
    failed: int = 0
    skipped: bool = False
    failures: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, object]:
        return {
            "groups": self.groups,
            "fetches": self.fetches,
            "sent": self.sent,
            "failed": self.failed,
            "skipped": self.skipped,
            "failures": list(self.failures),
        }
