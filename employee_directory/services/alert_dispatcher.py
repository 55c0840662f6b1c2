"""Scheduled currency rate alert dispatch."""
from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Iterable, Mapping, Protocol

from employee_directory.exceptions import NotificationError
from employee_directory.models.alerts import (
    DispatchSummary,
    NotificationContent,
    RateSnapshot,
    RecipientGroup,
    Registration,
)
from employee_directory.services.notification_service import RECIPIENT_DELIMITER
from employee_directory.services.registration_grouper import (
    group_registrations,
    iter_recipient_groups,
)


logger = logging.getLogger(__name__)

MAIL_TEMPLATE = "rate_alert_email.html"


class RegistrationSource(Protocol):
    def list_all(self, on_invalid: Callable[[int, str], None] | None = None) -> list[Registration]: ...


class RateSource(Protocol):
    def fetch_rates(self, base: str, targets: Iterable[str] | None = None) -> RateSnapshot: ...


class Notifier(Protocol):
    def send(
        self,
        to: str,
        subject: str,
        template_id: str,
        variables: Mapping[str, Any],
    ) -> None: ...


@dataclass
class _GroupOutcome:
    label: str
    fetched: bool = False
    sent: bool = False
    error: str | None = None


def _group_label(group: RecipientGroup) -> str:
    return f"{group.base}->{','.join(sorted(group.targets))}"


class AlertDispatcher:
    """
    Run one collect -> fetch -> notify pass over every alert registration.

    Each (base, target set) group is fetched and notified on its own worker.
    A failure inside one group is logged and counted; it never stops the
    others and is not retried within the cycle. Only one cycle runs at a
    time: a trigger that arrives while a cycle is in flight is skipped.
    """

    def __init__(
        self,
        store: RegistrationSource,
        rate_provider: RateSource,
        notifier: Notifier,
        *,
        subject_prefix: str = "<EMPLOYEE-DIRECTORY>",
        max_workers: int = 4,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self._rate_provider = rate_provider
        self._notifier = notifier
        self._subject_prefix = subject_prefix
        self._max_workers = max(1, max_workers)
        self._today = today
        self._run_lock = threading.Lock()

    def build_subject(self) -> str:
        return f"{self._subject_prefix} Currency Rate as of {self._today().isoformat()}"

    @staticmethod
    def build_content(group: RecipientGroup, snapshot: RateSnapshot) -> NotificationContent:
        rates = {code: rate for code, rate in snapshot.rates.items() if code in group.targets}
        return NotificationContent(
            base=group.base,
            rates=rates,
            recipients=group.recipients,
            rate_date=snapshot.date,
        )

    def run_dispatch_cycle(self) -> DispatchSummary:
        """Entry point for the alert timer. Never raises."""
        if not self._run_lock.acquire(blocking=False):
            logger.warning("Rate alert dispatch already running; skipping this trigger")
            return DispatchSummary(skipped=True)
        try:
            return self._run()
        finally:
            self._run_lock.release()

    def _run(self) -> DispatchSummary:
        start = time.monotonic()
        rejected: list[str] = []
        try:
            registrations = self._store.list_all(
                on_invalid=lambda row_id, reason: rejected.append(f"registration {row_id}: {reason}")
            )
        except Exception:
            logger.exception("Could not read rate alert registrations")
            return DispatchSummary(failures=["registration store unavailable"])

        groups = list(iter_recipient_groups(group_registrations(registrations)))
        summary = DispatchSummary(groups=len(groups), failures=rejected)
        if rejected:
            logger.warning("Skipped %d invalid rate alert registration(s)", len(rejected))
        if not groups:
            logger.info("No rate alert registrations; nothing to dispatch")
            return summary

        subject = self.build_subject()
        workers = min(self._max_workers, len(groups))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="rate-alert") as pool:
            futures = [pool.submit(self._process_group, group, subject) for group in groups]
            for future in as_completed(futures):
                outcome = future.result()
                if outcome.fetched:
                    summary.fetches += 1
                if outcome.sent:
                    summary.sent += 1
                else:
                    summary.failed += 1
                    summary.failures.append(f"{outcome.label}: {outcome.error}")

        logger.info(
            "Rate alert dispatch finished in %.2fs | registrations=%d | groups=%d | sent=%d | failed=%d",
            time.monotonic() - start,
            len(registrations),
            summary.groups,
            summary.sent,
            summary.failed,
        )
        return summary

    def _process_group(self, group: RecipientGroup, subject: str) -> _GroupOutcome:
        outcome = _GroupOutcome(label=_group_label(group))
        try:
            snapshot = self._rate_provider.fetch_rates(group.base, group.targets)
        except Exception as err:
            logger.exception("Rate fetch failed for group %s", outcome.label)
            outcome.error = f"fetch failed: {err}"
            return outcome
        outcome.fetched = True

        content = self.build_content(group, snapshot)
        try:
            self._notifier.send(
                RECIPIENT_DELIMITER.join(content.recipients),
                subject,
                MAIL_TEMPLATE,
                content.as_template_variables(),
            )
        except NotificationError as err:
            logger.error("Rate alert mail for group %s failed: %s", outcome.label, err)
            outcome.error = str(err)
            return outcome
        except Exception as err:
            logger.exception("Unexpected error notifying group %s", outcome.label)
            outcome.error = f"unexpected: {err}"
            return outcome

        outcome.sent = True
        logger.debug("Rate alert for %s sent to %d recipient(s)", outcome.label, len(content.recipients))
        return outcome
