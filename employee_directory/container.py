"""Explicit wiring of the rate alert components, built once per process."""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from employee_directory.config import Settings, get_settings
from employee_directory.database import SessionLocal
from employee_directory.services.alert_dispatcher import AlertDispatcher
from employee_directory.services.cache import CacheManager
from employee_directory.services.cache_invalidator import CacheInvalidator
from employee_directory.services.circuit_breaker import CircuitBreaker
from employee_directory.services.notification_service import NotificationService
from employee_directory.services.rate_provider import RateProvider
from employee_directory.services.registration_service import SqlRegistrationStore


@dataclass(frozen=True)
class Container:
    cache_manager: CacheManager
    rate_provider: RateProvider
    notifier: NotificationService
    registration_store: SqlRegistrationStore
    dispatcher: AlertDispatcher
    cache_invalidator: CacheInvalidator


def build_container(settings: Settings) -> Container:
    cache_manager = CacheManager()

    def _breaker(name: str) -> CircuitBreaker:
        return CircuitBreaker(
            name,
            failure_threshold=settings.circuit_failure_threshold,
            reset_timeout=settings.circuit_reset_timeout_seconds,
        )

    rate_provider = RateProvider(
        settings.rate_api_url,
        settings.countries_api_url,
        cache_manager,
        timeout=settings.http_timeout_seconds,
        rates_breaker=_breaker("currency-rates"),
        countries_breaker=_breaker("countries"),
    )
    notifier = NotificationService(
        settings.mail_sender,
        settings.smtp_host,
        settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
        timeout=settings.smtp_timeout_seconds,
    )
    registration_store = SqlRegistrationStore(SessionLocal)
    dispatcher = AlertDispatcher(
        registration_store,
        rate_provider,
        notifier,
        subject_prefix=settings.mail_subject_prefix,
        max_workers=settings.dispatch_max_workers,
    )
    cache_invalidator = CacheInvalidator(cache_manager)

    return Container(
        cache_manager=cache_manager,
        rate_provider=rate_provider,
        notifier=notifier,
        registration_store=registration_store,
        dispatcher=dispatcher,
        cache_invalidator=cache_invalidator,
    )


@lru_cache()
def get_container() -> Container:
    """Process-wide container shared by the API and the scheduler."""
    return build_container(get_settings())


# FastAPI dependencies
def get_rate_provider() -> RateProvider:
    return get_container().rate_provider


def get_dispatcher() -> AlertDispatcher:
    return get_container().dispatcher


def get_cache_invalidator() -> CacheInvalidator:
    return get_container().cache_invalidator
