"""Logging setup for the API and the scheduler process."""
from __future__ import annotations

import logging
from logging.config import dictConfig
from pathlib import Path

from pydantic import ValidationError

from employee_directory.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s"
ALERTS_LOG_FILE = "rate_alerts.log"

# Modules whose records also go to the rate alert log.
ALERT_PIPELINE_LOGGERS = (
    "employee_directory.services.alert_dispatcher",
    "employee_directory.services.rate_provider",
    "employee_directory.services.circuit_breaker",
    "employee_directory.services.notification_service",
    "employee_directory.services.cache_invalidator",
)

# Chatty dependencies held at WARNING regardless of the app level.
QUIET_LOGGERS = ("urllib3", "apscheduler.executors.default", "sqlalchemy.engine")

_configured = False


def build_logging_config(log_dir: Path, level: str, services_level: str) -> dict:
    """
    Console and app.log for everything, plus rate_alerts.log for the alert pipeline.

    ``services_level`` applies to ``employee_directory.services`` so the
    dispatch cycle can be traced at DEBUG without raising the root level.
    """
    loggers: dict[str, dict] = {name: {"level": "WARNING"} for name in QUIET_LOGGERS}
    loggers["employee_directory.services"] = {"level": services_level}
    for name in ALERT_PIPELINE_LOGGERS:
        loggers[name] = {"handlers": ["alerts_file"]}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"standard": {"format": LOG_FORMAT}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
            },
            "app_file": {
                "class": "logging.FileHandler",
                "filename": str(log_dir / "app.log"),
                "encoding": "utf-8",
                "formatter": "standard",
            },
            "alerts_file": {
                "class": "logging.FileHandler",
                "filename": str(log_dir / ALERTS_LOG_FILE),
                "encoding": "utf-8",
                "formatter": "standard",
            },
        },
        "loggers": loggers,
        "root": {"level": level, "handlers": ["console", "app_file"]},
    }


def configure_logging() -> None:
    """Configure application logging once per process."""

    global _configured
    if _configured:
        return

    try:
        settings = get_settings()
        log_dir, level = settings.log_dir, settings.log_level
        services_level = settings.services_log_level or level
    except ValidationError:
        # A broken environment should still leave a trace on disk.
        log_dir, level, services_level = Path("logs"), "INFO", "INFO"
    log_dir.mkdir(parents=True, exist_ok=True)

    dictConfig(build_logging_config(log_dir, level, services_level))
    logging.getLogger(__name__).debug(
        "Logging configured (root=%s, services=%s, dir=%s)", level, services_level, log_dir
    )
    _configured = True
