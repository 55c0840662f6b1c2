"""Application configuration management."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralised application settings derived from environment variables."""

    database_url: str = Field(
        default="sqlite:///./data/employee_directory.db",
        description="SQLAlchemy-compatible database URL.",
    )
    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=8000, ge=1, le=65535)

    debug: bool = Field(default=False)

    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("logs"))
    services_log_level: str | None = Field(
        default=None,
        description="Level for employee_directory.services loggers; defaults to LOG_LEVEL.",
    )

    # Upstream rate services
    rate_api_url: str = Field(
        default="https://api.exchangeratesapi.io/latest",
        description="Latest-rates endpoint; called with ?base=<code>.",
    )
    countries_api_url: str = Field(
        default="https://openexchangerates.org/api/currencies.json",
        description="Endpoint returning a currency code -> name mapping.",
    )
    http_timeout_seconds: float = Field(default=5.0, gt=0)
    circuit_failure_threshold: int = Field(default=5, ge=1)
    circuit_reset_timeout_seconds: float = Field(default=30.0, gt=0)

    # Scheduling
    dispatch_cron: str = Field(
        default="0 8 * * *",
        description="Crontab expression for the rate alert dispatch job.",
    )
    cache_evict_seconds: int = Field(default=3600, ge=1)
    dispatch_max_workers: int = Field(default=4, ge=1, le=32)
    scheduler_lock_file: Path = Field(default=Path(".scheduler.lock"))

    # Outgoing mail
    mail_sender: str = Field(default="alerts@employee-directory.local")
    mail_subject_prefix: str = Field(default="<EMPLOYEE-DIRECTORY>")
    smtp_host: str = Field(default="localhost")
    smtp_port: int = Field(default=25, ge=1, le=65535)
    smtp_username: str | None = Field(default=None)
    smtp_password: str | None = Field(default=None)
    smtp_use_tls: bool = Field(default=False)
    smtp_timeout_seconds: float = Field(default=10.0, gt=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level", "services_log_level")
    @classmethod
    def normalize_log_level(cls, value: str | None) -> str | None:
        if value is None:
            return None
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        upper = value.upper()
        if upper not in valid:
            raise ValueError(f"Log level must be one of {', '.join(sorted(valid))}")
        return upper

    @field_validator("dispatch_cron")
    @classmethod
    def validate_dispatch_cron(cls, value: str) -> str:
        """Require the standard five crontab fields (minute hour day month weekday)."""

        fields = value.split()
        if len(fields) != 5:
            raise ValueError(
                f"DISPATCH_CRON must have 5 fields, got {len(fields)}: {value!r}"
            )
        return " ".join(fields)


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance so it can be reused across the app."""

    settings = Settings()
    settings.log_dir.mkdir(parents=True, exist_ok=True)
    return settings
