"""FastAPI application entry point."""
import uvicorn
from fastapi import FastAPI

from employee_directory.config import get_settings
from employee_directory.error_handlers import register_exception_handlers
from employee_directory.logging_config import configure_logging
from employee_directory.routers import alerts, currency, employees, health


app = FastAPI(title="Employee Directory API")
register_exception_handlers(app)


@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Simple health probe for liveness checks."""
    return {"status": "ok"}


# Include routers
app.include_router(health.router)
app.include_router(employees.router)
app.include_router(currency.router)
app.include_router(alerts.router)


def run() -> None:
    """Serve the API on the configured host and port."""
    settings = get_settings()
    configure_logging()
    uvicorn.run(app, host=settings.app_host, port=settings.app_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
