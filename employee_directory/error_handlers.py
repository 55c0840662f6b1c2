"""Map domain exceptions to JSON error responses."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status

from employee_directory.exceptions import (
    InvalidCurrencyError,
    ResourceNotFoundError,
    UsernameExistsError,
)


logger = logging.getLogger(__name__)


def _error_body(request: Request, exc: Exception) -> dict[str, str]:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "message": str(exc),
        "details": f"uri={request.url.path}",
    }


def resource_not_found_handler(request: Request, exc: ResourceNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_error_body(request, exc))


def username_exists_handler(request: Request, exc: UsernameExistsError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content=_error_body(request, exc))


def invalid_currency_handler(request: Request, exc: InvalidCurrencyError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body(request, exc),
    )


def server_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(request, exc),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ResourceNotFoundError, resource_not_found_handler)
    app.add_exception_handler(UsernameExistsError, username_exists_handler)
    app.add_exception_handler(InvalidCurrencyError, invalid_currency_handler)
    app.add_exception_handler(Exception, server_error_handler)
