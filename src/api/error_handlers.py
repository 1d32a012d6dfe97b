"""
Error handlers - Global exception handlers for the registry API.

- RegistryError -> {"error": {...payload}} with a per-kind status code
- RequestValidationError -> field-level error details
- Exception (catch-all) -> never leaks internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.domain.exceptions import (
    AlreadyInstantiated,
    Conflict,
    InvalidFee,
    NotAValidator,
    NotFound,
    NotInstantiated,
    RegistryError,
    Unauthorized,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[RegistryError], int] = {
    InvalidFee: status.HTTP_402_PAYMENT_REQUIRED,
    ValidationError: 422,
    Unauthorized: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    NotAValidator: status.HTTP_404_NOT_FOUND,
    NotInstantiated: status.HTTP_409_CONFLICT,
    AlreadyInstantiated: status.HTTP_409_CONFLICT,
    Conflict: status.HTTP_409_CONFLICT,
}


def status_for(exc: RegistryError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_400_BAD_REQUEST


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_registry_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_registry_error_handler(app: FastAPI) -> None:
    @app.exception_handler(RegistryError)
    async def registry_error_handler(request: Request, exc: RegistryError):
        """Surface registry errors verbatim with their structured payload."""
        logger.info(
            "RegistryError on %s: %s", request.url.path, exc.code,
        )
        return JSONResponse(status_code=status_for(exc), content={"error": exc.to_dict()})


def _register_validation_error_handler(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors."""
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=422,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all - never leaks internal details."""
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "internal_error",
                    "message": "An unexpected error occurred",
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "reason": e["msg"],
        }
        for e in exc.errors()
    ]
    return {
        "error": {
            "code": "validation_error",
            "message": "Invalid request data",
            "errors": details,
        },
    }
