"""Error Handlers: global exception handlers for the HRMS API.

Invariants:
    - HrmsError -> structured JSON with error code, localized message, severity
    - RequestValidationError -> 400 VALIDATION_ERROR with field-level details
    - Exception (catch-all) -> never leaks internal details

Design Decisions:
    - Three-layer handler: domain (HrmsError), validation (Pydantic), catch-all (Exception)
    - Message language follows Accept-Language, falling back to settings.default_locale
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from hrms.config import get_settings
from hrms.core.domain_types import Locale
from hrms.core.errors import ErrorSeverity, HrmsError
from hrms.core.language_strings import localize, resolve_locale

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_hrms_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def request_locale(request: Request) -> Locale:
    return resolve_locale(
        request.headers.get("accept-language"), get_settings().default_locale,
    )


def _register_hrms_error_handler(app: FastAPI) -> None:
    """Register HRMS domain/infrastructure error handler."""

    @app.exception_handler(HrmsError)
    async def hrms_error_handler(request: Request, exc: HrmsError):
        """Handle all HRMS domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"HrmsError: {exc.message}",
            extra={
                "error_code": exc.code, "path": request.url.path,
                "tenant_id": exc.context.tenant_id, "user_id": exc.context.user_id,
            },
        )
        message = localize(exc.code, request_locale(request), exc.message, **exc.params)
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(message),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc, request_locale(request)),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": localize(
                        "INTERNAL_ERROR", request_locale(request),
                        "An unexpected error occurred",
                    ),
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError, locale: Locale) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": localize("REQUEST_VALIDATION_ERROR", locale, "Invalid request data"),
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
